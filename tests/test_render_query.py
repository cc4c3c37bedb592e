"""Tests for the query renderer: bindings, HDC filtering, meta operators, modal fallback."""

import pytest

from conftest import kb_fact
from render import QueryTranslator
from render.query import extract_query_line, hdc_threshold

QUERY = "@goal:goal isA ?x Dog"


def direct_proof(op, *args):
    fact = " ".join((op, *args))
    return {"valid": True, "goal": f"@goal:goal {fact}", "steps": [{"operation": "direct_match", "fact": fact}]}


class TestBindings:

    def test_steps_rendered_as_sentences(self, make_session, render):
        result = {"bindings": {"x": {"answer": "Rex", "steps": ["isA Rex Dog"]}}}
        assert render(make_session(), "query", result, QUERY) == "Rex is a dog. Proof: Rex is a dog."

    def test_thin_trace_upgraded_from_prove(self, make_session, render):
        session = make_session(proofs={"isA Rex Dog": direct_proof("isA", "Rex", "Dog")})
        result = {"bindings": {"x": {"answer": "Rex", "steps": ["isA Rex Dog"]}}}
        assert render(session, "query", result, QUERY) == "Rex is a dog. Proof: Fact in KB: Rex is a dog."

    def test_no_bindings(self, make_session, render):
        assert render(make_session(), "query", {"bindings": {}}, QUERY) == "No results"
        assert render(make_session(), "query", None, QUERY) == "No results"

    def test_unknown_action_falls_back_to_query(self, make_session, render):
        result = {"bindings": {"x": {"answer": "Rex", "steps": ["isA Rex Dog"]}}}
        assert render(make_session(), "bogus", result, QUERY) == "Rex is a dog. Proof: Rex is a dog."


class TestHdcMatches:
    """HDC results join reliable ones only above the strategy threshold and with a proof."""

    @pytest.fixture
    def session(self, make_session):
        return make_session(proofs={
            "isA Rex Dog": direct_proof("isA", "Rex", "Dog"),
            "isA Max Dog": direct_proof("isA", "Max", "Dog"),
        })

    @staticmethod
    def result(hdc_score):
        return {
            "bindings": {"x": "Rex"},
            "allResults": [
                {"method": "direct", "score": 1.0, "bindings": {"x": "Rex"}},
                {"method": "hdc_similarity", "score": hdc_score, "bindings": {"x": "Max"}},
            ],
        }

    def test_high_score_included(self, session, render):
        assert render(session, "query", self.result(0.9), QUERY) == (
            "Rex is a dog. Proof: Fact in KB: Rex is a dog. "
            "Max is a dog. Proof: Fact in KB: Max is a dog."
        )

    def test_low_score_excluded(self, session, render):
        assert render(session, "query", self.result(0.2), QUERY) == "Rex is a dog. Proof: Fact in KB: Rex is a dog."

    def test_sparse_strategy_threshold(self, make_session, render):
        session = make_session(
            hdcStrategy="sparse-polynomial",
            proofs={
                "isA Rex Dog": direct_proof("isA", "Rex", "Dog"),
                "isA Max Dog": direct_proof("isA", "Max", "Dog"),
            },
        )
        assert "Max is a dog" in render(session, "query", self.result(0.05), QUERY)

    def test_unprovable_hdc_answer_dropped(self, make_session, render):
        session = make_session(proofs={"isA Rex Dog": direct_proof("isA", "Rex", "Dog")})
        assert render(session, "query", self.result(0.9), QUERY) == "Rex is a dog. Proof: Fact in KB: Rex is a dog."

    def test_thresholds(self):
        assert hdc_threshold("dense-binary") == 0.5
        assert hdc_threshold("sparse-polynomial") == 0.02
        assert hdc_threshold("unknown") == 0.5


class TestForbiddenAnswers:

    @pytest.mark.parametrize("answer", ["", "@base0", "__internal", "Pos3", "And", "x__HOLE_1"])
    def test_internal_symbols(self, make_session, answer):
        assert QueryTranslator(make_session()).is_forbidden_answer(answer)

    def test_declared_relation_name(self, make_session):
        session = make_session(kbFacts=[kb_fact("isA", "likes", "__Relation")])
        assert QueryTranslator(session).is_forbidden_answer("likes")

    def test_plain_entity_allowed(self, make_session):
        assert not QueryTranslator(make_session()).is_forbidden_answer("Rex")


class TestModalCapability:

    def test_derived_from_has_and_is_a(self, make_session, render):
        session = make_session(kbFacts=["has Tweety Wing", "isA Wing Fly"])
        result = {"bindings": {"x": "__HOLE"}}
        assert render(session, "query", result, "@goal:goal can ?x Fly") == "Tweety can Fly."

    def test_no_holder_reaches_target(self, make_session, render):
        session = make_session(kbFacts=["has Tweety Wing"])
        result = {"bindings": {"x": "__HOLE"}}
        assert render(session, "query", result, "@goal:goal can ?x Fly") == "No results"


class TestMetaResults:

    def test_similar(self, make_session, render):
        result = {
            "allResults": [{
                "method": "similar",
                "proof": {"entity": "Rex", "target": "Max", "sharedProperties": [{"value": "fur"}, "tail"]},
            }],
        }
        assert render(make_session(), "query", result) == "Rex is similar to Max. Proof: shared fur and tail"

    def test_difference(self, make_session, render):
        result = {
            "allResults": [{
                "method": "difference",
                "proof": {"entityA": "Rex", "entityB": "Tom", "uniqueToA": ["bark"], "uniqueToB": []},
            }],
        }
        assert render(make_session(), "query", result) == "Rex differs from Tom. Proof: Rex has bark."


class TestQueryLine:

    def test_first_line_with_hole(self):
        assert extract_query_line("// action:query\n@goal:goal at Alice ?x\n") == "@goal:goal at Alice ?x"

    def test_last_line_without_hole(self):
        assert extract_query_line("// note\nisA Rex Dog") == "isA Rex Dog"
        assert extract_query_line("") == ""
