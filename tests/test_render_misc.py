"""Tests for learn / listSolutions / elaborate / solve rendering, text generation and input validation."""

import pytest

from render import ReasoningResult, RenderInputError, StaticSession, TextGenerator, format_result
from render.ast import expr_from_dict, part_from_dict
from render.result_formatter import format_list
from render.text_generator import third_person

SEATING = {
    "type": "solve",
    "success": True,
    "solutionCount": 1,
    "description": "seating arrangements",
    "solutions": [{
        "index": 1,
        "facts": ["seatedAt Alice T1", "seatedAt Bob T2"],
        "proof": [{"constraint": "noConflict", "reason": "Alice and Bob sit apart", "satisfied": True}],
    }],
}


class TestSolve:

    def test_success(self, make_session, render):
        assert render(make_session(), "query", {"solveResult": SEATING}) == (
            "Found 1 seating arrangements: 1. Alice is seated at T1, Bob is seated at T2. "
            "Proof: noConflict satisfied: Alice and Bob sit apart"
        )

    def test_failure_lists_constraints(self, make_session, render):
        solve = {
            "type": "solve",
            "success": False,
            "error": "No valid seating found.",
            "constraints": [{"relation": "conflictsWith", "entities": ["Alice", "Bob"]}],
        }
        assert render(make_session(), "query", {"solveResult": solve}) == (
            "No valid seating found. Proof: Constraints conflictsWith(Alice, Bob) "
            "cannot all be satisfied with available assignments."
        )

    def test_learn_reports_solve(self, make_session, render):
        text = render(make_session(), "learn", {"success": True, "solveResult": SEATING})
        assert text.startswith("Found 1 seating arrangements")


class TestLearn:

    def test_fact_count(self, make_session, render):
        assert render(make_session(), "learn", {"success": True, "facts": 3}) == "Learned 3 facts"

    def test_first_warning_wins(self, make_session, render):
        result = {"success": True, "facts": 1, "warnings": ["Contradiction detected", "other"]}
        assert render(make_session(), "learn", result) == "Contradiction detected"

    def test_failure(self, make_session, render):
        assert render(make_session(), "learn", {"success": False}) == "Failed"
        assert render(make_session(), "learn", None) == "Failed"


class TestListSolutions:

    def test_solutions(self, make_session, render):
        result = {
            "success": True,
            "solutionCount": 2,
            "solutions": [["seatedAt Alice T1"], ["seatedAt Alice T2"]],
        }
        assert render(make_session(), "listSolutions", result) == (
            "Found 2 solutions. Solution 1: Alice is seated at T1. Solution 2: Alice is seated at T2."
        )

    def test_none_found(self, make_session, render):
        assert render(make_session(), "listSolutions", {"success": True, "solutionCount": 0}) == (
            "No valid solutions found."
        )


class TestElaborate:

    def test_valid(self, make_session, render):
        result = {"valid": True, "goal": "isA Rex Dog", "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}]}
        assert render(make_session(), "elaborate", result) == "True: Rex is a dog"

    def test_invalid(self, make_session, render):
        assert render(make_session(), "elaborate", {"valid": False, "goal": "isA Rex Dog"}) == (
            "Cannot prove: Rex is a dog"
        )

    def test_full_proof(self):
        proof = ReasoningResult.from_dict({
            "valid": True,
            "goal": "isA Rex Dog",
            "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}],
        })
        elaboration = TextGenerator().elaborate(proof)
        assert elaboration.proof_chain == ["Rex is a dog"]
        assert elaboration.full_proof == "True: Rex is a dog. Proof: Rex is a dog."


class TestTextGenerator:

    def test_templates(self):
        gen = TextGenerator()
        assert gen.generate("isA", ["Rex", "Dog"]) == "Rex is a dog."
        assert gen.generate("isA", ["Rex", "Animal"]) == "Rex is an animal."
        assert gen.generate("give", ["Alice", "Bob", "Book"]) == "Alice gave Bob a book."

    def test_too_few_arguments(self):
        assert TextGenerator().generate("give", ["a", "b"]) == "give(a, b)"

    def test_generic_forms(self):
        gen = TextGenerator()
        assert gen.generate("watch", ["Anne", "Bob"]) == "Anne watches Bob."
        assert gen.generate("sleeping", ["Anne", "Bed"]) == "Anne is at Bed."
        assert gen.generate("tall", ["Anne"]) == "Anne is tall."
        assert gen.generate("rel", ["a", "b", "c"]) == "rel(a, b, c)."

    @pytest.mark.parametrize("verb,expected", [
        ("eat", "eats"),
        ("watch", "watches"),
        ("carry", "carries"),
        ("play", "plays"),
        ("can", "can"),
        ("livesIn", "livesIn"),
    ])
    def test_third_person(self, verb, expected):
        assert third_person(verb) == expected


class TestResultFormatter:

    def test_format_list(self):
        assert format_list([]) == ""
        assert format_list(["A"]) == "A"
        assert format_list(["A", "B"]) == "A and B"
        assert format_list(["A", "B", "C"]) == "A, B, and C"

    def test_bindings(self):
        assert format_result(ReasoningResult.from_dict({"bindings": {"?x": "Rex"}})) == "x = Rex"

    def test_prove_kind(self):
        result = ReasoningResult.from_dict({
            "valid": True,
            "goal": "isA Rex Dog",
            "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}],
        })
        assert format_result(result, "prove") == "True: Rex is a dog. Proof: Rex is a dog."

    def test_empty(self):
        assert format_result(None) == "No result"
        assert format_result(ReasoningResult()) == "No results"


class TestInputValidation:
    """Malformed engine payloads raise RenderInputError."""

    def test_session_must_be_object(self):
        with pytest.raises(RenderInputError):
            StaticSession.from_dict([])

    def test_fact_without_operator(self):
        with pytest.raises(RenderInputError):
            StaticSession.from_dict({"kbFacts": [{"metadata": {}}]})

    def test_steps_must_be_list(self):
        with pytest.raises(RenderInputError):
            ReasoningResult.from_dict({"steps": "oops"})

    def test_unknown_ast_node(self):
        with pytest.raises(RenderInputError):
            expr_from_dict({"type": "Weird"})

    def test_unknown_rule_part(self):
        with pytest.raises(RenderInputError):
            part_from_dict({"type": "Xor", "parts": []})

    def test_session_file_not_json(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(RenderInputError):
            StaticSession.from_file(path)

    def test_session_proof_keys_drop_refs(self):
        session = StaticSession.from_dict({"proofs": {"@goal:goal isA Rex Dog": {"valid": True}}})
        assert session.prove("@goal:goal isA Rex Dog").valid
        assert session.prove("isA Rex Cat") is None
