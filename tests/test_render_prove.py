"""Tests for the prove renderer: positive, negative and unprovable goals."""

from conftest import kb_fact, statement

RULE_BIRD_FLY = {
    "id": "r1",
    "conditionAST": statement("isA", "?x", "Bird"),
    "conclusionAST": statement("can", "?x", "Fly"),
}


class TestPositiveProofs:

    def test_direct_fact(self, make_session, render):
        session = make_session(kbFacts=[kb_fact("isA", "Rex", "Dog")])
        result = {
            "valid": True,
            "goal": "@goal:goal isA Rex Dog",
            "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}],
        }
        assert render(session, "prove", result) == "True: Rex is a dog. Proof: Fact in KB: Rex is a dog."

    def test_confidence_suffix(self, make_session, render):
        session = make_session(kbFacts=[kb_fact("isA", "Rex", "Dog")])
        result = {
            "valid": True,
            "goal": "isA Rex Dog",
            "confidence": 0.9,
            "steps": [{"operation": "direct_match", "fact": "isA Rex Dog"}],
        }
        assert render(session, "prove", result) == (
            "True: Rex is a dog. Proof: Fact in KB: Rex is a dog. (confidence=0.90)"
        )

    def test_rule_application(self, make_session, render):
        session = make_session(kbFacts=[kb_fact("isA", "Tweety", "Bird")], rules=[RULE_BIRD_FLY])
        result = {
            "valid": True,
            "goal": "can Tweety Fly",
            "steps": [
                {"operation": "rule_applied", "ruleId": "r1", "bindings": {"x": "Tweety"}},
                {"operation": "direct_match", "fact": "isA Tweety Bird"},
            ],
        }
        assert render(session, "prove", result) == (
            "True: Tweety can Fly. Proof: Tweety is a bird. "
            "Applied rule: IF (Tweety is a bird) THEN (Tweety can Fly). Therefore Tweety can Fly."
        )

    def test_explicit_negation_shortcut(self, make_session, render):
        result = {"valid": True, "goal": "Not (isA Rex Cat)", "method": "explicit_negation"}
        assert render(make_session(), "prove", result) == (
            "True: NOT (Rex is a cat). Proof: Found explicit negation: NOT (Rex is a cat)."
        )

    def test_closed_world_shortcut(self, make_session, render):
        result = {"valid": True, "goal": "Not (isA Rex Cat)", "steps": [{"operation": "cwa_negation"}]}
        assert render(make_session(), "prove", result) == (
            "True: NOT (Rex is a cat). Proof: Closed world assumption: "
            "cannot prove isA Rex Cat, therefore NOT (Rex is a cat)."
        )

    def test_contrapositive(self, make_session, render):
        session = make_session(rules=[RULE_BIRD_FLY])
        result = {
            "valid": True,
            "goal": "Not (isA Tweety Bird)",
            "steps": [{"operation": "rule_application", "inference": "contrapositive", "ruleId": "r1"}],
        }
        assert render(session, "prove", result) == (
            "True: NOT (Tweety is a bird). Proof: Proved: NOT (Tweety can Fly). "
            "Applied contrapositive on rule: IF (Tweety is a bird) THEN (Tweety can Fly). "
            "Therefore NOT (Tweety is a bird)."
        )

    def test_existential_witness(self, make_session, render):
        result = {
            "valid": True,
            "goal": "@goal:goal Exists ?x (isA ?x Dog)",
            "method": "exists_witness",
            "steps": [{"operation": "exists_witness", "entity": "Rex"}],
        }
        assert render(make_session(), "prove", result) == (
            "True: Exists ?x (isA ?x Dog). Proof: Witness Rex satisfies the existential."
        )


class TestNegativeProofs:

    def test_counterexample_chain(self, make_session, render):
        result = {
            "valid": True,
            "result": False,
            "goal": "locatedIn Paris Germany",
            "steps": [
                {"operation": "chain_step", "from": "Paris", "to": "France"},
                {"operation": "disjoint_check", "container": "France", "target": "Germany"},
            ],
        }
        assert render(make_session(), "prove", result) == (
            "False: NOT Paris is in Germany. Proof: Paris is in France. France and Germany are disjoint."
        )


class TestInvalidProofs:

    def test_missing_rule_antecedent(self, make_session, render):
        session = make_session(rules=[RULE_BIRD_FLY])
        result = {"valid": False, "goal": "can Tweety Fly"}
        assert render(session, "prove", result) == (
            "Cannot prove: Tweety can Fly. Proof: Checked rule: IF (Tweety is a bird) THEN (Tweety can Fly). "
            "Missing: Tweety is a bird. Therefore the rule antecedent is not satisfied"
        )

    def test_blocked_negated_antecedent(self, make_session, render):
        rule = {
            "id": "r2",
            "conditionParts": {"type": "Not", "inner": {"type": "leaf", "ast": statement("isA", "?x", "Bird")}},
            "conclusionAST": statement("can", "?x", "Swim"),
        }
        session = make_session(kbFacts=[kb_fact("isA", "Tweety", "Bird")], rules=[rule])
        result = {"valid": False, "goal": "can Tweety Swim"}
        assert render(session, "prove", result) == (
            "Cannot prove: Tweety can Swim. Proof: Checked rule: IF (NOT (Tweety is a bird)) THEN (Tweety can Swim). "
            "Blocked: NOT (Tweety is a bird) is false because Tweety is a bird is true. "
            "Therefore the rule antecedent is not satisfied"
        )

    def test_explicit_negation_trace(self, make_session, render):
        result = {"valid": False, "goal": "isA Rex Cat", "searchTrace": "Found explicit negation: isA Rex Cat"}
        assert render(make_session(), "prove", result) == (
            "Cannot prove: Rex is a cat. Proof: Found explicit negation: NOT (Rex is a cat). "
            "Negation blocks inference."
        )

    def test_no_facts_for_subject(self, make_session, render):
        result = {"valid": False, "goal": "likes Anne Bob"}
        assert render(make_session(), "prove", result) == (
            "Cannot prove: Anne likes Bob. Proof: No likes facts for Anne exist in KB, "
            "so Anne likes Bob cannot be derived."
        )

    def test_fact_present_but_rejected(self, make_session, render):
        session = make_session(kbFacts=[kb_fact("isA", "Rex", "Dog")])
        result = {"valid": False, "goal": "isA Rex Dog"}
        assert render(session, "prove", result) == (
            "Cannot prove: Rex is a dog. Proof: Goal fact exists in KB but was rejected by the prover (unprovable)."
        )

    def test_missing_result(self, make_session, render):
        assert render(make_session(), "prove", None) == "Cannot prove: statement"
