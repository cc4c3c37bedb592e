"""Tests for multi-sentence context translation (grammar.translate)."""

import re

from catalog import DslLineValidator
from grammar import translate_context
from grammar.existentials import extract_existential_type_claims
from grammar.text import stable_hash
from grammar.translate import expand_biconditional, strip_annotation


class TestTranslateContext:
    """Sentence loop: rules first, then facts, then error collection."""

    def test_rules_and_facts(self, ctx):
        result = translate_context("All dogs are mammals. Rex is a dog.", ctx)
        assert result.dsl.splitlines() == [
            "@ant0 isA ?x Dog",
            "@cons1 isA ?x Mammal",
            "Implies $ant0 $cons1",
            "isA Rex Dog",
        ]
        assert result.errors == []
        assert result.stats.sentences_total == 2
        assert result.stats.parsed == 2

    def test_unknown_operator_reported(self, ctx):
        result = translate_context("Rex is a dog. Anne frobnicates Bob.", ctx)
        assert result.dsl == "isA Rex Dog"
        assert len(result.errors) == 1
        error = result.errors[0]
        assert error.sentence == "Anne frobnicates Bob"
        assert error.unknown_operator == "frobnicate"
        assert error.suggestion == "Add operator declaration like: @frobnicate:frobnicate __Relation"
        assert result.stats.parsed == 1

    def test_auto_declare_prelude(self, auto_ctx):
        result = translate_context("Anne frobnicates Bob.", auto_ctx)
        assert result.dsl == "@frobnicate:frobnicate __Relation\nfrobnicate Anne Bob"
        assert result.declared_operators == ["frobnicate"]
        assert result.stats.auto_declared == 1
        assert result.errors == []

    def test_unparseable_sentence(self, ctx):
        result = translate_context("Hello.", ctx)
        assert result.dsl == ""
        assert result.errors[0].error == "Could not parse: Hello"
        assert result.errors[0].suggestion is None

    def test_opaque_fallback(self, ctx):
        opaque = ctx.with_options(fallback_opaque_statements=True)
        result = translate_context("Hello.", opaque)
        assert result.dsl == f"hasProperty KB opaque_ctx_{stable_hash('Hello')}"
        assert result.warnings == ["Opaque statement: Hello"]
        assert result.stats.opaque == 1
        assert result.errors == []

    def test_annotation_stripped(self, ctx):
        assert translate_context("[BG] Rex is a dog.", ctx).dsl == "isA Rex Dog"

    def test_biconditional_becomes_two_rules(self, ctx):
        result = translate_context("X is a Bird if and only if X can Fly.", ctx)
        assert result.dsl.splitlines() == [
            "@ant0 can ?x Fly",
            "@cons1 isA ?x Bird",
            "Implies $ant0 $cons1",
            "@ant2 isA ?x Bird",
            "@cons3 can ?x Fly",
            "Implies $ant2 $cons3",
        ]
        assert result.stats.parsed == 1

    def test_empty_text(self, ctx):
        result = translate_context("", ctx)
        assert result.dsl == ""
        assert result.stats.sentences_total == 0

    def test_existential_fact_shape(self, ctx):
        result = translate_context("There is an animal.", ctx)
        assert re.match(r"^isA exists_ent_[0-9a-f]{10} Animal$", result.dsl)


class TestPreprocessing:

    def test_expand_iff(self):
        assert expand_biconditional("A is red if and only if A is big") == [
            "If A is big then A is red",
            "If A is red then A is big",
        ]

    def test_expand_equivalence(self):
        assert expand_biconditional("being cold is equivalent to being red") == [
            "If it is cold then it is red",
            "If it is red then it is cold",
        ]

    def test_plain_sentence_unchanged(self):
        assert expand_biconditional("Rex is a dog") == ["Rex is a dog"]

    def test_strip_annotation(self):
        assert strip_annotation("[BG] Rex is a dog") == "Rex is a dog"

    def test_existential_type_claims(self):
        claims = extract_existential_type_claims("Certain animals, including humans, are mammals")
        assert claims == ["Animal", "Human"]


class TestTranslatedDslValidates:
    """Parser output passes the line validator: arities and operators agree with the catalog."""

    def test_mixed_context_is_valid(self, ctx, default_index):
        out = translate_context(
            "All dogs are mammals. Rex is a dog. Rex is not a cat. Anne likes Bob. "
            "Harry is the parent of Jack. John went to the kitchen. If X is a Bird then X can Fly.",
            ctx,
        )
        assert out.errors == []
        assert DslLineValidator(default_index).validate(out.dsl).is_valid

    def test_auto_declared_operator_is_valid(self, auto_ctx, default_index):
        out = translate_context("Anne frobnicates Bob. Rex is a dog.", auto_ctx)
        assert out.errors == []
        assert DslLineValidator(default_index).validate(out.dsl).is_valid
