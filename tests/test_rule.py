"""Tests for rule-sentence parsing (grammar.rule)."""

import pytest

from grammar import parse_clause_group, parse_rule_sentence
from nl_model import ParseError, SentenceResult


class TestRuleSentences:
    """Each rule yields an antecedent block, a consequent block and one Implies line."""

    def test_universal_copula(self, ctx):
        result = parse_rule_sentence("All dogs are mammals", ctx)
        assert isinstance(result, SentenceResult)
        assert result.lines == [
            "@ant0 isA ?x Dog",
            "@cons1 isA ?x Mammal",
            "Implies $ant0 $cons1",
        ]

    def test_if_then_with_letter_variable(self, ctx):
        result = parse_rule_sentence("If X is a Bird then X can Fly", ctx)
        assert result.lines == [
            "@ant0 isA ?x Bird",
            "@cons1 can ?x Fly",
            "Implies $ant0 $cons1",
        ]

    def test_if_then_with_pronouns(self, ctx):
        result = parse_rule_sentence("If someone is cold then they are red", ctx)
        assert result.lines == [
            "@ant0 hasProperty ?x cold",
            "@cons1 hasProperty ?x red",
            "Implies $ant0 $cons1",
        ]

    def test_last_line_is_implication(self, ctx):
        result = parse_rule_sentence("Every cat is an animal", ctx)
        assert isinstance(result, SentenceResult)
        assert result.lines[-1].startswith("Implies $ant")

    def test_counter_shared_across_sentences(self, ctx):
        parse_rule_sentence("All dogs are mammals", ctx)
        second = parse_rule_sentence("All cats are mammals", ctx)
        assert second.lines[0] == "@ant2 isA ?x Cat"

    def test_unknown_consequent_operator(self, ctx):
        result = parse_rule_sentence("If X is a Bird then X frobnicates Y", ctx)
        assert isinstance(result, ParseError)
        assert result.unknown_operator == "frobnicate"


class TestRulePatterns:
    """Precedence table: every pattern from the indefinite copula to the implicit class."""

    @pytest.mark.parametrize("sentence,expected", [
        ("A dog is a mammal", ["@ant0 isA ?x Dog", "@cons1 isA ?x Mammal", "Implies $ant0 $cons1"]),
        ("A cat chases mice", ["@ant0 isA ?x Cat", "@cons1 chases ?x Mouse", "Implies $ant0 $cons1"]),
        ("A dog barks", ["@ant0 isA ?x Dog", "@cons1 hasProperty ?x bark", "Implies $ant0 $cons1"]),
        ("Everything that is red is hot", [
            "@ant0 hasProperty ?x red",
            "@cons1 hasProperty ?x hot",
            "Implies $ant0 $cons1",
        ]),
        ("Cats are animals", ["@ant0 isA ?x Cat", "@cons1 isA ?x Animal", "Implies $ant0 $cons1"]),
        ("Dogs are loyal", ["@ant0 isA ?x Dog", "@cons1 hasProperty ?x loyal", "Implies $ant0 $cons1"]),
        ("Dogs bark", ["@ant0 isA ?x Dog", "@cons1 hasProperty ?x bark", "Implies $ant0 $cons1"]),
    ])
    def test_single_antecedent(self, ctx, sentence, expected):
        result = parse_rule_sentence(sentence, ctx)
        assert isinstance(result, SentenceResult), result
        assert result.lines == expected

    def test_no_copula(self, ctx):
        assert parse_rule_sentence("No cats are dogs", ctx).lines == [
            "@ant0 isA ?x Cat",
            "@base1 isA ?x Dog",
            "@cons2 Not $base1",
            "Implies $ant0 $cons2",
        ]

    def test_no_have(self, ctx):
        assert parse_rule_sentence("No birds have teeth", ctx).lines == [
            "@ant0 isA ?x Bird",
            "@base1 hasProperty ?x teeth",
            "@cons2 Not $base1",
            "Implies $ant0 $cons2",
        ]

    def test_no_with_negated_have_is_positive(self, ctx):
        assert parse_rule_sentence("No birds do not have wings", ctx).lines == [
            "@ant0 isA ?x Bird",
            "@cons1 hasProperty ?x wing",
            "Implies $ant0 $cons1",
        ]

    def test_quantified_verb_with_adjectives(self, ctx):
        assert parse_rule_sentence("All tall students like pizza", ctx).lines == [
            "@part0 isA ?x Student",
            "@part1 hasProperty ?x tall",
            "@ant2 And $part0 $part1",
            "@cons3 likes ?x Pizza",
            "Implies $ant2 $cons3",
        ]

    def test_implicit_class_of_properties(self, ctx):
        assert parse_rule_sentence("Big round things are red", ctx).lines == [
            "@part0 hasProperty ?x big",
            "@part1 hasProperty ?x round",
            "@ant2 And $part0 $part1",
            "@cons3 hasProperty ?x red",
            "Implies $ant2 $cons3",
        ]


class TestClauseGroups:
    """Antecedent clauses: errors propagate, elided subjects are rebound."""

    def test_unknown_operator_in_antecedent_propagates(self, ctx):
        result = parse_rule_sentence("If the mentor of X is Y then X is happy", ctx)
        assert isinstance(result, ParseError)
        assert result.unknown_operator == "mentor"

    def test_clause_group_returns_parse_error(self, ctx):
        result = parse_clause_group("the mentor of Bob is Alice", ctx)
        assert isinstance(result, ParseError)
        assert result.unknown_operator == "mentor"

    def test_elided_subject_keeps_whole_noun_phrase(self, ctx):
        result = parse_rule_sentence(
            "If the dog chases the mouse and eats the apple then the dog is happy", ctx
        )
        assert result.lines == [
            "@part0 chases Dog Mouse",
            "@part1 eats Dog Apple",
            "@ant2 And $part0 $part1",
            "@cons3 hasProperty Dog happy",
            "Implies $ant2 $cons3",
        ]
