"""Tests for fact-sentence parsing (grammar.fact)."""

import re

import pytest

from grammar import parse_fact_sentence
from grammar.shared import parse_have_predicate
from nl_model import ParseError, SentenceResult


def lines(result):
    assert isinstance(result, SentenceResult), result
    return result.lines


class TestCopulaFacts:
    """X is/are [not] Y."""

    @pytest.mark.parametrize("sentence,expected", [
        ("Rex is a dog", ["isA Rex Dog"]),
        ("Dog is a Animal.", ["isA Dog Animal"]),
        ("Rex is in the garden", ["at Rex Garden"]),
        ("Tweety can fly", ["can Tweety Fly"]),
    ])
    def test_single_atom(self, ctx, sentence, expected):
        assert lines(parse_fact_sentence(sentence, ctx)) == expected

    def test_negated_type(self, ctx):
        assert lines(parse_fact_sentence("Rex is not a cat", ctx)) == ["@base0 isA Rex Cat", "Not $base0"]

    def test_negated_location(self, ctx):
        assert lines(parse_fact_sentence("Alice is not in the kitchen.", ctx)) == [
            "@base0 at Alice Kitchen",
            "Not $base0",
        ]

    def test_coordinated_types(self, ctx):
        assert lines(parse_fact_sentence("Wren is a numpus and a brimpus", ctx)) == [
            "isA Wren Numpus",
            "isA Wren Brimpus",
        ]

    def test_disjunctive_fact_rejected(self, ctx):
        assert parse_fact_sentence("Rex is red or blue", ctx) is None


class TestRelationFacts:
    """Non-copular clauses and special relation patterns."""

    def test_subject_verb_object(self, ctx):
        assert lines(parse_fact_sentence("Anne likes Bob", ctx)) == ["likes Anne Bob"]

    def test_definite_articles_dropped(self, ctx):
        assert lines(parse_fact_sentence("The cat chases the mouse", ctx)) == ["chases Cat Mouse"]

    def test_of_is_pattern(self, ctx):
        assert lines(parse_fact_sentence("The parent of Jack is Harry", ctx)) == ["parent Harry Jack"]

    def test_functional_notation(self, ctx):
        assert lines(parse_fact_sentence("likes(Anne, Bob)", ctx)) == ["likes Anne Bob"]

    def test_negated_functional_notation(self, ctx):
        assert lines(parse_fact_sentence("negLikes(Anne, Bob)", ctx)) == [
            "@base0 likes Anne Bob",
            "Not $base0",
        ]

    def test_unknown_verb_is_parse_error(self, ctx):
        result = parse_fact_sentence("Anne frobnicates Bob", ctx)
        assert isinstance(result, ParseError)
        assert result.unknown_operator == "frobnicate"
        assert result.error == "Unknown operator 'frobnicate' derived from verb 'frobnicates'"

    def test_unknown_verb_auto_declared(self, auto_ctx):
        result = parse_fact_sentence("Anne frobnicates Bob", auto_ctx)
        assert lines(result) == ["frobnicate Anne Bob"]
        assert result.declared_operators == ["frobnicate"]


class TestExistentialsAndVariables:

    def test_there_is_a_type(self, ctx):
        result = lines(parse_fact_sentence("There is an animal", ctx))
        assert len(result) == 1
        assert re.match(r"^isA exists_ent_[0-9a-f]{10} Animal$", result[0])

    def test_existential_entity_is_deterministic(self, ctx):
        first = lines(parse_fact_sentence("There is an animal", ctx))
        second = lines(parse_fact_sentence("There is an animal", ctx))
        assert first == second

    def test_pronoun_subject_rejected_by_default(self, ctx):
        assert parse_fact_sentence("They are red", ctx) is None

    def test_pronoun_subject_allowed_with_option(self, ctx):
        allowed = ctx.with_options(allow_variable_facts=True)
        assert lines(parse_fact_sentence("They are red", allowed)) == ["hasProperty ?x red"]

    def test_empty_sentence(self, ctx):
        assert parse_fact_sentence("  .  ", ctx) is None


class TestFunctionalNegation:
    """Leading "not" and the neg prefix combine by parity."""

    @pytest.mark.parametrize("sentence,expected", [
        ("not likes(Anne, Bob)", ["@base0 likes Anne Bob", "Not $base0"]),
        ("neglikes(Anne, Bob)", ["@base0 likes Anne Bob", "Not $base0"]),
        ("not negLikes(Anne, Bob)", ["likes Anne Bob"]),
    ])
    def test_negation_parity(self, ctx, sentence, expected):
        assert lines(parse_fact_sentence(sentence, ctx)) == expected

    def test_arity_conflict_gets_rel_suffix(self, small_ctx):
        result = parse_fact_sentence("give(Anne, Bob)", small_ctx)
        assert isinstance(result, ParseError)
        assert result.unknown_operator == "give_rel"

    def test_rel_suffix_auto_declared(self, small_ctx):
        allowed = small_ctx.with_options(auto_declare_unknown_operators=True)
        result = parse_fact_sentence("give(Anne, Bob)", allowed)
        assert lines(result) == ["give_rel Anne Bob"]
        assert result.declared_operators == ["give_rel"]


class TestNarrativeFacts:
    """Movement, pickup/drop, between and genitive phrasing."""

    @pytest.mark.parametrize("sentence,expected", [
        ("John went to the kitchen", ["at John Kitchen"]),
        ("Mary picked up the football", ["has Mary Football"]),
        ("Mary dropped the football", ["@base0 has Mary Football", "Not $base0"]),
        ("Harry is the parent of Jack", ["parent Harry Jack"]),
    ])
    def test_pattern(self, ctx, sentence, expected):
        assert lines(parse_fact_sentence(sentence, ctx)) == expected

    def test_between(self, auto_ctx):
        result = parse_fact_sentence("There is a road between Paris and Rome", auto_ctx)
        assert lines(result) == ["road Paris Rome"]
        assert result.declared_operators == ["road"]


class TestPredicatePhrases:
    """Relative clauses, participles, adjective + preposition and have slugs."""

    def test_relative_clause(self, ctx):
        assert lines(parse_fact_sentence("Rex is a dog that is friendly", ctx)) == [
            "isA Rex Dog",
            "hasProperty Rex friendly",
        ]

    def test_participle(self, ctx):
        assert lines(parse_fact_sentence("Rex is a dog owned by Anne", ctx)) == [
            "isA Rex Dog",
            "hasProperty Rex owned_by_anne",
        ]

    def test_adjective_with_preposition(self, auto_ctx):
        result = parse_fact_sentence("Rex is afraid of wolves", auto_ctx)
        assert lines(result) == ["afraid Rex Wolf"]
        assert result.declared_operators == ["afraid"]

    def test_long_have_slug_truncated(self):
        slug = parse_have_predicate("the one two three four five six seven eight nine ten eleven")
        assert slug == "one_two_three_four_five_nine_ten_eleven"


class TestSomeFacts:
    """"Some X ..." introduces one fresh existential entity."""

    def test_some_copula(self, ctx):
        result = lines(parse_fact_sentence("Some dogs are friendly", ctx))
        assert len(result) == 2
        m = re.match(r"^isA (exists_ent_[0-9a-f]{10}) Dog$", result[0])
        assert m
        assert result[1] == f"hasProperty {m.group(1)} friendly"

    def test_some_negated_have(self, ctx):
        result = lines(parse_fact_sentence("Some dogs do not have tails", ctx))
        m = re.match(r"^isA (exists_ent_[0-9a-f]{10}) Dog$", result[0])
        assert m
        assert result[1:] == [f"@base0 hasProperty {m.group(1)} tail", "Not $base0"]
