"""Tests for grammar.text and grammar.refs: pure string utilities and the reference counter."""

import threading

import pytest

from grammar import RefCounter
from grammar.text import (
    clean,
    detect_negation_prefix,
    is_plural,
    normalize_entity,
    normalize_type_name,
    pluralize,
    sanitize_predicate,
    singularize,
    split_coord,
    split_sentences,
    stable_hash,
)
from nl_model import Connective


class TestClean:
    """Whitespace collapsing and trailing punctuation."""

    def test_collapses_whitespace_and_strips_period(self):
        assert clean("  Rex   is a dog.  ") == "Rex is a dog"

    def test_idempotent(self):
        once = clean("Is Rex a dog?!")
        assert clean(once) == once == "Is Rex a dog"

    def test_stable_hash_ignores_case_and_spacing(self):
        assert stable_hash("Rex is a dog.") == stable_hash("rex  is a dog")
        assert len(stable_hash("anything")) == 10


class TestSplitSentences:
    """Sentence splitting with protected dots."""

    def test_splits_on_terminal_punctuation(self):
        assert split_sentences("Rex is a dog. Tom is a cat! Is Bob big?") == [
            "Rex is a dog", "Tom is a cat", "Is Bob big",
        ]

    def test_abbreviations_do_not_split(self):
        assert split_sentences("Mr. Smith is tall. Rex is a dog.") == ["Mr. Smith is tall", "Rex is a dog"]

    def test_decimals_do_not_split(self):
        assert split_sentences("The value is 3.5 here.") == ["The value is 3.5 here"]

    def test_newlines_and_semicolons_end_sentences(self):
        assert split_sentences("Rex is a dog\nTom is a cat; Bob is big") == [
            "Rex is a dog", "Tom is a cat", "Bob is big",
        ]


class TestSplitCoord:
    """Top-level coordination splitting."""

    def test_commas_and_final_and(self):
        coord = split_coord("red, big and round")
        assert coord.items == ["red", "big", "round"]
        assert coord.op == Connective.AND
        assert not coord.mixed

    def test_or_connective(self):
        coord = split_coord("red or blue")
        assert coord.op == Connective.OR
        assert coord.items == ["red", "blue"]

    def test_mixed_connectives_flagged_first_wins(self):
        coord = split_coord("red or big and round")
        assert coord.mixed
        assert coord.op == Connective.OR

    def test_neither_nor_negates_items(self):
        coord = split_coord("neither cold nor red")
        assert coord.negated
        assert coord.items == ["cold", "red"]

    def test_between_keeps_first_and(self):
        assert split_coord("between A and B").items == ["between A and B"]

    def test_parenthesised_joiners_ignored(self):
        assert split_coord("f(a, b) and c").items == ["f(a, b)", "c"]


class TestNegation:

    def test_does_not_prefix(self):
        neg = detect_negation_prefix("does not bark")
        assert neg.negated and neg.rest == "bark"

    def test_no_prefix(self):
        neg = detect_negation_prefix("barks loudly")
        assert not neg.negated and neg.rest == "barks loudly"


class TestNumber:
    """Suffix heuristics for plural / singular forms."""

    @pytest.mark.parametrize("singular,plural", [
        ("cat", "cats"),
        ("box", "boxes"),
        ("city", "cities"),
        ("dog", "dogs"),
    ])
    def test_common_nouns_round_trip(self, singular, plural):
        assert pluralize(singular) == plural
        assert singularize(plural) == singular

    def test_irregular_singulars(self):
        assert singularize("wolves") == "wolf"
        assert singularize("people") == "person"
        assert singularize("houses") == "house"

    def test_is_plural(self):
        assert is_plural("dogs")
        assert is_plural("children")
        assert not is_plural("glass")
        assert not is_plural("bus")
        assert not is_plural("dog")


class TestIdentifiers:
    """Deterministic identifier mappings."""

    def test_sanitize_predicate_strips_invalid_characters(self):
        assert sanitize_predicate("is afraid of") == "is_afraid_of"
        assert sanitize_predicate("part-time!") == "parttime"

    def test_sanitize_predicate_leading_digit_and_keywords(self):
        assert sanitize_predicate("3d") == "p3d"
        assert sanitize_predicate("begin") == "begin_op"
        assert sanitize_predicate("solve") == "solve_op"

    def test_normalize_entity_camel_cases_without_article(self):
        assert normalize_entity("the big dog") == "BigDog"
        assert normalize_entity("Rex") == "Rex"

    def test_normalize_entity_variables(self):
        assert normalize_entity("someone") == "?x"
        assert normalize_entity("they", "?y") == "?y"
        assert normalize_entity("X") == "?x"
        assert normalize_entity("the second person") == "?y"
        assert normalize_entity("?z") == "?z"

    def test_normalize_type_name(self):
        assert normalize_type_name("animals") == "Animal"
        assert normalize_type_name("3d") == "T3d"


class TestRefCounter:
    """Monotonic, thread-safe reference names."""

    def test_sequence_and_reset(self):
        refs = RefCounter()
        assert refs.next("ant") == "ant0"
        assert refs.next("cons") == "cons1"
        refs.reset()
        assert refs.next() == "ref0"

    def test_concurrent_names_unique(self):
        refs = RefCounter()
        names: list[str] = []
        lock = threading.Lock()

        def worker():
            local = [refs.next("r") for _ in range(200)]
            with lock:
                names.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(names) == len(set(names)) == 1600
