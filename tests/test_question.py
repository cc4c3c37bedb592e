"""Tests for question-to-goal translation (grammar.question)."""

from grammar import translate_question
from grammar.question import invert_question
from grammar.text import stable_hash


class TestYesNoQuestions:

    def test_copula_question(self, ctx):
        assert translate_question("Is Rex a dog?", ctx) == "@goal:goal isA Rex Dog"

    def test_do_question(self, ctx):
        assert translate_question("Does Anne like Bob?", ctx) == "@goal:goal likes Anne Bob"

    def test_neither_nor(self, ctx):
        assert translate_question("Is Rex neither big nor red?", ctx) == (
            "// goal_logic:And\n"
            "@goal:goal Not (hasProperty Rex big)\n"
            "@goal1:goal Not (hasProperty Rex red)"
        )

    def test_if_then_question(self, ctx):
        assert translate_question("If Rex is a dog then Rex is an animal?", ctx) == (
            "// action:prove\n@goal:goal Implies (isA Rex Dog) (isA Rex Animal)"
        )

    def test_is_there(self, ctx):
        assert translate_question("Is there an animal?", ctx) == "// action:query\n@goal:goal isA ?x Animal"


class TestQuantifiedQuestions:

    def test_some(self, ctx):
        assert translate_question("Some dogs are friendly", ctx) == (
            "// action:prove\n@goal:goal Exists ?x (And (isA ?x Dog) (hasProperty ?x friendly))"
        )

    def test_no(self, ctx):
        assert translate_question("No dogs are friendly", ctx) == (
            "// action:prove\n@goal:goal Not (Exists ?x (And (isA ?x Dog) (hasProperty ?x friendly)))"
        )


class TestWhQuestions:

    def test_what_adjective_of(self, ctx):
        assert translate_question("What is Rex afraid of?", ctx) == (
            "// action:query\n// declare_ops:afraid\n@goal:goal afraid Rex ?x"
        )

    def test_where(self, ctx):
        assert translate_question("Where is Alice?", ctx) == "// action:query\n@goal:goal at Alice ?x"

    def test_what_color(self, ctx):
        assert translate_question("What color is Rex?", ctx) == "// action:query\n@goal:goal hasProperty Rex ?x"

    def test_genitive(self, ctx):
        assert translate_question("What is the parent of Jack?", ctx) == (
            "// action:query\n@goal:goal parent ?x Jack"
        )


class TestOptions:

    def test_compound_expansion(self, ctx):
        expanded = ctx.with_options(expand_compound_questions=True)
        assert translate_question("Is Rex big and red?", expanded) == (
            "// goal_logic:And\n@goal:goal hasProperty Rex big\n@goal1:goal hasProperty Rex red"
        )

    def test_untranslatable_returns_none(self, ctx):
        assert translate_question("Hmm?", ctx) is None

    def test_opaque_goal(self, ctx):
        opaque = ctx.with_options(fallback_opaque_questions=True)
        assert translate_question("Hmm?", opaque) == f"@goal:goal hasProperty KB opaque_q_{stable_hash('Hmm')}"


class TestInversion:

    def test_copula(self):
        assert invert_question("Is Anne an animal") == "Anne is an animal"

    def test_auxiliary(self):
        assert invert_question("Does Anne like Bob") == "Anne like Bob"

    def test_plain_statement_unchanged(self):
        assert invert_question("Anne likes Bob") == "Anne likes Bob"
