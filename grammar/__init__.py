"""
grammar — translator zdań angielskich na linie DSL.

Interfejs publiczny:
    translate_context   — tekst (wiele zdań) → ContextTranslation (dsl, errors, stats)
    translate_question  — pytanie → linie celu "@goal:goal ..." albo None
    parse_fact_sentence — zdanie faktu → SentenceResult | ParseError | None
    parse_rule_sentence — zdanie reguły → SentenceResult | ParseError | None
    ParseContext, TranslatorOptions, RefCounter — kontekst, opcje, licznik referencji

Typowe użycie:
    from grammar import ParseContext, TranslatorOptions, translate_context

    ctx = ParseContext.create(TranslatorOptions(auto_declare_unknown_operators=True))
    result = translate_context("All dogs are mammals. Rex is a dog.", ctx)
    print(result.dsl)
    for e in result.errors:
        print(e.sentence, e.error)
"""

from .config import TranslatorOptions
from .context import ParseContext
from .refs import RefCounter
from .fact import parse_fact_sentence
from .rule import parse_clause_group, parse_rule_sentence
from .translate import ContextTranslation, SentenceError, TranslationStats, translate_context
from .question import translate_question

__all__ = [
    "TranslatorOptions",
    "ParseContext",
    "RefCounter",
    "parse_fact_sentence",
    "parse_clause_group",
    "parse_rule_sentence",
    "ContextTranslation",
    "SentenceError",
    "TranslationStats",
    "translate_context",
    "translate_question",
]
