"""
grammar/translate.py — tłumaczenie tekstu kontekstu (wiele zdań) na DSL.

translate_context(text, ctx) -> ContextTranslation

Kroki na zdanie:
  1. usunięcie adnotacji "[BG]"
  2. rozwinięcie równoważności ("A if and only if B" → dwie reguły)
  3. parser reguł, potem parser faktów
  4. typy egzystencjalne ("certain animals" → isA exists_ent_... Animal)
  5. błąd → SentenceError albo (opcja) fakt nieprzezroczysty
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from nl_model.types import ParseError, SentenceResult

from .context import ParseContext
from .emit import declaration_line
from .existentials import existential_entity, extract_existential_type_claims
from .fact import parse_fact_sentence
from .rule import parse_rule_sentence
from .text import clean, split_sentences, stable_hash

_ANNOTATION_RE = re.compile(r"^\s*\[[A-Za-z_]+\]\s*")
_IFF_RE        = re.compile(r"^(.+?)\s*,?\s+if\s+and\s+only\s+if\s+(.+)$", re.IGNORECASE)
_EQUIV_RE      = re.compile(r"^(being\s+)?(.+?)\s+is\s+equivalent\s+to\s+(being\s+)?(.+)$", re.IGNORECASE)

DECLARATION_SUGGESTION = "Add operator declaration like: @{op}:{op} __Relation"


@dataclass(slots=True)
class SentenceError:
    """Zdanie, którego nie udało się przetłumaczyć."""
    sentence: str
    error: str
    unknown_operator: str | None = None
    suggestion: str | None = None


@dataclass(slots=True)
class TranslationStats:
    sentences_total: int = 0
    parsed:          int = 0
    opaque:          int = 0
    auto_declared:   int = 0


@dataclass(slots=True)
class ContextTranslation:
    """
    Wynik tłumaczenia kontekstu.

    - dsl:                tekst DSL (preludium deklaracji + linie zdań)
    - errors:             zdania nieprzetłumaczone
    - warnings:           komunikaty nieblokujące (np. fakty nieprzezroczyste)
    - stats:              liczniki
    - declared_operators: operatory zadeklarowane automatycznie (posortowane)
    """
    dsl: str
    errors: list[SentenceError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    stats: TranslationStats = field(default_factory=TranslationStats)
    declared_operators: list[str] = field(default_factory=list)


def strip_annotation(sentence: str) -> str:
    return _ANNOTATION_RE.sub("", sentence)


def expand_biconditional(sentence: str) -> list[str]:
    """'A if and only if B' → ['If B then A', 'If A then B']; inne zdania bez zmian."""
    m = _IFF_RE.match(sentence)
    if m:
        a, b = clean(m.group(1)), clean(m.group(2))
        return [f"If {b} then {a}", f"If {a} then {b}"]
    m = _EQUIV_RE.match(sentence)
    if m:
        a = f"it is {m.group(2)}" if m.group(1) else m.group(2)
        b = f"it is {m.group(4)}" if m.group(3) else m.group(4)
        a, b = clean(a), clean(b)
        return [f"If {a} then {b}", f"If {b} then {a}"]
    return [sentence]


def _parse_sentence(sentence: str, ctx: ParseContext) -> SentenceResult | ParseError | None:
    rule = parse_rule_sentence(sentence, ctx)
    if isinstance(rule, SentenceResult):
        return rule
    fact = parse_fact_sentence(sentence, ctx)
    if isinstance(fact, SentenceResult):
        return fact
    return rule if isinstance(rule, ParseError) else fact


def translate_context(text: str, ctx: ParseContext | None = None) -> ContextTranslation:
    ctx = ctx or ParseContext.create()
    out = ContextTranslation(dsl="")
    body: list[str] = []
    declared: set[str] = set()

    for raw in split_sentences(text):
        sentence = clean(strip_annotation(raw))
        if not sentence:
            continue
        out.stats.sentences_total += 1

        claims = extract_existential_type_claims(sentence) if ctx.options.extract_existentials else []
        claim_lines = [
            f"isA {existential_entity(f'{type_name}:{sentence}')} {type_name}"
            for type_name in claims
        ]

        results: list[SentenceResult] = []
        failure: ParseError | None = None
        for part in expand_biconditional(sentence):
            parsed = _parse_sentence(part, ctx)
            if isinstance(parsed, SentenceResult):
                results.append(parsed)
            else:
                failure = parsed if isinstance(parsed, ParseError) else failure
                results = []
                break

        if results or claim_lines:
            for r in results:
                body += r.lines
                declared.update(r.declared_operators)
            body += claim_lines
            out.stats.parsed += 1
            continue

        if ctx.options.fallback_opaque_statements:
            body.append(f"hasProperty KB opaque_ctx_{stable_hash(sentence)}")
            out.stats.opaque += 1
            out.warnings.append(f"Opaque statement: {sentence}")
            continue

        if failure is not None:
            op = failure.unknown_operator
            out.errors.append(SentenceError(
                sentence=sentence,
                error=failure.error,
                unknown_operator=op,
                suggestion=DECLARATION_SUGGESTION.format(op=op) if op else None,
            ))
        else:
            out.errors.append(SentenceError(sentence=sentence, error=f"Could not parse: {sentence}"))

    out.declared_operators = sorted(declared)
    out.stats.auto_declared = len(out.declared_operators)
    prelude = [declaration_line(op) for op in out.declared_operators] if ctx.auto_declare else []
    out.dsl = "\n".join(prelude + body)
    return out
