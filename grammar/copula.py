"""
grammar/copula.py — klauzule kopularne: X is/are/was/were [not] Y.

Kolejność predykatu:
  1. lokatyw   in/at/inside → at; on/under/over/outside/near/behind/beside → ten sam operator
  2. dopełniacz "the PARENT of Y" → parent(X, Y)
  3. item predykatu (shared.parse_predicate_item)
"""

from __future__ import annotations

import re

from nl_model.constants import LOCATIVE_OPERATORS
from nl_model.types import ClauseGroup, ParseError, and_group, item

from .context import ParseContext
from .shared import gate_binary_operator, parse_predicate_item, parse_subject_np
from .text import clean, normalize_entity, sanitize_predicate

_CONTRACTIONS = (
    (re.compile(r"\bisn't\b", re.IGNORECASE),   "is not"),
    (re.compile(r"\baren't\b", re.IGNORECASE),  "are not"),
    (re.compile(r"\bwasn't\b", re.IGNORECASE),  "was not"),
    (re.compile(r"\bweren't\b", re.IGNORECASE), "were not"),
)

_COPULA_RE    = re.compile(r"^(.*?)\s+(?:is|are|was|were)\s+(not\s+)?(.+)$", re.IGNORECASE)
_LOCATIVE_RE  = re.compile(
    r"^(" + "|".join(LOCATIVE_OPERATORS) + r")\s+(?:the\s+|a\s+|an\s+)?(.+)$",
    re.IGNORECASE,
)
_GENITIVE_RE  = re.compile(r"^the\s+([A-Za-z_][A-Za-z0-9_'-]*)\s+of\s+(.+)$", re.IGNORECASE)


def expand_contractions(text: str) -> str:
    for pattern, repl in _CONTRACTIONS:
        text = pattern.sub(repl, text)
    return text


def parse_copula_clause(text: str, default_var: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    t = expand_contractions(clean(text))
    m = _COPULA_RE.match(t)
    if not m or not m.group(1).strip():
        return None

    subject = parse_subject_np(m.group(1), default_var, ctx.options.indefinite_as_entity)
    negated = bool(m.group(2))
    predicate = clean(m.group(3))

    parsed = _parse_copula_predicate(subject.arg, predicate, ctx)
    if parsed is None or isinstance(parsed, ParseError):
        return parsed

    items = [i.flipped(negated) for i in parsed.items]
    if subject.extra is not None:
        items.insert(0, subject.extra)
    return and_group(items, parsed.declared_operators)


def _parse_copula_predicate(subject: str, predicate: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    # --- Lokatyw ---------------------------------------------------------
    m = _LOCATIVE_RE.match(predicate)
    if m:
        prep = m.group(1).lower()
        gated = gate_binary_operator(LOCATIVE_OPERATORS[prep], ctx, "preposition", prep)
        if isinstance(gated, ParseError):
            return gated
        obj = normalize_entity(m.group(2), ctx.default_var)
        return and_group([item(gated.op, subject, obj)], gated.declared)

    # --- Dopełniacz: the REL of Y ----------------------------------------
    m = _GENITIVE_RE.match(predicate)
    if m:
        raw = m.group(1)
        op = sanitize_predicate(raw)
        gated = gate_binary_operator(op, ctx, "relation noun", raw)
        if isinstance(gated, ParseError):
            return gated
        of_entity = normalize_entity(m.group(2), ctx.default_var)
        return and_group([item(gated.op, subject, of_entity)], gated.declared)

    # --- Item predykatu --------------------------------------------------
    return parse_predicate_item(predicate, subject, ctx)
