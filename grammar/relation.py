"""
grammar/relation.py — klauzule niekopularne.

Wzorce specjalne (parse_special_relation):
  [not] likes(Anne, Bob)                notacja funkcyjna (negLikes → negacja)
  the parent of Jack is Harry           parent(Harry, Jack)
  there is a road between A and B       road(A, B)

Klauzula relacji (parse_relation_clause):
  X went/walked/ran/moved to Y          at(X, Y)
  X picked up / grabbed / took Y        has(X, Y)
  X dropped / discarded / left Y        Not has(X, Y)
  czasownik na początku (bez podmiotu)  op(?x, Y)
  SUBJECT VERB OBJECT                   op(S, O)
  SUBJECT VERB                          hasProperty(S, verb)
"""

from __future__ import annotations

import re

from nl_model.constants import COPULA_VERBS, DETERMINERS, HAVE_VERBS, PARTICLES, PRONOUNS
from nl_model.types import ClauseGroup, ParseError, and_group, item

from .context import ParseContext
from .shared import (
    collapse_proper_names,
    gate_binary_operator,
    have_item,
    normalize_object_arg,
)
from .text import (
    clean,
    detect_negation_prefix,
    is_plural,
    normalize_entity,
    normalize_verb,
    sanitize_predicate,
)

# ---------------------------------------------------------------------------
# Wzorce specjalne
# ---------------------------------------------------------------------------

_FUNCTIONAL_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_'-]*)\((.*)\)$")
_OF_IS_RE      = re.compile(
    r"^(?:the\s+)?([A-Za-z_][A-Za-z0-9_'-]*)\s+of\s+(.+?)\s+(?:is|are|was|were)\s+(not\s+)?(.+)$",
    re.IGNORECASE,
)
_BETWEEN_RE    = re.compile(
    r"^there\s+(?:is|are)\s+(?:a|an)?\s*([A-Za-z_][A-Za-z0-9_'-]*)\s+between\s+(.+?)\s+and\s+(.+)$",
    re.IGNORECASE,
)


def _split_args(text: str) -> list[str]:
    args, depth, current = [], 0, []
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            args.append("".join(current))
            current = []
        else:
            current.append(ch)
    args.append("".join(current))
    return [a.strip() for a in args if a.strip()]


def _functional_operator(raw_fn: str, ctx: ParseContext) -> tuple[str, bool]:
    """
    negLikes / neglikes / neg_likes → ("likes", True).

    Prefiks "neg" odpada, gdy zostaje poprawna nazwa, chyba że pełna nazwa
    jest w katalogu, a reszta nie (negotiate).
    """
    op = sanitize_predicate(raw_fn)
    if not op.startswith("neg") or len(op) <= 3:
        return op, False
    base = sanitize_predicate(op[3:])
    if not base:
        return op, False
    base = base[:1].lower() + base[1:]
    if ctx.catalog.is_known(op) and not ctx.catalog.is_known(base):
        return op, False
    return base, True


def parse_special_relation(text: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    t = clean(text)

    # --- Notacja funkcyjna -----------------------------------------------
    prefix = detect_negation_prefix(t)
    m = _FUNCTIONAL_RE.match(prefix.rest)
    if m:
        raw_fn = m.group(1)
        op, negated = _functional_operator(raw_fn, ctx)
        negated = negated != prefix.negated
        args = [normalize_entity(a, ctx.default_var) for a in _split_args(m.group(2))]
        if not op or not args:
            return None
        if len(args) == 1:
            return and_group([item("hasProperty", args[0], op, negated=negated)])
        gated = gate_binary_operator(op, ctx, "function", raw_fn)
        if isinstance(gated, ParseError):
            return gated
        return and_group([item(gated.op, *args[:2], negated=negated)], gated.declared)

    # --- the REL of X is Y -----------------------------------------------
    m = _OF_IS_RE.match(t)
    if m and not is_plural(m.group(1)):
        raw = m.group(1)
        op = sanitize_predicate(raw)
        gated = gate_binary_operator(op, ctx, "relation noun", raw)
        if isinstance(gated, ParseError):
            return gated
        of_entity = normalize_entity(m.group(2), ctx.default_var)
        value = normalize_entity(m.group(4), ctx.default_var)
        return and_group([item(gated.op, value, of_entity, negated=bool(m.group(3)))], gated.declared)

    # --- there is a REL between A and B ----------------------------------
    m = _BETWEEN_RE.match(t)
    if m:
        raw = m.group(1)
        op = sanitize_predicate(raw)
        gated = gate_binary_operator(op, ctx, "existential noun", raw)
        if isinstance(gated, ParseError):
            return gated
        a = normalize_entity(m.group(2), ctx.default_var)
        b = normalize_entity(m.group(3), ctx.default_var)
        return and_group([item(gated.op, a, b)], gated.declared)

    return None


# ---------------------------------------------------------------------------
# Ruch i posiadanie
# ---------------------------------------------------------------------------

_MOVEMENT_RE = re.compile(
    r"^(.+?)\s+(?:went|travelled|traveled|journeyed|walked|ran|moved)\s+(?:back\s+)?to\s+(?:the\s+)?(.+)$",
    re.IGNORECASE,
)
_PICKUP_RE   = re.compile(r"^(.+?)\s+(?:picked\s+up|grabbed|took)\s+(?:the\s+|a\s+|an\s+)?(.+)$", re.IGNORECASE)
_DROP_RE     = re.compile(r"^(.+?)\s+(?:dropped|discarded|left)\s+(?:the\s+|a\s+|an\s+)?(.+)$", re.IGNORECASE)


def _event_clause(op: str, subject: str, obj: str, negated: bool, ctx: ParseContext) -> ClauseGroup | ParseError:
    gated = gate_binary_operator(op, ctx, "verb", op)
    if isinstance(gated, ParseError):
        return gated
    atom_args = (normalize_entity(subject, ctx.default_var), normalize_entity(obj, ctx.default_var))
    return and_group([item(gated.op, *atom_args, negated=negated)], gated.declared)


# ---------------------------------------------------------------------------
# Klauzula relacji
# ---------------------------------------------------------------------------

_AUX_NEG_RE   = re.compile(r"\b(?:does\s+not|do\s+not|did\s+not|doesn't|don't|didn't)\s+", re.IGNORECASE)
_IMPLICIT_RE  = re.compile(r"^([a-z][a-z0-9_'-]*)(?:\s+([a-z][a-z0-9_'-]*))?\s+(.+)$")
_SVO_RE       = re.compile(r"^(?:the\s+)?(.+?)\s+([A-Za-z_][A-Za-z0-9_'-]*)\s+(?:the\s+)?(.+)$", re.IGNORECASE)
_INTRANS_RE   = re.compile(r"^(?:the\s+)?(.+?)\s+([A-Za-z_][A-Za-z0-9_'-]*)$", re.IGNORECASE)
_NON_VERBS    = COPULA_VERBS | PRONOUNS | DETERMINERS | frozenset({"if", "then", "there", "not", "no"})


def strip_verb_s(verb: str) -> str:
    v = verb.lower()
    return v[:-1] if len(v) > 3 and v.endswith("s") and not v.endswith("ss") else v


def resolve_verb_operator(raw_verb: str, ctx: ParseContext) -> str:
    """likes/like → likes, chases → chases, needs → requires; nieznany → forma bazowa."""
    v = raw_verb.lower()
    base = strip_verb_s(v)
    op = sanitize_predicate(normalize_verb(base))
    for candidate in (op, sanitize_predicate(v), sanitize_predicate(base + "s")):
        if candidate and ctx.catalog.is_known(candidate):
            return candidate
    return op


def _is_known_verb(word: str, ctx: ParseContext) -> bool:
    return ctx.catalog.is_known(resolve_verb_operator(word, ctx))


def verb_clause(
    subject: str,
    raw_verb: str,
    obj_text: str,
    negated: bool,
    ctx: ParseContext,
    *,
    implicit: bool,
) -> ClauseGroup | ParseError | None:
    if raw_verb.lower() in HAVE_VERBS:
        return and_group([have_item(subject, obj_text, negated)])

    op = resolve_verb_operator(raw_verb, ctx)
    if not op:
        return None
    arity = ctx.catalog.expected_arity(op)
    if implicit and arity is not None and arity != 2:
        prop = sanitize_predicate(f"{op}_{clean(obj_text).lower().replace(' ', '_')}") or op
        return and_group([item("hasProperty", subject, prop, negated=negated)])

    gated = gate_binary_operator(op, ctx, "verb", raw_verb.lower())
    if isinstance(gated, ParseError):
        return gated
    obj = normalize_object_arg(obj_text, ctx.default_var)
    return and_group([item(gated.op, subject, obj, negated=negated)], gated.declared)


def parse_relation_clause(text: str, default_var: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    t = clean(text)
    if not t:
        return None

    # --- Ruch / posiadanie -----------------------------------------------
    m = _MOVEMENT_RE.match(t)
    if m:
        return _event_clause("at", m.group(1), m.group(2), False, ctx)
    m = _PICKUP_RE.match(t)
    if m:
        return _event_clause("has", m.group(1), m.group(2), False, ctx)
    m = _DROP_RE.match(t)
    if m:
        return _event_clause("has", m.group(1), m.group(2), True, ctx)

    # --- Negacja pomocnicza i nazwy własne -------------------------------
    negated = False
    stripped = _AUX_NEG_RE.sub("", t, count=1)
    if stripped != t:
        negated, t = True, clean(stripped)
    t = collapse_proper_names(t)

    # --- (a) czasownik na początku ---------------------------------------
    m = _IMPLICIT_RE.match(t)
    if m and m.group(1) not in _NON_VERBS:
        w1, w2, rest = m.group(1), m.group(2), m.group(3)
        if w2 in PARTICLES:
            return verb_clause(default_var, f"{w1}_{w2}", rest, negated, ctx, implicit=True)
        if w2 in DETERMINERS:
            return verb_clause(default_var, w1, rest, negated, ctx, implicit=True)
        if _is_known_verb(w1, ctx) or w1 in HAVE_VERBS:
            obj = f"{w2} {rest}" if w2 else rest
            return verb_clause(default_var, w1, obj, negated, ctx, implicit=True)

    # --- (b) SUBJECT VERB OBJECT -----------------------------------------
    m = _SVO_RE.match(t)
    if m:
        subject_raw, verb_raw, obj_raw = m.group(1), m.group(2), m.group(3)
        if (
            " " not in subject_raw
            and subject_raw.islower()
            and subject_raw not in _NON_VERBS
            and _is_known_verb(subject_raw, ctx)
        ):
            return verb_clause(
                default_var, subject_raw, f"{verb_raw} {obj_raw}", negated, ctx, implicit=True,
            )
        if verb_raw.lower() in COPULA_VERBS:
            return None
        subject = normalize_entity(subject_raw, default_var)
        return verb_clause(subject, verb_raw, obj_raw, negated, ctx, implicit=False)

    # --- (c) SUBJECT VERB ------------------------------------------------
    m = _INTRANS_RE.match(t)
    if m:
        if m.group(2).lower() in COPULA_VERBS:
            return None
        subject = normalize_entity(m.group(1), default_var)
        prop = sanitize_predicate(strip_verb_s(m.group(2)))
        if not prop:
            return None
        return and_group([item("hasProperty", subject, prop, negated=negated)])

    return None
