"""
grammar/shared.py — wspólne prymitywy parsowania.

Bramka katalogu operatorów (arność + znane operatory), fraza typu,
podmiot (fraza nominalna), łączenie nazw własnych, predykat "have",
item predykatu (z rekurencją zdań względnych i imiesłowowych) oraz
predykat zdania względnego.

Kolejność w parse_predicate_item jest stała:
  1. zdanie względne      X that/who/which Y
  2. imiesłów             X <verbing|verbed> <prep> Y
  3. przymiotnik+przyimek afraid of wolves
  4. has/have             has long hair → hasProperty long_hair
  5. fraza typu           a dog → isA
  6. ostatni token        hasProperty
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from nl_model.constants import COPULA_VERBS, HAVE_VERBS, PRONOUNS
from nl_model.types import ClauseGroup, Item, ParseError, and_group, item

from .context import ParseContext
from .text import (
    capitalize,
    clean,
    detect_negation_prefix,
    is_generic_class_noun,
    is_plural,
    normalize_entity,
    normalize_verb,
    sanitize_predicate,
    singularize,
    split_coord,
)

# ---------------------------------------------------------------------------
# Bramka katalogu operatorów
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class GatedOperator:
    """Operator dopuszczony do emisji + nazwy do zadeklarowania."""
    op: str
    declared: tuple[str, ...] = ()


def disambiguate_binary_op(op: str) -> str:
    return f"{op}_rel"


def gate_binary_operator(
    op: str,
    ctx: ParseContext,
    source: str,
    raw: str,
) -> GatedOperator | ParseError:
    """
    Sprawdza operator użyty binarnie: konflikt arności → sufiks _rel,
    nieznany → auto-deklaracja albo ParseError.
    """
    effective = op
    declared: list[str] = []
    arity = ctx.catalog.expected_arity(op)
    if arity is not None and arity != 2:
        effective = disambiguate_binary_op(op)
        if ctx.auto_declare:
            declared.append(effective)
    if not ctx.catalog.is_known(effective) and effective not in declared:
        if not ctx.auto_declare:
            return ParseError(
                f"Unknown operator '{effective}' derived from {source} '{raw}'",
                unknown_operator=effective,
            )
        declared.append(effective)
    return GatedOperator(effective, tuple(declared))


# ---------------------------------------------------------------------------
# Frazy typu i obiektu
# ---------------------------------------------------------------------------

_INDEFINITE_RE = re.compile(r"^(?:a|an)\s+", re.IGNORECASE)
_DEFINITE_RE   = re.compile(r"^(?:a|an|the)\s+", re.IGNORECASE)


def parse_type_phrase(text: str) -> str | None:
    """'a big dogs' → 'BigDog': bez rodzajnika, liczba pojedyncza tylko ostatniego tokenu."""
    t = _INDEFINITE_RE.sub("", clean(text))
    tokens = [re.sub(r"[^A-Za-z0-9_]", "", w) for w in t.split(" ")]
    tokens = [w for w in tokens if w]
    if not tokens:
        return None
    tokens[-1] = singularize(tokens[-1])
    name = "".join(capitalize(w) for w in tokens)
    return "T" + name if name[0].isdigit() else name


def looks_like_type_phrase(text: str) -> bool:
    t = clean(text)
    if not t:
        return False
    if _INDEFINITE_RE.match(t) or t[0].isupper():
        return True
    tokens = t.split(" ")
    return len(tokens) >= 2 or is_plural(tokens[-1])


def normalize_object_arg(text: str, default_var: str) -> str:
    """Pojedynczy rzeczownik w liczbie mnogiej → typ, pozostałe → encja."""
    t = _DEFINITE_RE.sub("", clean(text))
    tokens = t.split(" ")
    if len(tokens) == 1 and is_plural(tokens[0]) and not is_generic_class_noun(tokens[0]):
        return capitalize(singularize(re.sub(r"[^A-Za-z0-9_]", "", tokens[0])))
    return normalize_entity(t, default_var)


_PROPER_NAMES_RE = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)\b")


def collapse_proper_names(text: str) -> str:
    """'Robert Lewandowski plays' → 'RobertLewandowski plays'."""
    return _PROPER_NAMES_RE.sub(lambda m: m.group(1).replace(" ", ""), text)


# ---------------------------------------------------------------------------
# Podmiot
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SubjectNP:
    """Argument podmiotu + opcjonalny warunek isA (dla 'a/an X' jako zmiennej)."""
    arg: str
    extra: Item | None = None


def parse_subject_np(text: str, default_var: str, indefinite_as_entity: bool) -> SubjectNP:
    t = clean(text)
    low = t.lower()
    if low in PRONOUNS:
        return SubjectNP(default_var)
    m = re.match(r"^(?:a|an)\s+(.+)$", t, re.IGNORECASE)
    if m:
        if indefinite_as_entity:
            return SubjectNP(normalize_entity(m.group(1), default_var))
        type_name = parse_type_phrase(m.group(1))
        extra = item("isA", default_var, type_name) if type_name else None
        return SubjectNP(default_var, extra)
    return SubjectNP(normalize_entity(re.sub(r"^the\s+", "", t, flags=re.IGNORECASE), default_var))


# ---------------------------------------------------------------------------
# have / has
# ---------------------------------------------------------------------------

_HAVE_DROP = frozenset({"a", "an", "the", "some", "any", "their", "his", "her", "its", "our", "my", "your"})


def parse_have_predicate(object_text: str) -> str:
    """
    Slug własności dla "has <NP>": bez rodzajników, tokeny w liczbie
    pojedynczej, max 10 tokenów (dłuższe → 5 pierwszych + 3 ostatnie).
    """
    t = _DEFINITE_RE.sub("", clean(object_text)).lower()
    tokens = [singularize(w) for w in t.split(" ") if w and w not in _HAVE_DROP]
    if len(tokens) > 10:
        tokens = tokens[:5] + tokens[-3:]
    slug = sanitize_predicate("_".join(tokens))
    if not slug and tokens:
        slug = sanitize_predicate(tokens[-1])
    return slug or "thing"


def have_item(subject: str, object_text: str, negated: bool = False) -> Item:
    """'no teeth' odwraca negację."""
    t = clean(object_text)
    m = re.match(r"^no\s+(.+)$", t, re.IGNORECASE)
    if m:
        negated = not negated
        t = m.group(1)
    return item("hasProperty", subject, parse_have_predicate(t), negated=negated)


# ---------------------------------------------------------------------------
# Item predykatu
# ---------------------------------------------------------------------------

_RELATIVE_RE   = re.compile(r"^(.+?)\s+(?:that|who|which)\s+(.+)$", re.IGNORECASE)
_PARTICIPLE_RE = re.compile(
    r"^(.+?)\s+([a-z]{3,}(?:ing|ed))\s+"
    r"((?:by|with|in|on|at|from|to|for|of|into|the|a|an)\b.*)$",
)
_ADJ_PREP_RE   = re.compile(r"^([a-z][a-z0-9_'-]*)\s+(of|to|with|from|for)\s+(.+)$", re.IGNORECASE)
_HAVE_RE       = re.compile(r"^(?:has|have)\s+(.+)$", re.IGNORECASE)


def parse_predicate_item(text: str, subject: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    neg = detect_negation_prefix(text)
    negated, t = neg.negated, neg.rest
    if not t:
        return None

    # 1. zdanie względne
    m = _RELATIVE_RE.match(t)
    if m:
        base = parse_type_phrase(m.group(1))
        if base:
            nested = parse_relative_predicate(m.group(2), subject, ctx)
            if isinstance(nested, ParseError):
                return nested
            if nested is not None:
                items = [item("isA", subject, base, negated=negated)]
                items += [i.flipped(negated) for i in nested.items]
                return and_group(items, nested.declared_operators)

    # 2. imiesłów
    m = _PARTICIPLE_RE.match(t)
    if m and looks_like_type_phrase(m.group(1)):
        base = parse_type_phrase(m.group(1))
        if base:
            tail = parse_relative_predicate(f"{m.group(2)} {m.group(3)}", subject, ctx)
            if isinstance(tail, ParseError):
                return tail
            if tail is not None:
                items = [item("isA", subject, base, negated=negated)]
                items += [i.flipped(negated) for i in tail.items]
                return and_group(items, tail.declared_operators)

    # 3. przymiotnik + przyimek
    m = _ADJ_PREP_RE.match(t)
    if m and not is_plural(m.group(1)):
        op = sanitize_predicate(m.group(1).lower())
        gated = gate_binary_operator(op, ctx, "adjective", m.group(1).lower())
        if isinstance(gated, ParseError):
            return gated
        obj = normalize_object_arg(m.group(3), ctx.default_var)
        return and_group([item(gated.op, subject, obj, negated=negated)], gated.declared)

    # 4. has / have
    m = _HAVE_RE.match(t)
    if m:
        return and_group([have_item(subject, m.group(1), negated)])

    # 5. fraza typu
    if looks_like_type_phrase(t):
        type_name = parse_type_phrase(t)
        if type_name:
            return and_group([item("isA", subject, type_name, negated=negated)])

    # 6. ostatni token jako własność
    prop = sanitize_predicate(t.split(" ")[-1].lower())
    if not prop:
        return None
    return and_group([item("hasProperty", subject, prop, negated=negated)])


# ---------------------------------------------------------------------------
# Predykat zdania względnego
# ---------------------------------------------------------------------------

_COPULA_PREFIX_RE = re.compile(r"^(?:is|are|was|were)\s+(not\s+)?(.+)$", re.IGNORECASE)
_HAVE_PREFIX_RE   = re.compile(r"^(?:has|have|had)\s+(.+)$", re.IGNORECASE)
_VP_DROP          = frozenset({"the", "a", "an"})


def _verb_phrase_slug(text: str) -> str:
    tokens = [w for w in clean(text).lower().split(" ") if w and w not in _VP_DROP]
    return sanitize_predicate("_".join(tokens))


def parse_relative_predicate(text: str, subject: str, ctx: ParseContext) -> ClauseGroup | None | ParseError:
    """
    Parsuje treść zdania względnego ("are tall and strong",
    "have part-time jobs", "work in the library", "do not bark").

    Człony bez czasownika dziedziczą tryb kopularny poprzedniego członu.
    """
    coord = split_coord(text)
    if coord.mixed or not coord.items:
        return None

    group = and_group([])
    copular = False
    for raw in coord.items:
        neg = detect_negation_prefix(raw)
        negated = neg.negated != coord.negated
        rest = neg.rest
        first = rest.split(" ")[0].lower() if rest else ""

        m = _COPULA_PREFIX_RE.match(rest)
        if m or (copular and _inherits_copula(rest, first, ctx)):
            if m:
                copular = True
                negated = negated != bool(m.group(1))
                rest = m.group(2)
            parsed = parse_predicate_item(rest, subject, ctx)
            if isinstance(parsed, ParseError):
                return parsed
            if parsed is None:
                return None
            group.items += [i.flipped(negated) for i in parsed.items]
            group.declare(parsed.declared_operators)
            continue

        copular = False
        m = _HAVE_PREFIX_RE.match(rest)
        if m:
            group.items.append(have_item(subject, m.group(1), negated))
            continue

        slug = _verb_phrase_slug(rest)
        if not slug:
            return None
        group.items.append(item("hasProperty", subject, slug, negated=negated))
    return group


def _inherits_copula(text: str, first: str, ctx: ParseContext) -> bool:
    """Człon bez własnego czasownika ("and strong", "and a student")."""
    if first in HAVE_VERBS or first in COPULA_VERBS:
        return False
    if _INDEFINITE_RE.match(text):
        return True
    if ctx.catalog.is_known(normalize_verb(first)) or ctx.catalog.is_known(first + "s"):
        return False
    return len(text.split(" ")) <= 2
