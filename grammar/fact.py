"""
grammar/fact.py — parser zdań faktów.

Kolejność (pierwsze dopasowanie wygrywa):
  1. some X are Y / some X (do not) have Y   → encja exists_ent_<hash>
  2. relacja specjalna (funkcyjna, of-is, between)
  3. egzystencjalna kopuła "there is a TYPE"
  4. kopuła ze skoordynowanym predykatem      "X is A and B"
  5. kopuła
  6. klauzula relacji
Fakty ze zmiennymi (?x) są odrzucane, chyba że allow_variable_facts.
"""

from __future__ import annotations

import re

from nl_model.types import ClauseGroup, Connective, ParseError, SentenceResult, and_group, item

from .context import ParseContext
from .copula import parse_copula_clause
from .emit import fact_lines
from .existentials import existential_entity, parse_existential_copula
from .quantifiers import (
    emit_subject_descriptor_items,
    parse_copula_predicates,
    parse_quantified_subject_descriptor,
)
from .relation import parse_relation_clause, parse_special_relation
from .shared import have_item
from .text import clean, split_coord

_SOME_COPULA_RE = re.compile(r"^some\s+(.+?)\s+(?:are|is)\s+(.+)$", re.IGNORECASE)
_SOME_HAVE_RE   = re.compile(
    r"^some\s+(.+?)\s+(do\s+not\s+|don't\s+|does\s+not\s+|doesn't\s+)?(?:have|has)\s+(.+)$",
    re.IGNORECASE,
)
_COPULA_LIST_RE = re.compile(r"^(.*?)\s+(is|are|was|were)\s+(.+)$", re.IGNORECASE)
_CLAUSE_START_RE = re.compile(r"^(?:a|an|not|no)\b", re.IGNORECASE)


def _accept(group: ClauseGroup | ParseError | None, ctx: ParseContext) -> SentenceResult | ParseError | None:
    if group is None or isinstance(group, ParseError):
        return group
    if not group.items:
        return None
    if group.has_variable and not ctx.options.allow_variable_facts:
        return None
    return SentenceResult(fact_lines(group.items, ctx.refs), list(group.declared_operators))


def parse_fact_sentence(sentence: str, ctx: ParseContext) -> SentenceResult | ParseError | None:
    s = clean(sentence)
    if not s:
        return None

    # --- 1. some X ... ---------------------------------------------------
    m = _SOME_COPULA_RE.match(s)
    if m:
        return _accept(_some_copula(s, m.group(1), m.group(2), ctx), ctx)
    m = _SOME_HAVE_RE.match(s)
    if m:
        return _accept(_some_have(s, m.group(1), bool(m.group(2)), m.group(3), ctx), ctx)

    # --- 2. relacja specjalna --------------------------------------------
    special = parse_special_relation(s, ctx)
    if special is not None:
        return _accept(special, ctx)

    # --- 3. there is a TYPE ----------------------------------------------
    claim = parse_existential_copula(s)
    if claim is not None:
        entity = existential_entity(f"{claim.type_name}:{s}")
        return _accept(and_group([item("isA", entity, claim.type_name, negated=claim.negated)]), ctx)

    # --- 4. kopuła ze skoordynowanym predykatem --------------------------
    m = _COPULA_LIST_RE.match(s)
    if m:
        coord = split_coord(m.group(3))
        if coord.mixed or (coord.op == Connective.OR and len(coord.items) > 1):
            return None
        if len(coord.items) > 1:
            return _accept(_copula_list(m.group(1), m.group(2), coord.items, coord.negated, ctx), ctx)

    # --- 5. kopuła -------------------------------------------------------
    copula = parse_copula_clause(s, ctx.default_var, ctx)
    if copula is not None:
        return _accept(copula, ctx)

    # --- 6. relacja ------------------------------------------------------
    return _accept(parse_relation_clause(s, ctx.default_var, ctx), ctx)


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _some_copula(sentence: str, subject_text: str, predicate: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    descriptor = parse_quantified_subject_descriptor(subject_text)
    if descriptor is None:
        return None
    entity = existential_entity(f"some:{sentence}")
    group = emit_subject_descriptor_items(entity, descriptor, ctx)
    if isinstance(group, ParseError):
        return group
    predicates = parse_copula_predicates(entity, predicate, ctx)
    if predicates is None or isinstance(predicates, ParseError):
        return predicates
    group.items += predicates.items
    group.declare(predicates.declared_operators)
    return group


def _some_have(sentence: str, subject_text: str, negated: bool, obj: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    descriptor = parse_quantified_subject_descriptor(subject_text)
    if descriptor is None:
        return None
    entity = existential_entity(f"some:{sentence}")
    group = emit_subject_descriptor_items(entity, descriptor, ctx)
    if isinstance(group, ParseError):
        return group
    group.items.append(have_item(entity, obj, negated))
    return group


def _copula_list(
    subject: str,
    verb: str,
    parts: list[str],
    negated: bool,
    ctx: ParseContext,
) -> ClauseGroup | ParseError | None:
    """
    "Wren is a numpus, Wren is a brimpus, and Wren is not a sterpus":
    każdy człon najpierw jako samodzielna klauzula, potem z podmiotem.
    """
    group = and_group([])
    for part in parts:
        parsed = None
        if not _CLAUSE_START_RE.match(part):
            parsed = parse_copula_clause(part, ctx.default_var, ctx)
            if parsed is None:
                parsed = parse_special_relation(part, ctx)
        if parsed is None:
            parsed = parse_copula_clause(f"{subject} {verb} {part}", ctx.default_var, ctx)
        if parsed is None or isinstance(parsed, ParseError):
            return parsed
        group.items += [i.flipped(negated) for i in parsed.items]
        group.declare(parsed.declared_operators)
    return group
