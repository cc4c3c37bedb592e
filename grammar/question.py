"""
grammar/question.py — tłumaczenie pytań na cel DSL.

translate_question(question, ctx) -> str | None

Wynik: linie nagłówka (// action:query|prove, // declare_ops:..,
// goal_logic:And|Or) + linie celów "@goal:goal ...", "@goal1:goal ...".

Kolejność:
  1. if ... then ...                 @goal:goal Implies (a) (b)
  2. X is neither A nor B            // goal_logic:And + Not (...)
  3. Some/No X are Y, Some X have Y  Exists ?x (And ...)
  4. inwersja (Is X ..?, Does X ..?, Is there ..?)
  5. What is X afraid of? / What color is X? / What is X? / Who ..? / Where is X?
  6. there is a TYPE                 isA ?x Type
  7. pytania złożone (opcja)          with-clause, lista predykatów
  8. cel relacji specjalnej / kopuły / relacji
  9. cel nieprzezroczysty (opcja)
"""

from __future__ import annotations

import re

from nl_model.constants import DETERMINERS, LOCATIVE_OPERATORS
from nl_model.types import ClauseGroup, Connective, Item, ParseError, and_group

from .context import ParseContext
from .copula import parse_copula_clause
from .existentials import parse_existential_copula
from .quantifiers import (
    emit_subject_descriptor_items,
    parse_copula_predicates,
    parse_quantified_subject_descriptor,
    split_at_copula,
)
from .relation import parse_relation_clause, parse_special_relation
from .rule import parse_clause_group
from .shared import have_item, parse_subject_np
from .text import clean, normalize_entity, sanitize_predicate, split_coord, stable_hash
from .translate import strip_annotation

# ---------------------------------------------------------------------------
# Formatowanie wyrażeń celu
# ---------------------------------------------------------------------------

def _item_expr(i: Item) -> str:
    return f"(Not ({i.atom}))" if i.negated else f"({i.atom})"


def _group_expr(group: ClauseGroup) -> str:
    if len(group.items) == 1:
        return _item_expr(group.items[0])
    return f"({group.op} " + " ".join(_item_expr(i) for i in group.items) + ")"


def _goal_body(i: Item) -> str:
    return f"Not ({i.atom})" if i.negated else str(i.atom)


def _goal_name(index: int) -> str:
    return "@goal:goal" if index == 0 else f"@goal{index}:goal"


def _render(goal_lines: list[str], declared: list[str] | None = None, *,
            action: str | None = None, logic: Connective | None = None) -> str:
    header: list[str] = []
    if action is None and any("?" in line for line in goal_lines):
        action = "query"
    if action:
        header.append(f"// action:{action}")
    if declared:
        header.append("// declare_ops:" + ",".join(declared))
    if logic is not None and len(goal_lines) > 1:
        header.append(f"// goal_logic:{logic}")
    return "\n".join(header + goal_lines)


def _group_goals(group: ClauseGroup) -> str:
    lines = [f"{_goal_name(n)} {_goal_body(i)}" for n, i in enumerate(group.items)]
    return _render(lines, group.declared_operators, logic=group.op)


def _usable(group: ClauseGroup | ParseError | None) -> ClauseGroup | None:
    if group is None or isinstance(group, ParseError) or not group.items:
        return None
    return group


# ---------------------------------------------------------------------------
# 1-3. Formy logiczne
# ---------------------------------------------------------------------------

_IF_THEN_RE  = re.compile(r"^(?:is\s+it\s+true\s+that\s+)?if\s+(.+?)\s*,?\s+then\s+(.+)$", re.IGNORECASE)
_NEITHER_RE  = re.compile(
    r"^(?:(?:is|are|was|were)\s+(.+?)|(.+?)\s+(?:is|are|was|were))\s+neither\s+(.+?)\s+nor\s+(.+)$",
    re.IGNORECASE,
)
_SOME_HAVE_RE = re.compile(
    r"^(some|no)\s+(.+?)\s+(do\s+not\s+|don't\s+|does\s+not\s+|doesn't\s+)?(?:have|has)\s+(.+)$",
    re.IGNORECASE,
)
_QUANT_RE    = re.compile(r"^(some|no)\s+(.+)$", re.IGNORECASE)


def _if_then(q: str, ctx: ParseContext) -> str | None:
    m = _IF_THEN_RE.match(q)
    if not m:
        return None
    cond = _usable(parse_clause_group(m.group(1), ctx))
    cons = _usable(parse_clause_group(m.group(2), ctx))
    if cond is None or cons is None:
        return None
    declared = list(dict.fromkeys(cond.declared_operators + cons.declared_operators))
    return _render([f"@goal:goal Implies {_group_expr(cond)} {_group_expr(cons)}"], declared, action="prove")


def _neither_nor(q: str, ctx: ParseContext) -> str | None:
    m = _NEITHER_RE.match(q)
    if not m:
        return None
    subject = m.group(1) or m.group(2)
    entity_ctx = ctx.with_options(indefinite_as_entity=True)
    lines: list[str] = []
    declared: list[str] = []
    for part in (m.group(3), m.group(4)):
        group = _usable(parse_copula_clause(f"{subject} is {part}", ctx.default_var, entity_ctx))
        if group is None:
            continue
        for i in group.items:
            lines.append(f"{_goal_name(len(lines))} {_goal_body(i.flipped())}")
        declared += group.declared_operators
    if not lines:
        return None
    return _render(lines, declared, logic=Connective.AND)


def _quantified(q: str, ctx: ParseContext) -> str | None:
    var = ctx.default_var
    m = _SOME_HAVE_RE.match(q)
    if m:
        quantifier, subject, negated, obj = m.group(1).lower(), m.group(2), bool(m.group(3)), m.group(4)
        descriptor = parse_quantified_subject_descriptor(subject)
        if descriptor is None:
            return None
        group = _usable(emit_subject_descriptor_items(var, descriptor, ctx)) or and_group([])
        group.items.append(have_item(var, obj, negated))
        return _exists_goal(quantifier, group, var)

    m = _QUANT_RE.match(q)
    if not m:
        return None
    split = split_at_copula(m.group(2))
    if split is None:
        return None
    descriptor = parse_quantified_subject_descriptor(split[0])
    if descriptor is None:
        return None
    subject_group = _usable(emit_subject_descriptor_items(var, descriptor, ctx))
    predicates = _usable(parse_copula_predicates(var, split[1], ctx))
    if subject_group is None or predicates is None:
        return None
    subject_group.items += predicates.items
    subject_group.declare(predicates.declared_operators)
    return _exists_goal(m.group(1).lower(), subject_group, var)


def _exists_goal(quantifier: str, group: ClauseGroup, var: str) -> str:
    body = " ".join(_item_expr(i) for i in group.items)
    conj = f"(And {body})" if len(group.items) > 1 else body
    expr = f"Exists {var} {conj}"
    if quantifier == "no":
        expr = f"Not ({expr})"
    return _render([f"@goal:goal {expr}"], group.declared_operators, action="prove")


# ---------------------------------------------------------------------------
# 4. Inwersja
# ---------------------------------------------------------------------------

_IS_THERE_RE = re.compile(r"^(is|are|was|were)\s+there\s+(.+)$", re.IGNORECASE)
_COPULA_Q_RE = re.compile(r"^(is|are|was|were)\s+(.+)$", re.IGNORECASE)
_DO_Q_RE     = re.compile(r"^(?:does|do|did)\s+(.+)$", re.IGNORECASE)
_PRED_START  = DETERMINERS | frozenset({"not", "neither"}) | frozenset(LOCATIVE_OPERATORS)


def invert_question(q: str) -> str:
    """'Is Anne an animal' → 'Anne is an animal'; 'Does Anne like Bob' → 'Anne like Bob'."""
    m = _IS_THERE_RE.match(q)
    if m:
        return f"there {m.group(1).lower()} {m.group(2)}"
    m = _COPULA_Q_RE.match(q)
    if m:
        verb, rest = m.group(1).lower(), m.group(2)
        subject, predicate = _split_inverted(rest)
        return f"{subject} {verb} {predicate}" if predicate else q
    m = _DO_Q_RE.match(q)
    if m:
        return m.group(1)
    return q


def _split_inverted(rest: str) -> tuple[str, str]:
    tokens = rest.split(" ")
    if len(tokens) < 2:
        return rest, ""
    for i in range(1, len(tokens)):
        if tokens[i].lower() in _PRED_START:
            return " ".join(tokens[:i]), " ".join(tokens[i:])
    if tokens[0].lower() in DETERMINERS:
        return " ".join(tokens[:2]), " ".join(tokens[2:])
    n = 1
    while n < len(tokens) - 1 and tokens[n][:1].isupper():
        n += 1
    return " ".join(tokens[:n]), " ".join(tokens[n:])


# ---------------------------------------------------------------------------
# 5. Pytania WH
# ---------------------------------------------------------------------------

_WHAT_OF_RE   = re.compile(
    r"^what\s+(?:is|are|was|were)\s+(.+?)\s+([a-z][a-z0-9_'-]*)\s+(of|to|with|from|for)$",
    re.IGNORECASE,
)
_WHAT_PROP_RE = re.compile(
    r"^what\s+(color|colour|size|shape|state|status|kind|type)\s+(?:is|are|was|were)\s+(.+)$",
    re.IGNORECASE,
)
_WHAT_IS_RE   = re.compile(r"^(?:what|who)\s+(?:is|are|was|were)\s+(.+)$", re.IGNORECASE)
_GENITIVE_RE  = re.compile(r"^the\s+([A-Za-z_][A-Za-z0-9_'-]*)\s+of\s+(.+)$", re.IGNORECASE)
_WHERE_RE     = re.compile(r"^where\s+(?:is|are|was|were)\s+(.+)$", re.IGNORECASE)
_WHO_VERB_RE  = re.compile(r"^who\s+([a-z][a-z0-9_'-]*)\s+(.+)$", re.IGNORECASE)


def _wh_question(q: str, ctx: ParseContext) -> str | None:
    var = ctx.default_var

    m = _WHAT_OF_RE.match(q)
    if m:
        subject = normalize_entity(re.sub(r"^the\s+", "", m.group(1), flags=re.IGNORECASE), var)
        op = sanitize_predicate(m.group(2).lower())
        declared = [] if ctx.catalog.is_known(op) else [op]
        return _render([f"@goal:goal {op} {subject} {var}"], declared, action="query")

    m = _WHAT_PROP_RE.match(q)
    if m:
        subject = normalize_entity(m.group(2), var)
        op = "isA" if m.group(1).lower() in ("kind", "type") else "hasProperty"
        return _render([f"@goal:goal {op} {subject} {var}"], action="query")

    m = _WHERE_RE.match(q)
    if m:
        return _render([f"@goal:goal at {normalize_entity(m.group(1), var)} {var}"], action="query")

    m = _WHAT_IS_RE.match(q)
    if m:
        g = _GENITIVE_RE.match(m.group(1))
        if g:
            op = sanitize_predicate(g.group(1))
            declared = [] if ctx.catalog.is_known(op) else [op]
            target = normalize_entity(g.group(2), var)
            return _render([f"@goal:goal {op} {var} {target}"], declared, action="query")
        return _render([f"@goal:goal isA {normalize_entity(m.group(1), var)} {var}"], action="query")

    m = _WHO_VERB_RE.match(q)
    if m and m.group(1).lower() not in ("is", "are", "was", "were"):
        group = _usable(parse_relation_clause(f"{var} {m.group(1)} {m.group(2)}", var, ctx))
        if group is not None:
            return _group_goals(group)
    return None


# ---------------------------------------------------------------------------
# 7. Pytania złożone
# ---------------------------------------------------------------------------

_WITH_RE        = re.compile(r"^(.+?)\s+(is|are|was|were)\s+(.+?)\s+with\s+(.+)$", re.IGNORECASE)
_COPULA_LIST_RE = re.compile(r"^(.*?)\s+(is|are|was|were)\s+(.+)$", re.IGNORECASE)


def _compound(q: str, ctx: ParseContext) -> str | None:
    entity_ctx = ctx.with_options(indefinite_as_entity=True)

    m = _WITH_RE.match(q)
    if m:
        subject, verb, predicate, obj = m.group(1), m.group(2), m.group(3), m.group(4)
        head = _usable(parse_copula_clause(f"{subject} {verb} {predicate}", ctx.default_var, entity_ctx))
        if head is not None:
            arg = parse_subject_np(subject, ctx.default_var, True).arg
            head.items.append(have_item(arg, obj))
            return _group_goals(head)

    m = _COPULA_LIST_RE.match(q)
    if not m:
        return None
    coord = split_coord(m.group(3))
    if coord.mixed or len(coord.items) < 2:
        return None
    group = ClauseGroup(coord.op)
    for part in coord.items:
        parsed = _usable(parse_copula_clause(f"{m.group(1)} {m.group(2)} {part}", ctx.default_var, entity_ctx))
        if parsed is None:
            return None
        group.items += [i.flipped(coord.negated) for i in parsed.items]
        group.declare(parsed.declared_operators)
    return _group_goals(group)


# ---------------------------------------------------------------------------
# translate_question
# ---------------------------------------------------------------------------

def _opaque(q: str, ctx: ParseContext) -> str | None:
    if not ctx.options.fallback_opaque_questions:
        return None
    return f"@goal:goal hasProperty KB opaque_q_{stable_hash(q)}"


def translate_question(question: str, ctx: ParseContext | None = None) -> str | None:
    ctx = ctx or ParseContext.create()
    q = clean(strip_annotation(question))
    if not q:
        return _opaque(q, ctx)

    for strategy in (_if_then, _neither_nor, _quantified):
        goal = strategy(q, ctx)
        if goal is not None:
            return goal

    q = clean(invert_question(q))

    goal = _wh_question(q, ctx)
    if goal is not None:
        return goal

    claim = parse_existential_copula(q)
    if claim is not None:
        if claim.negated:
            return _opaque(q, ctx)
        return _render([f"@goal:goal isA {ctx.default_var} {claim.type_name}"])

    if ctx.options.expand_compound_questions:
        goal = _compound(q, ctx)
        if goal is not None:
            return goal

    entity_ctx = ctx.with_options(indefinite_as_entity=True)
    for parse in (
        lambda t: parse_special_relation(t, ctx),
        lambda t: parse_copula_clause(t, ctx.default_var, entity_ctx),
        lambda t: parse_relation_clause(t, ctx.default_var, ctx),
    ):
        group = _usable(parse(q))
        if group is not None:
            return _group_goals(group)

    return _opaque(q, ctx)
