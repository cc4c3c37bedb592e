"""
grammar/rule.py — parser zdań reguł.

Każdy wzorzec daje dwa bloki referencji (@ant..., @cons...) i linię
"Implies $ant $cons". Wzorce są sprawdzane w stałej kolejności
(RULE_PATTERNS); handler zwracający None oddaje zdanie następnemu
wzorcowi, ParseError kończy parsowanie.

   1. A/An X is/are Y
   2. A/An X VERB [OBJ]
   3. No/None X are Y
   4. No/None X (do not) have Y
   5. If COND then CONS
   6. Everything that is X is Y
   7. All/Every/Each X are/is Y
   8. All/Every/Each PLURAL VERB [OBJ]  (ścisły, potem luźny)
   9. Xs are Ys                         (oba rzeczowniki typu)
  10. Xs are Y / Xs VERB [OBJ]
  11. PROP1 PROP2 things/people are Y
"""

from __future__ import annotations

import re
from typing import Callable, TypeAlias

from nl_model.constants import COPULA_VERBS, DETERMINERS, HAVE_VERBS
from nl_model.types import (
    ClauseGroup,
    Connective,
    ParseError,
    SentenceResult,
    and_group,
    item,
)

from .context import ParseContext
from .copula import parse_copula_clause
from .emit import rule_result
from .quantifiers import (
    emit_subject_descriptor_items,
    parse_copula_predicates,
    parse_quantified_subject_descriptor,
    split_at_copula,
)
from .relation import (
    parse_relation_clause,
    parse_special_relation,
    resolve_verb_operator,
    strip_verb_s,
    verb_clause,
)
from .shared import have_item, parse_type_phrase
from .text import (
    capitalize,
    clean,
    is_generic_class_noun,
    is_plural,
    is_type_noun,
    sanitize_predicate,
    singularize,
    split_coord,
)

GroupResult: TypeAlias = ClauseGroup | ParseError | None
RuleResult: TypeAlias = SentenceResult | ParseError | None

_RELATIVE_WORDS = frozenset({"who", "that", "which"})


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _rule(condition: GroupResult, consequent: GroupResult, ctx: ParseContext) -> RuleResult:
    if isinstance(condition, ParseError):
        return condition
    if isinstance(consequent, ParseError):
        return consequent
    if condition is None or consequent is None or not condition.items or not consequent.items:
        return None
    return rule_result(condition, consequent, ctx.refs)


def negate_group(group: GroupResult) -> GroupResult:
    """De Morgan: NOT (a AND b) → (NOT a) OR (NOT b)."""
    if group is None or isinstance(group, ParseError):
        return group
    op = Connective.OR if group.op == Connective.AND else Connective.AND
    negated = ClauseGroup(op, [i.flipped() for i in group.items])
    negated.declare(group.declared_operators)
    return negated


def _descriptor_group(text: str, ctx: ParseContext) -> GroupResult:
    descriptor = parse_quantified_subject_descriptor(text)
    if descriptor is None:
        return None
    return emit_subject_descriptor_items(ctx.default_var, descriptor, ctx)


def _predicates(text: str, ctx: ParseContext) -> GroupResult:
    """Predykat konsekwentu; wiodące "not" neguje całą grupę."""
    neg = re.match(r"^not\s+(.+)$", clean(text), re.IGNORECASE)
    if neg:
        return negate_group(parse_copula_predicates(ctx.default_var, neg.group(1), ctx))
    return parse_copula_predicates(ctx.default_var, text, ctx)


def verb_consequent(
    subject: str,
    verb: str,
    obj: str | None,
    negated: bool,
    ctx: ParseContext,
) -> GroupResult:
    """Konsekwent czasownikowy: have → własność, bez obiektu → hasProperty(verb)."""
    v = verb.lower()
    if v in COPULA_VERBS or v in _RELATIVE_WORDS:
        return None
    if obj:
        if v in HAVE_VERBS:
            return and_group([have_item(subject, obj, negated)])
        return verb_clause(subject, verb, obj, negated, ctx, implicit=True)
    prop = sanitize_predicate(strip_verb_s(v))
    if not prop:
        return None
    return and_group([item("hasProperty", subject, prop, negated=negated)])


_VERB_NEG_RE = re.compile(r"^(?:(?:do|does)\s+not|don't|doesn't)\s+(.+)$", re.IGNORECASE)


def _split_verb_phrase(text: str) -> tuple[str, str | None, bool] | None:
    """'do not chase cats' → ('chase', 'cats', True)."""
    t = clean(text)
    negated = False
    m = _VERB_NEG_RE.match(t)
    if m:
        t, negated = m.group(1), True
    tokens = t.split(" ")
    if not tokens or not tokens[0]:
        return None
    obj = " ".join(tokens[1:]) or None
    return tokens[0], obj, negated


# ---------------------------------------------------------------------------
# Grupa klauzul (if ... then ...)
# ---------------------------------------------------------------------------

_SUBJECT_RE = re.compile(
    r"^(.+?)\s+(?:is|are|was|were|has|have|had|does|do|did|can|cannot)\b",
    re.IGNORECASE,
)
_SUBJECTLESS_STARTS = COPULA_VERBS | HAVE_VERBS | frozenset({"does", "do", "did", "not", "can", "cannot"})


def _needs_subject(text: str, ctx: ParseContext) -> bool:
    first = text.split(" ")[0]
    if not first.islower():
        return False
    if first in _SUBJECTLESS_STARTS:
        return True
    return ctx.catalog.is_known(resolve_verb_operator(first, ctx))


def _parse_clause(text: str, ctx: ParseContext) -> GroupResult:
    """Pierwszy parser, który coś zwróci, wygrywa; ParseError przerywa od razu."""
    for parser in (
        lambda t: parse_special_relation(t, ctx),
        lambda t: parse_copula_clause(t, ctx.default_var, ctx),
        lambda t: parse_relation_clause(t, ctx.default_var, ctx),
    ):
        parsed = parser(text)
        if parsed is not None:
            return parsed
    return None


def _clause_subject(text: str, ctx: ParseContext) -> str:
    """Podmiot członu: tekst przed łącznikiem/posiłkowym albo przed pierwszym znanym czasownikiem."""
    m = _SUBJECT_RE.match(text)
    if m:
        return m.group(1)
    tokens = text.split(" ")
    for i, word in enumerate(tokens[1:], start=1):
        w = word.lower()
        if tokens[i - 1].lower() in DETERMINERS:
            continue
        if w in HAVE_VERBS or ctx.catalog.is_known(resolve_verb_operator(w, ctx)):
            return " ".join(tokens[:i])
    return tokens[0]


def parse_clause_group(text: str, ctx: ParseContext) -> GroupResult:
    """
    Skoordynowane klauzule; człon bez podmiotu ("and are B") dostaje
    podmiot poprzedniego członu.
    """
    coord = split_coord(text)
    if coord.mixed or not coord.items:
        return None
    group = ClauseGroup(coord.op)
    last_subject: str | None = None
    for raw in coord.items:
        candidate = raw
        if last_subject and _needs_subject(raw, ctx):
            candidate = f"{last_subject} {raw}"
        parsed = _parse_clause(candidate, ctx)
        if parsed is None or isinstance(parsed, ParseError):
            return parsed
        group.items += [i.flipped(coord.negated) for i in parsed.items]
        group.declare(parsed.declared_operators)
        last_subject = _clause_subject(candidate, ctx)
    return group


# ---------------------------------------------------------------------------
# Handlery wzorców
# ---------------------------------------------------------------------------

def _indefinite_copula(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    split = split_at_copula(m.group(1))
    if split is None:
        return None
    subject, predicate = split
    return _rule(_descriptor_group(subject, ctx), _predicates(predicate, ctx), ctx)


def _indefinite_verb(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    type_name = parse_type_phrase(m.group(1))
    parts = _split_verb_phrase(m.group(2))
    if not type_name or parts is None:
        return None
    verb, obj, negated = parts
    condition = and_group([item("isA", ctx.default_var, type_name)])
    return _rule(condition, verb_consequent(ctx.default_var, verb, obj, negated, ctx), ctx)


def _no_copula(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    split = split_at_copula(m.group(1))
    if split is None:
        return None
    subject, predicate = split
    return _rule(
        _descriptor_group(subject, ctx),
        negate_group(parse_copula_predicates(ctx.default_var, predicate, ctx)),
        ctx,
    )


def _no_have(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    double_negative = bool(m.group(2))
    consequent = and_group([have_item(ctx.default_var, m.group(3), negated=not double_negative)])
    return _rule(_descriptor_group(m.group(1), ctx), consequent, ctx)


def _if_then(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    condition = parse_clause_group(m.group(1), ctx)
    if isinstance(condition, ParseError) or condition is None:
        return condition
    return _rule(condition, parse_clause_group(m.group(2), ctx), ctx)


def _everything_that(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    return _rule(
        parse_copula_predicates(ctx.default_var, m.group(1), ctx),
        _predicates(m.group(2), ctx),
        ctx,
    )


def _quantified_copula(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    split = split_at_copula(m.group(2))
    if split is None:
        return None
    subject, predicate = split
    return _rule(_descriptor_group(subject, ctx), _predicates(predicate, ctx), ctx)


def _quantified_verb(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    quantifier = m.group(1).lower()
    tokens = clean(m.group(2)).split(" ")
    if len(tokens) < 2:
        return None

    # --- Ścisły: all HEADS VERB [OBJ] ------------------------------------
    strict: RuleResult = None
    head = tokens[0]
    if not is_generic_class_noun(head) and (quantifier != "all" or is_plural(head)):
        parts = _split_verb_phrase(" ".join(tokens[1:]))
        if parts is not None:
            verb, obj, negated = parts
            type_name = capitalize(singularize(re.sub(r"[^A-Za-z0-9_]", "", head)))
            condition = and_group([item("isA", ctx.default_var, type_name)])
            strict = _rule(condition, verb_consequent(ctx.default_var, verb, obj, negated, ctx), ctx)
            if isinstance(strict, SentenceResult):
                return strict

    # --- Luźny: głowa gdziekolwiek w dłuższej frazie podmiotu ------------
    for i in range(1, len(tokens) - 1):
        if not _is_loose_head(tokens[i], quantifier, ctx):
            continue
        if tokens[i + 1].lower() in COPULA_VERBS | _RELATIVE_WORDS:
            continue
        parts = _split_verb_phrase(" ".join(tokens[i + 1:]))
        if parts is None:
            continue
        verb, obj, negated = parts
        loose = _rule(
            _descriptor_group(" ".join(tokens[:i + 1]), ctx),
            verb_consequent(ctx.default_var, verb, obj, negated, ctx),
            ctx,
        )
        if loose is not None:
            return loose
    return strict


def _is_loose_head(word: str, quantifier: str, ctx: ParseContext) -> bool:
    if quantifier == "all":
        return is_type_noun(word)
    return (
        not is_generic_class_noun(word)
        and not is_plural(word)
        and not ctx.catalog.is_known(resolve_verb_operator(word, ctx))
    )


def _bare_plural_copula(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    if not is_type_noun(m.group(1)):
        return None
    type_name = capitalize(singularize(m.group(1)))
    condition = and_group([item("isA", ctx.default_var, type_name)])
    return _rule(condition, _predicates(m.group(2), ctx), ctx)


def _bare_plural_verb(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    subject, rest = m.group(1), m.group(2)
    if not is_type_noun(subject):
        return None
    parts = _split_verb_phrase(rest)
    if parts is None:
        return None
    verb, obj, negated = parts
    v = verb.lower()
    # czasownik w 3. os. l.poj. ("James likes") → podmiot nie jest liczbą mnogą
    if v.endswith("s") and not v.endswith("ss") and v not in HAVE_VERBS:
        return None
    if obj is not None and v not in HAVE_VERBS and not ctx.catalog.is_known(resolve_verb_operator(v, ctx)):
        return None
    condition = and_group([item("isA", ctx.default_var, capitalize(singularize(subject)))])
    return _rule(condition, verb_consequent(ctx.default_var, verb, obj, negated, ctx), ctx)


def _implicit_class(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    props = [sanitize_predicate(p.lower()) for p in re.split(r"[,\s]+", m.group(1)) if p]
    props = [p for p in props if p]
    if not props or len(props) > 4:
        return None
    condition = and_group([item("hasProperty", ctx.default_var, p) for p in props])
    if m.group(2).lower() == "people":
        condition.items.insert(0, item("isA", ctx.default_var, "Person"))
    return _rule(condition, _predicates(m.group(3), ctx), ctx)


def _subsumption(m: re.Match[str], ctx: ParseContext) -> RuleResult:
    sub, sup = m.group(1), m.group(2)
    if not (is_type_noun(sub) and is_type_noun(sup)):
        return None
    condition  = and_group([item("isA", ctx.default_var, capitalize(singularize(sub)))])
    consequent = and_group([item("isA", ctx.default_var, capitalize(singularize(sup)))])
    return _rule(condition, consequent, ctx)


# ---------------------------------------------------------------------------
# Tablica precedencji
# ---------------------------------------------------------------------------

_I = re.IGNORECASE

RULE_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str], ParseContext], RuleResult]]] = [
    (re.compile(r"^(?:a|an)\s+(.+\s+(?:is|are)\s+.+)$", _I),                                _indefinite_copula),
    (re.compile(r"^(?:a|an)\s+([A-Za-z][\w-]*)\s+(.+)$", _I),                               _indefinite_verb),
    (re.compile(r"^(?:no|none\s+of\s+the|none)\s+(.+\s+(?:are|is)\s+.+)$", _I),            _no_copula),
    (re.compile(r"^(?:no|none)\s+(.+?)\s+(do\s+not\s+|don't\s+)?(?:have|has)\s+(.+)$", _I), _no_have),
    (re.compile(r"^if\s+(.+?)\s*,?\s+then\s+(.+)$", _I),                                    _if_then),
    (re.compile(r"^everything\s+that\s+is\s+(.+?)\s+is\s+(.+)$", _I),                       _everything_that),
    (re.compile(r"^(all|every|each)\s+(.+\s+(?:are|is)\s+.+)$", _I),                        _quantified_copula),
    (re.compile(r"^(all|every|each)\s+(.+)$", _I),                                          _quantified_verb),
    (re.compile(r"^(\w+(?:us)?e?s)\s+are\s+(\w+(?:us)?e?s)$", _I),                          _subsumption),
    (re.compile(r"^(\w+)\s+are\s+(.+)$", _I),                                               _bare_plural_copula),
    (re.compile(r"^(\w+)\s+(.+)$", _I),                                                     _bare_plural_verb),
    (re.compile(r"^(.+?)\s+(things|people)\s+are\s+(.+)$", _I),                             _implicit_class),
]


def parse_rule_sentence(sentence: str, ctx: ParseContext) -> RuleResult:
    s = clean(sentence)
    if not s:
        return None
    for pattern, handler in RULE_PATTERNS:
        m = pattern.match(s)
        if not m:
            continue
        result = handler(m, ctx)
        if result is not None:
            return result
    return None
