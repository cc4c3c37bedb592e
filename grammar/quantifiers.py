"""
grammar/quantifiers.py — podmiot kwantyfikowany i grupy predykatów.

parse_quantified_subject_descriptor("tall students who are taking the course")
    -> SubjectDescriptor(type_name="Student", properties=["tall"],
                         relative="are taking the course")

emit_subject_descriptor_items(subject, descriptor, ctx)
    -> isA + hasProperty (modyfikatory) + itemy zdania względnego

parse_copula_predicates(subject, text, ctx)
    -> grupa itemów dla skoordynowanego predykatu ("a cat and not a dog")
"""

from __future__ import annotations

import re

from nl_model.types import ClauseGroup, ParseError, SubjectDescriptor, and_group, item

from .context import ParseContext
from .shared import parse_predicate_item, parse_relative_predicate
from .text import (
    capitalize,
    clean,
    is_generic_class_noun,
    is_plural,
    normalize_entity,
    sanitize_predicate,
    singularize,
    split_coord,
)

_OF_RE       = re.compile(r"^(\w+)\s+of\s+(.+)$", re.IGNORECASE)
_RELATIVE_RE = re.compile(r"^(.+?)\s+(?:who|that|which)\s+(.+)$", re.IGNORECASE)
_SKIP_MODIFIERS = frozenset({"who", "that", "which", "are", "is"})


def parse_quantified_subject_descriptor(text: str) -> SubjectDescriptor | None:
    t = clean(text)
    if not t:
        return None

    m = _OF_RE.match(t)
    if m and not _RELATIVE_RE.match(t):
        head = capitalize(singularize(m.group(1)))
        entity = normalize_entity(m.group(2))
        return SubjectDescriptor(f"{head}Of{entity}")

    relative = None
    m = _RELATIVE_RE.match(t)
    if m:
        t, relative = clean(m.group(1)), clean(m.group(2))

    tokens = [w for w in t.lower().split(" ") if w]
    if not tokens:
        return None
    head = tokens[-1]
    if is_generic_class_noun(head):
        type_name = None
    else:
        word = singularize(head) if is_plural(head) else head
        type_name = capitalize(re.sub(r"[^a-z0-9_]", "", word)) or None

    properties = []
    for w in tokens[:-1]:
        if w in _SKIP_MODIFIERS:
            continue
        prop = sanitize_predicate(w)
        if prop:
            properties.append(prop)
    return SubjectDescriptor(type_name, properties, relative)


def emit_subject_descriptor_items(
    subject: str,
    descriptor: SubjectDescriptor,
    ctx: ParseContext,
) -> ClauseGroup | ParseError:
    group = and_group([])
    if descriptor.type_name:
        group.items.append(item("isA", subject, descriptor.type_name))
    for prop in descriptor.properties:
        group.items.append(item("hasProperty", subject, prop))
    if descriptor.relative:
        rel = parse_relative_predicate(descriptor.relative, subject, ctx)
        if isinstance(rel, ParseError):
            return rel
        if rel is not None:
            group.items += rel.items
            group.declare(rel.declared_operators)
    return group


def parse_copula_predicates(subject: str, text: str, ctx: ParseContext) -> ClauseGroup | ParseError | None:
    """Predykat skoordynowany: jeden item na człon, spójnik z podziału."""
    coord = split_coord(text)
    if coord.mixed or not coord.items:
        return None
    group = ClauseGroup(coord.op)
    for raw in coord.items:
        parsed = parse_predicate_item(raw, subject, ctx)
        if isinstance(parsed, ParseError):
            return parsed
        if parsed is None:
            return None
        group.items += [i.flipped(coord.negated) for i in parsed.items]
        group.declare(parsed.declared_operators)
    return group


_COPULA_SPLIT_RE = re.compile(r"\s+(are|is)\s+", re.IGNORECASE)
_RELATIVE_END_RE = re.compile(r"\b(?:who|that|which)$", re.IGNORECASE)


def split_at_copula(text: str) -> tuple[str, str] | None:
    """
    "students who are tall are happy" → ("students who are tall", "happy").

    Kopuła tuż po who/that/which należy do zdania względnego podmiotu.
    """
    t = clean(text)
    for m in _COPULA_SPLIT_RE.finditer(t):
        head = t[:m.start()]
        if _RELATIVE_END_RE.search(head):
            continue
        tail = t[m.end():]
        if head and tail:
            return head, tail
    return None
