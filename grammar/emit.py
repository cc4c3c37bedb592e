"""
grammar/emit.py — emisja linii DSL z itemów i grup.

Fakt:      "op a b"  lub  "@baseN op a b" + "Not $baseN"
Blok ref:  "@antN op a b"  (jeden item)  albo itemy jako "@partN ..."
           + "@antN And $partA $partB ..." (max MAX_POSITIONS na linię,
           dłuższe listy zagnieżdżane przez "@grpN And ...")
Reguła:    "Implies $ant $cons"
Deklaracja: "@op:op __Relation"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from nl_model.constants import MAX_POSITIONS, RELATION_MARKER
from nl_model.types import ClauseGroup, Connective, Item, SentenceResult

from .refs import RefCounter


@dataclass(slots=True)
class RefBlock:
    """Linie definiujące referencję + jej nazwa."""
    ref: str
    lines: list[str] = field(default_factory=list)


def declaration_line(op: str) -> str:
    return f"@{op}:{op} {RELATION_MARKER}"


def fact_lines(items: Iterable[Item], refs: RefCounter) -> list[str]:
    lines: list[str] = []
    for i in items:
        if i.negated:
            base = refs.next("base")
            lines += [f"@{base} {i.atom}", f"Not ${base}"]
        else:
            lines.append(str(i.atom))
    return lines


def _item_ref(i: Item, refs: RefCounter, prefix: str) -> RefBlock:
    if not i.negated:
        ref = refs.next(prefix)
        return RefBlock(ref, [f"@{ref} {i.atom}"])
    base = refs.next("base")
    ref = refs.next(prefix)
    return RefBlock(ref, [f"@{base} {i.atom}", f"@{ref} Not ${base}"])


def emit_expr_as_refs(
    items: list[Item],
    op: Connective,
    refs: RefCounter,
    prefix: str,
) -> RefBlock:
    """Grupa itemów → jedna referencja (prefix) + linie ją definiujące."""
    if len(items) == 1:
        return _item_ref(items[0], refs, prefix)

    lines: list[str] = []
    names: list[str] = []
    for i in items:
        block = _item_ref(i, refs, "part")
        lines += block.lines
        names.append(block.ref)

    while len(names) > MAX_POSITIONS:
        grouped: list[str] = []
        for start in range(0, len(names), MAX_POSITIONS):
            chunk = names[start:start + MAX_POSITIONS]
            if len(chunk) == 1:
                grouped.append(chunk[0])
                continue
            grp = refs.next("grp")
            lines.append(f"@{grp} {op} " + " ".join(f"${n}" for n in chunk))
            grouped.append(grp)
        names = grouped

    ref = refs.next(prefix)
    lines.append(f"@{ref} {op} " + " ".join(f"${n}" for n in names))
    return RefBlock(ref, lines)


def rule_result(
    condition: ClauseGroup,
    consequent: ClauseGroup,
    refs: RefCounter,
) -> SentenceResult:
    """Dwa bloki referencji + Implies; deklaracje z obu stron."""
    ant  = emit_expr_as_refs(condition.items, condition.op, refs, "ant")
    cons = emit_expr_as_refs(consequent.items, consequent.op, refs, "cons")
    declared: list[str] = []
    for name in (*condition.declared_operators, *consequent.declared_operators):
        if name not in declared:
            declared.append(name)
    return SentenceResult(
        ant.lines + cons.lines + [f"Implies ${ant.ref} ${cons.ref}"],
        declared,
    )
