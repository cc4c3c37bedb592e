"""
render/common.py — wspólne prymitywy tłumaczy odpowiedzi.

Podział celu DSL, normalizacja zdań, rozbiór celu "Not (op a b)",
Translation (tekst + dowód) oraz HumanRenderer: AST / części reguł →
tekst, wiązania → "Bindings: ?x=v", obecność faktów w KB.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Sequence

from .ast import AndPart, Compound, Expr, Leaf, NotPart, OrPart, Part, Statement, term_token
from .session import ReasoningSession, RuleRecord

_TRAILING_PUNCT_RE = re.compile(r"[.!?]+$")


# ---------------------------------------------------------------------------
# Tekst
# ---------------------------------------------------------------------------

def split_goal_parts(goal: str | None) -> list[str]:
    """Tokeny celu bez etykiet @ref ('@goal:goal isA Rex Dog' → ['isA', 'Rex', 'Dog'])."""
    if not goal:
        return []
    return [p for p in goal.split() if not p.startswith("@")]


def strip_punct(text: str) -> str:
    return _TRAILING_PUNCT_RE.sub("", text)


def normalize_sentence(text: str | None) -> str:
    """Porównywalna postać zdania: białe znaki zwinięte, bez końcowej interpunkcji, małe litery."""
    t = re.sub(r"\s+", " ", text or "").strip()
    return strip_punct(t).lower()


def ensure_period(text: str) -> str:
    t = (text or "").strip()
    if not t:
        return ""
    return t if t[-1] in ".!?" else f"{t}."


@dataclass(frozen=True, slots=True)
class NotGoal:
    op: str
    args: tuple[str, ...]

    @property
    def dsl(self) -> str:
        return " ".join((self.op, *self.args))


def parse_not_goal(goal: str | None) -> NotGoal | None:
    """'Not (isA Rex Cat)' → NotGoal('isA', ('Rex', 'Cat'))."""
    parts = split_goal_parts(goal)
    if len(parts) < 2 or parts[0] != "Not":
        return None
    inner = parts[1:]
    inner[0] = inner[0].removeprefix("(")
    inner[-1] = inner[-1].removesuffix(")")
    if not inner[0]:
        return None
    return NotGoal(inner[0], tuple(inner[1:]))


@dataclass(frozen=True, slots=True)
class Translation:
    """Odpowiedź tłumacza: tekst + opcjonalny dowód (łączone przez ResponseTranslator)."""
    text: str
    proof_text: str | None = None


def make_translation(text: str | None, proof: str | Sequence[str] | None = None) -> Translation:
    """Normalizuje tekst i dowód (lista → '. '.join, pusty dowód → None)."""
    if proof is not None and not isinstance(proof, str):
        proof = ". ".join(proof)
    if proof is not None:
        proof = proof.strip() or None
    return Translation((text or "").strip(), proof)


@dataclass(frozen=True, slots=True)
class LeafStatement:
    """Liść drzewa reguły z polaryzacją wynikającą z otaczających Not."""
    ast: Expr
    negated: bool = False


# ---------------------------------------------------------------------------
# Renderer AST
# ---------------------------------------------------------------------------

class HumanRenderer:
    """Bazowa klasa tłumaczy: dostęp do sesji + renderowanie AST."""

    def __init__(self, session: ReasoningSession) -> None:
        self.session = session

    def sentence(self, op: str, args: Sequence[str]) -> str:
        """Zdanie z generate_text bez końcowej interpunkcji."""
        return strip_punct(self.session.generate_text(op, list(args)))

    def goal_to_human(self, goal: str | None) -> str:
        not_goal = parse_not_goal(goal)
        if not_goal is not None:
            return f"NOT ({self.sentence(not_goal.op, not_goal.args)})"
        parts = split_goal_parts(goal)
        if len(parts) < 2:
            return " ".join(parts) or "statement"
        return self.session.generate_text(parts[0], parts[1:]).removesuffix(".")

    def expr_to_human(self, expr: Expr | None, bindings: Mapping[str, str] | None = None) -> str:
        match expr:
            case None:
                return ""
            case Statement(operator=op, args=args):
                return self.sentence(op, [term_token(a, bindings) for a in args])
            case Compound(operator="Not", args=(inner,)):
                return f"NOT ({self.expr_to_human(inner, bindings)})"
            case Compound(operator="And" | "Or" as op, args=args) if args:
                joiner = " AND " if op == "And" else " OR "
                return joiner.join(f"({self.expr_to_human(a, bindings)})" for a in args)
            case Compound(operator=op, args=args):
                return f"{op}({', '.join(self.expr_to_human(a, bindings) for a in args)})"
            case _:
                return term_token(expr, bindings)

    def compound_to_human(self, part: Part | None, bindings: Mapping[str, str] | None = None) -> str:
        match part:
            case None:
                return ""
            case Leaf(ast=ast):
                return self.expr_to_human(ast, bindings)
            case NotPart(inner=inner):
                return f"NOT ({self.compound_to_human(inner, bindings)})"
            case AndPart(parts=parts) | OrPart(parts=parts):
                joiner = " AND " if isinstance(part, AndPart) else " OR "
                return joiner.join(f"({self.compound_to_human(p, bindings)})" for p in parts)

    def collect_leaf_humans(self, part: Part | None, bindings: Mapping[str, str] | None = None) -> list[str]:
        return [self.expr_to_human(leaf.ast, bindings) for leaf in collect_leaf_statements(part)]

    def bindings_to_human(self, bindings: Mapping[str, str] | None) -> str | None:
        entries = [(k, v) for k, v in (bindings or {}).items() if v and v.strip()]
        if not entries:
            return None
        return "Bindings: " + ", ".join(f"?{k}={v}" for k, v in entries)

    # --- Baza wiedzy ---

    def fact_exists(self, op: str, args: Sequence[str]) -> bool:
        return any(f.matches(op, args) for f in self.session.kb_facts)

    def not_fact_exists(self, op: str, args: Sequence[str]) -> bool:
        """Jawna negacja: fakt 'Not $ref', gdzie $ref wskazuje na 'op args...'."""
        expected = " ".join((op, *args)).strip()
        for fact in self.session.kb_facts:
            if fact.operator != "Not" or not fact.args:
                continue
            ref = fact.args[0].replace("$", "")
            if ref and self.session.reference_texts.get(ref) == expected:
                return True
        return False

    def rule_by_id(self, rule_id: str | None) -> RuleRecord | None:
        if not rule_id:
            return None
        return next((r for r in self.session.rules if r.id == rule_id), None)


def collect_leaf_statements(part: Part | None, negated: bool = False) -> list[LeafStatement]:
    """Liście drzewa w kolejności; Not odwraca polaryzację poddrzewa."""
    match part:
        case Leaf(ast=ast) if ast is not None:
            return [LeafStatement(ast, negated)]
        case NotPart(inner=inner):
            return collect_leaf_statements(inner, not negated)
        case AndPart(parts=parts) | OrPart(parts=parts):
            return [leaf for p in parts for leaf in collect_leaf_statements(p, negated)]
        case _:
            return []
