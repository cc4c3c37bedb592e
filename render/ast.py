"""
render/ast.py — zamknięty typ sumy AST konsumowanego od silnika wnioskowania.

Termy:       Identifier | Hole | Reference | Literal
Wyrażenia:   Statement (operator + termy) | Compound (And / Or / Not / inne)
Części reguł: Leaf | NotPart | AndPart | OrPart  (drzewo *Parts silnika)

Konwertery *_from_dict przyjmują słowniki w kształcie JSON silnika
({"type": "Statement", "operator": {"name": ...}, "args": [...]}) i rzucają
RenderInputError dla struktur, których nie da się odczytać.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, TypeAlias


class RenderInputError(ValueError):
    """Wejście renderera (ślad dowodu, sesja, AST) ma nieprawidłowy kształt."""


# ---------------------------------------------------------------------------
# Termy
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Identifier:
    name: str


@dataclass(frozen=True, slots=True)
class Hole:
    """Zmienna reguły (?name)."""
    name: str


@dataclass(frozen=True, slots=True)
class Reference:
    """Referencja do nazwanego stwierdzenia (@name)."""
    name: str


@dataclass(frozen=True, slots=True)
class Literal:
    value: str | int | float | bool
    literal_type: str = "string"


Term: TypeAlias = Identifier | Hole | Reference | Literal


# ---------------------------------------------------------------------------
# Wyrażenia
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Statement:
    """Płaskie stwierdzenie: operator arg1 arg2 ..."""
    operator: str
    args: tuple[Term, ...] = ()


@dataclass(frozen=True, slots=True)
class Compound:
    """Wyrażenie złożone: And / Or / Not lub inny operator nad wyrażeniami."""
    operator: str
    args: tuple[Expr, ...] = ()


Expr: TypeAlias = Statement | Compound | Term


# ---------------------------------------------------------------------------
# Drzewo części reguły
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Leaf:
    ast: Expr | None = None


@dataclass(frozen=True, slots=True)
class NotPart:
    inner: Part


@dataclass(frozen=True, slots=True)
class AndPart:
    parts: tuple[Part, ...]


@dataclass(frozen=True, slots=True)
class OrPart:
    parts: tuple[Part, ...]


Part: TypeAlias = Leaf | NotPart | AndPart | OrPart


# ---------------------------------------------------------------------------
# Tokeny
# ---------------------------------------------------------------------------

def term_token(node: Expr, bindings: Mapping[str, str] | None = None) -> str:
    """Token DSL termu; Hole zastępowany wiązaniem, jeśli istnieje."""
    match node:
        case Identifier(name=name):
            return name
        case Hole(name=name):
            bound = bindings.get(name) if bindings else None
            return bound or f"?{name}"
        case Reference(name=name):
            return f"@{name}"
        case Literal(value=value):
            return str(value)
        case Statement(operator=op, args=args):
            return " ".join((op, *(term_token(a, bindings) for a in args)))
        case Compound(operator=op, args=args):
            return f"{op}({', '.join(term_token(a, bindings) for a in args)})"


# ---------------------------------------------------------------------------
# Konwersja z JSON
# ---------------------------------------------------------------------------

def _operator_name(raw: Any) -> str:
    if isinstance(raw, str):
        name = raw
    elif isinstance(raw, Mapping):
        name = raw.get("name") or raw.get("value")
    else:
        name = None
    if not isinstance(name, str) or not name:
        raise RenderInputError(f"Brak nazwy operatora w węźle AST: {raw!r}")
    return name


def _args(raw: Any, where: str) -> list[Any]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise RenderInputError(f"Pole 'args' węzła {where} musi być listą")
    return raw


def _name(data: Mapping[str, Any], kind: str) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise RenderInputError(f"Węzeł {kind} bez nazwy")
    return name


def expr_from_dict(data: Any) -> Expr:
    """Węzeł AST silnika → Expr."""
    if not isinstance(data, Mapping):
        raise RenderInputError(f"Węzeł AST musi być obiektem, otrzymano: {data!r}")
    kind = data.get("type")
    match kind:
        case "Identifier":
            return Identifier(_name(data, kind))
        case "Hole":
            return Hole(_name(data, kind))
        case "Reference":
            return Reference(_name(data, kind))
        case "Literal":
            if "value" not in data:
                raise RenderInputError("Węzeł Literal bez wartości")
            return Literal(data["value"], str(data.get("literalType", "string")))
        case "Statement":
            args = tuple(expr_from_dict(a) for a in _args(data.get("args"), kind))
            for a in args:
                if isinstance(a, (Statement, Compound)):
                    raise RenderInputError("Argument Statement musi być termem")
            return Statement(_operator_name(data.get("operator")), args)  # type: ignore[arg-type]
        case "Compound":
            args = tuple(expr_from_dict(a) for a in _args(data.get("args"), kind))
            return Compound(_operator_name(data.get("operator")), args)
        case _:
            raise RenderInputError(f"Nieznany typ węzła AST: {kind!r}")


def part_from_dict(data: Any) -> Part:
    """Drzewo *Parts silnika ({type: leaf|And|Or|Not}) → Part."""
    if not isinstance(data, Mapping):
        raise RenderInputError(f"Część reguły musi być obiektem, otrzymano: {data!r}")
    kind = data.get("type")
    match kind:
        case "leaf":
            ast = data.get("ast")
            return Leaf(expr_from_dict(ast) if ast is not None else None)
        case "Not":
            if data.get("inner") is None:
                raise RenderInputError("Część Not bez pola 'inner'")
            return NotPart(part_from_dict(data["inner"]))
        case "And" | "Or":
            parts = data.get("parts")
            if not isinstance(parts, list):
                raise RenderInputError(f"Część {kind} bez listy 'parts'")
            children = tuple(part_from_dict(p) for p in parts)
            return AndPart(children) if kind == "And" else OrPart(children)
        case _:
            raise RenderInputError(f"Nieznany typ części reguły: {kind!r}")
