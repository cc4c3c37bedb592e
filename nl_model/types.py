"""
nl_model/types.py — struktury pośrednie translatora NL → DSL.

Atom            — kanoniczne stwierdzenie: operator + argumenty (np. isA ?x Dog)
Item            — atom ze znakiem (negated) używany w koniunkcjach/alternatywach
ClauseGroup     — lista itemów z jednym spójnikiem (And | Or) + operatory
                  zadeklarowane automatycznie
ParseError      — strukturalny błąd naruszenia katalogu operatorów
SentenceResult  — wynik parsowania zdania: linie DSL + zadeklarowane operatory
SubjectDescriptor — rozbiór podmiotu kwantyfikowanego (typ, własności, relatywna)

Parsery zwracają None (brak dopasowania), ParseError (błąd katalogu) lub
wynik. ParseError jest wartością, nie wyjątkiem: każda warstwa składająca
przekazuje go dalej bez zmian.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable


class Connective(StrEnum):
    """Spójnik grupy klauzul."""
    AND = "And"
    OR  = "Or"


# ---------------------------------------------------------------------------
# Atom / Item
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Atom:
    """
    Atom: operator(args...).

    - op:   identyfikator operatora (litery/cyfry/_; nie zaczyna się cyfrą)
    - args: argumenty; zmienne zaczynają się od '?'
    """
    op: str
    args: tuple[str, ...]

    def __str__(self) -> str:
        return " ".join((self.op, *self.args))

    @property
    def has_variable(self) -> bool:
        return any(a.startswith("?") for a in self.args)


@dataclass(frozen=True, slots=True)
class Item:
    """Atom ze znakiem: negated=True → emitowany jako Not $ref."""
    atom: Atom
    negated: bool = False

    def flipped(self, flip: bool = True) -> Item:
        """Zwraca item z odwróconą negacją (XOR z flip)."""
        return Item(self.atom, self.negated != flip)


def item(op: str, *args: str, negated: bool = False) -> Item:
    """Skrót: item("isA", "?x", "Dog")."""
    return Item(Atom(op, tuple(args)), negated)


# ---------------------------------------------------------------------------
# ClauseGroup
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ClauseGroup:
    """
    Skoordynowana lista itemów z jednym spójnikiem.

    - op:                 Connective.AND | Connective.OR (nigdy oba naraz)
    - items:              itemy w kolejności wystąpienia
    - declared_operators: operatory spoza katalogu zadeklarowane automatycznie
    """
    op: Connective
    items: list[Item] = field(default_factory=list)
    declared_operators: list[str] = field(default_factory=list)

    @property
    def has_variable(self) -> bool:
        return any(i.atom.has_variable for i in self.items)

    def declare(self, names: Iterable[str]) -> None:
        for name in names:
            if name not in self.declared_operators:
                self.declared_operators.append(name)


def and_group(items: Iterable[Item], declared: Iterable[str] = ()) -> ClauseGroup:
    group = ClauseGroup(Connective.AND, list(items))
    group.declare(declared)
    return group


# ---------------------------------------------------------------------------
# ParseError
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParseError:
    """
    Naruszenie katalogu operatorów (auto-deklaracja wyłączona).

    - error:            komunikat dla użytkownika (przekazywany dosłownie)
    - unknown_operator: nazwa operatora, którego brakuje w katalogu
    """
    error: str
    unknown_operator: str | None = None
    kind: str = "error"


# ---------------------------------------------------------------------------
# Wyniki zdań
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SentenceResult:
    """Linie DSL wyemitowane dla jednego zdania + zadeklarowane operatory."""
    lines: list[str] = field(default_factory=list)
    declared_operators: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SubjectDescriptor:
    """
    Rozbiór frazy podmiotu kwantyfikowanego, np. "tall students who are taking the course".

    - type_name:  nazwa typu (None dla "things", "someone" itp.)
    - properties: modyfikatory → hasProperty
    - relative:   tekst zdania względnego (po who/that/which) lub None
    """
    type_name: str | None
    properties: list[str] = field(default_factory=list)
    relative: str | None = None
