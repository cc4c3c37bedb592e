"""
catalog/types.py — kody błędów, wpisy katalogu i raport walidacji linii DSL.

OpEntry        — spłaszczony wpis katalogu operatorów (nazwa, arność, rodzaj)
ArityTable     — protokół: oczekiwana arność operatora
OperatorCatalog — protokół: arność + przynależność do zbioru znanych operatorów
CatalogError   — błąd wczytania / walidacji katalogu
LineIssue      — pojedynczy problem w wyemitowanej linii DSL
LineReport     — wynik walidacji tekstu DSL: is_valid, issues, warnings
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol


class ErrorCode(StrEnum):
    """Stałe kody błędów walidatora linii DSL."""

    OP_UNKNOWN       = "E_OP_UNKNOWN"
    ARITY_MISMATCH   = "E_ARITY_MISMATCH"
    REF_UNDEFINED    = "E_REF_UNDEFINED"
    REF_DUPLICATE    = "E_REF_DUPLICATE"
    IDENT_INVALID    = "E_IDENT_INVALID"
    LINE_MALFORMED   = "E_LINE_MALFORMED"


class OpKind(StrEnum):
    """Rodzaj operatora w katalogu."""
    RELATION = "relation"
    PROPERTY = "property"
    LOGIC    = "logic"
    META     = "meta"
    DECLARED = "declared"


class CatalogError(ValueError):
    """Katalog operatorów nie daje się wczytać albo łamie schemat JSON."""


@dataclass(frozen=True, slots=True)
class OpEntry:
    """
    Wpis katalogu.

    - name:        np. "isA"
    - arity:       oczekiwana liczba argumentów (None → zmienna)
    - kind:        OpKind
    - description: krótki opis (opcjonalnie)
    """
    name: str
    arity: int | None
    kind: OpKind = OpKind.RELATION
    description: str = ""


class ArityTable(Protocol):
    def expected_arity(self, name: str) -> int | None: ...


class OperatorCatalog(ArityTable, Protocol):
    def is_known(self, name: str) -> bool: ...


@dataclass(slots=True)
class LineIssue:
    """
    Problem w jednej linii DSL.

    - code:    ErrorCode
    - line_no: numer linii (1-based)
    - line:    treść linii
    - message: czytelny opis
    - details: opcjonalne dane dodatkowe
    """
    code: ErrorCode
    line_no: int
    line: str
    message: str
    details: dict[str, Any] | None = None


@dataclass(slots=True)
class LineReport:
    """Wynik walidacji tekstu DSL (warnings nie wpływają na is_valid)."""
    is_valid: bool
    issues: list[LineIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
