"""
nl_model — struktury danych translatora NL → DSL.

Użycie:
  from nl_model import Atom, Item, ClauseGroup, ParseError, ...

Moduły:
  types     — Atom, Item, ClauseGroup, Connective, ParseError,
              SentenceResult, SubjectDescriptor
  constants — słowa kluczowe DSL, zaimki, rzeczowniki generyczne,
              operatory lokatywne, symbole zarezerwowane
"""

from .types import (
    Atom,
    ClauseGroup,
    Connective,
    Item,
    ParseError,
    SentenceResult,
    SubjectDescriptor,
    and_group,
    item,
)
from .constants import DEFAULT_VAR, MAX_POSITIONS, RELATION_MARKER

__all__ = [
    "Atom",
    "ClauseGroup",
    "Connective",
    "Item",
    "ParseError",
    "SentenceResult",
    "SubjectDescriptor",
    "and_group",
    "item",
    "DEFAULT_VAR",
    "MAX_POSITIONS",
    "RELATION_MARKER",
]
