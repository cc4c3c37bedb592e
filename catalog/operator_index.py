"""
catalog/operator_index.py — indeks katalogu operatorów.

OperatorIndex wczytuje katalog (JSON, walidowany schematem
catalog.schema.json) i buduje słownik:
  _by_name: name -> OpEntry

Implementuje protokół OperatorCatalog (expected_arity, is_known), więc
parsery dostają go jako wstrzykniętą, tylko-do-odczytu tabelę.
"""

from __future__ import annotations

import functools
import json
import pathlib
from typing import Iterable

from jsonschema import Draft202012Validator

from .types import CatalogError, OpEntry, OpKind

DATA_DIR        = pathlib.Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG = DATA_DIR / "core_operators.json"
CATALOG_SCHEMA  = DATA_DIR / "catalog.schema.json"


@functools.lru_cache(maxsize=1)
def _schema_validator() -> Draft202012Validator:
    schema = json.loads(CATALOG_SCHEMA.read_text(encoding="utf-8"))
    return Draft202012Validator(schema)


def validate_catalog(data: dict) -> list[str]:
    """Zwraca listę naruszeń schematu ("ścieżka: komunikat"); pusta gdy OK."""
    problems = []
    for err in sorted(_schema_validator().iter_errors(data), key=lambda e: list(e.absolute_path)):
        path = "/" + "/".join(str(p) for p in err.absolute_path)
        problems.append(f"{path}: {err.message}")
    return problems


# ---------------------------------------------------------------------------
# OperatorIndex
# ---------------------------------------------------------------------------

class OperatorIndex:
    """
    Indeks znanych operatorów z oczekiwaną arnością.

    Użycie:
        index = OperatorIndex.default()
        index.expected_arity("isA")   # 2
        index.is_known("frobnicate")  # False
    """

    def __init__(self, catalog: dict) -> None:
        problems = validate_catalog(catalog)
        if problems:
            raise CatalogError(
                "Katalog operatorów niezgodny ze schematem:\n  " + "\n  ".join(problems)
            )
        self.version: str = catalog.get("version", "1")
        self._by_name: dict[str, OpEntry] = {}
        for o in catalog["operators"]:
            entry = self._build_entry(o)
            self._by_name[entry.name] = entry

    def _build_entry(self, o: dict) -> OpEntry:
        return OpEntry(
            name=o["name"],
            arity=o.get("arity"),
            kind=OpKind(o.get("kind", "relation")),
            description=o.get("description", ""),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup_by_name(self, name: str) -> OpEntry | None:
        return self._by_name.get(name)

    def expected_arity(self, name: str) -> int | None:
        entry = self._by_name.get(name)
        return entry.arity if entry is not None else None

    def is_known(self, name: str) -> bool:
        return name in self._by_name

    def names(self) -> list[str]:
        return sorted(self._by_name)

    def entries(self) -> list[OpEntry]:
        return [self._by_name[n] for n in self.names()]

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def with_declared(self, names: Iterable[str]) -> OperatorIndex:
        """Kopia indeksu znająca dodatkowo operatory zadeklarowane w sesji."""
        clone = object.__new__(OperatorIndex)
        clone.version  = self.version
        clone._by_name = dict(self._by_name)
        for name in names:
            clone._by_name.setdefault(name, OpEntry(name, None, OpKind.DECLARED))
        return clone

    # ------------------------------------------------------------------
    # Konstruktory fabryczne
    # ------------------------------------------------------------------

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> OperatorIndex:
        """Ładuje katalog z pliku JSON."""
        try:
            data = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CatalogError(f"Błąd parsowania katalogu {path}: {exc}") from exc
        return cls(data)

    @classmethod
    def from_dict(cls, catalog: dict) -> OperatorIndex:
        return cls(catalog)

    @classmethod
    def default(cls) -> OperatorIndex:
        """Wbudowany katalog core_operators.json (cache'owany)."""
        return _default_index()


@functools.lru_cache(maxsize=1)
def _default_index() -> OperatorIndex:
    return OperatorIndex.from_file(DEFAULT_CATALOG)
