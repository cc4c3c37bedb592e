"""
grammar/context.py — kontekst pojedynczego tłumaczenia.

ParseContext łączy opcje, katalog operatorów (protokół OperatorCatalog)
i licznik referencji. Jest przekazywany do każdego parsera; nie ma
globalnego stanu modułowego.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catalog import OperatorCatalog, OperatorIndex

from .config import TranslatorOptions
from .refs import RefCounter


@dataclass(slots=True)
class ParseContext:
    options: TranslatorOptions = field(default_factory=TranslatorOptions)
    catalog: OperatorCatalog = field(default_factory=OperatorIndex.default)
    refs: RefCounter = field(default_factory=RefCounter)

    @property
    def default_var(self) -> str:
        return self.options.default_var

    @property
    def auto_declare(self) -> bool:
        return self.options.auto_declare_unknown_operators

    def with_options(self, **changes: object) -> ParseContext:
        """Ten sam katalog i licznik, zmienione opcje."""
        return ParseContext(self.options.replace(**changes), self.catalog, self.refs)

    @classmethod
    def create(
        cls,
        options: TranslatorOptions | None = None,
        catalog: OperatorCatalog | None = None,
        refs: RefCounter | None = None,
    ) -> ParseContext:
        return cls(
            options or TranslatorOptions(),
            catalog if catalog is not None else OperatorIndex.default(),
            refs or RefCounter(),
        )
