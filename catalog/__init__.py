"""
catalog — katalog operatorów i walidacja arności.

Interfejs publiczny:
    OperatorIndex    — indeks wczytanego katalogu (JSON + JSON Schema)
    DslLineValidator — walidator wyemitowanych linii DSL
    ArityTable, OperatorCatalog — protokoły wstrzykiwane do parserów
    OpEntry, OpKind, CatalogError, LineIssue, LineReport, ErrorCode — typy

Typowe użycie:
    from catalog import OperatorIndex, DslLineValidator

    index  = OperatorIndex.default()
    report = DslLineValidator(index).validate(dsl_text)
    if not report.is_valid:
        for issue in report.issues:
            print(issue.code, issue.line_no, issue.message)
"""

from .types import (
    ArityTable,
    CatalogError,
    ErrorCode,
    LineIssue,
    LineReport,
    OpEntry,
    OpKind,
    OperatorCatalog,
)
from .operator_index import DEFAULT_CATALOG, OperatorIndex, validate_catalog
from .line_validator import DslLineValidator

__all__ = [
    "ArityTable",
    "CatalogError",
    "ErrorCode",
    "LineIssue",
    "LineReport",
    "OpEntry",
    "OpKind",
    "OperatorCatalog",
    "DEFAULT_CATALOG",
    "OperatorIndex",
    "validate_catalog",
    "DslLineValidator",
]
