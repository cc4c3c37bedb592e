"""
catalog/line_validator.py — walidator wyemitowanych linii DSL.

DslLineValidator.validate(dsl_text) -> LineReport

Sprawdzenia (per linia):
  - identyfikatory operatorów i argumentów       (E_IDENT_INVALID)
  - operator znany lub zadeklarowany w tekście   (E_OP_UNKNOWN)
  - arność zgodna z katalogiem                   (E_ARITY_MISMATCH)
  - $ref użyty dopiero po @ref                   (E_REF_UNDEFINED)
  - brak podwójnego wiązania @ref                (E_REF_DUPLICATE)

Linie z argumentami złożonymi "( ... )" (cele pytań) są pomijane
w sprawdzeniu arności — dostają ostrzeżenie.
"""

from __future__ import annotations

import re

from .types import ErrorCode, LineIssue, LineReport, OperatorCatalog

_IDENT_RE   = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_ARG_RE     = re.compile(r"^[?$]?[A-Za-z0-9_]+$")
_REF_RE     = re.compile(r"^@([A-Za-z_][A-Za-z0-9_]*)(?::([A-Za-z_][A-Za-z0-9_]*))?$")
_DECLARE_RE = re.compile(r"^@([A-Za-z_][A-Za-z0-9_]*):\1\s+__Relation$")

# Limit problemów, po przekroczeniu przerywamy
MAX_ISSUES = 50


class DslLineValidator:
    """
    Walidator tekstu DSL względem katalogu operatorów.

    Użycie:
        validator = DslLineValidator(OperatorIndex.default())
        report    = validator.validate(translation.dsl)
    """

    def __init__(self, catalog: OperatorCatalog) -> None:
        self._catalog = catalog

    def validate(self, dsl_text: str) -> LineReport:
        issues: list[LineIssue] = []
        warnings: list[str] = []
        declared: set[str] = set()
        refs: set[str] = set()

        lines = dsl_text.splitlines()

        # Deklaracje obowiązują w całym tekście (preludium może stać na początku)
        for raw in lines:
            m = _DECLARE_RE.match(raw.strip())
            if m:
                declared.add(m.group(1))

        for line_no, raw in enumerate(lines, start=1):
            line = raw.strip()
            if not line or line.startswith("//") or _DECLARE_RE.match(line):
                continue
            if len(issues) >= MAX_ISSUES:
                warnings.append(f"Przerwano po {MAX_ISSUES} problemach.")
                break

            tokens = line.split()
            if tokens[0].startswith("@"):
                m = _REF_RE.match(tokens[0])
                if not m:
                    issues.append(LineIssue(
                        ErrorCode.IDENT_INVALID, line_no, line,
                        f"Niepoprawna nazwa referencji: {tokens[0]}",
                    ))
                    continue
                ref = m.group(1)
                if ref in refs:
                    issues.append(LineIssue(
                        ErrorCode.REF_DUPLICATE, line_no, line,
                        f"Referencja @{ref} związana ponownie",
                    ))
                refs.add(ref)
                tokens = tokens[1:]
                if not tokens:
                    issues.append(LineIssue(
                        ErrorCode.LINE_MALFORMED, line_no, line,
                        "Referencja bez wyrażenia",
                    ))
                    continue

            issues.extend(self._check_statement(tokens, line_no, line, declared, refs, warnings))

        return LineReport(is_valid=not issues, issues=issues, warnings=warnings)

    # ------------------------------------------------------------------
    # Pojedyncze wyrażenie
    # ------------------------------------------------------------------

    def _check_statement(
        self,
        tokens: list[str],
        line_no: int,
        line: str,
        declared: set[str],
        refs: set[str],
        warnings: list[str],
    ) -> list[LineIssue]:
        op, args = tokens[0], tokens[1:]
        out: list[LineIssue] = []

        if not _IDENT_RE.match(op):
            return [LineIssue(
                ErrorCode.IDENT_INVALID, line_no, line,
                f"Niepoprawna nazwa operatora: {op}",
            )]

        if not self._catalog.is_known(op) and op not in declared:
            out.append(LineIssue(
                ErrorCode.OP_UNKNOWN, line_no, line,
                f"Nieznany operator '{op}'",
                {"operator": op},
            ))

        if any("(" in a or ")" in a for a in args):
            warnings.append(f"Linia {line_no}: argumenty złożone — pominięto sprawdzenie arności.")
            return out

        for a in args:
            if not _ARG_RE.match(a):
                out.append(LineIssue(
                    ErrorCode.IDENT_INVALID, line_no, line,
                    f"Niepoprawny argument: {a}",
                ))
            elif a.startswith("$") and a[1:] not in refs:
                out.append(LineIssue(
                    ErrorCode.REF_UNDEFINED, line_no, line,
                    f"Referencja {a} użyta przed zdefiniowaniem",
                ))

        arity = self._catalog.expected_arity(op)
        if arity is not None and op not in declared and len(args) != arity:
            out.append(LineIssue(
                ErrorCode.ARITY_MISMATCH, line_no, line,
                f"Operator '{op}' oczekuje {arity} argumentów, otrzymał {len(args)}",
                {"operator": op, "expected": arity, "actual": len(args)},
            ))
        return out
