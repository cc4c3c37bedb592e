"""
render/solve.py — formatowanie wyników bloków solve (CSP).
"""

from __future__ import annotations

import re

from .common import HumanRenderer, Translation, make_translation
from .results import SolveFact, SolveResult

_SPACE_DOT_RE = re.compile(r"\s+\.")


class SolveResultFormatter(HumanRenderer):
    """
    Sukces: "Found N <opis>: 1. a, b. 2. c." + dowód ze spełnionych ograniczeń.
    Porażka: komunikat błędu + lista ograniczeń, których nie da się spełnić.
    """

    def format(self, solve: SolveResult | None) -> Translation:
        if solve is None or solve.kind != "solve":
            return make_translation("No valid solutions found.", "CSP found no matching solve block.")

        if not solve.success or solve.solution_count == 0:
            constraints = ", ".join(f"{c.relation}({', '.join(c.entities)})" for c in solve.constraints)
            proof = (
                f"Constraints {constraints} cannot all be satisfied with available assignments."
                if constraints
                else "No valid assignment exists."
            )
            return make_translation(solve.error or "No valid solutions found.", proof)

        texts = []
        for idx, sol in enumerate(solve.solutions, start=1):
            label = f"{sol.index}." if sol.index else f"{idx}."
            facts = ", ".join(self.describe_fact(f) for f in sol.facts)
            texts.append(_SPACE_DOT_RE.sub(".", f"{label} {facts}"))

        checks: list[str] = []
        for sol in solve.solutions:
            for check in sol.proof:
                line = f"{check.constraint} satisfied: {check.reason}"
                if check.satisfied and line not in checks:
                    checks.append(line)

        summary = solve.solution_count or len(texts)
        description = solve.description or solve.kind or "solutions"
        joined = ". ".join(texts)
        text = f"Found {summary} {description}: {joined}." if joined else f"Found {summary} {description}."
        proof = ". ".join(checks) if checks else f"All {summary} assignments satisfy constraints."
        return make_translation(text, proof)

    def describe_fact(self, fact: SolveFact) -> str:
        if fact.raw is not None:
            return fact.raw
        if not fact.op:
            return ""
        return self.session.generate_text(fact.op, list(fact.args)).removesuffix(".")
