"""
render/results.py — rekordy wyników wnioskowania konsumowane przez renderer.

ProofStep        — jeden krok śladu dowodu (operation, fact, rule_id, bindings, ...)
ReasoningResult  — wynik prove / query / learn / listSolutions w jednym rekordzie
Binding          — odpowiedź dla jednej dziury zapytania + kroki dowodu
QueryMatch       — pojedynczy wynik zapytania (metoda, wynik HDC, wiązania)
SolveResult      — wynik bloku solve (CSP): rozwiązania albo sprzeczne ograniczenia
Elaboration      — rozwinięcie dowodu przez TextGenerator

Kształt wejścia odpowiada JSON silnika (camelCase). Brak pól opcjonalnych
jest dozwolony; zły typ pola → RenderInputError.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .ast import RenderInputError


# ---------------------------------------------------------------------------
# Pomocnicze odczyty pól
# ---------------------------------------------------------------------------

def _mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise RenderInputError(f"{what} musi być obiektem JSON, otrzymano: {type(data).__name__}")
    return data


def _list(data: Mapping[str, Any], key: str, what: str) -> list[Any]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise RenderInputError(f"Pole '{key}' w {what} musi być listą")
    return raw


def _opt_str(data: Mapping[str, Any], key: str) -> str | None:
    raw = data.get(key)
    return None if raw is None else str(raw)


def _opt_float(data: Mapping[str, Any], key: str) -> float | None:
    raw = data.get(key)
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    raise RenderInputError(f"Pole '{key}' musi być liczbą")


# ---------------------------------------------------------------------------
# Kroki dowodu
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProofStep:
    """
    Krok śladu dowodu.

    - operation:  znacznik kroku (direct_match, rule_applied, and_satisfied, ...)
    - fact:       fakt DSL "op a b" związany z krokiem
    - rule_id:    identyfikator reguły (do odszukania w session.rules)
    - bindings:   wiązania zmiennych reguły {nazwa: wartość}
    - inference:  np. "contrapositive"
    """
    operation: str = ""
    fact: str | None = None
    goal: str | None = None
    rule: str | None = None
    rule_id: str | None = None
    bindings: dict[str, str] | None = None
    detail: str | None = None
    applied_to: str | None = None
    exception: str | None = None
    entity: str | None = None
    inference: str | None = None
    source: str | None = None
    dest: str | None = None
    target: str | None = None
    container: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ProofStep:
        d = _mapping(data, "Krok dowodu")
        raw_bindings = d.get("bindings")
        bindings = None
        if isinstance(raw_bindings, Mapping):
            bindings = {str(k): str(v) for k, v in raw_bindings.items() if isinstance(v, (str, int, float))}
        return cls(
            operation=str(d.get("operation") or ""),
            fact=_opt_str(d, "fact"),
            goal=_opt_str(d, "goal"),
            rule=_opt_str(d, "rule"),
            rule_id=_opt_str(d, "ruleId"),
            bindings=bindings,
            detail=_opt_str(d, "detail"),
            applied_to=_opt_str(d, "appliedTo"),
            exception=_opt_str(d, "exception"),
            entity=_opt_str(d, "entity"),
            inference=_opt_str(d, "inference"),
            source=_opt_str(d, "from"),
            dest=_opt_str(d, "to"),
            target=_opt_str(d, "target"),
            container=_opt_str(d, "container"),
        )


# ---------------------------------------------------------------------------
# Wiązania zapytań
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Binding:
    """Odpowiedź dla dziury zapytania (?x) z opcjonalnymi krokami dowodu."""
    answer: str | None = None
    steps: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Binding:
        if isinstance(data, str):
            return cls(answer=data)
        d = _mapping(data, "Wiązanie")
        raw_steps = d.get("steps")
        if isinstance(raw_steps, str):
            steps: tuple[str, ...] = (raw_steps,)
        elif isinstance(raw_steps, list):
            steps = tuple(s for s in raw_steps if isinstance(s, str))
        else:
            steps = ()
        answer = d.get("answer", d.get("value"))
        return cls(answer=None if answer is None else str(answer), steps=steps)


def _bindings(raw: Any) -> dict[str, Binding]:
    if raw is None:
        return {}
    d = _mapping(raw, "Wiązania")
    return {str(k).lstrip("?"): Binding.from_dict(v) for k, v in d.items()}


@dataclass(frozen=True, slots=True)
class QueryMatch:
    """
    Pojedynczy wynik zapytania.

    - method:   metoda silnika (direct, transitive, hdc_*, meta operator)
    - score:    podobieństwo HDC (0..1)
    - proof:    ładunek meta operatora (similar, analogy, abduce, ...)
    """
    method: str = ""
    score: float = 0.0
    bindings: dict[str, Binding] = field(default_factory=dict)
    steps: tuple[str, ...] = ()
    proof: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> QueryMatch:
        d = _mapping(data, "Wynik zapytania")
        raw_proof = d.get("proof")
        return cls(
            method=str(d.get("method") or ""),
            score=_opt_float(d, "score") or 0.0,
            bindings=_bindings(d.get("bindings")),
            steps=tuple(s for s in _list(d, "steps", "wyniku zapytania") if isinstance(s, str)),
            proof=dict(raw_proof) if isinstance(raw_proof, Mapping) else {},
        )


# ---------------------------------------------------------------------------
# Solve (CSP)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SolveFact:
    """
    Fakt przypisania w rozwiązaniu: operator + argumenty albo surowy tekst
    (dla obiektów bez rozpoznawalnego kształtu).
    """
    op: str = ""
    args: tuple[str, ...] = ()
    raw: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SolveFact:
        if isinstance(data, str):
            parts = data.split()
            return cls(parts[0], tuple(parts[1:])) if parts else cls()
        d = _mapping(data, "Fakt rozwiązania")
        if isinstance(d.get("dsl"), str):
            return cls.from_dict(d["dsl"])
        if d.get("predicate"):
            return cls(str(d["predicate"]), (str(d.get("subject")), str(d.get("object"))))
        return cls(raw=json.dumps(dict(d), ensure_ascii=False, separators=(",", ":")))


@dataclass(frozen=True, slots=True)
class ConstraintCheck:
    constraint: str
    reason: str = ""
    satisfied: bool = False


@dataclass(frozen=True, slots=True)
class Solution:
    facts: tuple[SolveFact, ...] = ()
    index: int | None = None
    proof: tuple[ConstraintCheck, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Solution:
        if isinstance(data, list):
            return cls(tuple(SolveFact.from_dict(f) for f in data))
        d = _mapping(data, "Rozwiązanie")
        index = d.get("index")
        checks = tuple(
            ConstraintCheck(str(p.get("constraint", "")), str(p.get("reason", "")), bool(p.get("satisfied")))
            for p in _list(d, "proof", "rozwiązaniu")
            if isinstance(p, Mapping)
        )
        return cls(
            facts=tuple(SolveFact.from_dict(f) for f in _list(d, "facts", "rozwiązaniu")),
            index=int(index) if isinstance(index, int) and not isinstance(index, bool) else None,
            proof=checks,
        )


@dataclass(frozen=True, slots=True)
class Constraint:
    relation: str
    entities: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SolveResult:
    """
    Wynik bloku solve.

    - kind:           "solve" dla wyników CSP (inne wartości są ignorowane)
    - solution_count: liczba rozwiązań (0 → porażka)
    - constraints:    ograniczenia zgłaszane przy porażce
    - description:    etykieta rozwiązań ("seating arrangements")
    """
    kind: str = "solve"
    success: bool = False
    solution_count: int = 0
    solutions: tuple[Solution, ...] = ()
    constraints: tuple[Constraint, ...] = ()
    error: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SolveResult:
        d = _mapping(data, "Wynik solve")
        constraints = tuple(
            Constraint(str(c.get("relation", "")), tuple(str(e) for e in c.get("entities") or ()))
            for c in _list(d, "constraints", "wyniku solve")
            if isinstance(c, Mapping)
        )
        return cls(
            kind=str(d.get("type") or ""),
            success=bool(d.get("success")),
            solution_count=int(d.get("solutionCount") or 0),
            solutions=tuple(Solution.from_dict(s) for s in _list(d, "solutions", "wyniku solve")),
            constraints=constraints,
            error=_opt_str(d, "error"),
            description=(
                _opt_str(d, "description") or _opt_str(d, "destination") or _opt_str(d, "label")
            ),
        )


# ---------------------------------------------------------------------------
# Wynik wnioskowania
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ReasoningResult:
    """
    Wynik akcji silnika.

    prove:          valid, result (False → dowód negatywny), goal, method,
                    reason, search_trace, steps, confidence
    query:          bindings, all_results, solve_result
    learn:          success, facts (liczba), warnings, solve_result
    listSolutions:  success, solution_count, solutions
    """
    valid: bool = False
    result: bool | None = None
    goal: str = ""
    method: str | None = None
    reason: str | None = None
    search_trace: str | None = None
    steps: list[ProofStep] = field(default_factory=list)
    confidence: float | None = None
    bindings: dict[str, Binding] = field(default_factory=dict)
    all_results: list[QueryMatch] = field(default_factory=list)
    solve_result: SolveResult | None = None
    warnings: list[str] = field(default_factory=list)
    success: bool = False
    facts: int = 0
    solution_count: int = 0
    solutions: list[Solution] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ReasoningResult:
        d = _mapping(data, "Wynik wnioskowania")
        confidence = _opt_float(d, "confidence")
        proof_object = d.get("proofObject")
        if confidence is None and isinstance(proof_object, Mapping):
            confidence = _opt_float(proof_object, "confidence")
        raw_result = d.get("result")
        solve = d.get("solveResult")
        facts = d.get("facts")
        return cls(
            valid=bool(d.get("valid")),
            result=raw_result if isinstance(raw_result, bool) else None,
            goal=str(d.get("goal") or ""),
            method=_opt_str(d, "method"),
            reason=_opt_str(d, "reason"),
            search_trace=_opt_str(d, "searchTrace"),
            steps=[ProofStep.from_dict(s) for s in _list(d, "steps", "wyniku")],
            confidence=confidence,
            bindings=_bindings(d.get("bindings")),
            all_results=[QueryMatch.from_dict(r) for r in _list(d, "allResults", "wyniku")],
            solve_result=SolveResult.from_dict(solve) if solve is not None else None,
            warnings=[str(w) for w in _list(d, "warnings", "wyniku")],
            success=bool(d.get("success")),
            facts=facts if isinstance(facts, int) and not isinstance(facts, bool) else 0,
            solution_count=int(d.get("solutionCount") or 0),
            solutions=[Solution.from_dict(s) for s in _list(d, "solutions", "wyniku")],
        )


@dataclass(slots=True)
class Elaboration:
    """Rozwinięcie dowodu: tekst główny, łańcuch kroków i pełny dowód."""
    text: str
    proof_chain: list[str] = field(default_factory=list)
    full_proof: str | None = None
