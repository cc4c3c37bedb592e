"""
render/query.py — tłumacz wyników zapytań (odpowiedzi z wiązań dziur ?x).

Kolejność:
  1. wynik solve (CSP)            → SolveResultFormatter
  2. wyniki meta operatorów       → session.format_result
  3. wiązania                     → odpowiedzi + dowody; wyniki niezawodnych
                                    metod przed wynikami HDC powyżej progu
  4. brak odpowiedzi dla "can"    → zdolność wyprowadzona z has + isA (BFS)
  5. inaczej                      → "No results"
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from typing import Sequence

from nl_model.constants import RESERVED_SYMBOLS

from .common import (
    HumanRenderer,
    Translation,
    ensure_period,
    normalize_sentence,
    strip_punct,
)
from .prove import ProveTranslator
from .results import Binding, QueryMatch, ReasoningResult
from .solve import SolveResultFormatter

META_OPERATORS = frozenset({
    "abduce", "whatif", "similar", "analogy", "symbolic_analogy",
    "property_analogy", "difference", "induce", "bundle", "deduce",
})

RELIABLE_METHODS = frozenset({
    "direct", "transitive", "bundle_common", "rule", "rule_derived",
    "compound_csp", "property_inheritance", "hdc_validated",
    "hdc_transitive_validated", "hdc_direct_validated", "hdc_rule_validated",
    "symbolic_supplement", "symbolic_fallback",
})

# Minimalne podobieństwo wyniku HDC per strategia (nieznana → dense-binary)
HDC_MATCH_THRESHOLDS: dict[str, float] = {
    "dense-binary":      0.5,
    "sparse-polynomial": 0.02,
}

_PLAN_OPS = frozenset({"plan", "planStep", "planAction"})
_FORBIDDEN_FRAGMENTS = ("__HOLE", "HOLE_", "__Relation", "__Pair")
_POSITION_RE = re.compile(r"^(?:Pos\d+|__Pos\d+__|__POS_\d+__)$")
_VERBATIM_STEP_RE = re.compile(
    r"^(?:Loaded plan\b|Start:|Step\s+\d+:|Goals?\s+satisfied\b|Goals?\s+not\s+satisfied\b|Missing:)",
    re.IGNORECASE,
)
_APPLIED_RULE_RE = re.compile(r"^applied\s+rule:", re.IGNORECASE)
_REF_TOKEN_RE = re.compile(r"\B@\w+\b")
_IMPLIES_RULE_RE = re.compile(r"\bApplied\s+rule:\s*Implies\b", re.IGNORECASE)
_CONSTRAINT_RE = re.compile(r"\b(?:allDifferent|noConflict|conflictsWith|conflicts|constraint|csp)\b", re.IGNORECASE)
_CHAIN_HINT_RE = re.compile(
    r"\b(?:is a|is in|implies|causes|before|located in|subsetof|elementof|partof)\b",
    re.IGNORECASE,
)
_OP_TOKEN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def hdc_threshold(strategy: str | None) -> float:
    return HDC_MATCH_THRESHOLDS.get(strategy or "", HDC_MATCH_THRESHOLDS["dense-binary"])


def extract_query_line(query_dsl: str) -> str:
    """Linia celu: pierwsza zawierająca '?', inaczej ostatnia niepusta."""
    lines = [line.strip() for line in (query_dsl or "").strip().splitlines() if line.strip()]
    if not lines:
        return ""
    return next((line for line in lines if "?" in line), lines[-1])


@dataclass(frozen=True, slots=True)
class _Answer:
    text: str | None
    proof: list[str]


_NO_ANSWER = _Answer(None, [])


class QueryTranslator(HumanRenderer):
    """Akcja query."""

    def __init__(self, session) -> None:
        super().__init__(session)
        self.solve_formatter = SolveResultFormatter(session)

    def translate(self, result: ReasoningResult | None, query_dsl: str = "") -> str | Translation:
        if result is None:
            return "No results"
        if result.solve_result is not None and result.solve_result.kind == "solve":
            return self.solve_formatter.format(result.solve_result)
        if any(m.method in META_OPERATORS for m in result.all_results):
            return self.session.format_result(result, "query")
        if result.bindings:
            return self.describe_bindings(result, query_dsl) or "No results"
        return "No results"

    # ------------------------------------------------------------------
    # Odpowiedzi zakazane
    # ------------------------------------------------------------------

    def is_forbidden_answer(self, answer: str | None) -> bool:
        """Symbole wewnętrzne i zarezerwowane nie są odpowiedziami."""
        a = (answer or "").strip()
        if not a or a in RESERVED_SYMBOLS:
            return True
        if a.startswith(("@", "__")) or any(f in a for f in _FORBIDDEN_FRAGMENTS):
            return True
        if _POSITION_RE.match(a):
            return True
        return any(
            f.operator == "isA" and f.args[:1] == (a,) and f.args[1:2] in (("__Relation",), ("__Pair",))
            for f in self.session.kb_facts
        )

    # ------------------------------------------------------------------
    # Wiązania
    # ------------------------------------------------------------------

    def describe_bindings(self, result: ReasoningResult, query_dsl: str = "") -> str:
        parts = [p for p in extract_query_line(query_dsl).split() if not p.startswith("@")]
        op = parts[0] if parts else ""

        direct = [m for m in result.all_results if m.bindings and m.method in RELIABLE_METHODS]
        hdc = self._hdc_matches(result.all_results)
        entries = self._merge(direct, hdc, parts)
        if not entries and result.bindings:
            entries = [QueryMatch(method="direct", score=1.0, bindings=result.bindings)]

        answers: list[str] = []
        proofs: list[str] = []
        for entry in entries:
            answer = self._answer_for(entry, parts)
            if not answer.text or answer.text in answers:
                continue
            answers.append(answer.text)
            proofs.append(". ".join(p for p in (strip_dots(s).strip() for s in answer.proof) if p))

        if not answers and op == "can" and len(parts) > 2:
            return self.derive_modal_capability(parts, result)
        if not answers:
            return "No results"

        segments = []
        for answer, proof in zip(answers, proofs):
            if proof:
                segments.append(f"{ensure_period(answer)} Proof: {ensure_period(proof)}")
            else:
                segments.append(ensure_period(answer))
        return " ".join(segments).strip()

    def _hdc_matches(self, matches: Sequence[QueryMatch]) -> list[QueryMatch]:
        threshold = hdc_threshold(self.session.hdc_strategy)
        return [
            m for m in matches
            if m.method.startswith("hdc")
            and m.bindings
            and m.score >= threshold
            and not any(self.is_forbidden_answer(b.answer) for b in m.bindings.values())
        ]

    def _merge(self, primary: list[QueryMatch], secondary: list[QueryMatch], parts: list[str]) -> list[QueryMatch]:
        """Scala wyniki po kluczu odpowiedzi wszystkich dziur (pierwszy wygrywa)."""
        holes = list(dict.fromkeys(p[1:] for p in parts if p.startswith("?")))
        seen: set[tuple[str, ...]] = set()
        combined = []
        for entry in primary + secondary:
            if not entry.bindings:
                continue
            answers = tuple(_answer(entry.bindings, h) or "" for h in holes)
            if any(not a.strip() for a in answers):
                continue
            if answers in seen or any(self.is_forbidden_answer(a) for a in answers):
                continue
            seen.add(answers)
            combined.append(entry)
        return combined

    def _answer_for(self, entry: QueryMatch, parts: list[str]) -> _Answer:
        if not parts:
            return _NO_ANSWER
        op = parts[0]
        holes = [p[1:] for p in parts[1:] if p.startswith("?")]
        args = [
            (_answer(entry.bindings, p[1:]) or p) if p.startswith("?") else p
            for p in parts[1:]
        ]
        if any(a.startswith("?") for a in args):
            return _NO_ANSWER
        if op in _PLAN_OPS and len(args) > 1 and not args[1].isdigit():
            return _NO_ANSWER
        if any(self.is_forbidden_answer(_answer(entry.bindings, h)) for h in holes):
            return _NO_ANSWER

        text = self.sentence(op, args)
        is_hdc = entry.method.startswith("hdc")

        collected: list[str] = []
        for h in holes:
            binding = entry.bindings.get(h)
            if binding is not None:
                collected += binding.steps
        steps = list(dict.fromkeys(s for s in collected if s.strip())) or list(entry.steps)

        if steps:
            normalized = self.normalize_proof_steps(steps)
            if len(normalized) == 1 and normalize_sentence(normalized[0]) == normalize_sentence(text):
                plan_proof = self.build_plan_proof(op, args)
                if plan_proof:
                    return _Answer(text, plan_proof)
            if self.should_upgrade_proof_steps(steps):
                proof = self.proof_from_prove(op, args)
                if proof:
                    return _Answer(text, proof.split(". "))
                if is_hdc:
                    return _NO_ANSWER
            if len(normalized) > 1:
                normalized = [s for s in normalized if normalize_sentence(s) != normalize_sentence(text)]
            return _Answer(text, normalized)

        plan_proof = self.build_plan_proof(op, args)
        if plan_proof:
            return _Answer(text, plan_proof)
        proof = self.proof_from_prove(op, args)
        if proof:
            return _Answer(text, [p for p in proof.split(". ") if p])
        if is_hdc:
            return _NO_ANSWER
        return _Answer(text, [])

    # ------------------------------------------------------------------
    # Kroki dowodu
    # ------------------------------------------------------------------

    def normalize_proof_steps(self, steps: Sequence[str]) -> list[str]:
        """Fakty DSL → zdania; kroki już czytelne (Applied rule, Step N:, ...) bez zmian."""
        out = []
        for raw in steps:
            s = raw.strip()
            if not s:
                continue
            if _VERBATIM_STEP_RE.match(s) or _APPLIED_RULE_RE.match(s) or _REF_TOKEN_RE.search(s):
                out.append(strip_punct(s))
                continue
            parts = s.split()
            if parts[0] in ("Applied", "Search", "Searched", "Found"):
                out.append(strip_punct(s))
                continue
            if len(parts) >= 3 and _OP_TOKEN_RE.match(parts[0]):
                out.append(self.sentence(parts[0], parts[1:]) or s)
            else:
                out.append(s)
        return out

    def should_upgrade_proof_steps(self, steps: Sequence[str]) -> bool:
        """Czy ślad zapytania jest zbyt ubogi i lepiej go zastąpić dowodem prove."""
        if any(_REF_TOKEN_RE.search(s) or _IMPLIES_RULE_RE.search(s) for s in steps):
            return True
        normalized = self.normalize_proof_steps(steps)
        if not normalized:
            return True
        if any(_CONSTRAINT_RE.search(s) for s in normalized) and any(
            re.search(r"\bsatisfied\b", s, re.IGNORECASE) for s in normalized
        ):
            return False
        if len(normalized) <= 2:
            return True
        if any(_IMPLIES_RULE_RE.search(s) for s in normalized):
            return True
        has_condition = any(re.search(r"\bcondition satisfied\b", s) for s in normalized)
        if not has_condition and any(re.search(r"\bApplied rule:", s) for s in normalized):
            return True
        looks_like_chain = any(_CHAIN_HINT_RE.search(s) for s in normalized)
        has_conclusion = any(re.search(r"\b(?:therefore|verified)\b", s, re.IGNORECASE) for s in normalized)
        return looks_like_chain and not has_conclusion

    def proof_from_prove(self, op: str, args: Sequence[str]) -> str | None:
        """Dowód celu 'op args' z session.prove, tekst po 'Proof:'."""
        goal = " ".join(("@goal:goal", op, *args))
        proved = self.session.prove(goal)
        if proved is None or not proved.valid:
            return None
        described = ProveTranslator(self.session).translate(proved)
        m = re.search(r"Proof:\s*(.+)", described)
        return m.group(1).strip() if m else None

    def build_plan_proof(self, op: str, args: Sequence[str]) -> list[str] | None:
        """Dowód dla plan / planStep / planAction wprost z faktów planu w KB."""
        if op not in _PLAN_OPS or not args:
            return None
        plan = args[0]

        def same_plan(operator: str) -> list[tuple[str, ...]]:
            return [f.args for f in self.session.kb_facts if f.operator == operator and f.args[:1] == (plan,)]

        match op:
            case "plan":
                by_index: dict[int, str] = {}
                for fact_args in same_plan("planStep"):
                    if len(fact_args) >= 3 and fact_args[1].isdigit():
                        by_index.setdefault(int(fact_args[1]), fact_args[2])
                if not by_index:
                    return None
                indices = sorted(by_index)
                preview = ", ".join(f"Step {n}: {by_index[n]}" for n in indices[:5])
                return [f"Found {len(indices)} plan steps for {plan}", f"Examples: {preview}"]
            case "planStep":
                if len(args) < 3:
                    return None
                idx, action = args[1], args[2]
                if not any(a[1:3] == (idx, action) for a in same_plan("planStep")):
                    return None
                return [f"Fact in KB: Step {idx} of plan {plan} is {action}"]
            case _:
                if len(args) < 5:
                    return None
                idx, tool, inp, out = args[1:5]
                if not any(a[1:5] == (idx, tool, inp, out) for a in same_plan("planAction")):
                    return None
                return [f"Fact in KB: Step {idx} of plan {plan} uses {tool} with {inp} and {out}"]

    # ------------------------------------------------------------------
    # Zdolność modalna
    # ------------------------------------------------------------------

    def derive_modal_capability(self, parts: list[str], result: ReasoningResult | None = None) -> str:
        """
        'can ?x Fly' bez odpowiedzi: posiadacze (has H V), dla których
        V dochodzi łańcuchem isA do celu.
        """
        op, target = parts[0], parts[2]
        candidates: list[str] = []
        for fact in self.session.kb_facts:
            if fact.operator != "has" or len(fact.args) < 2:
                continue
            holder, value = fact.args[0], fact.args[1]
            if holder and value and holder not in candidates and self.value_reaches_target(value, target):
                candidates.append(holder)
        if not candidates:
            return "No results"
        texts = list(dict.fromkeys(self.sentence(op, [h, target]) for h in candidates))
        return self._with_proof(texts, result)

    def value_reaches_target(self, value: str, target: str) -> bool:
        queue = deque([value])
        visited: set[str] = set()
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            if current == target:
                return True
            queue.extend(
                f.args[1] for f in self.session.kb_facts
                if f.operator == "isA" and len(f.args) >= 2 and f.args[0] == current
            )
        return False

    def _with_proof(self, texts: list[str], result: ReasoningResult | None) -> str:
        if any("Proof:" in t for t in texts):
            return ". ".join(texts) + "."
        trace = self._proof_trace(result) if result is not None else None
        if trace:
            return " ".join(f"{t}. Proof: {trace}" for t in texts)
        return ". ".join(texts) + "."

    @staticmethod
    def _proof_trace(result: ReasoningResult) -> str | None:
        steps: list[str] = []
        for bindings in (result.bindings, *(m.bindings for m in result.all_results)):
            for binding in bindings.values():
                steps += binding.steps
        return ". ".join(steps) if steps else None


def _answer(bindings: dict[str, Binding], hole: str) -> str | None:
    binding = bindings.get(hole)
    return binding.answer if binding is not None else None


def strip_dots(text: str) -> str:
    return re.sub(r"\.+$", "", text)
