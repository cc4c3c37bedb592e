"""
render/positive.py — dowód pozytywny: ślad kroków → "True: <cel>. Proof: ...".

Skróty całego dowodu (mają pierwszeństwo):
  kontrapozycja, rozłączność typów / sprzeczne ograniczenia kwantyfikatora,
  świadek egzystencjalny, jawna negacja i CWA dla celów Not.

Składanie ogólne: kroki klasyfikowane po `operation` trafiają do koszyków
w stałej kolejności: fakty (fakty warunku reguły na końcu) → łańcuch
zweryfikowany → dziedziczenie → spełnione warunki → reguły → wiązania.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from .common import HumanRenderer, normalize_sentence, parse_not_goal, split_goal_parts
from .contrapositive import describe_contrapositive_proof
from .results import ProofStep, ReasoningResult
from .session import ReasoningSession

_RULE_OPS = frozenset({"rule_match", "unification_match", "rule_applied"})

_FACT_STEP_OPS = frozenset({
    "direct_match", "direct_fact", "synonym_match",
    "transitive_step", "transitive_match", "transitive_found", "transitive_proof",
    "isA_chain", "inherit_property", "property_inherited", "condition_satisfied",
    "value_has", "rule_match", "rule_applied", "rule_application", "unification_match",
    "default_reasoning", "exception_blocked", "value_type_inheritance",
    "and_satisfied", "or_satisfied",
})

_CHAIN_OPS = frozenset({"before", "causes", "isA", "locatedIn", "partOf"})
_META_FACT_OPS = frozenset({"mutuallyExclusive", "contradictsSameArgs"})
_UNARY_FACT_OPS = frozenset({"holds"})
_SAFE_TOKEN_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_REF_LABEL_RE = re.compile(r"^\s*@\S+\s+")


def _is_printable_fact(fact: str) -> bool:
    parts = fact.split()
    if len(parts) < 2:
        return False
    op = parts[0]
    if len(parts) == 2 and op not in _UNARY_FACT_OPS:
        return False
    if not _SAFE_TOKEN_RE.match(op):
        return False
    return not (op.startswith("__") or op.startswith("Pos"))


def _move_to_end(lines: list[str], should_move: Callable[[str], bool]) -> list[str]:
    keep = [line for line in lines if not should_move(line)]
    return keep + [line for line in lines if should_move(line)]


def _append_new(bucket: list[str], text: str) -> bool:
    if text and text not in bucket:
        bucket.append(text)
        return True
    return False


@dataclass(slots=True)
class _Buckets:
    facts: list[str] = field(default_factory=list)
    chain_verified: list[str] = field(default_factory=list)
    inheritance: list[str] = field(default_factory=list)
    condition_satisfied: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)
    bindings: list[str] = field(default_factory=list)

    def assemble(self, condition_leaves: set[str]) -> list[str]:
        facts = _move_to_end(self.facts, lambda line: line in condition_leaves)
        lines = facts + self.chain_verified + self.inheritance + self.condition_satisfied + self.rules + self.bindings
        return [line for line in lines if line]


class PositiveProofRenderer(HumanRenderer):
    """Jednoprzebiegowy renderer śladu kroków dowodu pozytywnego."""

    def describe(self, result: ReasoningResult) -> str:
        shortcut = self._shortcut(result)
        if shortcut is not None:
            return shortcut

        b = _Buckets()
        chain_facts: list[str] = []
        condition_leaves: set[str] = set()
        rule_applied = False
        chain_ops = 0
        chain_primary: str | None = None
        current_bindings: dict[str, str] | None = None
        goal_parts = split_goal_parts(result.goal)
        goal_op = goal_parts[0] if goal_parts else None

        for step in result.steps:
            op = step.operation

            if op in _RULE_OPS:
                rule_applied = True
                if step.bindings:
                    current_bindings = step.bindings
                self._describe_rule(step, current_bindings, b, condition_leaves)
                continue

            if op == "value_type_inheritance" and step.fact:
                parts = step.fact.split()
                derived = self.sentence(parts[0], parts[1:]) if len(parts) >= 3 else step.fact
                _append_new(b.inheritance, f"Value-type inheritance: inferred {derived} from the type of a value")
                continue

            if op in ("and_satisfied", "or_satisfied"):
                satisfied = []
                for text in self._detail_facts(step.detail):
                    if _append_new(b.facts, text):
                        chain_facts.append(text)
                        satisfied.append(text)
                if op == "and_satisfied":
                    summary = f"And condition satisfied: {', '.join(satisfied)}" if satisfied else "And condition satisfied"
                else:
                    summary = f"Or condition satisfied via: {', '.join(satisfied)}" if satisfied else "Or condition satisfied"
                _append_new(b.condition_satisfied, summary)
                continue

            if op == "default_reasoning":
                rule_applied = True
                text = f"{step.fact or 'default rule'} applies. {step.applied_to or 'entity'} inherits via default"
                _append_new(b.inheritance, text)
                continue

            if op == "exception_blocked":
                text = f"Default blocked by exception: {step.exception or 'exception'} for {step.entity or 'entity'}"
                _append_new(b.inheritance, text)
                continue

            if not step.fact:
                continue
            if op and op not in _FACT_STEP_OPS:
                continue
            fact_parts = step.fact.split()
            if not fact_parts:
                continue
            if fact_parts[0] in _META_FACT_OPS and fact_parts[0] != goal_op:
                continue
            if not _is_printable_fact(step.fact):
                continue

            if len(fact_parts) >= 3:
                step_op, args = fact_parts[0], fact_parts[1:]
                if step_op in _CHAIN_OPS:
                    chain_primary = chain_primary or step_op
                    if chain_primary == step_op:
                        chain_ops += 1
                text = self.sentence(step_op, args) or f"{args[0]} {step_op} {' '.join(args[1:])}"
                if _append_new(b.facts, text):
                    chain_facts.append(text)
            else:
                _append_new(b.facts, f"{fact_parts[1]} {fact_parts[0]}")

        if not rule_applied and chain_ops >= 2:
            label = "Causal chain" if chain_primary == "causes" else "Transitive chain"
            b.chain_verified.append(f"{label} verified ({chain_ops} hops)")

        if rule_applied and (chain_primary == "causes" or any(" causes " in f for f in chain_facts)):
            causal = self._causal_proof(result, b, chain_facts, chain_ops)
            if causal is not None:
                return causal

        goal_text = self.goal_to_human(result.goal)
        goal_norm = normalize_sentence(goal_text)

        if rule_applied and goal_text and condition_leaves:
            self._ground_rule_from_conditions(b, condition_leaves, goal_text)

        proof_steps = b.assemble(condition_leaves)

        if len(proof_steps) == 1 and normalize_sentence(proof_steps[0]) == goal_norm and goal_text:
            return f"True: {goal_text}. Proof: Fact in KB: {goal_text}."

        if self._is_trivial_echo(result, proof_steps, rule_applied, chain_ops):
            return f"Cannot prove: {goal_text or 'goal'}. Proof: Goal fact not found in KB; ignored low-confidence guess."

        if goal_text and proof_steps:
            body = ". ".join(proof_steps)
            body_norm = normalize_sentence(body)
            needs_conclusion = (
                f"therefore {goal_norm}" not in body_norm
                and not body_norm.endswith(goal_norm)
                and (rule_applied or chain_ops >= 2 or len(proof_steps) > 2)
            )
            conclusion = f" Therefore {goal_text}." if needs_conclusion else ""
            return f"True: {goal_text}. Proof: {body}.{conclusion}"
        if goal_text:
            return f"True: {goal_text}. Proof: No proof steps were produced."
        return "Proof valid"

    # ------------------------------------------------------------------
    # Skróty
    # ------------------------------------------------------------------

    def _shortcut(self, result: ReasoningResult) -> str | None:
        contrapositive = describe_contrapositive_proof(self.session, result)
        if contrapositive:
            return contrapositive

        goal = _REF_LABEL_RE.sub("", result.goal.strip() or "goal")
        if result.method in ("quantifier_type_disjointness", "quantifier_unsat"):
            detail = (
                next((s.detail for s in result.steps if s.operation == "type_disjointness" and s.detail), None)
                or next((s.detail for s in result.steps if s.operation == "unsat_constraints" and s.detail), None)
                or "Derived unsatisfiable existential constraints"
            )
            return f"True: {goal}. Proof: {detail}."
        if result.method == "exists_witness":
            witness = next((s for s in result.steps if s.operation == "exists_witness"), None)
            entity = (witness.entity if witness else None) or "witness"
            return f"True: {goal}. Proof: Witness {entity} satisfies the existential."

        not_goal = parse_not_goal(result.goal)
        if not_goal is None:
            return None
        inner = self.session.generate_text(not_goal.op, list(not_goal.args)).removesuffix(".")
        negated = f"NOT ({inner})"
        ops = {s.operation for s in result.steps}
        if "not_fact" in ops or result.method == "explicit_negation":
            return f"True: {negated}. Proof: Found explicit negation: {negated}."
        if "cwa_negation" in ops or result.method == "closed_world_assumption":
            return f"True: {negated}. Proof: Closed world assumption: cannot prove {not_goal.dsl}, therefore {negated}."
        return None

    # ------------------------------------------------------------------
    # Koszyki
    # ------------------------------------------------------------------

    def _describe_rule(
        self,
        step: ProofStep,
        bindings: dict[str, str] | None,
        b: _Buckets,
        condition_leaves: set[str],
    ) -> None:
        rule = self.rule_by_id(step.rule_id)
        if rule is not None and rule.condition is not None:
            condition_leaves.update(h for h in self.collect_leaf_humans(rule.condition, bindings) if h)

        cond = self.compound_to_human(rule.condition, bindings) if rule and rule.condition else None
        conc = self.compound_to_human(rule.conclusion, bindings) if rule and rule.conclusion else None
        if cond and conc:
            _append_new(b.rules, f"Applied rule: IF ({cond}) THEN ({conc})")
            if ("?" in cond or "?" in conc) and bindings:
                line = self.bindings_to_human(bindings)
                if line:
                    _append_new(b.bindings, line)
        else:
            _append_new(b.rules, "Applied rule: implication")

    def _detail_facts(self, detail: str | None) -> list[str]:
        """'causes A B, causes B C' → zdania dla faktów o co najmniej 2 argumentach."""
        out = []
        for chunk in (detail or "").split(","):
            parts = chunk.split()
            if len(parts) >= 3:
                op, args = parts[0], parts[1:]
                out.append(self.sentence(op, args) or f"{args[0]} {op} {' '.join(args[1:])}")
        return out

    def _causal_proof(self, result: ReasoningResult, b: _Buckets, chain_facts: list[str], chain_ops: int) -> str | None:
        causal = [f for f in chain_facts if " causes " in f]
        if not causal:
            return None
        and_line = next((p for p in b.condition_satisfied if p.startswith("And condition satisfied")), None)
        hops = chain_ops if chain_ops >= 2 else len(causal)
        goal_text = self.goal_to_human(result.goal)

        grounded = None
        if and_line and goal_text:
            facts = [s.strip() for s in and_line.split(":", 1)[-1].split(",") if s.strip()] if ":" in and_line else []
            if len(facts) >= 2:
                grounded = f"Applied rule: IF (({facts[0]}) AND ({facts[1]})) THEN ({goal_text})"

        lines = list(causal)
        if hops >= 2:
            lines.append(f"Causal chain verified ({hops} hops)")
        if and_line:
            lines.append(and_line)
        if grounded:
            lines.append(grounded)
        else:
            lines += b.rules
        conclusion = f" Therefore {goal_text}." if goal_text else ""
        return f"True: {goal_text}. Proof: {'. '.join(lines)}.{conclusion}"

    def _ground_rule_from_conditions(self, b: _Buckets, condition_leaves: set[str], goal_text: str) -> None:
        """Linia And o tylu faktach, ile liści warunku → reguła podstawiona faktami."""
        for line in b.condition_satisfied:
            if not line.startswith("And condition satisfied:"):
                continue
            facts = [s.strip() for s in line.split(":", 1)[1].split(",") if s.strip()]
            if len(facts) == len(condition_leaves) and len(facts) >= 2:
                cond = " AND ".join(f"({f})" for f in facts)
                b.rules[:] = [f"Applied rule: IF ({cond}) THEN ({goal_text})"]
                b.bindings.clear()
                return

    def _is_trivial_echo(self, result: ReasoningResult, proof_steps: list[str], rule_applied: bool, chain_ops: int) -> bool:
        """Jednokrokowa odpowiedź bez reguły dla celu nieobecnego w KB."""
        parts = split_goal_parts(result.goal)
        if len(parts) < 2:
            return False
        in_kb = self.fact_exists(parts[0], parts[1:])
        return len(proof_steps) <= 1 and not rule_applied and chain_ops <= 1 and not in_kb


def describe_positive_proof(session: ReasoningSession, result: ReasoningResult) -> str:
    return PositiveProofRenderer(session).describe(result)
