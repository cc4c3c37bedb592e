"""
render/prove.py — tłumacz wyników prove.

Dowód nieważny → wyjaśnienie: jawna negacja, negacja w świecie otwartym,
reguła z niespełnionym poprzednikiem (pierwsza pasująca wygrywa),
diagnostyka obecności faktów w KB. Dowód negatywny → łańcuch kontrprzykładu.
Dowód pozytywny → render/positive.py.
"""

from __future__ import annotations

import math
import re
from typing import Sequence

from .ast import Expr, Hole, Identifier, Literal, Statement
from .common import HumanRenderer, collect_leaf_statements, parse_not_goal, split_goal_parts
from .positive import describe_positive_proof
from .results import ReasoningResult

_NEGATION_TRACE_RE = re.compile(r"Found explicit negation:|Negation blocks inference", re.IGNORECASE)
_GOAL_NEGATED_RE   = re.compile(r"Goal is negated", re.IGNORECASE)
_EXPLICIT_NEG_RE   = re.compile(r"explicit negation", re.IGNORECASE)
_SEARCH_PREFIX_RE  = re.compile(r"^Search:\s*", re.IGNORECASE)


def match_statement_to_goal(ast: Expr, goal_op: str, goal_args: Sequence[str]) -> dict[str, str] | None:
    """Unifikuje stwierdzenie reguły z celem; zwraca wiązania dziur albo None."""
    if not isinstance(ast, Statement) or ast.operator != goal_op:
        return None
    if len(ast.args) != len(goal_args):
        return None
    bindings: dict[str, str] = {}
    for node, want in zip(ast.args, goal_args):
        match node:
            case Identifier(name=name):
                if name != want:
                    return None
            case Hole(name=name):
                if bindings.get(name, want) != want:
                    return None
                bindings[name] = want
            case Literal(value=value):
                if str(value) != want:
                    return None
            case _:
                return None
    return bindings


def ground_statement(ast: Expr, bindings: dict[str, str]) -> tuple[str, list[str]] | None:
    """Podstawia wiązania; None dla węzłów spoza Identifier / Hole / Literal."""
    if not isinstance(ast, Statement):
        return None
    args: list[str] = []
    for node in ast.args:
        match node:
            case Identifier(name=name):
                args.append(name)
            case Hole(name=name):
                args.append(bindings.get(name) or f"?{name}")
            case Literal(value=value):
                args.append(str(value))
            case _:
                return None
    return ast.operator, args


class ProveTranslator(HumanRenderer):
    """Akcja prove: prawda / fałsz / brak dowodu + opcjonalna pewność."""

    def translate(self, result: ReasoningResult | None) -> str:
        if result is None:
            return "Cannot prove: statement"
        if not result.valid:
            base = self.describe_invalid_proof(result)
        elif result.result is False:
            base = self.describe_negative_proof(result)
        else:
            base = describe_positive_proof(self.session, result)

        if result.confidence is not None and math.isfinite(result.confidence):
            return f"{base} (confidence={result.confidence:.2f})"
        return base

    # ------------------------------------------------------------------
    # Dowód nieważny
    # ------------------------------------------------------------------

    def describe_invalid_proof(self, result: ReasoningResult) -> str:
        goal_text = self.goal_to_human(result.goal)
        trace = (result.search_trace or "").strip()
        reason = result.reason or ""

        if _NEGATION_TRACE_RE.search(trace) or _GOAL_NEGATED_RE.search(reason):
            proof = f"Found explicit negation: NOT ({goal_text}). Negation blocks inference."
            return f"Cannot prove: {goal_text}. Proof: {proof}"

        not_goal = parse_not_goal(result.goal)
        if not_goal and _EXPLICIT_NEG_RE.search(reason):
            inner = self.session.generate_text(not_goal.op, list(not_goal.args)).removesuffix(".")
            proof = f"Open-world negation: no explicit negation fact for ({inner})."
            return f"Cannot prove: NOT ({inner}). Proof: {proof}"

        explanation = self.explain_rule_failure(result)
        if explanation:
            return f"Cannot prove: {goal_text}. Proof: {explanation}"

        parts = split_goal_parts(result.goal)
        goal_op = parts[0] if parts else None
        goal_args = parts[1:]
        subj = goal_args[0] if goal_args else None
        obj = goal_args[1] if len(goal_args) > 1 else None

        if goal_op and self.fact_exists(goal_op, goal_args):
            proof = f"Goal fact exists in KB but was rejected by the prover ({result.reason or 'unprovable'})."
            return f"Cannot prove: {goal_text}. Proof: {proof}"

        if goal_op and subj and obj:
            has_any = any(
                f.operator == goal_op and f.args[:1] == (subj,)
                for f in self.session.kb_facts
            )
            if not has_any:
                proof = f"No {goal_op} facts for {subj} exist in KB, so {goal_text} cannot be derived."
            else:
                proof = (
                    f"No proof found for {goal_text} within the search limits "
                    f"({result.reason or 'no applicable rules'})."
                )
            return f"Cannot prove: {goal_text}. Proof: {proof}"

        if trace:
            return f"Cannot prove: {goal_text}. Proof: {_SEARCH_PREFIX_RE.sub('', trace)}"
        return f"Cannot prove: {goal_text}. Proof: No valid derivation was found."

    def explain_rule_failure(self, result: ReasoningResult) -> str | None:
        """
        Szuka reguły, której wniosek unifikuje się z celem, i raportuje
        literały poprzednika: Found / Blocked / Missing. Pierwsza reguła
        z niespełnionym poprzednikiem wygrywa.
        """
        parts = split_goal_parts(result.goal)
        if len(parts) < 2:
            return None
        goal_op, goal_args = parts[0], parts[1:]

        for rule in self.session.rules:
            for leaf in collect_leaf_statements(rule.conclusion):
                bindings = match_statement_to_goal(leaf.ast, goal_op, goal_args)
                if bindings is None:
                    continue

                lines: list[str] = []
                cond_text = self.compound_to_human(rule.condition, bindings) if rule.condition else None
                conc_text = self.compound_to_human(rule.conclusion, bindings)
                if cond_text and conc_text:
                    lines.append(f"Checked rule: IF ({cond_text}) THEN ({conc_text})")

                found: list[str] = []
                blocked: list[str] = []
                missing: list[str] = []
                for cond in collect_leaf_statements(rule.condition):
                    grounded = ground_statement(cond.ast, bindings)
                    if grounded is None or any(a.startswith("?") for a in grounded[1]):
                        continue
                    op, args = grounded
                    fact = self.sentence(op, args)

                    if cond.negated:
                        if self.not_fact_exists(op, args):
                            found.append(f"Found explicit negation: NOT ({fact})")
                        elif self.fact_exists(op, args):
                            blocked.append(f"Blocked: NOT ({fact}) is false because {fact} is true")
                        elif self.session.closed_world_assumption:
                            found.append(f"Closed world assumption: cannot prove {fact}, so NOT ({fact}) holds")
                        else:
                            missing.append(f"Missing: explicit negation for {fact}")
                    elif self.fact_exists(op, args):
                        found.append(f"Found: {fact}")
                    else:
                        missing.append(f"Missing: {fact}")

                lines += found + blocked + missing
                if blocked or missing:
                    lines.append("Therefore the rule antecedent is not satisfied")
                    return ". ".join(lines)
        return None

    # ------------------------------------------------------------------
    # Dowód negatywny
    # ------------------------------------------------------------------

    def describe_negative_proof(self, result: ReasoningResult) -> str:
        steps: list[str] = []
        for step in result.steps:
            if step.operation == "chain_step" and step.source and step.dest:
                text = self.session.generate_text("locatedIn", [step.source, step.dest]).removesuffix(".")
                if text and text not in steps:
                    steps.append(text)
            elif step.operation == "disjoint_check":
                steps.append(f"{step.container} and {step.target} are disjoint")

        goal_text = self.goal_to_human(result.goal)
        if goal_text and steps:
            return f"False: NOT {goal_text}. Proof: {'. '.join(steps)}."
        if goal_text:
            return f"False: NOT {goal_text}. Proof: No counterexample chain was produced."
        return "Proof valid (negative)"
