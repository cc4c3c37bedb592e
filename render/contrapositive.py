"""
render/contrapositive.py — dowód celu 'Not P' przez kontrapozycję reguły P → Q.
"""

from __future__ import annotations

from .ast import Hole, Statement, term_token
from .common import HumanRenderer, NotGoal, collect_leaf_statements, normalize_sentence, parse_not_goal
from .results import ReasoningResult
from .session import ReasoningSession, RuleRecord


def _bindings_from_not_goal(rule: RuleRecord | None, not_goal: NotGoal) -> dict[str, str] | None:
    """Wiązania z pierwszego liścia warunku zgodnego z wnętrzem celu Not."""
    if rule is None or rule.condition is None:
        return None
    for leaf in collect_leaf_statements(rule.condition):
        ast = leaf.ast
        if not isinstance(ast, Statement) or ast.operator != not_goal.op:
            continue
        if len(ast.args) != len(not_goal.args):
            continue
        bindings: dict[str, str] = {}
        for node, wanted in zip(ast.args, not_goal.args):
            if isinstance(node, Hole):
                bindings[node.name] = wanted
            elif term_token(node) != wanted:
                break
        else:
            return bindings
    return None


def describe_contrapositive_proof(session: ReasoningSession, result: ReasoningResult) -> str | None:
    """
    None, jeśli cel nie jest negacją albo żaden krok nie jest oznaczony
    inference == "contrapositive".
    """
    not_goal = parse_not_goal(result.goal)
    if not_goal is None:
        return None
    if not any(s.inference == "contrapositive" for s in result.steps):
        return None

    r = HumanRenderer(session)
    goal_text = r.goal_to_human(result.goal)
    target = r.sentence(not_goal.op, not_goal.args)

    rule_step = next(
        (s for s in result.steps if s.operation == "rule_application" and s.inference == "contrapositive"),
        None,
    )
    rule = r.rule_by_id(rule_step.rule_id) if rule_step else None
    bindings = _bindings_from_not_goal(rule, not_goal)

    cond_text = r.compound_to_human(rule.condition, bindings) if rule and rule.condition else None
    conc_text = r.compound_to_human(rule.conclusion, bindings) if rule and rule.conclusion else None

    others: list[str] = []
    if rule and rule.condition:
        for leaf in collect_leaf_statements(rule.condition):
            human = r.expr_to_human(leaf.ast, bindings)
            if human and normalize_sentence(human) != normalize_sentence(target):
                others.append(human)

    goal_not_norm = normalize_sentence(f"Not {not_goal.dsl}")
    negated_conclusion = None
    for step in result.steps:
        fact = (step.fact or "").strip()
        if fact.startswith("Not ") and normalize_sentence(fact) != goal_not_norm:
            parts = fact.split()
            if len(parts) >= 3:
                negated_conclusion = r.sentence(parts[0], parts[1:])
            break
    if not negated_conclusion and conc_text:
        negated_conclusion = f"NOT ({conc_text})"

    lines: list[str] = []
    if negated_conclusion:
        lines.append(f"Proved: {negated_conclusion}")
    lines += others
    if cond_text and conc_text:
        lines.append(f"Applied contrapositive on rule: IF ({cond_text}) THEN ({conc_text})")
    lines.append(f"Therefore {goal_text}")
    return f"True: {goal_text}. Proof: {'. '.join(lines)}."
