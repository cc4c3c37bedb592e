"""
render/result_formatter.py — formatowanie wyników meta operatorów zapytań.

similar, analogy (symbolic_analogy, property_analogy), difference, induce,
bundle, abduce, whatif, deduce, explain: szablon zdania + "Proof: ...".
Zwykłe wiązania → "x = Answer"; prove → rozwinięcie TextGenerator.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from .results import QueryMatch, ReasoningResult
from .text_generator import TextGenerator

META_METHODS = frozenset({
    "abduce", "whatif", "similar", "analogy", "symbolic_analogy", "property_analogy",
    "difference", "induce", "bundle", "deduce", "explain",
})


def format_list(items: Sequence[str]) -> str:
    """'A', 'A and B', 'A, B, and C'."""
    items = [str(i) for i in items]
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def _first_answer(match: QueryMatch) -> str | None:
    for binding in match.bindings.values():
        if binding.answer:
            return binding.answer
    return None


def _values(raw: Any) -> list[str]:
    out = []
    for p in raw or []:
        value = p.get("value") if isinstance(p, Mapping) else p
        if value:
            out.append(str(value))
    return out


def _confidence(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    value = proof.get("confidence")
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        value = match.score if match.score else None
    return f" (confidence={value:.2f})" if value is not None else ""


# ---------------------------------------------------------------------------
# Meta operatory
# ---------------------------------------------------------------------------

def _similar(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    entity = proof.get("entity") or _first_answer(match) or "Unknown"
    target = proof.get("target") or "target"
    shared = _values(proof.get("sharedProperties"))
    if shared:
        return f"{entity} is similar to {target}. Proof: shared {format_list(shared)}"
    similarity = proof.get("similarity")
    detail = f"similarity {similarity * 100:.0f}%" if similarity else "properties match"
    return f"{entity} is similar to {target}. Proof: {detail}"


def _analogy(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    mapping = str(proof.get("mapping") or "")
    relation = proof.get("relation") or "relation"
    if "::" in mapping:
        left, right = (s.strip() for s in mapping.split("::", 1))
        a, _, b = (s.strip() for s in left.partition(":"))
        c, _, d = (s.strip() for s in right.partition(":"))
        return f"{a} is to {b} as {c} is to {d}. Proof: {a} {relation} {b} maps to {c} {relation} {d}"
    answer = _first_answer(match) or "Unknown"
    return f"Analogy result: {answer}. Proof: proportional reasoning"


def _difference(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    entity_a = proof.get("entityA") or "A"
    entity_b = proof.get("entityB") or "B"
    features_a = _values(proof.get("uniqueToA"))
    features_b = _values(proof.get("uniqueToB"))
    text = f"{entity_a} differs from {entity_b}. Proof:"
    if features_a:
        text += f" {entity_a} has {format_list(features_a)}."
    if features_b:
        text += f" {entity_b} has {format_list(features_b)}."
    if not features_a and not features_b:
        text += " no unique properties found."
    return text


def _induce(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    sources = format_list(proof.get("sources") or [])
    common = _values(proof.get("common"))
    if common:
        return f"{sources} share {format_list(common)}. Proof: intersection of {sources} properties"
    return f"{sources} have no common properties. Proof: empty intersection"


def _bundle(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    sources = format_list(proof.get("sources") or [])
    combined = _values(proof.get("combined"))
    if combined:
        return f"{sources} combined have {format_list(combined)}. Proof: union of {sources} properties"
    return f"{sources} combined have no properties. Proof: empty union"


def _abduce(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    observed = proof.get("observed") or "Observation"
    cause = proof.get("cause") or _first_answer(match) or "Unknown"
    explanation = proof.get("explanation") or f"{cause} causes {observed}"
    return f"{observed} is explained by {cause}. Proof: {explanation}{_confidence(match, proof)}"


_WHATIF_OUTCOMES = {
    "would_fail": "would not occur",
    "unchanged":  "would be unchanged",
}


def _whatif(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    negated = proof.get("negated") or "event"
    affected = proof.get("affected") or "outcome"
    outcome = _WHATIF_OUTCOMES.get(str(proof.get("outcome")), "would be uncertain")
    paths = [
        " → ".join(str(n) for n in p["path"])
        for p in proof.get("paths") or []
        if isinstance(p, Mapping) and p.get("path")
    ]
    path_desc = "; ".join(paths) if paths else f"{negated} → {affected}"
    return f"If {negated} did not occur, {affected} {outcome}. Proof: {path_desc}{_confidence(match, proof)}"


def _deduce(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    source = proof.get("source") or "source"
    conclusion = proof.get("conclusion") or _first_answer(match) or "Unknown"
    if isinstance(conclusion, Mapping) and conclusion.get("operator"):
        args = " ".join(str(a) for a in conclusion.get("args") or [])
        conclusion = f"{conclusion['operator']} {args}".strip()

    chain = proof.get("chain") or []
    if chain:
        rendered = []
        for step in chain:
            if isinstance(step, str):
                rendered.append(step)
            elif isinstance(step, Mapping) and (step.get("rule") or step.get("fact")):
                rendered.append(str(step.get("rule") or step.get("fact")))
            else:
                rendered.append(json.dumps(step, ensure_ascii=False))
        proof_text = " via ".join(rendered)
    else:
        proof_text = proof.get("derivedFrom") or "forward chaining"
    return f"From {source}, deduce {conclusion}. Proof: {proof_text}"


def _explain(match: QueryMatch, proof: Mapping[str, Any]) -> str:
    goal = proof.get("goal") or proof.get("target") or "goal"
    via = proof.get("via") or "prove"
    explanation = proof.get("explanation") or _first_answer(match) or "No explanation."
    return f"Explanation for {goal}. Proof: {explanation} (via {via}){_confidence(match, proof)}"


def format_meta_result(match: QueryMatch) -> str:
    op = str(match.proof.get("operation") or match.method)
    match op:
        case "similar":
            return _similar(match, match.proof)
        case "analogy" | "symbolic_analogy" | "property_analogy":
            return _analogy(match, match.proof)
        case "difference":
            return _difference(match, match.proof)
        case "induce":
            return _induce(match, match.proof)
        case "bundle":
            return _bundle(match, match.proof)
        case "abduce":
            return _abduce(match, match.proof)
        case "whatif":
            return _whatif(match, match.proof)
        case "deduce":
            return _deduce(match, match.proof)
        case "explain":
            return _explain(match, match.proof)
        case _:
            return f"{op}: {json.dumps(match.proof, ensure_ascii=False)}"


# ---------------------------------------------------------------------------
# Punkt wejścia
# ---------------------------------------------------------------------------

def format_result(result: ReasoningResult | None, kind: str = "query", generator: TextGenerator | None = None) -> str:
    """Wynik query (meta operatory / wiązania) albo prove → tekst."""
    generator = generator or TextGenerator()
    if kind == "prove":
        if result is None:
            return "No result"
        elaboration = generator.elaborate(result)
        return elaboration.full_proof or elaboration.text

    if result is None:
        return "No result"
    meta = [m for m in result.all_results if m.method in META_METHODS]
    if meta:
        texts = [t for t in (format_meta_result(m) for m in meta) if t]
        return " ".join(texts) if texts else "No results"

    if result.bindings:
        texts = [f"{name} = {b.answer}" for name, b in result.bindings.items() if b.answer]
        return ", ".join(texts) if texts else "No bindings"
    return "No results"
