"""
render/text_generator.py — atom DSL → zdanie angielskie.

Tabela szablonów per operator (isA, has, locatedIn, causes, ...), szablon
ogólny z odmianą czasownika w 3. osobie oraz rozwinięcie dowodu (elaborate).
Szablon z za małą liczbą argumentów zwraca formę funkcyjną "op(a, b)".
"""

from __future__ import annotations

import re
from typing import Callable, Sequence, TypeAlias

from .results import Elaboration, ReasoningResult

Template: TypeAlias = Callable[[Sequence[str]], str]


def article(word: str) -> str:
    return "an" if re.match(r"^[aeiou]", word, re.IGNORECASE) else "a"


def _with_article(word: str) -> str:
    return f"{article(word)} {word.lower()}"


# (minimalna liczba argumentów, szablon)
_TEMPLATES: dict[str, tuple[int, Template]] = {
    # relacje
    "love":             (2, lambda a: f"{a[0]} loves {a[1]}."),
    "loves":            (2, lambda a: f"{a[0]} loves {a[1]}."),
    "know":             (2, lambda a: f"{a[0]} knows {a[1]}."),
    "help":             (2, lambda a: f"{a[0]} helps {a[1]}."),
    "trust":            (2, lambda a: f"{a[0]} trusts {a[1]}."),
    # posiadanie i transakcje
    "has":              (2, lambda a: f"{a[0]} has {_with_article(a[1])}."),
    "give":             (3, lambda a: f"{a[0]} gave {a[1]} {_with_article(a[2])}."),
    "sells":            (3, lambda a: f"{a[0]} sold {a[2]} to {a[1]}."),
    "owns":             (2, lambda a: f"{a[0]} owns {_with_article(a[1])}."),
    # klasyfikacja i własności
    "isA":              (2, lambda a: f"{a[0]} is {_with_article(a[1])}."),
    "hasProperty":      (2, lambda a: f"{a[0]} has {a[1]}."),
    # położenie
    "locatedIn":        (2, lambda a: f"{a[0]} is in {a[1]}."),
    "livesIn":          (2, lambda a: f"{a[0]} is in {a[1]}."),
    "in":               (2, lambda a: f"{a[0]} is in {a[1]}."),
    "parent":           (2, lambda a: f"{a[0]} is a parent of {a[1]}."),
    "hasStatus":        (2, lambda a: f"{a[0]} is {a[1].lower()}."),
    # modalność i obowiązki
    "can":              (2, lambda a: f"{a[0]} can {a[1]}."),
    "cannot":           (2, lambda a: f"{a[0]} cannot {a[1]}."),
    "mustDo":           (2, lambda a: f"{a[0]} must {a[1].lower()}."),
    "permitted":        (1, lambda a: f"{a[0]} is permitted."),
    "forbidden":        (1, lambda a: f"{a[0]} is forbidden."),
    "necessary":        (1, lambda a: f"{a[0]} is necessary."),
    # czas i porównania
    "before":           (2, lambda a: f"{a[0]} is before {a[1]}."),
    "after":            (2, lambda a: f"{a[0]} is after {a[1]}."),
    "greaterThan":      (2, lambda a: f"{a[0]} is greater than {a[1]}."),
    # zdarzenia
    "completed":        (2, lambda a: f"{a[0]} completed {a[1].lower()}."),
    "submitted":        (2, lambda a: f"{a[0]} submitted {a[1].lower()}."),
    "passed":           (2, lambda a: f"{a[0]} passed {a[1].lower()}."),
    "detected":         (2, lambda a: f"{a[1]} detected at {a[0]}."),
    "exists":           (2, lambda a: f"{a[0]} has {a[1].lower()}."),
    "hasSymptom":       (2, lambda a: f"{a[0]} has {a[1].lower()}."),
    "appealsTo":        (2, lambda a: f"{a[0]} appeals to {a[1]}."),
    "occurred":         (1, lambda a: f"{a[0]} occurred."),
    # stan
    "hasState":         (2, lambda a: f"{a[0]} is {a[1]}."),
    "hasColor":         (2, lambda a: f"{a[0]} has {a[1]}."),
    "hasSize":          (2, lambda a: f"{a[0]} is {a[1].lower()}."),
    # przyczynowość
    "causes":           (2, lambda a: f"{a[0]} causes {a[1]}."),
    "enables":          (2, lambda a: f"{a[0]} enables {a[1]}."),
    "prevents":         (2, lambda a: f"{a[0]} prevents {a[1]}."),
    "indirectCause":    (2, lambda a: f"{a[0]} indirectly causes {a[1]}."),
    "indirectlyCauses": (2, lambda a: f"{a[0]} indirectly causes {a[1]}."),
    "wouldPrevent":     (2, lambda a: f"Preventing {a[0]} would prevent {a[1]}."),
    # operatory własności złożonych
    "isGuilty":         (1, lambda a: f"{a[0]} is guilty."),
    "isSuspect":        (1, lambda a: f"{a[0]} is suspect."),
    "canPay":           (1, lambda a: f"{a[0]} can pay."),
    "canPurchase":      (1, lambda a: f"{a[0]} can purchase."),
    "isProtected":      (1, lambda a: f"{a[0]} is protected."),
    "canVote":          (1, lambda a: f"{a[0]} can vote."),
    "eats":             (2, lambda a: f"{a[0]} eats {a[1].lower()}."),
    "alternative":      (2, lambda a: f"{a[0]} is an alternative to {a[1]}."),
    # plany
    "plan":             (2, lambda a: f"Plan {a[0]} has {a[1]} steps."),
    "planStep":         (3, lambda a: f"Step {a[1]} of plan {a[0]} is {a[2]}."),
    # rozsadzanie / CSP
    "seatedAt":         (2, lambda a: f"{a[0]} is seated at {a[1]}."),
    "conflictsWith":    (2, lambda a: f"{a[0]} conflicts with {a[1]}."),
    "tableConflict":    (3, lambda a: f"There is a conflict at {a[0]} between {a[1]} and {a[2]}."),
}


def _did(a: Sequence[str]) -> str:
    if len(a) >= 4:
        return f"{a[0]} did {a[1]} to {a[3]}."
    if len(a) == 3:
        return f"{a[0]} did {a[1]} {a[2]}."
    return f"{a[0]} did {a[1]}."


_TEMPLATES["did"] = (2, _did)

_NO_CONJUGATE = frozenset({
    "can", "cannot", "could", "may", "might", "must", "shall", "should", "will", "would",
    "before", "after", "during", "until", "since", "while", "between",
})

_ASSIGNMENT_PATTERNS = ("seating", "arrangement", "placement", "assignment", "position", "location", "slot")


def third_person(verb: str) -> str:
    """'eat' → 'eats', 'watch' → 'watches', 'carry' → 'carries'; modalne i camelCase bez zmian."""
    if verb.lower() in _NO_CONJUGATE:
        return verb
    if re.search(r"[a-z][A-Z]", verb) or verb.endswith("s"):
        return verb
    if verb.endswith(("x", "ch", "sh", "o")):
        return verb + "es"
    if verb.endswith("y") and not re.search(r"[aeiou]y$", verb):
        return verb[:-1] + "ies"
    return verb + "s"


def _goal_parts(goal: str) -> list[str]:
    return [p for p in goal.split() if not p.startswith("@")]


class TextGenerator:
    """Generator zdań z atomów DSL (bezstanowy)."""

    def generate(self, operator: str, args: Sequence[str]) -> str:
        values = [str(a) for a in args]
        template = _TEMPLATES.get(operator)
        if template is not None:
            min_args, render = template
            if len(values) >= min_args:
                return render(values)
            return f"{operator}({', '.join(values)})"

        match len(values):
            case 0:
                return f"{operator}."
            case 1:
                return f"{values[0]} is {operator}."
            case 2:
                op_lower = operator.lower()
                if any(p in op_lower for p in _ASSIGNMENT_PATTERNS) or op_lower.endswith("ing"):
                    return f"{values[0]} is at {values[1]}."
                return f"{values[0]} {third_person(operator)} {values[1]}."
            case _:
                return f"{operator}({', '.join(values)})."

    def sentence(self, operator: str, args: Sequence[str]) -> str:
        """generate() bez końcowej kropki."""
        return self.generate(operator, args).removesuffix(".")

    def elaborate(self, proof: ReasoningResult) -> Elaboration:
        """
        Rozwija wynik prove w tekst: "True: <cel>" z łańcuchem faktów
        z kroków, "Cannot prove: <cel>" dla dowodu nieważnego, a bez celu
        format techniczny (metoda, kroki, pewność).
        """
        if not proof.valid:
            goal_text = proof.goal or proof.reason or "statement"
            parts = _goal_parts(proof.goal)
            if len(parts) >= 2:
                goal_text = self.sentence(parts[0], parts[1:])
            return Elaboration(text=f"Cannot prove: {goal_text}")

        steps = proof.steps
        goal_text = ""
        goal_string = proof.goal or (steps[0].goal if steps else None)
        if goal_string:
            parts = _goal_parts(goal_string)
            if parts:
                goal_text = self.sentence(parts[0], parts[1:])

        chain: list[str] = []
        for step in steps:
            if not step.fact:
                continue
            fact_parts = step.fact.split()
            if len(fact_parts) >= 2:
                text = self.sentence(fact_parts[0], fact_parts[1:])
                if text and text not in chain:
                    chain.append(text)

        if goal_text and chain:
            return Elaboration(
                text=f"True: {goal_text}",
                proof_chain=chain,
                full_proof=f"True: {goal_text}. Proof: {'. '.join(chain)}.",
            )
        if goal_text:
            return Elaboration(text=f"True: {goal_text}")

        lines = [f"Proof by {proof.method}:"]
        for step in steps:
            lines.append(f"  - {step.operation}: {step.goal or step.fact or ''}")
        lines.append(f"Confidence: {(proof.confidence or 0.0) * 100:.1f}%")
        return Elaboration(text="\n".join(lines))
