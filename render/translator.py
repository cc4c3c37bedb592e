"""
render/translator.py — ResponseTranslator: wynik akcji silnika → odpowiedź tekstowa.

Akcje: learn, listSolutions, prove, elaborate, query (domyślna).
Tłumacz zwraca tekst albo Translation; ResponseTranslator skleja
Translation do postaci "tekst Proof: dowód".
"""

from __future__ import annotations

from .common import HumanRenderer, Translation, make_translation
from .prove import ProveTranslator
from .query import QueryTranslator
from .results import ReasoningResult
from .session import ReasoningSession
from .solve import SolveResultFormatter


class LearnTranslator(HumanRenderer):

    def __init__(self, session: ReasoningSession) -> None:
        super().__init__(session)
        self.solve_formatter = SolveResultFormatter(session)

    def translate(self, result: ReasoningResult | None) -> str | Translation:
        if result is None:
            return "Failed"
        if result.solve_result is not None and result.solve_result.kind == "solve":
            return self.solve_formatter.format(result.solve_result)
        if result.warnings:
            return result.warnings[0]
        return f"Learned {result.facts} facts" if result.success else "Failed"


class ListSolutionsTranslator(HumanRenderer):

    def translate(self, result: ReasoningResult | None) -> str | Translation:
        if result is None or not result.success or result.solution_count == 0:
            return make_translation("No valid solutions found.")
        texts = []
        for idx, sol in enumerate(result.solutions, start=1):
            facts = [
                f.raw if f.raw is not None else self.sentence(f.op, f.args)
                for f in sol.facts
                if f.raw is not None or f.op
            ]
            texts.append(f"Solution {idx}: {', '.join(t for t in facts if t)}")
        text = f"Found {result.solution_count} solutions. " + ". ".join(texts)
        return make_translation(text.rstrip() + ".")


class ElaborateTranslator(HumanRenderer):

    def translate(self, result: ReasoningResult | None) -> str:
        if result is None:
            return "No output"
        elab = self.session.elaborate(result)
        return elab.text or elab.full_proof or "No output"


class ResponseTranslator:
    """
    Punkt wejścia renderera.

    >>> ResponseTranslator(session).translate("prove", result)
    'True: Rex is a dog. Proof: Fact in KB: Rex is a dog.'
    """

    def __init__(self, session: ReasoningSession) -> None:
        self.session = session
        self.translators = {
            "learn":         LearnTranslator(session),
            "listSolutions": ListSolutionsTranslator(session),
            "prove":         ProveTranslator(session),
            "elaborate":     ElaborateTranslator(session),
            "query":         QueryTranslator(session),
        }

    def translate(
        self,
        action: str = "query",
        reasoning_result: ReasoningResult | None = None,
        query_dsl: str = "",
    ) -> str:
        match action:
            case "query":
                out = self.translators["query"].translate(reasoning_result, query_dsl)
            case "learn" | "listSolutions" | "prove" | "elaborate":
                out = self.translators[action].translate(reasoning_result)
            case _:
                out = self.translators["query"].translate(reasoning_result, query_dsl)

        if isinstance(out, str):
            return out
        if out.text and out.proof_text:
            return f"{out.text} Proof: {out.proof_text}"
        return out.text
