"""
render — tłumaczenie wyników silnika wnioskowania na tekst angielski.

Interfejs publiczny:
    ResponseTranslator — akcja + wynik → "True: ... Proof: ..." / odpowiedzi zapytań
    StaticSession      — sesja nad danymi JSON (fakty KB, reguły, gotowe dowody)
    ReasoningSession   — protokół sesji wymagany przez tłumaczy
    ReasoningResult    — wynik akcji silnika (prove / query / learn / ...)
    TextGenerator      — szablony zdań dla operatorów
    format_result      — formatowanie wyników meta operatorów i wiązań
    RenderInputError   — błąd danych wejściowych renderera

Typowe użycie:
    from render import ResponseTranslator, ReasoningResult, StaticSession

    session = StaticSession.from_file("session.json")
    result  = ReasoningResult.from_dict(payload)
    print(ResponseTranslator(session).translate("prove", result))
"""

from .ast import RenderInputError
from .common import Translation
from .query import QueryTranslator
from .prove import ProveTranslator
from .result_formatter import format_result
from .results import Binding, Elaboration, ProofStep, QueryMatch, ReasoningResult, SolveResult
from .session import KbFact, ReasoningSession, RuleRecord, StaticSession
from .text_generator import TextGenerator
from .translator import ResponseTranslator

__all__ = [
    "RenderInputError",
    "Translation",
    "QueryTranslator",
    "ProveTranslator",
    "format_result",
    "Binding",
    "Elaboration",
    "ProofStep",
    "QueryMatch",
    "ReasoningResult",
    "SolveResult",
    "KbFact",
    "ReasoningSession",
    "RuleRecord",
    "StaticSession",
    "TextGenerator",
    "ResponseTranslator",
]
