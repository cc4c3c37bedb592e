"""
render/session.py — sesja wnioskowania widziana przez renderer.

ReasoningSession — protokół: generate_text, kb_facts, rules,
                   closed_world_assumption, reference_texts, hdc_strategy,
                   elaborate, format_result, prove
StaticSession    — implementacja nad danymi JSON (fakty, reguły, gotowe
                   wyniki prove), bez silnika; używana przez CLI i testy
KbFact           — fakt bazy wiedzy: id, nazwa, operator, argumenty
RuleRecord       — reguła: warunek i wniosek jako drzewa Part
"""

from __future__ import annotations

import json
import pathlib
from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol, Sequence

from .ast import Leaf, Part, RenderInputError, expr_from_dict, part_from_dict
from .result_formatter import format_result
from .results import Elaboration, ReasoningResult
from .text_generator import TextGenerator

DEFAULT_HDC_STRATEGY = "dense-binary"


# ---------------------------------------------------------------------------
# Fakty i reguły
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class KbFact:
    operator: str
    args: tuple[str, ...] = ()
    id: str | None = None
    name: str | None = None

    def matches(self, op: str, args: Sequence[str]) -> bool:
        return self.operator == op and self.args == tuple(args)

    @classmethod
    def from_dict(cls, data: Any) -> KbFact:
        """{"id", "name"?, "metadata": {"operator", "args"}} albo tekst "op a b"."""
        if isinstance(data, str):
            parts = data.split()
            if not parts:
                raise RenderInputError("Pusty fakt KB")
            return cls(parts[0], tuple(parts[1:]))
        if not isinstance(data, Mapping):
            raise RenderInputError(f"Fakt KB musi być obiektem albo tekstem: {data!r}")
        meta = data.get("metadata") or {}
        operator = meta.get("operator") if isinstance(meta, Mapping) else None
        if not isinstance(operator, str) or not operator:
            raise RenderInputError(f"Fakt KB bez metadata.operator: {data!r}")
        args = meta.get("args") or []
        if not isinstance(args, list):
            raise RenderInputError("metadata.args faktu KB musi być listą")
        raw_id = data.get("id")
        return cls(
            operator=operator,
            args=tuple(str(a) for a in args),
            id=None if raw_id is None else str(raw_id),
            name=data.get("name"),
        )


@dataclass(frozen=True, slots=True)
class RuleRecord:
    """
    Reguła silnika.

    conditionAST / conclusionAST (płaskie stwierdzenie) są opakowywane
    w Leaf, więc obie postaci renderuje się tą samą ścieżką.
    """
    id: str | None = None
    condition: Part | None = None
    conclusion: Part | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RuleRecord:
        if not isinstance(data, Mapping):
            raise RenderInputError(f"Reguła musi być obiektem: {data!r}")

        def side(parts_key: str, ast_key: str) -> Part | None:
            if data.get(parts_key) is not None:
                return part_from_dict(data[parts_key])
            if data.get(ast_key) is not None:
                return Leaf(expr_from_dict(data[ast_key]))
            return None

        raw_id = data.get("id")
        return cls(
            id=None if raw_id is None else str(raw_id),
            condition=side("conditionParts", "conditionAST"),
            conclusion=side("conclusionParts", "conclusionAST"),
        )


# ---------------------------------------------------------------------------
# Protokół
# ---------------------------------------------------------------------------

class ReasoningSession(Protocol):
    """Stan sesji silnika potrzebny rendererowi (tylko do odczytu)."""

    @property
    def kb_facts(self) -> Sequence[KbFact]: ...

    @property
    def rules(self) -> Sequence[RuleRecord]: ...

    @property
    def closed_world_assumption(self) -> bool: ...

    @property
    def reference_texts(self) -> Mapping[str, str]: ...

    @property
    def hdc_strategy(self) -> str: ...

    def generate_text(self, operator: str, args: Sequence[str]) -> str: ...

    def elaborate(self, proof: ReasoningResult) -> Elaboration: ...

    def format_result(self, result: ReasoningResult, kind: str = "query") -> str: ...

    def prove(self, goal: str) -> ReasoningResult | None: ...


# ---------------------------------------------------------------------------
# Sesja statyczna
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class StaticSession:
    """
    Sesja nad danymi JSON.

    prove(goal) nie wnioskuje: zwraca gotowy wynik z `proofs`
    (klucz: cel bez tokenów @ref, np. "isA Rex Dog") albo None.
    """
    kb_facts: list[KbFact] = field(default_factory=list)
    rules: list[RuleRecord] = field(default_factory=list)
    closed_world_assumption: bool = False
    reference_texts: dict[str, str] = field(default_factory=dict)
    hdc_strategy: str = DEFAULT_HDC_STRATEGY
    proofs: dict[str, ReasoningResult] = field(default_factory=dict)
    generator: TextGenerator = field(default_factory=TextGenerator)

    def generate_text(self, operator: str, args: Sequence[str]) -> str:
        return self.generator.generate(operator, args)

    def elaborate(self, proof: ReasoningResult) -> Elaboration:
        return self.generator.elaborate(proof)

    def format_result(self, result: ReasoningResult, kind: str = "query") -> str:
        return format_result(result, kind, self.generator)

    def prove(self, goal: str) -> ReasoningResult | None:
        key = " ".join(p for p in goal.split() if not p.startswith("@"))
        return self.proofs.get(key)

    # --- Konstruktory ---

    @classmethod
    def from_dict(cls, data: Any) -> StaticSession:
        """
        Oczekiwany format::

            {
                "kbFacts": [{"id": "f1", "metadata": {"operator": "isA", "args": ["Rex", "Dog"]}}],
                "rules": [{"id": "r1", "conditionParts": {...}, "conclusionAST": {...}}],
                "closedWorldAssumption": false,
                "referenceTexts": {"base1": "isA Rex Cat"},
                "hdcStrategy": "dense-binary",
                "proofs": {"isA Rex Dog": {"valid": true, "steps": [...]}}
            }
        """
        if not isinstance(data, Mapping):
            raise RenderInputError("Dane sesji muszą być obiektem JSON")
        proofs = data.get("proofs") or {}
        if not isinstance(proofs, Mapping):
            raise RenderInputError("Pole 'proofs' sesji musi być obiektem")
        refs = data.get("referenceTexts") or {}
        if not isinstance(refs, Mapping):
            raise RenderInputError("Pole 'referenceTexts' sesji musi być obiektem")
        facts = data.get("kbFacts") or []
        rules = data.get("rules") or []
        if not isinstance(facts, list) or not isinstance(rules, list):
            raise RenderInputError("Pola 'kbFacts' i 'rules' sesji muszą być listami")
        return cls(
            kb_facts=[KbFact.from_dict(f) for f in facts],
            rules=[RuleRecord.from_dict(r) for r in rules],
            closed_world_assumption=bool(data.get("closedWorldAssumption", False)),
            reference_texts={str(k): str(v) for k, v in refs.items()},
            hdc_strategy=str(data.get("hdcStrategy") or DEFAULT_HDC_STRATEGY),
            proofs={
                " ".join(p for p in str(k).split() if not p.startswith("@")): ReasoningResult.from_dict(v)
                for k, v in proofs.items()
            },
        )

    @classmethod
    def from_file(cls, path: str | pathlib.Path) -> StaticSession:
        try:
            data = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RenderInputError(f"Plik sesji {path} nie jest poprawnym JSON: {e}") from e
        return cls.from_dict(data)
