"""
grammar/config.py — przełączniki translatora.

Zmienne środowiskowe (wszystkie opcjonalne, wartości 1/true/yes/on):
  NL2DSL_AUTO_DECLARE          auto-deklaracja nieznanych operatorów
  NL2DSL_INDEFINITE_AS_ENTITY  "a/an X" jako encja zamiast ?x
  NL2DSL_ALLOW_VARIABLE_FACTS  fakty ze zmiennymi
  NL2DSL_OPAQUE_STATEMENTS     nieprzetłumaczalne zdania → fakt nieprzezroczysty
  NL2DSL_OPAQUE_QUESTIONS      nieprzetłumaczalne pytania → cel nieprzezroczysty
  NL2DSL_EXPAND_QUESTIONS      rozwijanie pytań złożonych
  NL2DSL_EXTRACT_EXISTENTIALS  "certain animals" → isA exists_ent_... Animal (domyślnie 1)
  NL2DSL_DEFAULT_VAR           zmienna domyślna (domyślnie ?x)
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass

from nl_model.constants import DEFAULT_VAR

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class TranslatorOptions:
    """Konfiguracja rdzenia translatora (niemutowalna)."""
    auto_declare_unknown_operators: bool = False
    indefinite_as_entity:           bool = False
    allow_variable_facts:           bool = False
    fallback_opaque_statements:     bool = False
    fallback_opaque_questions:      bool = False
    expand_compound_questions:      bool = False
    extract_existentials:           bool = True
    default_var:                    str  = DEFAULT_VAR

    def replace(self, **changes: object) -> TranslatorOptions:
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_env(cls) -> TranslatorOptions:
        return cls(
            auto_declare_unknown_operators=_env_flag("NL2DSL_AUTO_DECLARE", False),
            indefinite_as_entity=_env_flag("NL2DSL_INDEFINITE_AS_ENTITY", False),
            allow_variable_facts=_env_flag("NL2DSL_ALLOW_VARIABLE_FACTS", False),
            fallback_opaque_statements=_env_flag("NL2DSL_OPAQUE_STATEMENTS", False),
            fallback_opaque_questions=_env_flag("NL2DSL_OPAQUE_QUESTIONS", False),
            expand_compound_questions=_env_flag("NL2DSL_EXPAND_QUESTIONS", False),
            extract_existentials=_env_flag("NL2DSL_EXTRACT_EXISTENTIALS", True),
            default_var=os.getenv("NL2DSL_DEFAULT_VAR", DEFAULT_VAR),
        )
