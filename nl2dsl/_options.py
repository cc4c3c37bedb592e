"""Kontekst translatora dla CLI — opcje ze zmiennych środowiskowych + flagi."""

from __future__ import annotations

import argparse
import os
import pathlib

from catalog import OperatorIndex
from grammar import ParseContext, TranslatorOptions

# Flaga CLI → pole TranslatorOptions (flaga włącza, brak flagi zostawia wartość z env)
FLAG_FIELDS: dict[str, str] = {
    "auto_declare":         "auto_declare_unknown_operators",
    "allow_variable_facts": "allow_variable_facts",
    "opaque_fallback":      "fallback_opaque_statements",
    "opaque_questions":     "fallback_opaque_questions",
    "expand":               "expand_compound_questions",
    "indefinite_as_entity": "indefinite_as_entity",
}


def load_catalog(path: str | None) -> OperatorIndex:
    """--catalog, potem NL2DSL_CATALOG, potem katalog wbudowany."""
    chosen = path or os.getenv("NL2DSL_CATALOG")
    if not chosen:
        return OperatorIndex.default()
    return OperatorIndex.from_file(pathlib.Path(chosen))


def build_options(args: argparse.Namespace) -> TranslatorOptions:
    options = TranslatorOptions.from_env()
    changes = {
        field: True
        for flag, field in FLAG_FIELDS.items()
        if getattr(args, flag, False)
    }
    return options.replace(**changes) if changes else options


def build_context(args: argparse.Namespace) -> ParseContext:
    return ParseContext.create(build_options(args), load_catalog(getattr(args, "catalog", None)))


def add_translator_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--catalog", "-c",
        default=None,
        metavar="PLIK",
        help="Katalog operatorów JSON (domyślnie: NL2DSL_CATALOG albo katalog wbudowany).",
    )
    p.add_argument(
        "--auto-declare",
        action="store_true",
        help="Nieznane operatory deklaruj jako '@op:op __Relation' zamiast zgłaszać błąd.",
    )
    p.add_argument(
        "--allow-variable-facts",
        action="store_true",
        help="Dopuść fakty ze zmiennymi (?x).",
    )
    p.add_argument(
        "--indefinite-as-entity",
        action="store_true",
        help="'a/an X' jako encja zamiast zmiennej z warunkiem isA.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz wynik jako JSON na stdout.",
    )
