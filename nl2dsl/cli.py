"""
nl2dsl — narzędzie CLI translatora NL → DSL.

Użycie:
  nl2dsl <komenda> [opcje]

Komendy:
  translate  Tłumaczy tekst angielski (fakty i reguły) na linie DSL.
  question   Tłumaczy pytanie na cel DSL (@goal:goal ...).
  render     Tłumaczy wynik silnika wnioskowania (JSON) na tekst angielski.
  catalog    Listuje operatory katalogu albo sprawdza plik DSL.

Konfiguracja: zmienne NL2DSL_* (także z pliku .env w katalogu projektu).
"""

from __future__ import annotations

import argparse
import pathlib
import sys

from dotenv import load_dotenv

# Windows: terminal może używać cp1252, więc wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from nl2dsl.commands import catalog as cmd_catalog
from nl2dsl.commands import question as cmd_question
from nl2dsl.commands import render as cmd_render
from nl2dsl.commands import translate as cmd_translate

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nl2dsl",
        description="nl2dsl — translator zdań angielskich na DSL i renderer odpowiedzi.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"nl2dsl {VERSION}"
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_translate.add_parser(subparsers)
    cmd_question.add_parser(subparsers)
    cmd_render.add_parser(subparsers)
    cmd_catalog.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv(pathlib.Path(__file__).resolve().parent.parent / ".env", override=True)
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
