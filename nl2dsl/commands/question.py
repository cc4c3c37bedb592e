"""Komenda: nl2dsl question — pytanie angielskie → cel DSL (@goal:goal ...)."""

from __future__ import annotations

import argparse
import json

from rich.console import Console

from catalog import CatalogError
from grammar import translate_question
from nl2dsl._options import add_translator_flags, build_context

console = Console()


def run(args: argparse.Namespace) -> None:
    try:
        ctx = build_context(args)
    except CatalogError as exc:
        console.print(f"[red]Błąd katalogu operatorów:[/red] {exc}")
        raise SystemExit(1)

    goal = translate_question(args.question, ctx)

    if args.json_output:
        print(json.dumps({"question": args.question, "dsl": goal}, ensure_ascii=False, indent=2))
        if goal is None:
            raise SystemExit(1)
        return

    if goal is None:
        console.print(f"[red]Nie można przetłumaczyć pytania:[/red] {args.question}")
        raise SystemExit(1)
    print(goal)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "question",
        help="Tłumaczy pytanie angielskie na cel DSL.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Tłumaczy pytanie na linie celu DSL z nagłówkami akcji:

  // action:query      cel zawiera zmienną (?x)
  // action:prove      cel kwantyfikowany
  // goal_logic:And|Or pytanie złożone (--expand)

Przykłady:
  nl2dsl question "Is Rex a dog?"
  nl2dsl question "What is Rex afraid of?"
  nl2dsl question "Is the cat big and red?" --expand
        """,
    )
    p.add_argument(
        "question",
        metavar="PYTANIE",
        help="Pytanie do przetłumaczenia.",
    )
    p.add_argument(
        "--expand",
        action="store_true",
        help="Rozwijaj pytania złożone na kilka celów.",
    )
    p.add_argument(
        "--opaque-questions",
        action="store_true",
        help="Nieprzetłumaczalne pytania → cel nieprzezroczysty.",
    )
    add_translator_flags(p)
    p.set_defaults(func=run)
