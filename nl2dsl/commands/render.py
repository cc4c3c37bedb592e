"""Komenda: nl2dsl render — wynik silnika (JSON) → odpowiedź tekstowa."""

from __future__ import annotations

import argparse
import json
import pathlib

from rich.console import Console

from render import ReasoningResult, RenderInputError, ResponseTranslator, StaticSession

console = Console()

ACTIONS = ("query", "prove", "learn", "listSolutions", "elaborate")


def _load_json(path: pathlib.Path, what: str) -> object:
    if not path.exists():
        console.print(f"[red]Brak pliku {what}:[/red] {path}")
        raise SystemExit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        console.print(f"[red]Błąd parsowania JSON ({what}):[/red] {exc}")
        raise SystemExit(1)


def run(args: argparse.Namespace) -> None:
    # --- Sesja -----------------------------------------------------------
    try:
        session = StaticSession.from_file(args.session) if args.session else StaticSession()
    except (OSError, RenderInputError) as exc:
        console.print(f"[red]Błąd wczytywania sesji:[/red] {exc}")
        raise SystemExit(1)

    # --- Wynik -----------------------------------------------------------
    raw = _load_json(pathlib.Path(args.result), "wyniku")
    try:
        result = ReasoningResult.from_dict(raw)
    except RenderInputError as exc:
        console.print(f"[red]Niepoprawny wynik:[/red] {exc}")
        raise SystemExit(1)

    query_dsl = args.query or ""
    if args.query_file:
        query_dsl = pathlib.Path(args.query_file).read_text(encoding="utf-8")

    # --- Tłumaczenie -----------------------------------------------------
    text = ResponseTranslator(session).translate(args.action, result, query_dsl)

    if args.json_output:
        print(json.dumps({"action": args.action, "text": text}, ensure_ascii=False, indent=2))
        return
    print(text)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "render",
        help="Tłumaczy wynik silnika wnioskowania (JSON) na tekst angielski.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Renderuje wynik akcji silnika (prove / query / learn / listSolutions /
elaborate) jako tekst "True: ... Proof: ...". Sesja (fakty KB, reguły,
gotowe dowody dla prove) jest wczytywana z pliku JSON.

Przykłady:
  nl2dsl render wynik.json --action prove --session sesja.json
  nl2dsl render wynik.json --query "@goal:goal isA ?x Dog"
        """,
    )
    p.add_argument(
        "result",
        metavar="PLIK_WYNIKU",
        help="Plik JSON z wynikiem akcji silnika.",
    )
    p.add_argument(
        "--action", "-a",
        default="query",
        choices=ACTIONS,
        help="Akcja, której wynik jest renderowany (domyślnie: query).",
    )
    p.add_argument(
        "--session", "-s",
        default=None,
        metavar="PLIK",
        help="Plik JSON sesji (kbFacts, rules, proofs, ...).",
    )
    p.add_argument(
        "--query", "-q",
        default=None,
        metavar="DSL",
        help="DSL zapytania (dla akcji query).",
    )
    p.add_argument(
        "--query-file",
        default=None,
        metavar="PLIK",
        help="Plik z DSL zapytania.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz wynik jako JSON na stdout.",
    )
    p.set_defaults(func=run)
