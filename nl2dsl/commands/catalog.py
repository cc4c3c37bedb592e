"""Komenda: nl2dsl catalog — listuje operatory katalogu / sprawdza plik DSL."""

from __future__ import annotations

import argparse
import dataclasses
import json
import pathlib
import sys

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from catalog import CatalogError, DslLineValidator, OperatorIndex
from nl2dsl._options import load_catalog

console = Console()

# Kolory per kind
KIND_STYLE: dict[str, str] = {
    "relation": "cyan",
    "property": "yellow",
    "logic":    "magenta",
    "meta":     "dim white",
    "declared": "green",
}


def _show_operators(index: OperatorIndex, search: str | None) -> None:
    entries = index.entries()
    if search:
        needle = search.lower()
        entries = [e for e in entries if needle in e.name.lower() or needle in e.description.lower()]
    if not entries:
        console.print("[yellow]Brak operatorów spełniających kryteria.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
    )
    table.add_column("OPERATOR",    style="bold", no_wrap=True)
    table.add_column("ARITY",       justify="center", no_wrap=True)
    table.add_column("KIND",        no_wrap=True)
    table.add_column("DESCRIPTION", no_wrap=False, max_width=60)
    for e in sorted(entries, key=lambda e: e.name):
        table.add_row(
            e.name,
            "*" if e.arity is None else str(e.arity),
            Text(str(e.kind), style=KIND_STYLE.get(str(e.kind), "")),
            e.description,
        )
    console.print()
    console.print(table)
    console.print(f"  [dim]{len(entries)} operatorów[/dim]\n")


def _check_file(index: OperatorIndex, path: pathlib.Path, json_output: bool) -> None:
    if not path.exists():
        console.print(f"[red]Brak pliku DSL:[/red] {path}")
        raise SystemExit(1)
    report = DslLineValidator(index).validate(path.read_text(encoding="utf-8"))

    if json_output:
        out = {
            "is_valid": report.is_valid,
            "issues": [dataclasses.asdict(i) for i in report.issues],
            "warnings": report.warnings,
        }
        print(json.dumps(out, ensure_ascii=False, indent=2))
    elif report.is_valid:
        console.print(f"[green]OK[/green]  {path.name}: wszystkie linie zgodne z katalogiem.")
    else:
        console.print(f"[red]BŁĄD[/red]  {path.name} — {len(report.issues)} problem(ów).")
        table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
        table.add_column("KOD",      style="yellow", no_wrap=True)
        table.add_column("LINIA",    justify="right", no_wrap=True)
        table.add_column("KOMUNIKAT")
        for i in report.issues:
            table.add_row(str(i.code), str(i.line_no), i.message)
        console.print(table)

    if not json_output:
        for w in report.warnings:
            console.print(f"  [yellow]·[/yellow] {w}")

    if not report.is_valid:
        sys.exit(1)


def run(args: argparse.Namespace) -> None:
    try:
        index = load_catalog(args.catalog)
    except CatalogError as exc:
        console.print(f"[red]Błąd katalogu operatorów:[/red] {exc}")
        raise SystemExit(1)

    if args.check:
        _check_file(index, pathlib.Path(args.check), args.json_output)
        return

    if args.json_output:
        entries = [
            {"name": e.name, "arity": e.arity, "kind": str(e.kind), "description": e.description}
            for e in sorted(index.entries(), key=lambda e: e.name)
        ]
        print(json.dumps(entries, ensure_ascii=False, indent=2))
        return
    _show_operators(index, args.search)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "catalog",
        help="Listuje operatory katalogu albo sprawdza plik DSL.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Bez --check: tabela operatorów (nazwa, arność, rodzaj, opis).
Z --check PLIK: walidacja linii DSL (nieznane operatory, arność,
niezdefiniowane $ref, zduplikowane @ref, niepoprawne identyfikatory).

Przykłady:
  nl2dsl catalog
  nl2dsl catalog --search loc
  nl2dsl catalog --check wynik.dsl --json-output
        """,
    )
    p.add_argument(
        "--catalog", "-c",
        default=None,
        metavar="PLIK",
        help="Katalog operatorów JSON (domyślnie: NL2DSL_CATALOG albo katalog wbudowany).",
    )
    p.add_argument(
        "--check",
        default=None,
        metavar="PLIK_DSL",
        help="Sprawdź plik DSL względem katalogu.",
    )
    p.add_argument(
        "--search", "-s",
        default=None,
        metavar="TEKST",
        help="Szukaj w nazwie lub opisie operatora.",
    )
    p.add_argument(
        "--json-output",
        action="store_true",
        help="Wypisz wynik jako JSON na stdout.",
    )
    p.set_defaults(func=run)
