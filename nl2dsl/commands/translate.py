"""Komenda: nl2dsl translate — tekst angielski (kontekst) → linie DSL."""

from __future__ import annotations

import argparse
import dataclasses
import json
import pathlib
import sys

from rich import box
from rich.console import Console
from rich.table import Table

from catalog import CatalogError, DslLineValidator
from grammar import translate_context
from nl2dsl._options import add_translator_flags, build_context

console = Console()


def _read_text(args: argparse.Namespace) -> str:
    if args.text:
        return args.text
    if args.file:
        path = pathlib.Path(args.file)
        if not path.exists():
            console.print(f"[red]Brak pliku:[/red] {path}")
            raise SystemExit(1)
        return path.read_text(encoding="utf-8")
    return sys.stdin.read()


def run(args: argparse.Namespace) -> None:
    # --- Kontekst --------------------------------------------------------
    try:
        ctx = build_context(args)
    except CatalogError as exc:
        console.print(f"[red]Błąd katalogu operatorów:[/red] {exc}")
        raise SystemExit(1)

    text = _read_text(args)
    if not text.strip():
        console.print("[yellow]Pusty tekst wejściowy.[/yellow]")
        raise SystemExit(1)

    # --- Tłumaczenie -----------------------------------------------------
    result = translate_context(text, ctx)
    report = DslLineValidator(ctx.catalog).validate(result.dsl) if args.check else None

    # --- Wyjście JSON (opcjonalnie) --------------------------------------
    if args.json_output:
        out: dict = {
            "dsl": result.dsl,
            "errors": [dataclasses.asdict(e) for e in result.errors],
            "warnings": result.warnings,
            "stats": dataclasses.asdict(result.stats),
            "declared_operators": result.declared_operators,
        }
        if report is not None:
            out["issues"] = [dataclasses.asdict(i) for i in report.issues]
        print(json.dumps(out, ensure_ascii=False, indent=2))
        if result.errors or (report is not None and not report.is_valid):
            sys.exit(1)
        return

    # --- Wynik na konsoli ------------------------------------------------
    if result.dsl:
        print(result.dsl)

    if result.errors:
        table = Table(box=box.SIMPLE_HEAD, header_style="bold white", show_header=True)
        table.add_column("ZDANIE", no_wrap=False, max_width=60)
        table.add_column("BŁĄD", style="red", no_wrap=False)
        table.add_column("PODPOWIEDŹ", style="dim", no_wrap=False)
        for e in result.errors:
            table.add_row(e.sentence, e.error, e.suggestion or "")
        console.print(table)

    for w in result.warnings:
        console.print(f"[yellow]·[/yellow] {w}")

    if report is not None and not report.is_valid:
        console.print(f"[red]Walidacja DSL:[/red] {len(report.issues)} problem(ów).")
        for issue in report.issues:
            console.print(f"  [yellow]{issue.code}[/yellow] linia {issue.line_no}: {issue.message}")

    s = result.stats
    console.print(
        f"  [dim]{s.sentences_total} zdań, {s.parsed} przetłumaczonych, "
        f"{s.opaque} nieprzezroczystych, {s.auto_declared} zadeklarowanych operatorów[/dim]"
    )

    if result.errors or (report is not None and not report.is_valid):
        sys.exit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "translate",
        help="Tłumaczy tekst angielski (fakty i reguły) na linie DSL.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""\
Tłumaczy tekst (wiele zdań) na linie DSL. Zdania, których nie da się
przetłumaczyć, są raportowane w tabeli błędów (kod wyjścia 1).

Przykłady:
  nl2dsl translate "All dogs are mammals. Rex is a dog."
  nl2dsl translate --file kontekst.txt --auto-declare --check
  echo "If someone is cold, they are red." | nl2dsl translate --json-output
        """,
    )
    p.add_argument(
        "text",
        nargs="?",
        default=None,
        metavar="TEKST",
        help="Tekst do przetłumaczenia (domyślnie: stdin).",
    )
    p.add_argument(
        "--file", "-f",
        default=None,
        metavar="PLIK",
        help="Plik z tekstem do przetłumaczenia.",
    )
    p.add_argument(
        "--opaque-fallback",
        action="store_true",
        help="Nieprzetłumaczalne zdania → fakt nieprzezroczysty (hasProperty KB opaque_ctx_...).",
    )
    p.add_argument(
        "--check",
        action="store_true",
        help="Sprawdź wyemitowane linie walidatorem katalogu.",
    )
    add_translator_flags(p)
    p.set_defaults(func=run)
