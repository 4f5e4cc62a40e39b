"""Commande : kebe validate-norm — validation d'un fichier de norme JSON."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kebe._sources import write_json
from validator import ImportValidation, validate_import

console = Console()


def _show_report(path: Path, report: ImportValidation) -> None:
    if report.errors:
        table = Table(
            box=box.SIMPLE_HEAD,
            show_header=True,
            header_style="bold white",
            expand=False,
        )
        table.add_column("CODE",    no_wrap=True, style="bold red")
        table.add_column("CHEMIN",  no_wrap=True, style="dim")
        table.add_column("MESSAGE", no_wrap=False, max_width=90)
        for e in report.errors:
            table.add_row(str(e.code), escape(e.path or "/"), escape(e.message))
        console.print()
        console.print(table)

    for w in report.warnings:
        console.print(f"[yellow]Avertissement :[/yellow] {escape(w)}")

    if report.valid and report.preview:
        pv = report.preview
        console.print(f"[green]Norme valide :[/green] {path}  ({escape(pv.name)}, {pv.rule_count} règle(s))")
        for rule in pv.sample_rules:
            console.print(f"  [cyan]{escape(rule.article_number)}[/cyan]  {escape(rule.title)}  [dim]{escape(rule.content[:80])}[/dim]")
    else:
        console.print(f"[red]Norme invalide :[/red] {path}  ({len(report.errors)} erreur(s))")


def run(args: argparse.Namespace) -> None:
    path = Path(args.file)
    if not path.exists():
        console.print(f"[red]Le fichier n'existe pas :[/red] {path}")
        raise SystemExit(1)

    try:
        payload = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Erreur de lecture :[/red] {e}")
        raise SystemExit(1)

    report = validate_import(payload)

    if args.json:
        write_json({**asdict(report), "messages": report.messages}, None, console)
    else:
        _show_report(path, report)

    if not report.valid:
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "validate-norm",
        help="Valide un fichier de norme JSON (code de sortie 1 si erreurs).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Vérifie un payload d'import de norme : métadonnées, règles, types des champs,
sommaire. Les avertissements n'empêchent pas l'import.

Exemples :
  kebe validate-norm ns01001.json
  kebe validate-norm ns01001.json --json
        """,
    )
    p.add_argument("file", metavar="FICHIER.json", help="Fichier de norme à valider.")
    p.add_argument("--json", action="store_true", help="Sortie JSON du rapport.")
    p.set_defaults(func=run)
