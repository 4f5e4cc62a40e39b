"""Commande : kebe segment — segmentation d'un document en blocs."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from data_model import Block, ParsedDocument
from kebe._sources import read_document, read_url, write_json
from segmenter import segment

console = Console()


def _flags(block: Block) -> str:
    return "".join((
        "A" if block.is_warning else "-",
        "E" if block.is_example else "-",
        "D" if block.is_definition else "-",
    ))


def _show_table(doc: ParsedDocument) -> None:
    if not doc.blocks:
        console.print("[yellow]Aucun bloc.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("NIV",    justify="right", no_wrap=True, style="dim")
    table.add_column("TITRE",  no_wrap=False, max_width=50, style="bold cyan")
    table.add_column("LEN",    justify="right", no_wrap=True)
    table.add_column("PUCES",  justify="right", no_wrap=True)
    table.add_column("AED",    no_wrap=True)

    for block in doc.blocks:
        indent = "  " * (block.level - 1)
        table.add_row(
            str(block.level),
            indent + escape(block.title[:80]),
            str(len(block.body)),
            str(len(block.bullets)),
            _flags(block),
        )

    meta = doc.metadata
    console.print()
    console.print(f"[bold]{escape(doc.title)}[/bold]")
    console.print(table)
    console.print(
        f"  [dim]{len(doc.blocks)} bloc(s) · {meta.word_count} mots · "
        f"{meta.estimated_reading_minutes} min · {meta.language} · {meta.difficulty}[/dim]"
    )
    if doc.concepts:
        console.print(f"  [dim]Concepts :[/dim] {escape(', '.join(doc.concepts))}")
    if doc.keywords:
        console.print(f"  [dim]Mots-clés :[/dim] {escape(', '.join(doc.keywords))}")
    console.print()


def run(args: argparse.Namespace) -> None:
    if args.url:
        text, name = read_url(args.url), args.url
    elif args.file:
        path = Path(args.file)
        text, name = read_document(path), path.name
    else:
        console.print("[red]Indiquez un FICHIER ou --url.[/red]")
        raise SystemExit(1)

    doc = segment(text, name)

    if args.json:
        write_json(asdict(doc), None, console)
    else:
        _show_table(doc)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "segment",
        help="Segmente un document (.txt, .md, .pdf, .html ou URL) en blocs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Segmente un document en blocs typés (titre, corps, puces, drapeaux
avertissement/exemple/définition) et affiche concepts et métadonnées.

Exemples :
  kebe segment guide.md
  kebe segment manuel.pdf --json
  kebe segment --url https://example.org/procedure.html
        """,
    )
    p.add_argument("file", metavar="FICHIER", nargs="?", help="Document à segmenter.")
    p.add_argument("--url", metavar="URL", default=None, help="Page HTML à télécharger et segmenter.")
    p.add_argument("--json", action="store_true", help="Sortie JSON du ParsedDocument.")
    p.set_defaults(func=run)
