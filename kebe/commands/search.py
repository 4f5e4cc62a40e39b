"""Commande : kebe search — recherche classée dans les normes chargées."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from data_model import MatchType
from kebe._store import add_norm_argument, build_store

console = Console(width=200)

MATCH_STYLE: dict[MatchType, str] = {
    MatchType.EXACT:   "bold green",
    MatchType.PARTIAL: "cyan",
    MatchType.KEYWORD: "yellow",
}


def run(args: argparse.Namespace) -> None:
    store = build_store(args.norm)
    if args.norm_id and not store.has_corpus(args.norm_id):
        console.print(f"[red]Norme inconnue :[/red] {escape(args.norm_id)}")
        raise SystemExit(1)

    results = store.search(args.query, args.norm_id, args.limit)
    if not results:
        console.print("[yellow]Aucun résultat.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )
    table.add_column("SCORE",   justify="right", no_wrap=True)
    table.add_column("TYPE",    no_wrap=True)
    table.add_column("NORME",   no_wrap=True, style="dim")
    table.add_column("ARTICLE", no_wrap=True, style="bold")
    table.add_column("EXTRAIT", no_wrap=False, max_width=100)

    for r in results:
        table.add_row(
            f"{r.score:.1f}",
            Text(r.match_type, style=MATCH_STYLE[r.match_type]),
            escape(r.corpus_id),
            escape(r.rule.article_number),
            escape(r.rule.content[:160]),
        )

    console.print()
    console.print(table)
    console.print(f"  [dim]{len(results)} résultat(s)[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "search",
        help="Recherche des règles (article exact, sous-chaîne, mots-clés).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Recherche lexicale dans une norme ou dans toutes les normes chargées.

Exemples :
  kebe search 411 --norm-id ns-01-001 --norm ns01001.json
  kebe search "mise à la terre" --limit 5 --norm ns01001.json
        """,
    )
    p.add_argument("query", metavar="REQUÊTE", help="Texte ou numéro d'article recherché.")
    p.add_argument("--norm-id", metavar="ID", default=None, help="Limiter la recherche à une norme.")
    p.add_argument("--limit", type=int, default=20, help="Nombre maximal de résultats (défaut : 20).")
    add_norm_argument(p)
    p.set_defaults(func=run)
