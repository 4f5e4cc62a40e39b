"""Commande : kebe norms — liste, pagination et sommaire des normes chargées."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from data_model import Corpus, TocNode
from kebe import _config
from kebe._store import add_norm_argument, build_store
from norms import CorpusStore

console = Console(width=200)


def _table() -> Table:
    return Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
        expand=False,
    )


def _list(store: CorpusStore, args: argparse.Namespace) -> None:
    corpora = store.list_corpora()
    if not corpora:
        console.print("[yellow]Aucune norme chargée (--norm ou KEBE_NORMS_DIR).[/yellow]")
        return

    active = store.active_corpus_id
    table = _table()
    table.add_column("ID",      no_wrap=True, style="bold cyan")
    table.add_column("NOM",     no_wrap=False, max_width=50)
    table.add_column("DOMAINE", no_wrap=True)
    table.add_column("VERSION", no_wrap=True, style="dim")
    table.add_column("RÈGLES",  justify="right", no_wrap=True)
    table.add_column("ACTIVE",  justify="center", no_wrap=True)

    for meta in corpora:
        table.add_row(
            escape(meta.id),
            escape(meta.name),
            escape(meta.domain),
            escape(meta.version or "-"),
            str(meta.rule_count),
            "[green]●[/green]" if meta.id == active else "",
        )

    stats = store.stats()
    console.print()
    console.print(table)
    console.print(f"  [dim]{stats.corpus_count} norme(s), {stats.total_rule_count} règle(s)[/dim]\n")


def _page(store: CorpusStore, args: argparse.Namespace) -> None:
    _require(store, args.norm_id)
    size = args.size or _config.page_size()
    page = store.get_page(args.norm_id, args.page, size)
    if not page.rules:
        console.print(f"[yellow]Page {args.page} vide[/yellow] ({page.page_count} page(s)).")
        return

    table = _table()
    table.add_column("ARTICLE", no_wrap=True, style="bold cyan")
    table.add_column("TITRE",   no_wrap=False, max_width=40)
    table.add_column("PAGE",    justify="right", no_wrap=True, style="dim")
    table.add_column("CONTENU", no_wrap=False, max_width=100)

    for rule in page.rules:
        table.add_row(escape(rule.article_number), escape(rule.title), str(rule.page), escape(rule.content[:200]))

    console.print()
    console.print(table)
    console.print(f"  [dim]page {args.page}/{page.page_count} · {page.total} règle(s)[/dim]\n")


def _add_toc_nodes(tree: Tree, nodes: list[TocNode]) -> None:
    for node in nodes:
        branch = tree.add(f"[cyan]{escape(node.index)}[/cyan] {escape(node.label)}")
        _add_toc_nodes(branch, node.children)


def _toc(store: CorpusStore, args: argparse.Namespace) -> None:
    corpus = _require(store, args.norm_id)
    if not corpus.table_of_contents:
        console.print("[yellow]Pas de sommaire pour cette norme.[/yellow]")
        return
    tree = Tree(f"[bold]{escape(corpus.name)}[/bold]")
    _add_toc_nodes(tree, corpus.table_of_contents)
    console.print(tree)


def _require(store: CorpusStore, norm_id: str) -> Corpus:
    corpus = store.get_corpus(norm_id)
    if corpus is None:
        console.print(f"[red]Norme inconnue :[/red] {escape(norm_id)}")
        raise SystemExit(1)
    return corpus


_ACTIONS = {"list": _list, "page": _page, "toc": _toc}


def run(args: argparse.Namespace) -> None:
    store = build_store(args.norm)
    _ACTIONS[args.action](store, args)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "norms",
        help="Liste les normes chargées, pagine leurs règles, affiche leur sommaire.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Consultation des normes chargées depuis KEBE_NORMS_DIR et les options --norm.

Exemples :
  kebe norms list --norm ns01001.json
  kebe norms page ns-01-001 --page 2 --size 20 --norm ns01001.json
  kebe norms toc ns-01-001 --norm ns01001.json
        """,
    )
    actions = p.add_subparsers(dest="action", metavar="<action>")
    actions.required = True

    p_list = actions.add_parser("list", help="Liste les normes chargées.")
    add_norm_argument(p_list)

    p_page = actions.add_parser("page", help="Affiche une page de règles.")
    p_page.add_argument("norm_id", metavar="ID", help="Identifiant de la norme.")
    p_page.add_argument("--page", type=int, default=1, help="Numéro de page (1-based, défaut : 1).")
    p_page.add_argument("--size", type=int, default=None, help="Taille de page (défaut : KEBE_PAGE_SIZE ou 50).")
    add_norm_argument(p_page)

    p_toc = actions.add_parser("toc", help="Affiche le sommaire hiérarchique.")
    p_toc.add_argument("norm_id", metavar="ID", help="Identifiant de la norme.")
    add_norm_argument(p_toc)

    p.set_defaults(func=run)
