"""Commande : kebe normative — cours normatif en cinq chapitres."""

from __future__ import annotations

import argparse
from dataclasses import asdict

from rich.console import Console
from rich.markup import escape

from course import PREDEFINED_THEMES, NormativeCourseRequest, generate_normative_course
from data_model import Audience
from kebe._sources import write_json
from kebe._store import add_norm_argument, build_store

console = Console()
err_console = Console(stderr=True)


def run(args: argparse.Namespace) -> None:
    store = build_store(args.norm)
    corpus_id = args.norm_id or store.active_corpus_id
    if corpus_id is None or not store.has_corpus(corpus_id):
        err_console.print("[red]Aucune norme chargée[/red] (utilisez --norm ou KEBE_NORMS_DIR).")
        raise SystemExit(1)
    if not args.theme and not args.prefix:
        err_console.print("[red]Indiquez --theme et/ou --prefix.[/red]")
        raise SystemExit(1)

    request = NormativeCourseRequest(
        theme=args.theme,
        article_prefix=args.prefix,
        audience=Audience(args.audience),
        include_qcm=not args.no_qcm,
        qcm_count=args.qcm,
        corpus_id=corpus_id,
    )
    result = generate_normative_course(store, request)

    if not result.rules_used:
        err_console.print("[yellow]Avertissement :[/yellow] aucune règle trouvée pour cette demande.")

    write_json(asdict(result), args.out, console)

    s = result.stats
    err_console.print(
        f"[green]Cours normatif :[/green] {escape(result.course.title)}  "
        f"[dim]({s.rules_analyzed} règle(s), {s.sections_created} section(s), "
        f"{s.quiz_generated} question(s))[/dim]"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    themes = "\n".join(f"  {key:<22}{t.label}" for key, t in PREDEFINED_THEMES.items())
    p = subparsers.add_parser(
        "normative",
        help="Génère un cours normatif (thème et/ou préfixe d'article).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=f"""
Cours structuré en cinq chapitres à partir des règles d'une norme.

Thèmes prédéfinis :
{themes}

Exemples :
  kebe normative --theme chocs-electriques --norm ns01001.json
  kebe normative --prefix 411 --audience engineer --norm ns01001.json --out cours.json
        """,
    )
    p.add_argument("--theme", default=None, help="Clé ou libellé de thème, ou texte libre.")
    p.add_argument("--prefix", default=None, help="Préfixe d'article, p. ex. 411.")
    p.add_argument(
        "--audience",
        choices=[a.value for a in Audience],
        default=Audience.TECHNICIAN.value,
        help="Public visé (défaut : technician).",
    )
    p.add_argument("--qcm", type=int, default=10, help="Nombre de questions (défaut : 10).")
    p.add_argument("--no-qcm", action="store_true", help="Ne pas générer de QCM.")
    p.add_argument("--norm-id", metavar="ID", default=None, help="Norme à utiliser (défaut : norme active).")
    p.add_argument("--out", metavar="FICHIER.json", default=None, help="Fichier de sortie (défaut : affichage).")
    add_norm_argument(p)
    p.set_defaults(func=run)
