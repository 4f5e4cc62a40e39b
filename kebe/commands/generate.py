"""Commande : kebe generate — synthèse d'un cours à partir de documents."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from course import synthesize
from data_model import CourseStyle, GenerationSettings
from kebe import _config
from kebe._sources import read_document, write_json
from kebe._store import add_norm_argument, build_store
from segmenter import segment

console = Console()
err_console = Console(stderr=True)


def run(args: argparse.Namespace) -> None:
    documents = []
    for name in args.files:
        path = Path(name)
        documents.append(segment(read_document(path), path.name))

    store = build_store(args.norm)
    if args.norm_id:
        if not store.set_active(args.norm_id):
            err_console.print(f"[red]Norme inconnue :[/red] {escape(args.norm_id)}")
            raise SystemExit(1)

    settings = GenerationSettings(
        include_qcm=not args.no_qcm,
        include_introduction=not args.no_intro,
        include_conclusion=not args.no_conclusion,
        add_examples=not args.no_examples,
        add_warnings=not args.no_warnings,
        qcm_question_count=args.qcm if args.qcm is not None else _config.qcm_count(),
        course_style=CourseStyle(args.style),
    )
    result = synthesize(documents, settings, store=store)

    for w in result.warnings:
        err_console.print(f"[yellow]Avertissement :[/yellow] {escape(w)}")

    write_json(asdict(result), args.out, console)

    s = result.stats
    err_console.print(
        f"[green]Cours généré :[/green] {escape(result.course.title)}  "
        f"[dim]({s.documents_processed} document(s), {len(result.course.modules)} module(s), "
        f"{s.sections_created} section(s), {s.quiz_generated} question(s), "
        f"{result.norm_rules_used} règle(s), {s.processing_time_ms} ms)[/dim]"
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "generate",
        help="Génère un cours (JSON) à partir de documents sources.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Segmente les documents, résout les règles normatives de la norme active et
assemble le cours : modules, sections, QCM, introduction, conclusion.

Exemples :
  kebe generate guide.md procedure.pdf --out cours.json
  kebe generate guide.md --norm ns01001.json --qcm 15 --style technical
  kebe generate guide.md --no-qcm --no-examples
        """,
    )
    p.add_argument("files", metavar="FICHIER", nargs="+", help="Documents sources.")
    p.add_argument("--qcm", type=int, default=None, help="Nombre de questions (5–20, défaut : KEBE_QCM_COUNT ou 10).")
    p.add_argument("--no-qcm", action="store_true", help="Ne pas générer de QCM.")
    p.add_argument("--no-intro", action="store_true", help="Ne pas générer d'introduction.")
    p.add_argument("--no-conclusion", action="store_true", help="Ne pas générer de conclusion.")
    p.add_argument("--no-examples", action="store_true", help="Ne pas extraire d'exemples.")
    p.add_argument("--no-warnings", action="store_true", help="Ne pas extraire d'avertissements.")
    p.add_argument(
        "--style",
        choices=[s.value for s in CourseStyle],
        default=CourseStyle.STRUCTURED.value,
        help="Style de rédaction des gabarits (défaut : structured).",
    )
    p.add_argument("--norm-id", metavar="ID", default=None, help="Norme active pour l'enrichissement.")
    p.add_argument("--out", metavar="FICHIER.json", default=None, help="Fichier de sortie (défaut : affichage).")
    add_norm_argument(p)
    p.set_defaults(func=run)
