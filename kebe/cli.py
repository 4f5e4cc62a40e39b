"""
kebe — outil CLI du moteur de normes et de synthèse de cours.

Utilisation :
  kebe [--verbose] <commande> [options]

Commandes :
  segment        Segmente un document (.txt, .md, .pdf, .html ou URL) en blocs.
  validate-norm  Valide un fichier de norme JSON.
  norms          Liste les normes chargées, pagine leurs règles, affiche leur sommaire.
  search         Recherche des règles dans les normes chargées.
  generate       Génère un cours (JSON) à partir de documents sources.
  normative      Génère un cours normatif (thème et/ou préfixe d'article).

Variables d'environnement :
  KEBE_NORMS_DIR     répertoire de normes *.json chargées au démarrage
  KEBE_LOG_LEVEL     niveau de journalisation (défaut : WARNING)
  KEBE_PAGE_SIZE     taille de page de "norms page" (défaut : 50)
  KEBE_QCM_COUNT     nombre de questions de "generate" (défaut : 10)
  KEBE_HTTP_TIMEOUT  délai des téléchargements en secondes (défaut : 30)
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows : le terminal peut être en cp1252 ; on force l'UTF-8 pour les accents
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.logging import RichHandler

from kebe import _config
from kebe.commands import generate as cmd_generate
from kebe.commands import normative as cmd_normative
from kebe.commands import norms as cmd_norms
from kebe.commands import search as cmd_search
from kebe.commands import segment as cmd_segment
from kebe.commands import validate_norm as cmd_validate_norm


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kebe",
        description="kebe — normes, recherche et synthèse de cours.",
        epilog="Variables d'environnement : KEBE_NORMS_DIR, KEBE_LOG_LEVEL, KEBE_PAGE_SIZE, "
               "KEBE_QCM_COUNT, KEBE_HTTP_TIMEOUT.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="kebe 0.1.0"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Journalisation détaillée (DEBUG).",
    )

    subparsers = parser.add_subparsers(
        title="commandes",
        metavar="<commande>",
        dest="command",
    )
    subparsers.required = True

    cmd_segment.add_parser(subparsers)
    cmd_validate_norm.add_parser(subparsers)
    cmd_norms.add_parser(subparsers)
    cmd_search.add_parser(subparsers)
    cmd_generate.add_parser(subparsers)
    cmd_normative.add_parser(subparsers)

    return parser


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else _config.log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
