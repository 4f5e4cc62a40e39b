"""Construction du CorpusStore de la CLI : KEBE_NORMS_DIR puis options --norm."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console

from kebe import _config
from norms import CorpusStore, PayloadParseError, import_directory, import_file

console = Console(stderr=True)
log = logging.getLogger(__name__)


def add_norm_argument(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--norm",
        metavar="FICHIER.json",
        action="append",
        default=[],
        help="Norme à charger (répétable). S'ajoute aux normes de KEBE_NORMS_DIR.",
    )


def build_store(norm_files: list[str]) -> CorpusStore:
    """
    Charge les normes du répertoire configuré puis les fichiers explicites.
    Un fichier explicite illisible ou refusé arrête la commande.
    """
    store = CorpusStore()

    directory = _config.norms_dir()
    if directory is not None:
        if not directory.is_dir():
            console.print(f"[yellow]KEBE_NORMS_DIR n'est pas un répertoire :[/yellow] {directory}")
        else:
            try:
                outcomes = import_directory(store, directory)
            except (OSError, PayloadParseError) as e:
                console.print(f"[red]Erreur de chargement des normes :[/red] {e}")
                raise SystemExit(1)
            log.debug("%d norme(s) importée(s) depuis %s", sum(o.success for o in outcomes), directory)

    for name in norm_files:
        path = Path(name)
        try:
            outcome = import_file(store, path)
        except (OSError, PayloadParseError) as e:
            console.print(f"[red]Erreur de lecture de la norme :[/red] {e}")
            raise SystemExit(1)
        if not outcome.success:
            console.print(f"[red]Norme refusée[/red] {path} : {outcome.error}")
            raise SystemExit(1)

    return store
