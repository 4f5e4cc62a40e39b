"""
norms/loader.py — chargement de fichiers de normes JSON dans un CorpusStore.

load_payload_file(path)        — lit et décode un fichier ; PayloadParseError sinon
import_file(store, path)       — load_payload_file + store.import_corpus
import_directory(store, dir)   — importe tous les *.json d'un répertoire (ordre alphabétique)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from validator import ImportOutcome

from .store import CorpusStore

log = logging.getLogger(__name__)


class PayloadParseError(ValueError):
    """Le fichier n'est pas un document JSON valide."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def load_payload_file(path: str | Path) -> Any:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadParseError(path, f"JSON invalide (ligne {exc.lineno}, colonne {exc.colno})") from exc


def import_file(store: CorpusStore, path: str | Path) -> ImportOutcome:
    payload = load_payload_file(path)
    outcome = store.import_corpus(payload)
    if not outcome.success:
        log.warning("Import de %s refusé : %s", path, outcome.error)
    return outcome


def import_directory(store: CorpusStore, directory: str | Path) -> list[ImportOutcome]:
    """Importe chaque *.json du répertoire ; un fichier refusé n'interrompt pas les suivants."""
    files = sorted(Path(directory).glob("*.json"))
    log.debug("%d fichier(s) de norme trouvé(s) dans %s", len(files), directory)
    return [import_file(store, f) for f in files]
