"""Lecture des documents sources pour les commandes, avec messages d'erreur rich."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests
from rich.console import Console

from kebe import _config
from sources.html_text import fetch_html_text
from sources.loader import UnsupportedDocumentError, load_document

console = Console(stderr=True)


def read_document(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Le fichier n'existe pas :[/red] {path}")
        raise SystemExit(1)
    try:
        return load_document(path)
    except UnsupportedDocumentError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    except (OSError, UnicodeDecodeError, RuntimeError) as e:
        # RuntimeError : PDF illisible (PyMuPDF)
        console.print(f"[red]Erreur de lecture de {path} :[/red] {e}")
        raise SystemExit(1)


def read_url(url: str) -> str:
    try:
        return fetch_html_text(url, timeout=_config.http_timeout())
    except requests.RequestException as e:
        console.print(f"[red]Erreur HTTP :[/red] {e}")
        raise SystemExit(1)


def write_json(data: Any, out: str | None, stdout: Console) -> None:
    """Écrit `data` en JSON dans `out`, ou l'affiche si `out` est None."""
    text = json.dumps(data, ensure_ascii=False, indent=2, default=str)
    if out is None:
        stdout.print_json(text)
        return
    Path(out).write_text(text, encoding="utf-8")
    console.print(f"[green]JSON :[/green] {out}")
