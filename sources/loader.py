"""
sources/loader.py — lecture d'un document source selon son extension.

  .txt / .md     → texte UTF-8 tel quel
  .pdf           → sources.pdf_text.extract_pdf_text
  .html / .htm   → sources.html_text.html_to_text

Toute autre extension lève UnsupportedDocumentError ; les erreurs d'E/S et de
PyMuPDF sont propagées à l'appelant.
"""

from __future__ import annotations

from pathlib import Path

from sources.html_text import html_to_text
from sources.pdf_text import extract_pdf_text

TEXT_SUFFIXES = frozenset({".txt", ".md"})
HTML_SUFFIXES = frozenset({".html", ".htm"})
PDF_SUFFIXES = frozenset({".pdf"})

SUPPORTED_SUFFIXES = TEXT_SUFFIXES | HTML_SUFFIXES | PDF_SUFFIXES


class UnsupportedDocumentError(ValueError):
    """Extension de fichier non prise en charge."""

    def __init__(self, path: Path) -> None:
        supported = ", ".join(sorted(SUPPORTED_SUFFIXES))
        super().__init__(f"Format non pris en charge : {path.suffix or '(aucune extension)'} (attendu : {supported})")
        self.path = path


def load_document(path: str | Path) -> str:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")
    if suffix in HTML_SUFFIXES:
        return html_to_text(path.read_text(encoding="utf-8"))
    if suffix in PDF_SUFFIXES:
        return extract_pdf_text(path)
    raise UnsupportedDocumentError(path)
