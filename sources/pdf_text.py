"""
sources/pdf_text.py — extraction du texte d'un PDF pour le segmenteur.

Architecture :
  pdf_path → fitz.open() → pages → blocs de texte avec polices (dict PyMuPDF)
  → nettoyage (en-têtes/pieds répétés, numéros de page, césures)
  → blocs courts en grande police rendus comme titres markdown ("# " / "## ")
  → texte brut, paragraphes séparés par \n\n

Fonction publique :
  extract_pdf_text(path) -> str
"""

from __future__ import annotations

import statistics
from pathlib import Path

import fitz  # PyMuPDF

from sources.text_cleaner import clean_block_text, collect_repeated_texts, join_blocks

# Un titre détecté par la police doit rester court
_MAX_HEADING_CHARS = 120
_MAX_HEADING_WORDS = 18

_DEFAULT_FONT_SIZE = 12.0
_BOLD_FLAG = 1 << 4

# Écart imposé avant un titre : toujours un nouveau paragraphe
_PARAGRAPH_BREAK = float("inf")


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def extract_pdf_text(path: str | Path) -> str:
    """
    Texte nettoyé d'un fichier PDF. Les erreurs d'ouverture de PyMuPDF
    (fichier absent, PDF corrompu) sont propagées.
    """
    doc = fitz.open(str(path))
    try:
        return _document_text(doc)
    finally:
        doc.close()


# ---------------------------------------------------------------------------
# Implémentation
# ---------------------------------------------------------------------------

def _document_text(doc: fitz.Document) -> str:
    pages_raw = _extract_pages(doc)
    repeated = collect_repeated_texts(pages_raw)
    median_size = _median_font_size(pages_raw)

    texts: list[str] = []
    gaps: list[float] = []
    for page_blocks in pages_raw:
        prev_y1: float | None = None
        for block in page_blocks:
            bbox = block["bbox"]
            gap = (bbox[1] - prev_y1) if prev_y1 is not None else _PARAGRAPH_BREAK
            prev_y1 = bbox[3]

            cleaned = clean_block_text(block, repeated)
            if cleaned is None:
                continue

            level = _heading_level(block, cleaned, median_size)
            if level:
                cleaned = "#" * level + " " + " ".join(cleaned.split())
                gap = _PARAGRAPH_BREAK
            if texts:
                gaps.append(gap)
            texts.append(cleaned)

    return join_blocks(texts, gaps)


def _extract_pages(doc: fitz.Document) -> list[list[dict]]:
    pages: list[list[dict]] = []
    for page in doc:
        page_dict = page.get_text("dict", flags=fitz.TEXT_PRESERVE_WHITESPACE)
        height = page.rect.height
        blocks: list[dict] = []
        for block in page_dict.get("blocks", []):
            block["page_height"] = height
            blocks.append(block)
        pages.append(blocks)
    return pages


def _median_font_size(pages_raw: list[list[dict]]) -> float:
    sizes = [
        span.get("size", 0.0)
        for page_blocks in pages_raw
        for block in page_blocks if block.get("type") == 0
        for line in block.get("lines", [])
        for span in line.get("spans", [])
        if span.get("size", 0.0) > 0
    ]
    return statistics.median(sizes) if sizes else _DEFAULT_FONT_SIZE


def _heading_level(block: dict, text: str, median_size: float) -> int:
    """
    1 ou 2 si le bloc ressemble à un titre d'après sa police, sinon 0.

    Seuls les blocs courts sont candidats ; un paragraphe reste du corps même
    s'il contient quelques mots en gras.
    """
    if len(text) > _MAX_HEADING_CHARS or len(text.split()) > _MAX_HEADING_WORDS:
        return 0

    max_size, bold_ratio = _font_metrics(block)
    if max_size > median_size + 1.5:
        return 1 if max_size > median_size + 3 else 2
    if bold_ratio >= 0.8 and max_size >= median_size:
        return 2
    return 0


def _font_metrics(block: dict) -> tuple[float, float]:
    """(taille de police maximale, part des caractères en gras) d'un bloc."""
    max_size = 0.0
    total_chars = 0
    bold_chars = 0
    for line in block.get("lines", []):
        for span in line.get("spans", []):
            n = len(span.get("text", ""))
            max_size = max(max_size, span.get("size", 0.0))
            total_chars += n
            if span.get("flags", 0) & _BOLD_FLAG:
                bold_chars += n
    return max_size, (bold_chars / total_chars if total_chars else 0.0)
