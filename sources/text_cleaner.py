"""
sources/text_cleaner.py — nettoyage du texte extrait d'un PDF.

Ce qui est supprimé :
  - En-têtes/pieds de page (texte proche du bord, répété sur plusieurs pages)
  - Numéros de page (nombre isolé)
  - Césures en fin de ligne ("instal-\nlation" → "installation")
  - Espaces multiples à l'intérieur d'une ligne

Ce qui est conservé :
  - \n\n entre paragraphes (blocs séparés par un grand écart vertical)
  - \n simple à l'intérieur d'un bloc
  - Marqueurs de liste (•, -, *) en début de ligne

Le segmenteur travaille ligne par ligne : chaque ligne conservée ici devient
une ligne de corps, de puce ou de titre.
"""

from __future__ import annotations

import re
from collections import Counter

# ---------------------------------------------------------------------------
# Constantes
# ---------------------------------------------------------------------------

# Distance au bord de page (pt) en deçà de laquelle un bloc peut être un en-tête/pied
_MARGIN_THRESHOLD_PT = 50.0

# Nombre minimal de pages où un texte doit se répéter pour être un en-tête/pied
_REPEAT_MIN_PAGES = 2

# Écart vertical (pt) au-delà duquel deux blocs forment deux paragraphes
_PARAGRAPH_GAP_PT = 12.0

_PAGE_NUMBER_RE = re.compile(r"^\s*(page\s+)?\d{1,4}(\s*/\s*\d{1,4})?\s*$", re.IGNORECASE)
_HYPHEN_BREAK_RE = re.compile(r"(\w)-\n(\w)")
_MULTI_SPACE_RE = re.compile(r"(?<=\S) {2,}")


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def collect_repeated_texts(pages_blocks: list[list[dict]]) -> set[str]:
    """
    Textes des blocs de marge (en-têtes, pieds de page) présents sur au moins
    _REPEAT_MIN_PAGES pages ; ils sont retirés du texte extrait.

    pages_blocks: blocs PyMuPDF d'une page (dict avec 'bbox', 'lines',
                  'page_height'), une liste par page.
    """
    pages_seen: Counter[str] = Counter()
    for page_blocks in pages_blocks:
        pages_seen.update({
            text
            for block in page_blocks
            if _in_margin(block) and (text := block_text(block).strip())
        })
    return {text for text, pages in pages_seen.items() if pages >= _REPEAT_MIN_PAGES}


def clean_block_text(block: dict, repeated_texts: set[str]) -> str | None:
    """
    Texte nettoyé d'un bloc, ou None si le bloc doit être ignoré
    (image, en-tête/pied de page, numéro de page, bloc vide).
    """
    if block.get("type") != 0:
        return None

    raw = block_text(block).strip()
    if not raw or raw in repeated_texts or _PAGE_NUMBER_RE.match(raw):
        return None

    text = _HYPHEN_BREAK_RE.sub(r"\1\2", raw)
    text = _MULTI_SPACE_RE.sub(" ", text)
    return text.strip()


def join_blocks(cleaned_blocks: list[str], gaps: list[float]) -> str:
    """
    Assemble les blocs nettoyés en un seul texte.

    gaps[i] = écart vertical (pt) entre le bloc i et le bloc i+1 ;
    grand écart → \n\n, sinon \n.
    """
    if not cleaned_blocks:
        return ""

    parts: list[str] = [cleaned_blocks[0]]
    for i, text in enumerate(cleaned_blocks[1:]):
        gap = gaps[i] if i < len(gaps) else 0.0
        parts.append("\n\n" if gap > _PARAGRAPH_GAP_PT else "\n")
        parts.append(text)

    return re.sub(r"\n{3,}", "\n\n", "".join(parts)).strip()


def block_text(block: dict) -> str:
    """Texte d'un bloc PyMuPDF (lines → spans), une ligne par ligne PDF."""
    return "\n".join(
        "".join(span.get("text", "") for span in line.get("spans", []))
        for line in block.get("lines", [])
    )


def _in_margin(block: dict) -> bool:
    """Bloc de texte à moins de _MARGIN_THRESHOLD_PT du haut ou du bas de sa page."""
    if block.get("type") != 0:
        return False
    _, y0, _, y1 = block["bbox"]
    return y0 < _MARGIN_THRESHOLD_PT or y1 > block.get("page_height", 0) - _MARGIN_THRESHOLD_PT
