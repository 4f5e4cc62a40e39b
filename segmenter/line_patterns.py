"""
segmenter/line_patterns.py — motifs regex de classification des lignes.

Chaque HeadingPattern contient :
  - regex        : motif compilé (ancré en début de ligne)
  - extract_title: fonction qui extrait le texte du titre depuis le Match

Les motifs de titre sont testés dans l'ordre ; le premier qui correspond
l'emporte. Les familles d'indices (CUE_PATTERNS) sont au contraire toutes
testées sur chaque ligne ajoutée à un bloc : une même ligne peut lever
plusieurs drapeaux.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable


@dataclass(frozen=True, slots=True)
class HeadingPattern:
    regex: re.Pattern[str]
    extract_title: Callable[[re.Match[str]], str]


def _p(pattern: str, flags: int = 0) -> re.Pattern[str]:
    return re.compile(pattern, flags | re.UNICODE)


def _last_group(m: re.Match[str]) -> str:
    """Dernier groupe capturé, ou la ligne entière si le motif n'a pas de groupe."""
    if m.re.groups:
        return m.group(m.re.groups) or m.string
    return m.group(0)


HEADING_PATTERNS: list[HeadingPattern] = [
    # Titres markdown : "# Titre", "## Sous-titre", "### Détail"
    HeadingPattern(
        regex=_p(r"^#{1,3}\s+(.+)$"),
        extract_title=_last_group,
    ),
    # "CHAPITRE 2 : Les protections", "Module - Introduction"
    HeadingPattern(
        regex=_p(r"^(CHAPITRE|PARTIE|SECTION|MODULE)\s+\d*\s*[:.\-]?\s*(.+)", re.IGNORECASE),
        extract_title=_last_group,
    ),
    # Sections numérotées : "1. Objet", "2.3. Domaine"
    HeadingPattern(
        regex=_p(r"^(\d+\.)+\s+(.+)"),
        extract_title=_last_group,
    ),
    # Ligne entièrement en capitales (≥ 6 caractères)
    HeadingPattern(
        regex=_p(r"^[A-Z][A-Z\s]{5,}$"),
        extract_title=_last_group,
    ),
    # Chiffres romains : "IV. Vérifications"
    HeadingPattern(
        regex=_p(r"^[IVX]+\.\s+(.+)", re.IGNORECASE),
        extract_title=_last_group,
    ),
]

BULLET_RE = _p(r"^[\-•*]\s+(.+)")


def heading_level(line: str) -> int:
    """Profondeur du titre : "###" → 3, "##" → 2, toute autre forme → 1."""
    if line.startswith("###"):
        return 3
    if line.startswith("##"):
        return 2
    return 1


def match_heading(line: str) -> tuple[int, str] | None:
    """Retourne (niveau, titre) si la ligne est un titre, sinon None."""
    for pattern in HEADING_PATTERNS:
        m = pattern.regex.match(line)
        if m:
            return heading_level(line), pattern.extract_title(m)
    return None


# ---------------------------------------------------------------------------
# Familles d'indices (drapeaux de bloc)
# ---------------------------------------------------------------------------

class Cue(StrEnum):
    WARNING    = "warning"
    EXAMPLE    = "example"
    DEFINITION = "definition"


CUE_PATTERNS: dict[Cue, list[re.Pattern[str]]] = {
    Cue.WARNING: [
        _p(r"⚠️|⚡|🚨|attention|avertissement|important|danger|précaution", re.IGNORECASE),
        _p(r"^ATTENTION\s*[:!]", re.IGNORECASE),
        _p(r"^IMPORTANT\s*[:!]", re.IGNORECASE),
    ],
    Cue.EXAMPLE: [
        _p(r"exemple\s*:", re.IGNORECASE),
        _p(r"par exemple", re.IGNORECASE),
        _p(r"cas pratique", re.IGNORECASE),
        _p(r"illustration", re.IGNORECASE),
    ],
    Cue.DEFINITION: [
        _p(r"^définition\s*:", re.IGNORECASE),
        _p(r"signifie\s*:", re.IGNORECASE),
        _p(r"désigne\s*:", re.IGNORECASE),
    ],
}


def detect_cues(line: str) -> frozenset[Cue]:
    """Ensemble des familles d'indices présentes dans la ligne."""
    return frozenset(
        cue for cue, patterns in CUE_PATTERNS.items()
        if any(p.search(line) for p in patterns)
    )
