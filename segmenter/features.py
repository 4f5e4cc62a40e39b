"""
segmenter/features.py — extraction lexicale : concepts, mots-clés, métadonnées.

Fonctions publiques :
  extract_concepts(text)  -> list[str]        (≤ 15, classés par fréquence)
  extract_keywords(text)  -> list[str]        (sous-ensemble de TECHNICAL_TERMS)
  analyze_metadata(text)  -> DocumentMetadata

Toutes les fonctions sont pures et déterministes : à fréquence égale, les
concepts gardent l'ordre de première apparition (tri stable).
"""

from __future__ import annotations

import math
import re
from collections import Counter

from data_model import Difficulty, DocumentMetadata, Language

# ---------------------------------------------------------------------------
# Constantes
# ---------------------------------------------------------------------------

MAX_CONCEPTS = 15

# Longueur minimale (exclusive) d'un mot retenu comme concept
_CONCEPT_MIN_LENGTH = 6

_NON_LETTER_RE = re.compile(r"[^a-zàâäéèêëïîôùûüÿç\s]", re.IGNORECASE)

CONCEPT_STOP_WORDS: frozenset[str] = frozenset({
    "également", "cependant", "toutefois", "notamment", "concernant",
    "différents", "plusieurs", "certains", "ensemble", "toujours",
})

TECHNICAL_TERMS: tuple[str, ...] = (
    "sécurité", "procédure", "réglementation", "norme", "conformité",
    "formation", "compétence", "évaluation", "objectif", "méthode",
    "technique", "protocole", "processus", "système", "gestion",
    "qualité", "risque", "prévention", "contrôle", "audit",
    "certification", "accréditation", "habilitation", "autorisation",
)

_WORDS_PER_MINUTE = 250

_TOC_RE = re.compile(r"table\s+des\s+mati[eè]res|sommaire", re.IGNORECASE)
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_FRENCH_RE = re.compile(
    r"\b(le|la|les|du|des|un|une|et|est|dans|pour|sur|avec)\b", re.IGNORECASE
)
_ENGLISH_RE = re.compile(
    r"\b(the|a|an|is|are|in|on|with|for|to|and)\b", re.IGNORECASE
)


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def extract_concepts(text: str) -> list[str]:
    """
    Concepts clés par analyse fréquentielle.

    Mots de plus de 6 lettres (accents conservés), hors mots vides, triés par
    fréquence décroissante ; la première lettre est mise en majuscule.
    """
    words = _NON_LETTER_RE.sub(" ", text.lower()).split()
    frequency = Counter(w for w in words if len(w) > _CONCEPT_MIN_LENGTH)

    # Counter conserve l'ordre d'insertion ; sorted() est stable.
    ranked = sorted(
        (w for w in frequency if w not in CONCEPT_STOP_WORDS),
        key=lambda w: frequency[w],
        reverse=True,
    )
    return [w[:1].upper() + w[1:] for w in ranked[:MAX_CONCEPTS]]


def extract_keywords(text: str) -> list[str]:
    """Termes techniques présents (sous-chaîne, insensible à la casse), dans l'ordre de la liste."""
    lowered = text.lower()
    return [term for term in TECHNICAL_TERMS if term in lowered]


def analyze_metadata(text: str) -> DocumentMetadata:
    words = text.split()
    word_count = len(words)
    paragraph_count = len(_PARAGRAPH_SPLIT_RE.split(text.strip())) if text.strip() else 0

    french = len(_FRENCH_RE.findall(text))
    english = len(_ENGLISH_RE.findall(text))
    language = Language.FR if french >= english else Language.EN

    keyword_count = len(extract_keywords(text))
    avg_word_length = (sum(len(w) for w in words) / word_count) if word_count else 0.0

    return DocumentMetadata(
        word_count=word_count,
        paragraph_count=paragraph_count,
        has_toc=bool(_TOC_RE.search(text)),
        estimated_reading_minutes=math.ceil(word_count / _WORDS_PER_MINUTE),
        language=language,
        difficulty=_estimate_difficulty(keyword_count, avg_word_length),
    )


# ---------------------------------------------------------------------------
# Fonctions internes
# ---------------------------------------------------------------------------

def _estimate_difficulty(keyword_count: int, avg_word_length: float) -> Difficulty:
    if keyword_count > 12 or avg_word_length > 8:
        return Difficulty.ADVANCED
    if keyword_count < 5 and avg_word_length < 6:
        return Difficulty.BEGINNER
    return Difficulty.INTERMEDIATE
