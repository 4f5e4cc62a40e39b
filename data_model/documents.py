"""
data_model/documents.py — modèle d'un document segmenté.

Un Block correspond à une unité structurelle du texte source (titre + corps +
puces + drapeaux de type) ; la séquence de blocs, dans l'ordre du document,
forme le ParsedDocument avec ses concepts, mots-clés et métadonnées dérivés.
"""

from __future__ import annotations

from dataclasses import dataclass

from .common import Difficulty, Language


@dataclass(frozen=True, slots=True)
class Block:
    """
    Unité structurelle d'un document.

    - level:         0 = racine sans titre, 1..3 = profondeur du titre
    - title:         texte du titre (sans marqueur "#", numéro, etc.)
    - body:          texte libre accumulé, chaque ligne suivie d'une espace
    - bullets:       puces dans l'ordre du document
    - is_warning:    au moins une ligne porte un indice d'avertissement
    - is_example:    au moins une ligne porte un indice d'exemple
    - is_definition: au moins une ligne porte un indice de définition
    """
    level: int
    title: str
    body: str = ""
    bullets: tuple[str, ...] = ()
    is_warning: bool = False
    is_example: bool = False
    is_definition: bool = False


@dataclass(frozen=True, slots=True)
class DocumentMetadata:
    word_count: int
    paragraph_count: int
    has_toc: bool
    estimated_reading_minutes: int
    language: Language
    difficulty: Difficulty


@dataclass(frozen=True, slots=True)
class ParsedDocument:
    """
    Document source segmenté. Une instance par document, jamais modifiée.

    - name:     nom du fichier/source (peut être vide)
    - title:    titre déduit (premier bloc de niveau 1 ou nom de fichier)
    - blocks:   blocs dans l'ordre du document
    - concepts: concepts classés par fréquence (≤ 15)
    - keywords: termes techniques présents dans le texte
    """
    name: str
    title: str
    blocks: tuple[Block, ...]
    concepts: tuple[str, ...]
    keywords: tuple[str, ...]
    metadata: DocumentMetadata
