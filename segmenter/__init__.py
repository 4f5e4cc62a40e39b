"""
segmenter — segmentation de documents et extraction de traits lexicaux.

Interface publique :
    segment(raw_text, name="")  — texte brut → ParsedDocument
    segment_blocks(raw_text)    — texte brut → tuple[Block, ...]
    extract_title(name, blocks) — titre déduit d'un document
    extract_concepts(text)      — concepts classés par fréquence
    extract_keywords(text)      — termes techniques présents
    analyze_metadata(text)      — DocumentMetadata

Utilisation typique :
    from segmenter import segment

    doc = segment(Path("guide.md").read_text(encoding="utf-8"), "guide.md")
    for block in doc.blocks:
        print(block.level, block.title)
"""

from .features import (
    CONCEPT_STOP_WORDS,
    TECHNICAL_TERMS,
    analyze_metadata,
    extract_concepts,
    extract_keywords,
)
from .parser import INTRODUCTION_TITLE, extract_title, segment, segment_blocks

__all__ = [
    "CONCEPT_STOP_WORDS",
    "TECHNICAL_TERMS",
    "INTRODUCTION_TITLE",
    "analyze_metadata",
    "extract_concepts",
    "extract_keywords",
    "extract_title",
    "segment",
    "segment_blocks",
]
