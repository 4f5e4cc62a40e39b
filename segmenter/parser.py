"""
segmenter/parser.py — découpage d'un texte brut en blocs structurels.

Architecture :
  raw_text → lignes non vides (strip) → reduce(_step, lignes, _State())
  → _State.finish() → tuple[Block, ...]
  → extract_concepts / extract_keywords / analyze_metadata
  → ParsedDocument

Chaque ligne est classée par une table ordonnée (LINE_RULES) : titre, puce,
puis corps par défaut. Le bloc ouvert est un accumulateur explicite
(_BlockDraft) figé en Block à la fermeture.

Fonctions publiques :
  segment(raw_text, name="")     -> ParsedDocument
  segment_blocks(raw_text)       -> tuple[Block, ...]
  extract_title(name, blocks)    -> str
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any, Callable, TypeAlias

from data_model import Block, ParsedDocument
from segmenter.features import analyze_metadata, extract_concepts, extract_keywords
from segmenter.line_patterns import BULLET_RE, Cue, detect_cues, match_heading

logger = logging.getLogger(__name__)

INTRODUCTION_TITLE = "Introduction"


# ---------------------------------------------------------------------------
# Accumulateur
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class _BlockDraft:
    level: int
    title: str
    body: str = ""
    bullets: tuple[str, ...] = ()
    cues: frozenset[Cue] = frozenset()

    def freeze(self) -> Block:
        return Block(
            level=self.level,
            title=self.title,
            body=self.body,
            bullets=self.bullets,
            is_warning=Cue.WARNING in self.cues,
            is_example=Cue.EXAMPLE in self.cues,
            is_definition=Cue.DEFINITION in self.cues,
        )


@dataclass(frozen=True, slots=True)
class _State:
    closed: tuple[Block, ...] = ()
    current: _BlockDraft | None = None

    def finish(self) -> tuple[Block, ...]:
        if self.current is None:
            return self.closed
        return self.closed + (self.current.freeze(),)


# ---------------------------------------------------------------------------
# Table de classification : (prédicat, effet), premier qui correspond gagne
# ---------------------------------------------------------------------------

_Effect: TypeAlias = Callable[[_State, str, Any], _State]


def _open_heading(state: _State, line: str, heading: tuple[int, str]) -> _State:
    level, title = heading
    return _State(
        closed=state.finish(),
        current=_BlockDraft(level=level, title=title),
    )


def _append_bullet(state: _State, line: str, m: re.Match[str]) -> _State:
    draft = _ensure_open(state.current)
    text = m.group(1)
    draft = replace(draft, bullets=draft.bullets + (text,), cues=draft.cues | detect_cues(line))
    return replace(state, current=draft)


def _append_body(state: _State, line: str, _: Any) -> _State:
    draft = _ensure_open(state.current)
    draft = replace(draft, body=draft.body + line + " ", cues=draft.cues | detect_cues(line))
    return replace(state, current=draft)


LINE_RULES: list[tuple[Callable[[str], Any], _Effect]] = [
    (match_heading,       _open_heading),
    (BULLET_RE.match,     _append_bullet),
    (lambda line: True,   _append_body),
]


def _ensure_open(draft: _BlockDraft | None) -> _BlockDraft:
    """Bloc synthétique "Introduction" si le texte commence sans titre."""
    if draft is None:
        return _BlockDraft(level=1, title=INTRODUCTION_TITLE)
    return draft


def _step(state: _State, line: str) -> _State:
    for predicate, effect in LINE_RULES:
        hit = predicate(line)
        if hit:
            return effect(state, line, hit)
    return state


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def segment_blocks(raw_text: str) -> tuple[Block, ...]:
    """Séquence de blocs dans l'ordre du document ; texte vide → ()."""
    lines = (line.strip() for line in raw_text.split("\n"))
    return reduce(_step, (line for line in lines if line), _State()).finish()


def segment(raw_text: str, name: str = "") -> ParsedDocument:
    """
    Segmente un document brut et calcule ses traits lexicaux.

    Args:
        raw_text: texte du document (markdown, texte extrait d'un PDF, etc.)
        name:     nom de la source, utilisé pour le titre de repli
    """
    blocks = segment_blocks(raw_text)
    logger.debug("segment %r: %d bloc(s)", name, len(blocks))
    return ParsedDocument(
        name=name,
        title=extract_title(name, blocks),
        blocks=blocks,
        concepts=tuple(extract_concepts(raw_text)),
        keywords=tuple(extract_keywords(raw_text)),
        metadata=analyze_metadata(raw_text),
    )


_EXTENSION_RE = re.compile(r"\.(pdf|docx?|txt|md|html?)$", re.IGNORECASE)
_WORD_START_RE = re.compile(r"\b\w")


def extract_title(name: str, blocks: tuple[Block, ...] | list[Block]) -> str:
    """
    Titre du document : premier bloc de niveau 1 de longueur raisonnable
    (5 < len < 100), sinon nom de fichier nettoyé ("guide_securite.pdf" →
    "Guide Securite").
    """
    main = next((b for b in blocks if b.level == 1), None)
    if main is not None and 5 < len(main.title) < 100:
        return main.title

    cleaned = _EXTENSION_RE.sub("", name)
    cleaned = re.sub(r"[-_]", " ", cleaned)
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), cleaned)
