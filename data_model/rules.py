"""
Structures de données des normes (corpus de règles).

Correspondance avec le format d'import JSON :
  metadata            → CorpusMetadata
  sommaire            → list[TocNode]
  rules[i]            → Rule  (titre → title, article → article_number)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from .common import MatchType

# ---------------------------------------------------------------------------
# Alias de types
# ---------------------------------------------------------------------------

# Unique au sein d'un corpus, p. ex. "ns-01-001-rule-12"
RuleId: TypeAlias = str

# Identifiant de la norme, p. ex. "ns-01-001"
CorpusId: TypeAlias = str


# ---------------------------------------------------------------------------
# Rule
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Rule:
    """
    Énoncé normatif atomique.

    - id:             identifiant unique dans le corpus
    - title:          titre de la partie de la norme (champ "titre" du JSON)
    - article_number: numéro d'article, p. ex. "411.1" ; pas forcément unique
    - content:        texte de la règle
    - page:           page dans le document source (≥ 0)
    - corpus_id:      norme d'appartenance
    - category:       catégorie libre (optionnel)
    - keywords:       mots-clés explicites, ajoutés à l'index
    """
    id: RuleId
    title: str
    article_number: str
    content: str
    page: int
    corpus_id: CorpusId
    category: str | None = None
    keywords: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Sommaire
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class TocNode:
    """Nœud du sommaire hiérarchique : {index, label, level, children}."""
    index: str
    label: str
    level: int = 1
    children: list[TocNode] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Corpus
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class CorpusMetadata:
    """
    Métadonnées d'une norme importée.

    - imported_at: horodatage ISO 8601 de l'import
    - rule_count:  toujours égal à len(Corpus.rules)
    """
    id: CorpusId
    name: str
    domain: str
    description: str = ""
    version: str | None = None
    country: str | None = None
    imported_at: str = ""
    rule_count: int = 0


@dataclass(slots=True)
class Corpus:
    """Norme chargée : métadonnées + règles + sommaire optionnel."""
    metadata: CorpusMetadata
    rules: tuple[Rule, ...]
    table_of_contents: list[TocNode] = field(default_factory=list)

    @property
    def id(self) -> CorpusId:
        return self.metadata.id

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def rule_count(self) -> int:
        return len(self.rules)


# ---------------------------------------------------------------------------
# Résultats
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SearchResult:
    """Résultat éphémère d'une requête ; score plus élevé = plus pertinent."""
    rule: Rule
    score: float
    match_type: MatchType
    corpus_id: CorpusId


@dataclass(slots=True)
class RulePage:
    """Page de règles (pagination 1-based)."""
    rules: list[Rule]
    total: int
    page_count: int
