"""
norms/store.py — magasin multi-normes en mémoire.

CorpusStore est l'objet explicite partagé par la CLI et le synthétiseur
(aucun singleton). Il possède les corpus, leurs index inversés et l'identifiant
de la norme active.

Invariants :
  - chaque corpus chargé a exactement un index, reconstruit à chaque import ;
  - metadata.rule_count == len(corpus.rules) ;
  - la norme active est None ou un corpus chargé ;
  - l'ordre de list_corpora() est l'ordre d'import (un remplacement garde sa place).

Lectures (search, get_page, list_corpora, …) sous le verrou partagé,
écritures (import_corpus, delete, set_active) sous le verrou exclusif.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from data_model import (
    Corpus,
    CorpusId,
    CorpusMetadata,
    Rule,
    RulePage,
    SearchResult,
    TocNode,
)
from validator import (
    ImportOutcome,
    ImportValidation,
    normalize_rules,
    normalize_toc,
    parse_payload,
    validate_import,
)

from .index import InvertedIndex, build_index
from .locking import ReadWriteLock
from .search import DEFAULT_LIMIT, normalize_query, rank, search_corpus

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

# Termes techniques reconnus par key_concepts_from_rules, dans l'ordre de priorité
RULE_TECHNICAL_TERMS: tuple[str, ...] = (
    "protection", "sécurité", "installation", "électrique", "tension",
    "courant", "mise à la terre", "isolement", "conducteur", "circuit",
    "disjoncteur", "fusible", "prise", "interrupteur", "câble", "gaine",
    "tableau", "différentiel", "court-circuit", "surcharge", "contact",
    "indirect", "direct", "classe", "IP", "TBT", "BT", "HT",
)

MAX_KEY_CONCEPTS = 10
CONTEXT_SEARCH_LIMIT = 10
CONTEXT_ARTICLES = 5


@dataclass(slots=True)
class TopicContext:
    """Contexte normatif d'un sujet : règles pertinentes + résumé textuel."""
    relevant_rules: list[Rule]
    summary: str


@dataclass(slots=True)
class StoreStats:
    corpus_count: int
    total_rule_count: int
    corpora: list[CorpusMetadata] = field(default_factory=list)


class CorpusStore:

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._corpora: dict[CorpusId, Corpus] = {}
        self._indexes: dict[CorpusId, InvertedIndex] = {}
        self._active_id: CorpusId | None = None

    # ------------------------------------------------------------------
    # Import / suppression
    # ------------------------------------------------------------------

    def validate_import(self, payload: str | bytes | dict[str, Any]) -> ImportValidation:
        with self._lock.read():
            existing = set(self._corpora)
        return validate_import(payload, existing_ids=existing)

    def import_corpus(self, payload: str | bytes | dict[str, Any]) -> ImportOutcome:
        """
        Valide puis charge un corpus. Un corpus de même id est remplacé
        (règles, index et métadonnées) ; le premier corpus chargé devient actif.
        """
        report = self.validate_import(payload)
        if not report.valid:
            return ImportOutcome(success=False, error="; ".join(report.messages))

        data, _ = parse_payload(payload)
        raw_meta = data["metadata"]
        corpus_id = str(raw_meta["id"])
        rules = tuple(normalize_rules(data["rules"], corpus_id))
        metadata = CorpusMetadata(
            id=corpus_id,
            name=str(raw_meta["name"]),
            domain=str(raw_meta["domain"]),
            description=str(raw_meta.get("description") or ""),
            version=_optional_text(raw_meta.get("version")),
            country=_optional_text(raw_meta.get("country")),
            imported_at=datetime.now(timezone.utc).isoformat(),
            rule_count=len(rules),
        )
        corpus = Corpus(
            metadata=metadata,
            rules=rules,
            table_of_contents=normalize_toc(data.get("sommaire")),
        )

        with self._lock.write():
            replaced = corpus_id in self._corpora
            self._corpora[corpus_id] = corpus
            self._indexes[corpus_id] = build_index(rules)
            if self._active_id is None:
                self._active_id = corpus_id
            token_count = len(self._indexes[corpus_id])

        log.info(
            "Norme %s %s : %d règles, %d mots-clés indexés",
            corpus_id, "remplacée" if replaced else "importée", len(rules), token_count,
        )
        return ImportOutcome(success=True, corpus_id=corpus_id)

    def delete(self, corpus_id: CorpusId) -> bool:
        with self._lock.write():
            if corpus_id not in self._corpora:
                return False
            del self._corpora[corpus_id]
            del self._indexes[corpus_id]
            if self._active_id == corpus_id:
                self._active_id = next(iter(self._corpora), None)
            active = self._active_id
        log.info("Norme %s supprimée (active : %s)", corpus_id, active)
        return True

    # ------------------------------------------------------------------
    # Norme active
    # ------------------------------------------------------------------

    @property
    def active_corpus_id(self) -> CorpusId | None:
        with self._lock.read():
            return self._active_id

    def set_active(self, corpus_id: CorpusId | None) -> bool:
        """Active un corpus chargé (ou aucun avec None). False si l'id est inconnu."""
        with self._lock.write():
            if corpus_id is not None and corpus_id not in self._corpora:
                return False
            self._active_id = corpus_id
            return True

    # ------------------------------------------------------------------
    # Consultation
    # ------------------------------------------------------------------

    def list_corpora(self) -> list[CorpusMetadata]:
        with self._lock.read():
            return [c.metadata for c in self._corpora.values()]

    def has_corpus(self, corpus_id: CorpusId) -> bool:
        with self._lock.read():
            return corpus_id in self._corpora

    def get_corpus(self, corpus_id: CorpusId) -> Corpus | None:
        with self._lock.read():
            return self._corpora.get(corpus_id)

    def get_toc(self, corpus_id: CorpusId) -> list[TocNode]:
        corpus = self.get_corpus(corpus_id)
        return list(corpus.table_of_contents) if corpus else []

    def get_page(self, corpus_id: CorpusId, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> RulePage:
        """Page 1-based ; page hors bornes → règles vides, total inchangé."""
        page_size = max(1, page_size)
        with self._lock.read():
            corpus = self._corpora.get(corpus_id)
            if corpus is None:
                return RulePage(rules=[], total=0, page_count=0)
            total = len(corpus.rules)
            if page < 1:
                rules: list[Rule] = []
            else:
                start = (page - 1) * page_size
                rules = list(corpus.rules[start:start + page_size])
        return RulePage(rules=rules, total=total, page_count=math.ceil(total / page_size))

    def search(
        self,
        query: str,
        corpus_id: CorpusId | Iterable[CorpusId] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[SearchResult]:
        """
        Recherche classée dans un corpus, dans plusieurs (itérable d'ids, les
        ids inconnus sont ignorés) ou dans tous si corpus_id est None.
        Id inconnu ou requête vide → [].
        """
        normalized = normalize_query(query)
        if not normalized:
            return []
        with self._lock.read():
            if corpus_id is None:
                targets = list(self._corpora)
            elif isinstance(corpus_id, str):
                targets = [corpus_id] if corpus_id in self._corpora else []
            else:
                targets = [cid for cid in dict.fromkeys(corpus_id) if cid in self._corpora]
            results: list[SearchResult] = []
            for cid in targets:
                results.extend(search_corpus(self._corpora[cid], self._indexes[cid], normalized))
        return rank(results, limit)

    def get_rule_by_article(self, article: str, corpus_id: CorpusId | None = None) -> Rule | None:
        """Première règle dont le numéro d'article est exactement `article`."""
        for rule in self._rules_of(corpus_id):
            if rule.article_number == article:
                return rule
        return None

    def get_rules_by_title(self, title: str, corpus_id: CorpusId | None = None) -> list[Rule]:
        needle = title.lower()
        return [r for r in self._rules_of(corpus_id) if needle in r.title.lower()]

    def context_for_topic(self, topic: str, corpus_id: CorpusId | None = None) -> TopicContext:
        cid = corpus_id or self.active_corpus_id
        corpus = self.get_corpus(cid) if cid else None
        rules = [r.rule for r in self.search(topic, cid, CONTEXT_SEARCH_LIMIT)] if corpus else []
        if not rules:
            return TopicContext(
                relevant_rules=[],
                summary=f'Aucune règle normative trouvée pour le sujet "{topic}".',
            )
        titles = list(dict.fromkeys(r.title for r in rules))
        articles = [r.article_number for r in rules[:CONTEXT_ARTICLES]]
        summary = (
            f'Contexte normatif {corpus.name} pour "{topic}":\n\n'
            f"Sections concernées: {', '.join(titles)}\n"
            f"Articles clés: {', '.join(articles)}\n"
            f"{len(rules)} règle(s) identifiée(s)."
        )
        return TopicContext(relevant_rules=rules, summary=summary)

    def stats(self) -> StoreStats:
        with self._lock.read():
            corpora = [c.metadata for c in self._corpora.values()]
            total = sum(c.rule_count for c in self._corpora.values())
        return StoreStats(corpus_count=len(corpora), total_rule_count=total, corpora=corpora)

    def _rules_of(self, corpus_id: CorpusId | None) -> tuple[Rule, ...]:
        cid = corpus_id or self.active_corpus_id
        corpus = self.get_corpus(cid) if cid else None
        return corpus.rules if corpus else ()


def key_concepts_from_rules(rules: Iterable[Rule]) -> list[str]:
    """Termes techniques les plus fréquents dans le contenu des règles (max 10)."""
    counts: Counter[str] = Counter()
    for rule in rules:
        content = rule.content.lower()
        for term in RULE_TECHNICAL_TERMS:
            if term.lower() in content:
                counts[term] += 1
    return [term for term, _ in counts.most_common(MAX_KEY_CONCEPTS)]


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
