"""
norms/search.py — recherche classée dans un corpus indexé.

Trois passes par corpus, dans cet ordre ; une règle trouvée par une passe
n'est plus considérée par les suivantes :

  exact    — article_number.lower() == requête                  → 100
  partial  — requête contenue dans (titre + " " + contenu)       → 80 - 0.1 × position
  keyword  — jetons de la requête trouvés dans l'index inversé   → hits / nb_jetons × 60

Le score partiel conserve la position brute : une occurrence lointaine peut
donner un score négatif, qui reste classé après les autres.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from data_model import Corpus, MatchType, Rule, RuleId, SearchResult

from .index import InvertedIndex

EXACT_SCORE = 100.0
PARTIAL_BASE_SCORE = 80.0
PARTIAL_POSITION_PENALTY = 0.1
KEYWORD_SCORE_SCALE = 60.0

DEFAULT_LIMIT = 20


def normalize_query(query: str) -> str:
    return query.lower().strip()


def query_tokens(query: str) -> list[str]:
    """Jetons de la requête : découpage sur les blancs, longueur > 2, doublons gardés."""
    return [w for w in query.split() if len(w) > 2]


def search_corpus(corpus: Corpus, index: InvertedIndex, query: str) -> list[SearchResult]:
    """
    Résultats d'un seul corpus, dans l'ordre de découverte (non triés).

    `query` doit déjà être normalisée (normalize_query).
    """
    if not query:
        return []

    found: dict[RuleId, SearchResult] = {}

    def record(rule: Rule, score: float, match_type: MatchType) -> None:
        found[rule.id] = SearchResult(
            rule=rule, score=score, match_type=match_type, corpus_id=corpus.id,
        )

    # exact
    for rule in corpus.rules:
        if rule.id not in found and rule.article_number.lower() == query:
            record(rule, EXACT_SCORE, MatchType.EXACT)

    # partial
    for rule in corpus.rules:
        if rule.id in found:
            continue
        haystack = f"{rule.title} {rule.content}".lower()
        position = haystack.find(query)
        if position >= 0:
            record(rule, PARTIAL_BASE_SCORE - position * PARTIAL_POSITION_PENALTY, MatchType.PARTIAL)

    # keyword
    tokens = query_tokens(query)
    if tokens:
        hits: Counter[RuleId] = Counter()
        for token in tokens:
            hits.update(index.lookup(token))
        by_id = {rule.id: rule for rule in corpus.rules}
        for rule_id, count in hits.items():
            rule = by_id.get(rule_id)
            if rule is None or rule_id in found:
                continue
            record(rule, count / len(tokens) * KEYWORD_SCORE_SCALE, MatchType.KEYWORD)

    return list(found.values())


def rank(results: Iterable[SearchResult], limit: int = DEFAULT_LIMIT) -> list[SearchResult]:
    """Tri stable par score décroissant puis troncature à `limit`."""
    ordered = sorted(results, key=lambda r: r.score, reverse=True)
    return ordered[:max(0, limit)]
