"""
norms/index.py — index inversé mot-clé → identifiants de règles.

InvertedIndex est une donnée dérivée d'un corpus : il est toujours reconstruit
en entier (build_index) à l'import ou au remplacement d'une norme, jamais mis à
jour partiellement. Les ensembles d'identifiants conservent l'ordre des règles
dans le corpus, ce qui rend l'ordre de découverte de la recherche déterministe.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from data_model import Rule, RuleId

# Mots vides bilingues exclus de l'index
STOP_WORDS: frozenset[str] = frozenset({
    "le", "la", "les", "un", "une", "des", "du", "de", "et", "ou", "est",
    "sont", "être", "avoir", "dans", "pour", "par", "avec", "sur", "que",
    "qui", "dont", "où", "ce", "cette", "ces", "il", "elle", "ils", "elles",
    "the", "a", "an", "and", "or", "is", "are", "in", "on", "for", "with",
})

# Longueur maximale (inclusive) des jetons ignorés
MIN_TOKEN_LENGTH = 2

_NON_WORD_RE = re.compile(r"[^a-zàâäéèêëïîôùûüÿç0-9]", re.IGNORECASE)


def tokenize(text: str) -> list[str]:
    """
    Jetons indexables d'un texte : minuscules, découpage sur les blancs,
    suppression des caractères non alphanumériques (accents conservés),
    jetons de plus de 2 caractères hors mots vides. Les doublons sont gardés.
    """
    tokens = (_NON_WORD_RE.sub("", w) for w in text.lower().split())
    return [t for t in tokens if len(t) > MIN_TOKEN_LENGTH and t not in STOP_WORDS]


class InvertedIndex:
    """
    Index inversé d'un corpus.

    _buckets: jeton → identifiants de règles (dict utilisé comme ensemble ordonné)
    """

    def __init__(self) -> None:
        self._buckets: dict[str, dict[RuleId, None]] = {}

    def add(self, token: str, rule_id: RuleId) -> None:
        self._buckets.setdefault(token, {})[rule_id] = None

    def lookup(self, token: str) -> tuple[RuleId, ...]:
        """Identifiants associés au jeton (ordre du corpus) ; () si inconnu."""
        bucket = self._buckets.get(token)
        return tuple(bucket) if bucket else ()

    def tokens(self) -> Iterable[str]:
        return self._buckets.keys()

    def rule_ids(self) -> set[RuleId]:
        """Tous les identifiants présents dans au moins un seau."""
        ids: set[RuleId] = set()
        for bucket in self._buckets.values():
            ids.update(bucket)
        return ids

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, token: object) -> bool:
        return token in self._buckets


def build_index(rules: Iterable[Rule]) -> InvertedIndex:
    """Reconstruction complète : titre + contenu + mots-clés explicites de chaque règle."""
    index = InvertedIndex()
    for rule in rules:
        words = tokenize(f"{rule.title} {rule.content}")
        words.extend(k.lower() for k in rule.keywords)
        for word in words:
            index.add(word, rule.id)
    return index
