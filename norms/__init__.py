"""
norms — magasin de normes, index inversé et recherche classée.

Interface publique :
    CorpusStore              — import / suppression / pagination / recherche
    key_concepts_from_rules  — termes techniques dominants d'un ensemble de règles
    build_index, tokenize    — index inversé (reconstruction complète)
    load_payload_file, import_file, import_directory, PayloadParseError
    ReadWriteLock

Utilisation typique :
    from norms import CorpusStore

    store = CorpusStore()
    outcome = store.import_corpus(payload)
    for hit in store.search("411", outcome.corpus_id):
        print(hit.score, hit.rule.article_number)
"""

from .index import STOP_WORDS, InvertedIndex, build_index, tokenize
from .locking import ReadWriteLock
from .search import normalize_query, query_tokens, rank, search_corpus
from .store import (
    DEFAULT_PAGE_SIZE,
    CorpusStore,
    StoreStats,
    TopicContext,
    key_concepts_from_rules,
)
from .loader import PayloadParseError, import_directory, import_file, load_payload_file

__all__ = [
    "STOP_WORDS",
    "InvertedIndex",
    "build_index",
    "tokenize",
    "ReadWriteLock",
    "normalize_query",
    "query_tokens",
    "rank",
    "search_corpus",
    "DEFAULT_PAGE_SIZE",
    "CorpusStore",
    "StoreStats",
    "TopicContext",
    "key_concepts_from_rules",
    "PayloadParseError",
    "import_directory",
    "import_file",
    "load_payload_file",
]
