"""Unit tests for norms.index and norms.search."""

from __future__ import annotations

import pytest

from data_model import MatchType
from norms import build_index, rank, tokenize


class TestTokenize:
    def test_strips_punctuation_and_stop_words(self):
        assert tokenize("Le disjoncteur, la protection!") == ["disjoncteur", "protection"]

    def test_drops_short_tokens_keeps_digits(self):
        assert tokenize("PE de 30 mA art 411") == ["art", "411"]

    def test_keeps_duplicates(self):
        assert tokenize("terre terre") == ["terre", "terre"]


class TestBuildIndex:
    def test_every_rule_is_indexed(self, store):
        corpus = store.get_corpus("ns-01-001")
        index = build_index(corpus.rules)
        assert index.rule_ids() == {r.id for r in corpus.rules}

    def test_explicit_keywords_lower_cased(self, store):
        index = build_index(store.get_corpus("ns-01-001").rules)
        assert index.lookup("ddr") == ("r1",)
        assert "DDR" not in index

    def test_buckets_are_unique_and_ordered(self, store):
        index = build_index(store.get_corpus("ns-01-001").rules)
        assert index.lookup("coupure") == ("r1", "r2")
        assert index.lookup("inconnu") == ()


class TestSearch:
    def test_exact_article_first(self, store):
        results = store.search("411", "ns-01-001")
        assert results[0].rule.article_number == "411"
        assert results[0].score == 100
        assert results[0].match_type == MatchType.EXACT

    def test_exact_never_below_other_matches(self, store):
        results = store.search("411")
        exact = [i for i, r in enumerate(results) if r.match_type == MatchType.EXACT]
        other = [i for i, r in enumerate(results) if r.match_type != MatchType.EXACT]
        assert exact and other
        assert max(exact) < min(other)

    def test_partial_score_uses_position(self, store):
        query = "coupure automatique"
        results = store.search(query, "ns-01-001")
        by_id = {r.rule.id: r for r in results}
        rule = by_id["r1"].rule
        position = f"{rule.title} {rule.content}".lower().find(query)
        assert by_id["r1"].match_type == MatchType.PARTIAL
        assert by_id["r1"].score == pytest.approx(80 - 0.1 * position)

    def test_partial_query_is_trimmed_and_lower_cased(self, store):
        results = store.search("  MISE À LA TERRE  ", "ns-01-001")
        assert results[0].rule.id == "r3"
        assert results[0].score == pytest.approx(80)

    def test_keyword_score(self, store):
        results = store.search("terre fouille inexistant", "ns-01-001")
        assert len(results) == 1
        assert results[0].rule.id == "r3"
        assert results[0].match_type == MatchType.KEYWORD
        assert results[0].score == pytest.approx(2 / 3 * 60)

    def test_results_are_unique(self, store, second_payload):
        store.import_corpus(second_payload)
        results = store.search("411")
        pairs = [(r.rule.id, r.corpus_id) for r in results]
        assert len(pairs) == len(set(pairs))

    def test_cross_corpus_merge(self, store, second_payload):
        store.import_corpus(second_payload)
        results = store.search("411")
        exact = [(r.corpus_id, r.rule.id) for r in results if r.match_type == MatchType.EXACT]
        assert exact == [("ns-01-001", "r1"), ("ns-02", "a1")]

    def test_several_corpora(self, store, second_payload):
        store.import_corpus(second_payload)
        results = store.search("411", ["ns-02", "inconnue"])
        assert {r.corpus_id for r in results} == {"ns-02"}
        both = store.search("411", ["ns-01-001", "ns-02"])
        assert {r.corpus_id for r in both} == {"ns-01-001", "ns-02"}

    def test_limit(self, store):
        assert len(store.search("protection", "ns-01-001", limit=1)) == 1

    def test_empty_query(self, store):
        assert store.search("   ", "ns-01-001") == []

    def test_unknown_corpus(self, store):
        assert store.search("411", "inconnue") == []


class TestRank:
    def test_stable_for_equal_scores(self, store):
        results = store.search("protection", "ns-01-001")
        ranked = rank(list(reversed(results)) + results, limit=100)
        scores = [r.score for r in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_negative_limit(self, store):
        assert rank(store.search("411"), limit=-1) == []
