"""Unit tests for segmenter.features."""

from __future__ import annotations

from data_model import Difficulty, Language
from segmenter import analyze_metadata, extract_concepts, extract_keywords


class TestExtractConcepts:
    def test_ranked_by_frequency(self):
        text = "protection installation installation courant protection installation"
        assert extract_concepts(text) == ["Installation", "Protection", "Courant"]

    def test_ties_keep_first_seen_order(self):
        assert extract_concepts("sécurité électrique") == ["Sécurité", "Électrique"]

    def test_short_words_and_stop_words_dropped(self):
        text = "également plusieurs toujours câble fil conducteur"
        assert extract_concepts(text) == ["Conducteur"]

    def test_non_letters_split_words(self):
        assert extract_concepts("disjoncteur-différentiel, 2024") == ["Disjoncteur", "Différentiel"]

    def test_at_most_fifteen(self):
        words = [f"concept{chr(ord('a') + i)}xyz" for i in range(20)]
        assert len(extract_concepts(" ".join(words))) == 15


class TestExtractKeywords:
    def test_list_order_and_case(self):
        assert extract_keywords("La NORME impose la SÉCURITÉ") == ["sécurité", "norme"]

    def test_substring_match(self):
        assert "risque" in extract_keywords("les risques électriques")

    def test_nothing_found(self):
        assert extract_keywords("bonjour") == []


class TestAnalyzeMetadata:
    def test_blank_text(self):
        meta = analyze_metadata("   ")
        assert meta.word_count == 0
        assert meta.paragraph_count == 0
        assert meta.estimated_reading_minutes == 0
        assert meta.language == Language.FR
        assert meta.difficulty == Difficulty.BEGINNER

    def test_paragraphs_and_toc(self):
        meta = analyze_metadata("Sommaire\n\nPremier paragraphe.\n\n  \n\nSecond paragraphe.")
        assert meta.paragraph_count == 3
        assert meta.has_toc

    def test_reading_time_rounds_up(self):
        assert analyze_metadata("mot " * 251).estimated_reading_minutes == 2

    def test_language_english(self):
        meta = analyze_metadata("The breaker is in the panel and the cable is on the wall")
        assert meta.language == Language.EN

    def test_language_tie_is_french(self):
        assert analyze_metadata("le the").language == Language.FR

    def test_advanced_by_word_length(self):
        meta = analyze_metadata("anticonstitutionnellement électrification")
        assert meta.difficulty == Difficulty.ADVANCED

    def test_intermediate(self):
        text = "sécurité procédure norme formation gestion qualité"
        assert analyze_metadata(text).difficulty == Difficulty.INTERMEDIATE
