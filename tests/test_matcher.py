"""Unit tests for course.matcher (normative enrichment of sections)."""

from __future__ import annotations

from course import REFERENCES_MARKER, article_label, enrich_section, enrich_sections
from course.matcher import relevant_rules
from data_model import Section

NAMES = {"ns-01-001": "NS 01-001"}


def _rules(store):
    return store.get_corpus("ns-01-001").rules


class TestArticleLabel:
    def test_prefix_added_once(self):
        assert article_label("411.1") == "Art. 411.1"
        assert article_label("Art. 4") == "Art. 4"


class TestRelevance:
    def test_article_number_in_text(self, store):
        section = Section(id="s", title="Article 542", explanation="Voir le texte.")
        assert [r.id for r in relevant_rules(section, _rules(store))] == ["r3"]

    def test_shared_long_word(self, store):
        section = Section(id="s", title="Fondations", explanation="Le câble passe en fond de fouille.")
        assert [r.id for r in relevant_rules(section, _rules(store))] == ["r3"]

    def test_at_most_two(self, store):
        section = Section(
            id="s",
            title="Tout",
            explanation="coupure automatique, conducteur enterré, vérification initiale",
        )
        assert len(relevant_rules(section, _rules(store))) == 2


class TestEnrichSection:
    def test_references_and_warnings(self, store):
        section = Section(id="s", title="Article 411", explanation="Les contacts indirects et la coupure automatique.")
        enriched = enrich_section(section, _rules(store), NAMES)

        assert enriched.explanation.startswith("Les contacts indirects et la coupure automatique." + REFERENCES_MARKER)
        assert "Art. 411 (NS 01-001, p.45): Les mesures de protection" in enriched.explanation
        assert "Art. 411.1 (NS 01-001, p.46): " in enriched.explanation
        assert enriched.warnings[0].startswith("Art. 411 : Les mesures de protection")
        assert all(w.endswith("...") for w in enriched.warnings)

    def test_entries_separated_by_blank_line(self, store):
        section = Section(id="s", title="Article 411", explanation="coupure")
        enriched = enrich_section(section, _rules(store), NAMES)
        references = enriched.explanation.split(REFERENCES_MARKER, 1)[1]
        assert len(references.split("\n\n")) == 2

    def test_excerpt_lengths(self, store):
        rule = _rules(store)[0]
        section = Section(id="s", title="Article 411", explanation="x")
        enriched = enrich_section(section, [rule], NAMES)
        assert enriched.explanation.endswith(rule.content[:150] + "...")
        assert enriched.warnings == [f"Art. 411 : {rule.content[:100]}..."]

    def test_no_match_returns_same_section(self, store):
        section = Section(id="s", title="Cuisine", explanation="Recettes de tarte aux pommes.")
        assert enrich_section(section, _rules(store), NAMES) is section

    def test_input_untouched(self, store):
        section = Section(id="s", title="Article 542", explanation="texte", warnings=["w"])
        enrich_section(section, _rules(store), NAMES)
        assert section.explanation == "texte"
        assert section.warnings == ["w"]

    def test_idempotent(self, store):
        section = Section(id="s", title="Article 411", explanation="texte")
        once = enrich_section(section, _rules(store), NAMES)
        twice = enrich_section(once, _rules(store), NAMES)
        assert twice == once
        assert twice.explanation.count(REFERENCES_MARKER) == 1

    def test_corpus_id_when_name_unknown(self, store):
        section = Section(id="s", title="Article 542", explanation="x")
        enriched = enrich_section(section, _rules(store))
        assert "(ns-01-001, p.120)" in enriched.explanation

    def test_enrich_sections(self, store):
        sections = [
            Section(id="a", title="Article 542", explanation="x"),
            Section(id="b", title="Cuisine", explanation="Tarte."),
        ]
        result = enrich_sections(sections, _rules(store), NAMES)
        assert REFERENCES_MARKER in result[0].explanation
        assert result[1] is sections[1]
