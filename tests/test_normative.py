"""Unit tests for course.normative (five-chapter normative courses)."""

from __future__ import annotations

from course import (
    PREDEFINED_THEMES,
    NormativeCourseRequest,
    article_sort_key,
    collect_relevant_rules,
    generate_normative_course,
    generate_normative_quiz,
    resolve_theme,
)
from data_model import Audience, Rule
from norms import CorpusStore


def _rule(article: str, content: str, rule_id: str | None = None) -> Rule:
    return Rule(
        id=rule_id or f"r-{article}",
        title="Titre",
        article_number=article,
        content=content,
        page=1,
        corpus_id="c",
    )


class TestThemes:
    def test_by_key(self):
        assert resolve_theme("surintensites") is PREDEFINED_THEMES["surintensites"]

    def test_by_label_fragment(self):
        assert resolve_theme("Locaux humides") is PREDEFINED_THEMES["locaux-humides"]

    def test_unknown(self):
        assert resolve_theme("astronomie") is None
        assert resolve_theme(None) is None


class TestArticleSortKey:
    def test_quasi_numeric(self):
        articles = ["412", "411.10", "411.2", "411", "Art. 3"]
        assert sorted(articles, key=article_sort_key) == ["411", "411.2", "411.10", "412", "Art. 3"]


class TestCollectRules:
    def test_by_prefix(self, store):
        rules = collect_relevant_rules(store, NormativeCourseRequest(article_prefix="411"))
        assert [r.id for r in rules] == ["r1", "r2"]

    def test_by_theme_keywords(self, store):
        rules = collect_relevant_rules(store, NormativeCourseRequest(theme="mise-terre"))
        assert "r3" in [r.id for r in rules]

    def test_free_text_theme(self, store):
        rules = collect_relevant_rules(store, NormativeCourseRequest(theme="fouille"))
        assert [r.id for r in rules] == ["r3"]

    def test_sorted_and_capped(self):
        store = CorpusStore()
        store.import_corpus({
            "metadata": {"id": "big", "name": "Big", "domain": "d"},
            "rules": [{"article": f"411.{i}", "content": "texte"} for i in range(40, 0, -1)],
        })
        rules = collect_relevant_rules(store, NormativeCourseRequest(article_prefix="411", corpus_id="big"))
        assert len(rules) == 30
        assert rules[0].article_number == "411.1"
        assert rules[-1].article_number == "411.30"

    def test_unknown_corpus(self, store):
        assert collect_relevant_rules(store, NormativeCourseRequest(theme="x", corpus_id="inconnue")) == []


class TestNormativeQuiz:
    def test_rule_questions_then_generic(self):
        rules = [
            _rule("1", "Les conducteurs de protection doivent être identifiés par la double coloration vert-jaune."),
            _rule("2", "Court. " + "x" * 60),
        ]
        quiz = generate_normative_quiz(rules, 4, "NS 01-001")
        assert [q.id for q in quiz] == ["qcm-norm-0", "qcm-generic-1", "qcm-generic-2", "qcm-generic-3"]
        assert quiz[0].options[0].startswith("Les conducteurs de protection")
        assert quiz[1].options[0] == "30 mA"
        assert all(len(q.options) == 4 and q.correct_answer_index == 0 for q in quiz)

    def test_generic_question_names_the_norm(self):
        (question,) = generate_normative_quiz([], 1, "NS 01-001")
        assert question.id == "qcm-generic-0"
        assert "NS 01-001" in question.prompt

    def test_generic_padding_capped_at_ten(self):
        assert len(generate_normative_quiz([], 15, "X")) == 10

    def test_rule_questions_beyond_ten(self):
        content = "Chaque circuit doit être protégé par un dispositif adapté. Détails en annexe."
        rules = [_rule(str(n), content) for n in range(1, 13)]
        quiz = generate_normative_quiz(rules, 12, "X")
        assert len(quiz) == 12
        assert all(q.id.startswith("qcm-norm-") for q in quiz)

    def test_long_first_sentence_truncated(self):
        quiz = generate_normative_quiz([_rule("1", "a" * 200)], 1, "X")
        assert quiz[0].options[0] == "a" * 150 + "..."


class TestGenerateNormativeCourse:
    def test_chapters(self, store):
        result = generate_normative_course(store, NormativeCourseRequest(theme="chocs-electriques"))
        sections = result.course.content.sections
        key_rules = [s for s in sections if s.id.startswith("section-rule-")]
        assert sections[0].id == "section-intro"
        assert sections[1].id == "section-normes"
        assert sections[-2].id == "section-pratique"
        assert sections[-1].id == "section-synthese"
        assert 1 <= len(key_rules) <= 8
        assert result.stats.sections_created == len(sections)
        assert result.course.content.conclusion == sections[-1].explanation

    def test_title_and_modules(self, store):
        result = generate_normative_course(store, NormativeCourseRequest(theme="chocs-electriques"))
        assert result.course.title == "Formation : Protection contre les chocs électriques"
        assert result.course.id.startswith("norm-course-")
        assert [m.id for m in result.course.modules] == [
            "mod-intro", "mod-normes", "mod-regles", "mod-pratique", "mod-synthese",
        ]
        assert "Norme NS 01-001 - Version complète" in result.course.content.resources

    def test_prefix_title(self, store):
        result = generate_normative_course(store, NormativeCourseRequest(article_prefix="411"))
        assert result.course.title == "Formation NS 01-001 - Articles 411"
        assert [r.id for r in result.rules_used] == ["r1", "r2"]

    def test_audience_formatting(self, store):
        request = NormativeCourseRequest(article_prefix="411", audience=Audience.ENGINEER)
        sections = generate_normative_course(store, request).course.content.sections
        rule_section = next(s for s in sections if s.id == "section-rule-0")
        assert "## Explication ingénieur" in rule_section.explanation
        assert "Pour les ingénieurs" in sections[0].explanation

    def test_beginner_simplifies(self, store):
        request = NormativeCourseRequest(article_prefix="542", audience=Audience.BEGINNER)
        sections = generate_normative_course(store, request).course.content.sections
        rule_section = next(s for s in sections if s.id == "section-rule-0")
        assert "Cette règle signifie que La prise de terre il faut réalisée" in rule_section.explanation

    def test_selected_rules_bypass_collection(self, store):
        r3 = store.get_rule_by_article("542")
        result = generate_normative_course(store, NormativeCourseRequest(selected_rules=[r3], theme="chocs-electriques"))
        assert result.rules_used == [r3]

    def test_quiz_options(self, store):
        result = generate_normative_course(store, NormativeCourseRequest(article_prefix="411", qcm_count=5))
        quiz = result.course.content.quiz
        assert len(quiz) == 5
        assert quiz[0].id == "qcm-norm-0"
        assert result.stats.quiz_generated == 5

    def test_without_qcm(self, store):
        result = generate_normative_course(store, NormativeCourseRequest(article_prefix="411", include_qcm=False))
        assert result.course.content.quiz == []

    def test_empty_store(self):
        result = generate_normative_course(CorpusStore(), NormativeCourseRequest(theme="verification"))
        assert result.rules_used == []
        assert len(result.course.content.sections) == 4
