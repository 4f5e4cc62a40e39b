"""
course — synthèse déterministe de cours, enrichissement normatif, QCM.

Interface publique :
    synthesize                 — documents segmentés → GenerationResult
    enrich_section(s)          — ajout des références normatives (idempotent)
    document_quiz              — QCM d'un cours documentaire
    generate_normative_course  — cours normatif en cinq chapitres
    generate_normative_quiz    — QCM normatif
    PREDEFINED_THEMES, NormativeCourseRequest, NormativeCourseResult

Utilisation typique :
    from course import synthesize
    from segmenter import segment

    result = synthesize([segment(text, "guide.md")], store=store)
    print(result.course.title, len(result.course.content.quiz))
"""

from .matcher import REFERENCES_MARKER, article_label, enrich_section, enrich_sections
from .quiz import document_quiz, rule_questions
from .synthesizer import (
    build_modules,
    build_sections,
    extract_examples,
    extract_warnings,
    format_explanation,
    synthesize,
)
from .normative import (
    PREDEFINED_THEMES,
    NormativeCourseRequest,
    NormativeCourseResult,
    NormativeStats,
    Theme,
    article_sort_key,
    collect_relevant_rules,
    generate_normative_course,
    generate_normative_quiz,
    resolve_theme,
    select_key_rules,
)

__all__ = [
    "REFERENCES_MARKER",
    "article_label",
    "enrich_section",
    "enrich_sections",
    "document_quiz",
    "rule_questions",
    "build_modules",
    "build_sections",
    "extract_examples",
    "extract_warnings",
    "format_explanation",
    "synthesize",
    "PREDEFINED_THEMES",
    "NormativeCourseRequest",
    "NormativeCourseResult",
    "NormativeStats",
    "Theme",
    "article_sort_key",
    "collect_relevant_rules",
    "generate_normative_course",
    "generate_normative_quiz",
    "resolve_theme",
    "select_key_rules",
]
