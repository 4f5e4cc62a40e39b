"""
data_model — structures de données du moteur kebe.

Utilisation :
  from data_model import Block, ParsedDocument, Rule, Corpus, Course, ...

Modules :
  common    — Language, Difficulty, MatchType, CourseStyle, Audience
  documents — Block, DocumentMetadata, ParsedDocument
  rules     — Rule, TocNode, CorpusMetadata, Corpus, SearchResult, RulePage
  course    — Section, Question, Module, CourseContent, Course,
              GenerationSettings, GenerationStats, GenerationResult
"""

from .common import (
    Language,
    Difficulty,
    MatchType,
    CourseStyle,
    Audience,
)
from .documents import (
    Block,
    DocumentMetadata,
    ParsedDocument,
)
from .rules import (
    RuleId,
    CorpusId,
    Rule,
    TocNode,
    CorpusMetadata,
    Corpus,
    SearchResult,
    RulePage,
)
from .course import (
    QCM_MIN_QUESTIONS,
    QCM_MAX_QUESTIONS,
    Section,
    Question,
    Module,
    CourseContent,
    Course,
    GenerationSettings,
    GenerationStats,
    GenerationResult,
)

__all__ = [
    # common
    "Language",
    "Difficulty",
    "MatchType",
    "CourseStyle",
    "Audience",
    # documents
    "Block",
    "DocumentMetadata",
    "ParsedDocument",
    # rules
    "RuleId",
    "CorpusId",
    "Rule",
    "TocNode",
    "CorpusMetadata",
    "Corpus",
    "SearchResult",
    "RulePage",
    # course
    "QCM_MIN_QUESTIONS",
    "QCM_MAX_QUESTIONS",
    "Section",
    "Question",
    "Module",
    "CourseContent",
    "Course",
    "GenerationSettings",
    "GenerationStats",
    "GenerationResult",
]
