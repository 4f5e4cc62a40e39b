"""
data_model/course.py — objets de sortie de la synthèse de cours.

Course, CourseContent, Section, Question et Module sont des valeurs pures :
la propriété passe à l'appelant (UI, exporteurs, persistance) au retour.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .common import CourseStyle

# Bornes de GenerationSettings.qcm_question_count
QCM_MIN_QUESTIONS = 5
QCM_MAX_QUESTIONS = 20


@dataclass(slots=True)
class Section:
    id: str
    title: str
    explanation: str
    examples: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Question:
    """
    Question à choix multiple.

    - options:              exactement 4 propositions
    - correct_answer_index: indice de la bonne réponse (0..3)
    """
    id: str
    prompt: str
    options: list[str]
    correct_answer_index: int
    explanation: str


@dataclass(slots=True)
class Module:
    id: str
    title: str
    prerequisites: list[str]
    knowledge: list[str]
    skills: list[str]
    duration_hours: int


@dataclass(slots=True)
class CourseContent:
    introduction: str
    sections: list[Section]
    conclusion: str
    quiz: list[Question]
    resources: list[str]


@dataclass(slots=True)
class Course:
    """
    Cours complet.

    - documents:    noms des documents sources
    - generated_at: horodatage de génération (seule source de non-déterminisme)
    """
    id: str
    title: str
    modules: list[Module]
    documents: list[str]
    content: CourseContent
    generated_at: datetime


@dataclass(slots=True)
class GenerationSettings:
    """Configuration fournie par l'appelant pour synthesize()."""
    include_qcm: bool = True
    include_introduction: bool = True
    include_conclusion: bool = True
    add_examples: bool = True
    add_warnings: bool = True
    qcm_question_count: int = 10
    course_style: CourseStyle = CourseStyle.STRUCTURED


@dataclass(slots=True)
class GenerationStats:
    documents_processed: int
    sections_created: int
    quiz_generated: int
    processing_time_ms: int


@dataclass(slots=True)
class GenerationResult:
    """
    Résultat de synthesize().

    - warnings:        remarques non bloquantes (paramètres corrigés, documents vides)
    - norm_rules_used: nombre de règles intégrées (fournies ou trouvées dans la norme active)
    """
    course: Course
    warnings: list[str]
    norm_rules_used: int
    stats: GenerationStats
