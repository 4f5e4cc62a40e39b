"""
Énumérations partagées par les documents, les normes et les cours.

Les valeurs sont celles utilisées dans le JSON (paramètres de génération,
export du cours, résultats de recherche).
"""

from __future__ import annotations

from enum import StrEnum


class Language(StrEnum):
    """Langue du document, devinée par comptage de mots-outils."""
    FR = "fr"
    EN = "en"


class Difficulty(StrEnum):
    """Niveau de difficulté estimé d'un document."""
    BEGINNER     = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED     = "advanced"


class MatchType(StrEnum):
    """Type de correspondance d'un résultat de recherche, du plus fort au plus faible."""
    EXACT   = "exact"
    PARTIAL = "partial"
    KEYWORD = "keyword"


class CourseStyle(StrEnum):
    """Style du cours — n'influence que la formulation des gabarits."""
    STRUCTURED     = "structured"
    CONVERSATIONAL = "conversational"
    TECHNICAL      = "technical"


class Audience(StrEnum):
    """Public visé par un cours normatif."""
    BEGINNER   = "beginner"
    TECHNICIAN = "technician"
    ENGINEER   = "engineer"
