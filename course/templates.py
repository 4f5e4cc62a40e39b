"""
course/templates.py — gabarits markdown fixes du cours synthétisé.

Le style (CourseStyle) ne change que la formulation, jamais la structure :
mêmes rubriques, mêmes listes, dans le même ordre.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from data_model import Block, CourseStyle, Difficulty, ParsedDocument, Rule

DIFFICULTY_LABELS: dict[Difficulty, str] = {
    Difficulty.BEGINNER:     "Débutant",
    Difficulty.INTERMEDIATE: "Intermédiaire",
    Difficulty.ADVANCED:     "Avancé",
}

# Formulations propres à chaque style : (accueil, phrase d'ouverture, objectifs, clôture)
_INTRO_WORDING: dict[CourseStyle, tuple[str, str, str, str]] = {
    CourseStyle.STRUCTURED: (
        "## Bienvenue dans cette formation",
        "Cette formation professionnelle a été créée à partir de {n} document(s) source(s) "
        "pour vous permettre d'acquérir les compétences essentielles.",
        "À l'issue de cette formation, vous serez capable de :",
        "Naviguez dans les sections ci-dessous pour découvrir le contenu de la formation.",
    ),
    CourseStyle.CONVERSATIONAL: (
        "## Bienvenue !",
        "Nous avons préparé ce parcours à partir de {n} document(s) pour vous aider, "
        "pas à pas, à acquérir les compétences essentielles.",
        "Ensemble, nous allons apprendre à :",
        "Prenez votre temps et parcourez les sections ci-dessous dans l'ordre qui vous convient.",
    ),
    CourseStyle.TECHNICAL: (
        "## Présentation de la formation",
        "Contenu établi à partir de {n} document(s) source(s). "
        "Périmètre : compétences techniques essentielles.",
        "Compétences visées :",
        "Les sections suivantes détaillent le contenu technique de la formation.",
    ),
}

_CONCLUSION_WORDING: dict[CourseStyle, tuple[str, str]] = {
    CourseStyle.STRUCTURED: (
        "Vous avez maintenant parcouru l'ensemble du contenu de cette formation.",
        "Les concepts clés abordés dans cette formation :",
    ),
    CourseStyle.CONVERSATIONAL: (
        "Bravo, vous êtes arrivé au bout de ce parcours !",
        "Voici ce que nous avons vu ensemble :",
    ),
    CourseStyle.TECHNICAL: (
        "Fin du contenu de la formation.",
        "Concepts traités :",
    ),
}

# Catalogue des compétences : (motif recherché dans le corps du bloc, compétence)
SKILL_CATALOGUE: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"savoir|connaître", re.IGNORECASE),         "Connaître et maîtriser les concepts clés"),
    (re.compile(r"appliquer|mettre en œuvre", re.IGNORECASE), "Appliquer les procédures en situation réelle"),
    (re.compile(r"analyser|évaluer", re.IGNORECASE),          "Analyser et évaluer les situations"),
    (re.compile(r"créer|concevoir", re.IGNORECASE),           "Concevoir des solutions adaptées"),
    (re.compile(r"identifier|reconnaître", re.IGNORECASE),    "Identifier les éléments critiques"),
    (re.compile(r"gérer|organiser", re.IGNORECASE),           "Gérer et organiser efficacement"),
)

MAX_SKILLS = 4

DEFAULT_SKILLS = ("Comprendre les concepts fondamentaux", "Appliquer les principes de base")

FIXED_RESOURCES_HEAD = ("Documentation technique approfondie", "Guide des bonnes pratiques")
FIXED_RESOURCES_TAIL = ("Support de cours téléchargeable", "FAQ et assistance")


def skills_for(block: Block) -> list[str]:
    body = block.body.lower()
    skills = [skill for pattern, skill in SKILL_CATALOGUE if pattern.search(body)][:MAX_SKILLS]
    return skills or [f"Maîtriser les fondamentaux de {block.title.lower()}"]


def introduction(
    documents: Sequence[ParsedDocument],
    concepts: Sequence[str],
    keywords: Sequence[str],
    rule_count: int = 0,
    style: CourseStyle = CourseStyle.STRUCTURED,
) -> str:
    welcome, opening, goals, closing = _INTRO_WORDING[style]
    reading = sum(d.metadata.estimated_reading_minutes for d in documents)
    difficulty = documents[0].metadata.difficulty if documents else Difficulty.INTERMEDIATE

    lines = [
        welcome,
        "",
        opening.format(n=len(documents)),
        "",
        "### Objectifs pédagogiques",
        "",
        goals,
        *(f"- Maîtriser les concepts liés à **{c}**" for c in concepts[:5]),
        "",
        "### Durée estimée",
        "",
        f"- **Temps de lecture** : {reading} minutes",
        f"- **Niveau** : {DIFFICULTY_LABELS[difficulty]}",
    ]
    if rule_count > 0:
        lines.append(f"- **Références normatives** : {rule_count} articles intégrés")
    lines += [
        "",
        "### Mots-clés",
        "",
        " • ".join(f"`{k}`" for k in keywords[:8]),
        "",
        "---",
        "",
        closing,
    ]
    return "\n".join(lines)


def conclusion(concepts: Sequence[str], style: CourseStyle = CourseStyle.STRUCTURED) -> str:
    opening, recap = _CONCLUSION_WORDING[style]
    lines = [
        "## Conclusion",
        "",
        opening,
        "",
        "### Récapitulatif des acquis",
        "",
        recap,
        *(f"- {c}" for c in concepts[:6]),
        "",
        "### Prochaines étapes",
        "",
        "1. **Réviser** les points essentiels de chaque section",
        "2. **Passer le QCM** pour valider vos acquis",
        "3. **Appliquer** les connaissances en situation réelle",
        "4. **Consulter** les ressources complémentaires",
        "",
        "### Certification",
        "",
        "Une fois le QCM validé avec un score minimum de 80%, "
        "vous pourrez télécharger votre attestation de formation.",
        "",
        "---",
        "",
        "*Formation générée automatiquement par Professeur KEBE*",
    ]
    return "\n".join(lines)


def resources(
    keywords: Sequence[str],
    rules: Sequence[Rule] = (),
    corpus_names: Sequence[str] = (),
) -> list[str]:
    items = list(FIXED_RESOURCES_HEAD)
    items += [f"Référentiel {k}" for k in keywords[:3]]
    if rules:
        items += [f"Norme {name}" for name in corpus_names]
        items.append(f"{len(rules)} articles normatifs référencés")
    items += FIXED_RESOURCES_TAIL
    return items


def course_title(documents: Sequence[ParsedDocument]) -> str:
    if len(documents) == 1:
        return f"Formation : {documents[0].title}"
    if documents:
        common = [c for c in documents[0].concepts if all(c in d.concepts for d in documents)]
        if common:
            return f"Formation {common[0]} - Programme complet"
    return f"Formation professionnelle complète ({len(documents)} modules)"
