"""
course/matcher.py — enrichissement des sections par les règles normatives.

Une règle est pertinente pour une section si le texte (titre + explication,
en minuscules) contient son numéro d'article, ou l'un des mots de plus de
5 caractères de son contenu. Au plus MAX_RULES_PER_SECTION règles par section.

L'enrichissement est idempotent : une section portant déjà le marqueur
REFERENCES_MARKER est retournée telle quelle.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from data_model import CorpusId, Rule, Section

MAX_RULES_PER_SECTION = 2

REFERENCES_HEADING = "**Références normatives :**"
REFERENCES_MARKER = f"\n\n{REFERENCES_HEADING}\n"

REFERENCE_EXCERPT = 150
WARNING_EXCERPT = 100

# Un mot du contenu doit dépasser cette longueur pour compter comme recouvrement
MIN_SHARED_WORD_LENGTH = 5

WARNING_TERMS = ("danger", "attention")


def article_label(article: str) -> str:
    """ "411.1" → "Art. 411.1" ; un numéro synthétisé "Art. 3" reste tel quel. """
    return article if article.startswith("Art.") else f"Art. {article}"


def is_relevant(rule: Rule, section_text: str) -> bool:
    """`section_text` doit déjà être en minuscules."""
    if rule.article_number and rule.article_number.lower() in section_text:
        return True
    return any(
        len(word) > MIN_SHARED_WORD_LENGTH and word in section_text
        for word in rule.content.lower().split(" ")
    )


def relevant_rules(section: Section, rules: Iterable[Rule]) -> list[Rule]:
    text = f"{section.title} {section.explanation}".lower()
    found: list[Rule] = []
    for rule in rules:
        if is_relevant(rule, text):
            found.append(rule)
            if len(found) == MAX_RULES_PER_SECTION:
                break
    return found


def enrich_section(
    section: Section,
    rules: Sequence[Rule],
    corpus_names: Mapping[CorpusId, str] | None = None,
) -> Section:
    """
    Retourne une nouvelle Section avec le bloc de références normatives et les
    avertissements des règles pertinentes ; la section d'entrée n'est pas modifiée.
    """
    if REFERENCES_HEADING in section.explanation:
        return section

    matched = relevant_rules(section, rules)
    if not matched:
        return section

    names = corpus_names or {}
    references = [
        f"{article_label(r.article_number)} ({names.get(r.corpus_id, r.corpus_id)}, p.{r.page}): "
        f"{r.content[:REFERENCE_EXCERPT]}..."
        for r in matched
    ]
    warnings = [
        f"{article_label(r.article_number)} : {r.content[:WARNING_EXCERPT]}..."
        for r in matched
        if any(term in r.content.lower() for term in WARNING_TERMS)
    ]
    return replace(
        section,
        explanation=section.explanation + REFERENCES_MARKER + "\n\n".join(references),
        examples=list(section.examples),
        warnings=[*section.warnings, *warnings],
    )


def enrich_sections(
    sections: Iterable[Section],
    rules: Sequence[Rule],
    corpus_names: Mapping[CorpusId, str] | None = None,
) -> list[Section]:
    return [enrich_section(s, rules, corpus_names) for s in sections]
