"""
course/quiz.py — génération déterministe des QCM.

Toutes les questions ont exactement 4 options ; la bonne réponse est toujours
l'option 0, les trois autres sont des distracteurs fixes.

  block_questions(blocks, count)       — une question par bloc au corps > 100 caractères
  pad_with_concepts(questions, ...)    — complète avec des questions de concept
  rule_questions(rules, count, names)  — questions tirées des règles normatives
  document_quiz(blocks, concepts, count, rules, names) — assemblage complet
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from data_model import Block, CorpusId, Question, Rule

from .matcher import article_label

# Longueur minimale (exclusive) du corps d'un bloc pour en tirer une question
MIN_BODY_FOR_QUESTION = 100

MAX_RULE_QUESTIONS = 5

_CLAUSE_SPLIT_RE = re.compile(r"[.,;]")

CONCEPT_OPTIONS = (
    "Un élément fondamental de la formation",
    "Un détail optionnel",
    "Une notion dépassée",
    "Un terme sans importance",
)

RULE_DISTRACTORS = (
    "Cette règle ne s'applique qu'aux installations industrielles.",
    "Cette disposition est optionnelle selon le contexte.",
    "L'article mentionné traite d'un autre sujet.",
)


def question_from_block(block: Block, index: int) -> Question:
    title = block.title
    clauses = [
        c.strip() for c in _CLAUSE_SPLIT_RE.split(block.body)
        if 20 < len(c.strip()) < 100
    ][:4]
    options = [
        f"Comprendre et appliquer les principes de {title.lower()}",
        f"Ignorer les règles de {title.lower()}",
        "Appliquer partiellement les concepts",
        "Reporter l'application à plus tard",
    ]
    if len(clauses) >= 2:
        options[0] = clauses[0]
    return Question(
        id=f"qcm-{index}",
        prompt=f'Concernant "{title}", quelle est la bonne pratique ?',
        options=options,
        correct_answer_index=0,
        explanation=(
            "La bonne réponse est la première option car elle correspond aux "
            f'principes établis dans la section "{title}".'
        ),
    )


def question_from_concept(concept: str, index: int) -> Question:
    return Question(
        id=f"qcm-concept-{index}",
        prompt=f'Que signifie le concept de "{concept}" dans ce contexte ?',
        options=list(CONCEPT_OPTIONS),
        correct_answer_index=0,
        explanation=(
            f'"{concept}" est un concept clé identifié dans les documents sources, '
            "constituant un élément fondamental de la formation."
        ),
    )


def question_from_rule(rule: Rule, index: int, corpus_name: str) -> Question:
    excerpt = rule.content[:200]
    return Question(
        id=f"qcm-norm-{index}",
        prompt=(
            f"Selon l'article {rule.article_number} de la norme {corpus_name}, "
            "quelle affirmation est correcte ?"
        ),
        options=[excerpt.split(".")[0] + ".", *RULE_DISTRACTORS],
        correct_answer_index=0,
        explanation=f'{article_label(rule.article_number)} (page {rule.page}) - {rule.title}: "{excerpt}"',
    )


def block_questions(blocks: Sequence[Block], count: int) -> list[Question]:
    """Seuls les `count` premiers blocs sont examinés ; l'id garde leur position."""
    return [
        question_from_block(block, i)
        for i, block in enumerate(blocks[:count])
        if len(block.body) > MIN_BODY_FOR_QUESTION
    ]


def pad_with_concepts(questions: list[Question], concepts: Sequence[str], count: int) -> list[Question]:
    result = list(questions)
    while len(result) < count and len(concepts) > len(result):
        result.append(question_from_concept(concepts[len(result)], len(result)))
    return result[:count]


def rule_questions(
    rules: Sequence[Rule],
    count: int,
    corpus_names: Mapping[CorpusId, str] | None = None,
) -> list[Question]:
    names = corpus_names or {}
    return [
        question_from_rule(rule, i, names.get(rule.corpus_id, rule.corpus_id))
        for i, rule in enumerate(rules[:count])
    ]


def document_quiz(
    blocks: Sequence[Block],
    concepts: Sequence[str],
    count: int,
    rules: Sequence[Rule] = (),
    corpus_names: Mapping[CorpusId, str] | None = None,
) -> list[Question]:
    """
    Questions de blocs, complétées par des questions de concept ; si des règles
    sont fournies, la fin de la liste est remplacée par les questions normatives.
    Le total ne dépasse jamais `count`.
    """
    quiz = pad_with_concepts(block_questions(blocks, count), concepts, count)
    if rules:
        norm = rule_questions(rules, min(MAX_RULE_QUESTIONS, count), corpus_names)
        quiz = quiz[:count - len(norm)] + norm
    return quiz
