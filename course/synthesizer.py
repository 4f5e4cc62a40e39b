"""
course/synthesizer.py — assemblage déterministe d'un cours à partir de documents segmentés.

synthesize(documents, settings=None, rules=None, store=None) -> GenerationResult

Étapes, dans cet ordre :
  1. fusion des concepts et mots-clés (dédoublonnés, ordre de première apparition)
  2. résolution des règles : explicites, sinon recherche dans la norme active du store
  3. modules (un par bloc de niveau 1 de chaque document)
  4. sections (blocs au corps > 50 caractères ou avec puces)
  5. enrichissement normatif des sections
  6. QCM
  7. introduction et conclusion
  8. ressources et objet Course

Hormis l'horodatage (generated_at, id du cours, durée de traitement), le
résultat ne dépend que des entrées et de l'état du store au moment de l'appel.
"""

from __future__ import annotations

import logging
import math
import re
import time
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from data_model import (
    QCM_MAX_QUESTIONS,
    QCM_MIN_QUESTIONS,
    Block,
    Course,
    CourseContent,
    CorpusId,
    GenerationResult,
    GenerationSettings,
    GenerationStats,
    Module,
    ParsedDocument,
    Rule,
    Section,
)
from norms import CorpusStore

from . import quiz, templates
from .matcher import enrich_sections

log = logging.getLogger(__name__)

# Termes envoyés à la recherche automatique, et résultats retenus par terme
AUTO_SEARCH_TERMS = 5
AUTO_SEARCH_LIMIT = 3

MIN_SECTION_BODY = 50
MIN_BODY_FOR_GENERIC_EXAMPLE = 100
MAX_EXAMPLES = 3
MAX_CONTENT_WARNINGS = 2
EXAMPLE_EXCERPT = 200
WARNING_EXCERPT = 150

# Caractères de corps par heure de formation
CHARS_PER_HOUR = 2000
READING_MINUTES_PER_HOUR = 10

KEY_POINTS_HEADING = "\n\n**Points clés :**\n"

_EXAMPLE_RE = re.compile(r"exemple\s*:\s*([^.]+\.)", re.IGNORECASE)
_WARNING_RE = re.compile(r"(attention|important|ne pas|éviter|danger)\s*:\s*([^.]+\.)", re.IGNORECASE)


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def synthesize(
    documents: Sequence[ParsedDocument],
    settings: GenerationSettings | None = None,
    rules: Sequence[Rule] | None = None,
    store: CorpusStore | None = None,
) -> GenerationResult:
    """
    Construit un cours complet.

    Args:
        documents: documents segmentés, dans l'ordre de présentation
        settings:  paramètres de génération (défauts de GenerationSettings si None)
        rules:     règles à intégrer ; None ou vide → recherche automatique dans `store`
        store:     magasin de normes consulté pour la recherche et les noms de normes
    """
    started = time.perf_counter()
    settings = settings or GenerationSettings()
    warnings: list[str] = []

    qcm_count = _clamp_question_count(settings.qcm_question_count, warnings)
    for doc in documents:
        if not doc.blocks:
            warnings.append(f'Le document "{doc.name or doc.title}" ne contient aucun bloc exploitable')

    # 1
    concepts = _merge(d.concepts for d in documents)
    keywords = _merge(d.keywords for d in documents)

    # 2
    resolved = list(rules) if rules else _auto_rules(store, [*concepts, *keywords])
    corpus_names = _corpus_names(store, resolved)

    # 3
    modules = build_modules(documents, concepts)

    # 4
    all_blocks = [b for d in documents for b in d.blocks]
    sections = build_sections(all_blocks, settings)

    # 5
    if resolved:
        sections = enrich_sections(sections, resolved, corpus_names)

    # 6
    questions = (
        quiz.document_quiz(all_blocks, concepts, qcm_count, resolved, corpus_names)
        if settings.include_qcm else []
    )

    # 7
    introduction = (
        templates.introduction(documents, concepts, keywords, len(resolved), settings.course_style)
        if settings.include_introduction else ""
    )
    conclusion = (
        templates.conclusion(concepts, settings.course_style)
        if settings.include_conclusion else ""
    )

    # 8
    used_names = list(dict.fromkeys(corpus_names[r.corpus_id] for r in resolved))
    now = datetime.now(timezone.utc)
    course = Course(
        id=f"course-{int(now.timestamp() * 1000)}",
        title=templates.course_title(documents),
        modules=modules,
        documents=[d.name or d.title for d in documents],
        content=CourseContent(
            introduction=introduction,
            sections=sections,
            conclusion=conclusion,
            quiz=questions,
            resources=templates.resources(keywords, resolved, used_names),
        ),
        generated_at=now,
    )
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    log.info(
        "Cours %s : %d module(s), %d section(s), %d question(s), %d règle(s) en %d ms",
        course.id, len(modules), len(sections), len(questions), len(resolved), elapsed_ms,
    )
    return GenerationResult(
        course=course,
        warnings=warnings,
        norm_rules_used=len(resolved),
        stats=GenerationStats(
            documents_processed=len(documents),
            sections_created=len(sections),
            quiz_generated=len(questions),
            processing_time_ms=elapsed_ms,
        ),
    )


def build_modules(documents: Sequence[ParsedDocument], concepts: Sequence[str]) -> list[Module]:
    modules: list[Module] = []
    for d, doc in enumerate(documents):
        main = [b for b in doc.blocks if b.level == 1]
        if not main:
            modules.append(Module(
                id=f"module-{d}",
                title=doc.title,
                prerequisites=[],
                knowledge=list(concepts[:5]),
                skills=list(templates.DEFAULT_SKILLS),
                duration_hours=max(1, math.ceil(doc.metadata.estimated_reading_minutes / READING_MINUTES_PER_HOUR)),
            ))
            continue
        for i, block in enumerate(main):
            modules.append(Module(
                id=f"module-{d}-{i}",
                title=block.title,
                prerequisites=[main[i - 1].title] if i > 0 else [],
                knowledge=list(concepts[i * 3:(i + 1) * 3]),
                skills=templates.skills_for(block),
                duration_hours=max(1, math.ceil(len(block.body) / CHARS_PER_HOUR)),
            ))
    return modules


def build_sections(blocks: Iterable[Block], settings: GenerationSettings) -> list[Section]:
    kept = [b for b in blocks if len(b.body) > MIN_SECTION_BODY or b.bullets]
    return [
        Section(
            id=f"section-{i}",
            title=block.title,
            explanation=format_explanation(block),
            examples=extract_examples(block) if settings.add_examples else [],
            warnings=extract_warnings(block) if settings.add_warnings else [],
        )
        for i, block in enumerate(kept)
    ]


def format_explanation(block: Block) -> str:
    explanation = block.body.strip()
    if block.bullets:
        explanation += KEY_POINTS_HEADING + "".join(f"• {b}\n" for b in block.bullets)
    return explanation


def extract_examples(block: Block) -> list[str]:
    examples: list[str] = []
    if block.is_example:
        examples.append(block.body[:EXAMPLE_EXCERPT])
    examples += [m.group(1).strip() for m in _EXAMPLE_RE.finditer(block.body)]
    if not examples and len(block.body) > MIN_BODY_FOR_GENERIC_EXAMPLE:
        examples.append(f"Application pratique des concepts de {block.title.lower()}")
    return examples[:MAX_EXAMPLES]


def extract_warnings(block: Block) -> list[str]:
    warnings: list[str] = []
    if block.is_warning:
        warnings.append(block.body[:WARNING_EXCERPT])
    warnings += [m.group(0) for m in _WARNING_RE.finditer(block.body)][:MAX_CONTENT_WARNINGS]
    return warnings


# ---------------------------------------------------------------------------
# Fonctions internes
# ---------------------------------------------------------------------------

def _merge(groups: Iterable[Iterable[str]]) -> list[str]:
    return list(dict.fromkeys(item for group in groups for item in group))


def _clamp_question_count(count: int, warnings: list[str]) -> int:
    clamped = min(QCM_MAX_QUESTIONS, max(QCM_MIN_QUESTIONS, count))
    if clamped != count:
        warnings.append(
            f"Nombre de questions {count} hors de [{QCM_MIN_QUESTIONS}, {QCM_MAX_QUESTIONS}], "
            f"ramené à {clamped}"
        )
    return clamped


def _auto_rules(store: CorpusStore | None, terms: Sequence[str]) -> list[Rule]:
    if store is None:
        return []
    corpus_id = store.active_corpus_id
    if corpus_id is None:
        return []
    found: dict[str, Rule] = {}
    for term in terms[:AUTO_SEARCH_TERMS]:
        for result in store.search(term, corpus_id, AUTO_SEARCH_LIMIT):
            found.setdefault(result.rule.id, result.rule)
    log.debug("Recherche automatique dans %s : %d règle(s)", corpus_id, len(found))
    return list(found.values())


def _corpus_names(store: CorpusStore | None, rules: Iterable[Rule]) -> dict[CorpusId, str]:
    names: dict[CorpusId, str] = {}
    for rule in rules:
        if rule.corpus_id in names:
            continue
        corpus = store.get_corpus(rule.corpus_id) if store else None
        names[rule.corpus_id] = corpus.name if corpus else rule.corpus_id
    return names
