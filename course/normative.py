"""
course/normative.py — cours normatif structuré en cinq chapitres.

  1. Introduction et enjeux
  2. Rappel normatif
  3. Règles clés (jusqu'à 8, mises en forme selon le public)
  4. Cas pratiques
  5. Synthèse et checklist d'audit

Les règles viennent de la requête ou sont collectées dans le store : préfixe
d'article puis mots-clés du thème (15 résultats par mot-clé), triées par numéro
d'article quasi numérique, au plus MAX_COLLECTED_RULES.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from data_model import (
    Audience,
    Course,
    CourseContent,
    CorpusId,
    Module,
    Question,
    Rule,
    Section,
)
from norms import CorpusStore

log = logging.getLogger(__name__)

MAX_COLLECTED_RULES = 30
THEME_SEARCH_LIMIT = 15
KEY_RULES = 8
MIN_KEY_RULE_CONTENT = 50
MIN_FIRST_SENTENCE = 20
MAX_NORMATIVE_QUESTIONS = 10


@dataclass(frozen=True, slots=True)
class Theme:
    label: str
    keywords: tuple[str, ...]
    article_prefixes: tuple[str, ...]


PREDEFINED_THEMES: dict[str, Theme] = {
    "chocs-electriques": Theme(
        "Protection contre les chocs électriques",
        ("choc", "contact direct", "contact indirect", "protection", "mise à la terre", "DDR", "différentiel"),
        ("411", "412", "413", "414"),
    ),
    "surintensites": Theme(
        "Protection contre les surintensités",
        ("surintensité", "surcharge", "court-circuit", "disjoncteur", "fusible", "protection"),
        ("433", "434", "435"),
    ),
    "mise-terre": Theme(
        "Mise à la terre et conducteurs de protection",
        ("terre", "PE", "conducteur", "prise de terre", "équipotentielle", "continuité"),
        ("541", "542", "543", "544"),
    ),
    "schemas-liaison": Theme(
        "Schémas de liaison à la terre (TT, TN, IT)",
        ("TT", "TN", "IT", "schéma", "liaison", "neutre", "régime"),
        ("312", "411", "413"),
    ),
    "canalisations": Theme(
        "Canalisations et câblage",
        ("canalisation", "câble", "conducteur", "section", "pose", "conduit"),
        ("521", "522", "523", "524"),
    ),
    "locaux-humides": Theme(
        "Locaux humides et salles de bain",
        ("humide", "salle de bain", "douche", "baignoire", "volume", "IP"),
        ("701", "702"),
    ),
    "verification": Theme(
        "Vérification et essais",
        ("vérification", "essai", "mesure", "contrôle", "continuité", "isolement"),
        ("61", "62"),
    ),
    "protection-incendie": Theme(
        "Protection contre l'incendie",
        ("incendie", "feu", "thermique", "inflammable", "propagation"),
        ("42", "422", "423"),
    ),
}


@dataclass(slots=True)
class NormativeCourseRequest:
    """
    Demande de cours normatif.

    - theme:          clé de PREDEFINED_THEMES, libellé (ou partie) ou texte libre
    - article_prefix: p. ex. "411" pour tous les articles 411.x
    - selected_rules: règles imposées ; la collecte est alors ignorée
    - corpus_id:      norme à interroger (None → norme active du store)
    """
    theme: str | None = None
    article_prefix: str | None = None
    selected_rules: list[Rule] = field(default_factory=list)
    audience: Audience = Audience.TECHNICIAN
    include_qcm: bool = True
    qcm_count: int = 10
    corpus_id: CorpusId | None = None


@dataclass(slots=True)
class NormativeStats:
    rules_analyzed: int
    sections_created: int
    quiz_generated: int
    processing_time_ms: int


@dataclass(slots=True)
class NormativeCourseResult:
    course: Course
    rules_used: list[Rule]
    stats: NormativeStats


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def resolve_theme(theme: str | None) -> Theme | None:
    """Thème prédéfini par clé, ou premier dont le libellé contient `theme`."""
    if not theme:
        return None
    if theme in PREDEFINED_THEMES:
        return PREDEFINED_THEMES[theme]
    needle = theme.lower()
    return next((t for t in PREDEFINED_THEMES.values() if needle in t.label.lower()), None)


_ARTICLE_PART_RE = re.compile(r"\d+|\D+")


def article_sort_key(article: str) -> tuple[tuple[int, int | str], ...]:
    """Ordre quasi numérique : "411.2" < "411.10" < "412"."""
    return tuple(
        (0, int(part)) if part.isdigit() else (1, part.lower())
        for part in _ARTICLE_PART_RE.findall(article)
    )


def collect_relevant_rules(store: CorpusStore, request: NormativeCourseRequest) -> list[Rule]:
    corpus_id = request.corpus_id or store.active_corpus_id
    corpus = store.get_corpus(corpus_id) if corpus_id else None
    if corpus is None:
        return []

    found: dict[str, Rule] = {}
    if request.article_prefix:
        for rule in corpus.rules:
            if rule.article_number.startswith(request.article_prefix):
                found.setdefault(rule.id, rule)

    if request.theme:
        theme = resolve_theme(request.theme)
        keywords = theme.keywords if theme else tuple(request.theme.split(" "))
        for keyword in keywords:
            for result in store.search(keyword, corpus.id, THEME_SEARCH_LIMIT):
                found.setdefault(result.rule.id, result.rule)

    ordered = sorted(found.values(), key=lambda r: article_sort_key(r.article_number))
    return ordered[:MAX_COLLECTED_RULES]


def select_key_rules(rules: Sequence[Rule], count: int = KEY_RULES) -> list[Rule]:
    substantial = [r for r in rules if len(r.content) > MIN_KEY_RULE_CONTENT]
    return sorted(substantial, key=lambda r: len(r.content), reverse=True)[:count]


def generate_normative_quiz(
    rules: Sequence[Rule],
    count: int = MAX_NORMATIVE_QUESTIONS,
    norm_name: str = "",
) -> list[Question]:
    """
    Questions tirées des règles au contenu > 50 caractères dont la première
    phrase fait au moins 20 caractères, complétées par des questions génériques
    jusqu'à min(count, 10).
    """
    questions: list[Question] = []
    selected = [r for r in rules if len(r.content) > MIN_KEY_RULE_CONTENT][:count]
    for i, rule in enumerate(selected):
        question = _question_from_rule(rule, i, norm_name)
        if question is not None:
            questions.append(question)
    while len(questions) < min(count, MAX_NORMATIVE_QUESTIONS):
        questions.append(_generic_question(len(questions), norm_name))
    return questions


def generate_normative_course(
    store: CorpusStore,
    request: NormativeCourseRequest,
) -> NormativeCourseResult:
    started = time.perf_counter()
    rules = list(request.selected_rules) or collect_relevant_rules(store, request)

    corpus_id = request.corpus_id or store.active_corpus_id
    corpus = store.get_corpus(corpus_id) if corpus_id else None
    norm_name = corpus.name if corpus else (corpus_id or "de référence")

    theme = resolve_theme(request.theme)
    theme_label = theme.label if theme else request.theme

    sections = _chapters(rules, request.audience, norm_name, theme_label)
    questions = generate_normative_quiz(rules, request.qcm_count, norm_name) if request.include_qcm else []

    title = (
        f"Formation : {theme_label}" if theme_label
        else f"Formation {norm_name} - Articles {request.article_prefix or 'complet'}"
    )
    now = datetime.now(timezone.utc)
    course = Course(
        id=f"norm-course-{int(now.timestamp() * 1000)}",
        title=title,
        modules=pedagogical_modules(rules, norm_name),
        documents=[],
        content=CourseContent(
            introduction=_pedagogical_intro(rules, norm_name, theme_label),
            sections=sections,
            conclusion=sections[-1].explanation,
            quiz=questions,
            resources=normative_resources(rules, norm_name),
        ),
        generated_at=now,
    )
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    log.info("Cours normatif %s : %d règle(s), %d section(s)", course.id, len(rules), len(sections))
    return NormativeCourseResult(
        course=course,
        rules_used=rules,
        stats=NormativeStats(
            rules_analyzed=len(rules),
            sections_created=len(sections),
            quiz_generated=len(questions),
            processing_time_ms=elapsed_ms,
        ),
    )


def pedagogical_modules(rules: Sequence[Rule], norm_name: str) -> list[Module]:
    titles = _unique_titles(rules)
    return [
        Module("mod-intro", "Introduction et enjeux", [],
               ["Risques électriques", "Cadre réglementaire", "Responsabilités"],
               ["Identifier les enjeux de sécurité", "Comprendre le cadre normatif"], 1),
        Module("mod-normes", "Fondements normatifs", ["Introduction et enjeux"],
               [f"Structure de la norme {norm_name}", "Articles applicables"],
               ["Rechercher une règle dans la norme", "Interpréter les exigences"], 2),
        Module("mod-regles", "Règles clés et application", ["Fondements normatifs"],
               titles[:3],
               ["Appliquer les règles normatives", "Choisir les protections adaptées"], 3),
        Module("mod-pratique", "Cas pratiques et vérifications", ["Règles clés et application"],
               ["Méthodes de mesure", "Outils de vérification"],
               ["Réaliser les mesures électriques", "Vérifier la conformité"], 2),
        Module("mod-synthese", "Synthèse et évaluation", ["Cas pratiques et vérifications"],
               ["Checklist d'audit", "Points critiques"],
               ["Rédiger un rapport de vérification", "Valider une installation"], 1),
    ]


def normative_resources(rules: Sequence[Rule], norm_name: str) -> list[str]:
    articles = [r.article_number for r in rules[:5]]
    return [
        f"Norme {norm_name} - Version complète",
        f"Articles de référence : {', '.join(articles)}",
        "Guide UTE C 15-520 - Canalisations",
        "Guide UTE C 15-105 - Détermination des sections",
        "Formulaire de vérification des installations",
        "Checklist d'audit normative (imprimable)",
    ]


# ---------------------------------------------------------------------------
# Chapitres
# ---------------------------------------------------------------------------

def _chapters(
    rules: Sequence[Rule],
    audience: Audience,
    norm_name: str,
    theme_label: str | None,
) -> list[Section]:
    sections = [
        Section(
            id="section-intro",
            title="Chapitre 1 - Introduction et enjeux",
            explanation=_intro_chapter(audience),
            examples=[
                "Accident domestique : électrocution dans une salle de bain non conforme",
                "Incident industriel : court-circuit ayant provoqué un incendie",
                "Chaque année, environ 200 décès par électrocution en France",
            ],
            warnings=[
                f"La non-conformité à la norme {norm_name} engage la responsabilité du professionnel",
                "Les accidents électriques représentent la 4ème cause d'accidents mortels au travail",
            ],
        ),
        Section(
            id="section-normes",
            title="Chapitre 2 - Rappel normatif",
            explanation=_normative_foundations(rules, norm_name),
            examples=[f"Article {r.article_number} : {r.content[:100]}..." for r in rules[:3]],
            warnings=[
                f"Les règles {norm_name} sont obligatoires pour toute installation électrique BT",
                "Le non-respect peut entraîner le refus de mise en service par le Consuel",
            ],
        ),
    ]
    for i, rule in enumerate(select_key_rules(rules)):
        sections.append(Section(
            id=f"section-rule-{i}",
            title=f"Règle {i + 1} : Article {rule.article_number}",
            explanation=_format_rule(rule, audience),
            examples=_rule_examples(rule),
            warnings=_rule_warnings(rule),
        ))
    sections.append(Section(
        id="section-pratique",
        title="Chapitre 4 - Cas pratiques",
        explanation=_PRACTICAL_CASES,
        examples=[
            "Vérification de la continuité du conducteur PE avec un ohmmètre",
            "Test du DDR avec la touche test et mesure du temps de déclenchement",
            "Mesure de la résistance de la prise de terre",
        ],
        warnings=[
            "Toujours consigner l'installation avant intervention",
            "Porter les EPI adaptés (gants isolants, lunettes, VAT)",
        ],
    ))
    sections.append(Section(
        id="section-synthese",
        title="Chapitre 5 - Synthèse et checklist d'audit",
        explanation=_synthesis_and_checklist(rules),
        examples=[],
        warnings=["Cette checklist doit être utilisée pour chaque vérification d'installation"],
    ))
    return sections


def _pedagogical_intro(rules: Sequence[Rule], norm_name: str, theme_label: str | None) -> str:
    theme = theme_label or "la sécurité électrique"
    titles = "\n".join(f"- {t}" for t in _unique_titles(rules))
    return f"""# Introduction à {theme}

## Objectif de cette formation

Cette formation vous permettra de maîtriser les exigences de la norme **{norm_name}** relatives à {theme.lower()}.

## Contexte réglementaire

La norme {norm_name} est le document de référence pour la conception, la réalisation et la vérification des installations électriques basse tension. Elle vise à protéger :
- Les **personnes** contre les risques d'électrocution
- Les **biens** contre les risques d'incendie d'origine électrique
- La **continuité de service** des installations

## Sections de la norme abordées

{titles}

## Ce que vous saurez faire à la fin

- Identifier les exigences normatives applicables
- Appliquer les règles de protection appropriées
- Vérifier la conformité d'une installation
- Utiliser la checklist d'audit normative

---

**Nombre de règles étudiées :** {len(rules)}
**Référence :** {norm_name}"""


_INTRO_CHAPTER = """## Problème réel

Les installations électriques défaillantes ou non conformes sont à l'origine de nombreux accidents graves chaque année. Les principaux risques sont :

- **Électrocution** : passage de courant à travers le corps humain
- **Électrisation** : effets physiologiques du passage du courant
- **Incendie** : échauffement anormal des conducteurs ou arcs électriques
- **Explosion** : dans les atmosphères à risque

## Enjeux de sécurité

La conformité aux normes électriques n'est pas optionnelle. Elle répond à :
- Une obligation légale (Code du travail, règlement de sécurité ERP)
- Une exigence des assureurs
- Une responsabilité civile et pénale du professionnel

## Lien avec les accidents électriques

L'analyse des accidents électriques révèle que dans la majorité des cas, le non-respect d'une ou plusieurs règles normatives est en cause :
- Absence ou défaillance du dispositif différentiel
- Conducteur de protection non connecté ou interrompu
- Installation non adaptée à l'environnement (humidité, risques mécaniques)"""

_AUDIENCE_NOTES: dict[Audience, str] = {
    Audience.BEGINNER: "**Pour les débutants :** Cette formation vous guidera pas à pas "
                       "dans la compréhension des règles essentielles.",
    Audience.ENGINEER: "**Pour les ingénieurs :** Les aspects de dimensionnement et de calcul "
                       "seront détaillés pour chaque règle.",
}


def _intro_chapter(audience: Audience) -> str:
    note = _AUDIENCE_NOTES.get(audience)
    return f"{_INTRO_CHAPTER}\n\n{note}" if note else _INTRO_CHAPTER


def _normative_foundations(rules: Sequence[Rule], norm_name: str) -> str:
    articles = "\n".join(f"- **Article {r.article_number}**" for r in rules[:15])
    titles = "\n\n".join(f"### {t}" for t in _unique_titles(rules))
    return f"""## Articles {norm_name} concernés

Cette formation couvre les articles suivants de la norme {norm_name} :

{articles}

## Sections de la norme

{titles}

## Résumé des obligations

Les règles étudiées imposent les obligations suivantes :

1. **Protection des personnes** : Mise en œuvre de dispositifs de protection adaptés
2. **Protection des biens** : Prévention des risques d'incendie et de dommages
3. **Continuité de service** : Garantie du fonctionnement correct de l'installation
4. **Vérification** : Contrôle de conformité avant mise en service"""


_SIMPLIFICATIONS = (
    (re.compile(r"doit être", re.IGNORECASE), "il faut"),
    (re.compile(r"doivent être", re.IGNORECASE), "il faut"),
    (re.compile(r"sont tenus de", re.IGNORECASE), "doivent"),
    (re.compile(r"conformément à", re.IGNORECASE), "selon"),
)


def _simplify(content: str) -> str:
    for pattern, plain in _SIMPLIFICATIONS:
        content = pattern.sub(plain, content)
    return content[:200]


def _format_rule(rule: Rule, audience: Audience) -> str:
    base = (
        f"## Texte normatif\n\n> {rule.content}\n\n"
        f"**Référence :** Article {rule.article_number} - Page {rule.page}\n"
        f"**Section :** {rule.title}\n\n---\n\n"
    )
    match audience:
        case Audience.BEGINNER:
            return base + (
                "## Explication simple (niveau débutant)\n\n"
                f"Cette règle signifie que {_simplify(rule.content)}.\n\n"
                "L'objectif est de garantir la sécurité des personnes en évitant tout "
                "risque d'accident électrique."
            )
        case Audience.ENGINEER:
            return base + (
                f"## Explication ingénieur\n\n{rule.content}\n\n"
                "**Dimensionnement :** Les calculs de dimensionnement doivent prendre en "
                "compte les paramètres suivants :\n"
                "- Courant de défaut présumé\n"
                "- Temps de coupure maximal\n"
                "- Impédance de boucle de défaut\n"
                "- Sélectivité avec les protections amont"
            )
        case _:
            return base + (
                f"## Explication technique (niveau technicien)\n\n{rule.content}\n\n"
                "**Application pratique :** Cette règle impose une vérification systématique "
                "lors de la mise en service. Les outils nécessaires sont : multimètre, "
                "mégohmmètre, et appareil de mesure de boucle de défaut."
            )


# (termes déclencheurs, exemple)
_RULE_EXAMPLES = (
    (("protection", "protéger"), "Installation d'un dispositif différentiel 30 mA sur les circuits prises"),
    (("terre", "pe"), "Réalisation d'une prise de terre avec piquet et mesure de résistance < 100 Ω"),
    (("vérification", "essai"), "Vérification de la continuité des conducteurs de protection"),
    (("disjoncteur", "fusible"), "Choix du calibre de protection adapté à la section des conducteurs"),
)

_RULE_WARNINGS = (
    (("danger", "risque"), "Non-respect = risque d'accident grave"),
    (("obligatoire", "doit"), "Règle obligatoire - application systématique requise"),
    (("interdit", "ne pas"), "Pratique interdite par la norme"),
)


def _rule_examples(rule: Rule) -> list[str]:
    content = rule.content.lower()
    examples = [text for terms, text in _RULE_EXAMPLES if any(t in content for t in terms)]
    return examples or [f"Application de l'article {rule.article_number} sur chantier"]


def _rule_warnings(rule: Rule) -> list[str]:
    content = rule.content.lower()
    warnings = [text for terms, text in _RULE_WARNINGS if any(t in content for t in terms)]
    return warnings or [f"Respecter les prescriptions de l'article {rule.article_number}"]


_PRACTICAL_CASES = """## Cas pratique principal

**Contexte :** Dans une habitation en schéma TT, vous devez vérifier la conformité de l'installation électrique.

### Étape 1 : Vérification visuelle
- Présence du tableau de répartition
- État des connexions et serrages
- Identification des circuits

### Étape 2 : Vérification de la continuité du PE
1. Consigner l'installation (coupure générale)
2. Connecter l'ohmmètre entre PE du tableau et masse d'un appareil
3. La résistance doit être < 2 Ω

### Étape 3 : Test du DDR (Dispositif Différentiel Résiduel)
1. Appuyer sur le bouton test → le DDR doit déclencher
2. Mesurer le temps de déclenchement avec un contrôleur
3. Temps max : 40 ms pour In = 30 mA

### Étape 4 : Mesure de la résistance de terre
1. Utiliser un telluromètre
2. Planter les piquets auxiliaires
3. Résistance max : selon seuil de déclenchement du DDR

## Questions d'auto-évaluation

1. Quelle est la résistance maximale admissible pour la prise de terre en schéma TT avec DDR 30 mA ?
2. Comment vérifier la continuité du conducteur de protection ?
3. Quel est le temps de déclenchement maximal d'un DDR 30 mA ?"""

_CHECKLIST = """## Synthèse des points clés

Les règles étudiées imposent de respecter les principes suivants :

- **Protection contre les contacts directs** : Isolation, enveloppes, barrières
- **Protection contre les contacts indirects** : Mise à la terre + DDR
- **Protection contre les surintensités** : Disjoncteurs/fusibles dimensionnés
- **Vérification avant mise en service** : Essais et mesures obligatoires

---

## Checklist d'audit normative

### 1. Vérifications visuelles
- [ ] Tableau de répartition correctement installé
- [ ] Identification des circuits conforme
- [ ] Serrages et connexions en bon état
- [ ] Pas de conducteur apparent ou endommagé

### 2. Mesures électriques
- [ ] Continuité des conducteurs PE : < 2 Ω
- [ ] Résistance d'isolement : > 0,5 MΩ
- [ ] Résistance de terre : conforme au schéma
- [ ] Impédance de boucle : compatible avec les protections

### 3. Essais fonctionnels
- [ ] Test du bouton DDR : déclenchement OK
- [ ] Mesure temps de déclenchement DDR : < 40 ms
- [ ] Vérification de la sélectivité

### 4. Documentation
- [ ] Schémas électriques à jour
- [ ] Rapport de vérification établi
- [ ] Attestation de conformité (Consuel si applicable)"""


def _synthesis_and_checklist(rules: Sequence[Rule]) -> str:
    checked = "\n".join(f"- Article {r.article_number} : ✓" for r in rules[:10])
    return (
        f"{_CHECKLIST}\n\n---\n\n## Articles vérifiés\n\n{checked}\n\n"
        "**Rappel :** Cette checklist doit être complétée pour chaque installation "
        "vérifiée et conservée dans le dossier technique."
    )


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------

_DISTRACTORS = (
    "Cette règle s'applique uniquement aux installations industrielles haute tension.",
    "Cette disposition est facultative et laissée à l'appréciation de l'installateur.",
    "L'article mentionné a été abrogé par une révision récente de la norme.",
)

# (énoncé, options, explication) ; la bonne réponse est toujours la première option
_GENERIC_QUESTIONS: tuple[tuple[str, tuple[str, str, str, str], str], ...] = (
    ("Quelle est la tension maximale couverte par la norme {norm} en courant alternatif ?",
     ("1000 V", "400 V", "230 V", "500 V"),
     "La norme {norm} s'applique aux installations jusqu'à 1000 V en CA et 1500 V en CC."),
    ("Quel est le calibre de DDR obligatoire pour les circuits prises en habitation ?",
     ("30 mA", "300 mA", "100 mA", "500 mA"),
     "Le DDR 30 mA (haute sensibilité) est obligatoire pour la protection des personnes."),
    ("Quelle est la résistance maximale de continuité du conducteur PE ?",
     ("2 Ω", "10 Ω", "0,5 Ω", "100 Ω"),
     "La continuité du PE doit être inférieure à 2 Ω pour garantir la protection."),
    ("Quel schéma de liaison à la terre est le plus courant en France pour les habitations ?",
     ("TT", "TN-S", "IT", "TN-C"),
     "Le schéma TT (neutre à la terre, masses à la terre) est le standard pour les habitations."),
    ("Quel est le temps de déclenchement maximal d'un DDR 30 mA ?",
     ("40 ms", "100 ms", "200 ms", "1 s"),
     "Le DDR 30 mA doit déclencher en moins de 40 ms à In pour protéger contre la fibrillation."),
)


def _question_from_rule(rule: Rule, index: int, norm_name: str) -> Question | None:
    first_sentence = rule.content.split(".")[0]
    if len(first_sentence) < MIN_FIRST_SENTENCE:
        return None
    answer = first_sentence[:150] + ("..." if len(first_sentence) > 150 else "")
    return Question(
        id=f"qcm-norm-{index}",
        prompt=f"Selon l'article {rule.article_number} de la norme {norm_name}, quelle est l'affirmation correcte ?",
        options=[answer, *_DISTRACTORS],
        correct_answer_index=0,
        explanation=(
            f"Réponse correcte basée sur l'article {rule.article_number} (page {rule.page}) "
            f"de la norme {norm_name}.\n\nSection : {rule.title}\n\n"
            f'Texte complet : "{rule.content[:300]}..."'
        ),
    )


def _generic_question(index: int, norm_name: str) -> Question:
    prompt, options, explanation = _GENERIC_QUESTIONS[index % len(_GENERIC_QUESTIONS)]
    return Question(
        id=f"qcm-generic-{index}",
        prompt=prompt.format(norm=norm_name),
        options=list(options),
        correct_answer_index=0,
        explanation=explanation.format(norm=norm_name),
    )


def _unique_titles(rules: Sequence[Rule]) -> list[str]:
    return list(dict.fromkeys(r.title for r in rules))
