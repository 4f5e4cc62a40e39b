from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from norms import CorpusStore

# ---------------------------------------------------------------------------
# Normes d'exemple
# ---------------------------------------------------------------------------

_NS_01_001: dict[str, Any] = {
    "metadata": {
        "id": "ns-01-001",
        "name": "NS 01-001",
        "description": "Installations électriques à basse tension",
        "version": "2021",
        "country": "SN",
        "domain": "électricité",
    },
    "sommaire": [
        {
            "index": "4",
            "label": "Protection pour assurer la sécurité",
            "level": 1,
            "children": [
                {"index": "41", "label": "Protection contre les chocs électriques", "level": 2, "children": []},
            ],
        },
        {"index": "5", "label": "Choix et mise en œuvre des matériels", "level": 1, "children": []},
    ],
    "rules": [
        {
            "id": "r1",
            "titre": "Protection contre les chocs électriques",
            "article": "411",
            "content": (
                "Les mesures de protection contre les contacts indirects doivent être assurées "
                "par coupure automatique de l'alimentation. Attention au danger d'électrocution."
            ),
            "page": 45,
            "keywords": ["DDR"],
        },
        {
            "id": "r2",
            "titre": "Protection contre les chocs électriques",
            "article": "411.1",
            "content": (
                "La coupure automatique de l'alimentation est requise lorsqu'un défaut risque de "
                "provoquer un danger. Le dispositif différentiel 411 assure cette fonction."
            ),
            "page": 46,
        },
        {
            "id": "r3",
            "titre": "Mise à la terre",
            "article": "542",
            "content": "La prise de terre doit être réalisée par un conducteur enterré en fond de fouille.",
            "page": 120,
        },
        {
            "titre": "Vérification",
            "content": (
                "Les installations doivent faire l'objet d'une vérification initiale "
                "avant mise en service."
            ),
            "page": 200,
        },
    ],
}

_NS_02: dict[str, Any] = {
    "metadata": {"id": "ns-02", "name": "NS 02", "domain": "électricité"},
    "sommaire": [{"index": "1", "label": "Généralités", "level": 1, "children": []}],
    "rules": [
        {"id": "a1", "titre": "Généralités", "article": "411", "content": "Champ d'application de la norme.", "page": 3},
        {"id": "a2", "titre": "Définitions", "article": "12", "content": "Un disjoncteur est un appareil de coupure.", "page": 4},
    ],
}


SAMPLE_DOCUMENT = """# Protection des installations
La protection des personnes est essentielle. Les dispositifs de protection doivent être vérifiés régulièrement par un technicien qualifié afin de garantir la sécurité.
Exemple : un disjoncteur différentiel coupe le circuit en cas de défaut.
- Vérifier la protection différentielle
- Contrôler la mise à la terre
# Maintenance préventive
Il faut savoir appliquer la procédure de maintenance. Attention : ne jamais intervenir sous tension sans protection adaptée. La protection individuelle est obligatoire pour chaque intervention.
## Outils
- Multimètre
- Ohmmètre
"""


@pytest.fixture
def ns_payload() -> dict[str, Any]:
    return copy.deepcopy(_NS_01_001)


@pytest.fixture
def second_payload() -> dict[str, Any]:
    return copy.deepcopy(_NS_02)


@pytest.fixture
def store(ns_payload: dict[str, Any]) -> CorpusStore:
    s = CorpusStore()
    outcome = s.import_corpus(ns_payload)
    assert outcome.success, outcome.error
    return s


@pytest.fixture
def ns_file(tmp_path: Path, ns_payload: dict[str, Any]) -> Path:
    path = tmp_path / "ns01001.json"
    path.write_text(json.dumps(ns_payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("KEBE_NORMS_DIR", "KEBE_LOG_LEVEL", "KEBE_PAGE_SIZE", "KEBE_QCM_COUNT", "KEBE_HTTP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
