"""
validator/normalizer.py — normalisation d'un payload de norme validé.

normalize_rules():
  - Construit des Rule immuables à partir de payload["rules"].
  - Id absent          → "{corpus_id}-rule-{index 1-based}".
  - Article absent     → "Art. {index 1-based}".
  - Titre absent       → "Sans titre".
  - Page non entière   → 0 ; page négative → 0.
  - Ne modifie pas le contenu (seulement converti en str).

normalize_toc():
  - Convertit "sommaire" en arbre de TocNode ; les nœuds invalides sont ignorés.
"""

from __future__ import annotations

from typing import Any

from data_model import Rule, TocNode

UNTITLED = "Sans titre"


def normalize_rules(rules: list[Any], corpus_id: str) -> list[Rule]:
    """Retourne les règles normalisées, dans l'ordre du payload."""
    return [
        _normalize_rule(raw, index, corpus_id)
        for index, raw in enumerate(rules, start=1)
        if isinstance(raw, dict)
    ]


def rule_id(raw: dict[str, Any], index: int, corpus_id: str) -> str:
    """Id explicite de la règle, sinon "{corpus_id}-rule-{index 1-based}"."""
    return _text(raw.get("id")) or f"{corpus_id}-rule-{index}"


def normalize_toc(nodes: Any) -> list[TocNode]:
    if not isinstance(nodes, list):
        return []
    result: list[TocNode] = []
    for node in nodes:
        if not isinstance(node, dict):
            continue
        result.append(TocNode(
            index=str(node.get("index", "")),
            label=str(node.get("label", "")),
            level=_as_int(node.get("level"), default=1),
            children=normalize_toc(node.get("children")),
        ))
    return result


def _normalize_rule(raw: dict[str, Any], index: int, corpus_id: str) -> Rule:
    keywords = raw.get("keywords")
    category = raw.get("category")
    return Rule(
        id=rule_id(raw, index, corpus_id),
        title=_text(raw.get("titre")) or UNTITLED,
        article_number=_text(raw.get("article")) or f"Art. {index}",
        content=_text(raw.get("content")),
        page=max(0, _as_int(raw.get("page"), default=0)),
        corpus_id=corpus_id,
        category=_text(category) or None,
        keywords=tuple(str(k) for k in keywords) if isinstance(keywords, list) else (),
    )


def _text(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value)


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return default
