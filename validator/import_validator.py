"""
validator/import_validator.py — validation d'un payload d'import de norme.

validate_import(payload, existing_ids=()) -> ImportValidation

Étapes :
  A — syntaxe            (JSON analysable, objet à la racine)
  B — métadonnées        (metadata.id, metadata.name, metadata.domain)
  C — règles             (tableau non vide, titre/article/content, ids uniques)
  D — schéma JSON        (types des champs ; avertissements seulement)
  E — avertissements     (norme déjà présente, sommaire absent, règles vides)

Seules les erreurs rejettent l'import ; les avertissements sont informatifs.
Une entrée invalide n'est jamais signalée par une exception.
"""

from __future__ import annotations

import json
from collections.abc import Collection
from typing import Any

import jsonschema

from .normalizer import normalize_rules, rule_id
from .types import (
    ErrorCode,
    ImportPreview,
    ImportValidation,
    ValidationError,
)

# Au-delà, les règles suivantes ne sont plus examinées
MAX_ERRORS = 20

PREVIEW_SIZE = 3

REQUIRED_METADATA = ("id", "name", "domain")

RULE_TEXT_FIELDS = ("titre", "article", "content")

# Schéma des types attendus. Pas de "required" : les champs obligatoires sont
# vérifiés aux étapes B et C avec des messages dédiés.
PAYLOAD_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "metadata": {
            "type": "object",
            "properties": {
                "id":          {"type": "string"},
                "name":        {"type": "string"},
                "description": {"type": "string"},
                "version":     {"type": ["string", "number"]},
                "country":     {"type": "string"},
                "domain":      {"type": "string"},
            },
        },
        "sommaire": {"type": "array", "items": {"$ref": "#/$defs/tocNode"}},
        "rules": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id":       {"type": ["string", "number"]},
                    "titre":    {"type": "string"},
                    "article":  {"type": ["string", "number"]},
                    "content":  {"type": "string"},
                    "page":     {"type": "integer", "minimum": 0},
                    "category": {"type": "string"},
                    "keywords": {"type": "array", "items": {"type": "string"}},
                },
            },
        },
    },
    "$defs": {
        "tocNode": {
            "type": "object",
            "properties": {
                "index":    {"type": ["string", "number"]},
                "label":    {"type": "string"},
                "level":    {"type": "integer"},
                "children": {"type": "array", "items": {"$ref": "#/$defs/tocNode"}},
            },
        },
    },
}

_SCHEMA_VALIDATOR = jsonschema.Draft202012Validator(PAYLOAD_SCHEMA)


# ---------------------------------------------------------------------------
# API publique
# ---------------------------------------------------------------------------

def parse_payload(payload: str | bytes | dict[str, Any]) -> tuple[Any, ValidationError | None]:
    """Décode un payload JSON ; retourne (données, erreur éventuelle)."""
    if isinstance(payload, (str, bytes)):
        try:
            return json.loads(payload), None
        except json.JSONDecodeError as exc:
            return None, ValidationError(
                code=ErrorCode.JSON_INVALID,
                path="",
                message=f"JSON invalide: {exc.msg} (ligne {exc.lineno}, colonne {exc.colno})",
            )
        except UnicodeDecodeError as exc:
            return None, ValidationError(
                code=ErrorCode.JSON_INVALID,
                path="",
                message=f"JSON invalide: encodage non reconnu (octet {exc.start})",
            )
    return payload, None


def validate_import(
    payload: str | bytes | dict[str, Any],
    existing_ids: Collection[str] = (),
) -> ImportValidation:
    """
    Valide un payload d'import et retourne ImportValidation.

    Args:
        payload:      chaîne JSON ou dictionnaire déjà décodé
        existing_ids: identifiants des normes déjà chargées (avertissement de remplacement)
    """
    data, parse_error = parse_payload(payload)
    if parse_error is not None:
        return ImportValidation(valid=False, errors=[parse_error])

    if not isinstance(data, dict):
        return ImportValidation(valid=False, errors=[ValidationError(
            code=ErrorCode.PAYLOAD_NOT_OBJECT,
            path="",
            message="Le contenu doit être un objet JSON",
        )])

    errors: list[ValidationError] = []
    warnings: list[str] = []

    # B — métadonnées
    _stage_metadata(data, errors, warnings, existing_ids)

    # C — règles
    _stage_rules(data, errors, warnings)

    # D — schéma (uniquement si la structure est correcte)
    if not errors:
        _stage_schema(data, warnings)

    # E — sommaire
    sommaire = data.get("sommaire")
    if not isinstance(sommaire, list) or not sommaire:
        warnings.append("Pas de sommaire fourni - la navigation hiérarchique sera limitée")

    if errors:
        return ImportValidation(valid=False, errors=errors, warnings=warnings)

    metadata = data["metadata"]
    rules = data["rules"]
    sample = normalize_rules(rules[:PREVIEW_SIZE], str(metadata["id"]))
    return ImportValidation(
        valid=True,
        errors=[],
        warnings=warnings,
        preview=ImportPreview(
            name=str(metadata["name"]),
            rule_count=len(rules),
            sample_rules=sample,
        ),
    )


# ---------------------------------------------------------------------------
# Étapes
# ---------------------------------------------------------------------------

def _stage_metadata(
    data: dict[str, Any],
    errors: list[ValidationError],
    warnings: list[str],
    existing_ids: Collection[str],
) -> None:
    metadata = data.get("metadata")
    if not isinstance(metadata, dict):
        errors.append(ValidationError(
            code=ErrorCode.METADATA_MISSING,
            path="/metadata",
            message='Champ "metadata" manquant',
        ))
        return

    for key in REQUIRED_METADATA:
        if _is_blank(metadata.get(key)):
            errors.append(ValidationError(
                code=ErrorCode.METADATA_FIELD_MISSING,
                path=f"/metadata/{key}",
                message=f"metadata.{key} est requis",
            ))

    corpus_id = metadata.get("id")
    if not _is_blank(corpus_id) and str(corpus_id) in existing_ids:
        warnings.append(f'La norme "{corpus_id}" existe déjà et sera remplacée')


def _stage_rules(
    data: dict[str, Any],
    errors: list[ValidationError],
    warnings: list[str],
) -> None:
    rules = data.get("rules")
    if not isinstance(rules, list):
        errors.append(ValidationError(
            code=ErrorCode.RULES_MISSING,
            path="/rules",
            message='Champ "rules" manquant ou invalide (doit être un tableau)',
        ))
        return

    if not rules:
        errors.append(ValidationError(
            code=ErrorCode.RULES_EMPTY,
            path="/rules",
            message='Le tableau "rules" est vide',
        ))
        return

    metadata = data.get("metadata")
    corpus_id = str(metadata["id"]) if isinstance(metadata, dict) and not _is_blank(metadata.get("id")) else ""
    first_index: dict[str, int] = {}

    empty_content = 0
    for i, rule in enumerate(rules):
        if len(errors) >= MAX_ERRORS:
            break
        if not isinstance(rule, dict):
            errors.append(ValidationError(
                code=ErrorCode.RULE_NOT_OBJECT,
                path=f"/rules/{i}",
                message=f"La règle {i + 1} n'est pas un objet",
            ))
            continue
        if all(_is_blank(rule.get(f)) for f in RULE_TEXT_FIELDS):
            errors.append(ValidationError(
                code=ErrorCode.RULE_WITHOUT_TEXT,
                path=f"/rules/{i}",
                message=f"La règle {i + 1} doit avoir au moins titre, article ou content",
            ))
        # ids effectifs : explicites ou synthétisés comme à la normalisation
        rid = rule_id(rule, i + 1, corpus_id)
        if rid in first_index:
            errors.append(ValidationError(
                code=ErrorCode.RULE_DUPLICATE_ID,
                path=f"/rules/{i}/id",
                message=f'Identifiant "{rid}" en double (règles {first_index[rid]} et {i + 1})',
            ))
        else:
            first_index[rid] = i + 1
        if _is_blank(rule.get("content")):
            empty_content += 1

    if empty_content:
        warnings.append(f"{empty_content} règle(s) sans contenu détecté(s)")


def _stage_schema(data: dict[str, Any], warnings: list[str]) -> None:
    schema_errors = sorted(
        _SCHEMA_VALIDATOR.iter_errors(data),
        key=lambda e: e.json_path,
    )
    for e in schema_errors[:MAX_ERRORS]:
        path = "/" + "/".join(str(p) for p in e.absolute_path)
        warnings.append(f"Type inattendu en {path} : {e.message}")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
