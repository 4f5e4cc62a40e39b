"""
validator/types.py — codes d'erreur et structures du rapport de validation.

ValidationError  — une erreur avec code, chemin JSON Pointer et message.
ImportPreview    — aperçu de la norme (nom, nombre de règles, 3 règles).
ImportValidation — résultat : valid, errors, warnings, preview optionnel.
ImportOutcome    — résultat d'un import : success, corpus_id ou error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from data_model import Rule


class ErrorCode(StrEnum):
    """Codes d'erreur stables du validateur d'import."""

    # A — syntaxe / forme générale
    JSON_INVALID           = "E_JSON_INVALID"
    PAYLOAD_NOT_OBJECT     = "E_PAYLOAD_NOT_OBJECT"

    # B — métadonnées
    METADATA_MISSING       = "E_METADATA_MISSING"
    METADATA_FIELD_MISSING = "E_METADATA_FIELD_MISSING"

    # C — règles
    RULES_MISSING          = "E_RULES_MISSING"
    RULES_EMPTY            = "E_RULES_EMPTY"
    RULE_NOT_OBJECT        = "E_RULE_NOT_OBJECT"
    RULE_WITHOUT_TEXT      = "E_RULE_WITHOUT_TEXT"
    RULE_DUPLICATE_ID      = "E_RULE_DUPLICATE_ID"


@dataclass(slots=True)
class ValidationError:
    """
    Erreur de validation unique.

    - code:    identifiant stable de la classe d'erreur (ErrorCode)
    - path:    JSON Pointer vers l'emplacement fautif, p. ex. "/rules/3"
    - message: description lisible (en français)
    """

    code: ErrorCode
    path: str
    message: str


@dataclass(slots=True)
class ImportPreview:
    name: str
    rule_count: int
    sample_rules: list[Rule] = field(default_factory=list)


@dataclass(slots=True)
class ImportValidation:
    """
    Résultat de la validation d'un import de norme.

    - valid:    True lorsqu'il n'y a aucune erreur (les avertissements n'influent pas)
    - errors:   erreurs bloquantes (ValidationError)
    - warnings: avertissements (str)
    - preview:  aperçu, seulement si valid
    """

    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    preview: ImportPreview | None = None

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]


@dataclass(slots=True)
class ImportOutcome:
    success: bool
    corpus_id: str | None = None
    error: str | None = None
