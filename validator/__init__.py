"""
validator — validation et normalisation des imports de normes.

Interface publique :
    validate_import   — validation complète d'un payload (étapes A–E)
    parse_payload     — décodage JSON sans exception
    normalize_rules   — règles normalisées (id/article/page synthétisés)
    normalize_toc     — sommaire → arbre de TocNode
    ImportValidation, ImportPreview, ImportOutcome, ValidationError, ErrorCode

Utilisation typique :
    from validator import validate_import

    report = validate_import(Path("ns01001.json").read_text(encoding="utf-8"))
    if not report.valid:
        for e in report.errors:
            print(e.code, e.path, e.message)
"""

from .types import (
    ErrorCode,
    ImportOutcome,
    ImportPreview,
    ImportValidation,
    ValidationError,
)
from .normalizer import normalize_rules, normalize_toc
from .import_validator import PAYLOAD_SCHEMA, parse_payload, validate_import

__all__ = [
    "ErrorCode",
    "ImportOutcome",
    "ImportPreview",
    "ImportValidation",
    "ValidationError",
    "normalize_rules",
    "normalize_toc",
    "PAYLOAD_SCHEMA",
    "parse_payload",
    "validate_import",
]
