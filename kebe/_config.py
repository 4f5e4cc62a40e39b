"""Configuration de kebe — variables d'environnement lues à l'appel."""

from __future__ import annotations

import os
from pathlib import Path


def norms_dir() -> Path | None:
    """KEBE_NORMS_DIR : répertoire de normes *.json importées au démarrage."""
    value = os.getenv("KEBE_NORMS_DIR", "").strip()
    return Path(value) if value else None


def log_level() -> str:
    return os.getenv("KEBE_LOG_LEVEL", "WARNING").upper()


def page_size() -> int:
    return _int_env("KEBE_PAGE_SIZE", 50)


def qcm_count() -> int:
    return _int_env("KEBE_QCM_COUNT", 10)


def http_timeout() -> float:
    try:
        return float(os.getenv("KEBE_HTTP_TIMEOUT", "30"))
    except ValueError:
        return 30.0


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default
