"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

_ALLOWED_STORAGE_BACKENDS = {"local", "supabase"}


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class ImportSettings:
    """
    Runtime settings for file parsing and summary reporting.
    """

    csv_delimiter: str = ","
    max_file_bytes: int = 10 * 1024 * 1024
    max_rows: int = 10_000
    max_summary_errors: int = 500
    log_validation_errors: bool = True


@dataclass(frozen=True)
class StorageSettings:
    """
    Where uploaded files are downloaded from.

    ``backend`` is ``local`` (filesystem root) or ``supabase`` (Storage REST API).
    """

    backend: str = "local"
    local_root: str = "data/uploads"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    bucket: str = "import-files"
    timeout_seconds: float = 15.0
    max_retries: int = 3
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Return cached import settings from environment variables.
    """

    delimiter = _get_str_env("IMPORT_CSV_DELIMITER", ",")
    return ImportSettings(
        csv_delimiter=delimiter[0],
        max_file_bytes=max(1, _get_int_env("IMPORT_MAX_FILE_BYTES", 10 * 1024 * 1024)),
        max_rows=max(1, _get_int_env("IMPORT_MAX_ROWS", 10_000)),
        max_summary_errors=max(1, _get_int_env("IMPORT_MAX_SUMMARY_ERRORS", 500)),
        log_validation_errors=_get_bool_env("IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_storage_settings() -> StorageSettings:
    """
    Return cached storage settings from environment variables.

    Raises RuntimeError when STORAGE_BACKEND names an unknown backend.
    """

    backend = _get_str_env("STORAGE_BACKEND", "local").lower()
    if backend not in _ALLOWED_STORAGE_BACKENDS:
        raise RuntimeError(
            f"STORAGE_BACKEND '{backend}' is not valid. "
            f"Allowed values: {sorted(_ALLOWED_STORAGE_BACKENDS)}."
        )

    return StorageSettings(
        backend=backend,
        local_root=_get_str_env("STORAGE_LOCAL_ROOT", "data/uploads"),
        supabase_url=_get_optional_str_env("SUPABASE_URL"),
        supabase_service_key=_get_optional_str_env("SUPABASE_SERVICE_ROLE_KEY"),
        bucket=_get_str_env("STORAGE_BUCKET", "import-files"),
        timeout_seconds=max(1.0, _get_float_env("STORAGE_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("STORAGE_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("STORAGE_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("STORAGE_HTTP_BACKOFF_MULTIPLIER", 2.0)),
    )
