from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.

    Rules:
    - A PostgreSQL URL must be configured.
    - STORAGE_BACKEND=supabase requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.
    - IMPORT_CSV_DELIMITER, when set, must be a single character.
    """

    from db.config import load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    try:
        database_url = resolve_database_url()
    except RuntimeError as exc:
        errors.append(str(exc))
    else:
        if not database_url.startswith("postgresql"):
            errors.append("Database URL must point at PostgreSQL.")

    # --- Storage --------------------------------------------------------
    backend = os.getenv("STORAGE_BACKEND", "local").strip().lower() or "local"
    if backend not in {"local", "supabase"}:
        errors.append(
            f"STORAGE_BACKEND='{backend}' is not valid. Allowed values: ['local', 'supabase']."
        )
    elif backend == "supabase":
        for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"):
            if not os.getenv(name, "").strip():
                errors.append(f"{name} is required when STORAGE_BACKEND=supabase.")

    # --- CSV delimiter --------------------------------------------------
    delimiter = os.getenv("IMPORT_CSV_DELIMITER")
    if delimiter is not None and len(delimiter.strip()) > 1:
        errors.append("IMPORT_CSV_DELIMITER must be a single character.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the DB is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


def _check_schema() -> None:
    """
    Every table registered on Base.metadata must exist in the database.

    Does NOT auto-migrate.
    """
    from sqlalchemy import inspect as sa_inspect

    import db.models  # noqa: F401  - registers all ORM models on Base.metadata
    from db.base import Base
    from db.session import get_engine

    inspector = sa_inspect(get_engine())
    actual: set[str] = set(inspector.get_table_names())
    expected: set[str] = set(Base.metadata.tables.keys())
    missing = expected - actual

    if missing:
        logging.getLogger(__name__).critical(
            "Schema mismatch, %d table(s) absent from the database: %s. "
            "Run 'alembic upgrade head' and restart.",
            len(missing),
            ", ".join(sorted(missing)),
        )
        raise RuntimeError(
            f"Schema mismatch: {len(missing)} table(s) missing from the database "
            f"({', '.join(sorted(missing))}). Run migrations and restart."
        )


def _build_lifespan(*, run_checks: bool):
    @asynccontextmanager
    async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
        """Validate DB connectivity and schema on boot; release storage connections on shutdown."""
        from app.storage import close_blob_store

        if run_checks:
            _check_db()
            logging.getLogger(__name__).info("Database connectivity confirmed")
            _check_schema()
            logging.getLogger(__name__).info("Database schema validated")
        try:
            yield
        finally:
            close_blob_store()

    return _lifespan


def create_app(*, validate_env: bool = True, lifespan_checks: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    if validate_env:
        _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Financial Import API",
        version="1.0.0",
        lifespan=_build_lifespan(run_checks=lifespan_checks),
    )

    from app.api.routers import import_jobs_router

    application.include_router(import_jobs_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application
