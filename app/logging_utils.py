"""
Structured logging helpers for import job lifecycle events.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from app.domain.import_job import ImportJobSnapshot


def log_job_event(
    logger: logging.Logger,
    level: int,
    event: str,
    job: ImportJobSnapshot,
    **fields: Any,
) -> None:
    """
    Emit one compact JSON line tagged with the job's id, company and kind.

    Fields whose value is None are left out.
    """

    if not logger.isEnabledFor(level):
        return

    payload: dict[str, Any] = {
        "event": event,
        "job_id": job.id,
        "company_id": job.company_id,
        "kind": job.kind,
    }
    payload.update({key: value for key, value in fields.items() if value is not None})
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
