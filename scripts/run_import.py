"""
Run one pending import job from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import uuid

from app.errors import JobNotRunnableError
from app.services.import_orchestrator_service import run_import_job
from db.models.import_job import ImportJobStatus


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a pending financial data import job.")
    parser.add_argument("job_id", type=uuid.UUID, help="ID of the import job to run.")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    try:
        result = run_import_job(args.job_id)
    except JobNotRunnableError as exc:
        print(json.dumps({"job_id": str(args.job_id), "error": str(exc)}, indent=2))
        return 2

    print(json.dumps(result.to_dict(), indent=2))
    return 0 if result.status == ImportJobStatus.DONE else 1


if __name__ == "__main__":
    raise SystemExit(main())
