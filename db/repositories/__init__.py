"""
Repository layer exports.
"""

from db.repositories.import_job_repository import ImportJobRepository

__all__ = ["ImportJobRepository"]
