from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from app.config import get_import_settings, get_storage_settings
from db.config import normalize_postgres_url


class TestImportSettings(unittest.TestCase):
    def setUp(self) -> None:
        get_import_settings.cache_clear()
        get_storage_settings.cache_clear()

    def tearDown(self) -> None:
        get_import_settings.cache_clear()
        get_storage_settings.cache_clear()

    def test_reads_limits_from_environment(self) -> None:
        env = {
            "IMPORT_CSV_DELIMITER": ";",
            "IMPORT_MAX_ROWS": "250",
            "IMPORT_MAX_SUMMARY_ERRORS": "not-a-number",
            "IMPORT_LOG_VALIDATION_ERRORS": "false",
        }
        with patch.dict(os.environ, env):
            settings = get_import_settings()

        self.assertEqual(settings.csv_delimiter, ";")
        self.assertEqual(settings.max_rows, 250)
        self.assertEqual(settings.max_summary_errors, 500)
        self.assertFalse(settings.log_validation_errors)

    def test_unknown_storage_backend_is_rejected(self) -> None:
        with patch.dict(os.environ, {"STORAGE_BACKEND": "ftp"}):
            with self.assertRaises(RuntimeError):
                get_storage_settings()

    def test_supabase_backend_settings(self) -> None:
        env = {
            "STORAGE_BACKEND": "Supabase",
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_SERVICE_ROLE_KEY": "key",
            "STORAGE_BUCKET": "uploads",
        }
        with patch.dict(os.environ, env):
            settings = get_storage_settings()

        self.assertEqual(settings.backend, "supabase")
        self.assertEqual(settings.bucket, "uploads")
        self.assertEqual(settings.supabase_service_key, "key")


class TestDatabaseUrl(unittest.TestCase):
    def test_bare_postgres_urls_use_psycopg_driver(self) -> None:
        self.assertEqual(
            normalize_postgres_url("postgres://user:pw@host:5432/db"),
            "postgresql+psycopg://user:pw@host:5432/db",
        )
        self.assertEqual(
            normalize_postgres_url("postgresql+psycopg://host/db"),
            "postgresql+psycopg://host/db",
        )


if __name__ == "__main__":
    unittest.main()
