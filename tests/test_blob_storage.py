"""
tests/test_blob_storage.py

Local filesystem and Supabase Storage blob stores.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from app.config import StorageSettings, get_storage_settings
from app.errors import BlobDownloadError, BlobNotFoundError
from app.storage import (
    LocalBlobStore,
    SupabaseBlobStore,
    build_blob_store,
    close_blob_store,
    get_blob_store,
)


def _response(status_code: int, content: bytes = b"") -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.content = content
    return response


@pytest.fixture()
def supabase_settings() -> StorageSettings:
    return StorageSettings(
        backend="supabase",
        supabase_url="https://project.supabase.co/",
        supabase_service_key="service-key",
        bucket="imports",
        max_retries=2,
        backoff_initial_seconds=0.1,
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    waits: list[float] = []
    monkeypatch.setattr("app.storage.supabase.time.sleep", waits.append)
    return waits


class TestLocalBlobStore:
    def test_reads_file_below_root(self, tmp_path: Path) -> None:
        target = tmp_path / "acme" / "2024" / "pyg.csv"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"anio,concepto_codigo,valor_total\n")

        store = LocalBlobStore(tmp_path)

        assert store.download("acme/2024/pyg.csv") == b"anio,concepto_codigo,valor_total\n"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(BlobNotFoundError) as exc_info:
            LocalBlobStore(tmp_path).download("acme/none.csv")
        assert exc_info.value.code == "file_not_found"

    def test_paths_cannot_escape_root(self, tmp_path: Path) -> None:
        root = tmp_path / "uploads"
        root.mkdir()
        (tmp_path / "secret.csv").write_bytes(b"x")

        with pytest.raises(BlobNotFoundError):
            LocalBlobStore(root).download("../secret.csv")


class TestSupabaseBlobStore:
    def test_downloads_with_service_key(self, supabase_settings: StorageSettings) -> None:
        session = MagicMock()
        session.get.return_value = _response(200, b"payload")
        store = SupabaseBlobStore(settings=supabase_settings, session=session)

        assert store.download("acme/pyg 2024.csv") == b"payload"

        url = session.get.call_args.args[0]
        headers = session.get.call_args.kwargs["headers"]
        assert url == "https://project.supabase.co/storage/v1/object/imports/acme/pyg%202024.csv"
        assert headers == {"Authorization": "Bearer service-key", "apikey": "service-key"}

    @pytest.mark.parametrize("status_code", [400, 404])
    def test_missing_object(self, status_code: int, supabase_settings: StorageSettings) -> None:
        session = MagicMock()
        session.get.return_value = _response(status_code)
        store = SupabaseBlobStore(settings=supabase_settings, session=session)

        with pytest.raises(BlobNotFoundError):
            store.download("acme/none.csv")
        assert session.get.call_count == 1

    def test_retries_transient_failures(
        self, supabase_settings: StorageSettings, no_sleep: list[float]
    ) -> None:
        session = MagicMock()
        session.get.side_effect = [
            _response(503),
            requests.ConnectionError("reset"),
            _response(200, b"ok"),
        ]
        store = SupabaseBlobStore(settings=supabase_settings, session=session)

        assert store.download("acme/pyg.csv") == b"ok"
        assert no_sleep == [0.1, 0.2]

    def test_gives_up_after_retries(self, supabase_settings: StorageSettings) -> None:
        session = MagicMock()
        session.get.side_effect = requests.Timeout("slow")
        store = SupabaseBlobStore(settings=supabase_settings, session=session)

        with pytest.raises(BlobDownloadError) as exc_info:
            store.download("acme/pyg.csv")

        assert not isinstance(exc_info.value, BlobNotFoundError)
        assert session.get.call_count == 3

    def test_permission_error_is_not_retried(self, supabase_settings: StorageSettings) -> None:
        session = MagicMock()
        session.get.return_value = _response(403)
        store = SupabaseBlobStore(settings=supabase_settings, session=session)

        with pytest.raises(BlobDownloadError) as exc_info:
            store.download("acme/pyg.csv")

        assert exc_info.value.details["status_code"] == 403
        assert session.get.call_count == 1

    def test_requires_credentials(self) -> None:
        with pytest.raises(RuntimeError):
            SupabaseBlobStore(settings=StorageSettings(backend="supabase"))


def test_factory_selects_backend(tmp_path: Path, supabase_settings: StorageSettings) -> None:
    assert isinstance(build_blob_store(StorageSettings(local_root=str(tmp_path))), LocalBlobStore)
    assert isinstance(build_blob_store(supabase_settings), SupabaseBlobStore)


class TestSessionLifecycle:
    def test_close_leaves_injected_session_open(self, supabase_settings: StorageSettings) -> None:
        session = MagicMock()
        SupabaseBlobStore(settings=supabase_settings, session=session).close()

        session.close.assert_not_called()

    def test_close_releases_owned_session(
        self, supabase_settings: StorageSettings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        session_cls = MagicMock()
        monkeypatch.setattr("app.storage.supabase.requests.Session", session_cls)

        SupabaseBlobStore(settings=supabase_settings).close()

        session_cls.return_value.close.assert_called_once_with()


class TestSharedBlobStore:
    @pytest.fixture(autouse=True)
    def supabase_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("STORAGE_BACKEND", "supabase")
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")
        session_cls = MagicMock()
        monkeypatch.setattr("app.storage.supabase.requests.Session", session_cls)
        get_storage_settings.cache_clear()
        close_blob_store()
        yield session_cls
        close_blob_store()
        get_storage_settings.cache_clear()

    def test_requests_share_one_store(self, supabase_env: MagicMock) -> None:
        first = get_blob_store()

        assert get_blob_store() is first
        assert supabase_env.call_count == 1

    def test_close_releases_session_and_next_call_rebuilds(self, supabase_env: MagicMock) -> None:
        first = get_blob_store()
        close_blob_store()

        supabase_env.return_value.close.assert_called_once_with()
        assert get_blob_store() is not first
