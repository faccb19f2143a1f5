"""
app/storage/supabase.py

Blob store backed by the Supabase Storage REST API.
"""

from __future__ import annotations

import logging
import time
from urllib.parse import quote

import requests

from app.config import StorageSettings
from app.errors import BlobDownloadError, BlobNotFoundError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
NOT_FOUND_STATUS_CODES = {400, 404}


class SupabaseBlobStore:
    """
    Downloads objects from one bucket with retry and exponential backoff.

    Supabase answers 400 with a "not_found" body for missing objects, so both
    400 and 404 map to BlobNotFoundError.
    """

    def __init__(
        self,
        *,
        settings: StorageSettings,
        session: requests.Session | None = None,
    ) -> None:
        if not settings.supabase_url or not settings.supabase_service_key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for the supabase storage backend."
            )
        self._base_url = settings.supabase_url.rstrip("/")
        self._service_key = settings.supabase_service_key
        self._bucket = settings.bucket
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout_seconds = settings.timeout_seconds
        self._max_retries = settings.max_retries
        self._backoff_initial_seconds = settings.backoff_initial_seconds
        self._backoff_multiplier = settings.backoff_multiplier

    def close(self) -> None:
        """Close the HTTP session when this store created it."""
        if self._owns_session:
            self._session.close()

    def object_url(self, path: str) -> str:
        object_path = quote(path.strip().lstrip("/"), safe="/")
        return f"{self._base_url}/storage/v1/object/{self._bucket}/{object_path}"

    def download(self, path: str) -> bytes:
        url = self.object_url(path)
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "apikey": self._service_key,
        }

        last_error: Exception | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.get(url, headers=headers, timeout=self._timeout_seconds)
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
            else:
                if response.status_code in NOT_FOUND_STATUS_CODES:
                    raise BlobNotFoundError(
                        f"File '{path}' was not found in storage.",
                        details={"storage_path": path, "status_code": response.status_code},
                    )
                if response.status_code not in RETRYABLE_STATUS_CODES:
                    if response.status_code >= 400:
                        logger.error(
                            "Storage download failed bucket=%s path=%s status=%s",
                            self._bucket,
                            path,
                            response.status_code,
                        )
                        raise BlobDownloadError(
                            f"Storage returned HTTP {response.status_code} for '{path}'.",
                            details={"storage_path": path, "status_code": response.status_code},
                        )
                    return response.content
                last_error = requests.HTTPError(
                    f"Retryable HTTP status code: {response.status_code}",
                    response=response,
                )

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Storage download retry bucket=%s path=%s attempt=%s/%s wait_seconds=%.2f",
                self._bucket,
                path,
                attempt + 1,
                self._max_retries,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)

        logger.error(
            "Storage download exhausted retries bucket=%s path=%s error=%s",
            self._bucket,
            path,
            last_error,
        )
        raise BlobDownloadError(
            f"Failed to download '{path}' from storage after retries.",
            details={"storage_path": path},
        ) from last_error
