"""
app/storage package marker.
"""

from __future__ import annotations

import threading

from app.config import StorageSettings, get_storage_settings
from app.domain.ports import BlobStore
from app.storage.local import LocalBlobStore
from app.storage.supabase import SupabaseBlobStore

_shared_store: BlobStore | None = None
_shared_store_lock = threading.Lock()


def build_blob_store(settings: StorageSettings | None = None) -> BlobStore:
    """
    Build the blob store selected by STORAGE_BACKEND.
    """

    resolved = settings or get_storage_settings()
    if resolved.backend == "supabase":
        return SupabaseBlobStore(settings=resolved)
    return LocalBlobStore(resolved.local_root)


def get_blob_store() -> BlobStore:
    """
    Return the process-wide blob store, building it on first call.
    """

    global _shared_store
    with _shared_store_lock:
        if _shared_store is None:
            _shared_store = build_blob_store()
        return _shared_store


def close_blob_store() -> None:
    """
    Release the shared store's HTTP connections; the next call rebuilds it.
    """

    global _shared_store
    with _shared_store_lock:
        store, _shared_store = _shared_store, None
    if isinstance(store, SupabaseBlobStore):
        store.close()


__all__ = [
    "LocalBlobStore",
    "SupabaseBlobStore",
    "build_blob_store",
    "close_blob_store",
    "get_blob_store",
]
