"""
Local filesystem blob store for uploaded import files.
"""

from __future__ import annotations

from pathlib import Path

from app.errors import BlobDownloadError, BlobNotFoundError


class LocalBlobStore:
    """
    Reads blobs stored below a root directory.

    Storage paths are relative; paths that escape the root are rejected.
    """

    def __init__(self, root_dir: str | Path = "data/uploads") -> None:
        self._root_dir = Path(root_dir)

    def download(self, path: str) -> bytes:
        target = self._resolve(path)
        if not target.is_file():
            raise BlobNotFoundError(
                f"File '{path}' was not found in storage.",
                details={"storage_path": path},
            )
        try:
            return target.read_bytes()
        except OSError as exc:
            raise BlobDownloadError(
                f"Failed to read file '{path}' from storage.",
                details={"storage_path": path},
            ) from exc

    def _resolve(self, path: str) -> Path:
        root = self._root_dir.resolve()
        target = (root / path.strip().lstrip("/")).resolve()
        if target != root and root not in target.parents:
            raise BlobNotFoundError(
                f"File '{path}' was not found in storage.",
                details={"storage_path": path},
            )
        return target
