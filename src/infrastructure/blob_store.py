"""Filesystem-backed receipt storage."""

import mimetypes
from pathlib import Path

from src.application.ports.blob_store import BlobStorePort
from src.domain.errors import BlobUploadFailed
from src.infrastructure.logging.logger import get_app_logger


class LocalBlobStore(BlobStorePort):
    """Store attachments as ``<root>/<owner>/<record_id><ext>`` files."""

    def __init__(self, root: Path, logger=None) -> None:
        """Initialize the store.

        Args:
            root: Directory receiving attachments.
            logger: Optional logger compatible with logging.Logger-like API.
        """
        self._root = Path(root)
        self._logger = logger or get_app_logger()

    def upload(
        self,
        owner_id: str,
        record_id: str,
        data: bytes,
        content_type: str,
    ) -> str:
        if not data:
            raise BlobUploadFailed("Attachment is empty")
        target = self._root / self._safe_segment(owner_id) / (
            self._safe_segment(record_id) + self._extension(content_type)
        )
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise BlobUploadFailed(
                f"Could not store attachment for {record_id}: {exc}"
            ) from exc
        self._logger.info(f"Stored {len(data)} byte attachment at {target}")
        return target.resolve().as_uri()

    @staticmethod
    def _extension(content_type: str) -> str:
        if content_type == "image/jpeg":
            return ".jpg"
        return mimetypes.guess_extension(content_type) or ".bin"

    @staticmethod
    def _safe_segment(value: str) -> str:
        cleaned = "".join(
            char if char.isalnum() or char in "-_" else "_" for char in value
        )
        if not cleaned:
            raise BlobUploadFailed(f"Invalid path segment: {value!r}")
        return cleaned


__all__ = ["LocalBlobStore"]
