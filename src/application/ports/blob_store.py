"""Application port for receipt attachment storage."""

from typing import Protocol


class BlobStorePort(Protocol):
    """Port storing binary attachments and returning their URL."""

    def upload(
        self,
        owner_id: str,
        record_id: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """Store ``data`` and return a URL pointing to it.

        Raises:
            BlobUploadFailed: When the blob cannot be stored.
        """


__all__ = ["BlobStorePort"]
