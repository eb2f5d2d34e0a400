"""Tests for the filesystem blob store."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.domain.errors import BlobUploadFailed
from src.infrastructure.blob_store import LocalBlobStore


def test_upload_writes_file_and_returns_uri(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path, logger=MagicMock())

    url = store.upload("user-1", "rec-1", b"jpeg-bytes", "image/jpeg")

    target = tmp_path / "user-1" / "rec-1.jpg"
    assert target.read_bytes() == b"jpeg-bytes"
    assert url == target.resolve().as_uri()


def test_upload_sanitizes_path_segments(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path, logger=MagicMock())

    store.upload("../evil", "rec/1", b"data", "application/x-finguard")

    assert (tmp_path / "___evil" / "rec_1.bin").exists()


def test_empty_attachment_is_rejected(tmp_path: Path) -> None:
    store = LocalBlobStore(tmp_path, logger=MagicMock())

    with pytest.raises(BlobUploadFailed):
        store.upload("user-1", "rec-1", b"", "image/jpeg")


def test_write_errors_become_upload_failures(tmp_path: Path) -> None:
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")
    store = LocalBlobStore(blocker, logger=MagicMock())

    with pytest.raises(BlobUploadFailed):
        store.upload("user-1", "rec-1", b"data", "image/jpeg")
