"""Tests for the SubmitTransactionUseCase."""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from decimal import Decimal
import threading
from unittest.mock import MagicMock

import pytest

from src.application.use_cases.submit_transaction import (
    SubmitTransactionUseCase,
)
from src.domain.errors import (
    BlobUploadFailed,
    InvalidAmount,
    MissingField,
    NotAuthenticated,
    PersistenceFailed,
)
from src.domain.models import TransactionDraft, TransactionKind
from src.infrastructure.identity import SessionIdentityProvider


class FakeRepository:
    """Repository double recording created records."""

    def __init__(self, fail: bool = False, gate=None) -> None:
        self.records = []
        self._fail = fail
        self._gate = gate
        self._counter = 0

    def new_id(self) -> str:
        self._counter += 1
        return f"rec-{self._counter}"

    def create(self, record) -> str:
        if self._gate is not None:
            self._gate.wait(timeout=5)
        if self._fail:
            raise PersistenceFailed("store offline")
        self.records.append(record)
        return record.id


class FakeBlobStore:
    """Blob store double returning predictable URLs."""

    def __init__(self, fail: bool = False, gate=None) -> None:
        self.uploads = []
        self._fail = fail
        self._gate = gate

    def upload(self, owner_id, record_id, data, content_type) -> str:
        if self._gate is not None:
            self._gate.wait(timeout=5)
        if self._fail:
            raise BlobUploadFailed("bucket unavailable")
        self.uploads.append((owner_id, record_id, data, content_type))
        return f"https://blobs.example/{owner_id}/{record_id}.jpg"


def _draft(**overrides) -> TransactionDraft:
    values = {
        "kind": TransactionKind.INCOME,
        "amount": "1000",
        "category": "Salary",
        "account": "Bank",
        "occurred_at": datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return TransactionDraft(**values)


def _use_case(
    repository=None,
    blob_store=None,
    user_id="user-1",
    timeout=2.0,
    executor=None,
    logger=None,
    tz=timezone.utc,
):
    return SubmitTransactionUseCase(
        repository=repository or FakeRepository(),
        blob_store=blob_store or FakeBlobStore(),
        identity=SessionIdentityProvider(user_id),
        logger=logger or MagicMock(),
        timeout_seconds=timeout,
        tz=tz,
        executor=executor,
    )


def test_submit_persists_record_without_attachment() -> None:
    repository = FakeRepository()
    blob_store = FakeBlobStore()
    use_case = _use_case(repository=repository, blob_store=blob_store)

    result = use_case.submit(_draft())

    assert result.transaction_id == "rec-1"
    assert result.attachment_url is None
    assert len(repository.records) == 1
    stored = repository.records[0]
    assert stored.user_id == "user-1"
    assert stored.amount == Decimal("1000")
    assert blob_store.uploads == []


def test_submit_stores_expenses_as_positive_magnitude() -> None:
    """Expenses keep a positive amount; only the kind marks direction."""
    repository = FakeRepository()
    use_case = _use_case(repository=repository)

    use_case.submit(_draft(kind=TransactionKind.EXPENSE, amount="300"))

    assert repository.records[0].amount == Decimal("300")
    assert repository.records[0].signed_amount == Decimal("-300")


def test_submit_uploads_attachment_before_persisting() -> None:
    repository = FakeRepository()
    blob_store = FakeBlobStore()
    use_case = _use_case(repository=repository, blob_store=blob_store)

    result = use_case.submit(_draft(attachment=b"jpeg-bytes"))

    assert blob_store.uploads == [
        ("user-1", "rec-1", b"jpeg-bytes", "image/jpeg")
    ]
    expected_url = "https://blobs.example/user-1/rec-1.jpg"
    assert result.attachment_url == expected_url
    assert repository.records[0].attachment_url == expected_url


def test_submit_rejects_signed_out_user_before_io() -> None:
    repository = MagicMock()
    use_case = _use_case(repository=repository, user_id=None)

    with pytest.raises(NotAuthenticated):
        use_case.submit(_draft())

    repository.new_id.assert_not_called()
    repository.create.assert_not_called()


@pytest.mark.parametrize(
    ("overrides", "error"),
    [
        ({"amount": "0"}, InvalidAmount),
        ({"amount": "abc"}, InvalidAmount),
        ({"category": ""}, MissingField),
        ({"account": " "}, MissingField),
    ],
)
def test_submit_rejects_invalid_drafts_before_io(overrides, error) -> None:
    repository = MagicMock()
    blob_store = MagicMock()
    use_case = _use_case(repository=repository, blob_store=blob_store)

    with pytest.raises(error):
        use_case.submit(_draft(attachment=b"x", **overrides))

    repository.new_id.assert_not_called()
    blob_store.upload.assert_not_called()


def test_upload_failure_creates_no_record() -> None:
    repository = FakeRepository()
    use_case = _use_case(
        repository=repository,
        blob_store=FakeBlobStore(fail=True),
    )

    with pytest.raises(BlobUploadFailed):
        use_case.submit(_draft(attachment=b"jpeg"))

    assert repository.records == []


def test_upload_timeout_surfaces_blob_upload_failed() -> None:
    gate = threading.Event()
    repository = FakeRepository()
    use_case = _use_case(
        repository=repository,
        blob_store=FakeBlobStore(gate=gate),
        timeout=0.05,
    )

    try:
        with pytest.raises(BlobUploadFailed):
            use_case.submit(_draft(attachment=b"jpeg"))
    finally:
        gate.set()

    assert repository.records == []


def test_persistence_failure_after_upload_reports_orphan() -> None:
    logger = MagicMock()
    use_case = _use_case(
        repository=FakeRepository(fail=True),
        logger=logger,
    )

    with pytest.raises(PersistenceFailed):
        use_case.submit(_draft(attachment=b"jpeg"))

    warnings = [call.args[0] for call in logger.warning.call_args_list]
    assert any("orphaned" in message for message in warnings)


def test_persistence_timeout_does_not_cancel_the_write() -> None:
    """A timed-out caller stops waiting, but the write still completes."""
    gate = threading.Event()
    repository = FakeRepository(gate=gate)
    executor = ThreadPoolExecutor(max_workers=1)
    use_case = _use_case(
        repository=repository,
        timeout=0.05,
        executor=executor,
    )

    with pytest.raises(PersistenceFailed):
        use_case.submit(_draft())

    assert repository.records == []
    gate.set()
    executor.shutdown(wait=True)
    assert [record.id for record in repository.records] == ["rec-1"]


def test_submit_applies_canonical_timezone_to_naive_dates() -> None:
    plus_one = timezone(timedelta(hours=1))
    repository = FakeRepository()
    use_case = _use_case(repository=repository, tz=plus_one)

    use_case.submit(_draft(occurred_at=datetime(2024, 3, 31, 23, 30)))

    assert repository.records[0].occurred_at.tzinfo is plus_one
