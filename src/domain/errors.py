"""Error taxonomy for the finance core.

Every failure a caller can observe is a ``FinanceError``. Adapters translate
driver exceptions into these types so use cases never see SQLAlchemy or OS
errors directly.
"""


class FinanceError(Exception):
    """Base class for finance core failures."""


class InvalidInput(FinanceError):
    """A draft failed local validation; nothing reached the store."""


class InvalidAmount(InvalidInput):
    """The amount is missing, malformed, or not strictly positive."""


class MissingField(InvalidInput):
    """A required text field is empty."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class NotAuthenticated(FinanceError):
    """No user is signed in."""

    def __init__(self, message: str = "Not signed in.") -> None:
        super().__init__(message)


class BlobUploadFailed(FinanceError):
    """The receipt attachment could not be stored."""


class PersistenceFailed(FinanceError):
    """The record store rejected a read or a write."""


class RecordDecodeError(PersistenceFailed):
    """A stored row does not match the transaction schema."""


class SubscriptionFailed(FinanceError):
    """A live subscription could not be established or broke."""


__all__ = [
    "FinanceError",
    "InvalidInput",
    "InvalidAmount",
    "MissingField",
    "NotAuthenticated",
    "BlobUploadFailed",
    "PersistenceFailed",
    "RecordDecodeError",
    "SubscriptionFailed",
]
