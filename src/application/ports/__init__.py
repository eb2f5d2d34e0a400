"""Application ports package."""

from .blob_store import BlobStorePort
from .database import DatabaseEnginePort
from .identity import IdentityPort
from .transaction_repository import (
    ErrorCallback,
    Snapshot,
    SnapshotCallback,
    SubscriptionHandle,
    TransactionRepositoryPort,
)

__all__ = [
    "BlobStorePort",
    "DatabaseEnginePort",
    "IdentityPort",
    "ErrorCallback",
    "Snapshot",
    "SnapshotCallback",
    "SubscriptionHandle",
    "TransactionRepositoryPort",
]
