"""Database port for the transaction store.

Infrastructure implementations provide a SQLAlchemy engine; application code
depends only on this protocol.
"""

from typing import Protocol

from sqlalchemy.engine import Engine


class DatabaseEnginePort(Protocol):
    """Port exposing the engine backing the transaction store."""

    def get_engine(self) -> Engine:
        """Get the engine for the transactions database.

        Returns:
            Engine: SQLAlchemy engine connected to the store.
        """


__all__ = ["DatabaseEnginePort"]
