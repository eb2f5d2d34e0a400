"""Application port for the signed-in user."""

from typing import Protocol


class IdentityPort(Protocol):
    """Port exposing the current user identifier."""

    def current_user_id(self) -> str | None:
        """Return the signed-in user id, or None when signed out."""


__all__ = ["IdentityPort"]
