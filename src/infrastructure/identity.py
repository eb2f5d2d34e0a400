"""Identity provider holding the signed-in user."""

import threading

from src.application.ports.identity import IdentityPort


class SessionIdentityProvider(IdentityPort):
    """Mutable session state standing in for the auth service."""

    def __init__(self, user_id: str | None = None) -> None:
        self._lock = threading.Lock()
        self._user_id = user_id or None

    def current_user_id(self) -> str | None:
        with self._lock:
            return self._user_id

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id must not be empty")
        with self._lock:
            self._user_id = user_id

    def sign_out(self) -> None:
        with self._lock:
            self._user_id = None


__all__ = ["SessionIdentityProvider"]
