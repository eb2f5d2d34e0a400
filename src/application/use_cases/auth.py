"""Helpers shared by use cases that act on behalf of a user."""

from src.application.ports.identity import IdentityPort
from src.domain.errors import NotAuthenticated


def require_user_id(identity: IdentityPort) -> str:
    """Return the signed-in user id.

    Raises:
        NotAuthenticated: When nobody is signed in.
    """
    user_id = identity.current_user_id()
    if not user_id:
        raise NotAuthenticated()
    return user_id


__all__ = ["require_user_id"]
