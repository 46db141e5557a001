"""Error taxonomy raised by the forum core.

None of these are retried internally; they are terminal decisions surfaced to
the orchestration layer, which decides how to present them.
"""

from __future__ import annotations


class ForumError(Exception):
    """Base class for every error raised by the core."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(ForumError):
    """An entity id or name does not exist."""


class ConflictError(ForumError):
    """A unique name (username, tag name) is already taken."""


class AuthFailureError(ForumError):
    """Credentials were rejected.

    Raised identically for unknown usernames and wrong passwords so callers
    cannot enumerate accounts.
    """

    def __init__(self, detail: str = "Invalid username or password") -> None:
        super().__init__(detail)


class InvalidTokenError(ForumError):
    """A session token is malformed, forged or expired."""

    def __init__(self, detail: str = "Could not validate credentials") -> None:
        super().__init__(detail)


class PermissionDeniedError(ForumError):
    """The authorization policy refused the requested action."""


class ValidationFailureError(ForumError):
    """A required field is missing or blank, or arguments are inconsistent."""


class StoreError(ForumError):
    """The backing store failed while executing a statement."""
