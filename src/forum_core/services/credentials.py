"""Credential store: account registration, login checks and profile updates."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from forum_core.core import security
from forum_core.core.errors import (
    AuthFailureError,
    ConflictError,
    NotFoundError,
    ValidationFailureError,
)
from forum_core.models import ROLE_ADMIN, ROLE_USER, User
from forum_core.services._base import StoreService

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72

__all__ = ["CredentialStore"]


def _required(field: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationFailureError(f"{field} is required")
    return cleaned


def _checked_password(password: str | None) -> str:
    if not password or not password.strip():
        raise ValidationFailureError("password is required")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationFailureError(
            f"password must be at most {MAX_PASSWORD_BYTES} bytes"
        )
    return password


class CredentialStore(StoreService):
    """Persisted user accounts with bcrypt password hashes."""

    def __init__(self, session_factory: sessionmaker, *, bcrypt_rounds: int = 10) -> None:
        super().__init__(session_factory)
        self.bcrypt_rounds = bcrypt_rounds
        # Compared against when the username is unknown so both failures cost one bcrypt check.
        self._dummy_hash = security.hash_password("not-a-real-password", bcrypt_rounds)

    def register(
        self,
        username: str,
        password: str,
        email: str,
        bio: str | None = None,
    ) -> int:
        """Create a regular account and return its id.

        Raises:
            ValidationFailureError: If username, password or email is blank.
            ConflictError: If the username is already taken.
        """
        return self._create(username, password, email, bio, role=ROLE_USER)

    def create_admin(
        self,
        username: str,
        password: str,
        email: str,
        bio: str | None = None,
    ) -> int:
        """Create an administrator account for operator bootstrap."""
        return self._create(username, password, email, bio, role=ROLE_ADMIN)

    def _create(
        self,
        username: str,
        password: str,
        email: str,
        bio: str | None,
        *,
        role: str,
    ) -> int:
        username = _required("username", username)
        email = _required("email", email)
        password = _checked_password(password)

        # A concurrent registration that slips past this check trips the
        # unique constraint, which the transaction reports as ConflictError.
        with self._transaction() as db:
            existing = db.scalar(select(User.id).where(User.username == username))
            if existing is not None:
                raise ConflictError(f"Username {username!r} is already taken")
            user = User(
                username=username,
                password_hash=security.hash_password(password, self.bcrypt_rounds),
                email=email,
                email_hash=security.email_hash(email),
                bio=(bio or "").strip() or None,
                role=role,
            )
            db.add(user)
            db.flush()
            user_id = user.id

        logger.info("Registered user %s (id=%s, role=%s)", username, user_id, role)
        return user_id

    def authenticate(self, username: str, password: str) -> User:
        """Return the user whose credentials match.

        Raises:
            AuthFailureError: For unknown usernames and wrong passwords alike.
        """
        username = (username or "").strip()
        if not username or not password:
            raise AuthFailureError()

        with self._transaction() as db:
            user = db.scalar(select(User).where(User.username == username))

        stored_hash = user.password_hash if user is not None else self._dummy_hash
        if not security.verify_password(password, stored_hash) or user is None:
            logger.info("Failed login attempt for %s", username)
            raise AuthFailureError()
        return user

    def update(
        self,
        user_id: int,
        *,
        bio: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> User:
        """Apply a partial profile update; arguments left as None are untouched."""
        if email is not None:
            email = _required("email", email)
        if password is not None:
            password = _checked_password(password)

        with self._transaction() as db:
            user = db.get(User, user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            if bio is not None:
                user.bio = bio.strip() or None
            if email is not None:
                user.email = email
                user.email_hash = security.email_hash(email)
            if password is not None:
                user.password_hash = security.hash_password(password, self.bcrypt_rounds)

        logger.info("Updated profile of user %s", user.username)
        return user

    def get_user(self, user_id: int) -> User:
        """Return a user by primary key."""
        with self._transaction() as db:
            user = db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_by_username(self, username: str) -> User:
        """Return a user by username."""
        with self._transaction() as db:
            user = db.scalar(select(User).where(User.username == username))
        if user is None:
            raise NotFoundError(f"User {username!r} not found")
        return user

    def get_users_by_usernames(self, usernames: Sequence[str]) -> list[User]:
        """Batch lookup used to decorate listings with author avatars."""
        names = sorted(set(usernames))
        if not names:
            return []
        with self._transaction() as db:
            return list(db.scalars(select(User).where(User.username.in_(names))))
