"""Signed session tokens carrying the caller's identity claims.

Tokens are HMAC-signed JWTs. Verification checks only the signature and the
expiry; it never consults the credential store. An account demoted or removed
after issuance therefore keeps its claimed identity and role until the token
expires. Revocation would need a server-side check that does not exist here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from forum_core.core.errors import InvalidTokenError
from forum_core.core.settings import SEVEN_DAYS_SECONDS
from forum_core.models import User

logger = logging.getLogger(__name__)

__all__ = ["Identity", "SessionClaims", "SessionCodec"]


@dataclass(frozen=True)
class Identity:
    """The caller triple the authorization policy reasons about."""

    id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True)
class SessionClaims:
    """Decoded, verified token payload."""

    id: int
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime

    @property
    def identity(self) -> Identity:
        return Identity(id=self.id, username=self.username, role=self.role)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(UTC)


class SessionCodec:
    """Issue and verify session tokens with a server-held secret."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        ttl_seconds: int = SEVEN_DAYS_SECONDS,
    ) -> None:
        if not secret_key:
            raise ValueError("A secret key is required to sign session tokens")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = timedelta(seconds=ttl_seconds)

    def issue(self, user: User | Identity, now: datetime | None = None) -> str:
        """Return a signed token for ``user`` valid for the configured TTL."""
        issued_at = _now(now)
        expires_at = issued_at + self.ttl
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "id": user.id,
            "username": user.username,
            "role": user.role,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token: str = jwt.encode(claims, self._secret_key, algorithm=self.algorithm)
        return token

    def verify(self, token: str, now: datetime | None = None) -> SessionClaims:
        """Return the claims of a genuine, unexpired token.

        Raises:
            InvalidTokenError: If the token is malformed, its signature does
                not match, a claim is missing, or ``now`` is at or past expiry.
        """
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                # jose re-enables its wall-clock exp check for any require_* option.
                # Presence and expiry of exp/iat are checked below against ``now``.
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError as err:
            logger.debug("Rejected session token: %s", err)
            raise InvalidTokenError() from err

        try:
            user_id = int(payload["id"])
            username = str(payload["username"])
            role = str(payload["role"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), UTC)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), UTC)
        except (KeyError, TypeError, ValueError) as err:
            logger.debug("Session token is missing identity claims")
            raise InvalidTokenError() from err

        if _now(now) >= expires_at:
            logger.debug("Session token for %s expired at %s", username, expires_at)
            raise InvalidTokenError("Session has expired")

        return SessionClaims(
            id=user_id,
            username=username,
            role=role,
            issued_at=issued_at,
            expires_at=expires_at,
        )
