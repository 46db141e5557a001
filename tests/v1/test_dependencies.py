# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from starlette.requests import Request

from forum_core.api.v1.dependencies import (
    get_caller,
    get_current_identity,
    get_optional_identity,
)
from forum_core.core.errors import InvalidTokenError


def _request(cookie: str | None = None) -> Request:
    headers = [(b"cookie", f"auth_token={cookie}".encode())] if cookie else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetOptionalIdentity:
    """Read-only routes resolve the caller without ever failing."""

    def test_bearer_header(self, services, test_user):
        token = services.sessions.issue(test_user)
        identity = get_optional_identity(_request(), services, _bearer(token))
        assert identity.username == "alice"
        assert identity.id == test_user.id

    def test_cookie_fallback(self, services, test_user):
        token = services.sessions.issue(test_user)
        identity = get_optional_identity(_request(token), services, None)
        assert identity.username == "alice"

    def test_header_wins_over_cookie(self, services, test_user, other_user):
        header_token = services.sessions.issue(other_user)
        cookie_token = services.sessions.issue(test_user)
        identity = get_optional_identity(_request(cookie_token), services, _bearer(header_token))
        assert identity.username == "bob"

    def test_anonymous(self, services):
        assert get_optional_identity(_request(), services, None) is None

    def test_invalid_token_is_anonymous(self, services):
        assert get_optional_identity(_request("garbage"), services, None) is None


class TestGetCurrentIdentity:
    def test_missing_token(self, services):
        with pytest.raises(InvalidTokenError):
            get_current_identity(_request(), services, None)

    def test_invalid_token(self, services):
        with pytest.raises(InvalidTokenError) as exc_info:
            get_current_identity(_request(), services, _bearer("invalid_token"))
        assert "Could not validate credentials" in exc_info.value.detail


class TestGetCaller:
    """Mutating routes leave anonymous callers to the policy but reject bad tokens."""

    def test_anonymous_is_none(self, services):
        assert get_caller(_request(), services, None) is None

    def test_invalid_token_raises(self, services):
        with pytest.raises(InvalidTokenError):
            get_caller(_request("garbage"), services, None)

    def test_admin_role_is_carried(self, services, admin_user):
        token = services.sessions.issue(admin_user)
        identity = get_caller(_request(), services, _bearer(token))
        assert identity.is_admin
