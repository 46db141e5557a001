"""Shared API dependencies for caller identity and service access."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from forum_core.core.errors import InvalidTokenError
from forum_core.services import Identity, Services

# HTTP Bearer scheme; the session cookie is accepted as a fallback.
bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Return the service bundle built at application start."""
    services: Services = request.app.state.services
    return services


ServicesDep = Annotated[Services, Depends(get_services)]


def _extract_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    cookie_name: str,
) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(cookie_name) or None


def get_optional_identity(
    request: Request,
    services: ServicesDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity | None:
    """Resolve the caller from the bearer header or session cookie.

    Anonymous callers and callers presenting an unusable token both resolve
    to None, so read-only pages keep working with a stale cookie.
    """
    token = _extract_token(request, credentials, services.settings.session_cookie_name)
    if token is None:
        return None
    try:
        return services.sessions.verify(token).identity
    except InvalidTokenError:
        return None


def get_current_identity(
    request: Request,
    services: ServicesDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity:
    """Resolve the caller, failing with InvalidTokenError when absent or invalid."""
    token = _extract_token(request, credentials, services.settings.session_cookie_name)
    if token is None:
        raise InvalidTokenError("Not authenticated")
    return services.sessions.verify(token).identity


OptionalIdentityDep = Annotated[Identity | None, Depends(get_optional_identity)]
CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]


def get_caller(
    request: Request,
    services: ServicesDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Identity | None:
    """Resolve the caller for mutating routes.

    No token means an anonymous caller, left for the policy to refuse; a
    token that fails verification is rejected outright.
    """
    token = _extract_token(request, credentials, services.settings.session_cookie_name)
    if token is None:
        return None
    return services.sessions.verify(token).identity


CallerDep = Annotated[Identity | None, Depends(get_caller)]
