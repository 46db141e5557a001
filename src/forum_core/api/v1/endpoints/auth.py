"""Authentication and account endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from forum_core.api.v1.dependencies import CurrentIdentityDep, ServicesDep
from forum_core.schemas.user import (
    LoginRequest,
    LoginResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from forum_core.services import Services

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _user_response(services: Services, user: object) -> UserResponse:
    response = UserResponse.model_validate(user)
    response.avatar_url = services.settings.avatar_url(response.email_hash)
    return response


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, services: ServicesDep) -> RegisterResponse:
    """Create a regular account. The role is always ``user``."""
    user_id = services.credentials.register(
        payload.username,
        payload.password,
        payload.email,
        payload.bio,
    )
    return RegisterResponse(id=user_id, username=payload.username.strip())


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response, services: ServicesDep) -> LoginResponse:
    """Check credentials, then hand out a session token as cookie and body."""
    user = services.credentials.authenticate(payload.username, payload.password)
    token = services.sessions.issue(user)
    claims = services.sessions.verify(token)
    response.set_cookie(
        services.settings.session_cookie_name,
        token,
        max_age=services.settings.session_ttl_seconds,
        httponly=True,
        samesite="lax",
        path="/",
    )
    logger.info("User %s logged in", user.username)
    return LoginResponse(access_token=token, expires_at=claims.expires_at)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(services: ServicesDep) -> Response:
    """Clear the client-held cookie. Issued tokens stay valid until expiry."""
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(services.settings.session_cookie_name, path="/")
    return response


@router.get("/me", response_model=UserResponse)
async def read_me(identity: CurrentIdentityDep, services: ServicesDep) -> UserResponse:
    return _user_response(services, services.credentials.get_user(identity.id))


@router.patch("/me", response_model=UserResponse)
async def update_me(
    payload: ProfileUpdateRequest,
    identity: CurrentIdentityDep,
    services: ServicesDep,
) -> UserResponse:
    """Update bio, email or password of the calling account."""
    user = services.credentials.update(
        identity.id,
        bio=payload.bio,
        email=payload.email,
        password=payload.password,
    )
    return _user_response(services, user)
