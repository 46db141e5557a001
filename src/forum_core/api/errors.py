"""Translation of core errors into HTTP responses."""
from __future__ import annotations

from typing import cast

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from forum_core.core.errors import (
    AuthFailureError,
    ConflictError,
    ForumError,
    InvalidTokenError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationFailureError,
)

STATUS_BY_ERROR: dict[type[ForumError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthFailureError: status.HTTP_401_UNAUTHORIZED,
    InvalidTokenError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ValidationFailureError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    StoreError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: ForumError) -> int:
    """Return the HTTP status code for a core error."""
    for error_type, code in STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def forum_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a core error; registered for ForumError only."""
    error = cast(ForumError, exc)
    code = status_for(error)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=code, content={"detail": error.detail}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ForumError, forum_error_handler)
