"""Endpoints addressing individual comments."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from forum_core.api.v1.dependencies import CallerDep, ServicesDep
from forum_core.api.v1.endpoints.posts import to_comment_response
from forum_core.schemas.post import CommentResponse, CommentUpdate
from forum_core.services import Action, require

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    caller: CallerDep,
    services: ServicesDep,
) -> CommentResponse:
    comment = services.threads.get_comment(comment_id)
    require(caller, comment.author, Action.EDIT_COMMENT)
    comment = services.threads.update_comment(comment_id, payload.content)
    return to_comment_response(services, comment, caller)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: int, caller: CallerDep, services: ServicesDep) -> Response:
    comment = services.threads.get_comment(comment_id)
    require(caller, comment.author, Action.DELETE_COMMENT)
    services.threads.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
