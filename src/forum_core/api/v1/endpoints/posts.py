"""Post endpoints, including comment listing and creation under a post."""

from __future__ import annotations

from collections.abc import Sequence
from typing import cast

from fastapi import APIRouter, Query, Response, status

from forum_core.api.v1.dependencies import CallerDep, OptionalIdentityDep, ServicesDep
from forum_core.models import Comment, Post
from forum_core.schemas.post import (
    CommentCreate,
    CommentPageResponse,
    CommentResponse,
    PostCreate,
    PostDetailResponse,
    PostResponse,
    PostUpdate,
)
from forum_core.services import (
    Action,
    CommentPage,
    Identity,
    Services,
    can,
    require,
)
from forum_core.services.thread_store import UNCHANGED

router = APIRouter(prefix="/posts", tags=["posts"])


def to_post_responses(
    services: Services,
    posts: Sequence[Post],
    viewer: Identity | None,
) -> list[PostResponse]:
    """Convert posts to API schemas with author avatars and viewer affordances."""
    authors = services.credentials.get_users_by_usernames([post.author for post in posts])
    avatars = {user.username: user.email_hash for user in authors}
    responses = []
    for post in posts:
        item = PostResponse.model_validate(post)
        item.author_avatar_url = services.settings.avatar_url(avatars.get(post.author))
        item.can_edit = can(viewer, post.author, Action.EDIT_POST)
        item.can_delete = can(viewer, post.author, Action.DELETE_POST)
        responses.append(item)
    return responses


def to_comment_response(
    services: Services,
    comment: Comment,
    viewer: Identity | None,
    *,
    floor_number: int | None = None,
    author_avatar: str | None = None,
) -> CommentResponse:
    item = CommentResponse.model_validate(comment)
    item.floor_number = floor_number
    item.author_avatar_url = services.settings.avatar_url(author_avatar)
    item.can_edit = can(viewer, comment.author, Action.EDIT_COMMENT)
    item.can_delete = can(viewer, comment.author, Action.DELETE_COMMENT)
    return item


def to_comment_page(
    services: Services,
    page: CommentPage,
    viewer: Identity | None,
) -> CommentPageResponse:
    return CommentPageResponse(
        items=[
            to_comment_response(
                services,
                entry.comment,
                viewer,
                floor_number=entry.floor_number,
                author_avatar=entry.author_avatar,
            )
            for entry in page.items
        ],
        page=page.page,
        page_size=page.page_size,
        total=page.total,
        total_pages=page.total_pages,
    )


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    services: ServicesDep,
    viewer: OptionalIdentityDep,
    tag: str | None = Query(None, description="Only posts carrying this tag"),
    author: str | None = Query(None, description="Only posts by this username"),
) -> list[PostResponse]:
    """List posts newest first, filtered by tag or by author."""
    posts = services.threads.list_posts(tag=tag, author=author)
    return to_post_responses(services, posts, viewer)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    caller: CallerDep,
    services: ServicesDep,
) -> PostResponse:
    require(caller, None, Action.CREATE_POST)
    author = cast(Identity, caller)
    post = services.threads.create_post(
        payload.title,
        payload.content,
        author=author.username,
        tag=payload.tag,
    )
    return to_post_responses(services, [post], caller)[0]


@router.get("/{post_id}", response_model=PostDetailResponse)
async def read_post(
    post_id: int,
    services: ServicesDep,
    viewer: OptionalIdentityDep,
    page: int = Query(1, ge=1, description="Comment page, starting at 1"),
) -> PostDetailResponse:
    """Return a post and one page of its numbered comments."""
    post = services.threads.get_post(post_id)
    comments = services.threads.list_comments(
        post_id,
        page=page,
        page_size=services.settings.comments_page_size,
    )
    return PostDetailResponse(
        post=to_post_responses(services, [post], viewer)[0],
        comments=to_comment_page(services, comments, viewer),
    )


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    payload: PostUpdate,
    caller: CallerDep,
    services: ServicesDep,
) -> PostResponse:
    post = services.threads.get_post(post_id)
    require(caller, post.author, Action.EDIT_POST)
    tag = payload.tag if "tag" in payload.model_fields_set else UNCHANGED
    post = services.threads.update_post(
        post_id,
        title=payload.title,
        content=payload.content,
        tag=tag,
    )
    return to_post_responses(services, [post], caller)[0]


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, caller: CallerDep, services: ServicesDep) -> Response:
    post = services.threads.get_post(post_id)
    require(caller, post.author, Action.DELETE_POST)
    services.threads.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/comments", response_model=CommentPageResponse)
async def list_comments(
    post_id: int,
    services: ServicesDep,
    viewer: OptionalIdentityDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1, le=100),
) -> CommentPageResponse:
    comments = services.threads.list_comments(
        post_id,
        page=page,
        page_size=page_size or services.settings.comments_page_size,
    )
    return to_comment_page(services, comments, viewer)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    caller: CallerDep,
    services: ServicesDep,
) -> CommentResponse:
    require(caller, None, Action.CREATE_COMMENT)
    author = cast(Identity, caller)
    comment = services.threads.create_comment(post_id, payload.content, author.username)
    return to_comment_response(services, comment, caller)
