"""Public profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from forum_core.api.v1.dependencies import OptionalIdentityDep, ServicesDep
from forum_core.api.v1.endpoints.posts import to_comment_response, to_post_responses
from forum_core.schemas.post import CommentResponse, PostResponse
from forum_core.schemas.user import PublicProfileResponse

router = APIRouter(prefix="/users", tags=["users"])


class ProfilePageResponse(BaseModel):
    """A user's public profile with their posts and recent comments."""

    user: PublicProfileResponse
    posts: list[PostResponse]
    comments: list[CommentResponse]


@router.get("/{username}", response_model=ProfilePageResponse)
async def read_profile(
    username: str,
    services: ServicesDep,
    viewer: OptionalIdentityDep,
) -> ProfilePageResponse:
    user = services.credentials.get_by_username(username)
    profile = PublicProfileResponse.model_validate(user)
    profile.avatar_url = services.settings.avatar_url(user.email_hash)
    posts = services.threads.list_posts(author=user.username)
    comments = services.threads.list_comments_by_author(user.username)
    return ProfilePageResponse(
        user=profile,
        posts=to_post_responses(services, posts, viewer),
        comments=[
            to_comment_response(services, comment, viewer, author_avatar=user.email_hash)
            for comment in comments
        ],
    )
