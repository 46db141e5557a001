"""SQLAlchemy models for the forum."""

from .comment import Comment
from .post import Post
from .tag import Tag
from .user import ROLE_ADMIN, ROLE_USER, User

__all__ = [
    "Comment",
    "Post",
    "Tag",
    "User",
    "ROLE_ADMIN",
    "ROLE_USER",
]
