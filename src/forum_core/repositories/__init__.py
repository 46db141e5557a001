"""Statement-level data access for forum content."""

from .comment_repo import CommentRepository
from .post_repo import PostRepository
from .tag_repo import TagRepository

__all__ = ["CommentRepository", "PostRepository", "TagRepository"]
