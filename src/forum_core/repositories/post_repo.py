"""Data access helpers for working with posts."""
from __future__ import annotations

from sqlalchemy import case, delete, func, select, update
from sqlalchemy.orm import Session

from forum_core.models import Comment, Post

__all__ = ["PostRepository"]


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def list_newest(self, *, tag: str | None = None, author: str | None = None) -> list[Post]:
        """Return posts newest first, optionally restricted to a tag or author."""
        stmt = select(Post)
        if tag is not None:
            stmt = stmt.where(Post.tag == tag)
        if author is not None:
            stmt = stmt.where(Post.author == author)
        stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())
        return list(self.session.scalars(stmt))

    def create(
        self,
        *,
        title: str,
        content: str,
        raw_content: str,
        author: str,
        tag: str | None,
    ) -> Post:
        """Insert a new post and return the persisted ORM instance."""
        post = Post(
            title=title,
            content=content,
            raw_content=raw_content,
            author=author,
            tag=tag,
            comment_count=0,
        )
        self.session.add(post)
        self.session.flush()
        return post

    def delete_with_comments(self, post_id: int) -> int:
        """Delete a post and every comment attached to it.

        Returns:
            Number of post rows removed (0 or 1).
        """
        self.session.execute(delete(Comment).where(Comment.post_id == post_id))
        result = self.session.execute(delete(Post).where(Post.id == post_id))
        return result.rowcount

    def increment_comment_count(self, post_id: int) -> int:
        """Add one to the cached comment count in a single statement."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(comment_count=Post.comment_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def decrement_comment_count(self, post_id: int) -> int:
        """Subtract one from the cached comment count, never going below zero."""
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(
                comment_count=case(
                    (Post.comment_count > 0, Post.comment_count - 1),
                    else_=0,
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def resync_comment_count(self, post_id: int) -> int:
        """Overwrite the cached comment count with a live count."""
        live = (
            select(func.count(Comment.id))
            .where(Comment.post_id == post_id)
            .scalar_subquery()
        )
        result = self.session.execute(
            update(Post)
            .where(Post.id == post_id)
            .values(comment_count=live)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def retag(self, old_name: str, new_name: str | None) -> int:
        """Point every post tagged ``old_name`` at ``new_name`` (None detaches)."""
        result = self.session.execute(
            update(Post)
            .where(Post.tag == old_name)
            .values(tag=new_name)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
