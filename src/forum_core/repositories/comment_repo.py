"""Data access helpers for working with comments."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from forum_core.models import Comment, User

__all__ = ["CommentRepository"]


class CommentRepository:
    """Thin wrapper around database access for comment entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def count_for_post(self, post_id: int) -> int:
        """Return the live number of comments attached to ``post_id``."""
        total = self.session.scalar(
            select(func.count(Comment.id)).where(Comment.post_id == post_id)
        )
        return int(total or 0)

    def list_numbered(
        self,
        post_id: int,
        *,
        limit: int,
        offset: int,
    ) -> list[tuple[Comment, int, str | None]]:
        """Return one page of a post's comments with their floor numbers.

        Floor numbers are assigned by ROW_NUMBER over the post's complete
        comment set ordered by ``(created_at, id)`` before the page is sliced,
        so they keep counting across pages. Each row also carries the author's
        avatar key when the author account exists.
        """
        floor_number = (
            func.row_number()
            .over(order_by=(Comment.created_at.asc(), Comment.id.asc()))
            .label("floor_number")
        )
        ranked = (
            select(Comment.id.label("comment_id"), floor_number)
            .where(Comment.post_id == post_id)
            .subquery()
        )
        stmt = (
            select(Comment, ranked.c.floor_number, User.email_hash)
            .join(ranked, ranked.c.comment_id == Comment.id)
            .outerjoin(User, User.username == Comment.author)
            .order_by(ranked.c.floor_number)
            .limit(limit)
            .offset(offset)
        )
        return [
            (comment, int(floor), avatar)
            for comment, floor, avatar in self.session.execute(stmt)
        ]

    def list_by_author(self, author: str, limit: int = 50) -> list[Comment]:
        """Return an author's most recent comments, newest first."""
        stmt = (
            select(Comment)
            .where(Comment.author == author)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def create(self, *, post_id: int, content: str, raw_content: str, author: str) -> Comment:
        comment = Comment(
            post_id=post_id,
            content=content,
            raw_content=raw_content,
            author=author,
        )
        self.session.add(comment)
        self.session.flush()
        return comment

    def delete(self, comment: Comment) -> None:
        self.session.delete(comment)
        self.session.flush()
