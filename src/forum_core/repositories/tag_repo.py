"""Data access helpers for working with tags."""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from forum_core.models import Post, Tag

__all__ = ["TagRepository"]


class TagRepository:
    """Thin wrapper around database access for tag entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, tag_id: int) -> Tag | None:
        return self.session.get(Tag, tag_id)

    def get_by_name(self, name: str) -> Tag | None:
        return self.session.scalar(select(Tag).where(Tag.name == name))

    def list_all(self) -> list[Tag]:
        return list(self.session.scalars(select(Tag).order_by(Tag.name.asc())))

    def list_with_post_counts(self) -> list[tuple[Tag, int]]:
        """Return every tag with the live number of posts referencing it.

        The outer join keeps tags that no post uses, counted as zero.
        """
        stmt = (
            select(Tag, func.count(Post.id))
            .outerjoin(Post, Post.tag == Tag.name)
            .group_by(Tag.id)
            .order_by(Tag.name.asc())
        )
        return [(tag, int(count)) for tag, count in self.session.execute(stmt)]

    def create(self, name: str) -> Tag:
        tag = Tag(name=name)
        self.session.add(tag)
        self.session.flush()
        return tag

    def delete(self, tag: Tag) -> None:
        self.session.delete(tag)
        self.session.flush()
