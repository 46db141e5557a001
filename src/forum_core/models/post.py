"""SQLAlchemy model for discussion threads."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from forum_core.db.session import Base
from forum_core.db.time import utcnow


class Post(Base):
    """Opening entry of a thread.

    ``author`` and ``tag`` are denormalized name references rather than
    foreign keys. ``comment_count`` caches the number of live comments and is
    only ever changed by single-statement updates in the thread store.
    """

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    # Sanitized HTML, safe to embed as-is.
    content: Mapped[str] = mapped_column(Text, nullable=False)
    raw_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    author: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    tag: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
