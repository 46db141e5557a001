"""Thread store: posts, numbered comments, tags and their derived counters.

``Post.comment_count`` is a cache of the live comment count. It changes only
inside the transaction that creates or deletes a comment, and always through a
single ``UPDATE ... SET comment_count = comment_count +/- 1`` statement so that
concurrent writers cannot lose updates. Callers never adjust it themselves;
``resync_comment_count`` exists to repair a counter after out-of-band edits.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Final

from sqlalchemy.orm import sessionmaker

from forum_core.core.errors import (
    ConflictError,
    NotFoundError,
    ValidationFailureError,
)
from forum_core.models import Comment, Post, Tag
from forum_core.repositories import CommentRepository, PostRepository, TagRepository
from forum_core.services._base import StoreService
from forum_core.services.sanitizer import ContentSanitizer

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE: Final = 20


class _Unchanged:
    def __repr__(self) -> str:
        return "UNCHANGED"


UNCHANGED: Final = _Unchanged()


@dataclass(frozen=True)
class NumberedComment:
    """A comment together with its floor number and author avatar key."""

    comment: Comment
    floor_number: int
    author_avatar: str | None = None


@dataclass(frozen=True)
class CommentPage:
    """One page of a post's comments plus the totals needed to paginate."""

    items: list[NumberedComment]
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0


@dataclass(frozen=True)
class TagCount:
    """A tag and the live number of posts that reference it."""

    tag: Tag
    post_count: int


def _required(field: str, value: str | None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationFailureError(f"{field} is required")
    return cleaned


class ThreadStore(StoreService):
    """Posts, comments and tags persisted through SQLAlchemy.

    Authorization is not checked here; the orchestration layer consults the
    policy before calling any mutating method.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        sanitizer: ContentSanitizer | None = None,
    ) -> None:
        super().__init__(session_factory)
        self.sanitizer = sanitizer or ContentSanitizer()

    # Posts

    def create_post(
        self,
        title: str,
        content: str,
        author: str,
        tag: str | None = None,
    ) -> Post:
        """Create a post from markdown ``content``.

        Raises:
            ValidationFailureError: If title, content or author is blank.
            NotFoundError: If ``tag`` names a tag that does not exist.
        """
        title = _required("title", title)
        raw = _required("content", content)
        author = _required("author", author)
        tag = (tag or "").strip() or None

        with self._transaction() as db:
            if tag is not None and TagRepository(db).get_by_name(tag) is None:
                raise NotFoundError(f"Tag {tag!r} not found")
            post = PostRepository(db).create(
                title=title,
                content=self.sanitizer.render(raw),
                raw_content=raw,
                author=author,
                tag=tag,
            )

        logger.info("Post %s created by %s", post.id, author)
        return post

    def get_post(self, post_id: int) -> Post:
        with self._transaction() as db:
            post = PostRepository(db).get_by_id(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    def update_post(
        self,
        post_id: int,
        *,
        title: str | None = None,
        content: str | None = None,
        tag: str | None | _Unchanged = UNCHANGED,
    ) -> Post:
        """Apply a partial edit; ``tag=None`` detaches the post from its tag."""
        if title is not None:
            title = _required("title", title)
        if content is not None:
            content = _required("content", content)

        with self._transaction() as db:
            post = PostRepository(db).get_by_id(post_id)
            if post is None:
                raise NotFoundError(f"Post {post_id} not found")
            if title is not None:
                post.title = title
            if content is not None:
                post.raw_content = content
                post.content = self.sanitizer.render(content)
            if not isinstance(tag, _Unchanged):
                new_tag = (tag or "").strip() or None
                if new_tag is not None and TagRepository(db).get_by_name(new_tag) is None:
                    raise NotFoundError(f"Tag {new_tag!r} not found")
                post.tag = new_tag

        logger.info("Post %s updated", post_id)
        return post

    def delete_post(self, post_id: int) -> None:
        """Delete a post and all of its comments in one transaction."""
        with self._transaction() as db:
            if PostRepository(db).delete_with_comments(post_id) == 0:
                raise NotFoundError(f"Post {post_id} not found")
        logger.info("Post %s deleted with its comments", post_id)

    def list_posts(self, *, tag: str | None = None, author: str | None = None) -> list[Post]:
        """Return posts newest first, filtered by at most one of tag or author."""
        if tag is not None and author is not None:
            raise ValidationFailureError("Filter by tag or by author, not both")
        with self._transaction() as db:
            return PostRepository(db).list_newest(tag=tag, author=author)

    # Comments

    def create_comment(self, post_id: int, content: str, author: str) -> Comment:
        """Append a comment and bump the post's comment count atomically."""
        raw = _required("content", content)
        author = _required("author", author)

        with self._transaction() as db:
            posts = PostRepository(db)
            if posts.get_by_id(post_id) is None:
                raise NotFoundError(f"Post {post_id} not found")
            comment = CommentRepository(db).create(
                post_id=post_id,
                content=self.sanitizer.render(raw),
                raw_content=raw,
                author=author,
            )
            if posts.increment_comment_count(post_id) == 0:
                # The post vanished between the lookup and the counter update.
                raise NotFoundError(f"Post {post_id} not found")

        logger.info("Comment %s added to post %s by %s", comment.id, post_id, author)
        return comment

    def get_comment(self, comment_id: int) -> Comment:
        with self._transaction() as db:
            comment = CommentRepository(db).get_by_id(comment_id)
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")
        return comment

    def update_comment(self, comment_id: int, content: str) -> Comment:
        raw = _required("content", content)
        with self._transaction() as db:
            comment = CommentRepository(db).get_by_id(comment_id)
            if comment is None:
                raise NotFoundError(f"Comment {comment_id} not found")
            comment.raw_content = raw
            comment.content = self.sanitizer.render(raw)
        logger.info("Comment %s updated", comment_id)
        return comment

    def delete_comment(self, comment_id: int) -> None:
        """Delete a comment and decrement its post's count atomically."""
        with self._transaction() as db:
            comments = CommentRepository(db)
            comment = comments.get_by_id(comment_id)
            if comment is None:
                raise NotFoundError(f"Comment {comment_id} not found")
            post_id = comment.post_id
            comments.delete(comment)
            PostRepository(db).decrement_comment_count(post_id)
        logger.info("Comment %s deleted from post %s", comment_id, post_id)

    def list_comments(
        self,
        post_id: int,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> CommentPage:
        """Return one page of comments, oldest first, with floor numbers.

        Page 2 with a page size of 20 starts at floor 21; floors are ranks in
        the post's full comment ordering, not positions within the page.
        """
        if page < 1:
            raise ValidationFailureError("page must be at least 1")
        if page_size < 1:
            raise ValidationFailureError("page_size must be at least 1")

        with self._transaction() as db:
            if PostRepository(db).get_by_id(post_id) is None:
                raise NotFoundError(f"Post {post_id} not found")
            comments = CommentRepository(db)
            total = comments.count_for_post(post_id)
            rows = comments.list_numbered(
                post_id,
                limit=page_size,
                offset=(page - 1) * page_size,
            )

        items = [
            NumberedComment(comment=comment, floor_number=floor, author_avatar=avatar)
            for comment, floor, avatar in rows
        ]
        return CommentPage(items=items, page=page, page_size=page_size, total=total)

    def count_comments(self, post_id: int) -> int:
        """Return the live comment count, independent of the cached counter."""
        with self._transaction() as db:
            return CommentRepository(db).count_for_post(post_id)

    def list_comments_by_author(self, author: str, limit: int = 50) -> list[Comment]:
        with self._transaction() as db:
            return CommentRepository(db).list_by_author(author, limit=limit)

    def resync_comment_count(self, post_id: int) -> int:
        """Rewrite a post's cached comment count from a live count.

        Returns:
            The repaired count.
        """
        with self._transaction() as db:
            posts = PostRepository(db)
            if posts.resync_comment_count(post_id) == 0:
                raise NotFoundError(f"Post {post_id} not found")
            count = CommentRepository(db).count_for_post(post_id)
        logger.warning("Comment count of post %s resynchronised to %s", post_id, count)
        return count

    # Tags

    def create_tag(self, name: str) -> Tag:
        name = _required("name", name)
        with self._transaction() as db:
            tags = TagRepository(db)
            if tags.get_by_name(name) is not None:
                raise ConflictError(f"Tag {name!r} already exists")
            tag = tags.create(name)
        logger.info("Tag %r created", name)
        return tag

    def get_tag(self, tag_id: int) -> Tag:
        with self._transaction() as db:
            tag = TagRepository(db).get_by_id(tag_id)
        if tag is None:
            raise NotFoundError(f"Tag {tag_id} not found")
        return tag

    def get_tag_by_name(self, name: str) -> Tag:
        with self._transaction() as db:
            tag = TagRepository(db).get_by_name(name)
        if tag is None:
            raise NotFoundError(f"Tag {name!r} not found")
        return tag

    def list_tags(self) -> list[Tag]:
        with self._transaction() as db:
            return TagRepository(db).list_all()

    def rename_tag(self, tag_id: int, name: str) -> Tag:
        """Rename a tag and re-point the posts that referenced the old name."""
        name = _required("name", name)
        with self._transaction() as db:
            tags = TagRepository(db)
            tag = tags.get_by_id(tag_id)
            if tag is None:
                raise NotFoundError(f"Tag {tag_id} not found")
            if tag.name != name:
                if tags.get_by_name(name) is not None:
                    raise ConflictError(f"Tag {name!r} already exists")
                old_name = tag.name
                moved = PostRepository(db).retag(old_name, name)
                tag.name = name
                logger.info("Tag %r renamed to %r (%s posts moved)", old_name, name, moved)
        return tag

    def delete_tag(self, tag_id: int) -> None:
        """Delete a tag; posts that used it keep existing without a tag."""
        with self._transaction() as db:
            tags = TagRepository(db)
            tag = tags.get_by_id(tag_id)
            if tag is None:
                raise NotFoundError(f"Tag {tag_id} not found")
            detached = PostRepository(db).retag(tag.name, None)
            tags.delete(tag)
        logger.info("Tag %s deleted (%s posts detached)", tag_id, detached)

    def tags_with_counts(self) -> list[TagCount]:
        """Return every tag with its live post count, zero-post tags included."""
        with self._transaction() as db:
            rows = TagRepository(db).list_with_post_counts()
        return [TagCount(tag=tag, post_count=count) for tag, count in rows]
