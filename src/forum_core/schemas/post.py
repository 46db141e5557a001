"""Post and comment Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, description="Markdown content")
    tag: str | None = Field(None, max_length=64)


class PostUpdate(BaseModel):
    """Partial post edit; omitted fields stay unchanged, ``tag: null`` clears it."""

    title: str | None = Field(None, min_length=1, max_length=200)
    content: str | None = Field(None, min_length=1, description="Markdown content")
    tag: str | None = Field(None, max_length=64)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    title: str
    content: str = Field(..., description="Sanitized HTML")
    raw_content: str | None
    author: str
    author_avatar_url: str | None = None
    tag: str | None
    comment_count: int
    created_at: datetime
    can_edit: bool = False
    can_delete: bool = False

    model_config = ConfigDict(from_attributes=True)


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, description="Markdown content")


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, description="Markdown content")


class CommentResponse(BaseModel):
    """A comment with its stable floor number."""

    id: int
    post_id: int
    content: str = Field(..., description="Sanitized HTML")
    raw_content: str | None
    author: str
    author_avatar_url: str | None = None
    floor_number: int | None = None
    created_at: datetime
    can_edit: bool = False
    can_delete: bool = False

    model_config = ConfigDict(from_attributes=True)


class CommentPageResponse(BaseModel):
    items: list[CommentResponse]
    page: int
    page_size: int
    total: int
    total_pages: int


class PostDetailResponse(BaseModel):
    """A post with one page of its comments."""

    post: PostResponse
    comments: CommentPageResponse
