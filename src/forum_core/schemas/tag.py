"""Tag-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class TagUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class TagResponse(BaseModel):
    id: int
    name: str
    created_at: datetime
    post_count: int | None = None

    model_config = ConfigDict(from_attributes=True)
