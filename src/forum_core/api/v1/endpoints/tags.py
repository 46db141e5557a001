"""Tag endpoints. Every mutation is reserved to administrators."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from forum_core.api.v1.dependencies import CallerDep, ServicesDep
from forum_core.schemas.tag import TagCreate, TagResponse, TagUpdate
from forum_core.services import Action, require

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/", response_model=list[TagResponse])
async def list_tags(services: ServicesDep) -> list[TagResponse]:
    """List tags by name with their live post counts."""
    return [
        TagResponse(
            id=entry.tag.id,
            name=entry.tag.name,
            created_at=entry.tag.created_at,
            post_count=entry.post_count,
        )
        for entry in services.threads.tags_with_counts()
    ]


@router.post("/", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate, caller: CallerDep, services: ServicesDep) -> TagResponse:
    require(caller, None, Action.CREATE_TAG)
    tag = services.threads.create_tag(payload.name)
    return TagResponse.model_validate(tag)


@router.patch("/{tag_id}", response_model=TagResponse)
async def rename_tag(
    tag_id: int,
    payload: TagUpdate,
    caller: CallerDep,
    services: ServicesDep,
) -> TagResponse:
    require(caller, None, Action.EDIT_TAG)
    tag = services.threads.rename_tag(tag_id, payload.name)
    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, caller: CallerDep, services: ServicesDep) -> Response:
    require(caller, None, Action.DELETE_TAG)
    services.threads.delete_tag(tag_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
