"""API routes for tags."""

from typing import List

from fastapi import APIRouter, status

from ...schemas.diary_tag import DiaryTagCreate, DiaryTagRead
from ..deps import DiaryServiceDep

router = APIRouter(prefix="/api/v1/tags", tags=["Tags"])


@router.get("", response_model=List[DiaryTagRead])
async def list_tags(service: DiaryServiceDep):
    """List tags with the number of live entries using each."""
    return await service.list_tags()


@router.post("", response_model=DiaryTagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(tag_data: DiaryTagCreate, service: DiaryServiceDep):
    return await service.create_tag(tag_data)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: str, service: DiaryServiceDep):
    await service.delete_tag(tag_id)
