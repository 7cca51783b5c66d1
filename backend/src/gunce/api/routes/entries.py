"""
API routes for diary entries.

Encrypted entries are returned sealed unless the entry password is sent in
the X-Entry-Password header, percent-encoded (RFC 3986) since header values
are limited to latin-1. Create and update take it as ``entry_password`` in
the JSON body.
"""

from datetime import date
from typing import Annotated, Optional
from urllib.parse import unquote

from fastapi import APIRouter, Header, Query, status

from ...core.exceptions import ValidationError
from ...core.logging import get_logger
from ...schemas.diary_entry import (
    DiaryEntryCreate,
    DiaryEntryCreateRequest,
    DiaryEntryListResponse,
    DiaryEntryRead,
    DiaryEntryUpdate,
    DiaryEntryUpdateRequest,
    EntryFilters,
    Sentiment,
)
from ..deps import DiaryServiceDep

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/entries", tags=["Entries"])

EntryPassword = Annotated[Optional[str], Header(alias="X-Entry-Password")]


def _decode_password(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as e:
        raise ValidationError("X-Entry-Password", "Entry password must be percent-encoded UTF-8") from e


@router.get("", response_model=DiaryEntryListResponse)
async def list_entries(
    service: DiaryServiceDep,
    date_from: Annotated[Optional[date], Query()] = None,
    date_to: Annotated[Optional[date], Query()] = None,
    tag: Annotated[Optional[str], Query()] = None,
    sentiment: Annotated[Optional[Sentiment], Query()] = None,
    is_favorite: Annotated[Optional[bool], Query()] = None,
    search: Annotated[Optional[str], Query()] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[Optional[int], Query(ge=1, le=1000)] = 100,
):
    """List live entries, newest first."""
    filters = EntryFilters(
        date_from=date_from,
        date_to=date_to,
        tag=tag,
        sentiment=sentiment,
        is_favorite=is_favorite,
        search=search,
        skip=skip,
        limit=limit,
    )
    return await service.list_entries(filters)


@router.get("/search", response_model=DiaryEntryListResponse)
async def search_entries(
    service: DiaryServiceDep,
    q: Annotated[str, Query()],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[Optional[int], Query(ge=1, le=1000)] = 100,
):
    """Case-insensitive search over titles and plaintext content."""
    return await service.search_entries(q, EntryFilters(skip=skip, limit=limit))


@router.post("", response_model=DiaryEntryRead, status_code=status.HTTP_201_CREATED)
async def create_entry(entry_data: DiaryEntryCreateRequest, service: DiaryServiceDep):
    """Create a new diary entry; encrypted when entry_password is set."""
    data = DiaryEntryCreate(**entry_data.model_dump(exclude={"entry_password"}))
    return await service.create_entry(data, password=entry_data.entry_password)


@router.delete("")
async def delete_all_entries(service: DiaryServiceDep):
    """Delete every entry."""
    deleted = await service.delete_all_entries()
    logger.warning(f"Deleted all entries via API ({deleted})")
    return {"deleted": deleted}


@router.get("/{entry_id}", response_model=DiaryEntryRead)
async def get_entry(
    entry_id: str,
    service: DiaryServiceDep,
    x_entry_password: EntryPassword = None,
):
    """Get a specific diary entry by ID."""
    return await service.read_entry(entry_id, password=_decode_password(x_entry_password))


@router.put("/{entry_id}", response_model=DiaryEntryRead)
async def update_entry(
    entry_id: str,
    entry_data: DiaryEntryUpdateRequest,
    service: DiaryServiceDep,
):
    """Update a diary entry."""
    changes = DiaryEntryUpdate(**entry_data.model_dump(exclude={"entry_password"}, exclude_unset=True))
    return await service.update_entry(entry_id, changes, password=entry_data.entry_password)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(entry_id: str, service: DiaryServiceDep):
    """Delete a diary entry."""
    await service.delete_entry(entry_id)


@router.post("/{entry_id}/favorite", response_model=DiaryEntryRead)
async def toggle_favorite(entry_id: str, service: DiaryServiceDep):
    """Flip the favorite flag."""
    return await service.toggle_favorite(entry_id)
