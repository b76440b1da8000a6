"""
Health Diary Backend — Diary Entry Route Handlers
==================================================

What:  CRUD for the caller's diary entries under /api/entries.
Who:   Called by the client EntryService.

Every route requires a bearer token; ownership is enforced in
EntryService so a foreign entry_id yields 403, a missing one 404.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.database import get_db_session
from healthdiary.dependencies import get_current_user
from healthdiary.schemas.common import ErrorResponse, MessageResponse
from healthdiary.schemas.entry import (
    EntryCreate,
    EntryCreatedResponse,
    EntryResponse,
    EntryUpdate,
)
from healthdiary.schemas.user import TokenUser
from healthdiary.services.entry_service import entry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Entries"])

_OWNED_RESPONSES = {
    403: {"description": "Entry belongs to another user", "model": ErrorResponse},
    404: {"description": "Entry not found", "model": ErrorResponse},
}


@router.get(
    "/entries",
    response_model=List[EntryResponse],
    summary="List the caller's entries",
    description="Ordered by entry_date descending, then created_at descending.",
)
async def list_entries(
    user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[EntryResponse]:
    return await entry_service.list_entries(db, user)


@router.get(
    "/entries/{entry_id}",
    response_model=EntryResponse,
    responses=_OWNED_RESPONSES,
    summary="Get one entry",
)
async def get_entry(
    entry_id: int,
    user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.get_entry(db, entry_id, user)


@router.post(
    "/entries",
    response_model=EntryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid field values", "model": ErrorResponse}},
    summary="Create an entry",
)
async def create_entry(
    payload: EntryCreate,
    user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EntryCreatedResponse:
    entry_id = await entry_service.create_entry(db, payload, user)
    return EntryCreatedResponse(entry_id=entry_id)


@router.put(
    "/entries/{entry_id}",
    response_model=MessageResponse,
    responses=_OWNED_RESPONSES,
    summary="Update an entry (partial)",
)
async def update_entry(
    entry_id: int,
    payload: EntryUpdate,
    user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await entry_service.update_entry(db, entry_id, payload, user)
    return MessageResponse(message="Entry updated successfully")


@router.delete(
    "/entries/{entry_id}",
    response_model=MessageResponse,
    responses=_OWNED_RESPONSES,
    summary="Delete an entry",
)
async def delete_entry(
    entry_id: int,
    user: TokenUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await entry_service.delete_entry(db, entry_id, user)
    return MessageResponse(message="Entry deleted successfully")
