"""
Health Diary Backend — Diary Entry Service
===========================================

What:  CRUD for diary entries, scoped to the authenticated user.
Who:   Called by the /api/entries route handlers.

Ownership Rules:
    - Listing only ever returns the caller's own entries.
    - get/update/delete of another user's entry → AuthorizationError (403)
      "Not authorized"; a missing entry → NotFoundError (404) "Entry not found".
      Existence is checked first, matching the order clients rely on.

Ordering:
    entry_date DESC, created_at DESC (entry_id DESC breaks ties between rows
    inserted within the same clock tick).
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from healthdiary.exceptions import AuthorizationError, DatabaseError, NotFoundError
from healthdiary.models.entry import DiaryEntry
from healthdiary.schemas.entry import EntryCreate, EntryResponse, EntryUpdate
from healthdiary.schemas.user import TokenUser

logger = logging.getLogger(__name__)


class EntryService:
    """
    Business logic layer for diary entries.

    Error Handling Strategy:
        NotFoundError and AuthorizationError propagate as-is. Unexpected
        SQLAlchemy failures are wrapped in DatabaseError so no SQL text
        reaches the client.
    """

    async def _get_owned(self, db: AsyncSession, entry_id: int, user: TokenUser) -> DiaryEntry:
        result = await db.execute(select(DiaryEntry).where(DiaryEntry.entry_id == entry_id))
        entry = result.scalar_one_or_none()

        if entry is None:
            logger.warning("Entry %d not found", entry_id)
            raise NotFoundError(resource="entry", resource_id=entry_id)

        if entry.user_id != user.user_id:
            logger.warning(
                "User %d tried to access entry %d owned by %d",
                user.user_id, entry_id, entry.user_id,
            )
            raise AuthorizationError(message="Not authorized")

        return entry

    async def list_entries(self, db: AsyncSession, user: TokenUser) -> List[EntryResponse]:
        try:
            result = await db.execute(
                select(DiaryEntry)
                .where(DiaryEntry.user_id == user.user_id)
                .order_by(
                    desc(DiaryEntry.entry_date),
                    desc(DiaryEntry.created_at),
                    desc(DiaryEntry.entry_id),
                )
            )
            entries = [EntryResponse.model_validate(e) for e in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing entries: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve entries. Please try again.",
                context={"user_id": user.user_id},
            )

        logger.info("Returning %d entries for user %d", len(entries), user.user_id)
        return entries

    async def get_entry(self, db: AsyncSession, entry_id: int, user: TokenUser) -> EntryResponse:
        entry = await self._get_owned(db, entry_id, user)
        return EntryResponse.model_validate(entry)

    async def create_entry(self, db: AsyncSession, payload: EntryCreate, user: TokenUser) -> int:
        """
        Insert a new entry for the caller.

        Returns:
            The new entry_id
        """
        entry = DiaryEntry(user_id=user.user_id, **payload.model_dump())
        db.add(entry)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating entry: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error creating entry",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Entry %d created for user %d (Date: %s)",
            entry.entry_id, user.user_id, entry.entry_date,
        )
        return entry.entry_id

    async def update_entry(
        self, db: AsyncSession, entry_id: int, payload: EntryUpdate, user: TokenUser
    ) -> None:
        """Partial update: only fields present in the request body change."""
        entry = await self._get_owned(db, entry_id, user)

        changes = payload.model_dump(exclude_unset=True)
        # entry_date is NOT NULL; an explicit null leaves it unchanged
        if changes.get("entry_date") is None:
            changes.pop("entry_date", None)

        for field, value in changes.items():
            setattr(entry, field, value)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating entry %d: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating entry",
                context={"error_type": type(e).__name__},
            )
        logger.info("Entry %d updated: %s", entry_id, sorted(changes))

    async def delete_entry(self, db: AsyncSession, entry_id: int, user: TokenUser) -> None:
        entry = await self._get_owned(db, entry_id, user)
        try:
            await db.delete(entry)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting entry %d: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting entry",
                context={"error_type": type(e).__name__},
            )
        logger.info("Entry %d deleted by user %d", entry_id, user.user_id)


# ── Singleton Instance ────────────────────────────────────────────────────
entry_service = EntryService()
