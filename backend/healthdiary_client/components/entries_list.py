"""
Health Diary Client — Entries List Component
=============================================

What:  The modal that lists one day's entries (opened on entries:list).
How:   Newest first. Clicking an entry publishes entry:selected, the add
       button publishes date:selected for the same day, and delete goes
       through EntryService and then broadcasts a fresh entries:updated.
"""

import inspect
import logging
from html import escape
from typing import Any, List, Optional

from healthdiary_client.core.event_bus import EventBus, Topics
from healthdiary_client.core.notifications import ConfirmHook, Notifier
from healthdiary_client.exceptions import HealthDiaryClientError
from healthdiary_client.models import DiaryEntry, Mood
from healthdiary_client.services.entry_service import EntryService
from healthdiary_client.utils import date_utils

logger = logging.getLogger(__name__)

NOTES_PREVIEW_LENGTH = 30
DELETE_CONFIRMATION = "Are you sure you want to delete this entry?"
LOAD_FAILED = "Failed to load entries"

_KNOWN_MOODS = {mood.value for mood in Mood}


def mood_text(mood: Optional[str]) -> str:
    return mood if mood in _KNOWN_MOODS else "Not defined"


def notes_preview(notes: Optional[str]) -> str:
    if not notes:
        return ""
    if len(notes) > NOTES_PREVIEW_LENGTH:
        return notes[:NOTES_PREVIEW_LENGTH] + "..."
    return notes


def entry_time(entry: DiaryEntry) -> str:
    """created_at as local "HH:MM AM"; empty when the server sent none."""
    if entry.created_at is None:
        return ""
    return entry.created_at.astimezone().strftime("%I:%M %p")


def _newest_first(entries: List[DiaryEntry]) -> List[DiaryEntry]:
    return sorted(
        entries,
        key=lambda e: e.created_at.timestamp() if e.created_at else float("-inf"),
        reverse=True,
    )


def _always_confirm(message: str) -> bool:
    return True


class EntriesList:

    def __init__(
        self,
        bus: EventBus,
        entry_service: EntryService,
        notifier: Notifier,
        confirm: Optional[ConfirmHook] = None,
    ):
        self.bus = bus
        self.entry_service = entry_service
        self.notifier = notifier
        self.confirm = confirm or _always_confirm

        self.date = ""
        self.entries: List[DiaryEntry] = []
        self.closed = True
        self.markup = ""

    def open(self, date: Any, entries: List[DiaryEntry]) -> None:
        self.date = date_utils.to_iso_date(date)
        self.entries = list(entries)
        self.closed = False
        self.markup = self.render()

    def close(self) -> None:
        self.closed = True
        self.markup = ""

    def render(self) -> str:
        rows = []
        for entry in _newest_first(self.entries):
            stats = ""
            if entry.weight:
                stats += f"<div>{entry.weight:g} kg</div>"
            if entry.sleep_hours:
                stats += f"<div>{entry.sleep_hours:g} h</div>"
            rows.append(
                f'<div class="entry-item" data-entry-id="{entry.entry_id}">'
                '<div class="entry-item-content">'
                f'<div class="entry-time">{entry_time(entry)}</div>'
                f'<div class="entry-mood"><span>{mood_text(entry.mood)}</span></div>'
                f'<div class="entry-stats">{stats}</div>'
                f'<div class="entry-preview">{escape(notes_preview(entry.notes))}</div>'
                '</div>'
                f'<button class="delete-entry-button" data-entry-id="{entry.entry_id}">Delete</button>'
                '</div>'
            )

        listing = "".join(rows) or '<div class="no-entries">No entries for this day</div>'
        return (
            '<div class="entries-list-container">'
            '<div class="entries-list-header">'
            f'<h2>{escape(date_utils.format_display_date(self.date))}</h2>'
            '<span class="close">&times;</span>'
            '</div>'
            f'<div class="entries-list">{listing}</div>'
            '<div class="entries-list-footer">'
            '<button id="add-entry-button" class="btn-add">+</button>'
            '</div>'
            '</div>'
        )

    # ── Interaction ───────────────────────────────────────────────────────

    def add_entry(self) -> None:
        self.close()
        self.bus.publish(Topics.DATE_SELECTED, self.date)

    def select_entry(self, entry_id: Any) -> bool:
        for entry in self.entries:
            if str(entry.entry_id) == str(entry_id):
                self.close()
                self.bus.publish(Topics.ENTRY_SELECTED, entry)
                return True
        return False

    async def delete_entry(self, entry_id: Any) -> bool:
        """
        Confirm, delete, then refresh every listener.

        Returns:
            True if the entry was deleted
        """
        confirmed = self.confirm(DELETE_CONFIRMATION)
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            return False

        try:
            await self.entry_service.delete_entry(entry_id)
        except HealthDiaryClientError as e:
            logger.error("Error deleting entry %s: %s", entry_id, e.message)
            self.notifier.show_error(f"Entry deletion failed: {e.message}")
            return False

        remaining = [e for e in self.entries if str(e.entry_id) != str(entry_id)]
        if remaining:
            self.open(self.date, remaining)
        else:
            self.close()

        # The entry is gone even if the refresh below fails
        self.entry_service.clear_cache()
        try:
            entries = await self.entry_service.get_all_entries()
        except HealthDiaryClientError as e:
            logger.error("Error reloading entries after delete: %s", e.message)
            self.notifier.show_error(LOAD_FAILED)
        else:
            self.bus.publish(Topics.ENTRIES_UPDATED, entries)
        return True
