"""
Health Diary Client — Dashboard View
=====================================

What:  The logged-in page: calendar, chart, the day's entry list and the
       entry form, wired together only through the EventBus.

Refresh protocol:
    1. initialize() fetches all entries once and publishes entries:updated.
    2. Calendar and chart re-render from that payload; the calendar
       republishes calendar:month-changed for the chart.
    3. Clicking a day publishes entries:list (day has entries) or
       date:selected (it doesn't); picking an entry publishes entry:selected.
    4. Every save/delete goes through EntryService (which invalidates its
       cache), re-fetches, and publishes entries:updated again.
"""

import asyncio
import inspect
import logging
from enum import Enum
from html import escape
from typing import Any, Callable, Dict, List, Optional

from healthdiary_client.components.calendar import Calendar
from healthdiary_client.components.chart import Chart
from healthdiary_client.components.entries_list import DELETE_CONFIRMATION, EntriesList
from healthdiary_client.context import ClientContext
from healthdiary_client.core.event_bus import Topics
from healthdiary_client.exceptions import HealthDiaryClientError
from healthdiary_client.models import (
    DEFAULT_MOOD_LEVEL,
    MOOD_SCALE,
    DayEntries,
    DiaryEntry,
    level_from_mood,
    mood_from_level,
)
from healthdiary_client.utils import date_utils

logger = logging.getLogger(__name__)


class FormState(Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class EntryForm:
    """State of the entry modal; new entries have no entry_id."""

    def __init__(self):
        self.is_open = False
        self.state = FormState.IDLE
        self.reset()

    def reset(self) -> None:
        self.entry_id: Optional[int] = None
        self.entry_date = ""
        self.heading = "Diary Entry"
        self.mood_level = DEFAULT_MOOD_LEVEL
        self.weight: Optional[float] = None
        self.sleep_hours: Optional[float] = None
        self.notes = ""

    @property
    def mood(self) -> str:
        return mood_from_level(self.mood_level)

    @property
    def show_delete(self) -> bool:
        return self.entry_id is not None

    def set_mood_level(self, value: Any) -> None:
        self.mood_level = MOOD_SCALE[mood_from_level(value)]

    def open_new(self, selected_date: Any) -> None:
        self.reset()
        self.entry_date = date_utils.to_iso_date(selected_date)
        self.heading = f"New Entry - {date_utils.format_display_date(self.entry_date)}"
        self.is_open = True

    def open_existing(self, entry: DiaryEntry) -> None:
        self.reset()
        self.entry_id = entry.entry_id
        self.entry_date = date_utils.to_iso_date(entry.entry_date)
        self.heading = f"Diary Entry - {date_utils.format_display_date(self.entry_date)}"
        self.mood_level = level_from_mood(entry.mood)
        self.weight = entry.weight
        self.sleep_hours = entry.sleep_hours
        self.notes = entry.notes or ""
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "entry_date": self.entry_date,
            "mood": self.mood,
            "weight": self.weight,
            "sleep_hours": self.sleep_hours,
            "notes": self.notes,
        }

    def render(self) -> str:
        if not self.is_open:
            return ""
        delete = (
            '<button type="button" id="delete-entry" class="btn-delete">Delete</button>'
            if self.show_delete else ""
        )
        return (
            '<div id="entry-modal" class="modal"><div class="modal-content">'
            f"<h2>{escape(self.heading)}</h2>"
            '<form id="entry-form">'
            f'<input type="hidden" id="entry-date" value="{self.entry_date}">'
            f'<input type="hidden" id="entry-id" value="{self.entry_id or ""}">'
            f'<input type="range" id="mood-slider" min="1" max="5" value="{self.mood_level}">'
            f'<div class="mood-label" id="mood-label">{self.mood}</div>'
            f'<input type="number" id="weight" value="{"" if self.weight is None else self.weight}">'
            f'<input type="number" id="sleep" value="{"" if self.sleep_hours is None else self.sleep_hours}">'
            f'<textarea id="notes">{escape(self.notes)}</textarea>'
            f'<div class="form-actions"><button type="submit" class="btn">Save</button>{delete}</div>'
            "</form></div></div>"
        )


class DashboardView:

    def __init__(self, ctx: ClientContext):
        self.ctx = ctx
        self.calendar = Calendar(ctx.bus, ctx.entry_service)
        self.chart = Chart(ctx.bus)
        self.entries_list = EntriesList(ctx.bus, ctx.entry_service, ctx.notifier, ctx.confirm)
        self.form = EntryForm()

        self._initialized = False
        self._unsubscribes: List[Callable[[], None]] = []

    # ── Rendering ─────────────────────────────────────────────────────────

    def render(self) -> str:
        user = self.ctx.auth.get_user()
        username = escape(user.username) if user else "User"

        notification = ""
        latest = self.ctx.notifier.latest
        if latest is not None:
            notification = f'<div class="notification {latest.level}">{escape(latest.message)}</div>'

        entries_list = self.entries_list.markup if not self.entries_list.closed else ""
        return (
            '<div class="dashboard-wrapper"><div class="dashboard-container">'
            '<header class="dashboard-header"><h1>Health Diary</h1>'
            f'<div class="user-actions"><span id="username-display">{username}</span>'
            '<button id="logout-button" class="btn-logout">Log out</button></div></header>'
            f"{notification}"
            '<div class="dashboard-content">'
            f'<div class="calendar-container">{self.calendar.render()}</div>'
            f'<div class="chart-container">{self.chart.render()}</div>'
            "</div>"
            f"{self.form.render()}"
            f'<div id="entries-list-modal" class="modal">{entries_list}</div>'
            "</div></div>"
        )

    def _refresh_root(self) -> None:
        if self.ctx.router.current_view is self:
            self.ctx.router.root.render(self.render())

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        if self._initialized:
            logger.debug("Dashboard already initialized, skipping")
            return
        self._initialized = True

        bus = self.ctx.bus
        self._unsubscribes = [
            bus.subscribe(Topics.ENTRY_SELECTED, self._on_entry_selected),
            bus.subscribe(Topics.DATE_SELECTED, self._on_date_selected),
            bus.subscribe(Topics.ENTRIES_LIST, self._on_entries_list),
        ]
        await self.initialize_components()
        self._refresh_root()

    async def initialize_components(self) -> None:
        self.chart.initialize()

        # The calendar's fallback load and this fetch share one request
        calendar_result, entries = await asyncio.gather(
            self.calendar.initialize(),
            self.ctx.entry_service.get_all_entries(),
            return_exceptions=True,
        )
        if isinstance(calendar_result, BaseException):
            raise calendar_result
        if isinstance(entries, HealthDiaryClientError):
            logger.error("Error fetching entries: %s", entries.message)
            self.ctx.notifier.show_error("Failed to load entries")
            return
        if isinstance(entries, BaseException):
            raise entries

        self.ctx.bus.publish(Topics.ENTRIES_UPDATED, entries)

    def cleanup(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []
        self.calendar.cleanup()
        self.chart.cleanup()
        self._initialized = False

    # ── Bus handlers ──────────────────────────────────────────────────────

    def _on_entry_selected(self, entry: DiaryEntry) -> None:
        self.form.open_existing(entry)
        self._refresh_root()

    def _on_date_selected(self, selected_date: str) -> None:
        self.form.open_new(selected_date)
        self._refresh_root()

    def _on_entries_list(self, day: DayEntries) -> None:
        self.entries_list.open(day.date, day.entries)
        self._refresh_root()

    # ── User actions ──────────────────────────────────────────────────────

    def previous_month(self) -> None:
        self.calendar.previous_month()
        self._refresh_root()

    def next_month(self) -> None:
        self.calendar.next_month()
        self._refresh_root()

    def select_date(self, selected_date: str) -> None:
        self.calendar.handle_date_click(selected_date)

    async def refresh_data(self) -> None:
        self.ctx.entry_service.clear_cache()
        entries = await self.ctx.entry_service.get_all_entries()
        self.ctx.bus.publish(Topics.ENTRIES_UPDATED, entries)

    async def submit_entry(self) -> bool:
        """
        Save the open form; a second submit while one is in flight is ignored.

        Returns:
            False if the submit was ignored
        """
        if self.form.state is FormState.SUBMITTING:
            logger.debug("Form is already submitting, ignoring")
            return False

        self.form.state = FormState.SUBMITTING
        try:
            await self.save_entry()
        finally:
            self.form.state = FormState.IDLE
        return True

    async def save_entry(self) -> None:
        entry_id = self.form.entry_id
        try:
            if entry_id is not None:
                await self.ctx.entry_service.update_entry(entry_id, self.form.to_payload())
            else:
                await self.ctx.entry_service.create_entry(self.form.to_payload())
            await self.refresh_data()
        except HealthDiaryClientError as e:
            logger.error("Error saving entry: %s", e.message)
            self.ctx.notifier.show_error("Failed to save entry")
        else:
            self.form.close()
            self.ctx.notifier.show_success("Entry updated" if entry_id is not None else "New entry added")
        self._refresh_root()

    async def delete_current_entry(self) -> bool:
        entry_id = self.form.entry_id
        if entry_id is None:
            return False

        confirmed = self.ctx.confirm(DELETE_CONFIRMATION)
        if inspect.isawaitable(confirmed):
            confirmed = await confirmed
        if not confirmed:
            return False

        try:
            await self.ctx.entry_service.delete_entry(entry_id)
            await self.refresh_data()
        except HealthDiaryClientError as e:
            logger.error("Error deleting entry %s: %s", entry_id, e.message)
            self.ctx.notifier.show_error("Failed to delete entry")
            self._refresh_root()
            return False

        self.form.close()
        self.ctx.notifier.show_success("Entry deleted")
        self._refresh_root()
        return True

    async def delete_listed_entry(self, entry_id: Any) -> bool:
        deleted = await self.entries_list.delete_entry(entry_id)
        self._refresh_root()
        return deleted

    async def logout(self) -> None:
        self.ctx.auth.logout()
        await self.ctx.router.navigate("/login")
