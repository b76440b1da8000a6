"""
Health Diary Client — Calendar Component
=========================================

What:  Monday-first month grid marking today and the days that have entries.
How:   Holds the last entry list broadcast on entries:updated and republishes
       calendar:month-changed (year, month, entries) whenever that list or the
       visible month changes, which keeps the chart on the same month.

Grid layout:
    Leading cells are the tail of the previous month, trailing cells the
    head of the next one, so the grid is always whole weeks. Only in-month
    cells carry an ISO date and are clickable.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from html import escape
from typing import Callable, List, Optional

from healthdiary_client.core.event_bus import EventBus, Topics
from healthdiary_client.exceptions import HealthDiaryClientError
from healthdiary_client.models import DayEntries, DiaryEntry, MonthChange
from healthdiary_client.services.entry_service import EntryService
from healthdiary_client.utils import date_utils

logger = logging.getLogger(__name__)

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass
class CalendarDay:
    day: int
    iso_date: Optional[str] = None
    in_month: bool = True
    is_today: bool = False
    entry_count: int = 0

    @property
    def css_classes(self) -> str:
        classes = ["date"]
        if not self.in_month:
            classes.append("inactive")
        if self.is_today:
            classes.append("active")
        if self.entry_count > 0:
            classes.append("has-entry")
        if self.entry_count > 1:
            classes.append("multi-entry")
        return " ".join(classes)


class Calendar:

    def __init__(
        self,
        bus: EventBus,
        entry_service: EntryService,
        year: Optional[int] = None,
        month: Optional[int] = None,
        today: Callable[[], str] = date_utils.today,
    ):
        self.bus = bus
        self.entry_service = entry_service
        self.today = today

        current = date.fromisoformat(today())
        self.year = year or current.year
        self.month = month or current.month

        # None until the first entries:updated or fallback load
        self.entries: Optional[List[DiaryEntry]] = None
        self.markup = ""
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._reload_task: Optional[asyncio.Future] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.bus.subscribe(Topics.ENTRIES_UPDATED, self._on_entries_updated)

        if self.entries is None:
            await self.load_entries()

        self.update()
        self.publish_current_month()

    def cleanup(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._reload_task is not None and not self._reload_task.done():
            self._reload_task.cancel()

    async def load_entries(self) -> List[DiaryEntry]:
        """Fallback fetch for when no entries:updated has arrived yet."""
        try:
            self.entries = await self.entry_service.get_all_entries()
        except HealthDiaryClientError as e:
            logger.error("Error fetching entries: %s", e.message)
            self.entries = []
        return self.entries

    def _on_entries_updated(self, entries: Optional[List[DiaryEntry]]) -> None:
        if entries is None:
            self._reload_task = asyncio.ensure_future(self._reload())
            return
        self.entries = entries
        logger.debug("Entries updated, refreshing calendar")
        self.refresh()

    async def _reload(self) -> None:
        await self.load_entries()
        self.refresh()

    # ── Month navigation ──────────────────────────────────────────────────

    def publish_current_month(self) -> None:
        self.bus.publish(
            Topics.MONTH_CHANGED,
            MonthChange(year=self.year, month=self.month, entries=self.entries or []),
        )

    def previous_month(self) -> None:
        self.year, self.month = date_utils.shift_month(self.year, self.month, -1)
        self.refresh()

    def next_month(self) -> None:
        self.year, self.month = date_utils.shift_month(self.year, self.month, 1)
        self.refresh()

    def refresh(self) -> None:
        self.update()
        self.publish_current_month()

    # ── Grid ──────────────────────────────────────────────────────────────

    def entries_for(self, iso_date: str) -> List[DiaryEntry]:
        return [
            entry for entry in self.entries or []
            if entry.entry_date and date_utils.is_same_day(entry.entry_date, iso_date)
        ]

    def build_grid(self) -> List[CalendarDay]:
        month_range = date_utils.get_month_range(self.year, self.month)
        first_weekday = date(self.year, self.month, 1).weekday()  # Monday = 0
        today = self.today()

        prev_year, prev_month = date_utils.shift_month(self.year, self.month, -1)
        prev_days = date_utils.get_month_range(prev_year, prev_month).days_in_month

        grid = [
            CalendarDay(day=prev_days - first_weekday + i + 1, in_month=False)
            for i in range(first_weekday)
        ]

        for day in range(1, month_range.days_in_month + 1):
            iso_date = date(self.year, self.month, day).isoformat()
            grid.append(CalendarDay(
                day=day,
                iso_date=iso_date,
                is_today=date_utils.is_same_day(iso_date, today),
                entry_count=len(self.entries_for(iso_date)),
            ))

        trailing = 7 - (first_weekday + month_range.days_in_month) % 7
        if trailing < 7:
            grid.extend(CalendarDay(day=i, in_month=False) for i in range(1, trailing + 1))

        return grid

    def update(self) -> None:
        self.markup = self.render()

    def render(self) -> str:
        cells = []
        for cell in self.build_grid():
            if not cell.in_month:
                cells.append(f'<div class="{cell.css_classes}">{cell.day}</div>')
                continue
            badge = (
                f'<span class="entry-count">{cell.entry_count}</span>'
                if cell.entry_count > 1 else ""
            )
            cells.append(
                f'<div class="{cell.css_classes}" data-date="{cell.iso_date}" '
                f'data-entries="{cell.entry_count}">{cell.day}{badge}</div>'
            )

        weekdays = "".join(f'<div class="day">{name}</div>' for name in WEEKDAYS)
        return (
            '<div class="calendar">'
            '<div class="header">'
            '<button id="prevBtn">&lsaquo;</button>'
            f'<div class="monthYear">{escape(date_utils.month_label(self.year, self.month))}</div>'
            '<button id="nextBtn">&rsaquo;</button>'
            '</div>'
            f'<div class="days">{weekdays}</div>'
            f'<div class="dates" id="dates">{"".join(cells)}</div>'
            '</div>'
        )

    # ── Interaction ───────────────────────────────────────────────────────

    def handle_date_click(self, selected_date: str) -> None:
        """Days with entries open the list; empty days open a new entry form."""
        iso_date = date_utils.to_iso_date(selected_date)
        day_entries = self.entries_for(iso_date)

        if day_entries:
            self.bus.publish(Topics.ENTRIES_LIST, DayEntries(date=iso_date, entries=day_entries))
        else:
            self.bus.publish(Topics.DATE_SELECTED, iso_date)
