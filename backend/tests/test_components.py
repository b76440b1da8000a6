"""
Health Diary Client — Dashboard Component Tests
================================================

What:  Calendar, Chart and EntriesList driven through a real EventBus with
       a mocked EntryService.

What we test:
    ✅ Monday-first grid with leading/trailing days, today and entry markers
    ✅ Day clicks publish entries:list or date:selected
    ✅ Calendar falls back to its own fetch and survives a failing one
    ✅ Chart picks the latest entry per day and skips missing values
    ✅ Y-axis ranges per metric
    ✅ Entry list ordering, previews, add/select/delete flows
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from healthdiary_client.components.calendar import Calendar
from healthdiary_client.components.chart import NO_DATA_MESSAGE, AxisRange, Chart, format_value
from healthdiary_client.components.entries_list import EntriesList, mood_text, notes_preview
from healthdiary_client.core.event_bus import EventBus, Topics
from healthdiary_client.core.notifications import ERROR, Notifier
from healthdiary_client.exceptions import NetworkError, ServerError
from healthdiary_client.models import DayEntries, DiaryEntry, MonthChange


def _entry(entry_id, entry_date, hour=8, **fields):
    return DiaryEntry(
        entry_id=entry_id,
        entry_date=entry_date,
        created_at=datetime(2025, 3, 1, hour, 0, tzinfo=timezone.utc),
        **fields,
    )


MARCH_ENTRIES = [
    _entry(1, "2025-03-01", hour=8, mood="Sad", weight=70, sleep_hours=6),
    _entry(2, "2025-03-01", hour=20, mood="Happy", weight=71),
    _entry(3, "2025-03-03", mood="Neutral", sleep_hours=7),
    _entry(4, "2025-04-02", weight=90),
]


def _mock_entry_service(entries=None, error=None):
    service = MagicMock()
    service.get_all_entries = AsyncMock(return_value=entries or [], side_effect=error)
    service.delete_entry = AsyncMock(return_value={"message": "Entry deleted successfully"})
    return service


class TestCalendarGrid:

    def setup_method(self):
        self.bus = EventBus()
        self.calendar = Calendar(
            self.bus, _mock_entry_service(), year=2025, month=3, today=lambda: "2025-03-15",
        )
        self.calendar.entries = MARCH_ENTRIES

    def test_march_2025_grid(self):
        grid = self.calendar.build_grid()

        # 1 March 2025 is a Saturday: five days of February lead the grid
        assert [c.day for c in grid[:5]] == [24, 25, 26, 27, 28]
        assert not any(c.in_month for c in grid[:5])
        assert grid[5].iso_date == "2025-03-01"
        assert [c.day for c in grid[-6:]] == [1, 2, 3, 4, 5, 6]
        assert len(grid) % 7 == 0

    def test_month_of_whole_weeks_has_no_padding(self):
        # February 2021 starts on a Monday and has 28 days
        calendar = Calendar(self.bus, _mock_entry_service(), year=2021, month=2, today=lambda: "2025-03-15")
        grid = calendar.build_grid()
        assert len(grid) == 28
        assert all(c.in_month for c in grid)

    def test_markers(self):
        grid = self.calendar.build_grid()
        by_date = {c.iso_date: c for c in grid if c.in_month}

        assert by_date["2025-03-01"].css_classes == "date has-entry multi-entry"
        assert by_date["2025-03-03"].css_classes == "date has-entry"
        assert by_date["2025-03-15"].css_classes == "date active"
        assert grid[0].css_classes == "date inactive"

    def test_render(self):
        self.calendar.update()
        markup = self.calendar.markup

        assert '<div class="monthYear">March 2025</div>' in markup
        assert 'data-date="2025-03-01" data-entries="2"' in markup
        assert '<span class="entry-count">2</span>' in markup

    def test_click_on_day_with_entries_publishes_list(self):
        received = []
        self.bus.subscribe(Topics.ENTRIES_LIST, received.append)

        self.calendar.handle_date_click("2025-03-01")

        assert isinstance(received[0], DayEntries)
        assert received[0].date == "2025-03-01"
        assert [e.entry_id for e in received[0].entries] == [1, 2]

    def test_click_on_empty_day_publishes_date(self):
        received = []
        self.bus.subscribe(Topics.DATE_SELECTED, received.append)

        self.calendar.handle_date_click("2025-03-02T00:00:00Z")

        assert received == ["2025-03-02"]

    def test_month_navigation_wraps_years(self):
        received = []
        self.bus.subscribe(Topics.MONTH_CHANGED, received.append)
        calendar = Calendar(self.bus, _mock_entry_service(), year=2025, month=1, today=lambda: "2025-01-10")

        calendar.previous_month()

        assert (calendar.year, calendar.month) == (2024, 12)
        assert (received[-1].year, received[-1].month) == (2024, 12)
        calendar.next_month()
        assert (calendar.year, calendar.month) == (2025, 1)


class TestCalendarLoading:

    def setup_method(self):
        self.bus = EventBus()
        self.months = []
        self.bus.subscribe(Topics.MONTH_CHANGED, self.months.append)

    @pytest.mark.asyncio
    async def test_initialize_falls_back_to_own_fetch(self):
        service = _mock_entry_service(MARCH_ENTRIES)
        calendar = Calendar(self.bus, service, year=2025, month=3, today=lambda: "2025-03-15")

        await calendar.initialize()

        service.get_all_entries.assert_awaited_once()
        assert isinstance(self.months[-1], MonthChange)
        assert len(self.months[-1].entries) == 4

    @pytest.mark.asyncio
    async def test_failed_fetch_leaves_empty_calendar(self):
        service = _mock_entry_service(error=NetworkError())
        calendar = Calendar(self.bus, service, year=2025, month=3, today=lambda: "2025-03-15")

        await calendar.initialize()

        assert calendar.entries == []
        assert self.months[-1].entries == []
        assert "has-entry" not in calendar.markup

    @pytest.mark.asyncio
    async def test_entries_updated_payload_refreshes(self):
        calendar = Calendar(self.bus, _mock_entry_service(), year=2025, month=3, today=lambda: "2025-03-15")
        await calendar.initialize()

        self.bus.publish(Topics.ENTRIES_UPDATED, MARCH_ENTRIES)

        assert 'data-entries="2"' in calendar.markup
        assert len(self.months[-1].entries) == 4

    @pytest.mark.asyncio
    async def test_entries_updated_without_payload_reloads(self):
        service = _mock_entry_service(MARCH_ENTRIES)
        calendar = Calendar(self.bus, service, year=2025, month=3, today=lambda: "2025-03-15")
        calendar.entries = []
        await calendar.initialize()
        service.get_all_entries.assert_not_awaited()

        self.bus.publish(Topics.ENTRIES_UPDATED)
        await calendar._reload_task

        service.get_all_entries.assert_awaited_once()
        assert len(calendar.entries) == 4

    @pytest.mark.asyncio
    async def test_cleanup_unsubscribes(self):
        calendar = Calendar(self.bus, _mock_entry_service(), year=2025, month=3, today=lambda: "2025-03-15")
        await calendar.initialize()

        calendar.cleanup()

        assert self.bus.subscriber_count(Topics.ENTRIES_UPDATED) == 0


class TestChart:

    def setup_method(self):
        self.bus = EventBus()
        self.chart = Chart(self.bus, year=2025, month=3, today=lambda: "2025-03-15")
        self.chart.initialize()

    def _publish_month(self, entries, year=2025, month=3):
        self.bus.publish(Topics.MONTH_CHANGED, MonthChange(year=year, month=month, entries=entries))

    def test_latest_entry_of_the_day_wins(self):
        self._publish_month(MARCH_ENTRIES)
        data = self.chart.get_month_data(2025, 3, "weight")

        assert data.labels == ["1"]
        assert data.values == [71.0]
        assert data.days == ["March 1, 2025"]

    def test_days_without_the_metric_are_skipped(self):
        self._publish_month(MARCH_ENTRIES)

        mood = self.chart.get_month_data(2025, 3, "mood")
        sleep = self.chart.get_month_data(2025, 3, "sleep")

        assert (mood.labels, mood.values) == (["1", "3"], [5, 3])
        assert (sleep.labels, sleep.values) == (["3"], [7.0])

    def test_month_change_follows_calendar(self):
        self._publish_month(MARCH_ENTRIES, month=4)

        assert self.chart.month == 4
        assert self.chart.data.values == [90.0]

    @pytest.mark.parametrize("metric, expected", [
        ("sleep", AxisRange(0, 12)),
        ("mood", AxisRange(0.5, 5.5, 1)),
        ("weight", AxisRange(65, 95)),
    ])
    def test_y_axis_range(self, metric, expected):
        self._publish_month(MARCH_ENTRIES)
        assert self.chart.y_axis_range(metric) == expected

    def test_weight_range_without_weights(self):
        assert self.chart.y_axis_range("weight") == AxisRange(50, 100)

    def test_empty_month_shows_message(self):
        self._publish_month([])
        assert NO_DATA_MESSAGE in self.chart.markup
        assert "mainChart" not in self.chart.markup

    def test_render_points(self):
        self._publish_month(MARCH_ENTRIES)
        self.chart.set_metric("mood")

        assert 'data-metric="mood"' in self.chart.markup
        assert '<li data-day="1" title="March 1, 2025">Happy</li>' in self.chart.markup

    def test_unknown_metric_rejected(self):
        with pytest.raises(ValueError, match="Unknown metric"):
            self.chart.set_metric("steps")

    def test_format_value(self):
        assert format_value("mood", 4) == "Satisfied"
        assert format_value("weight", 71.0) == "71kg"
        assert format_value("sleep", 7.5) == "7.5h"

    def test_cleanup_stops_updates(self):
        self.chart.cleanup()
        self._publish_month(MARCH_ENTRIES, month=4)
        assert self.chart.month == 3


class TestEntriesList:

    def setup_method(self):
        self.bus = EventBus()
        self.notifier = Notifier()
        self.service = _mock_entry_service([MARCH_ENTRIES[1]])
        self.entries_list = EntriesList(self.bus, self.service, self.notifier)
        self.updates = []
        self.bus.subscribe(Topics.ENTRIES_UPDATED, self.updates.append)

    def test_render_newest_first(self):
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])
        markup = self.entries_list.markup

        assert "Saturday, March 1, 2025" in markup
        assert markup.index('data-entry-id="2"') < markup.index('data-entry-id="1"')
        assert "<div>71 kg</div>" in markup
        assert "<div>6 h</div>" in markup

    def test_render_empty_day(self):
        self.entries_list.open("2025-03-02", [])
        assert "No entries for this day" in self.entries_list.markup

    def test_helpers(self):
        assert mood_text("Happy") == "Happy"
        assert mood_text(None) == "Not defined"
        assert mood_text("Ecstatic") == "Not defined"
        assert notes_preview("x" * 40) == "x" * 30 + "..."
        assert notes_preview("short") == "short"
        assert notes_preview(None) == ""

    def test_notes_are_escaped(self):
        entry = _entry(9, "2025-03-05", notes="<b>bold</b>")
        self.entries_list.open("2025-03-05", [entry])
        assert "&lt;b&gt;bold&lt;/b&gt;" in self.entries_list.markup

    def test_add_entry_publishes_date(self):
        received = []
        self.bus.subscribe(Topics.DATE_SELECTED, received.append)
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        self.entries_list.add_entry()

        assert received == ["2025-03-01"]
        assert self.entries_list.closed

    def test_select_entry(self):
        received = []
        self.bus.subscribe(Topics.ENTRY_SELECTED, received.append)
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        assert self.entries_list.select_entry("99") is False
        assert self.entries_list.select_entry("2") is True
        assert received[0].entry_id == 2

    @pytest.mark.asyncio
    async def test_delete_keeps_list_open_with_remaining(self):
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        assert await self.entries_list.delete_entry(1) is True

        self.service.delete_entry.assert_awaited_once_with(1)
        self.service.clear_cache.assert_called_once()
        assert not self.entries_list.closed
        assert [e.entry_id for e in self.entries_list.entries] == [2]
        assert self.updates == [[MARCH_ENTRIES[1]]]

    @pytest.mark.asyncio
    async def test_delete_last_entry_closes_list(self):
        self.entries_list.open("2025-03-03", [MARCH_ENTRIES[2]])

        assert await self.entries_list.delete_entry(3) is True
        assert self.entries_list.closed

    @pytest.mark.asyncio
    async def test_declined_confirmation_keeps_entry(self):
        async def decline(message):
            return False

        self.entries_list.confirm = decline
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        assert await self.entries_list.delete_entry(1) is False
        self.service.delete_entry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_delete_notifies(self):
        self.service.delete_entry.side_effect = ServerError(500, "boom")
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        assert await self.entries_list.delete_entry(1) is False
        assert self.notifier.latest.message == "Entry deletion failed: boom"
        assert self.notifier.latest.level == ERROR
        assert self.updates == []

    @pytest.mark.asyncio
    async def test_refresh_failure_after_delete_is_a_load_error(self):
        self.service.get_all_entries.side_effect = ServerError(500, "boom")
        self.entries_list.open("2025-03-01", MARCH_ENTRIES[:2])

        assert await self.entries_list.delete_entry(1) is True
        assert self.notifier.latest.message == "Failed to load entries"
        assert [e.entry_id for e in self.entries_list.entries] == [2]
        assert self.updates == []
