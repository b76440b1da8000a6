"""
Health Diary Client — Chart Component
======================================

What:  One line per month for weight, sleep or mood.
How:   For every day of the calendar's current month that has entries, the
       latest entry (by created_at) supplies the point; days whose latest
       entry lacks the metric are skipped rather than drawn as gaps.

Y-axis:
    sleep   0 - 12
    mood    0.5 - 5.5, one tick per mood (Sad=1 … Happy=5)
    weight  min/max of the known weights padded by max(5, ceil(10% of range)),
            50 - 100 when no weight is known
"""

import logging
import math
from datetime import datetime, timezone
from html import escape
from typing import Callable, Dict, List, NamedTuple, Optional

from healthdiary_client.core.event_bus import EventBus, Topics
from healthdiary_client.models import MOOD_SCALE, DiaryEntry, MonthChange
from healthdiary_client.utils import date_utils

logger = logging.getLogger(__name__)

METRICS = {
    "weight": "Weight (kg)",
    "sleep": "Sleep (hours)",
    "mood": "Mood",
}
UNITS = {"weight": "kg", "sleep": "h"}

NO_DATA_MESSAGE = "No data available. Add entries from the calendar."

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ChartData(NamedTuple):
    labels: List[str]    # day numbers for the x-axis
    values: List[float]
    days: List[str]      # full dates for tooltips


class AxisRange(NamedTuple):
    min: float
    max: float
    step: Optional[float] = None


def metric_value(entry: Optional[DiaryEntry], metric: str) -> Optional[float]:
    if entry is None:
        return None
    if metric == "weight":
        return float(entry.weight) if entry.weight is not None else None
    if metric == "sleep":
        return float(entry.sleep_hours) if entry.sleep_hours is not None else None
    if metric == "mood":
        return MOOD_SCALE.get(entry.mood) if entry.mood else None
    return None


def format_value(metric: str, value: float) -> str:
    """Tooltip / tick text: mood names for mood, value plus unit otherwise."""
    if metric == "mood":
        for name, level in MOOD_SCALE.items():
            if level == value:
                return name
    return f"{value:g}{UNITS.get(metric, '')}"


class Chart:

    def __init__(
        self,
        bus: EventBus,
        year: Optional[int] = None,
        month: Optional[int] = None,
        metric: str = "weight",
        today: Callable[[], str] = date_utils.today,
    ):
        self.bus = bus
        current = date_utils.to_date(today())
        self.year = year or current.year
        self.month = month or current.month
        self.metric = metric

        self.entries: List[DiaryEntry] = []
        self.data = ChartData([], [], [])
        self.markup = ""
        self._unsubscribes: List[Callable[[], None]] = []

    def initialize(self) -> None:
        if not self._unsubscribes:
            self._unsubscribes = [
                self.bus.subscribe(Topics.MONTH_CHANGED, self._on_month_changed),
                self.bus.subscribe(Topics.ENTRIES_UPDATED, self._on_entries_updated),
            ]
        self.update()

    def cleanup(self) -> None:
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []

    def _on_month_changed(self, change: MonthChange) -> None:
        logger.debug("Month changed: %d-%02d", change.year, change.month)
        self.year = change.year
        self.month = change.month
        self.entries = list(change.entries)
        self.update()

    def _on_entries_updated(self, entries: Optional[List[DiaryEntry]]) -> None:
        if entries is None:
            return
        self.entries = list(entries)
        self.update()

    def set_metric(self, metric: str) -> None:
        if metric not in METRICS:
            raise ValueError(f"Unknown metric '{metric}'. Must be one of: {sorted(METRICS)}")
        self.metric = metric
        self.update()

    # ── Data ──────────────────────────────────────────────────────────────

    def get_month_data(self, year: int, month: int, metric: str) -> ChartData:
        by_day: Dict[int, List[DiaryEntry]] = {}
        for entry in self.entries:
            entry_date = date_utils.to_date(entry.entry_date)
            if entry_date is None or (entry_date.year, entry_date.month) != (year, month):
                continue
            by_day.setdefault(entry_date.day, []).append(entry)

        labels, values, days = [], [], []
        for day in sorted(by_day):
            latest = max(by_day[day], key=lambda e: e.created_at or _EPOCH)
            value = metric_value(latest, metric)
            if value is None:
                continue
            labels.append(str(day))
            values.append(value)
            days.append(date_utils.format_full_date(date_utils.create_date(year, month, day)))

        logger.debug("%s points for %d-%02d (%s)", len(values), year, month, metric)
        return ChartData(labels, values, days)

    def y_axis_range(self, metric: str) -> AxisRange:
        if metric == "sleep":
            return AxisRange(0, 12)
        if metric == "mood":
            return AxisRange(0.5, 5.5, 1)
        if metric == "weight":
            weights = [e.weight for e in self.entries if e.weight is not None]
            if not weights:
                return AxisRange(50, 100)
            low, high = min(weights), max(weights)
            padding = max(5, math.ceil((high - low) * 0.1))
            return AxisRange(max(0, math.floor(low - padding)), math.ceil(high + padding))
        return AxisRange(0, 100)

    # ── Rendering ─────────────────────────────────────────────────────────

    def update(self) -> None:
        self.data = self.get_month_data(self.year, self.month, self.metric)
        self.markup = self.render()

    def render(self) -> str:
        options = "".join(
            f'<option value="{key}"{" selected" if key == self.metric else ""}>{label}</option>'
            for key, label in METRICS.items()
        )
        controls = (
            '<div class="chart-controls"><label for="metric-select">Metric</label>'
            f'<select id="metric-select" class="control-select">{options}</select></div>'
        )

        if not self.data.values:
            body = f'<div id="no-data-message" class="no-data-message">{NO_DATA_MESSAGE}</div>'
        else:
            axis = self.y_axis_range(self.metric)
            points = "".join(
                f'<li data-day="{label}" title="{escape(day)}">{escape(format_value(self.metric, value))}</li>'
                for label, value, day in zip(self.data.labels, self.data.values, self.data.days)
            )
            body = (
                f'<ol id="mainChart" class="chart-points" data-metric="{self.metric}" '
                f'data-min="{axis.min:g}" data-max="{axis.max:g}">{points}</ol>'
            )

        return (
            '<div class="chart"><h2>Health Tracking</h2>'
            f'{controls}<div class="chart-wrapper">{body}</div></div>'
        )
