"""Day-level calendar classification.

Merges logged periods with a ProjectionResult into one marking per visible
day.  When markings collide the higher ``DayClassification.precedence`` wins:

    LoggedPeriod > PredictedPeriod > Ovulation > FertileWindow > None
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from typing import Iterable

from cyclebloom.cycle.base import (
    DayClassification,
    InvalidConfiguration,
    PeriodRecord,
    ProjectionResult,
    iter_days,
    screen_history,
)

logger = logging.getLogger("cyclebloom.cycle.calendar_merge")


def month_range(year: int, month: int) -> tuple[date, date]:
    """Visible range for a month view, padded to whole Monday–Sunday weeks."""
    month_start = date(year, month, 1)
    _, last_day = calendar.monthrange(year, month)
    month_end = date(year, month, last_day)
    # Padding never leaves the representable calendar
    lead = min(month_start.weekday(), (month_start - date.min).days)
    trail = min(6 - month_end.weekday(), (date.max - month_end).days)
    return month_start - timedelta(days=lead), month_end + timedelta(days=trail)


def _mark(
    days: dict[date, DayClassification],
    span: Iterable[date],
    kind: DayClassification,
) -> None:
    for day in span:
        current = days.get(day)
        # Out of the visible range
        if current is None:
            continue
        if kind.precedence > current.precedence:
            days[day] = kind


def classify_days(
    history: list[PeriodRecord],
    projection: ProjectionResult,
    range_start: date,
    range_end: date,
) -> dict[date, DayClassification]:
    """Build the per-day lookup for ``[range_start, range_end]``.

    Every day in range is present in the result; unmarked days map to
    ``DayClassification.NONE``.  Invalid history records are skipped.

    Raises:
        InvalidConfiguration: If ``range_start > range_end``.
    """
    if range_start > range_end:
        raise InvalidConfiguration(
            f"range_start {range_start.isoformat()} is after range_end {range_end.isoformat()}"
        )

    days = {day: DayClassification.NONE for day in iter_days(range_start, range_end)}

    def clipped(start: date, end: date) -> Iterable[date]:
        if end < range_start or start > range_end:
            return ()
        return iter_days(max(start, range_start), min(end, range_end))

    periods, diagnostics = screen_history(history)
    if diagnostics:
        logger.debug("Calendar skipped %d invalid record(s)", len(diagnostics))

    for period in periods:
        _mark(days, clipped(period.start_date, period.last_day), DayClassification.LOGGED_PERIOD)
    for interval in projection.predicted_periods:
        _mark(days, clipped(interval.start_date, interval.end_date), DayClassification.PREDICTED_PERIOD)
    for interval in projection.predicted_fertile_windows:
        _mark(days, clipped(interval.start_date, interval.end_date), DayClassification.FERTILE_WINDOW)
    _mark(days, projection.predicted_ovulation_dates, DayClassification.OVULATION)

    return days


def summarize_days(days: dict[date, DayClassification]) -> dict[str, int]:
    """Count days per classification, for legends and quick stats."""
    counts = {kind.value: 0 for kind in DayClassification}
    for kind in days.values():
        counts[kind.value] += 1
    return counts
