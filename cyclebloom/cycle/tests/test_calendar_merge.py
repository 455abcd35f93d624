"""Tests for per-day calendar classification."""

from __future__ import annotations

from datetime import date

import pytest

from cyclebloom.cycle.base import (
    CycleProfile,
    DayClassification,
    InvalidConfiguration,
    PredictedInterval,
    ProjectionResult,
)
from cyclebloom.cycle.calendar_merge import classify_days, month_range, summarize_days
from cyclebloom.cycle.projection import CycleProjector
from cyclebloom.cycle.tests.conftest import make_record


def d(value: str) -> date:
    return date.fromisoformat(value)


def projection_with(
    periods=(), windows=(), ovulations=()
) -> ProjectionResult:
    return ProjectionResult(
        predicted_periods=[PredictedInterval(d(s), d(e)) for s, e in periods],
        predicted_fertile_windows=[PredictedInterval(d(s), d(e)) for s, e in windows],
        predicted_ovulation_dates=[d(o) for o in ovulations],
    )


class TestPrecedence:
    def test_precedence_order(self) -> None:
        ordered = [
            DayClassification.LOGGED_PERIOD,
            DayClassification.PREDICTED_PERIOD,
            DayClassification.OVULATION,
            DayClassification.FERTILE_WINDOW,
            DayClassification.NONE,
        ]
        ranks = [kind.precedence for kind in ordered]
        assert ranks == sorted(ranks, reverse=True)
        assert len(set(ranks)) == len(ranks)

    def test_logged_beats_fertile_window(self) -> None:
        history = [make_record("2024-03-10", "2024-03-12")]
        projection = projection_with(
            windows=[("2024-03-08", "2024-03-13")], ovulations=["2024-03-13"]
        )
        days = classify_days(history, projection, d("2024-03-07"), d("2024-03-14"))

        assert days[d("2024-03-07")] is DayClassification.NONE
        assert days[d("2024-03-08")] is DayClassification.FERTILE_WINDOW
        assert days[d("2024-03-09")] is DayClassification.FERTILE_WINDOW
        for day in ("2024-03-10", "2024-03-11", "2024-03-12"):
            assert days[d(day)] is DayClassification.LOGGED_PERIOD
        assert days[d("2024-03-13")] is DayClassification.OVULATION
        assert days[d("2024-03-14")] is DayClassification.NONE

    def test_ovulation_beats_fertile_window(self) -> None:
        projection = projection_with(
            windows=[("2024-03-08", "2024-03-13")], ovulations=["2024-03-13"]
        )
        days = classify_days([], projection, d("2024-03-13"), d("2024-03-13"))
        assert days == {d("2024-03-13"): DayClassification.OVULATION}

    def test_logged_beats_predicted_period(self) -> None:
        history = [make_record("2024-03-28", "2024-04-01")]
        projection = projection_with(periods=[("2024-03-30", "2024-04-03")])
        days = classify_days(history, projection, d("2024-03-28"), d("2024-04-03"))

        assert days[d("2024-03-31")] is DayClassification.LOGGED_PERIOD
        assert days[d("2024-04-01")] is DayClassification.LOGGED_PERIOD
        assert days[d("2024-04-02")] is DayClassification.PREDICTED_PERIOD
        assert days[d("2024-04-03")] is DayClassification.PREDICTED_PERIOD

    def test_predicted_period_beats_ovulation(self) -> None:
        # Only possible with a very short cycle, but the merge must still be total
        projection = projection_with(
            periods=[("2024-03-10", "2024-03-14")], ovulations=["2024-03-12"]
        )
        days = classify_days([], projection, d("2024-03-12"), d("2024-03-12"))
        assert days[d("2024-03-12")] is DayClassification.PREDICTED_PERIOD


class TestCoverage:
    def test_every_day_present(self) -> None:
        days = classify_days([], ProjectionResult(), d("2024-02-01"), d("2024-02-29"))
        assert len(days) == 29
        assert set(days.values()) == {DayClassification.NONE}
        assert list(days) == sorted(days)

    def test_single_day_range(self) -> None:
        days = classify_days([], ProjectionResult(), d("2024-02-01"), d("2024-02-01"))
        assert list(days) == [d("2024-02-01")]

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            classify_days([], ProjectionResult(), d("2024-02-10"), d("2024-02-01"))

    def test_intervals_clipped_to_range(self) -> None:
        projection = projection_with(periods=[("2024-01-29", "2024-02-02")])
        days = classify_days([], projection, d("2024-02-01"), d("2024-02-05"))

        assert d("2024-01-31") not in days
        assert days[d("2024-02-01")] is DayClassification.PREDICTED_PERIOD
        assert days[d("2024-02-02")] is DayClassification.PREDICTED_PERIOD
        assert days[d("2024-02-03")] is DayClassification.NONE

    def test_intervals_outside_range_ignored(self) -> None:
        history = [make_record("2023-12-01", "2023-12-05")]
        projection = projection_with(
            periods=[("2024-05-01", "2024-05-05")], ovulations=["2024-04-17"]
        )
        days = classify_days(history, projection, d("2024-02-01"), d("2024-02-29"))
        assert set(days.values()) == {DayClassification.NONE}


class TestLoggedPeriods:
    def test_missing_end_marks_start_only(self) -> None:
        history = [make_record("2024-03-10")]
        days = classify_days(history, ProjectionResult(), d("2024-03-09"), d("2024-03-12"))

        assert days[d("2024-03-10")] is DayClassification.LOGGED_PERIOD
        assert days[d("2024-03-11")] is DayClassification.NONE

    def test_invalid_records_skipped(self) -> None:
        history = [make_record("2024-03-12", "2024-03-10"), make_record("bogus")]
        days = classify_days(history, ProjectionResult(), d("2024-03-09"), d("2024-03-13"))
        assert set(days.values()) == {DayClassification.NONE}


class TestWithProjector:
    def test_month_view_from_projection(self, projector: CycleProjector) -> None:
        history = [make_record("2024-01-01", "2024-01-05")]
        as_of = d("2024-01-10")
        result = projector.project(history, CycleProfile(), as_of, cycles_to_project=2)
        range_start, range_end = month_range(2024, 1)
        days = classify_days(history, result, range_start, range_end)

        assert days[d("2024-01-03")] is DayClassification.LOGGED_PERIOD
        assert days[d("2024-01-12")] is DayClassification.FERTILE_WINDOW
        assert days[d("2024-01-15")] is DayClassification.OVULATION
        assert days[d("2024-01-29")] is DayClassification.PREDICTED_PERIOD
        assert days[d("2024-02-02")] is DayClassification.PREDICTED_PERIOD
        assert days[d("2024-01-20")] is DayClassification.NONE


class TestMonthRange:
    def test_padded_to_whole_weeks(self) -> None:
        start, end = month_range(2024, 2)
        assert start == d("2024-01-29")
        assert end == d("2024-03-03")
        assert start.weekday() == 0
        assert end.weekday() == 6

    def test_month_starting_on_monday(self) -> None:
        start, end = month_range(2024, 4)
        assert start == d("2024-04-01")
        assert end == d("2024-05-05")

    def test_december_rolls_into_next_year(self) -> None:
        start, end = month_range(2024, 12)
        assert start == d("2024-11-25")
        assert end == d("2025-01-05")


class TestSummarize:
    def test_counts_every_classification(self) -> None:
        history = [make_record("2024-03-10", "2024-03-12")]
        projection = projection_with(
            windows=[("2024-03-08", "2024-03-13")], ovulations=["2024-03-13"]
        )
        days = classify_days(history, projection, d("2024-03-07"), d("2024-03-14"))
        counts = summarize_days(days)

        assert counts == {
            "logged_period": 3,
            "predicted_period": 0,
            "ovulation": 1,
            "fertile_window": 2,
            "none": 2,
        }
        assert sum(counts.values()) == len(days)


class TestCalendarLimits:
    def test_range_ending_on_date_max(self) -> None:
        days = classify_days([], ProjectionResult(), date(9999, 12, 30), date.max)
        assert list(days) == [date(9999, 12, 30), date.max]

    def test_month_range_clamped_at_date_max(self) -> None:
        start, end = month_range(9999, 12)
        assert end == date.max
        assert start.weekday() == 0

    def test_month_range_clamped_at_date_min(self) -> None:
        start, end = month_range(1, 1)
        assert start == date.min
        assert end.weekday() == 6
