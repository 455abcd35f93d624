"""Canonical data models for the CycleBloom projection engine.

Every engine stage (average inference, forward projection, calendar merge)
reads and returns these types.  They are plain dataclasses with no I/O so the
engine stays a pure function of its inputs; the API layer converts them to
and from the camelCase ``YYYY-MM-DD`` wire form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterator

logger = logging.getLogger("cyclebloom.cycle")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CycleEngineError(ValueError):
    """Base class for all projection engine errors."""


class InvalidConfiguration(CycleEngineError):
    """Raised when the caller hands the engine inputs it can never project.

    Non-positive effective averages, a negative cycle count or an inverted
    calendar range are programming errors in the caller, not data-quality
    problems, so they abort the call.
    """


class InvalidRecord(CycleEngineError):
    """A single PeriodRecord that cannot be used.

    Never escapes the engine: the record is skipped and a diagnostic is
    attached to the BasisNote instead.
    """


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class BasisSource(str, Enum):
    """Where an effective average came from.

    Members are declared from weakest to strongest; ``rank`` follows that
    order so the overall confidence of a projection is the weakest source
    used.
    """

    DEFAULT = "default-low-confidence"
    INFERRED = "inferred"
    USER_PROVIDED = "user-provided"

    @property
    def rank(self) -> int:
        return list(BasisSource).index(self)


class BasisStatus(str, Enum):
    OK = "ok"
    INSUFFICIENT_DATA = "insufficient-data"


class DayClassification(str, Enum):
    """Per-day calendar marking.

    ``precedence`` is the merge order: a higher value wins when two markings
    land on the same day.
    """

    LOGGED_PERIOD = "logged_period"
    PREDICTED_PERIOD = "predicted_period"
    OVULATION = "ovulation"
    FERTILE_WINDOW = "fertile_window"
    NONE = "none"

    @property
    def precedence(self) -> int:
        return _PRECEDENCE[self]


_PRECEDENCE = {
    DayClassification.NONE: 0,
    DayClassification.FERTILE_WINDOW: 1,
    DayClassification.OVULATION: 2,
    DayClassification.PREDICTED_PERIOD: 3,
    DayClassification.LOGGED_PERIOD: 4,
}


# ---------------------------------------------------------------------------
# Date coercion
# ---------------------------------------------------------------------------


def coerce_date(value: date | str | None, field_name: str = "date") -> date | None:
    """Turn a ``date``, ``YYYY-MM-DD`` string or ISO timestamp into a ``date``.

    Args:
        value:      Raw value from the log store.
        field_name: Used in the error message only.

    Returns:
        The parsed date, or None when value is None / empty.

    Raises:
        InvalidRecord: If the value cannot be parsed as a calendar date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, date):
        # datetime is a date subclass; drop the time component
        return date(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        # Full ISO timestamps from the log store, e.g. 2024-01-01T08:30:00
        try:
            return datetime.fromisoformat(text).date()
        except ValueError as exc:
            raise InvalidRecord(f"unparseable {field_name} {value!r}") from exc
    raise InvalidRecord(f"unsupported {field_name} type {type(value).__name__}")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in ``[start, end]`` inclusive."""
    current = start
    while current <= end:
        yield current
        if current == end:
            break
        current += timedelta(days=1)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PeriodRecord:
    """A historical period observation as supplied by the log store.

    Attributes:
        start_date: First day of bleeding.  ``date`` or ``YYYY-MM-DD`` string.
        end_date:   Last day of bleeding, or None when unknown.
        symptoms:   Symptom tags (informational only).
        record_id:  Identifier from the log store, used in diagnostics.
    """

    start_date: date | str
    end_date: date | str | None = None
    symptoms: frozenset[str] = frozenset()
    record_id: str | None = None

    def label(self) -> str:
        return self.record_id or str(self.start_date)

    def validated(self) -> "ValidPeriod":
        """Return a parsed, invariant-checked copy of this record.

        Raises:
            InvalidRecord: On unparseable dates, a missing start date or
                           ``end_date < start_date``.
        """
        start = coerce_date(self.start_date, "start_date")
        if start is None:
            raise InvalidRecord("missing start_date")
        end = coerce_date(self.end_date, "end_date")
        if end is not None and end < start:
            raise InvalidRecord(
                f"end_date {end.isoformat()} is before start_date {start.isoformat()}"
            )
        return ValidPeriod(start_date=start, end_date=end)


@dataclass(frozen=True)
class ValidPeriod:
    """A PeriodRecord whose dates have been parsed and checked."""

    start_date: date
    end_date: date | None = None

    @property
    def duration_days(self) -> int | None:
        if self.end_date is None:
            return None
        return (self.end_date - self.start_date).days + 1

    @property
    def last_day(self) -> date:
        # Rendering never assumes a duration for logged data
        return self.end_date or self.start_date


@dataclass(frozen=True)
class CycleProfile:
    """User-supplied averages.  Non-positive values count as absent."""

    average_cycle_length: int | None = None
    average_period_duration: int | None = None


def screen_history(
    history: list[PeriodRecord],
) -> tuple[list[ValidPeriod], list[str]]:
    """Split history into usable periods and diagnostics for skipped ones.

    Order is preserved.  Invalid records never raise past this point.
    """
    valid: list[ValidPeriod] = []
    diagnostics: list[str] = []
    for record in history:
        try:
            valid.append(record.validated())
        except InvalidRecord as exc:
            diagnostics.append(f"skipped record {record.label()}: {exc}")
            logger.warning("Skipping invalid period record %s: %s", record.label(), exc)
    return valid, diagnostics


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PredictedInterval:
    start_date: date
    end_date: date

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise InvalidConfiguration(
                f"interval end {self.end_date} precedes start {self.start_date}"
            )


@dataclass
class BasisNote:
    """Explains which inputs produced a projection and how far to trust it.

    Attributes:
        status:                  ``ok`` or ``insufficient-data``.
        cycle_length_source:     Source of the effective cycle length.
        period_duration_source:  Source of the effective period duration.
        confidence:              Weakest of the two sources.
        effective_cycle_length:  Cycle length used for projection (days).
        effective_period_duration: Period duration used (days).
        cycle_length_stdev:      Std-dev of inferred cycle lengths, if inferred.
        is_irregular:            True if inferred cycle lengths vary widely.
        records_used:            Valid history records read.
        model_used:              ``deterministic`` or ``llm``.
        reasoning:               Free-text explanation returned by the LLM path.
        diagnostics:             One entry per skipped record.
        warnings:                Other flags (cap reached, unusual lengths).
    """

    status: BasisStatus = BasisStatus.OK
    cycle_length_source: BasisSource = BasisSource.DEFAULT
    period_duration_source: BasisSource = BasisSource.DEFAULT
    confidence: BasisSource = BasisSource.DEFAULT
    effective_cycle_length: int | None = None
    effective_period_duration: int | None = None
    cycle_length_stdev: float | None = None
    is_irregular: bool = False
    records_used: int = 0
    model_used: str = "deterministic"
    reasoning: str | None = None
    diagnostics: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def insufficient_data(self) -> bool:
        return self.status is BasisStatus.INSUFFICIENT_DATA


@dataclass
class ProjectionResult:
    """Parallel, chronologically ordered projection sequences."""

    predicted_periods: list[PredictedInterval] = field(default_factory=list)
    predicted_fertile_windows: list[PredictedInterval] = field(default_factory=list)
    predicted_ovulation_dates: list[date] = field(default_factory=list)
    basis_note: BasisNote = field(default_factory=BasisNote)

    @property
    def next_period(self) -> PredictedInterval | None:
        return self.predicted_periods[0] if self.predicted_periods else None
