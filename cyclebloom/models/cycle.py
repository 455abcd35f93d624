"""Pydantic models for the cycle projection and calendar endpoints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date

from pydantic import Field, field_validator, model_validator

from cyclebloom.cycle.base import (
    BasisNote,
    BasisSource,
    BasisStatus,
    CycleProfile,
    DayClassification,
    PeriodRecord,
    PredictedInterval,
    ProjectionResult,
)
from cyclebloom.cycle.symptoms import normalize_symptom, unknown_symptoms
from cyclebloom.models.base import BloomBase

# Explicit calendar ranges are capped at one year of days
MAX_CALENDAR_DAYS = 366


# ---------- Inputs ----------

class PeriodRecordIn(BloomBase):
    # Dates stay strings here: unparseable values are skipped by the engine
    # with a diagnostic instead of failing the whole request.
    id: str | None = None
    start_date: str = Field(description="YYYY-MM-DD")
    end_date: str | None = Field(default=None, description="YYYY-MM-DD, omitted if unknown")
    symptoms: list[str] = Field(default_factory=list)

    @field_validator("symptoms")
    @classmethod
    def _known_symptoms(cls, value: list[str]) -> list[str]:
        unknown = unknown_symptoms(value)
        if unknown:
            raise ValueError(f"unknown symptom(s): {', '.join(unknown)}")
        return [normalize_symptom(tag) for tag in value]

    def to_record(self) -> PeriodRecord:
        return PeriodRecord(
            start_date=self.start_date,
            end_date=self.end_date,
            symptoms=frozenset(self.symptoms),
            record_id=self.id,
        )


class CycleProfileIn(BloomBase):
    average_cycle_length: int | None = Field(default=None, gt=0)
    average_period_duration: int | None = Field(default=None, gt=0)

    def to_profile(self) -> CycleProfile:
        return CycleProfile(
            average_cycle_length=self.average_cycle_length,
            average_period_duration=self.average_period_duration,
        )


class ProjectionRequest(BloomBase):
    history: list[PeriodRecordIn] = Field(default_factory=list)
    profile: CycleProfileIn = Field(default_factory=CycleProfileIn)
    as_of_date: date | None = None  # defaults to the server's current date
    cycles_to_project: int = Field(default=5, ge=0, le=520)
    use_llm: bool = False

    def records(self) -> list[PeriodRecord]:
        return [item.to_record() for item in self.history]


class CalendarRequest(ProjectionRequest):
    """Either ``year`` + ``month`` or ``rangeStart`` + ``rangeEnd``.

    With neither, the month containing ``asOfDate`` is shown.
    """

    year: int | None = Field(default=None, ge=1900, le=2200)
    month: int | None = Field(default=None, ge=1, le=12)
    range_start: date | None = None
    range_end: date | None = None

    @model_validator(mode="after")
    def _one_range_style(self) -> "CalendarRequest":
        if (self.year is None) != (self.month is None):
            raise ValueError("year and month must be given together")
        if (self.range_start is None) != (self.range_end is None):
            raise ValueError("rangeStart and rangeEnd must be given together")
        if self.year is not None and self.range_start is not None:
            raise ValueError("give either year/month or rangeStart/rangeEnd, not both")
        if (
            self.range_start is not None
            and self.range_end is not None
            and (self.range_end - self.range_start).days + 1 > MAX_CALENDAR_DAYS
        ):
            raise ValueError(f"calendar range may span at most {MAX_CALENDAR_DAYS} days")
        return self


# ---------- Outputs ----------

class IntervalOut(BloomBase):
    start_date: date
    end_date: date

    @classmethod
    def from_interval(cls, interval: PredictedInterval) -> "IntervalOut":
        return cls(start_date=interval.start_date, end_date=interval.end_date)


class BasisNoteOut(BloomBase):
    status: BasisStatus
    cycle_length_source: BasisSource
    period_duration_source: BasisSource
    confidence: BasisSource
    effective_cycle_length: int | None = None
    effective_period_duration: int | None = None
    cycle_length_stdev: float | None = None
    is_irregular: bool = False
    records_used: int = 0
    model_used: str = "deterministic"
    reasoning: str | None = None
    diagnostics: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def from_note(cls, note: BasisNote) -> "BasisNoteOut":
        return cls(**asdict(note))


class ProjectionOut(BloomBase):
    predicted_periods: list[IntervalOut]
    predicted_fertile_windows: list[IntervalOut]
    predicted_ovulation_dates: list[date]
    basis_note: BasisNoteOut

    @classmethod
    def from_result(cls, result: ProjectionResult) -> "ProjectionOut":
        return cls(
            predicted_periods=[IntervalOut.from_interval(p) for p in result.predicted_periods],
            predicted_fertile_windows=[
                IntervalOut.from_interval(w) for w in result.predicted_fertile_windows
            ],
            predicted_ovulation_dates=list(result.predicted_ovulation_dates),
            basis_note=BasisNoteOut.from_note(result.basis_note),
        )


class CalendarOut(BloomBase):
    range_start: date
    range_end: date
    projection: ProjectionOut
    days: dict[str, DayClassification]  # YYYY-MM-DD → classification
    counts: dict[str, int]


class SymptomOptionOut(BloomBase):
    id: str
    label: str
