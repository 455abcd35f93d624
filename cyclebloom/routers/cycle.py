"""Cycle projection and calendar endpoints.

Stateless: the caller sends the logged history and profile with every
request; nothing is persisted here.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter
from starlette.concurrency import run_in_threadpool

from cyclebloom.config import Settings
from cyclebloom.cycle.base import ProjectionResult
from cyclebloom.cycle.calendar_merge import classify_days, month_range, summarize_days
from cyclebloom.cycle.llm_predictor import LLMCyclePredictor
from cyclebloom.cycle.projection import CycleProjector
from cyclebloom.cycle.symptoms import SYMPTOM_OPTIONS
from cyclebloom.dependencies import AppSettings
from cyclebloom.models.cycle import (
    CalendarOut,
    CalendarRequest,
    ProjectionOut,
    ProjectionRequest,
    SymptomOptionOut,
)

router = APIRouter(prefix="/cycle", tags=["cycle"])
logger = logging.getLogger("cyclebloom.api.cycle")


async def _run_projection(
    body: ProjectionRequest, as_of: date, settings: Settings
) -> ProjectionResult:
    history = body.records()
    profile = body.profile.to_profile()
    if body.use_llm:
        # Blocking SDK call; keep it off the event loop
        predictor = LLMCyclePredictor(settings=settings)
        return await run_in_threadpool(
            predictor.predict, history, profile, as_of, body.cycles_to_project
        )
    return CycleProjector().project(history, profile, as_of, body.cycles_to_project)


@router.post("/projection", response_model=ProjectionOut)
async def create_projection(body: ProjectionRequest, settings: AppSettings) -> Any:
    as_of = body.as_of_date or date.today()
    result = await _run_projection(body, as_of, settings)
    logger.info(
        "Projected %d period(s) as of %s [%s, %s]",
        len(result.predicted_periods),
        as_of,
        result.basis_note.status.value,
        result.basis_note.model_used,
    )
    return ProjectionOut.from_result(result)


@router.post("/calendar", response_model=CalendarOut)
async def create_calendar(body: CalendarRequest, settings: AppSettings) -> Any:
    as_of = body.as_of_date or date.today()
    if body.range_start is not None and body.range_end is not None:
        range_start, range_end = body.range_start, body.range_end
    elif body.year is not None and body.month is not None:
        range_start, range_end = month_range(body.year, body.month)
    else:
        range_start, range_end = month_range(as_of.year, as_of.month)

    result = await _run_projection(body, as_of, settings)
    days = classify_days(body.records(), result, range_start, range_end)
    return CalendarOut(
        range_start=range_start,
        range_end=range_end,
        projection=ProjectionOut.from_result(result),
        days={day.isoformat(): kind for day, kind in days.items()},
        counts=summarize_days(days),
    )


@router.get("/symptoms", response_model=list[SymptomOptionOut])
async def list_symptoms() -> Any:
    return [SymptomOptionOut(id=tag, label=label) for tag, label in SYMPTOM_OPTIONS.items()]
