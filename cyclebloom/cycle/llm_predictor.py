"""Optional LLM-backed cycle prediction.

The deterministic CycleProjector always runs first.  When the LLM path is
available its reply is parsed, checked against the same structural rules the
deterministic projection obeys, and only then returned in place of the
deterministic sequences.  Every failure (SDK error, bad JSON, contract
violation) falls back to the deterministic result with a warning attached to
the basis note.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

import anthropic
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cyclebloom.config import Settings, get_settings
from cyclebloom.cycle.base import (
    CycleProfile,
    InvalidConfiguration,
    PeriodRecord,
    PredictedInterval,
    ProjectionResult,
    ValidPeriod,
    screen_history,
)
from cyclebloom.cycle.config_loader import CycleConfig, get_cycle_config
from cyclebloom.cycle.projection import CycleProjector
from cyclebloom.services.llm import LLMResponseError, build_client, complete, parse_json_object

logger = logging.getLogger("cyclebloom.cycle.llm_predictor")

_PREDICT_PROMPT = """\
You predict menstrual cycles from period logs.

Current date: {current_date}
Average cycle length: {cycle_length}
Average period duration: {period_duration}
Period logs (oldest first):
{logs}

Predict the next {count} periods that end on or after the current date.
For each period give the fertile window (6 days ending on ovulation day) and
the ovulation date (about 14 days before that period starts).

Output ONLY a JSON object with these exact fields, dates as YYYY-MM-DD:
- predictedPeriods: array of {{"startDate", "endDate"}}
- predictedFertileWindows: array of {{"startDate", "endDate"}}, one per period
- predictedOvulationDates: array of date strings, one per period
- reasoning: one or two sentences
"""


# ---------------------------------------------------------------------------
# Wire payload
# ---------------------------------------------------------------------------


class _IntervalPayload(BaseModel):
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")


class LLMProjectionPayload(BaseModel):
    """The JSON object the model is asked to return."""

    model_config = ConfigDict(populate_by_name=True)

    predicted_periods: list[_IntervalPayload] = Field(alias="predictedPeriods")
    predicted_fertile_windows: list[_IntervalPayload] = Field(alias="predictedFertileWindows")
    predicted_ovulation_dates: list[date] = Field(alias="predictedOvulationDates")
    reasoning: str | None = None


def contract_violations(
    result: ProjectionResult,
    as_of_date: date,
    fertile_window_days: int = 6,
) -> list[str]:
    """List every way a projection breaks the ProjectionResult contract.

    Checks parity of the three sequences, chronological order, no periods
    entirely before ``as_of_date``, and that each fertile window is the
    ``fertile_window_days`` ending on its ovulation day, which itself precedes
    its period.
    """
    problems: list[str] = []
    periods = result.predicted_periods
    windows = result.predicted_fertile_windows
    ovulations = result.predicted_ovulation_dates

    if not periods:
        problems.append("no predicted periods")
    if not (len(periods) == len(windows) == len(ovulations)):
        problems.append(
            f"sequence lengths differ: {len(periods)} periods, "
            f"{len(windows)} fertile windows, {len(ovulations)} ovulation dates"
        )
    for earlier, later in zip(periods, periods[1:]):
        if later.start_date <= earlier.start_date:
            problems.append(f"periods out of order at {later.start_date.isoformat()}")
    for period in periods:
        if period.end_date < as_of_date:
            problems.append(f"period ending {period.end_date.isoformat()} is in the past")
    span = timedelta(days=fertile_window_days - 1)
    for period, window, ovulation in zip(periods, windows, ovulations):
        if window.end_date != ovulation or window.start_date != ovulation - span:
            problems.append(f"fertile window {window.start_date.isoformat()} not aligned with ovulation")
        if ovulation >= period.start_date:
            problems.append(f"ovulation {ovulation.isoformat()} not before its period")
    return problems


def _drop_past_fertility(result: ProjectionResult, as_of_date: date) -> None:
    """Remove fertile window / ovulation pairs whose ovulation is before ``as_of_date``."""
    kept = [
        (window, ovulation)
        for window, ovulation in zip(result.predicted_fertile_windows, result.predicted_ovulation_dates)
        if ovulation >= as_of_date
    ]
    result.predicted_fertile_windows = [window for window, _ in kept]
    result.predicted_ovulation_dates = [ovulation for _, ovulation in kept]


def _format_logs(periods: list[ValidPeriod], limit: int) -> str:
    recent = sorted(periods, key=lambda p: p.start_date)[-limit:]
    if not recent:
        return "No period logs provided."
    lines = []
    for period in recent:
        end = period.end_date.isoformat() if period.end_date else "Not specified"
        lines.append(f"- Start: {period.start_date.isoformat()}, End: {end}")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Predictor
# ---------------------------------------------------------------------------


class LLMCyclePredictor:
    """Ask an LLM for predictions, guarded by the deterministic projector.

    Usage::

        predictor = LLMCyclePredictor()
        result = predictor.predict(history, profile, as_of_date=date.today())
        result.basis_note.model_used   # 'llm' or 'deterministic'
    """

    def __init__(
        self,
        config: CycleConfig | None = None,
        settings: Settings | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self._config = config or get_cycle_config()
        self._settings = settings or get_settings()
        self._client = client if client is not None else build_client(self._settings)
        self._projector = CycleProjector(self._config)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def predict(
        self,
        history: list[PeriodRecord],
        profile: CycleProfile | None,
        as_of_date: date,
        cycles_to_project: int | None = None,
    ) -> ProjectionResult:
        """Return an LLM projection if it passes validation, else the deterministic one."""
        n = self._config.projection.cycles_to_project if cycles_to_project is None else cycles_to_project
        baseline = self._projector.project(history, profile, as_of_date, n)
        note = baseline.basis_note

        if note.insufficient_data or n == 0:
            return baseline
        if not self.enabled:
            note.warnings.append("LLM prediction unavailable; deterministic projection used")
            return baseline

        periods, _ = screen_history(history)
        prompt = _PREDICT_PROMPT.format(
            current_date=as_of_date.isoformat(),
            cycle_length=f"{note.effective_cycle_length} days ({note.cycle_length_source.value})",
            period_duration=f"{note.effective_period_duration} days ({note.period_duration_source.value})",
            logs=_format_logs(periods, self._config.llm.max_history_records),
            count=n,
        )

        try:
            raw_response = complete(
                self._client,
                prompt,
                model=self._settings.llm_model,
                max_tokens=self._settings.llm_max_tokens,
            )
            payload = LLMProjectionPayload.model_validate(parse_json_object(raw_response))
            candidate = ProjectionResult(
                predicted_periods=[
                    PredictedInterval(p.start_date, p.end_date) for p in payload.predicted_periods[:n]
                ],
                predicted_fertile_windows=[
                    PredictedInterval(w.start_date, w.end_date)
                    for w in payload.predicted_fertile_windows[:n]
                ],
                predicted_ovulation_dates=payload.predicted_ovulation_dates[:n],
                basis_note=note,
            )
        except anthropic.APIError as exc:
            logger.warning("LLM prediction request failed: %s", exc)
            note.warnings.append(f"LLM prediction failed: {exc}")
            return baseline
        except (LLMResponseError, ValidationError, InvalidConfiguration) as exc:
            logger.warning("LLM prediction unusable: %s", exc)
            note.warnings.append("LLM returned an unusable prediction; deterministic projection used")
            return baseline

        problems = contract_violations(
            candidate, as_of_date, self._config.projection.fertile_window_days
        )
        if problems:
            logger.warning("Rejected LLM prediction: %s", "; ".join(problems))
            note.warnings.append(
                "LLM prediction rejected (" + "; ".join(problems) + "); deterministic projection used"
            )
            return baseline

        if self._config.projection.fertility_policy == "future_only":
            _drop_past_fertility(candidate, as_of_date)
        note.model_used = "llm"
        note.reasoning = payload.reasoning
        logger.info("Using LLM prediction with %d period(s)", len(candidate.predicted_periods))
        return candidate
