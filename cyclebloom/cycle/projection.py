"""Deterministic forward projection of periods, fertile windows and ovulation.

Anchors on the most recent logged period start and steps forward by the
effective cycle length:

- period ``i`` starts at ``anchor + i * cycle_length`` and lasts
  ``period_duration`` days
- ovulation is ``luteal_phase_days`` (14) before that period's start
- the fertile window is the ``fertile_window_days`` (6) days ending on
  ovulation day

Periods that ended before ``as_of_date`` are skipped; stepping stops after
``cycles_to_project + safety_margin_cycles`` indices so a stale anchor or a
tiny cycle length cannot loop forever.  The engine never reads the clock.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from cyclebloom.cycle.averages import EffectiveAverages, infer_averages
from cyclebloom.cycle.base import (
    BasisNote,
    BasisStatus,
    CycleProfile,
    InvalidConfiguration,
    PeriodRecord,
    PredictedInterval,
    ProjectionResult,
    screen_history,
)
from cyclebloom.cycle.config_loader import CycleConfig, get_cycle_config

logger = logging.getLogger("cyclebloom.cycle.projection")


class CycleProjector:
    """Project future cycles from logged history.

    Usage::

        projector = CycleProjector()
        result = projector.project(
            history=records,
            profile=CycleProfile(average_cycle_length=30),
            as_of_date=date(2024, 2, 10),
            cycles_to_project=3,
        )
        result.predicted_periods[0]
        result.basis_note.confidence
    """

    def __init__(self, config: CycleConfig | None = None) -> None:
        self._config = config or get_cycle_config()

    @property
    def config(self) -> CycleConfig:
        return self._config

    def project(
        self,
        history: list[PeriodRecord],
        profile: CycleProfile | None,
        as_of_date: date,
        cycles_to_project: int | None = None,
    ) -> ProjectionResult:
        """Project ``cycles_to_project`` future-or-ongoing cycles.

        Args:
            history:           Logged periods, oldest first.
            profile:           Optional average overrides.
            as_of_date:        Reference "today".
            cycles_to_project: N; defaults to the configured value.

        Returns:
            ProjectionResult.  Empty with status ``insufficient-data`` when no
            valid history record exists.

        Raises:
            InvalidConfiguration: Negative N or non-positive effective averages.
        """
        n = self._config.projection.cycles_to_project if cycles_to_project is None else cycles_to_project
        if n < 0:
            raise InvalidConfiguration(f"cycles_to_project must be >= 0, got {n}")

        periods, diagnostics = screen_history(history)
        averages = infer_averages(periods, profile or CycleProfile(), self._config)
        note = _basis_note(averages, len(periods), diagnostics)

        if not periods:
            note.status = BasisStatus.INSUFFICIENT_DATA
            logger.info("No usable history (%d record(s) skipped); nothing to project", len(diagnostics))
            return ProjectionResult(basis_note=note)

        anchor = max(p.start_date for p in periods)
        return self.project_from_anchor(
            anchor,
            averages.cycle_length,
            averages.period_duration,
            as_of_date,
            n,
            note,
        )

    def project_from_anchor(
        self,
        anchor_start: date,
        cycle_length: int,
        period_duration: int,
        as_of_date: date,
        cycles_to_project: int,
        basis_note: BasisNote | None = None,
    ) -> ProjectionResult:
        """Step forward from a known anchor with explicit averages.

        Raises:
            InvalidConfiguration: If either average is not positive.
        """
        if cycle_length <= 0:
            raise InvalidConfiguration(f"effective cycle length must be positive, got {cycle_length}")
        if period_duration <= 0:
            raise InvalidConfiguration(
                f"effective period duration must be positive, got {period_duration}"
            )

        pc = self._config.projection
        note = basis_note or BasisNote(
            effective_cycle_length=cycle_length,
            effective_period_duration=period_duration,
        )
        result = ProjectionResult(basis_note=note)
        luteal = timedelta(days=pc.luteal_phase_days)
        fertile_span = timedelta(days=pc.fertile_window_days - 1)
        max_index = cycles_to_project + pc.safety_margin_cycles

        i = 0
        while len(result.predicted_periods) < cycles_to_project:
            i += 1
            if i > max_index:
                note.warnings.append(
                    f"Projection stopped after {max_index} cycles; "
                    f"{len(result.predicted_periods)} of {cycles_to_project} periods found "
                    f"after {as_of_date.isoformat()}"
                )
                logger.warning(
                    "Safety cap hit projecting from %s (cycle=%d, as_of=%s)",
                    anchor_start,
                    cycle_length,
                    as_of_date,
                )
                break

            try:
                start = anchor_start + timedelta(days=i * cycle_length)
                end = start + timedelta(days=period_duration - 1)
                ovulation = start - luteal
                fertile_start = ovulation - fertile_span
            except OverflowError:
                note.warnings.append(
                    f"Projection stopped at the end of the supported calendar; "
                    f"{len(result.predicted_periods)} of {cycles_to_project} periods found"
                )
                logger.warning(
                    "Calendar overflow projecting from %s (cycle=%d)", anchor_start, cycle_length
                )
                break
            if end < as_of_date:
                continue

            result.predicted_periods.append(PredictedInterval(start, end))
            if pc.fertility_policy == "future_only" and ovulation < as_of_date:
                continue
            result.predicted_fertile_windows.append(
                PredictedInterval(fertile_start, ovulation)
            )
            result.predicted_ovulation_dates.append(ovulation)

        return result


def _basis_note(
    averages: EffectiveAverages, records_used: int, diagnostics: list[str]
) -> BasisNote:
    return BasisNote(
        cycle_length_source=averages.cycle_length_source,
        period_duration_source=averages.period_duration_source,
        confidence=averages.confidence,
        effective_cycle_length=averages.cycle_length,
        effective_period_duration=averages.period_duration,
        cycle_length_stdev=averages.cycle_length_stdev,
        is_irregular=averages.is_irregular,
        records_used=records_used,
        diagnostics=list(diagnostics),
        warnings=list(averages.warnings),
    )


def project(
    history: list[PeriodRecord],
    profile: CycleProfile | None,
    as_of_date: date,
    cycles_to_project: int = 5,
    config: CycleConfig | None = None,
) -> ProjectionResult:
    """Module-level shortcut for ``CycleProjector(config).project(...)``."""
    return CycleProjector(config).project(history, profile, as_of_date, cycles_to_project)
