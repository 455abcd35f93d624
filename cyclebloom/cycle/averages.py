"""Effective cycle length and period duration for projection.

Each average is resolved in order: the user's profile override, then a mean
computed from logged history, then the configured default.  The source of
each value is recorded so the projection can say how much to trust it.
"""

from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass, field

from cyclebloom.cycle.base import BasisSource, CycleProfile, ValidPeriod
from cyclebloom.cycle.config_loader import CycleConfig

logger = logging.getLogger("cyclebloom.cycle.averages")


@dataclass
class EffectiveAverages:
    """Resolved averages plus where they came from.

    Attributes:
        cycle_length:           Days from one period start to the next.
        period_duration:        Days of bleeding, inclusive.
        cycle_length_source:    Which branch produced cycle_length.
        period_duration_source: Which branch produced period_duration.
        cycle_length_stdev:     Std-dev of the deltas when inferred from ≥2 deltas.
        is_irregular:           True when cycle_length_stdev exceeds the threshold.
        warnings:               Short / long cycle flags.
    """

    cycle_length: int
    period_duration: int
    cycle_length_source: BasisSource
    period_duration_source: BasisSource
    cycle_length_stdev: float | None = None
    is_irregular: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def confidence(self) -> BasisSource:
        return min(
            self.cycle_length_source,
            self.period_duration_source,
            key=lambda source: source.rank,
        )


def _override(value: int | None) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    return value if value > 0 else None


def start_deltas(periods: list[ValidPeriod]) -> list[int]:
    """Days between consecutive logged starts, in history order.

    Zero or negative deltas come from duplicate or out-of-order entries and
    are dropped.
    """
    deltas = []
    for previous, current in zip(periods, periods[1:]):
        delta = (current.start_date - previous.start_date).days
        if delta > 0:
            deltas.append(delta)
        else:
            logger.debug(
                "Ignoring non-positive start delta %d between %s and %s",
                delta,
                previous.start_date,
                current.start_date,
            )
    return deltas


def infer_averages(
    periods: list[ValidPeriod],
    profile: CycleProfile,
    config: CycleConfig,
) -> EffectiveAverages:
    """Resolve the effective averages for one projection run.

    Args:
        periods: Valid history, oldest first.
        profile: Optional user overrides.
        config:  Engine config supplying defaults and thresholds.
    """
    inference = config.inference
    warnings: list[str] = []
    stdev: float | None = None
    irregular = False

    # ── Cycle length ──
    override = _override(profile.average_cycle_length)
    deltas = start_deltas(periods)
    if override is not None:
        cycle_length = override
        cycle_source = BasisSource.USER_PROVIDED
    elif deltas:
        mean_length = statistics.mean(deltas)
        cycle_length = max(1, round(mean_length))
        cycle_source = BasisSource.INFERRED
        if len(deltas) > 1:
            stdev = round(statistics.stdev(deltas), 1)
            irregular = stdev > inference.irregular_stdev_days
        if cycle_length < inference.min_cycle_days:
            warnings.append(
                f"Short cycle detected: {cycle_length} days "
                f"(below {inference.min_cycle_days} day minimum)"
            )
        elif cycle_length > inference.max_cycle_days:
            warnings.append(
                f"Long cycle detected: {cycle_length} days "
                f"(above {inference.max_cycle_days} day maximum)"
            )
    else:
        cycle_length = config.defaults.cycle_length
        cycle_source = BasisSource.DEFAULT

    # ── Period duration ──
    override = _override(profile.average_period_duration)
    durations = [p.duration_days for p in periods if p.duration_days is not None]
    if override is not None:
        period_duration = override
        duration_source = BasisSource.USER_PROVIDED
    elif durations:
        period_duration = max(1, round(statistics.mean(durations)))
        duration_source = BasisSource.INFERRED
    else:
        period_duration = config.defaults.period_duration
        duration_source = BasisSource.DEFAULT

    if irregular:
        warnings.append(f"Irregular cycles: lengths vary by {stdev} days (std-dev)")

    return EffectiveAverages(
        cycle_length=cycle_length,
        period_duration=period_duration,
        cycle_length_source=cycle_source,
        period_duration_source=duration_source,
        cycle_length_stdev=stdev,
        is_irregular=irregular,
        warnings=warnings,
    )
