"""Cycle projection engine for CycleBloom.

Pure, synchronous date arithmetic: no I/O and no clock reads.  "Today" is
always passed in as ``as_of_date``.

Modules:
    base           — canonical records, results and engine errors
    averages       — effective cycle length / period duration inference
    projection     — forward projection of periods, fertile windows, ovulation
    calendar_merge — per-day classification for calendar rendering
    llm_predictor  — optional LLM path, validated against the same contract
    config_loader  — load/validate/hot-reload cycle_config.yaml
    symptoms       — symptom tag catalogue
"""

from cyclebloom.cycle.base import (
    BasisNote,
    BasisSource,
    BasisStatus,
    CycleProfile,
    DayClassification,
    InvalidConfiguration,
    InvalidRecord,
    PeriodRecord,
    PredictedInterval,
    ProjectionResult,
)
from cyclebloom.cycle.calendar_merge import classify_days, month_range
from cyclebloom.cycle.config_loader import CycleConfig, get_cycle_config
from cyclebloom.cycle.projection import CycleProjector, project

__all__ = [
    "BasisNote",
    "BasisSource",
    "BasisStatus",
    "CycleConfig",
    "CycleProfile",
    "CycleProjector",
    "DayClassification",
    "InvalidConfiguration",
    "InvalidRecord",
    "PeriodRecord",
    "PredictedInterval",
    "ProjectionResult",
    "classify_days",
    "get_cycle_config",
    "month_range",
    "project",
]
