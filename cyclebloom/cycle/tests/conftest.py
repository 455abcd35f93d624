"""Shared fixtures and builders for projection engine tests."""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from cyclebloom.cycle.base import PeriodRecord
from cyclebloom.cycle.config_loader import CycleConfig, load_cycle_config
from cyclebloom.cycle.projection import CycleProjector

# Canonical reference "today" for tests that don't care about the exact date
AS_OF_DATE = date(2024, 2, 10)


def make_record(
    start: date | str,
    end: date | str | None = None,
    record_id: str | None = None,
) -> PeriodRecord:
    return PeriodRecord(start_date=start, end_date=end, record_id=record_id)


def build_regular_history(
    n: int = 6,
    cycle_length: int = 28,
    duration: int = 5,
    first_start: date = date(2023, 9, 1),
) -> list[PeriodRecord]:
    """Build n consecutive logged periods, oldest first."""
    records = []
    start = first_start
    for i in range(n):
        records.append(
            make_record(start, start + timedelta(days=duration - 1), record_id=f"log-{i}")
        )
        start += timedelta(days=cycle_length)
    return records


def fake_llm_client(text: str) -> MagicMock:
    """Anthropic client stand-in whose messages.create returns ``text``."""
    client = MagicMock()
    block = MagicMock()
    block.text = text
    client.messages.create.return_value = MagicMock(content=[block])
    return client


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cycle_config() -> CycleConfig:
    """Load the real bundled cycle config for tests."""
    return load_cycle_config()


@pytest.fixture
def projector(cycle_config: CycleConfig) -> CycleProjector:
    return CycleProjector(cycle_config)


@pytest.fixture
def regular_history() -> list[PeriodRecord]:
    return build_regular_history()
