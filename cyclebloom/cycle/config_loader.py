"""Load, validate, and hot-reload the CycleBloom engine configuration.

The config lives in ``cycle_config.yaml`` alongside this module.  At startup
it is loaded once and cached.  Call ``reload_cycle_config()`` to re-read from
disk after an edit, no restart required.

Usage::

    from cyclebloom.cycle.config_loader import get_cycle_config

    config = get_cycle_config()
    config.defaults.cycle_length              # 28
    config.projection.luteal_phase_days       # 14
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cyclebloom.cycle.config")

_CONFIG_PATH = Path(__file__).parent / "cycle_config.yaml"

FERTILITY_POLICIES = ("always", "future_only")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class DefaultsConfig:
    """Fallback averages used when neither profile nor history supplies one."""

    cycle_length: int = 28
    period_duration: int = 5


@dataclass
class ProjectionConfig:
    """Forward projection settings."""

    cycles_to_project: int = 5
    safety_margin_cycles: int = 24
    luteal_phase_days: int = 14
    fertile_window_days: int = 6
    fertility_policy: str = "always"


@dataclass
class InferenceConfig:
    """Thresholds applied when averages are inferred from history."""

    min_cycle_days: int = 21
    max_cycle_days: int = 45
    irregular_stdev_days: float = 7.0


@dataclass
class LLMConfig:
    max_history_records: int = 12


@dataclass
class CycleConfig:
    """Complete, validated engine configuration.

    The single in-memory representation of cycle_config.yaml.  The
    projector, average inference and LLM predictor all read from it.
    """

    version: str = "1.0"
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when cycle_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Cycle config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CycleConfig:
    """Validate the raw YAML dict and construct a CycleConfig.

    Every problem is collected before raising so one edit can fix them all.

    Raises:
        ConfigValidationError: If any value is missing a sane type or range.
    """
    errors: list[str] = []

    def _positive_int(section: dict, key: str, default: int, where: str) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{where}.{key} must be an integer, got {value!r}")
            return default
        if number <= 0:
            errors.append(f"{where}.{key} = {number} must be positive")
        return number

    def _section(key: str) -> dict[str, Any]:
        value = raw.get(key) or {}
        if not isinstance(value, dict):
            errors.append(f"'{key}' must be a mapping")
            return {}
        return value

    version = str(raw.get("version", "1.0"))

    # ── Defaults ──
    d_raw = _section("defaults")
    defaults = DefaultsConfig(
        cycle_length=_positive_int(d_raw, "cycle_length", 28, "defaults"),
        period_duration=_positive_int(d_raw, "period_duration", 5, "defaults"),
    )

    # ── Projection ──
    p_raw = _section("projection")
    policy = str(p_raw.get("fertility_policy", "always"))
    if policy not in FERTILITY_POLICIES:
        errors.append(
            f"projection.fertility_policy must be one of {FERTILITY_POLICIES}, got {policy!r}"
        )
    projection = ProjectionConfig(
        cycles_to_project=_positive_int(p_raw, "cycles_to_project", 5, "projection"),
        safety_margin_cycles=_positive_int(p_raw, "safety_margin_cycles", 24, "projection"),
        luteal_phase_days=_positive_int(p_raw, "luteal_phase_days", 14, "projection"),
        fertile_window_days=_positive_int(p_raw, "fertile_window_days", 6, "projection"),
        fertility_policy=policy,
    )

    # ── Inference ──
    i_raw = _section("inference")
    inference = InferenceConfig(
        min_cycle_days=_positive_int(i_raw, "min_cycle_days", 21, "inference"),
        max_cycle_days=_positive_int(i_raw, "max_cycle_days", 45, "inference"),
    )
    try:
        inference.irregular_stdev_days = float(i_raw.get("irregular_stdev_days", 7.0))
    except (TypeError, ValueError):
        errors.append(
            f"inference.irregular_stdev_days must be a number, "
            f"got {i_raw.get('irregular_stdev_days')!r}"
        )
    if inference.min_cycle_days > inference.max_cycle_days:
        errors.append(
            f"inference.min_cycle_days ({inference.min_cycle_days}) exceeds "
            f"max_cycle_days ({inference.max_cycle_days})"
        )

    # ── LLM ──
    l_raw = _section("llm")
    llm = LLMConfig(
        max_history_records=_positive_int(l_raw, "max_history_records", 12, "llm"),
    )

    if errors:
        raise ConfigValidationError(
            f"cycle_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CycleConfig(
        version=version,
        defaults=defaults,
        projection=projection,
        inference=inference,
        llm=llm,
    )


def load_cycle_config(path: Path | None = None) -> CycleConfig:
    """Load and validate the engine config from disk.

    Args:
        path: Override path to YAML. Uses the bundled cycle_config.yaml by default.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded cycle config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CycleConfig | None = None
_config_lock = threading.Lock()


def get_cycle_config() -> CycleConfig:
    """Return the global CycleConfig singleton, loading it on first call.

    Thread-safe.  Use ``reload_cycle_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_cycle_config()
    return _config


def reload_cycle_config(path: Path | None = None) -> CycleConfig:
    """Reload the engine config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is
    re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_cycle_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded cycle config: %s → %s", old_version, new_config.version)
    return new_config
