"""Health check endpoint — public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from cyclebloom.cycle.config_loader import ConfigValidationError, get_cycle_config
from cyclebloom.dependencies import AppSettings

router = APIRouter(tags=["system"])
logger = logging.getLogger("cyclebloom.health")


@router.get("/health")
async def health_check(settings: AppSettings) -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Also reports whether the engine config loaded and whether the LLM path
    is configured.
    """
    config_version = None
    try:
        config_version = get_cycle_config().version
    except (ConfigValidationError, FileNotFoundError) as exc:
        logger.warning("Health check config probe failed: %s", exc)

    return {
        "status": "healthy" if config_version else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "engine_config": config_version or "unavailable",
        "llm": "configured" if settings.llm_available else "disabled",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
