"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from cyclebloom.config import Settings, get_settings


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with.

    ``create_app`` stores them on ``app.state``; an app assembled without the
    factory falls back to the environment.
    """
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings or get_settings()


# Annotated shortcut for route signatures
AppSettings = Annotated[Settings, Depends(get_app_settings)]
