"""CycleBloom API — FastAPI application entry point.

Run locally:
    uvicorn cyclebloom.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cyclebloom.config import Settings, get_settings
from cyclebloom.cycle.base import InvalidConfiguration
from cyclebloom.cycle.config_loader import get_cycle_config
from cyclebloom.middleware.rate_limit import RateLimitMiddleware
from cyclebloom.routers import cycle, health, recommendations

# ---------- Logging ----------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cyclebloom")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings: Settings = app.state.settings
    config = get_cycle_config()
    logger.info(
        "Starting CycleBloom API v%s [%s], engine config v%s, LLM %s",
        settings.app_version,
        settings.environment,
        config.version,
        "enabled" if settings.llm_available else "disabled",
    )
    yield
    logger.info("CycleBloom API shut down")


# ---------- Error handlers ----------

async def invalid_configuration_handler(
    request: Request, exc: InvalidConfiguration
) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---------- App factory ----------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    logger.setLevel(settings.log_level.upper())

    app = FastAPI(
        title="CycleBloom API",
        description=(
            "Menstrual cycle projection, calendar classification, "
            "gift recommendations and wellness tips."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.add_exception_handler(InvalidConfiguration, invalid_configuration_handler)

    # ---------- Middleware (last added is outermost) ----------

    app.add_middleware(RateLimitMiddleware, settings=settings)

    # CORS outermost so preflight never hits the rate limiter
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "Retry-After"],
    )

    # ---------- Health check (outside v1 prefix — always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(cycle.router, prefix=v1_prefix)
    app.include_router(recommendations.router, prefix=v1_prefix)

    return app


app = create_app()
