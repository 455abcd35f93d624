"""Gift recommendations and wellness tips."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query
from starlette.concurrency import run_in_threadpool

from cyclebloom.dependencies import AppSettings
from cyclebloom.models.recommendations import GiftOut, GiftRequest, WellnessTipOut
from cyclebloom.recommendations.gifts import GiftRecommender
from cyclebloom.recommendations.wellness import list_tips

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("/gifts", response_model=GiftOut)
async def recommend_gift(body: GiftRequest, settings: AppSettings) -> Any:
    recommender = GiftRecommender(settings=settings)
    recommendation = await run_in_threadpool(
        recommender.recommend, body.symptoms, body.preferences
    )
    return GiftOut(
        gift_recommendation=recommendation.gift,
        reasoning=recommendation.reasoning,
        source=recommendation.source,
    )


@router.get("/wellness-tips", response_model=list[WellnessTipOut])
async def wellness_tips(category: str | None = Query(default=None)) -> Any:
    return [
        WellnessTipOut(id=tip.tip_id, title=tip.title, content=tip.content, category=tip.category)
        for tip in list_tips(category)
    ]
