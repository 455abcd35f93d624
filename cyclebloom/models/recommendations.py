"""Pydantic models for gift recommendations and wellness tips."""

from __future__ import annotations

from pydantic import Field, field_validator

from cyclebloom.cycle.symptoms import unknown_symptoms
from cyclebloom.models.base import BloomBase


class GiftRequest(BloomBase):
    symptoms: list[str] = Field(default_factory=list)
    preferences: str = Field(default="", max_length=2000)

    @field_validator("symptoms")
    @classmethod
    def _known_symptoms(cls, value: list[str]) -> list[str]:
        unknown = unknown_symptoms(value)
        if unknown:
            raise ValueError(f"unknown symptom(s): {', '.join(unknown)}")
        return value


class GiftOut(BloomBase):
    gift_recommendation: str
    reasoning: str
    source: str


class WellnessTipOut(BloomBase):
    id: str
    title: str
    content: str
    category: str
