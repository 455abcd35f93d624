"""Static wellness tips shown alongside the cycle calendar."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WellnessTip:
    tip_id: str
    title: str
    content: str
    category: str  # Nutrition, Exercise, Lifestyle, Mental Health, Comfort


WELLNESS_TIPS: tuple[WellnessTip, ...] = (
    WellnessTip(
        "1",
        "Stay Hydrated",
        "Drinking plenty of water can help reduce bloating and headaches during your period.",
        "Nutrition",
    ),
    WellnessTip(
        "2",
        "Gentle Exercise",
        "Light activities like walking, yoga or stretching can ease cramps and lift your mood.",
        "Exercise",
    ),
    WellnessTip(
        "3",
        "Prioritize Sleep",
        "Aim for 7-9 hours of quality sleep to help your body recover and manage fatigue.",
        "Lifestyle",
    ),
    WellnessTip(
        "4",
        "Mindful Moments",
        "A few minutes of deep breathing or meditation can help with stress and mood swings.",
        "Mental Health",
    ),
    WellnessTip(
        "5",
        "Warmth for Comfort",
        "A warm bath or heating pad on your abdomen relaxes muscles and relieves cramps.",
        "Comfort",
    ),
    WellnessTip(
        "6",
        "Nutrient-Rich Foods",
        "Iron-rich foods like leafy greens and legumes help replenish what is lost during menstruation.",
        "Nutrition",
    ),
)


def list_tips(category: str | None = None) -> list[WellnessTip]:
    """All tips, or only those in ``category`` (case-insensitive)."""
    if not category:
        return list(WELLNESS_TIPS)
    wanted = category.strip().lower()
    return [tip for tip in WELLNESS_TIPS if tip.category.lower() == wanted]


def categories() -> list[str]:
    return sorted({tip.category for tip in WELLNESS_TIPS})
