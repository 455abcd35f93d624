"""Gift recommendations and wellness tips."""

from cyclebloom.recommendations.gifts import GiftRecommendation, GiftRecommender
from cyclebloom.recommendations.wellness import WellnessTip, list_tips

__all__ = [
    "GiftRecommendation",
    "GiftRecommender",
    "WellnessTip",
    "list_tips",
]
