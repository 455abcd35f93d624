"""Symptom-driven gift recommendations.

Two strategies, tried in order:
  1. When the LLM path is available, ask the model for one specific gift
     tailored to the symptoms and free-text preferences.
  2. Otherwise, or when the model call fails, pick from a fixed catalogue
     keyed by the first recognised symptom.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from pydantic import BaseModel, Field, ValidationError

from cyclebloom.config import Settings, get_settings
from cyclebloom.cycle.symptoms import SYMPTOM_OPTIONS, normalize_symptom
from cyclebloom.services.llm import LLMResponseError, build_client, complete, parse_json_object

logger = logging.getLogger("cyclebloom.recommendations.gifts")

# symptom → (gift, why it helps)
GIFT_CATALOGUE: dict[str, tuple[str, str]] = {
    "cramps": (
        "Microwavable heat pack",
        "Steady warmth on the lower abdomen relaxes the uterine muscles and eases cramping.",
    ),
    "bloating": (
        "Peppermint and ginger herbal tea sampler",
        "Peppermint and ginger are traditionally used to settle digestion and reduce bloating.",
    ),
    "headache": (
        "Cooling eye mask",
        "Gentle cold pressure around the eyes and temples can take the edge off hormonal headaches.",
    ),
    "fatigue": (
        "Weighted sleep mask and lavender pillow spray",
        "Better-quality rest helps with the tiredness many people feel during their period.",
    ),
    "mood_swings": (
        "Guided journaling notebook",
        "Writing things down is a low-effort way to process shifting moods.",
    ),
    "nausea": (
        "Crystallised ginger chews",
        "Ginger is a well-known, gentle remedy for queasiness.",
    ),
    "backache": (
        "Wearable heating wrap for the lower back",
        "Hands-free heat targets lower-back aches while staying mobile.",
    ),
    "tender_breasts": (
        "Soft wire-free lounge bra",
        "Light, seamless support reduces pressure on tender breasts.",
    ),
    "acne": (
        "Gentle salicylic spot-care kit",
        "A mild, targeted treatment helps with hormonal breakouts without drying the skin.",
    ),
    "cravings": (
        "Dark chocolate and nut snack box",
        "Satisfies sweet cravings with magnesium-rich dark chocolate.",
    ),
}

_DEFAULT_GIFT = (
    "Cosy comfort bundle: fuzzy socks, herbal tea and a heat pack",
    "A little bundle of warmth and calm is welcome on any day of a cycle.",
)

_GIFT_PROMPT = """\
You are a thoughtful gift recommendation assistant. Suggest ONE specific gift
that would improve the comfort of someone on their period.

Symptoms:
{symptoms}

Preferences: {preferences}

Respect allergies and dislikes in the preferences.
Output ONLY a JSON object with these exact fields:
- giftRecommendation: the gift (string)
- reasoning: why it suits these symptoms and preferences (string)
"""


@dataclass
class GiftRecommendation:
    """One gift suggestion.

    Attributes:
        gift:      Gift idea, specific enough to buy.
        reasoning: Why it suits the symptoms and preferences.
        source:    ``catalogue`` or ``llm``.
    """

    gift: str
    reasoning: str
    source: str = "catalogue"


class _GiftPayload(BaseModel):
    gift_recommendation: str = Field(alias="giftRecommendation", min_length=1)
    reasoning: str = Field(min_length=1)


def catalogue_recommendation(symptoms: list[str]) -> GiftRecommendation:
    """Pick a gift for the first symptom the catalogue knows."""
    for symptom in symptoms:
        entry = GIFT_CATALOGUE.get(normalize_symptom(symptom))
        if entry:
            gift, reasoning = entry
            return GiftRecommendation(gift=gift, reasoning=reasoning)
    gift, reasoning = _DEFAULT_GIFT
    return GiftRecommendation(gift=gift, reasoning=reasoning)


class GiftRecommender:
    """Recommend a gift from symptoms and preferences."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client if client is not None else build_client(self._settings)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def recommend(self, symptoms: list[str], preferences: str = "") -> GiftRecommendation:
        if not self.enabled:
            return catalogue_recommendation(symptoms)

        labels = [SYMPTOM_OPTIONS.get(normalize_symptom(s), s) for s in symptoms]
        prompt = _GIFT_PROMPT.format(
            symptoms="\n".join(f"- {label}" for label in labels) or "No specific symptoms provided.",
            preferences=preferences.strip() or "None given",
        )
        try:
            raw_response = complete(
                self._client,
                prompt,
                model=self._settings.llm_model,
                max_tokens=self._settings.llm_max_tokens,
            )
            payload = _GiftPayload.model_validate(parse_json_object(raw_response))
        except anthropic.APIError as exc:
            logger.warning("Gift recommendation request failed: %s", exc)
            return catalogue_recommendation(symptoms)
        except (LLMResponseError, ValidationError) as exc:
            logger.warning("Gift recommendation unusable: %s", exc)
            return catalogue_recommendation(symptoms)

        return GiftRecommendation(
            gift=payload.gift_recommendation,
            reasoning=payload.reasoning,
            source="llm",
        )
