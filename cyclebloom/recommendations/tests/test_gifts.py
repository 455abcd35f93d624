"""Tests for gift recommendations."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import anthropic
import httpx
import pytest

from cyclebloom.config import Settings
from cyclebloom.recommendations.gifts import (
    GIFT_CATALOGUE,
    GiftRecommender,
    catalogue_recommendation,
)


def llm_client(text: str) -> MagicMock:
    client = MagicMock()
    client.messages.create.return_value = MagicMock(content=[MagicMock(text=text)])
    return client


@pytest.fixture
def settings() -> Settings:
    return Settings(anthropic_api_key="test-key", llm_enabled=True)


class TestCatalogue:
    def test_every_symptom_has_a_gift(self) -> None:
        from cyclebloom.cycle.symptoms import SYMPTOM_OPTIONS

        assert set(GIFT_CATALOGUE) == set(SYMPTOM_OPTIONS)

    def test_first_known_symptom_wins(self) -> None:
        rec = catalogue_recommendation(["Bloating", "cramps"])
        assert rec.gift == GIFT_CATALOGUE["bloating"][0]
        assert rec.source == "catalogue"

    def test_no_symptoms_gets_default(self) -> None:
        rec = catalogue_recommendation([])
        assert "comfort bundle" in rec.gift.lower()


class TestGiftRecommender:
    def test_disabled_uses_catalogue(self) -> None:
        recommender = GiftRecommender(settings=Settings(anthropic_api_key=None))
        assert not recommender.enabled
        rec = recommender.recommend(["cramps"])
        assert rec.gift == GIFT_CATALOGUE["cramps"][0]

    def test_llm_reply_used(self, settings: Settings) -> None:
        reply = json.dumps(
            {"giftRecommendation": "Lavender bath salts", "reasoning": "Relaxing for cramps."}
        )
        client = llm_client(reply)
        rec = GiftRecommender(settings=settings, client=client).recommend(
            ["cramps"], preferences="loves lavender"
        )
        assert rec.gift == "Lavender bath salts"
        assert rec.source == "llm"
        prompt = client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert "- Cramps" in prompt
        assert "loves lavender" in prompt

    def test_bad_reply_falls_back(self, settings: Settings) -> None:
        rec = GiftRecommender(settings=settings, client=llm_client("no idea")).recommend(
            ["nausea"]
        )
        assert rec.source == "catalogue"
        assert rec.gift == GIFT_CATALOGUE["nausea"][0]

    def test_empty_gift_falls_back(self, settings: Settings) -> None:
        reply = json.dumps({"giftRecommendation": "", "reasoning": "x"})
        rec = GiftRecommender(settings=settings, client=llm_client(reply)).recommend(["acne"])
        assert rec.source == "catalogue"

    def test_api_error_falls_back(self, settings: Settings) -> None:
        client = llm_client("")
        client.messages.create.side_effect = anthropic.APIConnectionError(
            request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        )
        rec = GiftRecommender(settings=settings, client=client).recommend(["fatigue"])
        assert rec.source == "catalogue"
        assert rec.gift == GIFT_CATALOGUE["fatigue"][0]
