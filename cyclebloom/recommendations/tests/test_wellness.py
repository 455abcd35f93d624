"""Tests for the wellness tip catalogue."""

from cyclebloom.recommendations.wellness import WELLNESS_TIPS, categories, list_tips


def test_all_tips_without_filter():
    assert list_tips() == list(WELLNESS_TIPS)
    assert list_tips("") == list(WELLNESS_TIPS)


def test_category_filter_is_case_insensitive():
    tips = list_tips("nutrition")
    assert len(tips) == 2
    assert all(tip.category == "Nutrition" for tip in tips)


def test_unknown_category_is_empty():
    assert list_tips("Astrology") == []


def test_tip_ids_unique():
    ids = [tip.tip_id for tip in WELLNESS_TIPS]
    assert len(ids) == len(set(ids))


def test_categories_sorted():
    assert categories() == ["Comfort", "Exercise", "Lifestyle", "Mental Health", "Nutrition"]
