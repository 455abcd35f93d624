"""Symptom tags a user can attach to a period log.

Symptoms are informational only: the projection engine never reads them.
They feed the calendar detail view and the gift recommender.
"""

from __future__ import annotations

# tag → display label
SYMPTOM_OPTIONS: dict[str, str] = {
    "cramps": "Cramps",
    "bloating": "Bloating",
    "headache": "Headache",
    "fatigue": "Fatigue",
    "mood_swings": "Mood Swings",
    "nausea": "Nausea",
    "backache": "Backache",
    "tender_breasts": "Tender Breasts",
    "acne": "Acne",
    "cravings": "Cravings",
}


def normalize_symptom(tag: str) -> str:
    """Lower-case and snake_case a tag, e.g. ``"Mood Swings"`` → ``"mood_swings"``."""
    return "_".join(tag.strip().lower().replace("-", " ").split())


def unknown_symptoms(tags: list[str]) -> list[str]:
    """Return the tags that are not in the catalogue, in input order."""
    return [tag for tag in tags if normalize_symptom(tag) not in SYMPTOM_OPTIONS]
