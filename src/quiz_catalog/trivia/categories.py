"""Open Trivia DB categories that can back a random quiz."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# Open Trivia DB serves at most this many questions per request.
QUESTION_LIMIT = 100

CATEGORY_IDS: Mapping[str, int] = MappingProxyType(
    {
        "General Knowledge": 9,
        "Entertainment: Books": 10,
        "Entertainment: Film": 11,
        "Entertainment: Music": 12,
        "Entertainment: Musicals & Theatres": 13,
        "Entertainment: Television": 14,
        "Entertainment: Video Games": 15,
        "Entertainment: Board Games": 16,
        "Science & Nature": 17,
        "Science: Computers": 18,
        "Science: Mathematics": 19,
        "Mythology": 20,
        "Sports": 21,
        "Geography": 22,
        "History": 23,
        "Politics": 24,
        "Art": 25,
        "Celebrities": 26,
        "Animals": 27,
        "Vehicles": 28,
        "Entertainment: Comics": 29,
        "Science: Gadgets": 30,
        "Entertainment: Japanese Anime & Manga": 31,
        "Entertainment: Cartoon & Animations": 32,
    }
)


def provider_category_id(category: str) -> int | None:
    """Return the provider id for a category name, or None when it is not supported."""
    return CATEGORY_IDS.get(category)


def supported_categories() -> list[str]:
    return list(CATEGORY_IDS)
