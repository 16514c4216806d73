"""Shared fixtures: a scripted stand-in for the trivia provider's HTTP session."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
import requests

from quiz_catalog.catalog.models import Question, Quiz
from quiz_catalog.catalog.registry import QuizRegistry
from quiz_catalog.trivia.source import RandomQuizSource


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, json_error: bool = False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Any:
        if self.json_error:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Returns queued responses (or raises queued exceptions) and records every request."""

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._queue: List[Any] = []

    def queue(self, item: Any) -> None:
        if isinstance(item, (FakeResponse, Exception)):
            self._queue.append(item)
        else:
            self._queue.append(FakeResponse(item))

    def get(self, url: str, params: Dict[str, Any] | None = None, timeout: float | None = None):
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if not self._queue:
            raise AssertionError("unexpected provider request")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def provider_payload(*records: Dict[str, Any], response_code: int = 0) -> Dict[str, Any]:
    return {"response_code": response_code, "results": list(records)}


def provider_record(
    question: str = "What is the antiparticle of the electron?",
    correct: str = "Positron",
    incorrect: List[str] | None = None,
) -> Dict[str, Any]:
    return {
        "type": "multiple",
        "difficulty": "medium",
        "category": "Science &amp; Nature",
        "question": question,
        "correct_answer": correct,
        "incorrect_answers": ["Antitron", "Megatron"] if incorrect is None else incorrect,
    }


@pytest.fixture
def fake_session() -> FakeSession:
    """Create a scripted provider session; tests queue the payloads it should return."""
    return FakeSession()


@pytest.fixture
def source(fake_session) -> RandomQuizSource:
    """Create a RandomQuizSource that talks to the fake session."""
    return RandomQuizSource(base_url="https://trivia.test/", timeout=5.0, session=fake_session)


@pytest.fixture
def registry(source) -> QuizRegistry:
    """Create a registry seeded with one random quiz per supported category."""
    return QuizRegistry(source, question_count=10)


@pytest.fixture
def epic_quiz() -> Quiz:
    """Custom quiz used throughout the registry scenarios."""
    return Quiz(
        category="Science",
        title="Epic Quiz",
        time_limit=300,
        questions=[
            Question(
                prompt="What is the antiparticle of the electron?",
                correct_answer="Positron",
                incorrect_answers=["Antitron", "Megatron"],
            )
        ],
    )


def make_quiz(category: str, title: str, time_limit: int = 60) -> Quiz:
    return Quiz(
        category=category,
        title=title,
        time_limit=time_limit,
        questions=[Question(prompt=f"{title}?", correct_answer="yes", incorrect_answers=["no"])],
    )
