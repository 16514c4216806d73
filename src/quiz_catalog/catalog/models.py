from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, List, Mapping, Optional, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, validator

from quiz_catalog.errors import InvalidArgumentError
from quiz_catalog.trivia.categories import provider_category_id

RANDOM_QUIZ_TITLE = "Random Quiz"

# Fields a refresh may rewrite on a random quiz.
_REFRESHABLE_FIELDS = frozenset({"questions", "time_limit"})

T = TypeVar("T")


class QuizKind(str, Enum):
    """Discriminates client-authored quizzes from provider-backed ones."""

    CUSTOM = "custom"
    RANDOM = "random"


class Question(BaseModel):
    """One prompt with a single correct answer and any number of distractors."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    prompt: str
    correct_answer: str = Field(alias="correctAnswer")
    incorrect_answers: Tuple[str, ...] = Field(default=(), alias="incorrectAnswers")

    @validator("prompt", "correct_answer")
    def require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @validator("incorrect_answers")
    def require_answer_text(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if any(not answer for answer in value):
            raise ValueError("incorrect answers must be non-empty strings")
        return value

    def answer_choices(self, rng: Optional[random.Random] = None) -> List[str]:
        """Return the correct answer and every distractor in uniformly random order."""
        choices = [self.correct_answer, *self.incorrect_answers]
        if rng is None:
            random.shuffle(choices)
        else:
            rng.shuffle(choices)
        return choices

    def is_correct(self, candidate: Optional[str]) -> bool:
        """Case-insensitive comparison against the correct answer; blank input never matches."""
        if not candidate:
            return False
        return candidate.lower() == self.correct_answer.lower()


class Quiz(BaseModel):
    """
    Ordered question set identified by `(category, title)`.

    Custom quizzes are immutable once built. Random quizzes carry the provider
    category id and only accept new `questions` and `time_limit` values, which
    `RandomQuizSource.refresh` assigns after a successful fetch. The kind tag is
    private state, so it never travels over the wire.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    questions: Tuple[Question, ...] = ()
    category: str
    title: str
    time_limit: int = Field(alias="timeLimit", gt=0)

    _kind: QuizKind = PrivateAttr(default=QuizKind.CUSTOM)
    _provider_category_id: Optional[int] = PrivateAttr(default=None)

    @validator("category", "title")
    def require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    @classmethod
    def random(cls, category: str) -> "Quiz":
        """Build the permanent random quiz for a provider-supported category."""
        category_id = provider_category_id(category)
        if category_id is None:
            raise InvalidArgumentError(
                f"'{category}' is not a supported trivia category", field="category"
            )
        quiz = cls(category=category, title=RANDOM_QUIZ_TITLE, time_limit=1)
        quiz._kind = QuizKind.RANDOM
        quiz._provider_category_id = category_id
        return quiz

    def __setattr__(self, name: str, value: Any) -> None:
        if name in type(self).model_fields:
            if self._kind is QuizKind.CUSTOM:
                raise TypeError(f"custom quiz '{self.title}' is immutable")
            if name not in _REFRESHABLE_FIELDS:
                raise TypeError(f"'{name}' cannot change on a random quiz")
        super().__setattr__(name, value)

    @property
    def kind(self) -> QuizKind:
        return self._kind

    @property
    def is_random(self) -> bool:
        return self._kind is QuizKind.RANDOM

    @property
    def provider_category_id(self) -> Optional[int]:
        return self._provider_category_id

    @property
    def key(self) -> Tuple[str, str]:
        return (self.category, self.title)

    @property
    def num_questions(self) -> int:
        return len(self.questions)

    def to_wire(self) -> dict:
        """Serialize to `{questions, category, title, timeLimit}`."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class Validation(Generic[T]):
    """Outcome of building a model from untrusted input: a value or an invalid-argument error."""

    value: Optional[T] = None
    error: Optional[InvalidArgumentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe(exc: ValidationError) -> str:
    parts = []
    for item in exc.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "payload"
        parts.append(f"{location}: {item.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _parse(model: type[BaseModel], payload: Any, label: str) -> Validation:
    if not isinstance(payload, Mapping):
        return Validation(error=InvalidArgumentError(f"{label} payload must be a JSON object"))
    try:
        return Validation(value=model.model_validate(payload))
    except ValidationError as exc:
        return Validation(error=InvalidArgumentError(f"invalid {label}: {_describe(exc)}"))


def parse_question(payload: Any) -> Validation[Question]:
    """Build a Question from wire data without raising."""
    return _parse(Question, payload, "question")


def parse_quiz(payload: Any) -> Validation[Quiz]:
    """Build a custom Quiz from wire data without raising."""
    return _parse(Quiz, payload, "quiz")
