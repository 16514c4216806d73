from __future__ import annotations

import html
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from quiz_catalog.catalog.models import Question, Quiz
from quiz_catalog.errors import InvalidArgumentError
from quiz_catalog.trivia.categories import QUESTION_LIMIT
from quiz_catalog.utils.logging import get_logger, quiz_fields

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://opentdb.com"
SECONDS_PER_QUESTION = 10


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    ANY = "any"

    @property
    def rank(self) -> Optional[int]:
        """Position in easy < medium < hard; None for ANY."""
        if self is Difficulty.ANY:
            return None
        return _DIFFICULTY_ORDER.index(self)

    @property
    def multiplier(self) -> int:
        """Seconds-per-question factor: 3x when unfiltered, then 3x/2x/1x for easy/medium/hard."""
        rank = self.rank
        return 3 if rank is None else 3 - rank


_DIFFICULTY_ORDER = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD)


class RefreshFailure(str, Enum):
    TOO_MANY_REQUESTED = "too many requested"
    INVALID_PARAMETER = "invalid parameter"
    RATE_LIMITED = "rate limited"
    UNEXPECTED_PROVIDER_CODE = "unexpected provider code"
    NETWORK_ERROR = "network error"
    MALFORMED_RESPONSE = "malformed response"


_RESPONSE_CODE_FAILURES = {
    1: RefreshFailure.TOO_MANY_REQUESTED,
    2: RefreshFailure.INVALID_PARAMETER,
    5: RefreshFailure.RATE_LIMITED,
}


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of one refresh: success with counts, or the reason nothing changed."""

    failure: Optional[RefreshFailure] = None
    detail: Optional[str] = None
    added: int = 0
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def failed(cls, failure: RefreshFailure, detail: Optional[str] = None) -> "RefreshResult":
        return cls(failure=failure, detail=detail)


def time_limit_for(count: int, difficulty: Difficulty) -> int:
    return count * SECONDS_PER_QUESTION * difficulty.multiplier


class _ProviderFailure(Exception):
    """Raised inside a refresh when the provider round-trip cannot yield records."""

    def __init__(self, failure: RefreshFailure, detail: str):
        super().__init__(detail)
        self.failure = failure
        self.detail = detail


class RandomQuizSource:
    """
    Regenerates random quiz content from the Open Trivia DB.

    Each `refresh` issues exactly one request; callers that want another attempt
    call `refresh` again. The quiz keeps its previous questions and time limit
    unless the provider confirms success.

    A session passed in stays owned by the caller. Otherwise the source opens its
    own `requests.Session` and releases it in `close`.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self.session = requests.Session() if session is None else session

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def build_params(self, quiz: Quiz, count: int, difficulty: Difficulty) -> Dict[str, Any]:
        params: Dict[str, Any] = {"amount": count, "category": quiz.provider_category_id}
        if difficulty is not Difficulty.ANY:
            params["difficulty"] = difficulty.value
        return params

    def refresh(
        self,
        quiz: Quiz,
        count: int = 10,
        difficulty: Difficulty = Difficulty.ANY,
    ) -> RefreshResult:
        """
        Replace a random quiz's questions and time limit with fresh provider content.

        Raises `InvalidArgumentError` before any network access when `quiz` is not a
        random quiz or `count` is outside `[0, 100]`. Provider problems are returned as
        a failed `RefreshResult` and leave the quiz untouched.
        """
        if not isinstance(quiz, Quiz) or not quiz.is_random:
            raise InvalidArgumentError("only random quizzes can be refreshed", field="quiz")
        if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count <= QUESTION_LIMIT:
            raise InvalidArgumentError(
                f"count must be an integer between 0 and {QUESTION_LIMIT}", field="count"
            )
        try:
            difficulty = Difficulty(difficulty)
        except ValueError as exc:
            raise InvalidArgumentError(f"unknown difficulty: {difficulty!r}", field="difficulty") from exc

        try:
            records = self._fetch_records(self.build_params(quiz, count, difficulty))
        except _ProviderFailure as exc:
            logger.warning(
                "quiz_refresh_failed",
                **quiz_fields(quiz),
                reason=exc.failure.value,
                detail=exc.detail,
            )
            return RefreshResult.failed(exc.failure, exc.detail)

        questions: List[Question] = []
        skipped = 0
        for index, record in enumerate(records):
            question = self._parse_record(record)
            if question is None:
                skipped += 1
                logger.warning("provider_record_skipped", **quiz_fields(quiz), index=index)
                continue
            questions.append(question)

        quiz.questions = tuple(questions)
        new_limit = time_limit_for(count, difficulty)
        # A zero-question request yields 0 seconds; time limits must stay positive.
        if new_limit > 0:
            quiz.time_limit = new_limit

        logger.info(
            "quiz_refreshed",
            **quiz_fields(quiz),
            added=len(questions),
            skipped=skipped,
            time_limit=quiz.time_limit,
        )
        return RefreshResult(added=len(questions), skipped=skipped)

    def _fetch_records(self, params: Dict[str, Any]) -> List[Any]:
        """GET one batch and return its raw result records, or raise `_ProviderFailure`."""
        url = f"{self.base_url}/api.php"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise _ProviderFailure(RefreshFailure.NETWORK_ERROR, str(exc)) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise _ProviderFailure(RefreshFailure.MALFORMED_RESPONSE, f"invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise _ProviderFailure(RefreshFailure.MALFORMED_RESPONSE, "response is not an object")

        response_code = payload.get("response_code")
        if not isinstance(response_code, int) or isinstance(response_code, bool):
            raise _ProviderFailure(RefreshFailure.MALFORMED_RESPONSE, "missing response_code")
        if response_code != 0:
            failure = _RESPONSE_CODE_FAILURES.get(response_code, RefreshFailure.UNEXPECTED_PROVIDER_CODE)
            raise _ProviderFailure(failure, f"provider response_code={response_code}")

        results = payload.get("results")
        if not isinstance(results, list):
            raise _ProviderFailure(RefreshFailure.MALFORMED_RESPONSE, "results is not a list")
        return results

    @staticmethod
    def _parse_record(record: Any) -> Optional[Question]:
        if not isinstance(record, dict):
            return None
        prompt = record.get("question")
        correct = record.get("correct_answer")
        incorrect = record.get("incorrect_answers")
        if not isinstance(prompt, str) or not isinstance(correct, str) or not isinstance(incorrect, list):
            return None
        if not all(isinstance(answer, str) for answer in incorrect):
            return None
        try:
            return Question(
                prompt=html.unescape(prompt),
                correct_answer=html.unescape(correct),
                incorrect_answers=[html.unescape(answer) for answer in incorrect],
            )
        except ValidationError:
            return None
