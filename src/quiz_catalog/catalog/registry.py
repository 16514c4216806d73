from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from quiz_catalog.catalog.models import Quiz
from quiz_catalog.errors import InvalidArgumentError
from quiz_catalog.trivia.categories import QUESTION_LIMIT, supported_categories
from quiz_catalog.utils.logging import get_logger, quiz_fields

if TYPE_CHECKING:
    from quiz_catalog.trivia.source import RandomQuizSource

logger = get_logger(__name__)


@dataclass
class CategoryGroup:
    """All quizzes sharing one category, keyed by title."""

    category: str
    quizzes: Dict[str, Quiz] = field(default_factory=dict)


def _require_key(category: Optional[str], title: Optional[str]) -> None:
    if not isinstance(category, str) or not category:
        raise InvalidArgumentError("category must be a non-empty string", field="category")
    if not isinstance(title, str) or not title:
        raise InvalidArgumentError("title must be a non-empty string", field="title")


def _require_quiz(quiz: Optional[Quiz], name: str = "quiz") -> Quiz:
    if not isinstance(quiz, Quiz):
        raise InvalidArgumentError(f"{name} must be a Quiz", field=name)
    return quiz


class QuizRegistry:
    """
    Catalog of quizzes grouped by category and keyed by `(category, title)`.

    One random quiz per supported trivia category is created up front and can never
    be removed or replaced. Every public method runs inside a single registry-wide
    lock, so check-then-act sequences (add, edit) cannot interleave. `get_quiz` on a
    random quiz refreshes it from the provider while holding that lock, which blocks
    all other callers until the provider answers or the request times out.

    Business outcomes (duplicate, missing, protected) are returned as booleans;
    malformed arguments raise `InvalidArgumentError`.
    """

    def __init__(self, source: "RandomQuizSource", question_count: int = 10):
        if isinstance(question_count, bool) or not isinstance(question_count, int) or not (
            0 <= question_count <= QUESTION_LIMIT
        ):
            raise InvalidArgumentError(
                f"question_count must be between 0 and {QUESTION_LIMIT}", field="question_count"
            )
        self.source = source
        self.question_count = question_count
        self._lock = threading.Lock()
        self._groups: Dict[str, CategoryGroup] = {}
        for category in supported_categories():
            quiz = Quiz.random(category)
            self._groups[category] = CategoryGroup(category, {quiz.title: quiz})
        logger.info("registry_initialized", random_quizzes=len(self._groups))

    # -- queries -------------------------------------------------------------

    def list_categories(self) -> List[str]:
        with self._lock:
            return list(self._groups)

    def list_quizzes(self, category: str) -> List[str]:
        if not isinstance(category, str) or not category:
            raise InvalidArgumentError("category must be a non-empty string", field="category")
        with self._lock:
            group = self._groups.get(category)
            return list(group.quizzes) if group else []

    def get_quiz(self, category: str, title: str) -> Optional[Quiz]:
        """Return the quiz at the key, refreshing random quizzes first; None when absent."""
        _require_key(category, title)
        with self._lock:
            return self._get_and_refresh(category, title)

    def export_quiz(self, category: str, title: str) -> Optional[dict]:
        """Like `get_quiz`, but serialized to the wire shape before the lock is released."""
        _require_key(category, title)
        with self._lock:
            quiz = self._get_and_refresh(category, title)
            return quiz.to_wire() if quiz is not None else None

    def snapshot(self) -> Dict[Tuple[str, str], Quiz]:
        """Current key -> quiz mapping, without refreshing anything."""
        with self._lock:
            return {
                (group.category, title): quiz
                for group in self._groups.values()
                for title, quiz in group.quizzes.items()
            }

    # -- mutations -----------------------------------------------------------

    def add_quiz(self, quiz: Quiz) -> bool:
        _require_quiz(quiz)
        with self._lock:
            return self._add(quiz)

    def remove_quiz(self, category: str, title: str) -> bool:
        _require_key(category, title)
        with self._lock:
            return self._remove(category, title, drop_empty_group=True)

    def edit_quiz(self, category: str, title: str, new_quiz: Quiz) -> bool:
        """
        Replace the quiz at `(category, title)` with `new_quiz`, all or nothing.

        Same key: the old entry is removed without dropping its group, so no empty
        group is ever visible, and the add cannot collide. New key: the target key is
        checked first and the call fails untouched if it is taken; only then is the
        old entry removed and the new one added.
        """
        _require_key(category, title)
        _require_quiz(new_quiz, "new_quiz")
        with self._lock:
            if (category, title) == new_quiz.key:
                if not self._remove(category, title, drop_empty_group=False):
                    return False
                return self._add(new_quiz)

            if self._exists(new_quiz.category, new_quiz.title):
                return False
            if not self._remove(category, title, drop_empty_group=True):
                return False
            return self._add(new_quiz)

    # -- internals (caller holds the lock) -----------------------------------

    def _lookup(self, category: str, title: str) -> Optional[Quiz]:
        group = self._groups.get(category)
        if group is None:
            return None
        return group.quizzes.get(title)

    def _exists(self, category: str, title: str) -> bool:
        return self._lookup(category, title) is not None

    def _get_and_refresh(self, category: str, title: str) -> Optional[Quiz]:
        quiz = self._lookup(category, title)
        if quiz is not None and quiz.is_random:
            result = self.source.refresh(quiz, count=self.question_count)
            if not result.ok:
                logger.warning(
                    "random_quiz_served_stale",
                    **quiz_fields(quiz),
                    reason=result.failure.value,
                )
        return quiz

    def _add(self, quiz: Quiz) -> bool:
        group = self._groups.get(quiz.category)
        if group is None:
            group = CategoryGroup(quiz.category)
            self._groups[quiz.category] = group
        elif quiz.title in group.quizzes:
            return False
        group.quizzes[quiz.title] = quiz
        logger.info("quiz_added", **quiz_fields(quiz))
        return True

    def _remove(self, category: str, title: str, drop_empty_group: bool) -> bool:
        group = self._groups.get(category)
        if group is None:
            return False
        quiz = group.quizzes.get(title)
        if quiz is None or quiz.is_random:
            return False
        del group.quizzes[title]
        if drop_empty_group and not group.quizzes:
            del self._groups[category]
        logger.info("quiz_removed", **quiz_fields(quiz))
        return True
