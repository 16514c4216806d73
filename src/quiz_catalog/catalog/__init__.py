from .models import (
    RANDOM_QUIZ_TITLE,
    Question,
    Quiz,
    QuizKind,
    Validation,
    parse_question,
    parse_quiz,
)
from .registry import CategoryGroup, QuizRegistry

__all__ = [
    "RANDOM_QUIZ_TITLE",
    "Question",
    "Quiz",
    "QuizKind",
    "Validation",
    "parse_question",
    "parse_quiz",
    "CategoryGroup",
    "QuizRegistry",
]
