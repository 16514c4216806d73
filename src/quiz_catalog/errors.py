from __future__ import annotations


class QuizCatalogError(Exception):
    """Base class for errors raised by the quiz catalog."""


class InvalidArgumentError(QuizCatalogError, ValueError):
    """Raised when a caller passes malformed input (missing quiz, empty key, bad count)."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field
