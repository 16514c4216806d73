"""
Quiz catalog.

Keyed registry of custom and provider-backed random quizzes, with an Open Trivia DB
integration that regenerates random quiz content on read.
"""

from .config.loader import load_settings
from .errors import InvalidArgumentError, QuizCatalogError

__all__ = ["load_settings", "InvalidArgumentError", "QuizCatalogError"]
