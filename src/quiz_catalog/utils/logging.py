from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog

if TYPE_CHECKING:
    from quiz_catalog.catalog.models import Quiz


def _renderer(json_output: bool):
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Send registry and trivia-source events through stdlib logging at `level`.

    Each event is stamped with an ISO time, its level and the emitting module. Set
    `json_output` (config `logging.use_json`) to get one JSON object per line.
    """
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO
    logging.basicConfig(level=threshold, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """Module-level event logger; picks up whatever `configure_logging` last set."""
    return structlog.get_logger(name)


def quiz_fields(quiz: "Quiz") -> Dict[str, Any]:
    """Standard event fields identifying a quiz."""
    return {"category": quiz.category, "title": quiz.title, "kind": quiz.kind.value}
