from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests

from quiz_catalog.catalog.registry import QuizRegistry
from quiz_catalog.config import Settings, load_settings
from quiz_catalog.trivia.source import RandomQuizSource
from quiz_catalog.utils.logging import configure_logging

logger = logging.getLogger(__name__)


class QuizSystem:
    """
    Composition root wiring configuration, the trivia source, and the registry.

    Build one instance at process start and hand it to the HTTP app or CLI; nothing
    in the package looks the registry up globally.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        configure_logging(settings.logging.level, settings.logging.use_json)

        provider = settings.provider
        self.source = RandomQuizSource(
            base_url=provider.base_url,
            timeout=provider.timeout_seconds,
            session=session,
        )
        self.registry = QuizRegistry(self.source, question_count=provider.question_count)
        logger.info(
            "Quiz catalog ready with %d categories (provider=%s, timeout=%s)",
            len(self.registry.list_categories()),
            provider.base_url,
            provider.timeout_seconds,
        )

    @classmethod
    def from_config(
        cls,
        config_path: str | Path | None = None,
        session: Optional[requests.Session] = None,
    ) -> "QuizSystem":
        """Load settings (YAML + env overrides) and build the system."""
        return cls(load_settings(config_path), session=session)

    def close(self) -> None:
        """Release the provider session opened for this system."""
        self.source.close()
