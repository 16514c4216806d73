from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, validator


class ProviderConfig(BaseModel):
    """Connection settings for the external trivia provider used by random quizzes."""

    base_url: str = Field("https://opentdb.com", description="Provider root; api.php is appended.")
    timeout_seconds: Optional[float] = Field(
        10.0,
        gt=0,
        description="Per-request timeout. The registry lock is held for the whole call.",
    )
    question_count: int = Field(10, ge=0, le=100, description="Questions fetched per refresh.")

    @validator("base_url")
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize the base URL so request paths can be joined with a single slash."""
        value = value.strip()
        if not value:
            raise ValueError("base_url must not be empty")
        return value.rstrip("/")


class LoggingConfig(BaseModel):
    """Controls for catalog logging output and format."""

    level: str = Field("INFO")
    use_json: bool = False


class ApiConfig(BaseModel):
    """Settings for the FastAPI surface."""

    allow_origins: List[str] = Field(default_factory=lambda: ["*"])


class Settings(BaseModel):
    """Top-level project configuration aggregating all sub-settings."""

    project_name: str = Field("Quiz Catalog")
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)
