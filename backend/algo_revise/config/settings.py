"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from algo_revise.config import settings

    # Access settings
    limit = settings.REVISION_QUEUE_LIMIT
    topics = get_interview_topics()
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Algo Revise"
    DEBUG: bool = False

    # =========================================================================
    # REVISION QUEUE
    # =========================================================================

    # Maximum number of items returned by a queue build
    REVISION_QUEUE_LIMIT: int = 20

    # Weekly window: last revised between MIN and MAX days ago (inclusive)
    REVISION_WEEKLY_MIN_DAYS: int = 7
    REVISION_WEEKLY_MAX_DAYS: int = 14
    REVISION_WEEKLY_CAP: int = 10

    # Biweekly: last revised at least REVISION_WEEKLY_MAX_DAYS ago
    REVISION_BIWEEKLY_CAP: int = 5

    # Low confidence: confidence strictly below the threshold
    REVISION_LOW_CONFIDENCE_THRESHOLD: float = 7.0
    REVISION_LOW_CONFIDENCE_CAP: int = 8

    # Interview-critical topics not revised for REVISION_WEEKLY_MIN_DAYS
    REVISION_INTERVIEW_CAP: int = 5
    REVISION_INTERVIEW_DUE_DAYS: int = 5
    REVISION_INTERVIEW_TOPICS: list[str] = [
        "Array",
        "String",
        "Linked List",
        "Binary Tree",
        "Graph",
        "Dynamic Programming",
        "Backtracking",
        "Stack",
        "Queue",
        "Heap",
        "Hash Table",
        "Two Pointers",
        "Sliding Window",
    ]

    # =========================================================================
    # CONFIDENCE UPDATES
    # =========================================================================

    CONFIDENCE_DEFAULT: float = 5.0
    CONFIDENCE_MIN: float = 1.0
    CONFIDENCE_MAX: float = 10.0

    # Performance score that leaves confidence unchanged
    CONFIDENCE_NEUTRAL_SCORE: int = 5
    # Confidence change per performance point away from neutral
    CONFIDENCE_STEP: float = 0.5
    # Largest gain (when correct) / loss (when incorrect) per session
    CONFIDENCE_MAX_DELTA: float = 2.0

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    STATS_WINDOW_DAYS: int = 30
    DASHBOARD_RECENT_DAYS: int = 7
    ANALYTICS_TOP_TOPICS: int = 10
    ANALYTICS_WEAK_AREAS: int = 5
    SIMILAR_PROBLEMS_LIMIT: int = 10

    # =========================================================================
    # STUDY RECOMMENDATIONS
    # =========================================================================

    STUDY_FOCUS_AREAS: int = 5
    STUDY_STALE_PROBLEMS: int = 10

    # Interview topics averaging at least this are strengths, below it weaknesses
    INTERVIEW_STRONG_CONFIDENCE: float = 8.0
    # Weaknesses averaging below this are high priority
    INTERVIEW_WEAK_CONFIDENCE: float = 6.0

    # =========================================================================
    # LLM CLASSIFICATION
    # =========================================================================

    # Model identifiers use LiteLLM format: provider/model-name
    TEXT_MODEL: str = "openai/gpt-5-mini"
    CLASSIFIER_MODEL: str = ""
    CLASSIFIER_MAX_TOKENS: int = 1024
    CLASSIFIER_TEMPERATURE: float = 0.1
    CLASSIFIER_MAX_CODE_CHARS: int = 12000

    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    GEMINI_API_KEY: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()


def get_interview_topics() -> frozenset[str]:
    """
    Interview-critical topic set used by the queue builder.

    The YAML config (``revision.interview_topics``) takes precedence over
    ``settings.REVISION_INTERVIEW_TOPICS`` when present.
    """
    revision_config = yaml_config.get("revision") or {}
    topics = revision_config.get("interview_topics")
    if topics:
        return frozenset(topics)
    return frozenset(settings.REVISION_INTERVIEW_TOPICS)
