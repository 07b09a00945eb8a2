"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root before settings are imported
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from algo_revise.enums.revision import Difficulty  # noqa: E402
from algo_revise.models.revision import Problem  # noqa: E402


# ============================================================================
# Time Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant so scheduling tests are deterministic."""
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Problem Fixtures
# ============================================================================


@pytest.fixture
def make_problem(now: datetime) -> Callable[..., Problem]:
    """
    Factory for Problem records.

    ``days_ago`` sets last_revised relative to the ``now`` fixture.
    """
    counter = {"n": 0}

    def _make(
        problem_id: str = None,
        days_ago: float = 0,
        confidence: float = 9.0,
        topics: tuple = (),
        user_id: str = "user-1",
        **kwargs,
    ) -> Problem:
        counter["n"] += 1
        pid = problem_id or f"p{counter['n']}"
        fields = {
            "id": pid,
            "user_id": user_id,
            "title": kwargs.pop("title", f"Problem {pid}"),
            "difficulty": kwargs.pop("difficulty", Difficulty.MEDIUM),
            "topics": list(topics),
            "confidence_score": confidence,
            "last_revised": now - timedelta(days=days_ago),
            "created_at": kwargs.pop("created_at", now - timedelta(days=60)),
        }
        fields.update(kwargs)
        return Problem(**fields)

    return _make

