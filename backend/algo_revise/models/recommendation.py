"""
Study Recommendation Models (Pydantic)

Response schemas for study plans and interview preparation:
- Weak topics and patterns to focus on
- Confident problems that have gone stale
- Interview topic coverage and readiness
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from algo_revise.models.base import StrictResponse
from algo_revise.models.revision import DifficultyBreakdown, ProblemSummary


class FocusArea(StrictResponse):
    """A topic or pattern whose problems average below the confidence threshold."""

    tag: str
    average_confidence: float = Field(..., description="Rounded to 1 decimal")
    problem_count: int
    recommended_problems: list[ProblemSummary] = Field(default_factory=list)


class StaleProblem(StrictResponse):
    """A confident problem that has not been revised recently."""

    problem: ProblemSummary
    days_since_revision: int


class StudyRecommendations(StrictResponse):
    """What to study next, weakest areas first."""

    focus_areas: list[FocusArea]
    pattern_practice: list[FocusArea]
    review_problems: list[StaleProblem]
    generated_at: datetime


class TopicReadiness(StrictResponse):
    """Coverage of one interview-critical topic."""

    topic: str
    confidence: float = Field(..., description="Average confidence, 1 decimal")
    problem_count: int
    priority: Optional[str] = Field(None, description="'high' or 'medium' for weaknesses")


class InterviewPlan(StrictResponse):
    """
    Interview preparation overview.

    ``readiness_score`` is the covered fraction of interview topics times the
    average confidence across covered topics, rounded to 1 decimal (0-10).
    """

    readiness_score: float
    strengths: list[TopicReadiness]
    weaknesses: list[TopicReadiness]
    missing_topics: list[str]
    difficulty_balance: list[DifficultyBreakdown]
    recommendations: list[str]
    generated_at: datetime
