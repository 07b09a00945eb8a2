"""
Pydantic models for the revision engine.

Usage:
    from algo_revise.models import Problem, SessionOutcome, RevisionQueueItem
"""

from algo_revise.models.base import (
    DomainModel,
    FrozenRecord,
    StrictRequest,
    StrictResponse,
)
from algo_revise.models.classification import ClassificationResult
from algo_revise.models.recommendation import (
    FocusArea,
    InterviewPlan,
    StaleProblem,
    StudyRecommendations,
    TopicReadiness,
)
from algo_revise.models.revision import (
    DEFAULT_CONFIDENCE,
    ConfidenceBucket,
    DailyPerformance,
    DashboardSummary,
    DifficultyBreakdown,
    PerformanceBreakdown,
    PerformanceReport,
    ProblemAnalytics,
    ProblemImprovement,
    Problem,
    ProblemSummary,
    RevisionCompleteResponse,
    RevisionHistory,
    RevisionQueueItem,
    RevisionQueueResponse,
    RevisionSession,
    RevisionStats,
    SessionOutcome,
    SessionSummary,
    SimilarProblem,
    TagCount,
    utc_now,
)

__all__ = [
    # Base
    "DomainModel",
    "FrozenRecord",
    "StrictRequest",
    "StrictResponse",
    # Records
    "DEFAULT_CONFIDENCE",
    "Problem",
    "RevisionSession",
    "SessionOutcome",
    "RevisionQueueItem",
    # Responses
    "ProblemSummary",
    "RevisionQueueResponse",
    "RevisionCompleteResponse",
    "RevisionHistory",
    # Analytics
    "SessionSummary",
    "DifficultyBreakdown",
    "TagCount",
    "ConfidenceBucket",
    "RevisionStats",
    "DashboardSummary",
    "DailyPerformance",
    "PerformanceBreakdown",
    "PerformanceReport",
    "ProblemImprovement",
    "ProblemAnalytics",
    "SimilarProblem",
    # Recommendations
    "FocusArea",
    "StaleProblem",
    "StudyRecommendations",
    "TopicReadiness",
    "InterviewPlan",
    # Classification
    "ClassificationResult",
    "utc_now",
]
