"""
Revision System Models (Pydantic)

Domain records and request/response schemas for the revision engine:
- Problems and their confidence bookkeeping
- Review outcomes and the immutable sessions created from them
- Revision queue items (derived, never persisted)
- Service-level responses (queue, completion, history, statistics)

ARCHITECTURE NOTE:
    The core treats Problem snapshots as already-loaded in-memory records.
    How they are persisted is decided by a ProblemRepository implementation
    (see algo_revise.services.revision.repository).

    Data flows: Repository → Problem → Core → (Problem, RevisionSession) → Repository
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from algo_revise.config.settings import settings
from algo_revise.enums.revision import Difficulty, RevisionReason
from algo_revise.models.base import (
    DomainModel,
    FrozenRecord,
    StrictRequest,
    StrictResponse,
)

DEFAULT_CONFIDENCE = settings.CONFIDENCE_DEFAULT


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


# ===========================================
# Problem & Session Records
# ===========================================


class Problem(DomainModel):
    """
    A previously solved coding problem tracked for revision.

    New problems start at ``DEFAULT_CONFIDENCE`` with zero revisions. When
    ``last_revised`` is omitted at construction it defaults to
    ``created_at`` (never revised). An explicit ``None`` is kept as-is so
    malformed storage records can be detected by the queue builder.
    """

    id: str
    user_id: Optional[str] = None
    title: str = ""
    leetcode_url: Optional[str] = None
    difficulty: Difficulty = Difficulty.MEDIUM
    topics: frozenset[str] = Field(default_factory=frozenset)
    patterns: list[str] = Field(default_factory=list)

    confidence_score: Optional[float] = Field(
        DEFAULT_CONFIDENCE,
        ge=settings.CONFIDENCE_MIN,
        le=settings.CONFIDENCE_MAX,
        description="Mastery estimate on a 1-10 scale",
    )
    last_revised: Optional[datetime] = None
    revision_count: int = Field(0, ge=0)

    time_complexity: Optional[str] = None
    space_complexity: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="before")
    @classmethod
    def _default_last_revised(cls, data: Any) -> Any:
        if isinstance(data, dict) and "last_revised" not in data:
            data = dict(data)
            created_at = data.get("created_at") or utc_now()
            data["created_at"] = created_at
            data["last_revised"] = created_at
        return data


class RevisionSession(FrozenRecord):
    """
    A completed review of a problem.

    Created exactly once per completed review and immutable afterwards.
    Owned by the problem it references (many sessions per problem).
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    problem_id: str
    user_id: Optional[str] = None
    performance_score: int = Field(..., ge=1, le=10)
    time_taken: float = Field(..., gt=0, description="Minutes spent")
    was_correct: bool
    difficulty_rating: int = Field(..., ge=1, le=10)
    notes: str = ""
    created_at: datetime

    @property
    def date(self) -> datetime:
        """When the review happened (same as created_at)."""
        return self.created_at


class SessionOutcome(StrictRequest):
    """
    Result of a review as reported by the user.

    Every scored field is optional at the type level so that validation in
    ConfidenceUpdater can report exactly which ones are missing.

    Note: Uses StrictRequest - unknown fields are rejected.
    """

    performance_score: Optional[int] = Field(
        None, description="Self-reported quality of the attempt (1-10)"
    )
    time_taken: Optional[float] = Field(None, description="Minutes spent")
    was_correct: Optional[bool] = Field(None, description="Solution was correct")
    difficulty_rating: Optional[int] = Field(
        None, description="Perceived difficulty (1-10)"
    )
    notes: Optional[str] = None


class RevisionQueueItem(FrozenRecord):
    """
    A problem selected for revision, tagged with why and how urgently.

    Derived on every queue request from the current snapshot; never persisted.
    """

    problem: Problem
    priority: int = Field(..., description="Higher is more urgent")
    reason: RevisionReason
    due_date: datetime


# ===========================================
# Service Responses
# ===========================================


class ProblemSummary(StrictResponse):
    """Compact view of a problem's revision state."""

    id: str
    title: str = ""
    difficulty: Difficulty
    topics: list[str] = Field(default_factory=list)
    confidence_score: Optional[float] = None
    revision_count: int = 0
    last_revised: Optional[datetime] = None

    @classmethod
    def from_problem(cls, problem: Problem) -> ProblemSummary:
        return cls(
            id=problem.id,
            title=problem.title,
            difficulty=problem.difficulty,
            topics=sorted(problem.topics),
            confidence_score=problem.confidence_score,
            revision_count=problem.revision_count,
            last_revised=problem.last_revised,
        )


class RevisionQueueResponse(StrictResponse):
    """Queue returned to the caller along with the instant it was built for."""

    queue: list[RevisionQueueItem]
    generated_at: datetime


class RevisionCompleteResponse(StrictResponse):
    """Outcome of completing a review: the new session and updated problem."""

    session: RevisionSession
    updated_problem: ProblemSummary
    confidence_before: float
    confidence_delta: float


class RevisionHistory(StrictResponse):
    """All sessions for a problem, newest first."""

    problem: ProblemSummary
    sessions: list[RevisionSession]


# ===========================================
# Analytics Models
# ===========================================


class SessionSummary(StrictResponse):
    """Aggregate statistics over a set of sessions."""

    total_sessions: int = 0
    correct_sessions: int = 0
    accuracy_rate: float = Field(0.0, description="Percentage of correct sessions")
    average_performance: float = 0.0
    average_time: int = Field(0, description="Average minutes per session")


class DifficultyBreakdown(StrictResponse):
    """Problem count and average confidence for one difficulty."""

    difficulty: Difficulty
    count: int
    average_confidence: float


class TagCount(StrictResponse):
    """How many problems carry a topic or pattern, with their averages."""

    tag: str
    count: int
    average_confidence: Optional[float] = None
    average_revisions: Optional[float] = None


class ConfidenceBucket(StrictResponse):
    """Problems whose confidence falls in [lower, upper)."""

    lower: float
    upper: float
    count: int
    problems: list[str] = Field(default_factory=list)


class RevisionStats(StrictResponse):
    """Statistics over a recent window of revision sessions."""

    window_days: int
    revision_stats: SessionSummary
    problem_stats: list[DifficultyBreakdown]
    topic_stats: list[TagCount]


class DailyPerformance(StrictResponse):
    """Session aggregates for one UTC calendar day."""

    date: str = Field(..., description="YYYY-MM-DD")
    session_count: int
    correct_sessions: int
    accuracy_rate: float = Field(..., description="Percentage of correct sessions")
    average_performance: float
    average_time: float


class PerformanceBreakdown(StrictResponse):
    """Session aggregates for one difficulty or topic."""

    group: str
    session_count: int
    accuracy_rate: float
    average_performance: float
    average_time: float


class ProblemImprovement(StrictResponse):
    """
    Change in performance score between a problem's first and latest session.

    ``improvement`` is None when the problem has no sessions on record.
    """

    problem: ProblemSummary
    improvement: Optional[int] = None


class PerformanceReport(StrictResponse):
    """Performance trends over a recent window of sessions."""

    window_days: int
    performance_trend: list[DailyPerformance]
    performance_by_difficulty: list[PerformanceBreakdown]
    performance_by_topic: list[PerformanceBreakdown]
    improvement_trends: list[ProblemImprovement]


class ProblemAnalytics(StrictResponse):
    """Distribution of a user's problems across tags and confidence."""

    topic_distribution: list[TagCount]
    pattern_distribution: list[TagCount]
    confidence_distribution: list[ConfidenceBucket]
    most_revised: list[ProblemSummary]
    least_confident: list[ProblemSummary]


class DashboardSummary(StrictResponse):
    """Overview of a user's revision state for the dashboard."""

    total_problems: int
    problems_due_for_revision: int
    recent_activity: SessionSummary
    difficulty_stats: list[DifficultyBreakdown]
    weak_areas: list[TagCount]
    confidence_distribution: list[ConfidenceBucket]
    most_revised: list[ProblemSummary]
    least_confident: list[ProblemSummary]
    monthly_progress: list[DailyPerformance] = Field(default_factory=list)


class SimilarProblem(BaseModel):
    """A related problem with its overlap score."""

    problem: ProblemSummary
    similarity_score: float
