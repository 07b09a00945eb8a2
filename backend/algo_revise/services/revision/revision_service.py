"""
Revision Service

Service layer that connects the revision core (queue builder and confidence
updater) to a ProblemRepository. Handles queue requests, review completion,
history, statistics, similar problems and solution classification.

Usage:
    from algo_revise.services.revision import (
        InMemoryProblemRepository,
        RevisionService,
    )

    service = RevisionService(InMemoryProblemRepository())

    # Get the revision queue
    response = await service.get_queue("user-1")

    # Complete a review
    result = await service.complete_revision(
        "user-1",
        "two-sum",
        SessionOutcome(performance_score=8, time_taken=12,
                       was_correct=True, difficulty_rating=3),
    )
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from algo_revise.config.settings import settings
from algo_revise.errors import NotFoundError
from algo_revise.models.classification import ClassificationResult
from algo_revise.models.recommendation import InterviewPlan, StudyRecommendations
from algo_revise.models.revision import (
    DashboardSummary,
    PerformanceReport,
    Problem,
    ProblemAnalytics,
    ProblemSummary,
    RevisionCompleteResponse,
    RevisionHistory,
    RevisionQueueResponse,
    RevisionStats,
    SessionOutcome,
    SimilarProblem,
    utc_now,
)
from algo_revise.services.classification.base import ProblemClassifier
from algo_revise.services.classification.keyword import KeywordClassifier
from algo_revise.services.revision.analytics import (
    build_dashboard,
    build_performance_report,
    build_problem_analytics,
    build_stats,
)
from algo_revise.services.revision.confidence import ConfidenceUpdater, validate_outcome
from algo_revise.services.revision.queue_builder import RevisionQueueBuilder
from algo_revise.services.revision.recommendations import (
    build_interview_plan,
    build_study_recommendations,
)
from algo_revise.services.revision.repository import ProblemRepository
from algo_revise.services.revision.similarity import find_similar_problems

logger = logging.getLogger(__name__)


class RevisionService:
    """
    Service for revision scheduling and review processing.

    Provides:
    - Revision queue generation for a user
    - Review completion with confidence updates and persistence
    - Revision history, statistics, performance trends and dashboards
    - Study recommendations and interview preparation
    - Similar problem lookup and solution classification

    Completions for the same problem are serialized with a per-problem
    asyncio.Lock, so two concurrent reviews cannot lose an update within
    one process. Cross-process callers need their own coordination.
    """

    def __init__(
        self,
        repository: ProblemRepository,
        queue_builder: Optional[RevisionQueueBuilder] = None,
        updater: Optional[ConfidenceUpdater] = None,
        classifier: Optional[ProblemClassifier] = None,
    ):
        """
        Initialize the revision service.

        Args:
            repository: Storage for problems and sessions
            queue_builder: Queue builder (defaults to the default rules)
            updater: Confidence updater (defaults to settings parameters)
            classifier: Solution classifier (defaults to KeywordClassifier)
        """
        self.repository = repository
        self.queue_builder = queue_builder or RevisionQueueBuilder()
        self.updater = updater or ConfidenceUpdater()
        self.classifier = classifier or KeywordClassifier()
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: defaultdict[str, int] = defaultdict(int)

    async def get_queue(
        self, user_id: str, now: Optional[datetime] = None
    ) -> RevisionQueueResponse:
        """
        Build the revision queue for a user.

        Args:
            user_id: Owner of the problems
            now: Reference instant (defaults to current UTC time)

        Returns:
            Queue response with the instant it was generated for

        Raises:
            ValidationError: If any stored problem is malformed
        """
        now = now or utc_now()
        problems = await self.repository.fetch_problems_for_user(user_id)
        queue = self.queue_builder.build_queue(problems, now)

        logger.info(f"Built revision queue for user {user_id}: {len(queue)} items")

        return RevisionQueueResponse(queue=queue, generated_at=now)

    async def complete_revision(
        self,
        user_id: str,
        problem_id: str,
        outcome: Union[SessionOutcome, Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> RevisionCompleteResponse:
        """
        Record a completed review and update the problem.

        The outcome is validated before anything is loaded. The session is
        saved before the problem, matching the order a reader of the history
        expects.

        Args:
            user_id: Owner of the problem
            problem_id: Problem that was reviewed
            outcome: Review result
            now: Completion time (defaults to current UTC time)

        Returns:
            The new session and a summary of the updated problem

        Raises:
            MissingFieldError: Required outcome fields are absent
            RangeError: Outcome scores out of range
            NotFoundError: Problem doesn't exist or belongs to another user
        """
        if isinstance(outcome, Mapping):
            outcome = SessionOutcome.model_validate(outcome)
        validate_outcome(outcome)

        async with self._problem_lock(problem_id):
            now = now or utc_now()
            problem = await self._get_owned_problem(user_id, problem_id)

            updated, session = self.updater.complete_revision(problem, outcome, now)

            await self.repository.save_session(session)
            await self.repository.save_problem(updated)

        logger.info(
            f"Completed revision of {problem_id}: confidence "
            f"{problem.confidence_score} -> {updated.confidence_score}, "
            f"revision #{updated.revision_count}"
        )

        return RevisionCompleteResponse(
            session=session,
            updated_problem=ProblemSummary.from_problem(updated),
            confidence_before=problem.confidence_score,
            confidence_delta=updated.confidence_score - problem.confidence_score,
        )

    async def get_history(self, user_id: str, problem_id: str) -> RevisionHistory:
        """
        Get all revision sessions for a problem, newest first.

        Raises:
            NotFoundError: Problem doesn't exist or belongs to another user
        """
        problem = await self._get_owned_problem(user_id, problem_id)
        sessions = await self.repository.list_sessions(user_id, problem_id=problem_id)
        sessions = sorted(sessions, key=lambda s: s.created_at, reverse=True)

        return RevisionHistory(
            problem=ProblemSummary.from_problem(problem),
            sessions=sessions,
        )

    async def get_stats(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        days: Optional[int] = None,
    ) -> RevisionStats:
        """
        Get revision statistics over a recent window.

        Args:
            user_id: User to report on
            now: End of the window (defaults to current UTC time)
            days: Window length (defaults to settings.STATS_WINDOW_DAYS)
        """
        now = now or utc_now()
        days = days if days is not None else settings.STATS_WINDOW_DAYS

        problems = await self.repository.fetch_problems_for_user(user_id)
        sessions = await self.repository.list_sessions(
            user_id, since=now - timedelta(days=days)
        )

        return build_stats(problems, sessions, window_days=days)

    async def get_dashboard(
        self, user_id: str, now: Optional[datetime] = None
    ) -> DashboardSummary:
        """Get the dashboard overview for a user."""
        now = now or utc_now()
        problems = await self.repository.fetch_problems_for_user(user_id)
        sessions = await self.repository.list_sessions(
            user_id, since=now - timedelta(days=settings.STATS_WINDOW_DAYS)
        )
        return build_dashboard(problems, sessions, now)

    async def get_performance(
        self,
        user_id: str,
        now: Optional[datetime] = None,
        days: Optional[int] = None,
    ) -> PerformanceReport:
        """
        Get performance trends over a recent window.

        Args:
            user_id: User to report on
            now: End of the window (defaults to current UTC time)
            days: Window length (defaults to settings.STATS_WINDOW_DAYS)
        """
        now = now or utc_now()
        days = days if days is not None else settings.STATS_WINDOW_DAYS

        problems = await self.repository.fetch_problems_for_user(user_id)
        sessions = await self.repository.list_sessions(
            user_id, since=now - timedelta(days=days)
        )

        return build_performance_report(problems, sessions, window_days=days)

    async def get_problem_analytics(self, user_id: str) -> ProblemAnalytics:
        """Get topic, pattern and confidence distributions for a user's problems."""
        problems = await self.repository.fetch_problems_for_user(user_id)
        return build_problem_analytics(problems)

    async def get_study_recommendations(
        self, user_id: str, now: Optional[datetime] = None
    ) -> StudyRecommendations:
        """Get weak topics and patterns plus stale problems to review."""
        now = now or utc_now()
        problems = await self.repository.fetch_problems_for_user(user_id)
        recommendations = build_study_recommendations(problems, now)

        logger.info(
            f"Study recommendations for user {user_id}: "
            f"{len(recommendations.focus_areas)} focus areas, "
            f"{len(recommendations.review_problems)} stale problems"
        )

        return recommendations

    async def get_interview_prep(
        self, user_id: str, now: Optional[datetime] = None
    ) -> InterviewPlan:
        """Get interview topic coverage and readiness for a user."""
        now = now or utc_now()
        problems = await self.repository.fetch_problems_for_user(user_id)
        return build_interview_plan(problems, now)

    async def find_similar(
        self, user_id: str, problem_id: str, limit: Optional[int] = None
    ) -> list[SimilarProblem]:
        """
        Find the user's problems that share patterns or topics with one problem.

        Raises:
            NotFoundError: Problem doesn't exist or belongs to another user
        """
        problem = await self._get_owned_problem(user_id, problem_id)
        candidates = await self.repository.fetch_problems_for_user(user_id)
        return find_similar_problems(problem, candidates, limit=limit)

    async def classify_solution(self, code: str) -> ClassificationResult:
        """Classify solution code with the configured classifier."""
        result = await self.classifier.aclassify(code)
        logger.info(
            f"Classified solution via {result.source.value}: "
            f"{result.difficulty.value}, topics={result.topics}"
        )
        return result

    @asynccontextmanager
    async def _problem_lock(self, problem_id: str) -> AsyncIterator[None]:
        """
        Hold the lock for ``problem_id``.

        The lock is created on first use and dropped once no caller holds or
        waits on it, so the map only contains ids with work in flight.
        """
        lock = self._locks.get(problem_id)
        if lock is None:
            lock = self._locks[problem_id] = asyncio.Lock()
        self._lock_users[problem_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[problem_id] -= 1
            if self._lock_users[problem_id] == 0:
                del self._lock_users[problem_id]
                del self._locks[problem_id]

    async def _get_owned_problem(self, user_id: str, problem_id: str) -> Problem:
        problem = await self.repository.get_problem(user_id, problem_id)
        if problem is None:
            raise NotFoundError(
                f"Problem {problem_id} not found",
                details={"problem_id": problem_id},
            )
        return problem
