"""
Unit tests for RevisionService.

Uses InMemoryProblemRepository so the full flow (load, compute, persist)
runs without any external storage.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from algo_revise.enums.revision import ClassifierSource, Difficulty, RevisionReason
from algo_revise.errors import MissingFieldError, NotFoundError, RangeError
from algo_revise.models.classification import ClassificationResult
from algo_revise.models.revision import SessionOutcome
from algo_revise.services.revision.repository import (
    InMemoryProblemRepository,
    ProblemRepository,
)
from algo_revise.services.revision.revision_service import RevisionService


@pytest.fixture
def problems(make_problem):
    return [
        make_problem(problem_id="two-sum", days_ago=10, confidence=9, topics=["Array"],
                     patterns=["Two Pointers"]),
        make_problem(problem_id="lru", days_ago=1, confidence=4, topics=["Hash Table"],
                     difficulty=Difficulty.HARD),
        make_problem(problem_id="3sum", days_ago=2, confidence=8, topics=["Array"],
                     patterns=["Two Pointers", "Sorting"]),
        make_problem(problem_id="other-user", days_ago=30, user_id="user-2"),
    ]


@pytest.fixture
def repository(problems) -> InMemoryProblemRepository:
    return InMemoryProblemRepository(problems)


@pytest.fixture
def service(repository) -> RevisionService:
    return RevisionService(repository)


class YieldingRepository(InMemoryProblemRepository):
    """In-memory repository that hands control back to the loop on every read."""

    async def get_problem(self, user_id, problem_id):
        await asyncio.sleep(0)
        return await super().get_problem(user_id, problem_id)


def outcome(**overrides) -> SessionOutcome:
    fields = dict(performance_score=8, time_taken=20, was_correct=True, difficulty_rating=6)
    fields.update(overrides)
    return SessionOutcome(**fields)


class TestRepository:
    """Tests for the in-memory repository."""

    def test_satisfies_protocol(self, repository):
        assert isinstance(repository, ProblemRepository)

    @pytest.mark.asyncio
    async def test_fetch_only_own_problems(self, repository):
        problems = await repository.fetch_problems_for_user("user-1")
        assert [p.id for p in problems] == ["two-sum", "lru", "3sum"]

    @pytest.mark.asyncio
    async def test_get_problem_checks_owner(self, repository):
        assert await repository.get_problem("user-1", "two-sum") is not None
        assert await repository.get_problem("user-2", "two-sum") is None
        assert await repository.get_problem("user-1", "missing") is None

    @pytest.mark.asyncio
    async def test_resave_keeps_position(self, repository):
        problem = await repository.get_problem("user-1", "two-sum")
        await repository.save_problem(problem.model_copy(update={"title": "Two Sum"}))

        problems = await repository.fetch_problems_for_user("user-1")

        assert problems[0].title == "Two Sum"


class TestGetQueue:
    """Tests for queue generation."""

    @pytest.mark.asyncio
    async def test_queue_for_user(self, service, now):
        response = await service.get_queue("user-1", now=now)

        assert response.generated_at == now
        assert [(i.problem.id, i.reason) for i in response.queue] == [
            ("lru", RevisionReason.LOW_CONFIDENCE),
            ("two-sum", RevisionReason.WEEKLY),
        ]

    @pytest.mark.asyncio
    async def test_unknown_user_gets_empty_queue(self, service, now):
        response = await service.get_queue("nobody", now=now)
        assert response.queue == []


class TestCompleteRevision:
    """Tests for review completion and persistence."""

    @pytest.mark.asyncio
    async def test_updates_and_persists(self, service, repository, now):
        result = await service.complete_revision("user-1", "lru", outcome(), now=now)

        assert result.confidence_before == 4.0
        assert result.confidence_delta == 1.5
        assert result.updated_problem.confidence_score == 5.5
        assert result.updated_problem.revision_count == 1
        assert result.session.created_at == now

        stored = await repository.get_problem("user-1", "lru")
        assert stored.confidence_score == 5.5
        assert stored.last_revised == now
        sessions = await repository.list_sessions("user-1", problem_id="lru")
        assert [s.id for s in sessions] == [result.session.id]

    @pytest.mark.asyncio
    async def test_accepts_mapping(self, service, now):
        result = await service.complete_revision(
            "user-1",
            "two-sum",
            {"performance_score": 3, "time_taken": 30, "was_correct": False,
             "difficulty_rating": 8},
            now=now,
        )
        assert result.updated_problem.confidence_score == 8.0

    @pytest.mark.asyncio
    async def test_completed_problem_leaves_queue(self, service, now):
        await service.complete_revision("user-1", "two-sum", outcome(), now=now)

        response = await service.get_queue("user-1", now=now)

        assert "two-sum" not in {i.problem.id for i in response.queue}

    @pytest.mark.asyncio
    async def test_missing_problem(self, service, now):
        with pytest.raises(NotFoundError) as exc_info:
            await service.complete_revision("user-1", "missing", outcome(), now=now)
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_problem(self, service, now):
        with pytest.raises(NotFoundError):
            await service.complete_revision("user-1", "other-user", outcome(), now=now)

    @pytest.mark.asyncio
    async def test_invalid_outcome_persists_nothing(self, service, repository, now):
        with pytest.raises(MissingFieldError):
            await service.complete_revision(
                "user-1", "lru", SessionOutcome(performance_score=8), now=now
            )
        with pytest.raises(RangeError):
            await service.complete_revision(
                "user-1", "lru", outcome(performance_score=0), now=now
            )

        stored = await repository.get_problem("user-1", "lru")
        assert stored.revision_count == 0
        assert await repository.list_sessions("user-1") == []

    @pytest.mark.asyncio
    async def test_concurrent_completions_all_counted(self, service, repository, now):
        await asyncio.gather(
            *[
                service.complete_revision("user-1", "lru", outcome(), now=now)
                for _ in range(5)
            ]
        )

        stored = await repository.get_problem("user-1", "lru")
        assert stored.revision_count == 5
        assert len(await repository.list_sessions("user-1", problem_id="lru")) == 5

    @pytest.mark.asyncio
    async def test_interleaved_completions_serialized(self, problems, now):
        """Storage that yields between read and write still loses no update."""
        repository = YieldingRepository(problems)
        service = RevisionService(repository)

        await asyncio.gather(
            *[
                service.complete_revision("user-1", "lru", outcome(), now=now)
                for _ in range(5)
            ]
        )

        stored = await repository.get_problem("user-1", "lru")
        assert stored.revision_count == 5
        assert service._locks == {}

    @pytest.mark.asyncio
    async def test_locks_released_after_completion(self, service, now):
        await service.complete_revision("user-1", "lru", outcome(), now=now)
        assert service._locks == {}

    @pytest.mark.asyncio
    async def test_locks_released_for_missing_problems(self, service, now):
        for i in range(50):
            with pytest.raises(NotFoundError):
                await service.complete_revision("user-1", f"missing-{i}", outcome(), now=now)

        assert service._locks == {}
        assert service._lock_users == {}


class TestHistoryAndStats:
    """Tests for history, stats and dashboard."""

    @pytest.mark.asyncio
    async def test_history_newest_first(self, service, now):
        for days in (3, 1, 2):
            await service.complete_revision(
                "user-1", "3sum", outcome(), now=now - timedelta(days=days)
            )

        history = await service.get_history("user-1", "3sum")

        assert history.problem.id == "3sum"
        dates = [s.created_at for s in history.sessions]
        assert dates == sorted(dates, reverse=True)
        assert len(dates) == 3

    @pytest.mark.asyncio
    async def test_history_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_history("user-2", "3sum")

    @pytest.mark.asyncio
    async def test_stats_window(self, service, now):
        await service.complete_revision(
            "user-1", "lru", outcome(was_correct=False, performance_score=4),
            now=now - timedelta(days=40),
        )
        await service.complete_revision("user-1", "3sum", outcome(), now=now - timedelta(days=1))

        stats = await service.get_stats("user-1", now=now)

        assert stats.window_days == 30
        assert stats.revision_stats.total_sessions == 1
        assert stats.revision_stats.accuracy_rate == 100.0
        assert {b.difficulty for b in stats.problem_stats} == {Difficulty.MEDIUM, Difficulty.HARD}
        assert stats.topic_stats[0].tag == "Array"

    @pytest.mark.asyncio
    async def test_dashboard(self, service, now):
        dashboard = await service.get_dashboard("user-1", now=now)

        assert dashboard.total_problems == 3
        # two-sum is stale, lru is weak
        assert dashboard.problems_due_for_revision == 2
        assert dashboard.least_confident[0].id == "lru"

    @pytest.mark.asyncio
    async def test_dashboard_monthly_progress(self, service, now):
        await service.complete_revision("user-1", "lru", outcome(), now=now - timedelta(days=40))
        await service.complete_revision("user-1", "lru", outcome(), now=now - timedelta(days=2))

        dashboard = await service.get_dashboard("user-1", now=now)

        assert [d.session_count for d in dashboard.monthly_progress] == [1]
        assert dashboard.recent_activity.total_sessions == 1


class TestReportsAndRecommendations:
    """Tests for performance reports, problem analytics and study plans."""

    @pytest.mark.asyncio
    async def test_performance(self, service, now):
        await service.complete_revision(
            "user-1", "two-sum", outcome(performance_score=4), now=now - timedelta(days=3)
        )
        await service.complete_revision("user-1", "two-sum", outcome(performance_score=9), now=now)
        await service.complete_revision(
            "user-1", "lru", outcome(performance_score=6, was_correct=False), now=now
        )

        report = await service.get_performance("user-1", now=now)

        assert report.window_days == 30
        assert [d.session_count for d in report.performance_trend] == [1, 2]
        assert [(b.group, b.session_count) for b in report.performance_by_difficulty] == [
            ("Medium", 2),
            ("Hard", 1),
        ]
        assert report.improvement_trends[0].problem.id == "two-sum"
        assert report.improvement_trends[0].improvement == 5

    @pytest.mark.asyncio
    async def test_performance_window(self, service, now):
        await service.complete_revision("user-1", "lru", outcome(), now=now - timedelta(days=10))

        report = await service.get_performance("user-1", now=now, days=7)

        assert report.window_days == 7
        assert report.performance_trend == []

    @pytest.mark.asyncio
    async def test_problem_analytics(self, service):
        analytics = await service.get_problem_analytics("user-1")

        assert (analytics.topic_distribution[0].tag, analytics.topic_distribution[0].count) == (
            "Array",
            2,
        )
        assert [(c.tag, c.count) for c in analytics.pattern_distribution] == [
            ("Two Pointers", 2),
            ("Sorting", 1),
        ]
        assert analytics.least_confident[0].id == "lru"

    @pytest.mark.asyncio
    async def test_study_recommendations(self, service, now):
        plan = await service.get_study_recommendations("user-1", now=now)

        assert [a.tag for a in plan.focus_areas] == ["Hash Table"]
        assert plan.pattern_practice == []
        assert [s.problem.id for s in plan.review_problems] == ["two-sum"]

    @pytest.mark.asyncio
    async def test_interview_prep(self, service, now):
        plan = await service.get_interview_prep("user-1", now=now)

        assert [s.topic for s in plan.strengths] == ["Array"]
        assert [(w.topic, w.priority) for w in plan.weaknesses] == [("Hash Table", "high")]
        assert "Array" not in plan.missing_topics
        assert plan.generated_at == now


class TestSimilarAndClassify:
    """Tests for similar problem lookup and classification."""

    @pytest.mark.asyncio
    async def test_find_similar(self, service):
        similar = await service.find_similar("user-1", "two-sum")

        assert [s.problem.id for s in similar] == ["3sum"]
        assert similar[0].similarity_score == 1.5

    @pytest.mark.asyncio
    async def test_find_similar_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.find_similar("user-1", "missing")

    @pytest.mark.asyncio
    async def test_classify_uses_keyword_by_default(self, service):
        result = await service.classify_solution("class ListNode:\n    pass")
        assert result.source == ClassifierSource.KEYWORD
        assert result.topics == ["Linked List"]

    @pytest.mark.asyncio
    async def test_classify_with_injected_classifier(self, repository):
        classifier = MagicMock()
        classifier.aclassify = AsyncMock(
            return_value=ClassificationResult(source=ClassifierSource.LLM)
        )
        service = RevisionService(repository, classifier=classifier)

        result = await service.classify_solution("code")

        classifier.aclassify.assert_awaited_once_with("code")
        assert result.source == ClassifierSource.LLM
