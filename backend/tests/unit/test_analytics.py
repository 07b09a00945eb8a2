"""
Unit tests for revision analytics and similar problem matching.
"""

from datetime import timedelta

import pytest

from algo_revise.enums.revision import Difficulty
from algo_revise.models.revision import Problem, RevisionSession
from algo_revise.services.revision.analytics import (
    build_dashboard,
    build_problem_analytics,
    confidence_distribution,
    count_due_problems,
    daily_performance,
    difficulty_breakdown,
    improvement_trends,
    least_confident,
    most_revised,
    pattern_distribution,
    performance_by_difficulty,
    performance_by_topic,
    summarize_sessions,
    topic_distribution,
    weak_areas,
)
from algo_revise.services.revision.similarity import (
    find_similar_problems,
    similarity_score,
)


def session(now, days_ago=0, performance=5, correct=True, minutes=10, user_id="user-1",
            problem_id="p"):
    return RevisionSession(
        problem_id=problem_id,
        user_id=user_id,
        performance_score=performance,
        time_taken=minutes,
        was_correct=correct,
        difficulty_rating=5,
        created_at=now - timedelta(days=days_ago),
    )


class TestSummarizeSessions:
    """Tests for session aggregation."""

    def test_empty(self):
        summary = summarize_sessions([])
        assert summary.total_sessions == 0
        assert summary.accuracy_rate == 0.0
        assert summary.average_time == 0

    def test_aggregates(self, now):
        sessions = [
            session(now, performance=8, correct=True, minutes=10),
            session(now, performance=5, correct=True, minutes=21),
            session(now, performance=3, correct=False, minutes=14),
        ]

        summary = summarize_sessions(sessions)

        assert summary.total_sessions == 3
        assert summary.correct_sessions == 2
        assert summary.accuracy_rate == pytest.approx(66.6667, rel=1e-4)
        assert summary.average_performance == 5.33
        assert summary.average_time == 15


class TestProblemBreakdowns:
    """Tests for difficulty, topic and confidence breakdowns."""

    def test_difficulty_breakdown_order(self, make_problem):
        problems = [
            make_problem(difficulty=Difficulty.HARD, confidence=4),
            make_problem(difficulty=Difficulty.EASY, confidence=8),
            make_problem(difficulty=Difficulty.HARD, confidence=6),
        ]

        breakdown = difficulty_breakdown(problems)

        assert [(b.difficulty, b.count, b.average_confidence) for b in breakdown] == [
            (Difficulty.EASY, 1, 8.0),
            (Difficulty.HARD, 2, 5.0),
        ]

    def test_topic_distribution_sorted_by_count_then_name(self, make_problem):
        problems = [
            make_problem(topics=["Graph", "Array"]),
            make_problem(topics=["Array"]),
            make_problem(topics=["Heap"]),
        ]

        counts = topic_distribution(problems)

        assert [(t.tag, t.count) for t in counts] == [
            ("Array", 2),
            ("Graph", 1),
            ("Heap", 1),
        ]
        assert topic_distribution(problems, limit=1)[0].tag == "Array"

    def test_weak_areas_only_low_confidence(self, make_problem):
        problems = [
            make_problem(topics=["Graph"], confidence=3),
            make_problem(topics=["Graph", "Heap"], confidence=5),
            make_problem(topics=["Array"], confidence=9),
        ]

        areas = weak_areas(problems)

        assert [(t.tag, t.count) for t in areas] == [("Graph", 2), ("Heap", 1)]
        assert areas[0].average_confidence == 4.0

    def test_confidence_buckets(self, make_problem):
        problems = [
            make_problem(title="a", confidence=1.0),
            make_problem(title="b", confidence=2.9),
            make_problem(title="c", confidence=7.0),
            make_problem(title="d", confidence=10.0),
        ]

        buckets = confidence_distribution(problems)

        assert [(b.lower, b.upper) for b in buckets] == [
            (1, 3), (3, 5), (5, 7), (7, 9), (9, 11),
        ]
        assert [b.count for b in buckets] == [2, 0, 0, 1, 1]
        assert buckets[0].problems == ["a", "b"]

    def test_most_revised_and_least_confident(self, make_problem):
        problems = [
            make_problem(problem_id="a", revision_count=1, confidence=6),
            make_problem(problem_id="b", revision_count=7, confidence=9),
            make_problem(problem_id="c", revision_count=3, confidence=2),
        ]

        assert [p.id for p in most_revised(problems, limit=2)] == ["b", "c"]
        assert [p.id for p in least_confident(problems)] == ["c", "a", "b"]


class TestDueCount:
    """Tests for the uncapped due count."""

    def test_stale_or_weak(self, make_problem, now):
        problems = [
            make_problem(days_ago=7, confidence=9),
            make_problem(days_ago=1, confidence=6),
            make_problem(days_ago=1, confidence=9),
            make_problem(days_ago=40, confidence=2),
        ]

        assert count_due_problems(problems, now) == 3

    def test_not_capped_like_queue(self, make_problem, now):
        problems = [make_problem(days_ago=10) for _ in range(30)]
        assert count_due_problems(problems, now) == 30


class TestDashboard:
    """Tests for dashboard assembly."""

    def test_recent_activity_window(self, make_problem, now):
        problems = [make_problem(confidence=4, topics=["Graph"])]
        sessions = [session(now, days_ago=2), session(now, days_ago=9)]

        dashboard = build_dashboard(problems, sessions, now)

        assert dashboard.total_problems == 1
        assert dashboard.recent_activity.total_sessions == 1
        assert dashboard.weak_areas[0].tag == "Graph"
        assert sum(b.count for b in dashboard.confidence_distribution) == 1

    def test_empty_user(self, now):
        dashboard = build_dashboard([], [], now)
        assert dashboard.total_problems == 0
        assert dashboard.problems_due_for_revision == 0
        assert dashboard.most_revised == []

    def test_monthly_progress_by_day(self, make_problem, now):
        problems = [make_problem()]
        sessions = [
            session(now, days_ago=2, performance=6),
            session(now, days_ago=2, performance=8, correct=False),
            session(now, days_ago=20),
            session(now, days_ago=45),
        ]

        dashboard = build_dashboard(problems, sessions, now)

        assert [d.date for d in dashboard.monthly_progress] == ["2024-05-12", "2024-05-30"]
        assert dashboard.monthly_progress[1].session_count == 2
        assert dashboard.monthly_progress[1].accuracy_rate == 50.0


# ============================================================================
# Performance trends
# ============================================================================


class TestPerformanceTrends:
    """Tests for daily, per-difficulty and per-topic performance."""

    def test_daily_performance_sorted_oldest_first(self, now):
        sessions = [
            session(now, days_ago=0, performance=9, minutes=10),
            session(now, days_ago=3, performance=4, correct=False, minutes=30),
            session(now, days_ago=0, performance=6, correct=False, minutes=15),
        ]

        days = daily_performance(sessions)

        assert [d.date for d in days] == ["2024-05-29", "2024-06-01"]
        today = days[1]
        assert today.session_count == 2
        assert today.correct_sessions == 1
        assert today.accuracy_rate == 50.0
        assert today.average_performance == 7.5
        assert today.average_time == 12.5

    def test_daily_performance_empty(self):
        assert daily_performance([]) == []

    def test_by_difficulty_skips_unknown_problems(self, make_problem, now):
        problems = [
            make_problem(problem_id="hard", difficulty=Difficulty.HARD),
            make_problem(problem_id="easy", difficulty=Difficulty.EASY),
        ]
        sessions = [
            session(now, problem_id="hard", performance=4, correct=False),
            session(now, problem_id="easy", performance=9),
            session(now, problem_id="easy", performance=7),
            session(now, problem_id="deleted"),
        ]

        breakdown = performance_by_difficulty(sessions, problems)

        assert [(b.group, b.session_count) for b in breakdown] == [("Easy", 2), ("Hard", 1)]
        assert breakdown[0].average_performance == 8.0
        assert breakdown[1].accuracy_rate == 0.0

    def test_by_topic_most_practised_first(self, make_problem, now):
        problems = [
            make_problem(problem_id="a", topics=["Array", "Hash Table"]),
            make_problem(problem_id="b", topics=["Graph"]),
        ]
        sessions = [
            session(now, problem_id="a"),
            session(now, problem_id="a"),
            session(now, problem_id="b"),
        ]

        breakdown = performance_by_topic(sessions, problems)

        assert [(b.group, b.session_count) for b in breakdown] == [
            ("Array", 2),
            ("Hash Table", 2),
            ("Graph", 1),
        ]

    def test_by_topic_limit(self, make_problem, now):
        problems = [make_problem(problem_id=f"p{i}", topics=[f"T{i}"]) for i in range(12)]
        sessions = [session(now, problem_id=p.id) for p in problems]

        assert len(performance_by_topic(sessions, problems)) == 10
        assert len(performance_by_topic(sessions, problems, limit=3)) == 3


class TestImprovementTrends:
    """Tests for first-to-latest performance change per problem."""

    def test_largest_improvement_first(self, make_problem, now):
        problems = [
            make_problem(problem_id="up", revision_count=2),
            make_problem(problem_id="down", revision_count=2),
        ]
        sessions = [
            session(now, problem_id="up", days_ago=5, performance=3),
            session(now, problem_id="up", days_ago=1, performance=9),
            session(now, problem_id="down", days_ago=1, performance=4),
            session(now, problem_id="down", days_ago=6, performance=7),
        ]

        trends = improvement_trends(problems, sessions)

        assert [(t.problem.id, t.improvement) for t in trends] == [("up", 6), ("down", -3)]

    def test_unrevised_problems_excluded(self, make_problem, now):
        problems = [make_problem(problem_id="new", revision_count=0)]
        assert improvement_trends(problems, [session(now, problem_id="new")]) == []

    def test_no_sessions_sorts_last(self, make_problem, now):
        problems = [
            make_problem(problem_id="old", revision_count=3),
            make_problem(problem_id="flat", revision_count=1),
        ]
        sessions = [session(now, problem_id="flat", performance=5)]

        trends = improvement_trends(problems, sessions)

        assert [(t.problem.id, t.improvement) for t in trends] == [("flat", 0), ("old", None)]


class TestProblemAnalytics:
    """Tests for topic and pattern distributions."""

    def test_pattern_distribution_with_average_revisions(self, make_problem):
        problems = [
            make_problem(patterns=["Two Pointers", "Sorting"], revision_count=4),
            make_problem(patterns=["Two Pointers", "Two Pointers"], revision_count=2),
            make_problem(patterns=[]),
        ]

        counts = pattern_distribution(problems)

        assert [(c.tag, c.count) for c in counts] == [("Two Pointers", 2), ("Sorting", 1)]
        assert counts[0].average_revisions == 3.0
        assert counts[1].average_revisions == 4.0

    def test_build_problem_analytics(self, make_problem):
        problems = [
            make_problem(topics=["Array"], patterns=["Sliding Window"], confidence=3,
                         revision_count=5),
            make_problem(topics=["Array", "String"], confidence=8, revision_count=1),
        ]

        analytics = build_problem_analytics(problems)

        assert analytics.topic_distribution[0].tag == "Array"
        assert analytics.topic_distribution[0].average_revisions == 3.0
        assert [c.tag for c in analytics.pattern_distribution] == ["Sliding Window"]
        assert analytics.most_revised[0].revision_count == 5
        assert analytics.least_confident[0].confidence_score == 3


# ============================================================================
# Similarity
# ============================================================================


class TestSimilarity:
    """Tests for similar problem scoring and ranking."""

    def test_score_weights_patterns_double(self):
        problem = Problem(id="a", topics=["Array", "Hash Table"], patterns=["Two Pointers"])
        other = Problem(id="b", topics=["Array"], patterns=["Two Pointers"])

        # (1 * 2 + 1) / (1 + 2)
        assert similarity_score(problem, other) == 1.0

    def test_score_without_tags(self):
        assert similarity_score(Problem(id="a"), Problem(id="b", topics=["Array"])) == 0.0

    def test_ranking_and_exclusions(self):
        problem = Problem(id="a", topics=["Array"], patterns=["Sliding Window"])
        candidates = [
            problem,
            Problem(id="topic-only", topics=["Array"]),
            Problem(id="both", topics=["Array"], patterns=["Sliding Window"]),
            Problem(id="unrelated", topics=["Graph"], patterns=["Greedy"]),
        ]

        similar = find_similar_problems(problem, candidates)

        assert [(s.problem.id, s.similarity_score) for s in similar] == [
            ("both", 1.5),
            ("topic-only", 0.5),
        ]

    def test_limit(self):
        problem = Problem(id="a", topics=["Array"])
        candidates = [Problem(id=f"c{i}", topics=["Array"]) for i in range(15)]

        assert len(find_similar_problems(problem, candidates)) == 10
        assert len(find_similar_problems(problem, candidates, limit=3)) == 3
