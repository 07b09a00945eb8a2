"""
Revision Analytics

Pure aggregation helpers over problem snapshots and revision sessions.

Responsibilities:
- Session statistics (accuracy, average performance and time)
- Daily performance trends and per-difficulty / per-topic performance
- Problem breakdowns by difficulty, topic and pattern
- Weak areas (topics concentrated in low-confidence problems)
- Confidence distribution buckets
- Dashboard overview assembly

None of these functions read the clock or storage; callers pass the
snapshot, the sessions and ``now``.

Usage:
    from algo_revise.services.revision.analytics import build_dashboard

    dashboard = build_dashboard(problems, sessions, now=now)
    print(dashboard.problems_due_for_revision)
"""

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta, timezone
from statistics import fmean
from typing import Any, Optional

from algo_revise.config.settings import settings
from algo_revise.enums.revision import Difficulty
from algo_revise.models.revision import (
    ConfidenceBucket,
    DailyPerformance,
    DashboardSummary,
    DifficultyBreakdown,
    PerformanceBreakdown,
    PerformanceReport,
    Problem,
    ProblemAnalytics,
    ProblemImprovement,
    ProblemSummary,
    RevisionSession,
    RevisionStats,
    SessionSummary,
    TagCount,
)

CONFIDENCE_BUCKET_BOUNDARIES = (1, 3, 5, 7, 9, 11)


def _average(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    return fmean(present) if present else None


def _session_day(session: RevisionSession) -> str:
    created_at = session.created_at
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc)
    return created_at.date().isoformat()


def _performance_fields(sessions: Sequence[RevisionSession]) -> dict[str, Any]:
    """Shared aggregates for a non-empty group of sessions."""
    correct = sum(1 for s in sessions if s.was_correct)
    return {
        "session_count": len(sessions),
        "accuracy_rate": round(correct / len(sessions) * 100, 2),
        "average_performance": round(fmean(s.performance_score for s in sessions), 2),
        "average_time": round(fmean(s.time_taken for s in sessions), 2),
    }


def summarize_sessions(sessions: Sequence[RevisionSession]) -> SessionSummary:
    """
    Aggregate accuracy, performance and time over sessions.

    Args:
        sessions: Sessions to summarize (already filtered to a window)

    Returns:
        SessionSummary with accuracy as a percentage, average performance
        rounded to 2 decimals and average time rounded to whole minutes.
        All zeros when there are no sessions.
    """
    total = len(sessions)
    if total == 0:
        return SessionSummary()

    correct = sum(1 for s in sessions if s.was_correct)
    return SessionSummary(
        total_sessions=total,
        correct_sessions=correct,
        accuracy_rate=correct / total * 100,
        average_performance=round(fmean(s.performance_score for s in sessions), 2),
        average_time=round(fmean(s.time_taken for s in sessions)),
    )


def difficulty_breakdown(problems: Sequence[Problem]) -> list[DifficultyBreakdown]:
    """Problem count and average confidence per difficulty (Easy → Hard)."""
    grouped: dict[Difficulty, list[Problem]] = defaultdict(list)
    for problem in problems:
        grouped[problem.difficulty].append(problem)

    breakdown = []
    for difficulty in Difficulty:
        members = grouped.get(difficulty)
        if not members:
            continue
        breakdown.append(
            DifficultyBreakdown(
                difficulty=difficulty,
                count=len(members),
                average_confidence=_average(p.confidence_score for p in members) or 0.0,
            )
        )
    return breakdown


def _tag_distribution(
    problems: Sequence[Problem],
    tags_of: Callable[[Problem], Iterable[str]],
    limit: Optional[int] = None,
) -> list[TagCount]:
    members: dict[str, list[Problem]] = defaultdict(list)
    for problem in problems:
        for tag in dict.fromkeys(tags_of(problem)):
            members[tag].append(problem)

    counts = [
        TagCount(
            tag=tag,
            count=len(tagged),
            average_confidence=_average(p.confidence_score for p in tagged),
            average_revisions=fmean(p.revision_count for p in tagged),
        )
        for tag, tagged in members.items()
    ]
    counts.sort(key=lambda t: (-t.count, t.tag))
    return counts[:limit] if limit is not None else counts


def topic_distribution(
    problems: Sequence[Problem], limit: Optional[int] = None
) -> list[TagCount]:
    """
    Count problems per topic, most common first.

    Topics with equal counts are ordered alphabetically so the result does
    not depend on set iteration order.
    """
    return _tag_distribution(problems, lambda p: sorted(p.topics), limit)


def pattern_distribution(
    problems: Sequence[Problem], limit: Optional[int] = None
) -> list[TagCount]:
    """Count problems per solution pattern, most common first."""
    return _tag_distribution(problems, lambda p: p.patterns, limit)


def weak_areas(
    problems: Sequence[Problem],
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
) -> list[TagCount]:
    """Topics of problems whose confidence is below ``threshold``."""
    threshold = (
        threshold if threshold is not None else settings.REVISION_LOW_CONFIDENCE_THRESHOLD
    )
    limit = limit if limit is not None else settings.ANALYTICS_WEAK_AREAS
    weak = [
        p for p in problems if p.confidence_score is not None and p.confidence_score < threshold
    ]
    return topic_distribution(weak, limit=limit)


def confidence_distribution(problems: Sequence[Problem]) -> list[ConfidenceBucket]:
    """Bucket problems by confidence into [1,3), [3,5), [5,7), [7,9), [9,11)."""
    bounds = list(zip(CONFIDENCE_BUCKET_BOUNDARIES, CONFIDENCE_BUCKET_BOUNDARIES[1:]))
    titles: dict[int, list[str]] = defaultdict(list)

    for problem in problems:
        score = problem.confidence_score
        if score is None:
            continue
        for index, (lower, upper) in enumerate(bounds):
            if lower <= score < upper:
                titles[index].append(problem.title or problem.id)
                break

    return [
        ConfidenceBucket(
            lower=lower,
            upper=upper,
            count=len(titles[index]),
            problems=titles[index],
        )
        for index, (lower, upper) in enumerate(bounds)
    ]


def count_due_problems(
    problems: Sequence[Problem],
    now: datetime,
    min_age_days: Optional[int] = None,
    threshold: Optional[float] = None,
) -> int:
    """
    Count problems due for revision.

    A problem is due when it was last revised at least ``min_age_days`` ago
    or its confidence is below ``threshold``. Unlike the queue this count is
    not capped.
    """
    min_age = timedelta(
        days=min_age_days if min_age_days is not None else settings.REVISION_WEEKLY_MIN_DAYS
    )
    threshold = (
        threshold if threshold is not None else settings.REVISION_LOW_CONFIDENCE_THRESHOLD
    )
    cutoff = now - min_age

    due = 0
    for problem in problems:
        stale = problem.last_revised is not None and problem.last_revised <= cutoff
        weak = problem.confidence_score is not None and problem.confidence_score < threshold
        if stale or weak:
            due += 1
    return due


def most_revised(problems: Sequence[Problem], limit: int = 10) -> list[ProblemSummary]:
    ranked = sorted(problems, key=lambda p: p.revision_count, reverse=True)
    return [ProblemSummary.from_problem(p) for p in ranked[:limit]]


def least_confident(problems: Sequence[Problem], limit: int = 10) -> list[ProblemSummary]:
    scored = [p for p in problems if p.confidence_score is not None]
    ranked = sorted(scored, key=lambda p: p.confidence_score)
    return [ProblemSummary.from_problem(p) for p in ranked[:limit]]


# ===========================================
# Performance trends
# ===========================================


def daily_performance(sessions: Sequence[RevisionSession]) -> list[DailyPerformance]:
    """Per-day session aggregates (UTC days), oldest first."""
    by_day: dict[str, list[RevisionSession]] = defaultdict(list)
    for session in sessions:
        by_day[_session_day(session)].append(session)

    return [
        DailyPerformance(
            date=day,
            correct_sessions=sum(1 for s in by_day[day] if s.was_correct),
            **_performance_fields(by_day[day]),
        )
        for day in sorted(by_day)
    ]


def performance_by_difficulty(
    sessions: Sequence[RevisionSession], problems: Sequence[Problem]
) -> list[PerformanceBreakdown]:
    """
    Session aggregates grouped by the reviewed problem's difficulty (Easy → Hard).

    Sessions whose problem is not in ``problems`` are ignored.
    """
    difficulty_of = {p.id: p.difficulty for p in problems}
    grouped: dict[Difficulty, list[RevisionSession]] = defaultdict(list)
    for session in sessions:
        difficulty = difficulty_of.get(session.problem_id)
        if difficulty is not None:
            grouped[difficulty].append(session)

    return [
        PerformanceBreakdown(group=difficulty.value, **_performance_fields(grouped[difficulty]))
        for difficulty in Difficulty
        if grouped.get(difficulty)
    ]


def performance_by_topic(
    sessions: Sequence[RevisionSession],
    problems: Sequence[Problem],
    limit: Optional[int] = None,
) -> list[PerformanceBreakdown]:
    """Session aggregates per topic of the reviewed problem, most practised first."""
    limit = limit if limit is not None else settings.ANALYTICS_TOP_TOPICS
    topics_of = {p.id: p.topics for p in problems}
    grouped: dict[str, list[RevisionSession]] = defaultdict(list)
    for session in sessions:
        for topic in topics_of.get(session.problem_id, ()):
            grouped[topic].append(session)

    breakdown = [
        PerformanceBreakdown(group=topic, **_performance_fields(members))
        for topic, members in grouped.items()
    ]
    breakdown.sort(key=lambda b: (-b.session_count, b.group))
    return breakdown[:limit]


def improvement_trends(
    problems: Sequence[Problem],
    sessions: Sequence[RevisionSession],
    limit: int = 10,
) -> list[ProblemImprovement]:
    """
    Latest minus first performance score for every revised problem.

    Biggest improvement first; problems with no sessions on record sort last.
    """
    by_problem: dict[str, list[RevisionSession]] = defaultdict(list)
    for session in sessions:
        by_problem[session.problem_id].append(session)

    trends = []
    for problem in problems:
        if problem.revision_count <= 0:
            continue
        history = sorted(by_problem.get(problem.id, []), key=lambda s: s.created_at)
        improvement = (
            history[-1].performance_score - history[0].performance_score if history else None
        )
        trends.append(
            ProblemImprovement(
                problem=ProblemSummary.from_problem(problem),
                improvement=improvement,
            )
        )

    trends.sort(key=lambda t: (t.improvement is None, -(t.improvement or 0)))
    return trends[:limit]


# ===========================================
# Report assembly
# ===========================================


def build_stats(
    problems: Sequence[Problem],
    sessions: Sequence[RevisionSession],
    window_days: int,
) -> RevisionStats:
    """Revision statistics for sessions already limited to the last ``window_days``."""
    return RevisionStats(
        window_days=window_days,
        revision_stats=summarize_sessions(sessions),
        problem_stats=difficulty_breakdown(problems),
        topic_stats=topic_distribution(problems, limit=settings.ANALYTICS_TOP_TOPICS),
    )


def build_performance_report(
    problems: Sequence[Problem],
    sessions: Sequence[RevisionSession],
    window_days: int,
) -> PerformanceReport:
    """
    Performance trends for a window.

    Args:
        problems: All of the user's problems
        sessions: Sessions already limited to the last ``window_days``. Improvement
            trends compare the first and latest of these per problem.
        window_days: Window length, echoed in the report
    """
    return PerformanceReport(
        window_days=window_days,
        performance_trend=daily_performance(sessions),
        performance_by_difficulty=performance_by_difficulty(sessions, problems),
        performance_by_topic=performance_by_topic(sessions, problems),
        improvement_trends=improvement_trends(problems, sessions),
    )


def build_problem_analytics(problems: Sequence[Problem]) -> ProblemAnalytics:
    """Topic, pattern and confidence distributions plus the extremes."""
    return ProblemAnalytics(
        topic_distribution=topic_distribution(problems),
        pattern_distribution=pattern_distribution(problems),
        confidence_distribution=confidence_distribution(problems),
        most_revised=most_revised(problems),
        least_confident=least_confident(problems),
    )


def build_dashboard(
    problems: Sequence[Problem],
    sessions: Sequence[RevisionSession],
    now: datetime,
) -> DashboardSummary:
    """
    Assemble the dashboard overview.

    Args:
        problems: All of the user's problems
        sessions: The user's sessions. Those within settings.DASHBOARD_RECENT_DAYS
            of ``now`` count as recent activity; those within
            settings.STATS_WINDOW_DAYS make up the monthly progress.
        now: Reference instant
    """
    recent_cutoff = now - timedelta(days=settings.DASHBOARD_RECENT_DAYS)
    monthly_cutoff = now - timedelta(days=settings.STATS_WINDOW_DAYS)
    recent = [s for s in sessions if s.created_at >= recent_cutoff]
    monthly = [s for s in sessions if s.created_at >= monthly_cutoff]

    return DashboardSummary(
        total_problems=len(problems),
        problems_due_for_revision=count_due_problems(problems, now),
        recent_activity=summarize_sessions(recent),
        difficulty_stats=difficulty_breakdown(problems),
        weak_areas=weak_areas(problems),
        confidence_distribution=confidence_distribution(problems),
        most_revised=most_revised(problems),
        least_confident=least_confident(problems),
        monthly_progress=daily_performance(monthly),
    )
