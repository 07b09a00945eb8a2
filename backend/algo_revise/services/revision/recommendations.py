"""
Study Recommendations

Turns a problem snapshot into study advice:
- Weak topics and patterns (average confidence below the low-confidence
  threshold), weakest first, each with a few problems to redo
- Confident problems that have not been revised for a week
- Interview preparation: coverage of the interview-critical topics,
  strengths, weaknesses, missing topics and a readiness score

Like the analytics helpers these are pure functions of the snapshot and
``now``.

Usage:
    from algo_revise.services.revision.recommendations import build_interview_plan

    plan = build_interview_plan(problems, now=now)
    print(plan.readiness_score, plan.missing_topics)
"""

import math
from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timedelta
from statistics import fmean
from typing import Optional

from algo_revise.config.settings import get_interview_topics, settings
from algo_revise.models.recommendation import (
    FocusArea,
    InterviewPlan,
    StaleProblem,
    StudyRecommendations,
    TopicReadiness,
)
from algo_revise.models.revision import Problem, ProblemSummary
from algo_revise.services.revision.analytics import difficulty_breakdown

RECOMMENDED_PROBLEMS_PER_AREA = 3

GENERAL_INTERVIEW_ADVICE = (
    "Practice problems of varying difficulties",
    "Focus on explaining your thought process",
    "Time yourself while solving problems",
)


def _round1(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def _group_by_tag(
    problems: Iterable[Problem], tags_of: Callable[[Problem], Iterable[str]]
) -> dict[str, list[Problem]]:
    grouped: dict[str, list[Problem]] = defaultdict(list)
    for problem in problems:
        if problem.confidence_score is None:
            continue
        for tag in dict.fromkeys(tags_of(problem)):
            grouped[tag].append(problem)
    return grouped


def focus_areas(
    problems: Sequence[Problem],
    tags_of: Callable[[Problem], Iterable[str]],
    threshold: Optional[float] = None,
    limit: Optional[int] = None,
) -> list[FocusArea]:
    """
    Tags whose problems average below ``threshold`` confidence, weakest first.

    Args:
        problems: The user's problems
        tags_of: Extracts the tags to group by (topics or patterns)
        threshold: Average confidence cut-off
            (defaults to settings.REVISION_LOW_CONFIDENCE_THRESHOLD)
        limit: Maximum areas (defaults to settings.STUDY_FOCUS_AREAS)
    """
    threshold = (
        threshold if threshold is not None else settings.REVISION_LOW_CONFIDENCE_THRESHOLD
    )
    limit = limit if limit is not None else settings.STUDY_FOCUS_AREAS

    areas = []
    for tag, members in _group_by_tag(problems, tags_of).items():
        average = fmean(p.confidence_score for p in members)
        if average >= threshold:
            continue
        areas.append((average, tag, members))

    areas.sort(key=lambda area: (area[0], area[1]))
    return [
        FocusArea(
            tag=tag,
            average_confidence=_round1(average),
            problem_count=len(members),
            recommended_problems=[
                ProblemSummary.from_problem(p)
                for p in members[:RECOMMENDED_PROBLEMS_PER_AREA]
            ],
        )
        for average, tag, members in areas[:limit]
    ]


def stale_problems(
    problems: Sequence[Problem],
    now: datetime,
    min_age_days: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[StaleProblem]:
    """
    Confident problems not revised for ``min_age_days``, longest-neglected first.

    Only problems at or above the low-confidence threshold are included; the
    weak ones are already covered by the focus areas.
    """
    min_age = timedelta(
        days=min_age_days if min_age_days is not None else settings.REVISION_WEEKLY_MIN_DAYS
    )
    limit = limit if limit is not None else settings.STUDY_STALE_PROBLEMS
    cutoff = now - min_age

    stale = [
        p
        for p in problems
        if p.last_revised is not None
        and p.last_revised <= cutoff
        and p.confidence_score is not None
        and p.confidence_score >= settings.REVISION_LOW_CONFIDENCE_THRESHOLD
    ]
    stale.sort(key=lambda p: p.last_revised)

    return [
        StaleProblem(
            problem=ProblemSummary.from_problem(p),
            days_since_revision=(now - p.last_revised).days,
        )
        for p in stale[:limit]
    ]


def build_study_recommendations(
    problems: Sequence[Problem], now: datetime
) -> StudyRecommendations:
    """Weak topics, weak patterns and stale problems for one user."""
    return StudyRecommendations(
        focus_areas=focus_areas(problems, lambda p: sorted(p.topics)),
        pattern_practice=focus_areas(problems, lambda p: p.patterns),
        review_problems=stale_problems(problems, now),
        generated_at=now,
    )


def build_interview_plan(
    problems: Sequence[Problem],
    now: datetime,
    interview_topics: Optional[Iterable[str]] = None,
) -> InterviewPlan:
    """
    Interview readiness over the interview-critical topics.

    Args:
        problems: The user's problems
        now: Timestamp for the plan
        interview_topics: Override for the topic set
            (defaults to get_interview_topics())

    Returns:
        InterviewPlan where strengths average at least
        settings.INTERVIEW_STRONG_CONFIDENCE, weaknesses average below it
        (weakest first, 'high' priority under
        settings.INTERVIEW_WEAK_CONFIDENCE) and missing topics are sorted
        alphabetically
    """
    topics = (
        frozenset(interview_topics)
        if interview_topics is not None
        else get_interview_topics()
    )
    relevant = [p for p in problems if not topics.isdisjoint(p.topics)]
    coverage = _group_by_tag(relevant, lambda p: sorted(p.topics & topics))
    averages = {
        topic: fmean(p.confidence_score for p in members)
        for topic, members in coverage.items()
    }

    missing = sorted(topics - averages.keys())
    mean_confidence = fmean(averages.values()) if averages else 0.0
    readiness = _round1(len(averages) / len(topics) * mean_confidence) if topics else 0.0

    strengths = [
        TopicReadiness(
            topic=topic,
            confidence=_round1(average),
            problem_count=len(coverage[topic]),
        )
        for topic, average in sorted(averages.items())
        if average >= settings.INTERVIEW_STRONG_CONFIDENCE
    ]
    weak = sorted(
        (
            (average, topic)
            for topic, average in averages.items()
            if average < settings.INTERVIEW_STRONG_CONFIDENCE
        ),
    )
    weaknesses = [
        TopicReadiness(
            topic=topic,
            confidence=_round1(average),
            problem_count=len(coverage[topic]),
            priority="high" if average < settings.INTERVIEW_WEAK_CONFIDENCE else "medium",
        )
        for average, topic in weak
    ]

    recommendations = []
    if missing:
        recommendations.append(f"Focus on missing topics: {', '.join(missing)}")
    if weaknesses:
        recommendations.append(
            f"Strengthen weak areas: {', '.join(w.topic for w in weaknesses[:3])}"
        )
    recommendations.extend(GENERAL_INTERVIEW_ADVICE)

    return InterviewPlan(
        readiness_score=readiness,
        strengths=strengths,
        weaknesses=weaknesses,
        missing_topics=missing,
        difficulty_balance=difficulty_breakdown(relevant),
        recommendations=recommendations,
        generated_at=now,
    )
