"""
Revision Queue Builder

Selects the problems a user should revise next and ranks them.

Four eligibility rules are evaluated in a fixed order over the same read-only
snapshot. Each rule keeps at most ``cap`` matches (in snapshot order), tags
them with its priority, reason and due date, and the results are merged:

    weekly (3) → biweekly (2) → low_confidence (4) → interview_topic (5)

A problem matching several rules keeps only its first tagging in that order.
The merged list is stable-sorted by priority (highest first) and truncated to
``settings.REVISION_QUEUE_LIMIT`` items.

Usage:
    from algo_revise.services.revision import RevisionQueueBuilder

    builder = RevisionQueueBuilder()
    queue = builder.build_queue(problems, now=datetime.now(timezone.utc))

    for item in queue:
        print(item.priority, item.reason.value, item.problem.title)
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from algo_revise.config.settings import get_interview_topics, settings
from algo_revise.enums.revision import RevisionReason
from algo_revise.errors import ValidationError
from algo_revise.models.revision import Problem, RevisionQueueItem

logger = logging.getLogger(__name__)

Predicate = Callable[[Problem, datetime], bool]
DueDateFn = Callable[[Problem, datetime], datetime]

_REQUIRED_FIELDS = ("last_revised", "confidence_score")


@dataclass(frozen=True)
class EligibilityRule:
    """
    One way a problem can become due for revision.

    Attributes:
        reason: Tag attached to queue items produced by this rule
        priority: Urgency of those items (higher = more urgent)
        cap: Maximum number of problems this rule contributes
        predicate: ``(problem, now) -> bool`` eligibility test
        due_date: ``(problem, now) -> datetime`` nominal due date
    """

    reason: RevisionReason
    priority: int
    cap: int
    predicate: Predicate
    due_date: DueDateFn

    def select(self, problems: Sequence[Problem], now: datetime) -> list[RevisionQueueItem]:
        """Return up to ``cap`` queue items for matching problems, in snapshot order."""
        items: list[RevisionQueueItem] = []
        if self.cap <= 0:
            return items

        for problem in problems:
            if not self.predicate(problem, now):
                continue
            items.append(
                RevisionQueueItem(
                    problem=problem,
                    priority=self.priority,
                    reason=self.reason,
                    due_date=self.due_date(problem, now),
                )
            )
            if len(items) >= self.cap:
                break

        return items


# ===========================================
# Predicate / due date factories
# ===========================================


def revised_between(min_age: timedelta, max_age: timedelta) -> Predicate:
    """Last revised no more recently than ``min_age`` and no earlier than ``max_age`` ago."""

    def predicate(problem: Problem, now: datetime) -> bool:
        return now - max_age <= problem.last_revised <= now - min_age

    return predicate


def revised_before(min_age: timedelta) -> Predicate:
    """Last revised at least ``min_age`` ago."""

    def predicate(problem: Problem, now: datetime) -> bool:
        return problem.last_revised <= now - min_age

    return predicate


def confidence_below(threshold: float) -> Predicate:
    """Confidence strictly below ``threshold``."""

    def predicate(problem: Problem, now: datetime) -> bool:
        return problem.confidence_score < threshold

    return predicate


def topic_stale(topics: frozenset[str], min_age: timedelta) -> Predicate:
    """Tagged with any of ``topics`` and last revised at least ``min_age`` ago."""
    stale = revised_before(min_age)

    def predicate(problem: Problem, now: datetime) -> bool:
        return not topics.isdisjoint(problem.topics) and stale(problem, now)

    return predicate


def due_after(interval: timedelta) -> DueDateFn:
    """Due ``interval`` after the last revision."""

    def due_date(problem: Problem, now: datetime) -> datetime:
        return problem.last_revised + interval

    return due_date


def due_now(problem: Problem, now: datetime) -> datetime:
    return now


def build_default_rules(
    interview_topics: Optional[Iterable[str]] = None,
) -> tuple[EligibilityRule, ...]:
    """
    Build the default ordered rule list from settings.

    Order matters: when a problem matches several rules, the earliest rule's
    tagging is kept.

    Args:
        interview_topics: Override for the interview-critical topic set
            (defaults to get_interview_topics())

    Returns:
        Rules in evaluation order: weekly, biweekly, low_confidence,
        interview_topic
    """
    topics = (
        frozenset(interview_topics)
        if interview_topics is not None
        else get_interview_topics()
    )
    one_week = timedelta(days=settings.REVISION_WEEKLY_MIN_DAYS)
    two_weeks = timedelta(days=settings.REVISION_WEEKLY_MAX_DAYS)

    return (
        EligibilityRule(
            reason=RevisionReason.WEEKLY,
            priority=3,
            cap=settings.REVISION_WEEKLY_CAP,
            predicate=revised_between(one_week, two_weeks),
            due_date=due_after(one_week),
        ),
        EligibilityRule(
            reason=RevisionReason.BIWEEKLY,
            priority=2,
            cap=settings.REVISION_BIWEEKLY_CAP,
            predicate=revised_before(two_weeks),
            due_date=due_after(two_weeks),
        ),
        EligibilityRule(
            reason=RevisionReason.LOW_CONFIDENCE,
            priority=4,
            cap=settings.REVISION_LOW_CONFIDENCE_CAP,
            predicate=confidence_below(settings.REVISION_LOW_CONFIDENCE_THRESHOLD),
            due_date=due_now,
        ),
        EligibilityRule(
            reason=RevisionReason.INTERVIEW_TOPIC,
            priority=5,
            cap=settings.REVISION_INTERVIEW_CAP,
            predicate=topic_stale(topics, one_week),
            due_date=due_after(timedelta(days=settings.REVISION_INTERVIEW_DUE_DAYS)),
        ),
    )


def validate_snapshot(problems: Sequence[Problem], now: datetime) -> None:
    """
    Check every problem carries the fields the rules read.

    Raises:
        ValidationError: If ``now`` is not a datetime, a problem lacks
            last_revised or confidence_score, or a problem's last_revised
            mixes naive and timezone-aware time with ``now``
    """
    if not isinstance(now, datetime):
        raise ValidationError(
            f"now must be a datetime, got {type(now).__name__}",
            details={"field": "now"},
        )

    now_aware = now.tzinfo is not None
    for problem in problems:
        missing = [name for name in _REQUIRED_FIELDS if getattr(problem, name, None) is None]
        if missing:
            raise ValidationError(
                f"Problem {problem.id} is missing required fields: {', '.join(missing)}",
                details={"problem_id": problem.id, "fields": missing},
            )
        if (problem.last_revised.tzinfo is not None) != now_aware:
            raise ValidationError(
                f"Problem {problem.id} last_revised timezone does not match now",
                details={"problem_id": problem.id, "field": "last_revised"},
            )


class RevisionQueueBuilder:
    """
    Builds the ranked revision queue from a problem snapshot.

    Stateless between calls: the same snapshot and ``now`` always produce the
    same queue, and no problem is ever modified.

    Attributes:
        rules: Eligibility rules in evaluation (and dedup tie-break) order
        max_items: Maximum queue length
    """

    def __init__(
        self,
        rules: Optional[Sequence[EligibilityRule]] = None,
        max_items: Optional[int] = None,
    ):
        """
        Initialize the queue builder.

        Args:
            rules: Ordered rules (defaults to build_default_rules())
            max_items: Queue length limit
                (defaults to settings.REVISION_QUEUE_LIMIT)
        """
        self.rules = tuple(rules) if rules is not None else build_default_rules()
        self.max_items = (
            max_items if max_items is not None else settings.REVISION_QUEUE_LIMIT
        )

    def build_queue(
        self, problems: Iterable[Problem], now: datetime
    ) -> list[RevisionQueueItem]:
        """
        Produce the deduplicated, priority-ordered revision queue.

        Args:
            problems: Read-only snapshot, typically all of one user's problems.
                Iteration order decides which matches fill each rule's cap.
            now: Reference instant; never read from a global clock here

        Returns:
            At most ``max_items`` queue items, priority descending. Empty when
            nothing is eligible.

        Raises:
            ValidationError: If any problem is malformed (see validate_snapshot)
        """
        snapshot = list(problems)
        validate_snapshot(snapshot, now)

        candidates: list[RevisionQueueItem] = []
        for rule in self.rules:
            candidates.extend(rule.select(snapshot, now))

        unique = self._deduplicate(candidates)
        # list.sort is stable, so equal priorities keep merge order
        unique.sort(key=lambda item: item.priority, reverse=True)
        queue = unique[: self.max_items]

        logger.debug(
            f"Built revision queue: {len(snapshot)} problems, "
            f"{len(candidates)} candidates, {len(unique)} unique, {len(queue)} returned"
        )

        return queue

    @staticmethod
    def _deduplicate(items: list[RevisionQueueItem]) -> list[RevisionQueueItem]:
        """Keep the first item for each problem id."""
        seen: set[str] = set()
        unique: list[RevisionQueueItem] = []
        for item in items:
            if item.problem.id in seen:
                continue
            seen.add(item.problem.id)
            unique.append(item)
        return unique


def build_queue(problems: Iterable[Problem], now: datetime) -> list[RevisionQueueItem]:
    """Build the revision queue with the default rules and limit."""
    return RevisionQueueBuilder().build_queue(problems, now)
