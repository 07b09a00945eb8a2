"""
Confidence Updater

Computes a problem's new confidence score and revision bookkeeping after a
completed review.

Update rule:
    delta_raw = (performance_score - 5) * 0.5
    delta     = min(+2, delta_raw)  if was_correct
                max(-2, delta_raw)  otherwise
    new       = clamp(confidence + delta, 1, 10)

The asymmetry is intentional: a correct attempt can still lower confidence
when the performance score is below neutral, and an incorrect attempt can
raise it when the score is above neutral. Only the gain (when correct) and
the loss (when incorrect) are capped.

Usage:
    from algo_revise.services.revision import ConfidenceUpdater

    updater = ConfidenceUpdater()
    updated_problem, session = updater.complete_revision(
        problem,
        SessionOutcome(performance_score=8, time_taken=20,
                       was_correct=True, difficulty_rating=6),
        now=datetime.now(timezone.utc),
    )
"""

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional, Union

from algo_revise.config.settings import settings
from algo_revise.errors import MissingFieldError, RangeError, ValidationError
from algo_revise.models.revision import Problem, RevisionSession, SessionOutcome

_REQUIRED_OUTCOME_FIELDS = (
    "performance_score",
    "time_taken",
    "was_correct",
    "difficulty_rating",
)
_SCORE_MIN, _SCORE_MAX = 1, 10


def clamp_confidence(value: float) -> float:
    """Clamp a confidence value to [CONFIDENCE_MIN, CONFIDENCE_MAX]."""
    return max(settings.CONFIDENCE_MIN, min(settings.CONFIDENCE_MAX, value))


def validate_outcome(outcome: SessionOutcome) -> None:
    """
    Check that a review outcome is complete and in range.

    Raises:
        MissingFieldError: One or more required fields are absent (all are
            reported together)
        RangeError: performance_score or difficulty_rating outside [1, 10],
            or time_taken not a positive finite number
    """
    missing = [
        name for name in _REQUIRED_OUTCOME_FIELDS if getattr(outcome, name) is None
    ]
    if missing:
        raise MissingFieldError(missing)

    for name in ("performance_score", "difficulty_rating"):
        value = getattr(outcome, name)
        if not _SCORE_MIN <= value <= _SCORE_MAX:
            raise RangeError(name, value, _SCORE_MIN, _SCORE_MAX)

    if not math.isfinite(outcome.time_taken) or outcome.time_taken <= 0:
        raise RangeError("time_taken", outcome.time_taken, 0)


class ConfidenceUpdater:
    """
    Applies review outcomes to problems.

    Pure with respect to its inputs: the given problem is never modified.
    An updated copy is returned together with the new session, or an error
    is raised and nothing is produced.

    Attributes:
        neutral_score: Performance score that yields a zero delta
        step: Confidence change per point away from neutral
        max_delta: Cap on the gain when correct and the loss when incorrect
    """

    def __init__(
        self,
        neutral_score: Optional[int] = None,
        step: Optional[float] = None,
        max_delta: Optional[float] = None,
    ):
        self.neutral_score = (
            neutral_score if neutral_score is not None else settings.CONFIDENCE_NEUTRAL_SCORE
        )
        self.step = step if step is not None else settings.CONFIDENCE_STEP
        self.max_delta = max_delta if max_delta is not None else settings.CONFIDENCE_MAX_DELTA

    def compute_delta(self, performance_score: int, was_correct: bool) -> float:
        """
        Confidence change for one review.

        Args:
            performance_score: Self-reported quality (1-10)
            was_correct: Whether the solution was correct

        Returns:
            Signed change, at most +max_delta when correct and at least
            -max_delta when incorrect
        """
        delta_raw = (performance_score - self.neutral_score) * self.step
        if was_correct:
            return min(self.max_delta, delta_raw)
        return max(-self.max_delta, delta_raw)

    def complete_revision(
        self,
        problem: Problem,
        outcome: Union[SessionOutcome, Mapping[str, Any]],
        now: datetime,
    ) -> tuple[Problem, RevisionSession]:
        """
        Apply a completed review to a problem.

        Args:
            problem: Current problem state (left untouched)
            outcome: Review result; a mapping is validated into SessionOutcome
            now: Timestamp for the session and the new last_revised

        Returns:
            Tuple containing:
                - Problem: Copy with updated confidence_score, revision_count
                  incremented by one and last_revised set to ``now``
                - RevisionSession: Immutable session stamped with ``now``

        Raises:
            MissingFieldError: Required outcome fields are absent
            RangeError: Outcome scores out of range
            ValidationError: The problem has no confidence_score
        """
        if isinstance(outcome, Mapping):
            outcome = SessionOutcome.model_validate(outcome)

        validate_outcome(outcome)
        if problem.confidence_score is None:
            raise ValidationError(
                f"Problem {problem.id} is missing required fields: confidence_score",
                details={"problem_id": problem.id, "fields": ["confidence_score"]},
            )

        delta = self.compute_delta(outcome.performance_score, outcome.was_correct)
        new_confidence = clamp_confidence(problem.confidence_score + delta)

        session = RevisionSession(
            problem_id=problem.id,
            user_id=problem.user_id,
            performance_score=outcome.performance_score,
            time_taken=outcome.time_taken,
            was_correct=outcome.was_correct,
            difficulty_rating=outcome.difficulty_rating,
            notes=outcome.notes or "",
            created_at=now,
        )

        updated = problem.model_copy(
            update={
                "confidence_score": new_confidence,
                "revision_count": problem.revision_count + 1,
                "last_revised": now,
            },
            deep=True,
        )

        return updated, session


def complete_revision(
    problem: Problem,
    outcome: Union[SessionOutcome, Mapping[str, Any]],
    now: datetime,
) -> tuple[Problem, RevisionSession]:
    """Apply a review outcome with the default update parameters."""
    return ConfidenceUpdater().complete_revision(problem, outcome, now)
