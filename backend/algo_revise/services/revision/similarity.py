"""
Similar Problem Matching

Finds problems that share patterns or topics with a given problem.

Score:
    (shared_patterns * 2 + shared_topics) / (len(patterns) + len(topics))

Patterns are weighted double because two problems solved with the same
technique are closer than two problems on the same data structure.
"""

from collections.abc import Iterable
from typing import Optional

from algo_revise.config.settings import settings
from algo_revise.models.revision import Problem, ProblemSummary, SimilarProblem


def similarity_score(problem: Problem, other: Problem) -> float:
    """Overlap score of ``other`` relative to ``problem``, rounded to 2 decimals."""
    denominator = len(problem.patterns) + len(problem.topics)
    if denominator == 0:
        return 0.0

    other_patterns = set(other.patterns)
    pattern_matches = sum(1 for pattern in problem.patterns if pattern in other_patterns)
    topic_matches = len(problem.topics & other.topics)

    return round((pattern_matches * 2 + topic_matches) / denominator, 2)


def find_similar_problems(
    problem: Problem,
    candidates: Iterable[Problem],
    limit: Optional[int] = None,
) -> list[SimilarProblem]:
    """
    Rank candidates that share at least one pattern or topic with ``problem``.

    Args:
        problem: Reference problem (excluded from the results)
        candidates: Problems to compare against, typically the same user's
        limit: Maximum results (defaults to settings.SIMILAR_PROBLEMS_LIMIT)

    Returns:
        Matches sorted by similarity score, highest first
    """
    limit = limit if limit is not None else settings.SIMILAR_PROBLEMS_LIMIT
    patterns = set(problem.patterns)

    matches = []
    for candidate in candidates:
        if candidate.id == problem.id:
            continue
        if patterns.isdisjoint(candidate.patterns) and problem.topics.isdisjoint(candidate.topics):
            continue
        matches.append(
            SimilarProblem(
                problem=ProblemSummary.from_problem(candidate),
                similarity_score=similarity_score(problem, candidate),
            )
        )

    matches.sort(key=lambda m: m.similarity_score, reverse=True)
    return matches[:limit]
