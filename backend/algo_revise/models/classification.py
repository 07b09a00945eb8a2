"""
Classification Models (Pydantic)

Result schema shared by every ProblemClassifier implementation.
"""

from pydantic import Field

from algo_revise.enums.revision import ClassifierSource, Difficulty
from algo_revise.models.base import StrictResponse


class ClassificationResult(StrictResponse):
    """
    Topics, patterns and complexity estimates inferred from solution code.

    Produced by the keyword heuristic or an LLM. Callers typically copy
    ``topics``, ``patterns``, ``difficulty`` and the complexity estimates onto
    a new Problem record.
    """

    difficulty: Difficulty = Difficulty.MEDIUM
    topics: list[str] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)
    time_complexity: str = "O(?)"
    space_complexity: str = "O(?)"
    optimization_suggestions: list[str] = Field(default_factory=list)
    concepts_used: list[str] = Field(default_factory=list)
    similar_problems: list[str] = Field(default_factory=list)
    source: ClassifierSource = ClassifierSource.KEYWORD
