"""
Problem Classifier Interface

A ProblemClassifier infers topics, patterns, difficulty and complexity
estimates from solution code. The revision core does not depend on any
classifier; callers use one when creating problems.
"""

from typing import Protocol, runtime_checkable

from algo_revise.models.classification import ClassificationResult


@runtime_checkable
class ProblemClassifier(Protocol):
    """Capability interface implemented by KeywordClassifier and LLMClassifier."""

    def classify(self, code: str) -> ClassificationResult:
        ...

    async def aclassify(self, code: str) -> ClassificationResult:
        """Async variant for callers running inside an event loop."""
        ...
