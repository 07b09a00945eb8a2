"""
Problem Classification Services

Pluggable classifiers that infer topics, patterns and difficulty from
solution code.

Modules:
- base: ProblemClassifier protocol
- keyword: Deterministic keyword heuristic
- llm_classifier: LiteLLM-backed classifier with optional fallback
"""

from algo_revise.services.classification.base import ProblemClassifier
from algo_revise.services.classification.keyword import KeywordClassifier
from algo_revise.services.classification.llm_classifier import (
    LLMClassifier,
    parse_classification,
)

__all__ = [
    "ProblemClassifier",
    "KeywordClassifier",
    "LLMClassifier",
    "parse_classification",
]
