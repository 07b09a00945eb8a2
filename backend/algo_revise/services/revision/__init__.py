"""
Revision System Services

The revision scheduling and confidence-update engine, plus the service
layer that connects it to storage.

Modules:
- queue_builder: Rule-based revision queue (RevisionQueueBuilder)
- confidence: Confidence updates after reviews (ConfidenceUpdater)
- repository: Storage protocol and in-memory implementation
- revision_service: Async orchestration (RevisionService)
- analytics: Statistics, performance trends and dashboard aggregation
- recommendations: Study plans and interview preparation
- similarity: Similar problem matching

Usage:
    from algo_revise.services.revision import (
        RevisionQueueBuilder,
        ConfidenceUpdater,
        RevisionService,
    )
"""

from algo_revise.services.revision.confidence import (
    ConfidenceUpdater,
    clamp_confidence,
    complete_revision,
    validate_outcome,
)
from algo_revise.services.revision.queue_builder import (
    EligibilityRule,
    RevisionQueueBuilder,
    build_default_rules,
    build_queue,
)
from algo_revise.services.revision.repository import (
    InMemoryProblemRepository,
    ProblemRepository,
)
from algo_revise.services.revision.recommendations import (
    build_interview_plan,
    build_study_recommendations,
)
from algo_revise.services.revision.revision_service import RevisionService
from algo_revise.services.revision.similarity import find_similar_problems

__all__ = [
    # Core
    "RevisionQueueBuilder",
    "EligibilityRule",
    "build_default_rules",
    "build_queue",
    "ConfidenceUpdater",
    "clamp_confidence",
    "complete_revision",
    "validate_outcome",
    # Storage
    "ProblemRepository",
    "InMemoryProblemRepository",
    # Services
    "RevisionService",
    "find_similar_problems",
    "build_study_recommendations",
    "build_interview_plan",
]
