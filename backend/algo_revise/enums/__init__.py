"""
Centralized enum definitions for the application.

Usage:
    from algo_revise.enums import Difficulty, RevisionReason
"""

from algo_revise.enums.revision import (
    ClassifierSource,
    Difficulty,
    RevisionReason,
)

__all__ = [
    "ClassifierSource",
    "Difficulty",
    "RevisionReason",
]
