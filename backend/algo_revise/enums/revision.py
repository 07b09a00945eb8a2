"""
Revision System Enums

Defines enums for problem difficulty, revision queue reasons and
classifier sources.
"""

from enum import Enum


class Difficulty(str, Enum):
    """Problem difficulty as labelled on the judge site."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class RevisionReason(str, Enum):
    """
    Why a problem was placed in the revision queue.

    Declaration order matches the default rule evaluation order:
    - WEEKLY: last revised between one and two weeks ago
    - BIWEEKLY: last revised two or more weeks ago
    - LOW_CONFIDENCE: confidence score below threshold
    - INTERVIEW_TOPIC: interview-critical topic not revised for a week
    """

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    LOW_CONFIDENCE = "low_confidence"
    INTERVIEW_TOPIC = "interview_topic"


class ClassifierSource(str, Enum):
    """Which classifier produced a classification result."""

    KEYWORD = "keyword"  # Deterministic keyword heuristic
    LLM = "llm"  # External LLM call
