"""
Algo Revise

Spaced, confidence-weighted revision of previously solved coding problems.

Usage:
    from algo_revise.services.revision import RevisionQueueBuilder, ConfidenceUpdater
"""

__version__ = "0.1.0"
