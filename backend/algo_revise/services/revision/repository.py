"""
Problem Repository

Storage boundary for the revision service. The revision core never talks to
storage; RevisionService loads snapshots and persists results through a
ProblemRepository.

Any backend (SQL, document store, HTTP API) can be plugged in by providing
the async methods of the ProblemRepository protocol. Implementations are
expected to succeed or raise; the service does not retry.

InMemoryProblemRepository is a reference implementation used by tests,
scripts and local experiments.

Usage:
    from algo_revise.services.revision import InMemoryProblemRepository

    repo = InMemoryProblemRepository()
    await repo.save_problem(problem)
    problems = await repo.fetch_problems_for_user("user-1")
"""

import logging
from datetime import datetime
from typing import Optional, Protocol, runtime_checkable

from algo_revise.models.revision import Problem, RevisionSession

logger = logging.getLogger(__name__)


@runtime_checkable
class ProblemRepository(Protocol):
    """Async persistence operations consumed by RevisionService."""

    async def fetch_problems_for_user(self, user_id: str) -> list[Problem]:
        """All problems belonging to ``user_id``, current as of the call."""
        ...

    async def get_problem(self, user_id: str, problem_id: str) -> Optional[Problem]:
        """A single problem if it exists and belongs to ``user_id``."""
        ...

    async def save_problem(self, problem: Problem) -> None:
        ...

    async def save_session(self, session: RevisionSession) -> None:
        ...

    async def list_sessions(
        self,
        user_id: str,
        problem_id: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> list[RevisionSession]:
        """Sessions for a user, optionally limited to one problem or a start time."""
        ...


class InMemoryProblemRepository:
    """
    Dict-backed ProblemRepository.

    Problems keep insertion order (re-saving an existing id keeps its
    position), so snapshots are returned in a stable order.
    """

    def __init__(
        self,
        problems: Optional[list[Problem]] = None,
        sessions: Optional[list[RevisionSession]] = None,
    ):
        self._problems: dict[str, Problem] = {}
        self._sessions: list[RevisionSession] = []
        for problem in problems or []:
            self._problems[problem.id] = problem
        self._sessions.extend(sessions or [])

    async def fetch_problems_for_user(self, user_id: str) -> list[Problem]:
        return [p for p in self._problems.values() if p.user_id == user_id]

    async def get_problem(self, user_id: str, problem_id: str) -> Optional[Problem]:
        problem = self._problems.get(problem_id)
        if problem is None or problem.user_id != user_id:
            return None
        return problem

    async def save_problem(self, problem: Problem) -> None:
        self._problems[problem.id] = problem
        logger.debug(f"Saved problem {problem.id}")

    async def save_session(self, session: RevisionSession) -> None:
        self._sessions.append(session)
        logger.debug(f"Saved session {session.id} for problem {session.problem_id}")

    async def list_sessions(
        self,
        user_id: str,
        problem_id: Optional[str] = None,
        since: Optional[datetime] = None,
    ) -> list[RevisionSession]:
        sessions = [s for s in self._sessions if s.user_id == user_id]
        if problem_id is not None:
            sessions = [s for s in sessions if s.problem_id == problem_id]
        if since is not None:
            sessions = [s for s in sessions if s.created_at >= since]
        return sessions
