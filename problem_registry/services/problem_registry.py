"""
Problem Registry Service - owns the problem collection and every operation on it.

This service handles:
- Listing and filtering problems
- Reporting, updating and deleting problems
- Upvotes and status transitions
- Aggregate statistics
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, List, Optional

from problem_registry.models.base import utc_now
from problem_registry.models.problem import (
    CategoryCounts,
    Problem,
    ProblemCategory,
    ProblemCreateRequest,
    ProblemStats,
    ProblemStatus,
    ProblemUpdateRequest,
)
from problem_registry.repositories.base import BaseRepository
from problem_registry.repositories.problem import InMemoryProblemRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category", "location")
TOP_UPVOTED_LIMIT = 5

MISSING_FIELDS_MESSAGE = "Please provide all required fields"
INVALID_STATUS_MESSAGE = "Invalid status. Must be: open, in-progress, or resolved"
INVALID_FIELD_MESSAGE = "Fields must be text: {fields}"


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class ProblemRegistryError(Exception):
    """Base error for registry operations."""


class ProblemNotFoundError(ProblemRegistryError):
    """Raised when the referenced problem id does not exist."""

    def __init__(self, problem_id: int):
        self.problem_id = problem_id
        super().__init__(f"Problem {problem_id} not found")


class InvalidProblemError(ProblemRegistryError):
    """Raised when input fails validation. No mutation has been performed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ProblemRegistry:
    """
    Registry of problem reports.

    Every operation runs under a single lock, so operations are linearizable
    even when the HTTP layer serves requests from a thread pool. Stored
    records are immutable; each mutation stores a new version.
    """

    def __init__(
        self,
        repository: Optional[BaseRepository[Problem]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the registry.

        Args:
            repository: Storage for problems. Defaults to an empty in-memory store.
            clock: Returns the current time as an aware datetime
        """
        self.repository = repository if repository is not None else InMemoryProblemRepository()
        self._clock = clock
        self._lock = threading.RLock()

    def list_problems(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Problem]:
        """
        List problems in storage order, optionally filtered.

        Args:
            status: Only problems with exactly this status
            category: Only problems with exactly this category

        Returns:
            Matching problems (possibly empty)
        """
        with self._lock:
            problems = self.repository.list()

        if status:
            problems = [p for p in problems if p.status.value == status]
        if category:
            problems = [p for p in problems if p.category == category]
        return problems

    def get_problem(self, problem_id: int) -> Problem:
        with self._lock:
            return self._require(problem_id)

    def create_problem(self, request: ProblemCreateRequest) -> Problem:
        """
        Report a new problem.

        Raises:
            InvalidProblemError: If any required field is missing, empty or not text
        """
        missing = [name for name in REQUIRED_FIELDS if not _is_text(getattr(request, name))]
        if missing:
            logger.debug(f"Rejected problem report, missing fields: {', '.join(missing)}")
            raise InvalidProblemError(MISSING_FIELDS_MESSAGE)

        with self._lock:
            now = self._clock()
            problem = Problem(
                id=self.repository.next_id(),
                title=request.title,
                description=request.description,
                category=request.category,
                location=request.location,
                upvotes=0,
                status=ProblemStatus.OPEN,
                created_at=now,
                updated_at=now,
            )
            self.repository.add(problem)

        logger.info(f"Problem #{problem.id} reported: {problem.title!r} ({problem.category})")
        return problem

    def update_problem(self, problem_id: int, request: ProblemUpdateRequest) -> Problem:
        """
        Apply the fields present in the request to a problem.

        Raises:
            ProblemNotFoundError: If the problem does not exist
            InvalidProblemError: If a supplied text field is not a string or the status is invalid
        """
        changes = request.supplied_fields()

        with self._lock:
            problem = self._require(problem_id)

            not_text = [name for name, value in changes.items() if name != "status" and not _is_text(value)]
            if not_text:
                raise InvalidProblemError(INVALID_FIELD_MESSAGE.format(fields=", ".join(not_text)))
            if "status" in changes:
                changes["status"] = self._parse_status(changes["status"])

            updated = self._touch(problem, **changes)

        logger.info(f"Problem #{problem_id} updated: {', '.join(changes) or 'no fields'}")
        return updated

    def upvote_problem(self, problem_id: int) -> Problem:
        with self._lock:
            problem = self._require(problem_id)
            updated = self._touch(problem, upvotes=problem.upvotes + 1)

        logger.info(f"Problem #{problem_id} upvoted ({updated.upvotes})")
        return updated

    def change_status(self, problem_id: int, status: Any) -> Problem:
        """
        Move a problem to another status.

        Raises:
            ProblemNotFoundError: If the problem does not exist
            InvalidProblemError: If status is not open, in-progress or resolved
        """
        with self._lock:
            problem = self._require(problem_id)
            new_status = self._parse_status(status)
            updated = self._touch(problem, status=new_status)

        logger.info(f"Problem #{problem_id} status: {problem.status.value} -> {new_status.value}")
        return updated

    def delete_problem(self, problem_id: int) -> Problem:
        with self._lock:
            self._require(problem_id)
            removed = self.repository.remove(problem_id)

        logger.info(f"Problem #{problem_id} deleted")
        return removed

    def get_stats(self) -> ProblemStats:
        """
        Compute statistics over the current collection.

        The top upvoted list is built from a sorted copy; sorted() is stable,
        so ties keep storage order and the collection itself is untouched.
        """
        with self._lock:
            problems = self.repository.list()

        by_status = {status: 0 for status in ProblemStatus}
        categories = {category.value: 0 for category in ProblemCategory}
        for problem in problems:
            by_status[problem.status] += 1
            if problem.category in categories:
                categories[problem.category] += 1

        top_upvoted = sorted(problems, key=lambda p: p.upvotes, reverse=True)[:TOP_UPVOTED_LIMIT]

        return ProblemStats(
            total=len(problems),
            open=by_status[ProblemStatus.OPEN],
            in_progress=by_status[ProblemStatus.IN_PROGRESS],
            resolved=by_status[ProblemStatus.RESOLVED],
            categories=CategoryCounts(**categories),
            top_upvoted=top_upvoted,
        )

    def _require(self, problem_id: int) -> Problem:
        problem = self.repository.get(problem_id)
        if problem is None:
            logger.debug(f"Problem #{problem_id} not found")
            raise ProblemNotFoundError(problem_id)
        return problem

    @staticmethod
    def _parse_status(status: Any) -> ProblemStatus:
        # ProblemStatus is a str enum; only the exact strings are accepted
        if not isinstance(status, str):
            raise InvalidProblemError(INVALID_STATUS_MESSAGE)
        try:
            return ProblemStatus(status)
        except ValueError:
            raise InvalidProblemError(INVALID_STATUS_MESSAGE) from None

    def _touch(self, problem: Problem, **changes) -> Problem:
        """Store a new version of the problem with changes applied and updated_at refreshed."""
        now = self._clock()
        # updated_at must move forward even within the clock's resolution
        if now <= problem.updated_at:
            now = problem.updated_at + timedelta(microseconds=1)

        updated = problem.model_copy(update={**changes, "updated_at": now})
        return self.repository.replace(updated)
