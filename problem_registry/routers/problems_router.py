"""
Problems router: CRUD, upvote, status and statistics endpoints.
"""

import logging
import re
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from problem_registry.dependencies import get_registry
from problem_registry.models.problem import (
    ProblemCreateRequest,
    ProblemListResponse,
    ProblemMessageResponse,
    ProblemResponse,
    ProblemUpdateRequest,
    StatsResponse,
    StatusChangeRequest,
)
from problem_registry.services.problem_registry import (
    InvalidProblemError,
    ProblemNotFoundError,
    ProblemRegistry,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["problems"])

PROBLEM_NOT_FOUND_MESSAGE = "Problem not found"
PROBLEM_ID_PATTERN = re.compile(r"\s*([+-]?[0-9]+)")


def _not_found() -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=PROBLEM_NOT_FOUND_MESSAGE,
    )


def _parse_problem_id(problem_id: str) -> int:
    """
    Read the leading integer of the path segment, so "1.5" and "1abc" address
    problem 1. Segments without a leading integer cannot match any problem.
    """
    match = PROBLEM_ID_PATTERN.match(problem_id)
    if match is None:
        _not_found()
    return int(match.group(1))


@router.get("/problems", response_model=ProblemListResponse)
async def list_problems(
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by status"),
    category: Optional[str] = Query(None, description="Filter by category"),
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemListResponse:
    """
    List problems, optionally filtered by status and category.

    Returns:
        Matching problems in the order they were reported
    """
    problems = registry.list_problems(status=status_filter, category=category)
    return ProblemListResponse(count=len(problems), data=problems)


@router.get("/problems/{problem_id}", response_model=ProblemResponse)
async def get_problem(
    problem_id: str,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemResponse:
    try:
        problem = registry.get_problem(_parse_problem_id(problem_id))
    except ProblemNotFoundError:
        _not_found()

    return ProblemResponse(data=problem)


@router.post("/problems", response_model=ProblemMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_problem(
    payload: Optional[ProblemCreateRequest] = None,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemMessageResponse:
    """
    Report a new problem.

    Title, description, category and location are all required. A missing
    body is treated as an empty one.
    """
    try:
        problem = registry.create_problem(payload or ProblemCreateRequest())
    except InvalidProblemError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return ProblemMessageResponse(message="Problem reported successfully", data=problem)


@router.put("/problems/{problem_id}", response_model=ProblemMessageResponse)
async def update_problem(
    problem_id: str,
    payload: Optional[ProblemUpdateRequest] = None,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemMessageResponse:
    """
    Update the fields present in the body.

    Fields that are absent, null or empty are left unchanged.
    """
    try:
        problem = registry.update_problem(
            _parse_problem_id(problem_id), payload or ProblemUpdateRequest()
        )
    except ProblemNotFoundError:
        _not_found()
    except InvalidProblemError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return ProblemMessageResponse(message="Problem updated successfully", data=problem)


@router.post("/problems/{problem_id}/upvote", response_model=ProblemMessageResponse)
async def upvote_problem(
    problem_id: str,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemMessageResponse:
    try:
        problem = registry.upvote_problem(_parse_problem_id(problem_id))
    except ProblemNotFoundError:
        _not_found()

    return ProblemMessageResponse(message="Upvote recorded", data=problem)


@router.patch("/problems/{problem_id}/status", response_model=ProblemMessageResponse)
async def change_problem_status(
    problem_id: str,
    payload: Optional[StatusChangeRequest] = None,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemMessageResponse:
    """
    Move a problem to another status (open, in-progress, resolved).
    """
    new_status = payload.status if payload else None
    try:
        problem = registry.change_status(_parse_problem_id(problem_id), new_status)
    except ProblemNotFoundError:
        _not_found()
    except InvalidProblemError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    return ProblemMessageResponse(message="Status updated successfully", data=problem)


@router.delete("/problems/{problem_id}", response_model=ProblemMessageResponse)
async def delete_problem(
    problem_id: str,
    registry: ProblemRegistry = Depends(get_registry),
) -> ProblemMessageResponse:
    """
    Delete a problem permanently.

    Returns:
        The deleted problem
    """
    try:
        problem = registry.delete_problem(_parse_problem_id(problem_id))
    except ProblemNotFoundError:
        _not_found()

    return ProblemMessageResponse(message="Problem deleted successfully", data=problem)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    registry: ProblemRegistry = Depends(get_registry),
) -> StatsResponse:
    """
    Get aggregate statistics: totals by status and category, and the five
    most upvoted problems.
    """
    return StatsResponse(data=registry.get_stats())
