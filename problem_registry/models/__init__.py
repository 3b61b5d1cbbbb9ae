"""Pydantic models for the problem registry."""
from problem_registry.models.problem import (
    Problem,
    ProblemCategory,
    ProblemCreateRequest,
    ProblemStats,
    ProblemStatus,
    ProblemUpdateRequest,
    StatusChangeRequest,
)

__all__ = [
    "Problem",
    "ProblemCategory",
    "ProblemCreateRequest",
    "ProblemStats",
    "ProblemStatus",
    "ProblemUpdateRequest",
    "StatusChangeRequest",
]
