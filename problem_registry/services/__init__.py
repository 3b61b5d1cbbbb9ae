"""Services module."""
from problem_registry.services.problem_registry import (
    InvalidProblemError,
    ProblemNotFoundError,
    ProblemRegistry,
    ProblemRegistryError,
)

__all__ = [
    "InvalidProblemError",
    "ProblemNotFoundError",
    "ProblemRegistry",
    "ProblemRegistryError",
]
