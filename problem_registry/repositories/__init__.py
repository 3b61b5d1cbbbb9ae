"""Storage repositories."""
from problem_registry.repositories.base import BaseRepository
from problem_registry.repositories.problem import InMemoryProblemRepository

__all__ = [
    "BaseRepository",
    "InMemoryProblemRepository",
]
