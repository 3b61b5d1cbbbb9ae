"""In-memory repository for problem reports."""

from typing import Dict, List, Optional

from problem_registry.models.problem import Problem
from problem_registry.repositories.base import BaseRepository


class InMemoryProblemRepository(BaseRepository[Problem]):
    """Problem storage held in process memory.

    Dicts preserve insertion order, so replacing a record keeps its position
    and listing follows creation order. Not thread-safe on its own; the
    registry serializes access.
    """

    def __init__(self, start_id: int = 1):
        self._problems: Dict[int, Problem] = {}
        self._next_id = start_id

    def next_id(self) -> int:
        problem_id = self._next_id
        self._next_id += 1
        return problem_id

    def add(self, obj: Problem) -> Problem:
        if obj.id in self._problems:
            raise ValueError(f"Problem {obj.id} already exists")
        self._problems[obj.id] = obj
        return obj

    def get(self, id: int) -> Optional[Problem]:
        return self._problems.get(id)

    def list(self) -> List[Problem]:
        return list(self._problems.values())

    def replace(self, obj: Problem) -> Problem:
        if obj.id not in self._problems:
            raise KeyError(obj.id)
        self._problems[obj.id] = obj
        return obj

    def remove(self, id: int) -> Optional[Problem]:
        return self._problems.pop(id, None)

    def count(self) -> int:
        return len(self._problems)
