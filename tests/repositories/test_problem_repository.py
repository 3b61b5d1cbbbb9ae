"""
Unit tests for problem_registry/repositories/problem.py
"""

import pytest
from datetime import datetime, timezone

from problem_registry.models.problem import Problem
from problem_registry.repositories.problem import InMemoryProblemRepository

NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def build_problem(problem_id: int, title: str = "Pothole") -> Problem:
    return Problem(
        id=problem_id,
        title=title,
        description="Large pothole",
        category="infrastructure",
        location="Main St",
        created_at=NOW,
        updated_at=NOW,
    )


class TestInMemoryProblemRepository:
    """Tests for the in-memory problem store."""

    @pytest.fixture
    def repo(self):
        return InMemoryProblemRepository()

    def test_ids_start_at_one_and_increase(self, repo):
        assert [repo.next_id() for _ in range(3)] == [1, 2, 3]

    def test_ids_not_reused_after_remove(self, repo):
        problem = repo.add(build_problem(repo.next_id()))
        repo.remove(problem.id)

        assert repo.next_id() == 2

    def test_list_keeps_insertion_order(self, repo):
        for title in ["a", "b", "c"]:
            repo.add(build_problem(repo.next_id(), title))

        assert [p.title for p in repo.list()] == ["a", "b", "c"]

    def test_list_returns_copy(self, repo):
        repo.add(build_problem(repo.next_id()))

        problems = repo.list()
        problems.clear()

        assert repo.count() == 1

    def test_replace_keeps_position(self, repo):
        for title in ["a", "b", "c"]:
            repo.add(build_problem(repo.next_id(), title))

        repo.replace(build_problem(2, "b2"))

        assert [p.title for p in repo.list()] == ["a", "b2", "c"]

    def test_replace_unknown_raises(self, repo):
        with pytest.raises(KeyError):
            repo.replace(build_problem(99))

    def test_add_duplicate_raises(self, repo):
        repo.add(build_problem(1))
        with pytest.raises(ValueError):
            repo.add(build_problem(1))

    def test_get_and_remove(self, repo):
        problem = repo.add(build_problem(repo.next_id()))

        assert repo.get(problem.id) == problem
        assert repo.exists(problem.id)
        assert repo.remove(problem.id) == problem
        assert repo.get(problem.id) is None
        assert repo.remove(problem.id) is None
        assert not repo.exists(problem.id)
