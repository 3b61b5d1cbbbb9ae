"""
Pytest configuration and shared fixtures.

Every test gets its own registry with a deterministic clock, so ids and
timestamps are predictable and no state leaks between tests.
"""

import pytest
from datetime import datetime, timedelta, timezone

# Add the project root to Python path
import sys
from pathlib import Path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fastapi.testclient import TestClient

from problem_registry.config.settings import ServiceSettings, reset_settings
from problem_registry.main import create_app
from problem_registry.models.problem import ProblemCreateRequest
from problem_registry.repositories.problem import InMemoryProblemRepository
from problem_registry.services.problem_registry import ProblemRegistry


class FakeClock:
    """Clock that advances one second on every call."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def repository():
    return InMemoryProblemRepository()


@pytest.fixture
def registry(repository, clock):
    """Empty registry over an in-memory repository."""
    return ProblemRegistry(repository=repository, clock=clock)


@pytest.fixture
def settings():
    return ServiceSettings(environment="development", route_prefix="")


@pytest.fixture
def app(settings, registry):
    return create_app(settings=settings, registry=registry)


@pytest.fixture
def client(app):
    """Test client serving the per-test registry."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def pothole_payload():
    return {
        "title": "Pothole",
        "description": "Large pothole",
        "category": "infrastructure",
        "location": "Main St",
    }


@pytest.fixture
def make_problem(registry):
    """Report a problem directly through the registry."""
    def _make(**overrides):
        fields = {
            "title": "Broken streetlight",
            "description": "Light out for a week",
            "category": "safety",
            "location": "Oak Ave",
        }
        fields.update(overrides)
        return registry.create_problem(ProblemCreateRequest(**fields))

    return _make


@pytest.fixture(autouse=True)
def clean_settings():
    """Make sure no test sees settings cached by another."""
    reset_settings()
    yield
    reset_settings()
