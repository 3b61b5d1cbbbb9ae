"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from problem_registry.services.problem_registry import ProblemRegistry


def get_registry(request: Request) -> ProblemRegistry:
    """Return the registry owned by the running application."""
    return request.app.state.registry
