"""
Health check router.
"""

from fastapi import APIRouter

from problem_registry.models.base import utc_now
from problem_registry.models.problem import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    return HealthResponse(message="Server is running", timestamp=utc_now())
