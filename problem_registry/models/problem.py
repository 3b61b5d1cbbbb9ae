"""
Problem report models: the stored record, request payloads and response envelopes.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from problem_registry.models.base import APIBaseModel, UTCDatetime


class ProblemStatus(str, Enum):
    """Lifecycle status of a problem report."""

    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"

    @classmethod
    def values(cls) -> List[str]:
        return [status.value for status in cls]


class ProblemCategory(str, Enum):
    """Categories counted by the statistics endpoint.

    Any non-empty category is accepted for storage; only these are counted.
    """

    INFRASTRUCTURE = "infrastructure"
    SAFETY = "safety"
    ENVIRONMENT = "environment"
    EDUCATION = "education"
    HEALTH = "health"


class Problem(APIBaseModel):
    """A single problem report. Instances are immutable; mutations produce a new version."""

    model_config = {**APIBaseModel.model_config, "frozen": True}

    id: int = Field(..., description="Sequential problem id")
    title: str = Field(..., description="Short title")
    description: str = Field(..., description="Problem description")
    category: str = Field(..., description="Problem category")
    location: str = Field(..., description="Where the problem is")
    upvotes: int = Field(0, ge=0, description="Number of upvotes")
    status: ProblemStatus = Field(ProblemStatus.OPEN, description="Current status")
    created_at: UTCDatetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: UTCDatetime = Field(..., alias="updatedAt", description="Last update timestamp")


# Request models


class ProblemCreateRequest(APIBaseModel):
    """Request to report a new problem. Presence of each field is checked by the registry."""

    title: Optional[Any] = None
    description: Optional[Any] = None
    category: Optional[Any] = None
    location: Optional[Any] = None


class ProblemUpdateRequest(APIBaseModel):
    """Request to update a problem.

    Fields sent as null or as an empty string are treated as not supplied.
    Types are checked by the registry once the problem is known to exist.
    """

    title: Optional[Any] = None
    description: Optional[Any] = None
    category: Optional[Any] = None
    location: Optional[Any] = None
    status: Optional[Any] = None

    def supplied_fields(self) -> dict:
        """Fields explicitly present in the request with a non-null, non-empty value."""
        fields = self.model_dump(exclude_unset=True, exclude_none=True)
        return {name: value for name, value in fields.items() if value != ""}


class StatusChangeRequest(APIBaseModel):
    """Request to move a problem to another status."""

    status: Optional[Any] = Field(None, description="New status (open, in-progress, resolved)")


# Response models


class CategoryCounts(APIBaseModel):
    """Number of problems in each recognized category."""

    infrastructure: int = 0
    safety: int = 0
    environment: int = 0
    education: int = 0
    health: int = 0


class ProblemStats(APIBaseModel):
    """Aggregate statistics over the whole collection."""

    total: int = Field(..., description="Total number of problems")
    open: int = Field(..., description="Problems with status 'open'")
    in_progress: int = Field(..., alias="inProgress", description="Problems with status 'in-progress'")
    resolved: int = Field(..., description="Problems with status 'resolved'")
    categories: CategoryCounts
    top_upvoted: List[Problem] = Field(..., alias="topUpvoted", description="Five most upvoted problems")


class ProblemListResponse(APIBaseModel):
    success: bool = True
    count: int
    data: List[Problem]


class ProblemResponse(APIBaseModel):
    success: bool = True
    data: Problem


class ProblemMessageResponse(APIBaseModel):
    success: bool = True
    message: str
    data: Problem


class StatsResponse(APIBaseModel):
    success: bool = True
    data: ProblemStats


class HealthResponse(APIBaseModel):
    success: bool = True
    message: str
    timestamp: UTCDatetime
