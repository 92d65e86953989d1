"""Response models for API endpoints."""

from typing import Any

from pydantic import BaseModel
from pydantic import Field


class Envelope(BaseModel):
    """Uniform success envelope."""

    success: bool = True
    message: str | None = None
    data: Any = None
    count: int | None = None  # Only for row-returning endpoints


class ErrorEnvelope(BaseModel):
    """Uniform error envelope."""

    success: bool = False
    error: str  # Exception type (e.g., "DataGateUpstreamError")
    message: str  # Caller-facing message
    details: dict[str, Any] = Field(default_factory=dict)


def row_count(data: Any) -> int:
    """
    Count rows in an engine result.

    Args:
        data: Engine result

    Returns:
        Length if data is a list, else 0
    """
    return len(data) if isinstance(data, list) else 0
