"""Response models shared across routers: the error shape and health."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body returned for every failed request.

    Example:
        {"status": "error", "message": "Product not found."}
    """

    status: str = Field(default="error")
    message: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    uptime_seconds: float
