"""
Docs Wallet Backend — Shared Response Schemas
==============================================

What:  Error, message and health payloads used across routers.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Body of every error response.

    Example:
        {"error": true, "message": "Unauthorized access", "request_id": "1a2b3c4d"}
    """
    error: bool = Field(default=True, description="Always true for errors")
    message: str = Field(description="Human-readable, deliberately generic description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Returned by GET /health for load balancers and monitoring."""
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="connected or disconnected")
    object_store: str = Field(description="available or unavailable")
    uptime_seconds: float = Field(description="Seconds since the service started")
