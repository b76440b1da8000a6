"""
Health Diary Backend — Shared Response Schemas
===============================================

What:  Error, message and health payloads used by every route module.
Why:   Clients parse one error shape no matter which endpoint failed.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    field: str = Field(description="Request field that failed validation")
    message: str = Field(description="Why the value was rejected")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Bad Request",
            "errors": [{"field": "weight", "message": "Input should be ..."}],
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    errors: Optional[List[FieldError]] = Field(default=None, description="Field-level errors")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
