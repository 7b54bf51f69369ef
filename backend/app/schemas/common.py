"""
PerkBoard Backend - Shared Response Schemas
=============================================

What:  Response models used by more than one resource (errors, health, acks).
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    Plain acknowledgement returned by state-changing routes.

    Example: {"message": "already was saved"}
    """
    message: str = Field(description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "validation_error", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
