"""
MarkNotes Backend - Shared Pydantic Schemas
===========================================

What:  Base model with camelCase wire names, plus the error, message and
       health response bodies shared by every router.
How:   `ApiModel` generates camelCase aliases (`created_at` → `createdAt`).
       FastAPI serializes response models by alias, and `populate_by_name`
       lets Python code keep using snake_case names.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base class for every request/response body exposed by the API."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class MessageResponse(ApiModel):
    """Plain acknowledgement, e.g. after DELETE /notes/{id}."""
    message: str = Field(description="Human-readable result")


class ErrorResponse(ApiModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Note not found",
            "details": {"resource": "note"},
            "requestId": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error kind")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(ApiModel):
    """Health check body returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    grammar: str = Field(description="Grammar service: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
