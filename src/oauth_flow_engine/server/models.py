"""Pydantic models for the flow definition API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# === Flow Models ===

class FlowSummaryResponse(BaseModel):
    """Display metadata about a flow (for listing)."""
    id: str
    name: str
    state: str = "draft"
    # Display metadata is passed through as stored
    subtitle: Any = None
    description: Any = None
    icon: Any = None
    category: Any = None
    tags: Any = None
    status: Any = None
    documentation: Any = None


class ValidationResponse(BaseModel):
    """Result of validating a flow definition."""
    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SaveResponse(BaseModel):
    """Response from saving a flow definition."""
    success: bool = True


class ConfigSchemaResponse(BaseModel):
    """The configuration part of a flow definition."""
    configType: Any = None
    configSections: Any = Field(default_factory=list)
    # Mapping keyed by field id or list of field objects, as stored
    configFields: Any = Field(default_factory=list)


class StepsResponse(BaseModel):
    """The executable part of a flow definition."""
    # Returned as stored
    steps: Any = Field(default_factory=list)
    customHandlers: Any = Field(default_factory=dict)
    stateSchema: Any = Field(default_factory=dict)


class MessageResponse(BaseModel):
    """Generic success acknowledgement."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str


# === Health Check ===

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    flows_available: int = 0
    uptime_seconds: float = 0.0
