"""Error types for flow definition loading, storage and validation."""

from __future__ import annotations


class FlowEngineError(Exception):
    """Base exception for all flow engine errors."""
    pass


class FlowNotFoundError(FlowEngineError):
    """No stored definition exists for the requested flow id."""

    def __init__(self, flow_id: str):
        super().__init__(f"Flow definition not found: {flow_id}")
        self.flow_id = flow_id


class StorageError(FlowEngineError):
    """Unexpected failure while reading or writing a definition."""

    def __init__(
        self,
        message: str,
        flow_id: str | None = None,
        cause: Exception | None = None
    ):
        super().__init__(message)
        self.flow_id = flow_id
        self.cause = cause


class ValidationError(FlowEngineError):
    """A flow definition violates the schema rules."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []
