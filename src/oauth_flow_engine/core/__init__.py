"""Flow definition engine: validation, registry and HTML rendering."""

from .definition import (
    ActionType,
    FieldType,
    FlowState,
    FlowDefinition,
    FlowSummary,
    FieldSpec,
    StepSpec,
    CurlSpec,
    normalize_config_fields,
)
from .errors import (
    FlowEngineError,
    FlowNotFoundError,
    StorageError,
    ValidationError,
)
from .validation import (
    FlowValidator,
    ValidationReport,
    ValidationMessage,
    validate_flow,
)
from .storage import FlowStore, DirectoryFlowStore, MemoryFlowStore, is_valid_flow_id
from .registry import FlowRegistry, FlowCache, LoadResult, LoadStatus, SaveResult
from .curl import build_curl_command, format_curl, interpolate_template
from .markup import escape_attr, escape_html
from .renderer import FlowRenderer

__all__ = [
    # Definitions
    "ActionType",
    "FieldType",
    "FlowState",
    "FlowDefinition",
    "FlowSummary",
    "FieldSpec",
    "StepSpec",
    "CurlSpec",
    "normalize_config_fields",
    # Errors
    "FlowEngineError",
    "FlowNotFoundError",
    "StorageError",
    "ValidationError",
    # Validation
    "FlowValidator",
    "ValidationReport",
    "ValidationMessage",
    "validate_flow",
    # Storage
    "FlowStore",
    "DirectoryFlowStore",
    "MemoryFlowStore",
    "is_valid_flow_id",
    # Registry
    "FlowRegistry",
    "FlowCache",
    "LoadResult",
    "LoadStatus",
    "SaveResult",
    # Rendering
    "build_curl_command",
    "format_curl",
    "interpolate_template",
    "escape_attr",
    "escape_html",
    "FlowRenderer",
]
