"""API route handlers for the flow definition service."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from ..core import FlowRegistry, FlowRenderer, LoadStatus, validate_flow
from ..core.markup import escape_attr, escape_html
from .models import (
    ConfigSchemaResponse,
    ErrorResponse,
    FlowSummaryResponse,
    HealthResponse,
    MessageResponse,
    SaveResponse,
    StepsResponse,
    ValidationResponse,
)

router = APIRouter()

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
<link rel="stylesheet" href="/styles.css">
</head>
<body>
<div class="container" id="flow-container" data-flow-id="{flow_id}">
{body}
</div>
</body>
</html>
"""


def get_registry(request: Request) -> FlowRegistry:
    """The registry owned by the running application."""
    return request.app.state.registry


def require_flow(registry: FlowRegistry, flow_id: str, reload: bool = False) -> dict[str, Any]:
    """Load a flow or raise the HTTP error matching the load status."""
    result = registry.load(flow_id, reload=reload)
    if result.ok:
        return result.flow
    if result.status is LoadStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Flow not found")
    raise HTTPException(status_code=500, detail=result.error or "Failed to load flow")


# === System ===

@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(registry: FlowRegistry = Depends(get_registry)) -> HealthResponse:
    """Check service health."""
    from .. import __version__
    from .app import get_uptime

    return HealthResponse(
        status="healthy",
        version=__version__,
        flows_available=len(registry.summaries()),
        uptime_seconds=get_uptime(),
    )


# === Collection routes (declared before /flows/{flow_id}) ===

@router.get("/flows", response_model=list[FlowSummaryResponse], tags=["Flows"])
async def list_flows(registry: FlowRegistry = Depends(get_registry)) -> list[dict[str, Any]]:
    """List display metadata for every loadable flow."""
    return [summary.to_dict() for summary in registry.summaries()]


@router.post("/flows/cache/clear", response_model=MessageResponse, tags=["Flows"])
async def clear_cache(registry: FlowRegistry = Depends(get_registry)) -> MessageResponse:
    """Drop every cached definition."""
    registry.clear_cache()
    return MessageResponse(success=True, message="Flow cache cleared")


@router.post(
    "/flows/validate",
    response_model=ValidationResponse,
    responses=ERROR_RESPONSES,
    tags=["Flows"],
)
async def validate_document(flow_data: Optional[dict[str, Any]] = Body(None)) -> ValidationResponse:
    """Validate a flow definition without saving it."""
    if flow_data is None:
        raise HTTPException(status_code=400, detail="Flow data is required")
    return ValidationResponse(**validate_flow(flow_data).to_dict())


# === Single flow ===

@router.get("/flows/{flow_id}", responses=ERROR_RESPONSES, tags=["Flows"])
async def get_flow(
    flow_id: str,
    reload: bool = Query(False, description="Bypass the cache and re-read the definition"),
    registry: FlowRegistry = Depends(get_registry),
) -> dict[str, Any]:
    """Get the full flow definition."""
    return require_flow(registry, flow_id, reload=reload)


@router.put("/flows/{flow_id}", response_model=SaveResponse, responses=ERROR_RESPONSES, tags=["Flows"])
async def save_flow(
    flow_id: str,
    flow_data: Optional[dict[str, Any]] = Body(None),
    registry: FlowRegistry = Depends(get_registry),
) -> SaveResponse:
    """Replace a flow definition with the request body."""
    if flow_data is None:
        raise HTTPException(status_code=400, detail="Flow data is required")

    result = registry.save(flow_id, flow_data)
    if result.success:
        return SaveResponse(success=True)

    # Validation and id mismatches are client errors; anything else is storage
    status_code = 400 if result.errors or flow_data.get("id") != flow_id else 500
    raise HTTPException(status_code=status_code, detail=result.error or "Failed to save flow")


@router.get(
    "/flows/{flow_id}/validate",
    response_model=ValidationResponse,
    responses=ERROR_RESPONSES,
    tags=["Flows"],
)
async def validate_stored_flow(
    flow_id: str,
    registry: FlowRegistry = Depends(get_registry),
) -> ValidationResponse:
    """Validate the stored definition of a flow."""
    flow = require_flow(registry, flow_id)
    return ValidationResponse(**validate_flow(flow).to_dict())


@router.get(
    "/flows/{flow_id}/config-schema",
    response_model=ConfigSchemaResponse,
    responses=ERROR_RESPONSES,
    tags=["Flows"],
)
async def get_config_schema(
    flow_id: str,
    registry: FlowRegistry = Depends(get_registry),
) -> ConfigSchemaResponse:
    """Get the configuration sections and fields of a flow."""
    flow = require_flow(registry, flow_id)
    return ConfigSchemaResponse(
        configType=flow.get("configType"),
        configSections=flow.get("configSections") or [],
        configFields=flow.get("configFields") or [],
    )


@router.get(
    "/flows/{flow_id}/steps",
    response_model=StepsResponse,
    responses=ERROR_RESPONSES,
    tags=["Flows"],
)
async def get_steps(
    flow_id: str,
    registry: FlowRegistry = Depends(get_registry),
) -> StepsResponse:
    """Get the steps and handler blocks of a flow."""
    flow = require_flow(registry, flow_id)
    return StepsResponse(
        steps=flow.get("steps") or [],
        customHandlers=flow.get("customHandlers") or {},
        stateSchema=flow.get("stateSchema") or {},
    )


@router.get(
    "/flows/{flow_id}/page",
    response_class=HTMLResponse,
    responses=ERROR_RESPONSES,
    tags=["Pages"],
)
async def render_flow_page(
    flow_id: str,
    registry: FlowRegistry = Depends(get_registry),
) -> HTMLResponse:
    """Render the simulator page for a flow."""
    flow = require_flow(registry, flow_id)
    renderer = FlowRenderer(flow)
    html = PAGE_TEMPLATE.format(
        title=escape_html(renderer.flow.name),
        flow_id=escape_attr(renderer.flow.id),
        body=renderer.render_full_page(),
    )
    return HTMLResponse(content=html)
