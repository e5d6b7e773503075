"""api/routes/tools.py — Direct tool invocation endpoint.

POST /tools/call  — Execute a registered tool (detect_pitch, analyze_frequency) by name.
GET  /tools/list  — List all registered tools with their parameter schemas.

Thin HTTP boundary: no tuner logic here. Tool errors are encoded in the
response body (success=False, error=str); only an unknown tool name is an
HTTP error.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from infrastructure.metrics import record_request
from tools.registry import get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tools", tags=["tools"])


class ToolCallRequest(BaseModel):
    """POST /tools/call request body."""

    name: str
    """Tool name as returned by GET /tools/list."""

    params: dict[str, Any] = Field(default_factory=dict)
    """Keyword arguments forwarded to the tool."""


class ToolCallResponse(BaseModel):
    """POST /tools/call response body — mirrors ToolResult."""

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


@router.post("/call", response_model=ToolCallResponse)
def call_tool(request: ToolCallRequest) -> ToolCallResponse:
    """Execute a registered tool by name.

    Raises:
        HTTPException(404): Tool not registered.
    """
    registry = get_registry()
    tool = registry.get(request.name)
    if tool is None:
        available = sorted(t["name"] for t in registry.list_tools())
        raise HTTPException(
            status_code=404,
            detail=f"Tool '{request.name}' not found. Available tools: {available}",
        )

    result = tool(**request.params)
    if not result.success:
        logger.info("Tool %s failed: %s", request.name, result.error)
    record_request(f"tools.{request.name}", "success" if result.success else "error")
    return ToolCallResponse(
        success=result.success,
        data=result.data,
        error=result.error,
        metadata=result.metadata,
    )


@router.get("/list")
def list_tools() -> list[dict[str, Any]]:
    """List all registered tools with their parameter schemas."""
    return get_registry().list_tools()
