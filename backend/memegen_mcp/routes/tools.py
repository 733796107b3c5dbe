"""
Tool API routes.

This module exposes the memegen tools over plain HTTP. Each call returns the
same text payload the MCP transport produces, wrapped in a content list.
"""

import logging
from functools import lru_cache
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from memegen_mcp.config import get_settings
from memegen_mcp.services.memegen import (
    MemegenConnectionError,
    MemegenResponseError,
    MemegenServiceError,
)
from memegen_mcp.services.tools import (
    InvalidArgumentsError,
    ToolDispatcher,
    UnknownToolError,
)

# Configure logging
logger = logging.getLogger(__name__)

# Create router with prefix and tags
router = APIRouter(
    prefix="/api/v1",
    tags=["tools"],
)


@lru_cache()
def get_tool_dispatcher() -> ToolDispatcher:
    """Shared dispatcher for dependency injection."""
    return ToolDispatcher()


@router.get(
    "/tools",
    status_code=status.HTTP_200_OK,
    summary="List tools",
    description="List the available tools with their JSON input schemas.",
)
async def list_tools(
    dispatcher: Annotated[ToolDispatcher, Depends(get_tool_dispatcher)],
):
    return {
        "tools": [
            {
                "name": spec.name,
                "description": spec.description,
                "inputSchema": spec.input_schema,
            }
            for spec in dispatcher.tools
        ]
    }


@router.post(
    "/tools/{name}",
    status_code=status.HTTP_200_OK,
    summary="Call a tool",
    description="""
    Call one of the memegen tools with a JSON object of arguments.

    The result is a single text content item holding pretty-printed JSON.
    """,
)
async def call_tool(
    name: str,
    dispatcher: Annotated[ToolDispatcher, Depends(get_tool_dispatcher)],
    # Any JSON value; the dispatcher rejects non-objects as invalid arguments.
    arguments: Annotated[Any, Body()] = None,
):
    """
    Call a tool by name.

    Raises:
        HTTPException: 404 unknown tool, 400 invalid arguments,
            503/502 when the memegen API cannot be reached or fails
    """
    try:
        text = await dispatcher.call(name, arguments)

    except UnknownToolError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "unknown_tool",
                "message": str(e),
                "details": {"tool": e.tool},
            }
        )

    except InvalidArgumentsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "invalid_arguments",
                "message": str(e),
                "details": {
                    "tool": e.tool,
                    "errors": [
                        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
                        for err in e.errors
                    ],
                }
            }
        )

    except MemegenConnectionError as e:
        logger.error(f"Memegen connection error: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "memegen_connection_error",
                "message": str(e),
                "details": {
                    "service": "memegen.link",
                    "action": "Check MEMEGEN_API_BASE and network connectivity",
                }
            }
        )

    except MemegenResponseError as e:
        logger.error(f"Memegen response error: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "memegen_response_error",
                "message": str(e),
                "details": {"service": "memegen.link"}
            }
        )

    except MemegenServiceError as e:
        logger.error(f"Memegen service error: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "memegen_error",
                "message": str(e),
                "details": {"service": "memegen.link"}
            }
        )

    return {"content": [{"type": "text", "text": text}]}


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Check if the service is running.",
)
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    }


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Check that configuration is loaded and tools are registered.",
)
async def readiness_check(
    dispatcher: Annotated[ToolDispatcher, Depends(get_tool_dispatcher)],
):
    """
    Readiness check. Does not call memegen.link.

    Returns:
        dict: Readiness status with configuration info
    """
    settings = get_settings()
    ready = bool(settings.MEMEGEN_API_BASE)

    return {
        "status": "ready" if ready else "not_ready",
        "configuration": {
            "memegen_api_base": settings.MEMEGEN_API_BASE,
            "tools": [spec.name for spec in dispatcher.tools],
        },
        "warnings": [] if ready else ["Set MEMEGEN_API_BASE to the memegen.link API root"],
    }
