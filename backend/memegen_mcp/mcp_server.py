"""
Memegen MCP Server - stdio entry point.

Serves the memegen tools over the Model Context Protocol. stdout carries the
protocol, so all logging goes to stderr.

Usage:
    memegen-mcp
"""

import asyncio
import logging
import sys
from typing import Any, Optional

from mcp import McpError
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolRequest,
    CallToolResult,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from memegen_mcp.config import Settings, get_settings
from memegen_mcp.services.memegen import MemegenServiceError
from memegen_mcp.services.tools import (
    InvalidArgumentsError,
    ToolDispatcher,
    UnknownToolError,
)

logger = logging.getLogger(__name__)


def tool_definitions(dispatcher: ToolDispatcher) -> list[Tool]:
    """MCP tool listing built from the dispatcher's registry."""
    return [
        Tool(
            name=spec.name,
            description=spec.description,
            inputSchema=spec.input_schema,
        )
        for spec in dispatcher.tools
    ]


async def call_tool_content(
    dispatcher: ToolDispatcher,
    name: str,
    arguments: Optional[dict[str, Any]],
) -> list[TextContent]:
    """
    Run a tool and wrap its payload as MCP text content.

    Raises:
        McpError: METHOD_NOT_FOUND, INVALID_PARAMS or INTERNAL_ERROR
    """
    try:
        text = await dispatcher.call(name, arguments)
    except UnknownToolError as e:
        raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=str(e))) from e
    except InvalidArgumentsError as e:
        raise McpError(ErrorData(code=INVALID_PARAMS, message=str(e))) from e
    except MemegenServiceError as e:
        logger.error(f"Tool {name} failed: {e}")
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=str(e))) from e
    return [TextContent(type="text", text=text)]


def build_server(dispatcher: ToolDispatcher, settings: Optional[Settings] = None) -> Server:
    """Create the MCP server and register the tool handlers on it."""
    settings = settings or get_settings()
    server = Server(settings.APP_NAME, version=settings.APP_VERSION)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return tool_definitions(dispatcher)

    # Registered without the @server.call_tool() wrapper, which turns every
    # exception into an isError result and drops the McpError code.
    async def handle_call_tool(request: CallToolRequest) -> ServerResult:
        content = await call_tool_content(
            dispatcher, request.params.name, request.params.arguments
        )
        return ServerResult(CallToolResult(content=content, isError=False))

    server.request_handlers[CallToolRequest] = handle_call_tool

    return server


async def serve(settings: Optional[Settings] = None) -> None:
    """Run the MCP server on stdin/stdout until the client disconnects."""
    settings = settings or get_settings()
    server = build_server(ToolDispatcher(settings=settings), settings)

    async with stdio_server() as (read_stream, write_stream):
        logger.info("MemeGen MCP server running on stdio")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        asyncio.run(serve(settings))
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
