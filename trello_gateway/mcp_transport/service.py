"""Business logic for MCP protocol handlers.

``dispatch_message`` is the single entry point used by both the SSE and the
single-shot transport, which is what keeps their behavior identical.
"""

import time
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import ValidationError

from trello_gateway.gateway.exceptions import RemoteServiceError
from trello_gateway.registry import (
    ToolNotFoundError,
    ToolRegistry,
    ToolResult,
    ToolValidationError,
    error_result,
)

from .schemas import (
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallParams,
)


logger = structlog.get_logger("mcp")

# Newest first; the first entry is offered when the client asks for an unknown version.
SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")


@dataclass
class DispatchContext:
    """Everything a connection needs to serve MCP messages.

    Attributes:
        registry: Tool registry bound to this connection.
        client: Trello invocation client handed to tool handlers.
        server_name: Name reported in ``initialize``.
        server_version: Version reported in ``initialize``.
    """

    registry: ToolRegistry
    client: Any
    server_name: str = "Trello MCP"
    server_version: str = "1.0.0"


async def handle_initialize(params: MCPInitializeParams, context: DispatchContext) -> dict[str, Any]:
    """Handle initialize request.

    Args:
        params: Initialize parameters from client.
        context: Connection context.

    Returns:
        Server initialization response.
    """
    if params.protocolVersion in SUPPORTED_PROTOCOL_VERSIONS:
        protocol_version = params.protocolVersion
    else:
        protocol_version = SUPPORTED_PROTOCOL_VERSIONS[0]

    return {
        "protocolVersion": protocol_version,
        "capabilities": {
            "tools": {
                "listChanged": False  # Static catalog
            }
        },
        "serverInfo": {
            "name": context.server_name,
            "version": context.server_version,
        }
    }


async def handle_tools_list(context: DispatchContext) -> dict[str, Any]:
    """Handle tools/list request."""
    return {"tools": context.registry.describe()}


async def handle_tools_call(
    context: DispatchContext,
    name: str,
    arguments: dict[str, Any] | None,
) -> ToolResult:
    """Handle tools/call request.

    Trello failures become an ``isError`` result carrying only the generic
    message; unknown tools and invalid arguments propagate so the caller can
    turn them into protocol errors.

    Args:
        context: Connection context.
        name: Tool name to invoke.
        arguments: Tool arguments.

    Returns:
        Tool execution result.

    Raises:
        ToolNotFoundError: If the tool is not registered.
        ToolValidationError: If the arguments are invalid.
    """
    started = time.perf_counter()
    try:
        result = await context.registry.call(name, arguments, context.client)
    except RemoteServiceError as e:
        logger.warning(
            "tool_call_failed",
            tool_name=name,
            error_code=e.code,
            duration_ms=int((time.perf_counter() - started) * 1000),
        )
        return error_result(e.message)

    logger.info(
        "tool_call",
        tool_name=name,
        duration_ms=int((time.perf_counter() - started) * 1000),
    )
    return result


def _request_id(message: Any) -> str | int | None:
    if isinstance(message, dict):
        value = message.get("id")
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return value
    return None


async def dispatch_message(message: Any, context: DispatchContext) -> MCPJSONRPCResponse | None:
    """Handle one decoded JSON-RPC message.

    Args:
        message: Decoded JSON value received from the client.
        context: Connection context.

    Messages without an ``id`` are notifications: they are executed like any
    other request, including ``tools/call``, but their outcome is discarded.

    Returns:
        The response to send, or None for notifications.
    """
    try:
        jsonrpc_request = MCPJSONRPCRequest.model_validate(message)
    except ValidationError:
        return MCPJSONRPCResponse.error_response(
            id=_request_id(message),
            code=MCPErrorCodes.INVALID_REQUEST,
            message="Invalid Request",
        )

    response = await _dispatch_request(
        jsonrpc_request.method,
        jsonrpc_request.params or {},
        jsonrpc_request.id,
        context,
    )
    if "id" not in message:
        return None
    return response


async def _dispatch_request(
    method: str,
    params: dict[str, Any],
    request_id: str | int | None,
    context: DispatchContext,
) -> MCPJSONRPCResponse:
    try:
        if method == "initialize":
            init_params = MCPInitializeParams(**params)
            result = await handle_initialize(init_params, context)
            return MCPJSONRPCResponse.success(request_id, result)

        elif method == "ping":
            return MCPJSONRPCResponse.success(request_id, {})

        elif method == "tools/list":
            result = await handle_tools_list(context)
            return MCPJSONRPCResponse.success(request_id, result)

        elif method == "tools/call":
            call_params = MCPToolCallParams(**params)
            result = await handle_tools_call(context, call_params.name, call_params.arguments)
            return MCPJSONRPCResponse.success(request_id, result.model_dump())

        else:
            return MCPJSONRPCResponse.error_response(
                id=request_id,
                code=MCPErrorCodes.METHOD_NOT_FOUND,
                message=f"Method not found: {method}",
            )

    except ToolNotFoundError as e:
        return MCPJSONRPCResponse.error_response(
            id=request_id,
            code=MCPErrorCodes.INVALID_PARAMS,
            message=e.message,
        )
    except ToolValidationError as e:
        logger.info("tool_call_rejected", tool_name=e.tool_name, error_count=len(e.errors))
        return MCPJSONRPCResponse.error_response(
            id=request_id,
            code=MCPErrorCodes.INVALID_PARAMS,
            message=e.message,
            data=e.errors,
        )
    except ValidationError:
        return MCPJSONRPCResponse.error_response(
            id=request_id,
            code=MCPErrorCodes.INVALID_PARAMS,
            message=f"Invalid params for {method}",
        )
    except Exception:
        logger.exception("mcp_internal_error", method=method)
        return MCPJSONRPCResponse.error_response(
            id=request_id,
            code=MCPErrorCodes.INTERNAL_ERROR,
            message="Internal error",
        )
