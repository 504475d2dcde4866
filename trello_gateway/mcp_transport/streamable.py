"""Single-shot HTTP transport: one POST carries messages and their responses."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from trello_gateway.dependencies import get_dispatch_context

from .schemas import MCPErrorCodes, MCPJSONRPCResponse, encode_message
from .service import DispatchContext, dispatch_message


router = APIRouter(prefix="/mcp", tags=["mcp-http"])


def _json_response(payload, status_code: int = 200, headers: dict[str, str] | None = None) -> Response:
    return Response(
        content=encode_message(payload),
        status_code=status_code,
        media_type="application/json",
        headers=headers,
    )


@router.post("", operation_id="mcp_endpoint_post")
async def mcp_post_endpoint(
    request: Request,
    context: Annotated[DispatchContext, Depends(get_dispatch_context)],
):
    """Handle a JSON-RPC message or batch and return the responses inline."""
    try:
        body = await request.json()
    except ValueError:
        error = MCPJSONRPCResponse.error_response(
            id=None, code=MCPErrorCodes.PARSE_ERROR, message="Parse error"
        )
        return _json_response(error.to_payload(), status_code=400)

    if isinstance(body, list):
        if not body:
            error = MCPJSONRPCResponse.error_response(
                id=None, code=MCPErrorCodes.INVALID_REQUEST, message="Invalid Request"
            )
            return _json_response(error.to_payload(), status_code=400)
        results = await asyncio.gather(*(dispatch_message(message, context) for message in body))
        payload = [response.to_payload() for response in results if response is not None]
        if not payload:
            return Response(status_code=202)
        return _json_response(payload)

    response = await dispatch_message(body, context)
    if response is None:
        return Response(status_code=202)
    return _json_response(response.to_payload())


@router.api_route("", methods=["GET", "DELETE"], operation_id="mcp_endpoint_not_allowed")
async def mcp_method_not_allowed():
    """This transport is stateless and never opens a server-initiated stream."""
    error = MCPJSONRPCResponse.error_response(
        id=None, code=-32000, message="Method not allowed."
    )
    return _json_response(error.to_payload(), status_code=405, headers={"Allow": "POST"})
