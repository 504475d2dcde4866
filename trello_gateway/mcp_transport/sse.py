"""SSE transport implementation for MCP protocol."""

import asyncio
from typing import Annotated, AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response, StreamingResponse

from trello_gateway.dependencies import get_dispatch_context, get_session_manager, get_settings_from_app
from trello_gateway.config import Settings

from .schemas import encode_message
from .service import DispatchContext
from .session import SessionManager, SSESession


router = APIRouter(prefix="/sse", tags=["mcp-sse"])

MESSAGE_ENDPOINT = "/sse/message"


def format_sse_event(event: str, data: str) -> str:
    return f"event: {event}\ndata: {data}\n\n"


async def sse_event_stream(
    session: SSESession,
    sessions: SessionManager,
    ping_interval: float,
) -> AsyncIterator[str]:
    """Yield the endpoint event, then every response of ``session``.

    The session is removed from ``sessions`` when the stream ends, whether
    the client disconnected or the server is shutting down.
    """
    try:
        yield format_sse_event("endpoint", f"{MESSAGE_ENDPOINT}?sessionId={session.id}")
        while True:
            try:
                response = await asyncio.wait_for(session.outbound.get(), timeout=ping_interval)
            except asyncio.TimeoutError:
                yield ": ping\n\n"
                continue
            yield format_sse_event("message", encode_message(response.to_payload()))
    finally:
        sessions.close(session.id)


@router.get("", operation_id="sse_endpoint_get")
async def sse_get_endpoint(
    context: Annotated[DispatchContext, Depends(get_dispatch_context)],
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
    settings: Annotated[Settings, Depends(get_settings_from_app)],
):
    """Open an SSE stream bound to a new session."""
    session = sessions.create(context)
    return StreamingResponse(
        sse_event_stream(session, sessions, settings.SSE_PING_INTERVAL_SECONDS),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("", operation_id="sse_endpoint_probe")
async def sse_probe_endpoint():
    """Answer connectivity probes that POST to the stream URL."""
    return Response(status_code=200)


@router.post("/message", operation_id="sse_message_post")
async def sse_message_endpoint(
    request: Request,
    sessions: Annotated[SessionManager, Depends(get_session_manager)],
):
    """Queue a JSON-RPC message on an open session.

    The response is delivered on the session's event stream, not here.
    """
    session_id = request.query_params.get("sessionId")
    if not session_id:
        return PlainTextResponse("Missing sessionId", status_code=400)

    session = sessions.get(session_id)
    if session is None:
        return PlainTextResponse("Session not found", status_code=404)

    try:
        body = await request.json()
    except ValueError:
        return PlainTextResponse("Invalid JSON", status_code=400)

    messages = body if isinstance(body, list) else [body]
    for message in messages:
        await session.submit(message)
    return PlainTextResponse("Accepted", status_code=202)
