"""Front door middleware: authentication, CORS preflight and path routing."""

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .exceptions import AuthenticationError
from .utils import extract_secret, verify_shared_secret


logger = structlog.get_logger("auth")

SSE_PATHS = frozenset({"/sse", "/sse/message"})
MCP_PATH = "/mcp"
HEALTH_PATH = "/health"

MCP_RESPONSE_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Cache-Control": "no-cache, no-transform",
}


def preflight_headers(origin: str | None) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin or "*",
        "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
        "Access-Control-Allow-Credentials": "true",
        "Cache-Control": "no-cache, no-transform",
    }


def resolve_route(method: str, path: str) -> str:
    """Classify a request path.

    Returns:
        One of ``"sse"``, ``"mcp"``, ``"health"``, ``"probe"`` or
        ``"not_found"``.
    """
    if path in SSE_PATHS:
        return "sse"
    if path == MCP_PATH:
        return "mcp"
    if path == HEALTH_PATH:
        return "health"
    # Some integrations test connectivity by POSTing to their configured stream URL.
    if method == "POST" and path.endswith("/sse"):
        return "probe"
    return "not_found"


class GatewayFrontDoor:
    """Authenticate every HTTP request before anything else sees it."""

    def __init__(self, app: ASGIApp, shared_secret: str) -> None:
        """Initialize the middleware.

        Args:
            app: The downstream ASGI application.
            shared_secret: Secret callers must present. Empty rejects everyone.
        """
        self.app = app
        self.shared_secret = shared_secret

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        provided = extract_secret(
            request.query_params.get("secret"),
            request.headers.get("authorization"),
        )
        try:
            verify_shared_secret(provided, self.shared_secret)
        except AuthenticationError as e:
            logger.info("auth_rejected", method=request.method, path=request.url.path)
            response = PlainTextResponse(e.message, status_code=401)
            await response(scope, receive, send)
            return

        if request.method == "OPTIONS":
            response = Response(status_code=200, headers=preflight_headers(request.headers.get("origin")))
            await response(scope, receive, send)
            return

        route = resolve_route(request.method, request.url.path)

        if route == "probe":
            await Response(status_code=200)(scope, receive, send)
            return

        if route == "not_found":
            await PlainTextResponse("Not found", status_code=404)(scope, receive, send)
            return

        if route == "mcp":
            async def send_with_headers(message: Message) -> None:
                if message["type"] == "http.response.start":
                    headers = MutableHeaders(scope=message)
                    for name, value in MCP_RESPONSE_HEADERS.items():
                        headers[name] = value
                await send(message)

            await self.app(scope, receive, send_with_headers)
            return

        await self.app(scope, receive, send)
