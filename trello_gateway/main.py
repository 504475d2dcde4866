import logging

import httpx
import structlog
from fastapi import FastAPI, Request
from contextlib import asynccontextmanager

from .config import Settings, get_settings
from .auth.middleware import GatewayFrontDoor
from .mcp_transport.session import SessionManager
from .mcp_transport.sse import router as mcp_sse_router
from .mcp_transport.streamable import router as mcp_http_router


def configure_logging(level: str) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the gateway application.

    Args:
        settings: Explicit settings; defaults to the environment.

    Returns:
        The FastAPI app wrapped by the authenticating front door.
    """
    settings = settings or get_settings()
    configure_logging(settings.MCP_LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Initialize global HTTP client for connection pooling
        # timeouts=None removes global default timeout, allowing per-request timeouts
        app.state.http_client = httpx.AsyncClient(timeout=None)

        yield

        # Shutdown: Drop open SSE sessions and close the HTTP client
        app.state.sessions.close_all()
        await app.state.http_client.aclose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )
    app.state.settings = settings
    app.state.sessions = SessionManager()

    @app.get("/health")
    async def health_check(request: Request):
        return {
            "status": "ok",
            "app": settings.APP_NAME,
            "sessions": len(request.app.state.sessions),
        }

    # Include routers
    app.include_router(mcp_sse_router)
    app.include_router(mcp_http_router)

    app.add_middleware(GatewayFrontDoor, shared_secret=settings.SHARED_SECRET)

    return app


app = create_app()
