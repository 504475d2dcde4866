"""Global dependencies for the application."""

from typing import Annotated

import httpx
from fastapi import Depends, Request

from trello_gateway.config import Settings
from trello_gateway.gateway.client import TrelloClient, TrelloCredentials
from trello_gateway.mcp_transport.service import DispatchContext
from trello_gateway.mcp_transport.session import SessionManager
from trello_gateway.registry import create_registry


def get_settings_from_app(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


async def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency to get the global shared HTTP client.

    This client is initialized in main.py lifespan and shared across requests
    to enable connection pooling (keep-alive).

    Args:
        request: The FastAPI request object.

    Returns:
        The global httpx.AsyncClient instance.
    """
    return request.app.state.http_client


async def get_trello_client(
    settings: Annotated[Settings, Depends(get_settings_from_app)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> TrelloClient:
    """Build a Trello client from the configured credentials."""
    credentials = TrelloCredentials(
        api_key=settings.TRELLO_API_KEY,
        api_token=settings.TRELLO_TOKEN,
        base_url=settings.TRELLO_API_BASE,
    )
    return TrelloClient(http_client, credentials, timeout=settings.TRELLO_TIMEOUT_SECONDS)


async def get_dispatch_context(
    settings: Annotated[Settings, Depends(get_settings_from_app)],
    client: Annotated[TrelloClient, Depends(get_trello_client)],
) -> DispatchContext:
    """Fresh registry binding for one connection or one single-shot request."""
    return DispatchContext(
        registry=create_registry(),
        client=client,
        server_name=settings.APP_NAME,
        server_version=settings.APP_VERSION,
    )


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions
