"""Gateway module - authenticated calls to the Trello REST API."""

from .client import TrelloClient, TrelloCredentials, DEFAULT_API_BASE
from .exceptions import (
    RemoteServiceError,
    RemoteInvocationError,
    RemoteUnavailableError,
    RemoteResponseError,
)


__all__ = [
    # Client
    "TrelloClient",
    "TrelloCredentials",
    "DEFAULT_API_BASE",
    # Exceptions
    "RemoteServiceError",
    "RemoteInvocationError",
    "RemoteUnavailableError",
    "RemoteResponseError",
]
