"""Auth module initialization."""

from .exceptions import MCPGatewayError, AuthenticationError
from .utils import get_token_from_header, extract_secret, secrets_match, verify_shared_secret
from .middleware import GatewayFrontDoor, resolve_route

__all__ = [
    # Exceptions
    "MCPGatewayError",
    "AuthenticationError",
    # Utils
    "get_token_from_header",
    "extract_secret",
    "secrets_match",
    "verify_shared_secret",
    # Middleware
    "GatewayFrontDoor",
    "resolve_route",
]
