"""Custom exceptions for authentication and the gateway error hierarchy."""


class MCPGatewayError(Exception):
    """Base exception for all Trello MCP gateway errors."""

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class AuthenticationError(MCPGatewayError):
    """Raised when the shared secret is missing or does not match."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, code="UNAUTHORIZED")
