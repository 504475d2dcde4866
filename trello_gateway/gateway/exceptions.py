"""Exceptions raised by the Trello invocation client.

None of these carry the remote response body: callers only ever see the
HTTP status (when there is one) and a generic message.
"""

from trello_gateway.auth.exceptions import MCPGatewayError


class RemoteServiceError(MCPGatewayError):
    """Base exception for failed calls to the Trello API."""
    pass


class RemoteInvocationError(RemoteServiceError):
    """Raised when Trello answers with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code returned by Trello.
    """

    def __init__(self, status_code: int):
        super().__init__(
            message=f"Trello API request failed with status {status_code}",
            code="REMOTE_ERROR"
        )
        self.status_code = status_code


class RemoteUnavailableError(RemoteServiceError):
    """Raised when Trello cannot be reached (DNS, refused connection, timeout)."""

    def __init__(self):
        super().__init__(
            message="Trello API request failed: service unreachable",
            code="REMOTE_UNAVAILABLE"
        )


class RemoteResponseError(RemoteServiceError):
    """Raised when a successful Trello response is not valid JSON.

    Attributes:
        status_code: HTTP status code of the unparseable response.
    """

    def __init__(self, status_code: int):
        super().__init__(
            message=f"Trello API returned an unreadable response (status {status_code})",
            code="REMOTE_BAD_RESPONSE"
        )
        self.status_code = status_code
