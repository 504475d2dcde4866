"""HTTP client for forwarding tool calls to the Trello REST API."""

import time
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import RemoteInvocationError, RemoteUnavailableError, RemoteResponseError


logger = structlog.get_logger("trello")

DEFAULT_API_BASE = "https://api.trello.com/1"
ALLOWED_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class TrelloCredentials(BaseModel):
    """Long-lived Trello credentials appended to every outbound call.

    Attributes:
        api_key: Trello API key.
        api_token: Trello user token.
        base_url: Root of the Trello REST API.
    """

    api_key: str = Field(..., repr=False)
    api_token: str = Field(..., repr=False)
    base_url: str = DEFAULT_API_BASE

    model_config = ConfigDict(frozen=True)


class TrelloClient:
    """Single chokepoint for authenticated Trello requests.

    Every tool handler receives an instance of this class (or a test double
    with the same ``invoke`` signature); no handler talks to httpx directly.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        credentials: TrelloCredentials,
        timeout: float | None = None,
    ) -> None:
        """Bind the client to a shared HTTP connection pool and credentials.

        Args:
            http_client: Shared async HTTP client.
            credentials: Trello key, token and base URL.
            timeout: Optional per-request timeout in seconds.
        """
        self._http = http_client
        self._credentials = credentials
        self._timeout = timeout

    def build_url(self, path: str) -> str:
        """Join ``path`` to the base URL and append the credential parameters.

        Args:
            path: Partial resource path, optionally with its own query string.

        Returns:
            Absolute URL carrying ``key`` and ``token`` query parameters.
        """
        url = f"{self._credentials.base_url.rstrip('/')}{path}"
        separator = "&" if "?" in path else "?"
        auth = httpx.QueryParams(
            {"key": self._credentials.api_key, "token": self._credentials.api_token}
        )
        return f"{url}{separator}{auth}"

    async def invoke(self, path: str, method: str = "GET", body: dict[str, Any] | None = None) -> Any:
        """Perform exactly one Trello request and return its parsed JSON body.

        Args:
            path: Partial resource path without credentials.
            method: One of GET, POST, PUT, DELETE.
            body: Optional JSON payload.

        Returns:
            The parsed JSON response, unmodified.

        Raises:
            ValueError: If ``method`` is not supported.
            RemoteInvocationError: If Trello returns a non-2xx status.
            RemoteUnavailableError: If the request fails at the transport level.
            RemoteResponseError: If a 2xx response is not valid JSON.
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        log_path = path.split("?", 1)[0]
        started = time.perf_counter()

        try:
            response = await self._http.request(
                method,
                self.build_url(path),
                json=body,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            # Exception text can include the request URL, which carries credentials.
            logger.warning(
                "trello_request_unavailable",
                method=method,
                path=log_path,
                error_type=type(e).__name__,
            )
            raise RemoteUnavailableError() from None

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "trello_request",
            method=method,
            path=log_path,
            status=response.status_code,
            duration_ms=duration_ms,
        )

        if not response.is_success:
            raise RemoteInvocationError(status_code=response.status_code)

        if response.status_code == 204:
            return None

        try:
            return response.json()
        except ValueError:
            raise RemoteResponseError(status_code=response.status_code) from None
