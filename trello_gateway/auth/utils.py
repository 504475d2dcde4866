"""Shared-secret extraction and comparison."""

import hmac

from .exceptions import AuthenticationError


def get_token_from_header(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Args:
        authorization: Authorization header value, if any.

    Returns:
        The token, or None when the header is missing or not a bearer token.
    """
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


def extract_secret(query_secret: str | None, authorization: str | None) -> str | None:
    """Pick the caller's secret, preferring the ``secret`` query parameter."""
    if query_secret:
        return query_secret
    return get_token_from_header(authorization)


def secrets_match(provided: str, expected: str) -> bool:
    """Compare two secrets without leaking where they first differ.

    Lengths are checked first; equal-length values are then compared over
    every byte regardless of mismatches.
    """
    provided_bytes = provided.encode("utf-8")
    expected_bytes = expected.encode("utf-8")
    if len(provided_bytes) != len(expected_bytes):
        return False
    return hmac.compare_digest(provided_bytes, expected_bytes)


def verify_shared_secret(provided: str | None, expected: str | None) -> None:
    """Check a caller's secret against the configured one.

    Args:
        provided: Secret supplied by the caller.
        expected: Configured shared secret.

    Raises:
        AuthenticationError: If either is missing or they differ. The error
            never says which.
    """
    if not provided or not expected:
        raise AuthenticationError()
    if not secrets_match(provided, expected):
        raise AuthenticationError()
