"""Header helpers shared by the request and response logging paths."""

from collections.abc import Mapping

import httpx


AUTHORIZATION = "Authorization"

SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "proxy-authorization",
        "cookie",
        "set-cookie",
        "x-api-key",
        "x-auth-token",
    }
)


def bearer(token: str) -> str:
    return f"Bearer {token}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Redact sensitive headers for safe logging.

    Header names are preserved; values of credential-carrying headers are
    replaced with ``[REDACTED]``. The input is not modified.
    """
    return {
        key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def extract_response_headers(response: httpx.Response) -> dict[str, str]:
    """Extract response headers as a lowercase dict.

    Repeated headers are joined with ``", "``.
    """
    headers: dict[str, str] = {}
    for name, value in response.headers.multi_items():
        name = name.lower()
        if name in headers:
            headers[name] = f"{headers[name]}, {value}"
        else:
            headers[name] = value
    return headers


def merge_headers(
    request: httpx.Request,
    headers: Mapping[str, str],
    token: str,
) -> None:
    """Merge caller headers into ``request`` and apply the bearer token.

    Caller headers are added first; the Authorization header is set last so a
    configured token always wins.
    """
    for key, value in headers.items():
        request.headers[key] = value

    if token:
        request.headers[AUTHORIZATION] = bearer(token)
