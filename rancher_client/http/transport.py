"""Transport construction bound to a TLS context and the proxy environment."""

import os
import ssl

import httpx

from rancher_client.core.logging import get_logger


logger = get_logger(__name__)


def _getenv(name: str) -> str | None:
    return os.environ.get(name.upper()) or os.environ.get(name.lower())


def _bypass_proxy(host: str, no_proxy: str | None) -> bool:
    """Return True when ``host`` matches an entry of a NO_PROXY list."""
    if not no_proxy or not host:
        return False

    host = host.lower().rstrip(".")
    for entry in no_proxy.split(","):
        entry = entry.strip().lower()
        if not entry:
            continue
        if entry == "*":
            return True
        # drop an explicit port, we match on host only
        if ":" in entry and not entry.startswith("["):
            entry = entry.rsplit(":", 1)[0]
        entry = entry.lstrip(".")
        if host == entry or host.endswith("." + entry):
            return True
    return False


def get_proxy_url(url: str | httpx.URL) -> str | None:
    """Get the proxy URL for ``url`` from environment variables.

    HTTPS targets prefer HTTPS_PROXY, plain HTTP targets prefer HTTP_PROXY;
    ALL_PROXY is the fallback for both. NO_PROXY disables proxying for
    matching hosts.

    Returns:
        str or None: Proxy URL if one applies to this target
    """
    target = httpx.URL(url)

    if _bypass_proxy(target.host, _getenv("NO_PROXY")):
        return None

    if target.scheme == "https":
        proxy_url = _getenv("HTTPS_PROXY") or _getenv("ALL_PROXY")
    else:
        proxy_url = _getenv("HTTP_PROXY") or _getenv("ALL_PROXY")

    if proxy_url:
        logger.debug(
            "proxy_configured",
            proxy_url=proxy_url,
            target_host=target.host,
            operation="get_proxy_url",
            category="http",
        )

    return proxy_url


def build_transport(
    ssl_context: ssl.SSLContext,
    url: str | httpx.URL,
) -> httpx.AsyncBaseTransport:
    """Create the transport for a call to ``url``.

    The proxy is picked once, from the initial target. Redirect hops of the
    same call reuse it, even when they lead to another scheme or to a host
    NO_PROXY would exempt.

    Args:
        ssl_context: TLS configuration used for every connection
        url: Target URL, used to pick the proxy from the environment

    Returns:
        Configured httpx.AsyncHTTPTransport
    """
    return httpx.AsyncHTTPTransport(
        verify=ssl_context,
        proxy=get_proxy_url(url),
    )
