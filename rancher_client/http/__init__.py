"""HTTP execution layer: trust store, transport, client and request."""

from .client import RancherHttpClient, RancherResponse
from .request import RancherHttpRequest
from .tls import build_ssl_context
from .transport import build_transport, get_proxy_url


__all__ = [
    "RancherHttpClient",
    "RancherHttpRequest",
    "RancherResponse",
    "build_ssl_context",
    "build_transport",
    "get_proxy_url",
]
