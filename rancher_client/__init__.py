"""Outbound HTTP request engine for the Rancher management API."""

from ._version import __version__
from .core.exceptions import (
    ConfigurationError,
    InvalidClientTypeError,
    InvalidRequestError,
    RancherClientError,
    RequestExecutionError,
    RequestSerializationError,
    ResponseReadError,
    TooManyRedirectsError,
)
from .core.interfaces import RancherClient, RancherRequest
from .http.client import RancherHttpClient, RancherResponse
from .http.request import RancherHttpRequest


__all__ = [
    "__version__",
    "ConfigurationError",
    "InvalidClientTypeError",
    "InvalidRequestError",
    "RancherClient",
    "RancherClientError",
    "RancherHttpClient",
    "RancherHttpRequest",
    "RancherRequest",
    "RancherResponse",
    "RequestExecutionError",
    "RequestSerializationError",
    "ResponseReadError",
    "TooManyRedirectsError",
]
