"""Custom exceptions for the Rancher HTTP client."""

from typing import Any


class RancherClientError(Exception):
    """Base exception for request execution errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "request_error",
        method: str | None = None,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.method = method
        self.endpoint = endpoint
        self.details = details or {}


class InvalidRequestError(RancherClientError):
    """The request cannot be sent as described (e.g. empty endpoint)."""

    def __init__(
        self,
        message: str = "Doing request: URL is empty",
        method: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_type="invalid_request_error",
            method=method,
            endpoint=endpoint,
        )


class InvalidClientTypeError(RancherClientError):
    """The client handed to a request does not provide the expected capability."""

    def __init__(self, client: Any, expected: str = "RancherHttpClient") -> None:
        super().__init__(
            message=(
                f"Doing request: invalid rancher client type "
                f"{type(client).__name__!r}, expected {expected}"
            ),
            error_type="invalid_client_type_error",
            details={"client_type": type(client).__name__, "expected": expected},
        )


class RequestSerializationError(RancherClientError):
    """The request body could not be marshalled to JSON."""

    def __init__(
        self,
        cause: Exception,
        method: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message=f"Doing request: error marshalling body: {cause}",
            error_type="serialization_error",
            method=method,
            endpoint=endpoint,
        )


class RequestExecutionError(RancherClientError):
    """The network call failed (DNS, connect, TLS handshake, timeout)."""

    def __init__(
        self,
        message: str,
        method: str | None = None,
        endpoint: str | None = None,
        error_type: str = "transport_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_type=error_type,
            method=method,
            endpoint=endpoint,
            details=details,
        )


class TooManyRedirectsError(RequestExecutionError):
    """The server issued more redirects than the configured ceiling."""

    def __init__(
        self,
        max_redirects: int,
        method: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message=f"Stopped after {max_redirects} redirects",
            method=method,
            endpoint=endpoint,
            error_type="too_many_redirects_error",
            details={"max_redirects": max_redirects},
        )
        self.max_redirects = max_redirects


class ResponseReadError(RancherClientError):
    """The response body could not be fully read."""

    def __init__(
        self,
        cause: Exception,
        status_code: int | None = None,
        method: str | None = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(
            message=f"Reading response: {cause}",
            error_type="response_read_error",
            method=method,
            endpoint=endpoint,
            details={"status_code": status_code},
        )


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass
