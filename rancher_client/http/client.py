"""Rancher HTTP client: connection policy, verbs and request execution.

Every call builds its own TLS context, transport and ``httpx.AsyncClient``;
nothing mutable is shared between concurrent calls on the same client.
Redirects are followed by hand so the bearer token can be re-applied on
every hop, including cross-origin ones where httpx would drop it.
"""

import asyncio
import ssl
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import httpx

from rancher_client.core.exceptions import (
    InvalidRequestError,
    RequestExecutionError,
    RequestSerializationError,
    ResponseReadError,
    TooManyRedirectsError,
)
from rancher_client.core.interfaces import RancherRequest
from rancher_client.core.logging import get_logger

from .codec import marshal_body, unmarshal_body
from .headers import (
    AUTHORIZATION,
    bearer,
    extract_response_headers,
    merge_headers,
    redact_headers,
)
from .tls import build_ssl_context
from .transport import build_transport


if TYPE_CHECKING:
    from .request import RancherHttpRequest


logger = get_logger(__name__)

TransportFactory = Callable[[ssl.SSLContext, str], httpx.AsyncBaseTransport]

DEFAULT_MAX_REDIRECTS = 10
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class RancherResponse:
    """Outcome of a call that reached the server.

    4xx and 5xx statuses are ordinary responses here; interpreting them is
    up to the caller.
    """

    status_code: int
    reason_phrase: str
    headers: dict[str, str]
    content: bytes
    elapsed_ms: float
    redirects: int = 0

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        return unmarshal_body(self.content)


@dataclass(frozen=True)
class RancherHttpClient:
    """Connection-level configuration and the four verb operations.

    Args:
        api_url: Base URL of the management API
        ca_cert: PEM bundle appended to the trust store
        ignore_system_ca: Start from an empty trust store
        insecure: Disable certificate verification, whatever the trust store
        token: Bearer credential; empty means unauthenticated
        max_redirects: Ceiling on redirect hops per call
        timeout: Seconds allowed for a whole call, redirects included
        transport_factory: Builds the transport for a call; tests swap in an
            ``httpx.MockTransport`` here
    """

    api_url: str
    ca_cert: str = ""
    ignore_system_ca: bool = False
    insecure: bool = False
    token: str = field(default="", repr=False)
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    timeout: float = DEFAULT_TIMEOUT
    transport_factory: TransportFactory = field(
        default=build_transport, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not self.api_url:
            raise ValueError("api_url is required")
        if self.max_redirects < 0:
            raise ValueError(f"max_redirects must be >= 0, got {self.max_redirects}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

        if self.insecure:
            logger.warning(
                "ssl_verification_disabled",
                api_url=self.api_url,
                security_warning=True,
                category="tls",
            )

    def url_for(self, path: str) -> str:
        """Join ``path`` onto ``api_url``; absolute URLs are returned unchanged."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.api_url.rstrip('/')}/{path.lstrip('/')}"

    async def create(self, request: RancherRequest) -> None:
        await request.do_request(self)

    async def read(self, request: RancherRequest) -> bytes:
        return await request.do_request(self)

    async def update(self, request: RancherRequest) -> None:
        await request.do_request(self)

    async def delete(self, request: RancherRequest) -> None:
        await request.do_request(self)

    async def execute(self, request: "RancherHttpRequest") -> RancherResponse:
        """Send ``request`` and return the full response.

        Raises:
            InvalidRequestError: Empty or malformed endpoint
            RequestSerializationError: Body is not JSON serializable
            RequestExecutionError: Transport failure or timeout
            TooManyRedirectsError: More redirects than ``max_redirects``
            ResponseReadError: Body could not be read after the status line
        """
        start = time.perf_counter()
        method = request.method.upper()
        endpoint = request.endpoint
        log = logger.bind(method=method, endpoint=endpoint, category="http")

        request.validate()

        try:
            url = httpx.URL(endpoint)
        except httpx.InvalidURL as e:
            log.error(
                "http_request_failed",
                error_type="invalid_request_error",
                error=str(e),
            )
            raise InvalidRequestError(
                f"Doing request: {e}", method=method, endpoint=endpoint
            ) from e

        try:
            content = marshal_body(request.body)
        except (TypeError, ValueError) as e:
            log.error(
                "http_request_failed",
                error_type="serialization_error",
                error=str(e),
            )
            raise RequestSerializationError(
                e, method=method, endpoint=endpoint
            ) from e

        headers = dict(request.headers)
        if content is not None and not any(
            key.lower() == "content-type" for key in headers
        ):
            headers["Content-Type"] = "application/json"

        log.debug(
            "http_request_prepared",
            headers=redact_headers(headers),
            has_body=content is not None,
            body_size=len(content) if content is not None else 0,
            authenticated=bool(self.token),
            max_redirects=self.max_redirects,
            timeout=self.timeout,
        )

        ssl_context = build_ssl_context(
            ca_cert=self.ca_cert,
            ignore_system_ca=self.ignore_system_ca,
            insecure=self.insecure,
        )
        try:
            transport = self.transport_factory(ssl_context, endpoint)
        except (ValueError, httpx.InvalidURL) as e:
            # malformed proxy settings surface while building the transport
            log.error(
                "http_request_failed",
                error_type="transport_error",
                error_class=type(e).__name__,
                error=str(e),
            )
            raise RequestExecutionError(
                f"Doing request: {e}", method=method, endpoint=endpoint
            ) from e

        try:
            async with asyncio.timeout(self.timeout):
                async with httpx.AsyncClient(
                    transport=transport,
                    timeout=self.timeout,
                    follow_redirects=False,
                    trust_env=False,
                ) as client:
                    outgoing = client.build_request(method, url, content=content)
                    merge_headers(outgoing, headers, self.token)
                    return await self._send(client, outgoing, start, log)
        except TimeoutError as e:
            log.error(
                "http_request_failed",
                error_type="timeout_error",
                error=f"timed out after {self.timeout}s",
            )
            raise RequestExecutionError(
                f"Doing request: timed out after {self.timeout}s",
                method=method,
                endpoint=endpoint,
                error_type="timeout_error",
            ) from e
        except httpx.TimeoutException as e:
            log.error(
                "http_request_failed",
                error_type="timeout_error",
                error_class=type(e).__name__,
                error=str(e),
            )
            raise RequestExecutionError(
                f"Doing request: {e}",
                method=method,
                endpoint=endpoint,
                error_type="timeout_error",
            ) from e
        except httpx.HTTPError as e:
            log.error(
                "http_request_failed",
                error_type="transport_error",
                error_class=type(e).__name__,
                error=str(e),
            )
            raise RequestExecutionError(
                f"Doing request: {e}", method=method, endpoint=endpoint
            ) from e
        except asyncio.CancelledError:
            log.error("http_request_cancelled")
            raise

    async def _send(
        self,
        client: httpx.AsyncClient,
        outgoing: httpx.Request,
        start: float,
        log: Any,
    ) -> RancherResponse:
        hops = 0
        while True:
            response = await client.send(outgoing, stream=True)
            try:
                next_request = response.next_request
                if next_request is not None:
                    if hops >= self.max_redirects:
                        log.error(
                            "http_request_failed",
                            error_type="too_many_redirects_error",
                            error=f"Stopped after {self.max_redirects} redirects",
                            status_code=response.status_code,
                        )
                        raise TooManyRedirectsError(
                            self.max_redirects,
                            method=outgoing.method,
                            endpoint=str(outgoing.url),
                        )
                    hops += 1
                    if self.token:
                        next_request.headers[AUTHORIZATION] = bearer(self.token)
                    log.debug(
                        "http_redirect_followed",
                        hop=hops,
                        status_code=response.status_code,
                        location=str(next_request.url),
                    )
                    outgoing = next_request
                    continue

                try:
                    body = await response.aread()
                except httpx.HTTPError as e:
                    log.error(
                        "http_request_failed",
                        error_type="response_read_error",
                        error=str(e),
                        status_code=response.status_code,
                    )
                    raise ResponseReadError(
                        e,
                        status_code=response.status_code,
                        method=outgoing.method,
                        endpoint=str(outgoing.url),
                    ) from e
            finally:
                await response.aclose()

            elapsed_ms = round((time.perf_counter() - start) * 1000, 3)
            response_headers = extract_response_headers(response)
            log.debug(
                "http_response_received",
                elapsed_ms=elapsed_ms,
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                headers=redact_headers(response_headers),
                body_size=len(body),
                redirects=hops,
            )
            return RancherResponse(
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
                headers=response_headers,
                content=body,
                elapsed_ms=elapsed_ms,
                redirects=hops,
            )
