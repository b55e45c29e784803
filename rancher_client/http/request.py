"""Self-executing request against a :class:`RancherHttpClient`."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from rancher_client.core.exceptions import InvalidClientTypeError, InvalidRequestError
from rancher_client.core.interfaces import RancherClient, RancherRequest
from rancher_client.core.logging import get_logger

from .client import RancherHttpClient


logger = get_logger(__name__)


@dataclass(frozen=True)
class RancherHttpRequest(RancherRequest):
    """One HTTP call: method, absolute endpoint, optional JSON body and headers.

    Instances are single use and carry no state between calls. Caller headers
    must not include ``Authorization``; the client injects it from its token.
    """

    method: str
    endpoint: str
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", dict(self.headers))

    def validate(self) -> None:
        """Check the request can be sent, before any I/O happens."""
        if not self.endpoint:
            logger.error(
                "request_endpoint_missing",
                method=self.method,
                category="http",
            )
            raise InvalidRequestError(method=self.method, endpoint=self.endpoint)

    async def do_request(self, client: RancherClient) -> bytes:
        if not isinstance(client, RancherHttpClient):
            logger.error(
                "request_invalid_client_type",
                client_type=type(client).__name__,
                method=self.method,
                endpoint=self.endpoint,
                category="http",
            )
            raise InvalidClientTypeError(client)

        self.validate()
        response = await client.execute(self)
        return response.content
