"""Core interfaces for the Rancher HTTP client.

A request knows how to execute itself against a client; a client exposes the
four verb-shaped operations. Either side can be swapped (a fake client in
tests, a different request flavour) without the other knowing the concrete
type.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


__all__ = [
    "RancherClient",
    "RancherRequest",
]


@runtime_checkable
class RancherClient(Protocol):
    """Capability set a request needs from a client."""

    async def create(self, request: "RancherRequest") -> None:
        """Send a request that creates a resource, discarding the body."""
        ...

    async def read(self, request: "RancherRequest") -> bytes:
        """Send a request and return the raw response body."""
        ...

    async def update(self, request: "RancherRequest") -> None:
        """Send a request that updates a resource, discarding the body."""
        ...

    async def delete(self, request: "RancherRequest") -> None:
        """Send a request that deletes a resource, discarding the body."""
        ...


class RancherRequest(ABC):
    """Abstract interface for a self-executing request."""

    @abstractmethod
    async def do_request(self, client: RancherClient) -> bytes:
        """Execute this request against the given client.

        Args:
            client: Client providing the transport-level capability

        Returns:
            The complete raw response body

        Raises:
            InvalidClientTypeError: If the client is not of the expected type
            InvalidRequestError: If the request cannot be sent as described
        """
        pass
