"""Transport protocols for callwire.

This module defines the interfaces a backend adapter implements. The
REST, Lambda, and Firestore transports all conform to RequestTransport,
so declarative requests work with any of them interchangeably.
"""

from typing import Mapping, Protocol, runtime_checkable

from .response import HTTPMethod, Response


@runtime_checkable
class RequestTransport(Protocol):
    """Protocol for executing raw requests against a backend.

    Transports are responsible for:
    - Sending the encoded body and headers to the backend
    - Returning every backend answer as a Response, including 4xx/5xx
    - Simulating HTTP status codes for non-HTTP backends
    - Raising a TransportError when no response can be produced

    Implementations must be safe to call from many concurrent executions.
    Retries are handled by the execution engine, not by transports.
    """

    async def request(
        self,
        path: str,
        method: HTTPMethod,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Execute a request and return the normalized response.

        Args:
            path: Backend address ("/users/1" for REST, "users/1" for a
                document store)
            method: HTTP method
            body: Pre-encoded JSON body
            headers: Per-request headers

        Returns:
            Response with payload, status code, and headers

        Raises:
            TransportError: If the backend could not be reached or the
                request could not be sent
        """
        ...


@runtime_checkable
class StorageTransport(Protocol):
    """Protocol for blob storage backends.

    Each operation is a single atomic call; no resumable transfers.
    """

    async def upload(self, data: bytes, path: str) -> str:
        """Store ``data`` at ``path`` and return a URL for downloading it."""
        ...

    async def download(self, path: str) -> bytes:
        """Fetch the object at ``path``.

        Raises:
            ObjectTooLargeError: If the object exceeds the transport's limit
            StorageError: For any other backend failure
        """
        ...

    async def delete(self, path: str) -> None:
        """Delete the object at ``path``.

        Raises:
            StorageError: If the backend rejects the delete
        """
        ...


@runtime_checkable
class ErrorListener(Protocol):
    """Receives every terminal execution error.

    Useful for logging, analytics, or reacting to expired sessions (401).
    Called fire-and-forget; its outcome never affects the caller.
    """

    async def did_receive(self, error: Exception, path: str) -> None:
        ...
