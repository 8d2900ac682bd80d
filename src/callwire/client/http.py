"""HTTP REST transport with optional OAuth.

This module implements the REST transport on top of httpx. It returns
every HTTP answer as a Response and leaves status classification and
retries to the execution engine.
"""

import logging
from typing import Mapping

import httpx
from httpx_auth import OAuth2ClientCredentials

from .config import CallwireConfig
from .exceptions import TransportConnectionError
from .response import HTTPMethod, Response

logger = logging.getLogger("callwire")

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class HTTPTransport:
    """HTTP transport with optional OAuth.

    Implements the RequestTransport protocol for REST APIs. Handles the
    OAuth2 client credentials flow when configured.

    Usage:
        transport = HTTPTransport(config)
        response = await transport.request("/users/42", HTTPMethod.GET)
        await transport.close()

    Or as async context manager:
        async with HTTPTransport(config) as transport:
            response = await transport.request("/users/42", HTTPMethod.GET)
    """

    def __init__(
        self,
        config: CallwireConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize HTTP transport.

        Args:
            config: Callwire configuration. If None, loads from environment.
            client: Optional pre-built httpx client (for testing or advanced use).
        """
        self.config = config or CallwireConfig()
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client with optional OAuth."""
        if self._client is None:
            auth = None
            if self.config.oauth_enabled:
                auth = OAuth2ClientCredentials(
                    token_url=self.config.oauth_token_url,
                    client_id=self.config.oauth_client_id,
                    client_secret=self.config.oauth_client_secret,
                    scope=self.config.oauth_scope,
                )
            self._client = httpx.AsyncClient(
                base_url=self.config.api_url,
                timeout=self.config.timeout,
                auth=auth,
            )
        return self._client

    async def __aenter__(self) -> "HTTPTransport":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - close client."""
        await self.close()

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, headers: Mapping[str, str] | None) -> httpx.Headers:
        merged = httpx.Headers(DEFAULT_HEADERS)
        if headers:
            merged.update(headers)
        return merged

    async def request(
        self,
        path: str,
        method: HTTPMethod,
        body: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send a request and return the raw HTTP answer.

        Args:
            path: API path, relative to the configured base URL
            method: HTTP method
            body: Encoded JSON body
            headers: Headers overriding the JSON defaults

        Returns:
            Response carrying the body, status and headers

        Raises:
            TransportConnectionError: On connect errors, timeouts and other
                httpx transport failures
        """
        try:
            response = await self.client.request(
                method.value,
                path,
                content=body,
                headers=self._build_headers(headers),
            )
        except httpx.ConnectError as e:
            raise TransportConnectionError(f"Cannot connect to {self.config.api_url}: {e}") from e
        except httpx.TimeoutException as e:
            raise TransportConnectionError(f"Request timeout to {self.config.api_url}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportConnectionError(f"Request to {self.config.api_url} failed: {e}") from e

        return Response(
            payload=response.content,
            status_code=response.status_code,
            headers=dict(response.headers),
        )
