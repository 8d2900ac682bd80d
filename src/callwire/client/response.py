"""Normalized response model shared by every transport.

Transports over non-HTTP backends simulate the HTTP status space:
200 for found/success, 204 for a successful delete, 404 for a miss.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class HTTPMethod(str, Enum):
    """HTTP methods a declarative request may use."""

    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Response:
    """Transport-independent result of a single request.

    Attributes:
        payload: Raw response body (may be empty).
        status_code: HTTP status code, real or simulated by the transport.
        headers: Response headers (read-only).
    """

    payload: bytes = b""
    status_code: int = 200
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def is_success(self) -> bool:
        """True for statuses in the 2xx range."""
        return 200 <= self.status_code <= 299

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def request_id(self) -> str | None:
        """Backend request id, if the response carries one."""
        for name in ("x-request-id", "x-amzn-requestid", "x-amz-request-id"):
            value = self.header(name)
            if value:
                return value
        return None
