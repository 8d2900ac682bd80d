"""Declarative request descriptors.

A Request describes one API call independently of the transport that
will carry it: where to send it, how, with what body, and which types the
success and error payloads decode into.

Usage:
    class UserProfile(BaseModel):
        id: str
        name: str

    class APIError(BaseModel):
        code: int
        message: str

    def get_user(user_id: str) -> Request[UserProfile, APIError]:
        return Request(
            path=f"users/{user_id}",
            success_type=UserProfile,
            error_type=APIError,
        )

    profile = await get_user("42").execute()
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Generic, Mapping, TypeVar

from . import codec
from .response import HTTPMethod
from .retry import RetryPolicy
from .transport import RequestTransport

if TYPE_CHECKING:
    from .executor import RequestExecutor

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Params:
    """Body built from an encodable value (model, dataclass, dict, ...)."""

    value: Any

    def encode(self) -> bytes:
        return codec.encode(self.value)


@dataclass(frozen=True)
class RawJSON:
    """Body that is already serialized JSON."""

    data: bytes

    def encode(self) -> bytes:
        return self.data


RequestBody = Params | RawJSON


@dataclass(frozen=True)
class Request(Generic[T, E]):
    """Immutable description of one API call.

    Attributes:
        path: Backend address (URL path for REST, document path for a
            document store)
        method: HTTP method (default GET)
        body: Optional Params or RawJSON body
        headers: Optional per-request headers
        success_type: Type the 2xx payload decodes into
        error_type: Type a backend error payload decodes into. None means
            error bodies are never decoded.
        transport: Optional transport used instead of the registry's
    """

    path: str
    method: HTTPMethod = HTTPMethod.GET
    body: RequestBody | None = None
    headers: Mapping[str, str] | None = None
    success_type: Any = Any
    error_type: Any = None
    transport: RequestTransport | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.method, HTTPMethod):
            object.__setattr__(self, "method", HTTPMethod(str(self.method).upper()))
        if self.headers is not None:
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def encoded_body(self) -> bytes | None:
        """Serialize the body for dispatch."""
        if self.body is None:
            return None
        return self.body.encode()

    async def execute(
        self,
        retry: RetryPolicy = RetryPolicy.DEFAULT,
        executor: "RequestExecutor | None" = None,
    ) -> T:
        """Execute this request.

        Args:
            retry: Retry policy (default: 3 attempts, 0.5s base delay)
            executor: Executor to run on (default: the process-wide one)

        Returns:
            The decoded success value

        Raises:
            ExecutionError: One of BackendError, ServerError,
                DecodingFailedError, NetworkError, ConfigurationMissingError
        """
        from .executor import default_executor

        return await (executor or default_executor).execute(self, retry)
