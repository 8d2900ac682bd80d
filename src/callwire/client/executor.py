"""Request execution engine.

Runs a declarative Request through a transport and turns whatever comes
back into either the decoded success value or exactly one ExecutionError:

    resolve transport -> dispatch -> classify -> decode | retry | report

- 2xx responses decode into the request's success type; a body that does
  not decode raises DecodingFailedError.
- Other statuses decode into the request's error type (BackendError) or,
  failing that, raise ServerError.
- Transport failures raise NetworkError.
- NetworkError and 5xx ServerError are retried per RetryPolicy.

The terminal error is handed to the registry's error listener once, in a
detached task, before it is raised to the caller.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from . import codec
from .exceptions import (
    BackendError,
    ConfigurationMissingError,
    DecodingFailedError,
    ExecutionError,
    NetworkError,
    ServerError,
)
from .registry import TransportRegistry, default_registry
from .request import Request
from .response import Response
from .retry import RetryPolicy
from .transport import ErrorListener, RequestTransport

logger = logging.getLogger("callwire")

T = TypeVar("T")
E = TypeVar("E")


class RequestExecutor:
    """Executes declarative requests against a transport registry.

    Each ``execute`` call is an independent coroutine; executions share
    only the registry and the transport objects.

    Usage:
        executor = RequestExecutor(registry)
        user = await executor.execute(get_user("42"))

        # No retries
        await executor.execute(update_user(profile), RetryPolicy.NONE)
    """

    def __init__(
        self,
        registry: TransportRegistry | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ):
        """Initialize the executor.

        Args:
            registry: Registry to resolve transports from. Defaults to the
                process-wide registry.
            sleep: Coroutine function used for retry delays (defaults to
                ``asyncio.sleep``).
        """
        self.registry = registry or default_registry
        self._sleep = sleep
        self._notifications: set[asyncio.Task] = set()

    async def execute(
        self,
        request: Request[T, E],
        retry: RetryPolicy = RetryPolicy.DEFAULT,
    ) -> T:
        """Execute ``request`` with retry.

        Args:
            request: Declarative request
            retry: Retry policy

        Returns:
            The decoded success value

        Raises:
            BackendError: Error body decoded into the request's error type
            ServerError: Non-2xx status with an undecodable body
            DecodingFailedError: 2xx body did not decode into the success type
            NetworkError: The transport failed on every attempt
            ConfigurationMissingError: No transport is configured
        """
        state = self.registry.snapshot()
        try:
            transport = request.transport if request.transport is not None else state.network
            if transport is None:
                raise ConfigurationMissingError()
            retrying = retry.retrying(sleep=self._sleep)
            return await retrying(self._attempt, transport, request)
        except ExecutionError as error:
            self._notify(state.listener, error, request.path)
            raise

    async def _attempt(self, transport: RequestTransport, request: Request[T, E]) -> T:
        """Run one dispatch and classify its outcome."""
        try:
            response = await transport.request(
                request.path,
                request.method,
                request.encoded_body(),
                request.headers,
            )
        except Exception as e:
            logger.debug(
                "%s %s failed before a response: %s", request.method.value, request.path, e
            )
            raise NetworkError(e) from e
        return self._classify(request, response)

    def _classify(self, request: Request[T, E], response: Response) -> T:
        """Decode a response or raise the matching ExecutionError."""
        if response.is_success:
            try:
                return codec.decode(response.payload, request.success_type)
            except codec.DecodeError as e:
                raise DecodingFailedError(response.payload, e) from e

        if request.error_type is not None:
            try:
                decoded = codec.decode(response.payload, request.error_type)
            except codec.DecodeError:
                pass
            else:
                raise BackendError(decoded, response.status_code, response.request_id)

        raise ServerError(response.status_code, response.payload, response.request_id)

    def _notify(self, listener: ErrorListener | None, error: ExecutionError, path: str) -> None:
        """Deliver ``error`` to the listener without awaiting it."""
        if listener is None:
            return
        task = asyncio.get_running_loop().create_task(self._deliver(listener, error, path))
        self._notifications.add(task)
        task.add_done_callback(self._notifications.discard)

    @staticmethod
    async def _deliver(listener: ErrorListener, error: ExecutionError, path: str) -> None:
        try:
            await listener.did_receive(error, path)
        except Exception:
            logger.exception("Error listener failed for %s", path)


default_executor = RequestExecutor()


async def execute(request: Request[T, E], retry: RetryPolicy = RetryPolicy.DEFAULT) -> T:
    """Execute ``request`` against the process-wide registry."""
    return await default_executor.execute(request, retry)
