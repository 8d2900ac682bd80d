"""Custom exceptions for the callwire client.

Two families live here:

- ``TransportError`` and its subclasses are raised by transport
  implementations when a call fails before a response exists.
- ``ExecutionError`` and its five subclasses are the only errors that
  ``execute`` ever surfaces. Exactly one of them describes any failed call.
"""

from typing import Any, ClassVar, Generic, TypeVar

E = TypeVar("E")


class CallwireError(Exception):
    """Base exception for all callwire errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


# Transport-level errors


class TransportError(CallwireError):
    """A transport could not produce a response."""
    pass


class TransportConnectionError(TransportError):
    """Cannot reach the backend (connect failure, timeout, protocol error)."""
    pass


class LambdaInvocationError(TransportError):
    """Lambda invocation was rejected (missing function, access denied, ...)."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class PathValidationError(TransportError):
    """Path does not address a single document."""

    def __init__(self, path: str):
        super().__init__(
            f"The path '{path}' is invalid. Document paths must have an "
            "even number of segments."
        )
        self.path = path


class MissingBodyError(TransportError):
    """A write request arrived without a body."""

    def __init__(self) -> None:
        super().__init__("The request body is missing.")


class InvalidDocumentError(TransportError):
    """Document body is not a JSON object."""

    def __init__(self, message: str = "Document data must be a JSON object."):
        super().__init__(message)


class StorageError(TransportError):
    """Object storage operation failed."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class ObjectTooLargeError(StorageError):
    """Remote object exceeds the configured download limit."""

    def __init__(self, path: str, size: int, limit: int):
        super().__init__(
            f"Object '{path}' is {size} bytes, exceeding the {limit} byte download limit",
            code="ObjectTooLarge",
        )
        self.path = path
        self.size = size
        self.limit = limit


# Execution errors


class ExecutionError(CallwireError, Generic[E]):
    """Terminal failure of a request execution."""

    kind: ClassVar[str] = ""


class BackendError(ExecutionError[E]):
    """Backend returned an error body that decoded into the request's error type."""

    kind = "backend"

    def __init__(self, error: E, status_code: int, request_id: str | None = None):
        super().__init__(f"API Error ({status_code}): {error}")
        self.error = error
        self.status_code = status_code
        self.request_id = request_id

    def __str__(self) -> str:
        if self.request_id:
            return f"{self.message} (request_id: {self.request_id})"
        return self.message


class ServerError(ExecutionError[Any]):
    """Backend returned a non-2xx status with an undecodable body."""

    kind = "server_error"

    def __init__(self, status_code: int, payload: bytes, request_id: str | None = None):
        super().__init__(
            f"Server Error: received status code {status_code}, "
            "but could not decode error details."
        )
        self.status_code = status_code
        self.payload = payload
        self.request_id = request_id

    def __str__(self) -> str:
        if self.request_id:
            return f"{self.message} (request_id: {self.request_id})"
        return self.message


class DecodingFailedError(ExecutionError[Any]):
    """A 2xx body did not decode into the request's success type."""

    kind = "decoding_failed"

    def __init__(self, payload: bytes, cause: BaseException):
        super().__init__(f"Decoding Failed: {cause}")
        self.payload = payload
        self.cause = cause


class NetworkError(ExecutionError[Any]):
    """The transport call failed before producing a response."""

    kind = "network"

    def __init__(self, cause: BaseException):
        super().__init__(f"Network Error: {cause}")
        self.cause = cause


class ConfigurationMissingError(ExecutionError[Any]):
    """No transport was configured before a request was executed."""

    kind = "configuration_missing"

    def __init__(self) -> None:
        super().__init__("Configuration Error: network transport not initialized.")
