"""callwire client.

This package executes declarative, typed API calls against an
interchangeable backend. Supported transports:

HTTP Transport (default):
    REST API over httpx, with optional OAuth client credentials.

Lambda Transport:
    Direct Lambda invocation using AWS credentials and the API Gateway
    proxy format.

Firestore Transport:
    Document CRUD on Cloud Firestore.
    Requires: pip install callwire[firestore]

Usage:
    from callwire.client import Request, configure_from_config

    configure_from_config()
    profile = await Request(
        path="users/42",
        success_type=UserProfile,
        error_type=APIError,
    ).execute()
"""

from .codec import DecodeError, EncodeError
from .config import CallwireConfig
from .exceptions import (
    BackendError,
    CallwireError,
    ConfigurationMissingError,
    DecodingFailedError,
    ExecutionError,
    InvalidDocumentError,
    LambdaInvocationError,
    MissingBodyError,
    NetworkError,
    ObjectTooLargeError,
    PathValidationError,
    ServerError,
    StorageError,
    TransportConnectionError,
    TransportError,
)
from .executor import RequestExecutor, default_executor, execute
from .factory import configure_from_config, create_storage_transport, create_transport
from .firestore import FirestoreTransport
from .http import HTTPTransport
from .lambda_transport import LambdaTransport
from .listeners import LoggingErrorListener
from .registry import RegistryState, TransportRegistry, configure, default_registry
from .request import Params, RawJSON, Request, RequestBody
from .response import HTTPMethod, Response
from .retry import RetryPolicy, is_retryable
from .s3_storage import S3StorageTransport
from .transport import ErrorListener, RequestTransport, StorageTransport

__all__ = [
    # Requests and execution
    "Request",
    "RequestBody",
    "Params",
    "RawJSON",
    "HTTPMethod",
    "Response",
    "RetryPolicy",
    "RequestExecutor",
    "default_executor",
    "execute",
    "is_retryable",
    # Registry and configuration
    "CallwireConfig",
    "TransportRegistry",
    "RegistryState",
    "configure",
    "configure_from_config",
    "default_registry",
    # Transport protocols and factory
    "RequestTransport",
    "StorageTransport",
    "ErrorListener",
    "create_transport",
    "create_storage_transport",
    # Transport implementations
    "HTTPTransport",
    "LambdaTransport",
    "FirestoreTransport",
    "S3StorageTransport",
    "LoggingErrorListener",
    # Exceptions
    "CallwireError",
    "ExecutionError",
    "BackendError",
    "ServerError",
    "DecodingFailedError",
    "NetworkError",
    "ConfigurationMissingError",
    "TransportError",
    "TransportConnectionError",
    "LambdaInvocationError",
    "PathValidationError",
    "MissingBodyError",
    "InvalidDocumentError",
    "StorageError",
    "ObjectTooLargeError",
    "DecodeError",
    "EncodeError",
]
