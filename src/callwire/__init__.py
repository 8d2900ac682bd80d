"""callwire - Typed declarative API calls over interchangeable transports."""

from callwire.client import (
    BackendError,
    CallwireConfig,
    CallwireError,
    ConfigurationMissingError,
    DecodingFailedError,
    ExecutionError,
    HTTPMethod,
    NetworkError,
    Params,
    RawJSON,
    Request,
    RequestExecutor,
    Response,
    RetryPolicy,
    ServerError,
    TransportError,
    TransportRegistry,
    configure,
    configure_from_config,
    execute,
)

try:
    from importlib.metadata import version
    __version__ = version("callwire")
except Exception:
    __version__ = "0.1.0"  # Fallback for development

__all__ = [
    "BackendError",
    "CallwireConfig",
    "CallwireError",
    "ConfigurationMissingError",
    "DecodingFailedError",
    "ExecutionError",
    "HTTPMethod",
    "NetworkError",
    "Params",
    "RawJSON",
    "Request",
    "RequestExecutor",
    "Response",
    "RetryPolicy",
    "ServerError",
    "TransportError",
    "TransportRegistry",
    "__version__",
    "configure",
    "configure_from_config",
    "execute",
]
