"""Transport factory for creating configured transports.

This module creates the appropriate transports from configuration and
wires them into a registry, keeping transport selection out of the
call sites.
"""

from .config import CallwireConfig
from .registry import TransportRegistry, default_registry
from .transport import ErrorListener, RequestTransport, StorageTransport


def create_transport(config: CallwireConfig | None = None) -> RequestTransport:
    """Create appropriate request transport based on configuration.

    Examines the configuration to determine which transport to use:
    - "lambda": Creates LambdaTransport
    - "firestore": Creates FirestoreTransport
    - Otherwise: Creates HTTPTransport

    Args:
        config: Callwire configuration. If None, loads from environment.

    Returns:
        Configured transport implementing the RequestTransport protocol.

    Raises:
        ValueError: If configuration is invalid for selected transport
            (e.g., Lambda transport without function name).
        ImportError: If google-cloud-firestore is not installed when the
            Firestore transport is needed.

    Example:
        # Auto-detect based on environment
        transport = create_transport()

        # Explicit configuration
        config = CallwireConfig(transport="lambda", lambda_function_name="my-fn")
        transport = create_transport(config)
    """
    config = config or CallwireConfig()
    config.validate_config()

    transport_type = config.resolved_transport

    if transport_type == "lambda":
        from .lambda_transport import LambdaTransport

        return LambdaTransport(config)
    elif transport_type == "firestore":
        from .firestore import FirestoreTransport

        return FirestoreTransport(config)
    else:
        from .http import HTTPTransport

        return HTTPTransport(config)


def create_storage_transport(config: CallwireConfig | None = None) -> StorageTransport | None:
    """Create the storage transport, or None when storage is disabled."""
    config = config or CallwireConfig()
    config.validate_config()

    if config.storage == "s3":
        from .s3_storage import S3StorageTransport

        return S3StorageTransport(config)
    return None


def configure_from_config(
    config: CallwireConfig | None = None,
    registry: TransportRegistry | None = None,
    listener: ErrorListener | None = None,
) -> TransportRegistry:
    """Build transports from configuration and install them in a registry.

    Args:
        config: Callwire configuration. If None, loads from environment.
        registry: Registry to configure (default: the process-wide one).
        listener: Optional error listener.

    Returns:
        The configured registry.
    """
    config = config or CallwireConfig()
    registry = registry or default_registry
    registry.configure(
        create_transport(config),
        storage=create_storage_transport(config),
        listener=listener,
    )
    return registry
