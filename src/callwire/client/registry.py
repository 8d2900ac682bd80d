"""Process-wide registry of the active transports.

The registry holds the network transport, the optional storage transport
and the optional error listener. Every ``configure`` call publishes a new
immutable ``RegistryState`` under a lock, so readers always see the three
values from the same call.
"""

import logging
import threading
from dataclasses import dataclass

from .exceptions import ConfigurationMissingError
from .transport import ErrorListener, RequestTransport, StorageTransport

logger = logging.getLogger("callwire")


@dataclass(frozen=True)
class RegistryState:
    """Snapshot of one ``configure`` call."""

    network: RequestTransport | None = None
    storage: StorageTransport | None = None
    listener: ErrorListener | None = None

    @property
    def configured(self) -> bool:
        return self.network is not None


class TransportRegistry:
    """Thread-safe holder of the currently configured transports.

    Usage:
        registry = TransportRegistry()
        registry.configure(HTTPTransport(config), listener=LoggingErrorListener())
        transport = registry.get_active_network()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = RegistryState()

    def configure(
        self,
        network: RequestTransport,
        storage: StorageTransport | None = None,
        listener: ErrorListener | None = None,
    ) -> None:
        """Replace the network transport, storage transport and listener.

        Call this once at application startup. Later calls replace all
        three values atomically.
        """
        state = RegistryState(network=network, storage=storage, listener=listener)
        with self._lock:
            replaced = self._state.configured
            self._state = state
        logger.debug(
            "Transport registry %s: network=%s storage=%s listener=%s",
            "reconfigured" if replaced else "configured",
            type(network).__name__,
            type(storage).__name__ if storage else None,
            type(listener).__name__ if listener else None,
        )

    def snapshot(self) -> RegistryState:
        """Return the current configuration as one consistent value."""
        with self._lock:
            return self._state

    def get_active_network(self) -> RequestTransport:
        """Return the active network transport.

        Raises:
            ConfigurationMissingError: If configure() has not been called.
        """
        network = self.snapshot().network
        if network is None:
            raise ConfigurationMissingError()
        return network

    def get_active_storage(self) -> StorageTransport | None:
        """Return the active storage transport, if one was configured."""
        return self.snapshot().storage

    @property
    def error_listener(self) -> ErrorListener | None:
        return self.snapshot().listener


default_registry = TransportRegistry()


def configure(
    network: RequestTransport,
    storage: StorageTransport | None = None,
    listener: ErrorListener | None = None,
) -> None:
    """Configure the process-wide registry."""
    default_registry.configure(network, storage=storage, listener=listener)
