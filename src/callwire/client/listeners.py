"""Built-in error listeners."""

import logging

from .exceptions import ExecutionError


class LoggingErrorListener:
    """Logs every terminal execution error.

    Usage:
        configure(HTTPTransport(config), listener=LoggingErrorListener())
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.WARNING):
        self.logger = logger or logging.getLogger("callwire")
        self.level = level

    async def did_receive(self, error: Exception, path: str) -> None:
        kind = error.kind if isinstance(error, ExecutionError) else type(error).__name__
        self.logger.log(self.level, "Request to %s failed [%s]: %s", path, kind, error)
