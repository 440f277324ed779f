"""
Context-carrying logger wrapper.

A ContextLogger is created once per run and handed to the components that
log, instead of each one reaching for a shared global. It also carries the
run's debug flag so callers can skip building expensive debug messages.
"""

import logging


class ContextLogger:
    """
    Logger wrapper that adds contextual information to all log messages

    Usage:
        log = ContextLogger("acceldiff.run", debug_mode=True, table="S.T")
        log.info("Comparison started", accelerator="ACCEL1")
        # Output includes both table and accelerator
    """

    def __init__(self, name: str, debug_mode: bool = False, **context):
        """
        Initialize context logger

        Args:
            name: Logger name
            debug_mode: Whether debug messages are emitted
            **context: Contextual key-value pairs to include in all logs
        """
        self.logger = logging.getLogger(name)
        self.debug_mode = debug_mode
        self.context = context

    def _log(self, level: int, msg: str, *args, exc_info=None, **kwargs) -> None:
        extra = {**self.context, **kwargs}
        self.logger.log(level, msg, *args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args, **kwargs) -> None:
        """Log debug message with context, only in debug mode"""
        if self.debug_mode:
            self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        self._log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def critical(self, msg: str, *args, exc_info=None, **kwargs) -> None:
        self._log(logging.CRITICAL, msg, *args, exc_info=exc_info, **kwargs)
