"""
Logging manager for the Blog Backend.

Every module obtains its logger through `get_logger`, optionally with a bracketed
prefix that tags the component in the output:

    logger = get_logger(prefix="[DATABASE]")
    logger.info("Connected to %s", database_name)

`setup_logging` configures the root handler once per process; the application
factory calls it with the configured `LOG_LEVEL`.
"""

import logging
import sys
from typing import Optional, Union

DEFAULT_LOGGER_NAME = "blog_backend"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


class PrefixedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed component prefix to every message."""

    def __init__(self, logger: logging.Logger, prefix: str):
        super().__init__(logger, {"prefix": prefix})
        self.prefix = prefix

    def process(self, msg, kwargs):
        return f"{self.prefix} {msg}", kwargs


def setup_logging(level: Union[int, str] = logging.INFO, force: bool = False) -> None:
    """
    Configure root logging to stderr.

    Calling it again is a no-op unless `force` is set, so the factory can run
    several times in one process (tests) without stacking handlers.
    """
    global _configured
    if _configured and not force:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
        stream=sys.stderr,
        force=force,
    )
    _configured = True


def get_logger(
    name: Optional[str] = None, prefix: Optional[str] = None
) -> Union[logging.Logger, PrefixedLoggerAdapter]:
    """
    Get a logger for the Blog Backend.

    Args:
        name: Logger name. Defaults to the package logger (`blog_backend`).
        prefix: Optional component tag such as `"[Auth]"`.

    Returns:
        A plain `logging.Logger`, or an adapter that prefixes messages.
    """
    logger = logging.getLogger(name or DEFAULT_LOGGER_NAME)
    if prefix:
        return PrefixedLoggerAdapter(logger, prefix)
    return logger


__all__ = ["get_logger", "setup_logging", "PrefixedLoggerAdapter", "DEFAULT_LOGGER_NAME"]
