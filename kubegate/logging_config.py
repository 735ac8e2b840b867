"""Logging configuration for kubegate using structlog.

kubegate is a library: it never configures logging on import. Processes
embedding it call setup_logging once at startup.
"""

import logging
import os
import sys
from typing import Any, Optional

import structlog

LEVEL_ENV_VARS = ("KUBEGATE_LOG_LEVEL", "LOG_LEVEL")

# Loggers of the kubernetes client stack, kept at WARNING unless verbose.
CLIENT_LOGGERS = ("kubernetes", "urllib3")


def _resolve_level(verbose: bool, level: Optional[str]) -> str:
    if verbose:
        return "DEBUG"
    if level:
        return level.upper()
    for env_var in LEVEL_ENV_VARS:
        value = os.getenv(env_var)
        if value:
            return value.upper()
    return "INFO"


def setup_logging(verbose: bool = False, level: Optional[str] = None) -> None:
    """Configure structlog for converter output.

    Args:
        verbose: Force DEBUG, which also shows the conversion trace and the
            kubernetes client's own loggers.
        level: Explicit level name. Falls back to $KUBEGATE_LOG_LEVEL, then
            $LOG_LEVEL, then INFO.
    """
    log_level = _resolve_level(verbose, level)
    numeric_level = getattr(logging, log_level, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
    client_level = logging.DEBUG if verbose else max(numeric_level, logging.WARNING)
    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _get_renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger(__name__)
    logger.info("Logging configured", log_level=log_level, verbose=verbose)


def _get_renderer() -> Any:
    """Pick the JSON renderer when LOG_FORMAT=json, console otherwise."""
    log_format = os.getenv("LOG_FORMAT", "console").lower()

    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.plain_traceback,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_function_entry(logger: structlog.stdlib.BoundLogger, func_name: str, **kwargs: Any) -> None:
    """Log function entry with parameters."""
    logger.debug("Function entry", function=func_name, **kwargs)


def log_function_exit(logger: structlog.stdlib.BoundLogger, func_name: str, **kwargs: Any) -> None:
    """Log function exit with return values."""
    logger.debug("Function exit", function=func_name, **kwargs)


def log_conversion(logger: structlog.stdlib.BoundLogger, source: str, target: str,
                   name: Any = None, **kwargs: Any) -> None:
    """Log a single object conversion.

    Args:
        logger: The logger instance
        source: Kind of the input object (e.g. "Ingress")
        target: Kind of the produced object (e.g. "Route")
        name: Name of the converted object, if known
        **kwargs: Additional conversion details
    """
    logger.debug("Conversion", source=source, target=target, name=name, **kwargs)


def log_rejection(logger: structlog.stdlib.BoundLogger, operation: str, reason: str, **kwargs: Any) -> None:
    """Log a validation failure right before it is raised to the caller.

    Args:
        logger: The logger instance
        operation: Converter operation that rejected its input
        reason: Human readable rejection reason
        **kwargs: Offending values
    """
    logger.warning("Conversion rejected", operation=operation, reason=reason, **kwargs)
