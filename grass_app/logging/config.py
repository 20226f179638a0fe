"""
Centralized logging configuration for the grass session core.

This module provides standardized logging configuration using structlog
for all components. Screen transitions, timer lifecycle and dropped events
all go through the loggers defined here so the output stays structured.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    # structlog renders, stdlib only routes
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for screen transitions and session state changes.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    return get_logger(name).bind(
        subsystem="state_machine",
        audit_trail=True
    )


def get_timer_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for timer and listener scope lifecycle.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for timer scopes
    """
    return get_logger(name).bind(subsystem="timers")


def log_state_transition(
    logger: FilteringBoundLogger,
    session_id: str,
    from_screen: str,
    to_screen: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a screen transition with standardized format.

    Args:
        logger: Structlog logger instance
        session_id: ID of the session transitioning
        from_screen: Screen being left
        to_screen: Screen being entered
        trigger: Event type that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        session_id=session_id,
        from_screen=from_screen,
        to_screen=to_screen,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
