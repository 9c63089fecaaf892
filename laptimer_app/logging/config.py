"""
Centralized logging configuration for the lap timer.

This module provides standardized logging configuration using structlog
for all components. Clock transitions, ledger changes and persistence
outcomes are all emitted through loggers obtained here so the output stays
consistently structured.
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

    # Log records go to stderr so CLI output on stdout stays clean
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s",
        force=True
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


def get_state_logger(name: str, subsystem: str = "clock_engine") -> FilteringBoundLogger:
    """
    Get a logger bound for clock engine and lap ledger state changes.

    The bound values are passed as initial values so the logger stays lazy
    and picks up whatever ``configure_logging`` installs later.

    Args:
        name: Logger name (typically __name__)
        subsystem: Subsystem tag for the entries

    Returns:
        Configured structlog logger for state changes
    """
    return structlog.get_logger(name, subsystem=subsystem, audit_trail=True)


def get_persistence_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for session persistence.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for persistence outcomes
    """
    return structlog.get_logger(name, subsystem="persistence")


def log_clock_transition(
    logger: FilteringBoundLogger,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a clock engine transition with standardized format.

    Args:
        logger: Structlog logger instance
        from_state: State before the transition ("running" or "stopped")
        to_state: State after the transition
        trigger: Operation that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        transition="clock"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Clock transition")


def log_ledger_change(
    logger: FilteringBoundLogger,
    action: str,
    lap_id: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a lap ledger change with standardized format.

    Args:
        logger: Structlog logger instance
        action: Ledger operation ("saved", "renamed", "deleted", ...)
        lap_id: Affected lap, when a single lap is involved
        context: Additional context data
    """
    bound_logger = logger.bind(
        action=action,
        lap_id=lap_id,
        transition="ledger"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Ledger change")
