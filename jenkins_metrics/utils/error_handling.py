#!/usr/bin/env python3
"""
Error Handling Utility Module

Reusable error handling patterns with structured context, so failures in the
collector and host loop are logged consistently instead of through ad-hoc
`except Exception:` blocks.

Cycle-fatal errors are not logged here: track_collector_performance()
records them once at ERROR. This module provides:
    log_and_continue() - Log error and continue execution (host loop keeps polling)
"""

import logging
from typing import Any


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Use this when a failure should not halt the process, e.g. one failed
    polling cycle while the scheduler keeps ticking.

    Args:
        logger: Logger instance from get_logger(__name__)
        error: The caught exception
        context: Structured data about what failed (url, operation, etc.)
        error_type: Human-readable description of the operation

    Example:
        try:
            await collector.run(sink)
        except UpstreamFetchError as e:
            log_and_continue(logger, e, {"url": config.url}, "Polling cycle")
    """
    logger.warning(
        f"{error_type} failed: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )
