"""
Collector Performance Tracking Module

Provides performance and health monitoring for polling cycles:
    - CollectorMetricsTracker: Tracks metrics for a single cycle
    - track_collector_performance(): Context manager for automatic tracking
    - get_current_tracker(): Access tracker from the REST client
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from jenkins_metrics.core.logging_config import get_logger, log_with_context

logger = get_logger(__name__)

# Active tracker for REST client access, scoped to the running task
_current_tracker: ContextVar["CollectorMetricsTracker | None"] = ContextVar("current_collector_tracker", default=None)


class CollectorMetricsTracker:
    """
    Tracks performance and health metrics for a single polling cycle.

    Captures execution time, API usage, emitted measurements and errors.
    The REST client reports its calls through get_current_tracker().

    Attributes:
        collector_name: Name of collector (e.g., "jenkins")
        start_time: Timestamp when tracker was started (None before start())
        execution_time_ms: Total execution time in milliseconds
        success: Whether the cycle completed without errors
        api_call_count: Number of API requests made
        measurement_count: Number of measurements handed to the sink
        error_message: Error text if failed (None if successful)
        error_type: Exception class name if failed (None if successful)

    Example:
        >>> tracker = CollectorMetricsTracker("jenkins")
        >>> tracker.start()
        >>> tracker.record_api_call()
        >>> tracker.end(success=True)
        >>> tracker.api_call_count
        1
    """

    def __init__(self, collector_name: str):
        """
        Initialize tracker for collector.

        Args:
            collector_name: Name of collector (e.g., "jenkins")
        """
        self.collector_name = collector_name
        self.start_time: float | None = None
        self.execution_time_ms: float = 0
        self.success: bool = False
        self.api_call_count: int = 0
        self.measurement_count: int = 0
        self.error_message: str | None = None
        self.error_type: str | None = None

    def start(self) -> None:
        """Start tracking execution time."""
        self.start_time = time.time()
        logger.debug(f"Started tracking: {self.collector_name}")

    def end(self, success: bool, error: Exception | None = None) -> None:
        """
        End tracking and calculate execution time.

        Args:
            success: Whether the cycle completed successfully
            error: Exception if failed (None if successful)
        """
        if self.start_time is not None:
            self.execution_time_ms = (time.time() - self.start_time) * 1000

        self.success = success

        if error:
            self.error_message = str(error)
            self.error_type = type(error).__name__

    def record_api_call(self) -> None:
        """Record an API call (called by the REST client for each request)."""
        self.api_call_count += 1

    def record_measurement(self) -> None:
        """Record a measurement handed to the sink."""
        self.measurement_count += 1

    def to_dict(self) -> dict[str, Any]:
        """
        Convert metrics to dictionary for JSON serialization.

        Returns:
            Dictionary with all metric fields
        """
        return {
            "timestamp": datetime.now(UTC).isoformat(),
            "collector_name": self.collector_name,
            "execution_time_ms": round(self.execution_time_ms, 2),
            "success": self.success,
            "api_call_count": self.api_call_count,
            "measurement_count": self.measurement_count,
            "error_message": self.error_message,
            "error_type": self.error_type,
        }


def get_current_tracker() -> "CollectorMetricsTracker | None":
    """
    Get the currently active tracker (for REST client use).

    Returns:
        Active tracker or None if no cycle is being tracked
    """
    return _current_tracker.get()


@contextmanager
def track_collector_performance(collector_name: str) -> Generator["CollectorMetricsTracker", None, None]:
    """
    Context manager for automatic cycle performance tracking.

    Tracks execution time, success/failure and API calls, and logs a summary
    when the cycle ends. A failure is logged once at ERROR and re-raised
    unchanged. The tracker is held in a context variable, so concurrent
    cycles in separate tasks each see their own.

    Args:
        collector_name: Name of collector (e.g., "jenkins")

    Yields:
        CollectorMetricsTracker instance for manual updates

    Example:
        >>> async def main():
        ...     with track_collector_performance("jenkins") as tracker:
        ...         measurements = await collector.run_cycle(client, sink)
    """
    tracker = CollectorMetricsTracker(collector_name)
    token = _current_tracker.set(tracker)
    tracker.start()

    try:
        yield tracker
        tracker.end(success=True)

        log_with_context(
            logger,
            "info",
            "Collector completed successfully",
            collector=collector_name,
            execution_time_ms=round(tracker.execution_time_ms, 2),
            api_calls=tracker.api_call_count,
            measurements=tracker.measurement_count,
        )

    except Exception as e:
        tracker.end(success=False, error=e)

        # The only ERROR record for a failed cycle
        log_with_context(
            logger,
            "error",
            "Collector failed",
            collector=collector_name,
            execution_time_ms=round(tracker.execution_time_ms, 2),
            api_calls=tracker.api_call_count,
            measurements=tracker.measurement_count,
            operation=getattr(e, "operation", None),
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    finally:
        _current_tracker.reset(token)
