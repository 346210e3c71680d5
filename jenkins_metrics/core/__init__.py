"""
Core Infrastructure - Logging and cycle performance tracking

Usage:
    from jenkins_metrics.core import get_logger, setup_logging

    setup_logging(level="DEBUG")
    logger = get_logger(__name__)
"""

from .collector_metrics import CollectorMetricsTracker, get_current_tracker, track_collector_performance
from .logging_config import JSONFormatter, get_logger, log_with_context, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "log_with_context",
    "JSONFormatter",
    # Performance tracking
    "CollectorMetricsTracker",
    "get_current_tracker",
    "track_collector_performance",
]
