#!/usr/bin/env python3
"""
Collector Runner Script

Loads configuration from the environment (.env supported), then polls Jenkins
once or on a fixed interval, writing each measurement as a JSON line to stdout.
Logs go to stderr.

Usage:
    python -m jenkins_metrics.run_collector --once
    python -m jenkins_metrics.run_collector --interval 60 --json-logs
    python -m jenkins_metrics.run_collector --sample-config
"""

import argparse
import asyncio
import sys
import time

from jenkins_metrics import registry
from jenkins_metrics.collectors import JenkinsCollector
from jenkins_metrics.collectors.base import UpstreamFetchError
from jenkins_metrics.core import get_logger, setup_logging
from jenkins_metrics.secure_config import ConfigurationError, validate_config_on_startup
from jenkins_metrics.sinks import JSONLinesSink
from jenkins_metrics.utils.error_handling import log_and_continue

logger = get_logger(__name__)

DEFAULT_INTERVAL = 60  # seconds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=JenkinsCollector.description())
    parser.add_argument("--once", action="store_true", help="Run a single polling cycle and exit")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL,
        help=f"Seconds between polling cycles (default: {DEFAULT_INTERVAL})",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--sample-config", action="store_true", help="Print a sample configuration and exit")

    args = parser.parse_args(argv)
    if args.interval <= 0:
        parser.error("--interval must be positive")
    return args


async def poll_forever(collector: JenkinsCollector, sink: JSONLinesSink, interval: float) -> None:
    """
    Run cycles back to back on a fixed interval.

    Cycles never overlap: the next one starts after the previous one returns
    and the rest of the interval has elapsed. A failed cycle is logged and
    polling continues on the next tick.
    """
    while True:
        started = time.monotonic()
        try:
            await collector.run(sink)
        except UpstreamFetchError as e:
            log_and_continue(logger, e, {"url": collector.config.url, "operation": e.operation}, "Polling cycle")

        elapsed = time.monotonic() - started
        await asyncio.sleep(max(0.0, interval - elapsed))


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the collector runner."""
    args = parse_args(argv)

    if args.sample_config:
        print(JenkinsCollector.sample_config())
        return 0

    setup_logging(level=args.log_level, json_output=args.json_logs)

    try:
        config = validate_config_on_startup()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    collector = registry.create("jenkins", config)
    sink = JSONLinesSink(sys.stdout)

    if args.once:
        try:
            asyncio.run(collector.run(sink))
        except UpstreamFetchError:
            # Already logged by the cycle tracker
            return 1
        return 0

    logger.info(f"Polling {config.url} every {args.interval:g}s")
    try:
        asyncio.run(poll_forever(collector, sink, args.interval))
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
