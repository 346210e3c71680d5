#!/usr/bin/env python3
"""
Base Collector for Jenkins Metrics

Defines the seams the collector works through:
- JenkinsClient: capability to fetch raw server state
- MetricsSink: capability to accept finished measurements
- UpstreamFetchError: the single error a polling cycle surfaces
- BaseCollector: shared cycle lifecycle (client setup, performance tracking)

Collectors inherit from BaseCollector and implement collect().
"""

from abc import ABC, abstractmethod

from jenkins_metrics.core import get_logger, track_collector_performance
from jenkins_metrics.domain.jenkins import QueueItem, WorkerRecord
from jenkins_metrics.domain.metrics import Measurement


class UpstreamFetchError(Exception):
    """
    Raised when fetching state from the Jenkins server fails.

    Covers network failures, authentication failures, malformed responses and
    per-item lookups alike. Fatal to the current cycle only.

    Attributes:
        operation: Client operation that failed (e.g., "fetch_queue")
        cause: The underlying exception reported by the client
    """

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause
        self.__cause__ = cause


class JenkinsClient(ABC):
    """Read-only view of a Jenkins server used by the collector."""

    @abstractmethod
    async def fetch_queue(self) -> list[QueueItem]:
        """Fetch the current build queue."""

    @abstractmethod
    async def fetch_job_label(self, job_name: str, job_url: str | None = None) -> str:
        """Fetch the label expression the job is restricted to ("" if none).

        job_url, when known, locates jobs inside folders; job_name alone only
        resolves top-level jobs.
        """

    @abstractmethod
    async def fetch_workers(self) -> list[WorkerRecord]:
        """Fetch the computer (built-in executor and agent) inventory."""

    @abstractmethod
    async def fetch_worker_config(self, display_name: str) -> str:
        """Fetch the space-separated label string of one computer."""


class MetricsSink(ABC):
    """Destination for finished measurements. Fire-and-forget."""

    @abstractmethod
    def add_fields(self, measurement: str, fields: dict[str, int], tags: dict[str, str]) -> None:
        """Accept one measurement."""

    def add_measurement(self, measurement: Measurement) -> None:
        """Accept a Measurement object (delegates to add_fields)."""
        self.add_fields(measurement.name, dict(measurement.fields), dict(measurement.tags))


class BaseCollector(ABC):
    """Base class for polling collectors with shared cycle infrastructure

    Centralizes:
    - Named logger per collector
    - REST client construction
    - Performance tracking around each cycle

    Subclasses must implement:
    - build_client(): Construct the client used for a cycle
    - collect(): Run one cycle against a client, emitting to a sink
    """

    def __init__(self, name: str):
        """Initialize collector

        Args:
            name: Collector name (e.g., "jenkins")
        """
        self.name = name
        self.logger = get_logger(f"jenkins_metrics.collectors.{name}")

    @abstractmethod
    def build_client(self) -> JenkinsClient:
        """Construct the client used for one cycle"""

    @abstractmethod
    async def collect(self, client: JenkinsClient, sink: MetricsSink) -> list[Measurement]:
        """Run one polling cycle

        Args:
            client: Jenkins client to fetch from
            sink: Sink that receives each finished measurement

        Returns:
            Measurements emitted, in emission order

        Raises:
            UpstreamFetchError: If any fetch fails (earlier emissions stand)
        """

    async def run(self, sink: MetricsSink, client: JenkinsClient | None = None) -> list[Measurement]:
        """Main execution flow with performance tracking

        Args:
            sink: Sink that receives each finished measurement
            client: Optional client; built with build_client() when omitted

        Returns:
            Measurements emitted during the cycle

        Raises:
            UpstreamFetchError: If the cycle fails
        """
        with track_collector_performance(self.name):
            if client is None:
                client = self.build_client()
            return await self.collect(client, sink)
