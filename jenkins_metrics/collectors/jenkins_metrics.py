#!/usr/bin/env python3
"""
Jenkins Metrics Collector

Polls a Jenkins server and emits, per cycle and in this order:
- queue: number of buildable queue items (plus per-label counts in extended mode)
- workers: connected agents and how many of them are busy
- worker_labels: agents per label (extended mode only)

Queue depth is the most time-sensitive signal, so it is fetched first and is
the measurement least likely to be lost to a later failure. Any fetch failure
stops the cycle with UpstreamFetchError; measurements already emitted stand.

Usage:
    from jenkins_metrics.collectors.jenkins_metrics import JenkinsCollector
    from jenkins_metrics.sinks import MetricsAccumulator

    collector = JenkinsCollector(config)
    sink = MetricsAccumulator()
    await collector.run(sink)
"""

from collections import Counter
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from jenkins_metrics import registry
from jenkins_metrics.async_http_client import new_insecure_http_client
from jenkins_metrics.collectors.base import BaseCollector, JenkinsClient, MetricsSink, UpstreamFetchError
from jenkins_metrics.collectors.jenkins_rest_client import JenkinsRESTClient
from jenkins_metrics.core.collector_metrics import get_current_tracker
from jenkins_metrics.domain.metrics import (
    QUEUE_MEASUREMENT,
    WORKER_LABELS_MEASUREMENT,
    WORKERS_MEASUREMENT,
    Measurement,
    build_tags,
)
from jenkins_metrics.secure_config import SAMPLE_CONFIG, JenkinsConfig

T = TypeVar("T")

COLLECTOR_NAME = "jenkins"
LABEL_FIELD_PREFIX = "label_"


class JenkinsCollector(BaseCollector):
    """Collects queue and agent metrics from one Jenkins server

    Holds only the immutable configuration; every counter lives inside a
    single poll method call.
    """

    def __init__(self, config: JenkinsConfig):
        super().__init__(name=COLLECTOR_NAME)
        self.config = config

    @staticmethod
    def description() -> str:
        return "Reads metrics from a Jenkins server"

    @staticmethod
    def sample_config() -> str:
        return SAMPLE_CONFIG

    def build_client(self) -> JenkinsRESTClient:
        """Build a REST client, with TLS verification disabled only if configured"""
        client = JenkinsRESTClient(url=self.config.url, username=self.config.username, password=self.config.password)
        if self.config.insecure:
            client.override_http_client(new_insecure_http_client())
        return client

    def _tags(self) -> dict[str, str]:
        return build_tags(self.config.url, self.config.host)

    async def _fetch(self, operation: str, fetch: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Await one client call, surfacing any failure as UpstreamFetchError

        Not logged here; the cycle tracker logs the failure once.
        """
        try:
            return await fetch(*args)
        except UpstreamFetchError:
            raise
        except Exception as e:
            raise UpstreamFetchError(operation, e) from e

    async def poll_queue(self, client: JenkinsClient) -> Measurement:
        """Build the queue measurement

        In extended mode each buildable item's job label is looked up and
        counted as a label_<label> field. Jobs without a label, and Pipeline
        node {} steps (which have no job config), count towards queue_size
        only.

        Raises:
            UpstreamFetchError: If the queue fetch or any label lookup fails
        """
        queue = await self._fetch("fetch_queue", client.fetch_queue)

        queue_size = 0
        label_counts: Counter[str] = Counter()

        for item in queue:
            if not item.buildable:
                continue
            queue_size += 1
            if self.config.extended and not item.is_pipeline_step:
                label = await self._fetch(
                    "fetch_job_label", client.fetch_job_label, item.job_name, item.job_url
                )
                if label:
                    label_counts[label] += 1

        self.logger.debug(f"Queue: {queue_size} buildable of {len(queue)}, labels {dict(label_counts)}")

        fields = {"queue_size": queue_size}
        for label, count in label_counts.items():
            fields[f"{LABEL_FIELD_PREFIX}{label}"] = count

        return Measurement(name=QUEUE_MEASUREMENT, fields=fields, tags=self._tags())

    async def poll_workers(self, client: JenkinsClient) -> Measurement:
        """Build the workers measurement

        Only managed agents are counted; the built-in executor is ignored.

        Raises:
            UpstreamFetchError: If the inventory fetch fails
        """
        workers = await self._fetch("fetch_workers", client.fetch_workers)

        slave_count = 0
        busy_count = 0
        for worker in workers:
            if worker.is_managed_agent:
                slave_count += 1
                if worker.is_busy:
                    busy_count += 1

        self.logger.debug(f"Workers: {slave_count} agents, {busy_count} busy, {len(workers)} computers")

        return Measurement(
            name=WORKERS_MEASUREMENT,
            fields={"slave_count": slave_count, "slaves_busy": busy_count},
            tags=self._tags(),
        )

    async def poll_worker_labels(self, client: JenkinsClient) -> Measurement:
        """Build the worker_labels measurement

        Fields are named after the raw label; each value is the number of
        agents carrying that label.

        Raises:
            UpstreamFetchError: If the inventory fetch or any config fetch fails
        """
        workers = await self._fetch("fetch_workers", client.fetch_workers)

        label_counts: Counter[str] = Counter()
        for worker in workers:
            if not worker.is_managed_agent:
                continue
            worker.labels = await self._fetch("fetch_worker_config", client.fetch_worker_config, worker.display_name)
            label_counts.update(worker.label_tokens())

        self.logger.debug(f"Worker labels: {dict(label_counts)}")

        return Measurement(name=WORKER_LABELS_MEASUREMENT, fields=dict(label_counts), tags=self._tags())

    def _emit(self, sink: MetricsSink, measurement: Measurement, emitted: list[Measurement]) -> None:
        sink.add_measurement(measurement)
        emitted.append(measurement)
        tracker = get_current_tracker()
        if tracker:
            tracker.record_measurement()

    async def collect(self, client: JenkinsClient, sink: MetricsSink) -> list[Measurement]:
        """Run one polling cycle: queue, workers, then labels (extended)

        Each measurement reaches the sink before the next step starts.

        Returns:
            Measurements emitted, in order

        Raises:
            UpstreamFetchError: On the first failing step
        """
        self.logger.info(f"Polling Jenkins at {self.config.url}")
        emitted: list[Measurement] = []

        self._emit(sink, await self.poll_queue(client), emitted)
        self._emit(sink, await self.poll_workers(client), emitted)
        if self.config.extended:
            self._emit(sink, await self.poll_worker_labels(client), emitted)

        return emitted


def new_collector(config: JenkinsConfig) -> JenkinsCollector:
    """Factory registered under "jenkins"."""
    return JenkinsCollector(config)


registry.add(COLLECTOR_NAME, new_collector)
