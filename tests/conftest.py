"""
Pytest configuration and shared fixtures

Provides a validated config, an in-memory sink and a scriptable fake Jenkins
client for collector tests.
"""

import asyncio

import pytest

from jenkins_metrics.collectors.base import JenkinsClient
from jenkins_metrics.core.collector_metrics import get_current_tracker
from jenkins_metrics.domain.jenkins import QueueItem, WorkerRecord
from jenkins_metrics.secure_config import JenkinsConfig
from jenkins_metrics.sinks import MetricsAccumulator

JENKINS_URL = "http://jenkins.service.consul:8080"


class FakeJenkinsClient(JenkinsClient):
    """Jenkins client serving canned data; any operation can be set to fail

    Like the REST client, every call is counted on the active cycle tracker
    and yields to the event loop once.
    """

    def __init__(
        self,
        queue: list[QueueItem] | None = None,
        workers: list[WorkerRecord] | None = None,
        job_labels: dict[str, str] | None = None,
        worker_labels: dict[str, str] | None = None,
    ):
        self.queue = queue or []
        self.workers = workers or []
        self.job_labels = job_labels or {}
        self.worker_labels = worker_labels or {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, ...]] = []
        self.job_urls: dict[str, str | None] = {}

    def fail(self, operation: str, error: Exception) -> None:
        self.failures[operation] = error

    async def _record(self, operation: str, *args: str) -> None:
        self.calls.append((operation, *args))
        tracker = get_current_tracker()
        if tracker:
            tracker.record_api_call()
        await asyncio.sleep(0)
        if operation in self.failures:
            raise self.failures[operation]

    async def fetch_queue(self) -> list[QueueItem]:
        await self._record("fetch_queue")
        return list(self.queue)

    async def fetch_job_label(self, job_name: str, job_url: str | None = None) -> str:
        self.job_urls[job_name] = job_url
        await self._record("fetch_job_label", job_name)
        return self.job_labels.get(job_name, "")

    async def fetch_workers(self) -> list[WorkerRecord]:
        await self._record("fetch_workers")
        # Fresh copies, like a real fetch
        return [WorkerRecord(w.display_name, w.is_managed_agent, w.is_idle, w.offline) for w in self.workers]

    async def fetch_worker_config(self, display_name: str) -> str:
        await self._record("fetch_worker_config", display_name)
        return self.worker_labels.get(display_name, "")


# ===== Config Fixtures =====


@pytest.fixture
def jenkins_config():
    """Basic configuration with host tag, extended mode off"""
    return JenkinsConfig(url=JENKINS_URL, username="admin", password="s3cret-api-token", host="jenkins1")


@pytest.fixture
def extended_config():
    """Configuration with extended per-label aggregation enabled"""
    return JenkinsConfig(
        url=JENKINS_URL, username="admin", password="s3cret-api-token", host="jenkins1", extended=True
    )


@pytest.fixture
def sink():
    """Provide an empty in-memory sink"""
    return MetricsAccumulator()


# ===== Jenkins State Fixtures =====


@pytest.fixture
def sample_queue():
    """3 queue items, 2 buildable; build-linux is restricted to "linux" """
    return [
        QueueItem(buildable=True, job_name="build-linux"),
        QueueItem(buildable=True, job_name="lint"),
        QueueItem(buildable=False, job_name="deploy", why="Waiting for upstream build"),
    ]


@pytest.fixture
def sample_workers():
    """4 computers: built-in executor plus 3 agents, 1 of them idle"""
    return [
        WorkerRecord(display_name="master", is_managed_agent=False, is_idle=False),
        WorkerRecord(display_name="agent-01", is_managed_agent=True, is_idle=False),
        WorkerRecord(display_name="agent-02", is_managed_agent=True, is_idle=True),
        WorkerRecord(display_name="agent-03", is_managed_agent=True, is_idle=False),
    ]


@pytest.fixture
def fake_client(sample_queue, sample_workers):
    """Fake client loaded with the sample queue, workers and labels"""
    return FakeJenkinsClient(
        queue=sample_queue,
        workers=sample_workers,
        job_labels={"build-linux": "linux"},
        worker_labels={"agent-01": "linux docker", "agent-02": "linux", "agent-03": "windows"},
    )


@pytest.fixture
def make_client():
    """Factory for custom fake clients"""
    return FakeJenkinsClient
