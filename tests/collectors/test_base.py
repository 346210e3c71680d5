#!/usr/bin/env python3
"""
Tests for BaseCollector and the collector seams

Verifies:
- UpstreamFetchError carries operation and cause
- MetricsSink.add_measurement delegates to add_fields
- BaseCollector.run() wraps a cycle with performance tracking
"""

from unittest.mock import Mock, patch

import pytest

from jenkins_metrics.collectors.base import BaseCollector, MetricsSink, UpstreamFetchError
from jenkins_metrics.domain.metrics import Measurement


class RecordingSink(MetricsSink):
    """Sink that records raw add_fields calls"""

    def __init__(self):
        self.calls = []

    def add_fields(self, measurement, fields, tags):
        self.calls.append((measurement, fields, tags))


class StubCollector(BaseCollector):
    """Concrete BaseCollector for testing"""

    def __init__(self, client=None, error: Exception | None = None):
        super().__init__(name="stub")
        self.client = client or Mock()
        self.error = error
        self.collected_with = None

    def build_client(self):
        return self.client

    async def collect(self, client, sink):
        self.collected_with = client
        if self.error:
            raise self.error
        measurement = Measurement(name="workers", fields={"slave_count": 1, "slaves_busy": 0}, tags={"url": "u"})
        sink.add_measurement(measurement)
        return [measurement]


class TestUpstreamFetchError:
    """Test the cycle error type"""

    def test_carries_operation_and_cause(self):
        """Test error exposes the failing operation and chains the cause"""
        cause = ConnectionError("refused")

        error = UpstreamFetchError("fetch_queue", cause)

        assert error.operation == "fetch_queue"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert str(error) == "fetch_queue failed: refused"


class TestMetricsSink:
    """Test the sink interface"""

    def test_add_measurement_delegates_to_add_fields(self):
        """Test Measurement objects are unpacked into add_fields"""
        sink = RecordingSink()
        measurement = Measurement(name="queue", fields={"queue_size": 3}, tags={"url": "http://ci"})

        sink.add_measurement(measurement)

        assert sink.calls == [("queue", {"queue_size": 3}, {"url": "http://ci"})]


class TestBaseCollectorRun:
    """Test run() lifecycle"""

    def test_init_sets_name_and_logger(self):
        """Test collector name and logger"""
        collector = StubCollector()

        assert collector.name == "stub"
        assert collector.logger.name.endswith("stub")

    @pytest.mark.asyncio
    async def test_run_uses_built_client(self):
        """Test run() builds a client when none is given"""
        collector = StubCollector()
        sink = RecordingSink()

        emitted = await collector.run(sink)

        assert collector.collected_with is collector.client
        assert len(emitted) == 1
        assert sink.calls[0][0] == "workers"

    @pytest.mark.asyncio
    async def test_run_prefers_given_client(self):
        """Test an explicit client bypasses build_client()"""
        collector = StubCollector()
        explicit = Mock()

        await collector.run(RecordingSink(), client=explicit)

        assert collector.collected_with is explicit

    @pytest.mark.asyncio
    async def test_run_tracks_failure_and_reraises(self):
        """Test failures propagate through performance tracking"""
        error = UpstreamFetchError("fetch_workers", RuntimeError("down"))
        collector = StubCollector(error=error)

        with patch("jenkins_metrics.core.collector_metrics.logger") as mock_logger:
            with pytest.raises(UpstreamFetchError):
                await collector.run(RecordingSink())

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[1]["extra"]["extra_fields"]["error_type"] == "UpstreamFetchError"
