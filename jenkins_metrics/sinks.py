"""
Metrics Sinks - Destinations for finished measurements

    - MetricsAccumulator: keeps measurements in memory, in emission order
    - JSONLinesSink: writes one JSON object per measurement to a text stream

Usage:
    import sys
    from jenkins_metrics.sinks import JSONLinesSink

    sink = JSONLinesSink(sys.stdout)
    sink.add_fields("workers", {"slave_count": 3, "slaves_busy": 1}, {"url": "http://jenkins:8080"})
"""

import json
from typing import TextIO

from jenkins_metrics.collectors.base import MetricsSink
from jenkins_metrics.domain.metrics import Measurement


class MetricsAccumulator(MetricsSink):
    """In-memory sink, mainly for embedding and tests."""

    def __init__(self):
        self.measurements: list[Measurement] = []

    def add_fields(self, measurement: str, fields: dict[str, int], tags: dict[str, str]) -> None:
        self.measurements.append(Measurement(name=measurement, fields=dict(fields), tags=dict(tags)))

    def add_measurement(self, measurement: Measurement) -> None:
        self.measurements.append(measurement)

    def names(self) -> list[str]:
        """Names of accumulated measurements, in emission order."""
        return [m.name for m in self.measurements]

    def get(self, name: str) -> Measurement | None:
        """
        Get the most recent measurement with the given name.

        Returns:
            Matching measurement, or None if none was emitted
        """
        for measurement in reversed(self.measurements):
            if measurement.name == name:
                return measurement
        return None

    def clear(self) -> None:
        self.measurements.clear()


class JSONLinesSink(MetricsSink):
    """
    Sink writing newline-delimited JSON.

    Each line holds name, fields, tags and an ISO 8601 timestamp. The stream
    is flushed after every line so a downstream reader sees measurements as
    soon as they are emitted.
    """

    def __init__(self, stream: TextIO):
        self.stream = stream

    def add_fields(self, measurement: str, fields: dict[str, int], tags: dict[str, str]) -> None:
        self.add_measurement(Measurement(name=measurement, fields=dict(fields), tags=dict(tags)))

    def add_measurement(self, measurement: Measurement) -> None:
        self.stream.write(json.dumps(measurement.to_dict(), sort_keys=True) + "\n")
        self.stream.flush()
