"""
Tests for Measurement domain model
"""

from datetime import datetime

import pytest

from jenkins_metrics.domain.metrics import Measurement, build_tags


class TestMeasurement:
    """Tests for Measurement"""

    def test_create_measurement(self):
        """Test creating a valid measurement"""
        measurement = Measurement(name="queue", fields={"queue_size": 4}, tags={"url": "http://ci"})

        assert measurement.name == "queue"
        assert measurement.fields["queue_size"] == 4
        assert isinstance(measurement.timestamp, datetime)
        assert measurement.timestamp.tzinfo is not None

    def test_unknown_name_rejected(self):
        """Test names outside queue/workers/worker_labels are rejected"""
        with pytest.raises(ValueError, match="Unknown measurement name"):
            Measurement(name="jenkins_queue", fields={}, tags={})

    @pytest.mark.parametrize("value", [1.5, "3", True, None])
    def test_non_integer_field_rejected(self, value):
        """Test field values must be plain integers"""
        with pytest.raises(TypeError):
            Measurement(name="queue", fields={"queue_size": value}, tags={})

    def test_negative_field_rejected(self):
        """Test counters cannot be negative"""
        with pytest.raises(ValueError, match="non-negative"):
            Measurement(name="workers", fields={"slave_count": -1}, tags={})

    def test_total(self):
        """Test total sums field values"""
        measurement = Measurement(name="worker_labels", fields={"linux": 2, "docker": 1}, tags={})

        assert measurement.total() == 3

    def test_to_dict(self):
        """Test JSON-ready conversion"""
        timestamp = datetime(2026, 2, 7, 12, 0, 0)
        measurement = Measurement(name="queue", fields={"queue_size": 1}, tags={"url": "u"}, timestamp=timestamp)

        assert measurement.to_dict() == {
            "name": "queue",
            "fields": {"queue_size": 1},
            "tags": {"url": "u"},
            "timestamp": "2026-02-07T12:00:00",
        }


class TestBuildTags:
    """Tests for build_tags"""

    def test_url_only_when_host_empty(self):
        """Test empty host is omitted"""
        assert build_tags("http://ci", "") == {"url": "http://ci"}

    def test_host_included_when_set(self):
        """Test non-empty host is added"""
        assert build_tags("http://ci", "jenkins1") == {"url": "http://ci", "host": "jenkins1"}
