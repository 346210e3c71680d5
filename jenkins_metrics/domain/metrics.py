"""
Base domain model for emitted metrics

Provides the unit of output handed to a metrics sink:
    - Measurement: named bundle of integer fields and string tags
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

QUEUE_MEASUREMENT = "queue"
WORKERS_MEASUREMENT = "workers"
WORKER_LABELS_MEASUREMENT = "worker_labels"

MEASUREMENT_NAMES = (QUEUE_MEASUREMENT, WORKERS_MEASUREMENT, WORKER_LABELS_MEASUREMENT)


@dataclass
class Measurement:
    """
    One named bundle of fields and tags produced by a polling cycle.

    Built fresh each cycle and handed to the sink as soon as it is complete.
    The collector keeps no reference to it afterwards.

    Attributes:
        name: Measurement name ("queue", "workers" or "worker_labels")
        fields: Counter values keyed by field name
        tags: Tag values keyed by tag name (always includes "url")
        timestamp: When the measurement was captured (UTC)

    Example:
        measurement = Measurement(
            name="workers",
            fields={"slave_count": 3, "slaves_busy": 2},
            tags={"url": "http://jenkins.service.consul:8080"},
        )
        print(measurement.fields["slaves_busy"])
    """

    name: str
    fields: dict[str, int]
    tags: dict[str, str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """
        Validate measurement name and field values.

        Raises:
            ValueError: If the name is unknown or a field value is negative
            TypeError: If a field value is not an integer
        """
        if self.name not in MEASUREMENT_NAMES:
            raise ValueError(f"Unknown measurement name: {self.name}")

        for key, value in self.fields.items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"Field {key!r} must be int, got {type(value).__name__}")
            if value < 0:
                raise ValueError(f"Field {key!r} must be non-negative, got {value}")

    def total(self) -> int:
        """Sum of all field values."""
        return sum(self.fields.values())

    def to_dict(self) -> dict:
        """
        Convert measurement to a JSON-serializable dictionary.

        Returns:
            Dictionary with name, fields, tags and ISO 8601 timestamp
        """
        return {
            "name": self.name,
            "fields": dict(self.fields),
            "tags": dict(self.tags),
            "timestamp": self.timestamp.isoformat(),
        }


def build_tags(url: str, host: str = "") -> dict[str, str]:
    """
    Build the tag set shared by every measurement of a cycle.

    Args:
        url: Jenkins server base address
        host: Optional host tag; omitted entirely when empty

    Returns:
        Tag mapping with "url" and, when set, "host"
    """
    tags = {"url": url}
    if host:
        tags["host"] = host
    return tags
