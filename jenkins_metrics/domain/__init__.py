"""
Domain Models - Type-safe data structures for Jenkins metrics

This package contains dataclasses representing the collector's domain:
    - jenkins: QueueItem, WorkerRecord (records read from the Jenkins API)
    - metrics: Measurement (the unit handed to a metrics sink)

Usage:
    from jenkins_metrics.domain import Measurement, QueueItem

    item = QueueItem(buildable=True, job_name="build-app")
    if item.buildable:
        print(f"{item.job_name} is waiting for an executor")
"""

from .jenkins import QueueItem, WorkerRecord
from .metrics import Measurement

__all__ = [
    # Base measurement
    "Measurement",
    # Jenkins records
    "QueueItem",
    "WorkerRecord",
]
