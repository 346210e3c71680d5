"""
Jenkins Metrics Collector

Polls a Jenkins server's management API and turns the build queue and agent
pool into measurements for a metrics pipeline.

Package Structure:
    - core: Infrastructure (logging, cycle performance tracking)
    - domain: Domain models (QueueItem, WorkerRecord, Measurement)
    - collectors: Jenkins REST client, response transformers, the collector
    - utils: Structured error handling helpers
    - sinks: Measurement outputs (in-memory, JSON lines)
"""

__version__ = "1.0.0"
__author__ = "Engineering Metrics Team"
