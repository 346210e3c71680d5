"""
Data Collectors - Fetch metrics from Jenkins

This package contains:
    - base: client/sink interfaces, UpstreamFetchError, BaseCollector
    - jenkins_rest_client: Jenkins remote access API client
    - jenkins_rest_transformers: JSON/XML response parsing
    - jenkins_metrics: the Jenkins collector (registered as "jenkins")

Collectors are run once per polling interval by the host process.
"""

from .jenkins_metrics import JenkinsCollector

__all__ = ["JenkinsCollector"]
