"""
Jenkins REST API Response Transformers

Converts raw Jenkins API responses into domain records.

Jenkins serves runtime state as JSON (/queue/api/json, /computer/api/json)
and configuration as XML (config.xml). The transformers below validate the
parts the collector relies on and raise ValueError on anything malformed, so
the REST client can report one consistent failure.

Usage:
    from jenkins_metrics.collectors.jenkins_rest_transformers import QueueTransformer

    rest_response = {"items": [{"buildable": True, "task": {"name": "build-app"}}]}
    items = QueueTransformer.transform_queue_response(rest_response)
    # Result: [QueueItem(buildable=True, job_name="build-app")]
"""

import re
import xml.etree.ElementTree as ET
from typing import Any

from jenkins_metrics.domain.jenkins import QueueItem, WorkerRecord

# Jenkins writes <?xml version='1.1' ...?> which expat refuses
_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

# Task class of a Pipeline node {} step; its task.url points at the build, not a job
PIPELINE_STEP_TASK_SUFFIX = "$PlaceholderTask"


def _require_list(rest_response: Any, key: str) -> list[Any]:
    if not isinstance(rest_response, dict):
        raise ValueError(f"Expected JSON object, got {type(rest_response).__name__}")
    value = rest_response.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"Expected '{key}' to be a list, got {type(value).__name__}")
    return value


class QueueTransformer:
    """
    Transform /queue/api/json responses.

    REST Response:
    {
        "items": [
            {
                "id": 42,
                "buildable": true,
                "why": "Waiting for next available executor",
                "task": {
                    "_class": "hudson.model.FreeStyleProject",
                    "name": "build-app",
                    "url": "http://jenkins/job/build-app/"
                }
            },
            {
                "buildable": true,
                "task": {
                    "_class": "org.jenkinsci.plugins.workflow.support.steps.ExecutorStepExecution$PlaceholderTask",
                    "name": "part of deploy #12",
                    "url": "http://jenkins/job/deploy/12/"
                }
            }
        ]
    }
    """

    @staticmethod
    def transform_queue_response(rest_response: dict[str, Any]) -> list[QueueItem]:
        """
        Transform queue REST response to QueueItem records.

        Args:
            rest_response: Raw REST API response dict

        Returns:
            QueueItem per queue entry, in server order

        Raises:
            ValueError: If the response or an item is malformed
        """
        items = []
        for raw in _require_list(rest_response, "items"):
            if not isinstance(raw, dict):
                raise ValueError(f"Queue item must be an object, got {type(raw).__name__}")
            task = raw.get("task") or {}
            if not isinstance(task, dict):
                raise ValueError(f"Queue item task must be an object, got {type(task).__name__}")
            task_url = task.get("url")
            items.append(
                QueueItem(
                    buildable=bool(raw.get("buildable", False)),
                    job_name=str(task.get("name", "")),
                    why=raw.get("why"),
                    job_url=str(task_url) if task_url else None,
                    is_pipeline_step=str(task.get("_class", "")).endswith(PIPELINE_STEP_TASK_SUFFIX),
                )
            )
        return items


class ComputerTransformer:
    """
    Transform /computer/api/json responses.

    REST Response:
    {
        "busyExecutors": 2,
        "computer": [
            {"displayName": "master", "idle": true, "jnlpAgent": false, "offline": false},
            {"displayName": "agent-01", "idle": false, "jnlpAgent": true, "offline": false}
        ]
    }
    """

    @staticmethod
    def transform_computers_response(rest_response: dict[str, Any]) -> list[WorkerRecord]:
        """
        Transform computer REST response to WorkerRecord records.

        Args:
            rest_response: Raw REST API response dict

        Returns:
            WorkerRecord per computer, in server order

        Raises:
            ValueError: If the response or a computer is malformed
        """
        workers = []
        for raw in _require_list(rest_response, "computer"):
            if not isinstance(raw, dict) or "displayName" not in raw:
                raise ValueError("Computer entry must be an object with a displayName")
            workers.append(
                WorkerRecord(
                    display_name=str(raw["displayName"]),
                    is_managed_agent=bool(raw.get("jnlpAgent", False)),
                    is_idle=bool(raw.get("idle", False)),
                    offline=bool(raw.get("offline", False)),
                )
            )
        return workers


class ConfigXmlTransformer:
    """Extract single top-level elements from Jenkins config.xml documents."""

    @staticmethod
    def extract_element(config_xml: str, element: str) -> str:
        """
        Return the text of a top-level element of a config.xml document.

        Args:
            config_xml: Raw XML text
            element: Tag name of a direct child of the root (e.g., "label")

        Returns:
            Stripped element text, or "" if the element is absent or empty

        Raises:
            ValueError: If the document is not well-formed XML
        """
        try:
            root = ET.fromstring(_XML_DECLARATION.sub("", config_xml, count=1))
        except ET.ParseError as e:
            raise ValueError(f"Malformed config.xml: {e}") from e
        return (root.findtext(element) or "").strip()

    @staticmethod
    def transform_job_config(config_xml: str) -> str:
        """
        Get the node label a job is restricted to.

        Freestyle jobs store it as <assignedNode>; jobs without a restriction
        (including pipelines) have none and yield "".
        """
        return ConfigXmlTransformer.extract_element(config_xml, "assignedNode")

    @staticmethod
    def transform_computer_config(config_xml: str) -> str:
        """
        Get the space-separated label string of an agent from its <label> element.
        """
        return ConfigXmlTransformer.extract_element(config_xml, "label")
