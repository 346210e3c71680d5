"""
Jenkins REST API Client

Read-only access to the parts of the Jenkins remote access API the collector
needs. Uses AsyncSecureHTTPClient for HTTP/2, connection pooling and TLS
verification.

Usage:
    from jenkins_metrics.collectors.jenkins_rest_client import JenkinsRESTClient

    client = JenkinsRESTClient(url="http://jenkins:8080", username="admin", password="api-token")

    queue = await client.fetch_queue()
    workers = await client.fetch_workers()
    labels = await client.fetch_worker_config("agent-01")

API Documentation:
    https://www.jenkins.io/doc/book/using/remote-access-api/
"""

import base64
from typing import Any
from urllib.parse import quote, urlencode, urlsplit

import httpx

from jenkins_metrics.async_http_client import AsyncSecureHTTPClient
from jenkins_metrics.collectors.base import JenkinsClient, UpstreamFetchError
from jenkins_metrics.collectors.jenkins_rest_transformers import (
    ComputerTransformer,
    ConfigXmlTransformer,
    QueueTransformer,
)
from jenkins_metrics.core import get_logger
from jenkins_metrics.core.collector_metrics import get_current_tracker
from jenkins_metrics.domain.jenkins import QueueItem, WorkerRecord

logger = get_logger(__name__)

QUEUE_TREE = "items[buildable,why,task[name,url]]"
COMPUTER_TREE = "computer[displayName,idle,jnlpAgent,offline]"


class JenkinsRESTClient(JenkinsClient):
    """
    Jenkins remote access API client using direct HTTP calls.

    Features:
    - Async HTTP/2 requests with connection pooling
    - HTTP Basic authentication (password or API token)
    - Replaceable HTTP client (override_http_client) for custom transports
    - Every failure surfaces as UpstreamFetchError; nothing is retried
    """

    def __init__(self, url: str, username: str, password: str):
        """
        Initialize Jenkins REST client.

        Args:
            url: Jenkins base address (e.g., http://jenkins.service.consul:8080)
            username: Jenkins user
            password: Password or Jenkins-generated API token

        Raises:
            ValueError: If url or username is empty
        """
        if not url or not username:
            raise ValueError("url and username are required")

        self.url = url.rstrip("/")
        self.username = username
        self.auth_header = self._build_auth_header(username, password)
        self.http_client = AsyncSecureHTTPClient()

    def _build_auth_header(self, username: str, password: str) -> dict[str, str]:
        """
        Build Basic Authentication header.

        Args:
            username: Jenkins user
            password: Password or API token

        Returns:
            Dictionary with Authorization header
        """
        credentials = f"{username}:{password}"
        b64_credentials = base64.b64encode(credentials.encode()).decode()
        return {"Authorization": f"Basic {b64_credentials}"}

    def override_http_client(self, http_client: AsyncSecureHTTPClient) -> None:
        """
        Replace the HTTP client used for all subsequent requests.

        Call before the first request, e.g. with new_insecure_http_client().

        Args:
            http_client: Client to use instead of the default verified one
        """
        self.http_client = http_client

    def _build_url(self, path: str, **params: Any) -> str:
        """
        Build Jenkins API URL with query parameters.

        Args:
            path: Path below the base address (e.g., "queue/api/json")
            **params: Query parameters (None values are filtered out)

        Returns:
            Complete API URL with query string

        Example:
            _build_url("computer/api/json", tree="computer[displayName]")
            -> "http://jenkins:8080/computer/api/json?tree=computer%5BdisplayName%5D"
        """
        url = f"{self.url}/{path}"

        filtered_params = {k: v for k, v in params.items() if v is not None}
        if filtered_params:
            url = f"{url}?{urlencode(filtered_params)}"

        return url

    async def _handle_api_call(self, operation: str, url: str) -> httpx.Response:
        """
        Execute a GET request and translate failures.

        The failed cycle is logged at ERROR by the tracker; here only
        authentication failures get their own WARNING.

        Args:
            operation: Client operation name used in errors and logs
            url: Full API URL

        Returns:
            Successful response

        Raises:
            UpstreamFetchError: For HTTP status errors and network errors
        """
        tracker = get_current_tracker()
        if tracker:
            tracker.record_api_call()

        try:
            async with self.http_client as client:
                response = await client.get(url, headers=self.auth_header)
                response.raise_for_status()
                return response

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code in (401, 403):
                logger.warning(f"Jenkins authentication failed (HTTP {status_code}) for user {self.username}")
            else:
                logger.debug(f"Jenkins HTTP error {status_code} on {operation}")
            raise UpstreamFetchError(operation, e) from e

        except httpx.RequestError as e:
            logger.debug(f"Network error on {operation}: {e}")
            raise UpstreamFetchError(operation, e) from e

    async def _get_json(self, operation: str, url: str) -> Any:
        response = await self._handle_api_call(operation, url)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(operation, e) from e

    async def _get_text(self, operation: str, url: str) -> str:
        response = await self._handle_api_call(operation, url)
        return response.text

    # ==============================
    # Queue APIs
    # ==============================

    async def fetch_queue(self) -> list[QueueItem]:
        """
        Get the build queue.

        REST Endpoint: GET {url}/queue/api/json?tree=items[buildable,why,task[name,url]]

        Returns:
            QueueItem per queued build

        Raises:
            UpstreamFetchError: If the request fails or the body is malformed
        """
        url = self._build_url("queue/api/json", tree=QUEUE_TREE)
        payload = await self._get_json("fetch_queue", url)
        try:
            return QueueTransformer.transform_queue_response(payload)
        except ValueError as e:
            raise UpstreamFetchError("fetch_queue", e) from e

    async def fetch_job_label(self, job_name: str, job_url: str | None = None) -> str:
        """
        Get the node label a job is restricted to.

        REST Endpoint: GET {job_url}/config.xml, or {url}/job/{job_name}/config.xml
        when the queue item carried no task URL

        Only the path of job_url is used; scheme and host come from the
        configured url.

        Args:
            job_name: Job name from the queue item
            job_url: Absolute job URL from the queue item (task.url)

        Returns:
            Assigned node label, or "" when the job can run anywhere

        Raises:
            UpstreamFetchError: If the request fails or the XML is malformed
        """
        if job_url:
            base = urlsplit(self.url)
            url = f"{base.scheme}://{base.netloc}{urlsplit(job_url).path.rstrip('/')}/config.xml"
        else:
            url = self._build_url(f"job/{quote(job_name, safe='')}/config.xml")
        config_xml = await self._get_text("fetch_job_label", url)
        try:
            return ConfigXmlTransformer.transform_job_config(config_xml)
        except ValueError as e:
            raise UpstreamFetchError("fetch_job_label", e) from e

    # ==============================
    # Computer APIs
    # ==============================

    async def fetch_workers(self) -> list[WorkerRecord]:
        """
        Get the computer inventory (built-in executor and agents).

        REST Endpoint: GET {url}/computer/api/json?tree=computer[displayName,idle,jnlpAgent,offline]

        Returns:
            WorkerRecord per computer

        Raises:
            UpstreamFetchError: If the request fails or the body is malformed
        """
        url = self._build_url("computer/api/json", tree=COMPUTER_TREE)
        payload = await self._get_json("fetch_workers", url)
        try:
            return ComputerTransformer.transform_computers_response(payload)
        except ValueError as e:
            raise UpstreamFetchError("fetch_workers", e) from e

    async def fetch_worker_config(self, display_name: str) -> str:
        """
        Get the label string of one computer.

        REST Endpoint: GET {url}/computer/{display_name}/config.xml

        Args:
            display_name: Computer name from the inventory

        Returns:
            Space-separated labels, or "" when the agent has none

        Raises:
            UpstreamFetchError: If the request fails or the XML is malformed
        """
        url = self._build_url(f"computer/{quote(display_name, safe='')}/config.xml")
        config_xml = await self._get_text("fetch_worker_config", url)
        try:
            return ConfigXmlTransformer.transform_computer_config(config_xml)
        except ValueError as e:
            raise UpstreamFetchError("fetch_worker_config", e) from e
