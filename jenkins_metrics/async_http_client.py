"""
Async HTTP Client Wrapper

Provides async HTTP methods with SSL verification and timeouts.
Built on httpx with connection pooling and HTTP/2.

Usage:
    from jenkins_metrics.async_http_client import AsyncSecureHTTPClient

    async with AsyncSecureHTTPClient() as client:
        response = await client.get(url)

Security Features:
    - SSL verification enabled by default (verify=True)
    - new_insecure_http_client() is the only way to turn it off, and it is
      only called when the operator sets JENKINS_INSECURE
    - Default 30-second timeout on all requests
"""

import httpx

from jenkins_metrics.core.logging_config import get_logger

logger = get_logger(__name__)


class AsyncSecureHTTPClient:
    """
    Async HTTP client with SSL verification and connection pooling.

    The wrapper can be entered repeatedly: each `async with` opens a fresh
    httpx.AsyncClient and closes it on exit.

    Features:
    - Context manager for automatic connection cleanup
    - Connection pooling (configurable max connections)
    - HTTP/2 support for multiplexing
    - Request timeouts
    """

    DEFAULT_TIMEOUT = 30  # seconds
    DEFAULT_MAX_CONNECTIONS = 10
    DEFAULT_MAX_KEEPALIVE = 5

    def __init__(
        self,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE,
        timeout: float = DEFAULT_TIMEOUT,
        http2: bool = True,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize async HTTP client.

        Args:
            max_connections: Maximum number of concurrent connections (default: 10)
            max_keepalive_connections: Max persistent connections (default: 5)
            timeout: Default timeout in seconds (default: 30)
            http2: Enable HTTP/2 support (default: True)
            verify: Verify TLS certificates (default: True)
            transport: Optional custom httpx transport
        """
        self.limits = httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_keepalive_connections)
        self.timeout = httpx.Timeout(timeout)
        self.http2 = http2
        self.verify = verify
        self.transport = transport
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncSecureHTTPClient":
        """Context manager entry - create async client"""
        self.client = httpx.AsyncClient(
            limits=self.limits,
            timeout=self.timeout,
            verify=self.verify,
            http2=self.http2,
            transport=self.transport,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args):
        """Context manager exit - close connections"""
        if self.client:
            await self.client.aclose()
            self.client = None

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """
        Async GET request.

        Args:
            url: URL to fetch
            **kwargs: Additional arguments to pass to httpx.AsyncClient.get()

        Returns:
            httpx.Response: HTTP response

        Raises:
            RuntimeError: If used outside of the context manager
        """
        if not self.client:
            raise RuntimeError("Client not initialized. Use 'async with AsyncSecureHTTPClient()' context manager")

        kwargs.setdefault("timeout", self.timeout)
        return await self.client.get(url, **kwargs)


def new_insecure_http_client(**kwargs) -> AsyncSecureHTTPClient:
    """
    Build an HTTP client that skips TLS certificate verification.

    This removes protection against active network tampering. It exists for
    Jenkins servers with self-signed or internal certificates and must only
    be used when the operator explicitly sets JENKINS_INSECURE.

    Args:
        **kwargs: Passed through to AsyncSecureHTTPClient (verify is forced off)

    Returns:
        AsyncSecureHTTPClient with verify=False
    """
    kwargs["verify"] = False
    logger.warning("TLS certificate verification is disabled for Jenkins requests")
    return AsyncSecureHTTPClient(**kwargs)
