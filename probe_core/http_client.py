"""
HTTP Client Lifecycle Management.

Provides a lifecycle-managed httpx.AsyncClient for data-fetch probes. The
client is created by the orchestrator, handed to the ProbeContext, and closed
when the orchestrator's scope exits.

Usage:
    async with create_http_client_context(timeout=5.0) as http_manager:
        context = ProbeContext(http_client=http_manager.client)
        ...
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx

logger = logging.getLogger(__name__)


class HttpClientManager:
    """
    Manages the lifecycle of httpx.AsyncClient.

    This class provides a clean interface for creating and closing
    HTTP clients, ensuring proper resource cleanup.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_connections: int = 10,
        max_keepalive_connections: int = 5,
        keepalive_expiry: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the HTTP client manager.

        Args:
            timeout: Default timeout for requests in seconds.
            max_connections: Maximum number of concurrent connections.
            max_keepalive_connections: Maximum keep-alive connections.
            keepalive_expiry: Keep-alive connection expiry in seconds.
            transport: Optional transport override (e.g. httpx.MockTransport).
        """
        self._timeout = timeout
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
            keepalive_expiry=keepalive_expiry,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def start(self) -> httpx.AsyncClient:
        """
        Create and start the HTTP client.

        Returns:
            The initialized httpx.AsyncClient.

        Raises:
            RuntimeError: If client is already started.
        """
        if self._client is not None:
            raise RuntimeError("HTTP client already started")

        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            limits=self._limits,
            follow_redirects=True,
            transport=self._transport,
        )
        logger.info(
            f"HTTP client started (timeout={self._timeout}s, "
            f"max_connections={self._limits.max_connections})"
        )
        return self._client

    async def stop(self) -> None:
        """Close the HTTP client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("HTTP client closed")

    @property
    def client(self) -> httpx.AsyncClient:
        """
        Get the managed HTTP client.

        Raises:
            RuntimeError: If client is not started.
        """
        if self._client is None:
            raise RuntimeError("HTTP client not started.")
        return self._client

    @property
    def is_running(self) -> bool:
        """Check if the HTTP client is running."""
        return self._client is not None and not self._client.is_closed


@asynccontextmanager
async def create_http_client_context(
    timeout: float = 10.0,
    max_connections: int = 10,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncGenerator[HttpClientManager, None]:
    """
    Async context manager for HTTP client lifecycle.

    Args:
        timeout: Request timeout in seconds.
        max_connections: Maximum concurrent connections.
        transport: Optional transport override.

    Yields:
        HttpClientManager instance.
    """
    manager = HttpClientManager(
        timeout=timeout,
        max_connections=max_connections,
        transport=transport,
    )

    try:
        await manager.start()
        yield manager
    finally:
        await manager.stop()
