"""Base classes for data providers."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..core.types import DataSource

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0


class BaseProvider(ABC):
    """Abstract base class for all data providers."""

    # Subclasses must define their data source
    SOURCE: DataSource

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize provider.

        Args:
            timeout: Per-request timeout in seconds
        """
        self.timeout = timeout

    def _log_duration(self, action: str, start_time: float) -> int:
        """Log how long a request took and return it in milliseconds."""
        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug(f"[{self.SOURCE.value}] {action} took {duration_ms}ms")
        return duration_ms

    @abstractmethod
    async def close(self) -> None:
        """Release network resources owned by this provider."""
        pass

    async def __aenter__(self) -> "BaseProvider":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class HTTPProvider(BaseProvider):
    """Base class for providers talking to a REST endpoint over httpx."""

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize HTTP provider.

        Args:
            url: Endpoint URL
            client: Shared client. If not provided, the provider creates
                    and owns one.
            timeout: Per-request timeout in seconds
        """
        super().__init__(timeout=timeout)
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
