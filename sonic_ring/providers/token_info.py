"""Token metadata provider.

Fetches descriptive metadata (name, symbol, logo) for token mints from the
token list API. The response is stored in the report as-is.
"""

import logging
import time
from typing import Any

import httpx

from ..core.exceptions import DataSourceError
from ..core.types import DataSource
from .base import HTTPProvider

logger = logging.getLogger(__name__)


class TokenInfoFetcher(HTTPProvider):
    """Fetches mint metadata from the token list API."""

    SOURCE = DataSource.TOKEN_LIST_API

    async def fetch(self, chain_id: int, mint: str) -> Any:
        """
        Fetch metadata for one mint.

        Args:
            chain_id: Token list chain id (103 devnet, 102 testnet)
            mint: Token mint address

        Returns:
            Parsed response body

        Raises:
            DataSourceError: On non-success status, transport error or
                an unparseable body
        """
        start_time = time.monotonic()
        try:
            response = await self.client.post(
                self.url,
                params={"chainId": chain_id},
                json={"addresses": [mint]},
                timeout=self.timeout,
            )
        except httpx.RequestError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Failed to fetch token info for chain {chain_id}: {e}",
                endpoint=self.url,
            )
        finally:
            self._log_duration(f"mints chainId={chain_id}", start_time)

        if not response.is_success:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Failed to fetch token info for chain {chain_id}",
                endpoint=self.url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Invalid token info response for chain {chain_id}: {e}",
                endpoint=self.url,
                status_code=response.status_code,
            )
