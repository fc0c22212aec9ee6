"""Airdrop allocation provider.

Asks the allocation API which airdrop allocations a wallet has. The API
answers with a JSON list of allocation records; an empty list means the
wallet is not eligible.
"""

import logging
import time

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import DataSourceError
from ..core.models import AirdropStatus, AllocationDetail
from ..core.types import DataSource
from .base import HTTPProvider

logger = logging.getLogger(__name__)


class AirdropChecker(HTTPProvider):
    """Checks airdrop eligibility of wallets."""

    SOURCE = DataSource.AIRDROP_API

    async def _fetch_allocations(self, address: str) -> list[AllocationDetail]:
        """Fetch and parse allocation records, raising on any failure."""
        start_time = time.monotonic()
        try:
            response = await self.client.get(
                self.url,
                params={"address": address},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"HTTP {e.response.status_code}",
                endpoint=self.url,
                status_code=e.response.status_code,
            )
        except httpx.RequestError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=str(e) or type(e).__name__,
                endpoint=self.url,
            )
        finally:
            self._log_duration("allocations", start_time)

        try:
            data = response.json()
        except ValueError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Invalid JSON response: {e}",
                endpoint=self.url,
            )

        if not isinstance(data, list):
            raise DataSourceError(
                source=self.SOURCE.value,
                message="Invalid response format",
                endpoint=self.url,
            )

        try:
            return [AllocationDetail.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise DataSourceError(
                source=self.SOURCE.value,
                message=f"Invalid allocation record: {e.error_count()} error(s)",
                endpoint=self.url,
            )

    async def check(self, address: str) -> AirdropStatus:
        """
        Check airdrop eligibility for a wallet.

        Args:
            address: Wallet address

        Returns:
            AirdropStatus. Eligible when at least one allocation exists; the
            total is the sum of allocation amounts. Failures give an
            ineligible status with ``error`` set. Never raises.
        """
        try:
            allocations = await self._fetch_allocations(address)
        except DataSourceError as e:
            logger.warning(f"Airdrop check failed for {address}: {e.message}")
            return AirdropStatus.failed(e.message)

        status = AirdropStatus.from_allocations(allocations)
        if status.is_eligible:
            logger.debug(
                f"{address} eligible: {len(allocations)} allocation(s), "
                f"total {status.total_airdrop}"
            )
        return status
