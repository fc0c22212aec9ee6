"""Main orchestrator for the balance report pipeline.

Coordinates the balance, airdrop and token info providers to produce one
AddressResult per wallet, processes wallets in fixed-size concurrent
batches, and aggregates everything into a Summary.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator, Sequence, TypeVar

from solders.pubkey import Pubkey

from .calculator.totals import calc_total_balance
from .core.config import Settings
from .core.exceptions import InvalidAddressError
from .core.models import AddressResult, NetworkBalance, Summary
from .core.types import Network
from .providers.airdrop import AirdropChecker
from .providers.balance import BalanceFetcher
from .providers.token_info import TokenInfoFetcher
from .storage.address_file import read_addresses

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int], None]


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive groups of at most ``size`` items."""
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def validate_address(address: str) -> Pubkey:
    """Parse a wallet address, raising InvalidAddressError if malformed."""
    try:
        return Pubkey.from_string(address)
    except (TypeError, ValueError) as e:
        raise InvalidAddressError(address, str(e) or "not a valid public key") from e


class BalanceReportOrchestrator:
    """Orchestrates balance, airdrop and token info lookups for many wallets."""

    def __init__(
        self,
        settings: Settings | None = None,
        devnet_fetcher: BalanceFetcher | None = None,
        testnet_fetcher: BalanceFetcher | None = None,
        airdrop_checker: AirdropChecker | None = None,
        token_info_fetcher: TokenInfoFetcher | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the orchestrator with all providers.

        Args:
            settings: Endpoints and batching parameters (defaults if not provided)
            devnet_fetcher: Devnet balance provider (built from settings if not provided)
            testnet_fetcher: Testnet balance provider (built from settings if not provided)
            airdrop_checker: Airdrop provider (built from settings if not provided)
            token_info_fetcher: Token metadata provider (built from settings if not provided)
            sleep: Coroutine used for the pause between batches
        """
        self.settings = settings or Settings()
        timeout = self.settings.request_timeout

        self.devnet_fetcher = devnet_fetcher or BalanceFetcher(
            Network.DEVNET,
            self.settings.devnet_rpc_url,
            self.settings.devnet_mint,
            timeout=timeout,
        )
        self.testnet_fetcher = testnet_fetcher or BalanceFetcher(
            Network.TESTNET,
            self.settings.testnet_rpc_url,
            self.settings.testnet_mint,
            timeout=timeout,
        )
        self.airdrop_checker = airdrop_checker or AirdropChecker(
            self.settings.airdrop_url, timeout=timeout
        )
        self.token_info_fetcher = token_info_fetcher or TokenInfoFetcher(
            self.settings.token_info_url, timeout=timeout
        )
        self._sleep = sleep

    async def close(self) -> None:
        """Close all providers."""
        for provider in (
            self.devnet_fetcher,
            self.testnet_fetcher,
            self.airdrop_checker,
            self.token_info_fetcher,
        ):
            await provider.close()

    async def __aenter__(self) -> "BalanceReportOrchestrator":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def compute_address(self, address: str) -> AddressResult:
        """
        Compute balances, airdrop status and token info for one wallet.

        Args:
            address: Wallet address

        Returns:
            AddressResult. Any failure gives a zeroed result with ``error``
            set instead of raising.
        """
        try:
            validate_address(address)

            devnet = await self.devnet_fetcher.get_balance(address)
            testnet = await self.testnet_fetcher.get_balance(address)

            airdrop = await self.airdrop_checker.check(address)

            devnet_info = await self.token_info_fetcher.fetch(
                self.settings.devnet_chain_id, self.settings.devnet_mint
            )
            testnet_info = await self.token_info_fetcher.fetch(
                self.settings.testnet_chain_id, self.settings.testnet_mint
            )

            devnet_amount = devnet.balance.ui_amount
            testnet_amount = testnet.balance.ui_amount

            return AddressResult(
                address=address,
                devnet=NetworkBalance(balance=devnet_amount, token_info=devnet_info),
                testnet=NetworkBalance(balance=testnet_amount, token_info=testnet_info),
                total_balance=calc_total_balance(devnet_amount, testnet_amount),
                airdrop=airdrop,
            )

        except Exception as e:
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.error(f"Error calculating total balance for {address}: {message}")
            return AddressResult.failed(address, message)

    async def process_addresses(
        self,
        addresses: Sequence[str],
        on_progress: ProgressCallback | None = None,
    ) -> list[AddressResult]:
        """
        Process wallets in concurrent batches.

        Each batch of ``settings.batch_size`` wallets runs concurrently;
        batches run one after another with ``settings.batch_delay`` seconds
        between them (none after the last).

        Args:
            addresses: Wallet addresses
            on_progress: Called with (processed, total) after each batch

        Returns:
            One AddressResult per input address, in input order
        """
        total = len(addresses)
        batches = list(chunked(addresses, self.settings.batch_size))
        results: list[AddressResult] = []

        logger.info(f"Processing {total} addresses in {len(batches)} batch(es)...")

        for index, batch in enumerate(batches):
            batch_results = await asyncio.gather(
                *(self.compute_address(address) for address in batch)
            )
            results.extend(batch_results)

            logger.info(f"Progress: {len(results)}/{total} addresses processed")
            if on_progress:
                on_progress(len(results), total)

            if index < len(batches) - 1:
                await self._sleep(self.settings.batch_delay)

        return results

    async def run(
        self,
        addresses: Sequence[str],
        on_progress: ProgressCallback | None = None,
    ) -> Summary:
        """Process all wallets and build the Summary."""
        results = await self.process_addresses(addresses, on_progress=on_progress)
        summary = Summary.from_results(results)
        logger.info(
            f"Run complete: {summary.successful_queries}/{summary.total_addresses} "
            f"successful, grand total {summary.grand_total}"
        )
        return summary

    async def run_file(
        self,
        path: Path | str,
        on_progress: ProgressCallback | None = None,
    ) -> Summary:
        """Read wallet addresses from a file and process them."""
        addresses = read_addresses(path)
        return await self.run(addresses, on_progress=on_progress)
