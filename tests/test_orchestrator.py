"""Tests for the batch orchestrator."""

import asyncio
import math

import httpx
import pytest

from sonic_ring.core.config import Settings
from sonic_ring.core.exceptions import AddressFileError, InvalidAddressError
from sonic_ring.core.models import AirdropStatus
from sonic_ring.orchestrator import BalanceReportOrchestrator, chunked, validate_address
from sonic_ring.providers.airdrop import AirdropChecker
from sonic_ring.providers.token_info import TokenInfoFetcher

from conftest import DEVNET_MINT, TOKEN_INFO_URL, json_response, mock_client


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def build_orchestrator(settings, make_balance_fetchers, make_airdrop_checker, token_info_fetcher, sleeper):
    """Factory for an orchestrator wired to stub providers."""

    def factory(devnet=None, testnet=None, airdrops=None, **overrides):
        devnet_fetcher, testnet_fetcher = make_balance_fetchers(devnet, testnet)
        kwargs = dict(
            settings=settings,
            devnet_fetcher=devnet_fetcher,
            testnet_fetcher=testnet_fetcher,
            airdrop_checker=make_airdrop_checker(airdrops),
            token_info_fetcher=token_info_fetcher,
            sleep=sleeper,
        )
        kwargs.update(overrides)
        return BalanceReportOrchestrator(**kwargs)

    return factory


class TestChunked:
    """Tests for batch splitting."""

    def test_twelve_items_make_three_groups(self):
        """Twelve items split 5, 5, 2."""
        groups = list(chunked(list(range(12)), 5))
        assert [len(g) for g in groups] == [5, 5, 2]
        assert [x for g in groups for x in g] == list(range(12))

    def test_exact_multiple(self):
        """No empty trailing group."""
        assert [len(g) for g in chunked(list(range(10)), 5)] == [5, 5]

    def test_empty(self):
        """No items, no groups."""
        assert list(chunked([], 5)) == []

    def test_invalid_size(self):
        """Group size must be positive."""
        with pytest.raises(ValueError):
            list(chunked([1, 2], 0))


class TestValidateAddress:
    """Tests for address validation."""

    def test_valid(self):
        """A base58 key parses."""
        assert str(validate_address(DEVNET_MINT)) == DEVNET_MINT

    @pytest.mark.parametrize("address", ["", "abc", "0OIl" * 11, DEVNET_MINT + "x"])
    def test_invalid(self, address):
        """Malformed keys raise InvalidAddressError."""
        with pytest.raises(InvalidAddressError):
            validate_address(address)


class TestComputeAddress:
    """Tests for single address computation."""

    async def test_combines_balances_airdrop_and_token_info(
        self, build_orchestrator, addresses, allocation_response, token_info_response
    ):
        """Balances, airdrop and token info combine into one result."""
        address = addresses[0]
        orchestrator = build_orchestrator(
            devnet={address: 100.5},
            testnet={address: 20.25},
            airdrops={address: allocation_response},
        )

        result = await orchestrator.compute_address(address)

        assert result.ok
        assert result.address == address
        assert result.devnet.balance == 100.5
        assert result.testnet.balance == 20.25
        assert result.total_balance == pytest.approx(120.75)
        assert result.devnet.token_info == token_info_response
        assert result.testnet.token_info == token_info_response
        assert result.airdrop.is_eligible
        assert result.airdrop.total_airdrop == 15

    async def test_missing_accounts_give_zero_without_error(self, build_orchestrator, addresses):
        """Missing token accounts are not failures."""
        result = await build_orchestrator().compute_address(addresses[0])

        assert result.ok
        assert result.devnet.balance == 0
        assert result.testnet.balance == 0
        assert result.total_balance == 0

    async def test_invalid_address_is_zeroed_error(self, build_orchestrator):
        """An invalid address gives a zeroed error result."""
        result = await build_orchestrator().compute_address("definitely-not-base58!")

        assert not result.ok
        assert "Invalid address" in result.error
        assert result.total_balance == 0
        assert result.devnet.balance == 0
        assert result.testnet.balance == 0
        assert result.airdrop == AirdropStatus()

    async def test_token_info_failure_is_zeroed_error(self, build_orchestrator, addresses):
        """A token info failure fails only that address."""
        address = addresses[0]
        failing = TokenInfoFetcher(
            TOKEN_INFO_URL,
            client=mock_client(lambda request: json_response({}, status_code=500)),
        )
        orchestrator = build_orchestrator(devnet={address: 5.0}, token_info_fetcher=failing)

        result = await orchestrator.compute_address(address)

        assert "Failed to fetch token info" in result.error
        assert result.total_balance == 0
        assert result.devnet.balance == 0

    async def test_airdrop_failure_keeps_address_successful(self, build_orchestrator, addresses):
        """An airdrop failure does not fail the address."""
        address = addresses[0]
        orchestrator = build_orchestrator(
            devnet={address: 1.0},
            airdrops={address: {"unexpected": "shape"}},
        )

        result = await orchestrator.compute_address(address)

        assert result.ok
        assert result.total_balance == 1.0
        assert not result.airdrop.is_eligible
        assert result.airdrop.error


class TestProcessAddresses:
    """Tests for batch processing."""

    async def test_batches_and_pauses(self, build_orchestrator, addresses, sleeper):
        """Twelve addresses run in three batches with two pauses."""
        progress = []
        orchestrator = build_orchestrator()

        results = await orchestrator.process_addresses(
            addresses, on_progress=lambda done, total: progress.append((done, total))
        )

        assert len(results) == 12
        assert progress == [(5, 12), (10, 12), (12, 12)]
        assert sleeper.calls == [1.0, 1.0]

    async def test_single_batch_has_no_pause(self, build_orchestrator, addresses, sleeper):
        """No pause after the last batch."""
        await build_orchestrator().process_addresses(addresses[:5])
        assert sleeper.calls == []

    async def test_results_keep_input_order(self, build_orchestrator, addresses):
        """Results follow input order."""
        balances = {address: float(i) for i, address in enumerate(addresses)}
        orchestrator = build_orchestrator(devnet=balances)

        results = await orchestrator.process_addresses(addresses)

        assert [r.address for r in results] == addresses
        assert [r.devnet.balance for r in results] == [float(i) for i in range(12)]

    async def test_bad_address_does_not_stop_batch(self, build_orchestrator, addresses):
        """One bad address does not affect the others."""
        mixed = [addresses[0], "bad address", addresses[1]]
        orchestrator = build_orchestrator(devnet={addresses[1]: 3.0})

        results = await orchestrator.process_addresses(mixed)

        assert [r.address for r in results] == mixed
        assert results[0].ok
        assert not results[1].ok
        assert results[2].ok
        assert results[2].total_balance == 3.0

    async def test_batch_runs_concurrently(self, build_orchestrator, addresses):
        """Addresses in a batch run at the same time."""
        in_flight = 0
        peak = 0

        class SlowChecker(AirdropChecker):
            async def check(self, address):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return AirdropStatus()

        checker = SlowChecker("https://airdrop.test", client=httpx.AsyncClient())
        orchestrator = build_orchestrator(airdrop_checker=checker)

        await orchestrator.process_addresses(addresses)

        assert peak == 5


class TestRun:
    """Tests for the full run."""

    async def test_summary_totals(self, build_orchestrator, addresses, allocation_response):
        """Run aggregates balances and airdrops."""
        devnet = {addresses[0]: 10.0, addresses[1]: 2.5}
        testnet = {addresses[0]: 1.0, addresses[2]: 4.0}
        orchestrator = build_orchestrator(
            devnet=devnet,
            testnet=testnet,
            airdrops={addresses[3]: allocation_response},
        )

        summary = await orchestrator.run(addresses + ["oops"])

        assert summary.total_addresses == 13
        assert len(summary.details) == 13
        assert summary.successful_queries == 12
        assert summary.failed_queries == 1
        assert summary.successful_queries + summary.failed_queries == summary.total_addresses
        assert summary.grand_total == pytest.approx(17.5)
        assert math.isclose(summary.grand_total, sum(r.total_balance for r in summary.details))
        assert summary.total_eligible_airdrops == 1
        assert summary.total_airdrop_amount == 15

    async def test_run_file_skips_blank_lines(self, build_orchestrator, addresses, tmp_path):
        """Blank lines in the address file are ignored."""
        path = tmp_path / "addresses.txt"
        path.write_text(f"\n  {addresses[0]}  \n\n{addresses[1]}\n   \n", encoding="utf-8")

        summary = await build_orchestrator().run_file(path)

        assert [r.address for r in summary.details] == addresses[:2]

    async def test_run_file_missing_is_fatal(self, build_orchestrator, tmp_path):
        """A missing address file raises."""
        with pytest.raises(AddressFileError):
            await build_orchestrator().run_file(tmp_path / "missing.txt")

    async def test_empty_list(self, build_orchestrator, sleeper):
        """An empty list gives an empty summary."""
        summary = await build_orchestrator().run([])

        assert summary.total_addresses == 0
        assert summary.grand_total == 0
        assert summary.details == []
        assert sleeper.calls == []

    async def test_context_manager_closes_providers(self, settings, make_balance_fetchers, sleeper):
        """Only owned clients are closed on exit."""
        devnet_fetcher, testnet_fetcher = make_balance_fetchers()
        airdrop_client = httpx.AsyncClient()
        orchestrator = BalanceReportOrchestrator(
            settings,
            devnet_fetcher=devnet_fetcher,
            testnet_fetcher=testnet_fetcher,
            airdrop_checker=AirdropChecker("https://airdrop.test", client=airdrop_client),
            token_info_fetcher=TokenInfoFetcher(TOKEN_INFO_URL),
            sleep=sleeper,
        )

        async with orchestrator:
            pass

        assert orchestrator.token_info_fetcher.client.is_closed
        assert not airdrop_client.is_closed

    async def test_request_timeout_reaches_every_client(self):
        """Owned HTTP and RPC clients use the configured request timeout."""
        async with BalanceReportOrchestrator(Settings(request_timeout=3)) as orchestrator:
            expected = httpx.Timeout(3)
            assert orchestrator.airdrop_checker.client.timeout == expected
            assert orchestrator.token_info_fetcher.client.timeout == expected
            for fetcher in (orchestrator.devnet_fetcher, orchestrator.testnet_fetcher):
                assert fetcher.timeout == 3
                assert fetcher._client._provider.session.timeout == expected
