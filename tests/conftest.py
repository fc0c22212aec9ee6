"""Pytest configuration and fixtures for balance report tests."""

import json
from types import SimpleNamespace
from typing import Any, Callable

import httpx
import pytest
from solana.rpc.core import RPCException
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from sonic_ring.core.config import Settings
from sonic_ring.core.types import Network
from sonic_ring.providers.airdrop import AirdropChecker
from sonic_ring.providers.balance import BalanceFetcher, derive_associated_token_address
from sonic_ring.providers.token_info import TokenInfoFetcher

DEVNET_MINT = "8DihuwAUQ9CAU8U2pQ5Rv7FzpsGaZmbwK9Ln6fStdSeo"
TESTNET_MINT = "EaVyvc1xw2wsZV3en6HaSx5B3ebuANXfrFekzX7zZzVm"

AIRDROP_URL = "https://airdrop.test/api/allocations"
TOKEN_INFO_URL = "https://tokens.test/v1/mints"

ACCOUNT_NOT_FOUND = (
    "failed to get token account balance: Invalid param: could not find account"
)


def new_wallet() -> Pubkey:
    """A fresh wallet key, always on the ed25519 curve."""
    return Keypair().pubkey()


class StubRpcClient:
    """Stands in for solana AsyncClient.

    Balances are keyed by associated token account address; any other
    account raises the RPC's "could not find account" error.
    """

    def __init__(self, balances: dict[str, tuple[str, int, float]] | None = None, error: Exception | None = None):
        self.balances = balances or {}
        self.error = error
        self.calls: list[Pubkey] = []
        self.closed = False

    async def get_token_account_balance(self, pubkey: Pubkey) -> Any:
        self.calls.append(pubkey)
        if self.error is not None:
            raise self.error
        key = str(pubkey)
        if key not in self.balances:
            raise RPCException(ACCOUNT_NOT_FOUND)
        amount, decimals, ui_amount = self.balances[key]
        return SimpleNamespace(
            value=SimpleNamespace(
                amount=amount,
                decimals=decimals,
                ui_amount=ui_amount,
                ui_amount_string=str(ui_amount),
            )
        )

    async def close(self) -> None:
        self.closed = True


def rpc_client_for(mint: str, balances: dict[str, float], decimals: int = 9) -> StubRpcClient:
    """Build a stub RPC client holding ``owner -> ui amount`` balances of ``mint``."""
    mint_key = Pubkey.from_string(mint)
    accounts = {}
    for owner, ui_amount in balances.items():
        ata = derive_associated_token_address(Pubkey.from_string(owner), mint_key)
        raw = str(int(round(ui_amount * 10**decimals)))
        accounts[str(ata)] = (raw, decimals, ui_amount)
    return StubRpcClient(accounts)


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(data).encode(), headers={"content-type": "application/json"})


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """httpx client whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def addresses() -> list[str]:
    """Twelve distinct valid wallet addresses."""
    return [str(new_wallet()) for _ in range(12)]


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at mock endpoints, reports written to tmp_path."""
    return Settings(
        devnet_mint=DEVNET_MINT,
        testnet_mint=TESTNET_MINT,
        airdrop_url=AIRDROP_URL,
        token_info_url=TOKEN_INFO_URL,
        batch_size=5,
        batch_delay=1.0,
        request_timeout=5.0,
        output_dir=tmp_path,
    )


@pytest.fixture
def token_info_response() -> dict[str, Any]:
    """Mock token list API response."""
    return {
        "content": [
            {
                "address": DEVNET_MINT,
                "name": "Sonic Ring",
                "symbol": "RING",
                "decimals": 9,
                "chainId": 103,
            }
        ]
    }


@pytest.fixture
def allocation_response() -> list[dict[str, Any]]:
    """Mock allocation API response with two allocations."""
    return [
        {
            "total": 10,
            "description": "Odyssey season 1",
            "category": "odyssey",
            "createdAt": "2024-07-01T00:00:00Z",
        },
        {
            "total": 5,
            "description": "Early tester",
            "category": "testnet",
            "createdAt": "2024-07-02T12:30:00Z",
        },
    ]


@pytest.fixture
def token_info_fetcher(token_info_response) -> TokenInfoFetcher:
    def handler(request: httpx.Request) -> httpx.Response:
        return json_response(token_info_response)

    return TokenInfoFetcher(TOKEN_INFO_URL, client=mock_client(handler))


@pytest.fixture
def make_airdrop_checker() -> Callable[[dict[str, Any]], AirdropChecker]:
    """Factory for an AirdropChecker answering ``address -> body`` (default: [])."""

    def factory(responses: dict[str, Any] | None = None) -> AirdropChecker:
        responses = responses or {}

        def handler(request: httpx.Request) -> httpx.Response:
            body = responses.get(request.url.params.get("address"), [])
            if isinstance(body, httpx.Response):
                return body
            return json_response(body)

        return AirdropChecker(AIRDROP_URL, client=mock_client(handler))

    return factory


@pytest.fixture
def make_balance_fetchers() -> Callable[..., tuple[BalanceFetcher, BalanceFetcher]]:
    """Factory for devnet/testnet fetchers backed by stub RPC clients."""

    def factory(
        devnet: dict[str, float] | None = None,
        testnet: dict[str, float] | None = None,
    ) -> tuple[BalanceFetcher, BalanceFetcher]:
        return (
            BalanceFetcher(
                Network.DEVNET,
                "https://devnet.test",
                DEVNET_MINT,
                client=rpc_client_for(DEVNET_MINT, devnet or {}),
            ),
            BalanceFetcher(
                Network.TESTNET,
                "https://testnet.test",
                TESTNET_MINT,
                client=rpc_client_for(TESTNET_MINT, testnet or {}),
            ),
        )

    return factory
