"""Sonic RPC balance provider.

Looks up the balance of a wallet's associated token account for one mint on
one network. Wallets that never held the token have no such account, which is
the common case, so a missing account is reported as a zero balance rather
than an error.
"""

import logging
import time
from typing import Any

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey

from ..core.exceptions import ConfigurationError
from ..core.models import BalanceLookup, TokenBalance
from ..core.types import DataSource, Network
from .base import DEFAULT_TIMEOUT, BaseProvider

logger = logging.getLogger(__name__)

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")

# Substrings the RPC uses when the token account does not exist
_ACCOUNT_MISSING_MARKERS = ("could not find account", "account not found")

NO_TOKEN_ACCOUNT = "No token account found"
OWNER_OFF_CURVE = "Owner is off curve"

_SOURCES = {
    Network.DEVNET: DataSource.DEVNET_RPC,
    Network.TESTNET: DataSource.TESTNET_RPC,
}


def derive_associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """Derive the associated token account of ``owner`` for ``mint``."""
    address, _ = Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )
    return address


def _is_missing_account(error: Exception) -> bool:
    message = str(error).lower()
    return any(marker in message for marker in _ACCOUNT_MISSING_MARKERS)


def _to_token_balance(value: Any) -> TokenBalance:
    """Convert an RPC UiTokenAmount into a TokenBalance."""
    ui_amount = value.ui_amount
    if ui_amount is None:
        ui_amount = float(value.ui_amount_string or "0")
    return TokenBalance(
        amount=str(value.amount),
        decimals=int(value.decimals),
        ui_amount=float(ui_amount),
    )


class BalanceFetcher(BaseProvider):
    """Fetches one mint's balance for wallets on one network."""

    def __init__(
        self,
        network: Network,
        rpc_url: str,
        mint: str,
        client: AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize balance fetcher.

        Args:
            network: Network this fetcher is bound to
            rpc_url: RPC endpoint for the network
            mint: Token mint address
            client: RPC client. If not provided, one is created at
                    ``confirmed`` commitment and owned by the fetcher.
            timeout: Per-request timeout in seconds
        """
        super().__init__(timeout=timeout)
        self.network = network
        self.SOURCE = _SOURCES[network]
        self.rpc_url = rpc_url
        self.mint = mint
        try:
            self._mint_key = Pubkey.from_string(mint)
        except ValueError as e:
            raise ConfigurationError(f"{network.value}_mint", f"invalid mint {mint!r}: {e}") from e
        self._owns_client = client is None
        self._client = client or AsyncClient(rpc_url, commitment=Confirmed, timeout=timeout)

    async def get_balance(self, address: str) -> BalanceLookup:
        """
        Get the token balance of a wallet.

        Args:
            address: Wallet address (base58)

        Returns:
            BalanceLookup with the balance, or the zero balance and the
            reason when the account is missing or the lookup failed.
            Never raises.
        """
        try:
            owner = Pubkey.from_string(address)
            token_account = derive_associated_token_address(owner, self._mint_key)
        except Exception as e:
            logger.error(f"Error getting token balance for {address}: {e}")
            return BalanceLookup.failed(self.network, self.mint, str(e))

        # Token accounts are only derived for wallet keys, not program addresses
        if not owner.is_on_curve():
            logger.error(f"Error getting token balance for {address}: {OWNER_OFF_CURVE}")
            return BalanceLookup.failed(self.network, self.mint, OWNER_OFF_CURVE)

        start_time = time.monotonic()
        try:
            response = await self._client.get_token_account_balance(token_account)
        except Exception as e:
            reason = NO_TOKEN_ACCOUNT if _is_missing_account(e) else str(e) or type(e).__name__
            logger.info(f"Info: {address} on {self.network.value}: {reason}")
            return BalanceLookup.failed(self.network, self.mint, reason)
        finally:
            self._log_duration("get_token_account_balance", start_time)

        if response.value is None:
            logger.info(f"Info: {address} on {self.network.value}: {NO_TOKEN_ACCOUNT}")
            return BalanceLookup.failed(self.network, self.mint, NO_TOKEN_ACCOUNT)

        try:
            balance = _to_token_balance(response.value)
        except (TypeError, ValueError) as e:
            logger.info(f"Info: {address} on {self.network.value}: unreadable balance: {e}")
            return BalanceLookup.failed(self.network, self.mint, f"unreadable balance: {e}")

        return BalanceLookup(network=self.network, mint=self.mint, balance=balance)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.close()
