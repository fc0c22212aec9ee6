"""Data providers for the balance report.

This module contains providers for:
- Token balances (Sonic devnet and testnet RPC)
- Airdrop allocations (allocation REST API)
- Token metadata (token list API)
"""

from .base import BaseProvider, HTTPProvider
from .balance import BalanceFetcher, derive_associated_token_address
from .airdrop import AirdropChecker
from .token_info import TokenInfoFetcher

__all__ = [
    "BaseProvider",
    "HTTPProvider",
    "BalanceFetcher",
    "derive_associated_token_address",
    "AirdropChecker",
    "TokenInfoFetcher",
]
