"""Aggregate arithmetic over per-address results.

Standalone formulas so they can be tested without building a Summary.
"""

import math
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from ..core.models import AddressResult


def calc_total_balance(devnet_balance: float, testnet_balance: float) -> float:
    """
    Calculate an address's total balance.

    Formula: Total = Devnet + Testnet
    """
    return devnet_balance + testnet_balance


def calc_grand_total(results: Iterable["AddressResult"]) -> float:
    """Sum of total balances across all results."""
    return math.fsum(r.total_balance for r in results)


def count_successful(results: Iterable["AddressResult"]) -> int:
    """Number of results without an error."""
    return sum(1 for r in results if r.error is None)


def count_eligible(results: Iterable["AddressResult"]) -> int:
    """Number of addresses eligible for an airdrop."""
    return sum(1 for r in results if r.airdrop.is_eligible)


def calc_total_airdrop(results: Iterable["AddressResult"]) -> float:
    """Sum of airdrop allocations across all results."""
    return math.fsum(r.airdrop.total_airdrop for r in results)
