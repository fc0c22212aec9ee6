"""Aggregate calculations for the balance report."""

from .totals import (
    calc_total_balance,
    calc_grand_total,
    count_successful,
    count_eligible,
    calc_total_airdrop,
)

__all__ = [
    "calc_total_balance",
    "calc_grand_total",
    "count_successful",
    "count_eligible",
    "calc_total_airdrop",
]
