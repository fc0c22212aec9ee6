"""Sonic Ring Balance Report.

Batch tool that sums devnet and testnet RING balances for a list of wallet
addresses, checks airdrop allocations, and writes a JSON report.
"""

__version__ = "0.1.0"
