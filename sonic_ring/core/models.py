"""Pydantic data models for the balance report tool.

All data structures are immutable (frozen) after creation. Field names are
snake_case in Python and camelCase on the wire, so a written report reads
back into the same models.
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..calculator.totals import (
    calc_grand_total,
    calc_total_airdrop,
    count_eligible,
    count_successful,
)
from .types import Address, Mint, Network, UIAmount

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class TokenBalance(BaseModel):
    """Balance of one associated token account."""

    amount: str = "0"  # raw integer amount, kept as a string
    decimals: int = 0
    ui_amount: UIAmount = 0.0

    model_config = _MODEL_CONFIG

    @classmethod
    def zero(cls) -> "TokenBalance":
        """Balance reported when no account exists or the lookup failed."""
        return cls(amount="0", decimals=0, ui_amount=0.0)


class BalanceLookup(BaseModel):
    """Outcome of one balance query: a balance, possibly zero, and why."""

    network: Network
    mint: Mint
    balance: TokenBalance = Field(default_factory=TokenBalance.zero)
    error: str | None = None

    model_config = _MODEL_CONFIG

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, network: Network, mint: Mint, reason: str) -> "BalanceLookup":
        return cls(network=network, mint=mint, balance=TokenBalance.zero(), error=reason)


class AllocationDetail(BaseModel):
    """One airdrop allocation record for an address."""

    # The allocation API calls the amount "total"; reports call it "amount".
    amount: float = Field(validation_alias=AliasChoices("total", "amount"))
    description: str = ""
    category: str = ""
    created_at: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("createdAt", "created_at"),
    )

    model_config = _MODEL_CONFIG

    @field_validator("description", "category", mode="before")
    @classmethod
    def _null_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class AirdropStatus(BaseModel):
    """Airdrop eligibility for an address."""

    is_eligible: bool = False
    total_airdrop: float = 0.0
    details: list[AllocationDetail] = Field(default_factory=list)
    error: str | None = None

    model_config = _MODEL_CONFIG

    @classmethod
    def from_allocations(cls, allocations: list[AllocationDetail]) -> "AirdropStatus":
        """Build the status for a successfully fetched allocation list."""
        return cls(
            is_eligible=len(allocations) > 0,
            total_airdrop=sum(a.amount for a in allocations),
            details=list(allocations),
        )

    @classmethod
    def failed(cls, message: str) -> "AirdropStatus":
        """Ineligible status carrying the reason the check failed."""
        return cls(is_eligible=False, total_airdrop=0.0, details=[], error=message)


class NetworkBalance(BaseModel):
    """Per-network section of an address result."""

    balance: UIAmount = 0.0
    token_info: Any | None = None

    model_config = _MODEL_CONFIG


class AddressResult(BaseModel):
    """Everything computed for a single input address."""

    address: Address
    devnet: NetworkBalance = Field(default_factory=NetworkBalance)
    testnet: NetworkBalance = Field(default_factory=NetworkBalance)
    total_balance: UIAmount = 0.0
    airdrop: AirdropStatus = Field(default_factory=AirdropStatus)
    error: str | None = None

    model_config = _MODEL_CONFIG

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, address: Address, message: str) -> "AddressResult":
        """Zeroed result for an address whose computation raised."""
        return cls(
            address=address,
            devnet=NetworkBalance(balance=0.0),
            testnet=NetworkBalance(balance=0.0),
            total_balance=0.0,
            airdrop=AirdropStatus(),
            error=message,
        )


class Summary(BaseModel):
    """Final report of one run."""

    total_addresses: int
    successful_queries: int
    failed_queries: int
    grand_total: UIAmount
    total_eligible_airdrops: int
    total_airdrop_amount: float
    details: list[AddressResult] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    @classmethod
    def from_results(cls, results: list[AddressResult]) -> "Summary":
        """Compute aggregate counts and sums over per-address results."""
        successful = count_successful(results)
        return cls(
            total_addresses=len(results),
            successful_queries=successful,
            failed_queries=len(results) - successful,
            grand_total=calc_grand_total(results),
            total_eligible_airdrops=count_eligible(results),
            total_airdrop_amount=calc_total_airdrop(results),
            details=list(results),
        )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with wire (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)
