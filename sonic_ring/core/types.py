"""Type definitions and enums for the balance report tool."""

from enum import Enum


class Network(str, Enum):
    """Sonic networks queried for balances."""

    DEVNET = "devnet"
    TESTNET = "testnet"


class DataSource(str, Enum):
    """Data source identifiers used in errors and logs."""

    DEVNET_RPC = "devnet-rpc"
    TESTNET_RPC = "testnet-rpc"
    AIRDROP_API = "airdrop-api"
    TOKEN_LIST_API = "token-list-api"


# Type aliases for common patterns
Address = str       # base58 wallet public key
Mint = str          # base58 token mint
UIAmount = float    # amount scaled by decimals
