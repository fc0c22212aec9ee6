"""Core module - data models, types, configuration and exceptions."""

from .models import (
    TokenBalance,
    BalanceLookup,
    AllocationDetail,
    AirdropStatus,
    NetworkBalance,
    AddressResult,
    Summary,
)
from .types import (
    Network,
    DataSource,
)
from .config import Settings
from .exceptions import (
    BalanceReportError,
    DataSourceError,
    InvalidAddressError,
    ConfigurationError,
    AddressFileError,
    ReportWriteError,
)

__all__ = [
    # Models
    "TokenBalance",
    "BalanceLookup",
    "AllocationDetail",
    "AirdropStatus",
    "NetworkBalance",
    "AddressResult",
    "Summary",
    # Types
    "Network",
    "DataSource",
    # Config
    "Settings",
    # Exceptions
    "BalanceReportError",
    "DataSourceError",
    "InvalidAddressError",
    "ConfigurationError",
    "AddressFileError",
    "ReportWriteError",
]
