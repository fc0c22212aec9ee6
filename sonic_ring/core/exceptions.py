"""Custom exceptions for the balance report tool."""


class BalanceReportError(Exception):
    """Base exception for all balance report errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DataSourceError(BalanceReportError):
    """Raised when a remote endpoint fails or returns invalid data."""

    def __init__(
        self,
        source: str,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        full_message = f"[{source}] {message}"
        super().__init__(
            full_message,
            {
                "source": source,
                "endpoint": endpoint,
                "status_code": status_code,
            },
        )
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code


class InvalidAddressError(BalanceReportError):
    """Raised when a wallet address is not a valid public key."""

    def __init__(self, address: str, reason: str):
        message = f"Invalid address {address!r}: {reason}"
        super().__init__(message, {"address": address, "reason": reason})
        self.address = address
        self.reason = reason


class ConfigurationError(BalanceReportError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key


class AddressFileError(BalanceReportError):
    """Raised when the address list cannot be read."""

    def __init__(self, path: str, message: str):
        full_message = f"Cannot read address file {path}: {message}"
        super().__init__(full_message, {"path": path})
        self.path = path


class ReportWriteError(BalanceReportError):
    """Raised when the report file cannot be written."""

    def __init__(self, path: str, message: str):
        full_message = f"Cannot write report {path}: {message}"
        super().__init__(full_message, {"path": path})
        self.path = path
