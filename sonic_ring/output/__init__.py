"""Output formatting module."""

from .formatters import ConsoleFormatter, JSONFormatter, OutputFormatter, format_amount

__all__ = ["ConsoleFormatter", "JSONFormatter", "OutputFormatter", "format_amount"]
