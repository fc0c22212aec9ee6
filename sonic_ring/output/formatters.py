"""Output formatters for balance report summaries.

Provides two output formats:
- JSON: Machine-readable, complete data (the report file)
- Console: Human-readable summary rendered with rich
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..core.models import AddressResult, Summary

logger = logging.getLogger(__name__)


def format_amount(value: float) -> str:
    """Format a number with thousands separators and at most 3 decimals."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, summary: Summary) -> str:
        """Format the summary as a string."""
        pass

    def format_to_file(self, summary: Summary, filepath: Path | str) -> None:
        """Write formatted summary to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(summary))


class JSONFormatter(OutputFormatter):
    """Formats summaries as JSON with camelCase keys."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def format(self, summary: Summary) -> str:
        """Format summary as JSON string."""
        return json.dumps(summary.to_json_dict(), indent=self.indent, ensure_ascii=False)


class ConsoleFormatter(OutputFormatter):
    """Formats summaries for the terminal."""

    TITLE = "Sonic SVM Devnet + Testnet Balance Summary"

    def __init__(self, console: Console | None = None):
        """
        Initialize console formatter.

        Args:
            console: Rich console to print to (stdout if not provided)
        """
        self.console = console or Console()

    def _summary_lines(self, summary: Summary, report_path: Path | str | None) -> list[str]:
        lines = [
            f"\n[bold]{self.TITLE}[/]",
            "[dim]================[/]",
            f"[blue]Total Addresses:[/] [yellow]{summary.total_addresses}[/]",
            f"[green]Successful Queries:[/] [yellow]{summary.successful_queries}[/]",
            f"[red]Failed Queries:[/] [yellow]{summary.failed_queries}[/]",
            f"[magenta]Grand Total Balance:[/] [yellow]{format_amount(summary.grand_total)}[/]",
            f"[magenta]Eligible Airdrops:[/] [yellow]{summary.total_eligible_airdrops}[/]",
            f"[magenta]Total Airdrop Amount:[/] [yellow]{format_amount(summary.total_airdrop_amount)}[/]",
        ]
        if report_path is not None:
            lines.append(f"\n[dim]Report saved to:[/] [cyan]{escape(str(report_path))}[/]")
        return lines

    def _address_lines(self, result: AddressResult) -> list[str]:
        address = escape(result.address)
        if result.error:
            return [f"[red]{address}: Error - {escape(result.error)}[/]"]

        airdrop = result.airdrop
        if airdrop.is_eligible:
            airdrop_text = f"[green]Eligible ({format_amount(airdrop.total_airdrop)})[/]"
        else:
            airdrop_text = "[dim]Not eligible[/]"

        lines = [
            f"[cyan]{address}[/]: "
            f"Total=[yellow]{format_amount(result.total_balance)}[/] "
            f"([green]Devnet={format_amount(result.devnet.balance)}[/], "
            f"[blue]Testnet={format_amount(result.testnet.balance)}[/]) "
            f"Airdrop={airdrop_text}"
        ]
        if airdrop.is_eligible:
            for detail in airdrop.details:
                line = f"    - {escape(detail.category or 'allocation')}: {format_amount(detail.amount)}"
                if detail.description:
                    line += f" ({escape(detail.description)})"
                lines.append(line)
        return lines

    def lines(self, summary: Summary, report_path: Path | str | None = None) -> list[str]:
        """Rich markup lines for the whole summary."""
        lines = self._summary_lines(summary, report_path)
        lines.append("\n[bold]Individual Balances[/]")
        lines.append("[dim]===================[/]")
        for result in summary.details:
            lines.extend(self._address_lines(result))
        return lines

    def format(self, summary: Summary, report_path: Path | str | None = None) -> str:
        """Format summary as plain text."""
        with self.console.capture() as capture:
            self.print(summary, report_path)
        return capture.get()

    def print(self, summary: Summary, report_path: Path | str | None = None) -> None:
        """Print summary to the console."""
        for line in self.lines(summary, report_path):
            self.console.print(line, highlight=False)
