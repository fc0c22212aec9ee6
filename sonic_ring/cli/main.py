"""CLI entry point for the Sonic Ring Balance Report.

Usage:
    sonic-ring run
    sonic-ring run wallets.txt --output-dir reports --prefix ring
    sonic-ring run --config sonic.yaml --batch-size 10 --verbose
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..core.config import Settings
from ..core.exceptions import BalanceReportError, ConfigurationError
from ..core.models import Summary
from ..orchestrator import BalanceReportOrchestrator
from ..output.formatters import ConsoleFormatter
from ..storage.report_store import write_report

# Initialize app
app = typer.Typer(
    name="sonic-ring",
    help="Sonic SVM devnet + testnet RING balance and airdrop report",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_settings(
    config: Optional[Path],
    overrides: dict[str, Any],
) -> Settings:
    """Load settings, turning configuration problems into a clean exit."""
    try:
        return Settings.load(config_file=config, overrides=overrides)
    except ConfigurationError as e:
        console.print(f"[red]{escape(e.message)}[/]")
        raise typer.Exit(1)


async def _run(settings: Settings, addresses_file: Path) -> Summary:
    async with BalanceReportOrchestrator(settings) as orchestrator:
        return await orchestrator.run_file(addresses_file)


@app.command()
def run(
    addresses_file: Path = typer.Argument(
        Path("addresses.txt"),
        help="File with wallet addresses (one per line)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to YAML settings file",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir", "-o",
        help="Directory for the JSON report (default: current directory)",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix", "-p",
        help="Report file name prefix",
    ),
    batch_size: Optional[int] = typer.Option(
        None,
        "--batch-size", "-b",
        help="Addresses processed concurrently per batch",
    ),
    batch_delay: Optional[float] = typer.Option(
        None,
        "--batch-delay",
        help="Seconds to wait between batches",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Calculate balances and airdrop eligibility for every address in a file.

    Examples:
        sonic-ring run
        sonic-ring run wallets.txt --output-dir reports
    """
    setup_logging(verbose)

    settings = load_settings(
        config,
        {
            "output_dir": output_dir,
            "report_prefix": prefix,
            "batch_size": batch_size,
            "batch_delay": batch_delay,
        },
    )

    console.print(f"[cyan]Processing addresses from[/] [yellow]{escape(str(addresses_file))}[/]")

    try:
        summary = asyncio.run(_run(settings, addresses_file))
        report_path = write_report(
            summary,
            directory=settings.output_dir,
            prefix=settings.report_prefix,
        )
    except BalanceReportError as e:
        console.print(f"[red]Failed to process addresses: {escape(e.message)}[/]")
        raise typer.Exit(1)

    ConsoleFormatter(console).print(summary, report_path=report_path)


@app.command()
def show_config(
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to YAML settings file",
    ),
) -> None:
    """Show the effective settings."""
    settings = load_settings(config, {})

    console.print("[bold]Effective settings:[/]")
    for key, value in settings.to_dict().items():
        console.print(f"  {key}: {escape(str(value))}", highlight=False)


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"Sonic Ring Balance Report v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
