"""JSON report persistence.

Each run writes one file, ``<prefix>-report-<timestamp>.json``, to the
output directory. The timestamp is ISO 8601 UTC with every ``:`` and ``.``
replaced by ``-`` so the name is safe on every filesystem.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import BalanceReportError, ReportWriteError
from ..core.models import Summary
from ..output.formatters import JSONFormatter

logger = logging.getLogger(__name__)


def format_timestamp(now: datetime) -> str:
    """ISO 8601 timestamp with ``:`` and ``.`` replaced by ``-``."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    iso = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    iso = iso.replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def report_filename(prefix: str, now: datetime | None = None) -> str:
    """Build the report file name for a run started at ``now``."""
    now = now or datetime.now(timezone.utc)
    return f"{prefix}-report-{format_timestamp(now)}.json"


def write_report(
    summary: Summary,
    directory: Path | str = ".",
    prefix: str = "balance",
    now: datetime | None = None,
    indent: int = 2,
) -> Path:
    """
    Write the summary as indented JSON.

    Args:
        summary: Report to write
        directory: Output directory (created if missing)
        prefix: File name prefix
        now: Timestamp used in the file name (default: current UTC time)
        indent: JSON indentation

    Returns:
        Path of the written file

    Raises:
        ReportWriteError: If the directory or file cannot be written
    """
    directory = Path(directory)
    path = directory / report_filename(prefix, now)

    try:
        directory.mkdir(parents=True, exist_ok=True)
        JSONFormatter(indent=indent).format_to_file(summary, path)
    except OSError as e:
        logger.error(f"Failed to write report {path}: {e}")
        raise ReportWriteError(str(path), str(e)) from e

    logger.info(f"Report saved to {path}")
    return path


def load_report(path: Path | str) -> Summary:
    """Read a written report back into a Summary."""
    path = Path(path)
    try:
        return Summary.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise BalanceReportError(f"Cannot read report {path}: {e}", {"path": str(path)}) from e
    except PydanticValidationError as e:
        raise BalanceReportError(f"Invalid report {path}: {e}", {"path": str(path)}) from e
