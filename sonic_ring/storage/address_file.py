"""Reads the newline-delimited wallet address list."""

import logging
from pathlib import Path

from ..core.exceptions import AddressFileError

logger = logging.getLogger(__name__)


def parse_addresses(text: str) -> list[str]:
    """Split text into trimmed, non-blank lines, keeping order and duplicates."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def read_addresses(path: Path | str) -> list[str]:
    """
    Read wallet addresses from a UTF-8 text file, one per line.

    Args:
        path: Path to the address list

    Returns:
        Addresses in file order, blank lines dropped

    Raises:
        AddressFileError: If the file cannot be read or decoded
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read address file {path}: {e}")
        raise AddressFileError(str(path), str(e)) from e

    addresses = parse_addresses(text)
    logger.debug(f"Read {len(addresses)} addresses from {path}")
    return addresses
