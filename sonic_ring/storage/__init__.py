"""File input and output: the address list and the JSON report."""

from .address_file import read_addresses
from .report_store import load_report, report_filename, write_report

__all__ = ["read_addresses", "load_report", "report_filename", "write_report"]
