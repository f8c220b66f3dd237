"""Utility functions for ledgercheck."""

from ledgercheck.utils.date_parser import parse_date, get_date_range
from ledgercheck.utils.amount_parser import parse_amount, parse_line_spec

__all__ = ["parse_date", "get_date_range", "parse_amount", "parse_line_spec"]
