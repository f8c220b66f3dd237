"""Ledger storage layer for ledgercheck."""

from ledgercheck.database.base import LedgerRepository
from ledgercheck.database.factories import create_sqlite_repository

__all__ = ["LedgerRepository", "create_sqlite_repository"]
