"""Abstract ledger repository interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from ledgercheck.domain.entities import (
    Account,
    AccountType,
    JournalEntryDraft,
    JournalLine,
    PostedTransaction,
)


class LedgerRepository(ABC):
    """Abstract ledger store for ledgercheck.

    Every read and write is scoped by an organization identifier; no
    operation returns data belonging to another organization. Implementations
    raise ``InfrastructureError`` when the store cannot be reached and
    ``DataIntegrityError`` when stored data cannot be decoded.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the ledger store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the ledger store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage schema (create tables)."""
        pass

    # Chart of accounts
    @abstractmethod
    def create_account(
        self,
        organization_id: str,
        code: str,
        name: str,
        account_type: AccountType,
        is_active: bool = True,
        allows_posting: bool = True,
        parent_code: Optional[str] = None,
    ) -> int:
        """Create an account. Returns the account row ID."""
        pass

    @abstractmethod
    def get_account(self, organization_id: str, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def fetch_chart_of_accounts(self, organization_id: str) -> list[Account]:
        """List every account of an organization, ordered by code."""
        pass

    # Transactions
    @abstractmethod
    def post_transaction(self, organization_id: str, entry: JournalEntryDraft) -> int:
        """Store an approved entry as a posted transaction. Returns its ID."""
        pass

    @abstractmethod
    def fetch_historical_transactions(
        self, organization_id: str, since: date
    ) -> list[PostedTransaction]:
        """List posted transactions dated on or after ``since``, oldest first."""
        pass

    @abstractmethod
    def fetch_posted_lines(
        self, organization_id: str, period_start: date, period_end: date
    ) -> list[JournalLine]:
        """List lines of transactions dated within [period_start, period_end]."""
        pass
