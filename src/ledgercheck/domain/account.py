"""Account domain service."""

from typing import Optional
from ledgercheck.database.base import LedgerRepository
from ledgercheck.domain.entities import Account, AccountType
from ledgercheck.domain.errors import (
    ConfigurationError,
    ConflictError,
    DataIntegrityError,
    conflicting_account,
    duplicate_account_code,
    empty_chart_of_accounts,
)
from ledgercheck.utils.log import get_logger

logger = get_logger(__name__)


def load_chart(repo: LedgerRepository, organization_id: str) -> dict[str, Account]:
    """Fetch an organization's chart of accounts as a code-keyed directory.

    Args:
        repo: Ledger repository
        organization_id: Organization identifier

    Returns:
        Accounts keyed by code

    Raises:
        ConfigurationError: If the organization has no accounts
        DataIntegrityError: If an account code appears more than once
        InfrastructureError: If the ledger store cannot be read
    """
    accounts = repo.fetch_chart_of_accounts(organization_id)
    if not accounts:
        logger.warning("empty_chart_of_accounts", organization_id=organization_id)
        raise ConfigurationError(empty_chart_of_accounts(organization_id))

    directory: dict[str, Account] = {}
    for account in accounts:
        if account.code in directory:
            logger.warning(
                "conflicting_account", organization_id=organization_id, code=account.code
            )
            raise DataIntegrityError(conflicting_account(account.code, organization_id))
        directory[account.code] = account
    return directory


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, repo: LedgerRepository):
        """Initialize account service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def create_account(
        self,
        organization_id: str,
        code: str,
        name: str,
        account_type: AccountType,
        allows_posting: bool = True,
        is_active: bool = True,
        parent_code: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            organization_id: Organization identifier
            code: Account code, unique within the organization
            name: Account name
            account_type: Kind of account
            allows_posting: Whether lines may post to the account
            is_active: Whether the account is in use
            parent_code: Optional code of the parent account

        Returns:
            Account row ID

        Raises:
            ConflictError: If the code already exists in the organization
        """
        if self.repo.get_account(organization_id, code) is not None:
            raise ConflictError(duplicate_account_code(code, organization_id))

        account_id = self.repo.create_account(
            organization_id=organization_id,
            code=code,
            name=name,
            account_type=account_type,
            is_active=is_active,
            allows_posting=allows_posting,
            parent_code=parent_code,
        )
        logger.info("account_created", organization_id=organization_id, code=code)
        return account_id

    def get_account(self, organization_id: str, code: str) -> Optional[Account]:
        """Get account by code.

        Returns:
            Account entity or None if not found
        """
        return self.repo.get_account(organization_id, code)

    def list_accounts(self, organization_id: str) -> list[Account]:
        """List all accounts of an organization, ordered by code."""
        return self.repo.fetch_chart_of_accounts(organization_id)
