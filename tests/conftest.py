"""Shared pytest fixtures for ledgercheck tests."""

import tempfile
import os
import pytest

from ledgercheck.database.factories import create_sqlite_repository
from ledgercheck.domain.account import AccountService
from ledgercheck.domain.entities import Account, AccountType
from ledgercheck.domain.insights import PatternService, RelationshipService
from ledgercheck.domain.journal import JournalService, ValidationService
from ledgercheck.domain.reporting import TrialBalanceService


CHART = [
    # code, name, type, allows_posting, is_active
    ("1001000", "Cash - Operating Account", AccountType.ASSET, True, True),
    ("1003000", "Inventory - Food", AccountType.ASSET, True, True),
    ("2001000", "Accounts Payable", AccountType.LIABILITY, True, True),
    ("3001000", "Owner's Equity", AccountType.EQUITY, True, True),
    ("4000000", "Revenue", AccountType.REVENUE, False, True),
    ("4001000", "Food Sales", AccountType.REVENUE, True, True),
    ("5001000", "Food Cost", AccountType.COST_OF_SALES, True, True),
    ("6004000", "Rent Expense", AccountType.INDIRECT_EXPENSE, True, True),
    ("6999000", "Old Expenses", AccountType.INDIRECT_EXPENSE, True, False),
]


@pytest.fixture
def chart_accounts():
    """Chart of accounts as a code-keyed directory, without a database."""
    return {
        code: Account(
            code=code,
            name=name,
            account_type=account_type,
            is_active=is_active,
            allows_posting=allows_posting,
        )
        for code, name, account_type, allows_posting, is_active in CHART
    }


@pytest.fixture
def temp_repo():
    """Create a temporary ledger database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    repo = create_sqlite_repository(database_path=db_path)
    # Store the path for tests that need it
    repo.database_path = db_path
    repo.connect()
    repo.initialize_schema()

    yield repo

    # Cleanup
    repo.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def org():
    """Organization used by repository-backed tests."""
    return "acme"


@pytest.fixture
def account_service(temp_repo):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_repo)


@pytest.fixture
def journal_service(temp_repo):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_repo)


@pytest.fixture
def validation_service(temp_repo):
    """Create a ValidationService with a temporary database."""
    return ValidationService(temp_repo)


@pytest.fixture
def relationship_service(temp_repo):
    """Create a RelationshipService with a temporary database."""
    return RelationshipService(temp_repo)


@pytest.fixture
def pattern_service(temp_repo):
    """Create a PatternService with a temporary database."""
    return PatternService(temp_repo)


@pytest.fixture
def trial_balance_service(temp_repo):
    """Create a TrialBalanceService with a temporary database."""
    return TrialBalanceService(temp_repo)


@pytest.fixture
def sample_chart(account_service, org):
    """Create the sample chart of accounts for ``org``."""
    for code, name, account_type, allows_posting, is_active in CHART:
        account_service.create_account(
            organization_id=org,
            code=code,
            name=name,
            account_type=account_type,
            allows_posting=allows_posting,
            is_active=is_active,
        )
    return {account.code: account for account in account_service.list_accounts(org)}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
