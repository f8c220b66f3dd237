"""Tests for the SQLAlchemy ledger repository."""

import pytest
from datetime import date
from decimal import Decimal

from ledgercheck.database.base import LedgerRepository
from ledgercheck.database.factories import create_sqlite_repository, resolve_database_path
from ledgercheck.database.models import Base
from ledgercheck.database.sqlalchemy_db import SQLAlchemyLedgerRepository
from ledgercheck.domain.entities import AccountType, JournalEntryDraft, JournalLine
from ledgercheck.domain.errors import (
    ConflictError,
    DataIntegrityError,
    InfrastructureError,
    NotFoundError,
)


def _entry(entry_date, debit_code="1001000", credit_code="4001000", amount="100.00"):
    return JournalEntryDraft(
        description="Cash sale",
        entry_date=entry_date,
        lines=(
            JournalLine(account_code=debit_code, debit=Decimal(amount)),
            JournalLine(account_code=credit_code, credit=Decimal(amount), description="Sale"),
        ),
    )


def test_repository_implements_interface(temp_repo):
    assert isinstance(temp_repo, LedgerRepository)


class TestAccounts:
    """Tests for chart of accounts storage."""

    def test_create_and_get_account(self, temp_repo):
        account_id = temp_repo.create_account(
            organization_id="acme",
            code="4000000",
            name="Revenue",
            account_type=AccountType.REVENUE,
            allows_posting=False,
            parent_code="0",
        )

        account = temp_repo.get_account("acme", "4000000")

        assert account_id > 0
        assert account.name == "Revenue"
        assert account.account_type is AccountType.REVENUE
        assert account.allows_posting is False
        assert account.parent_code == "0"
        assert account.is_active is True

    def test_duplicate_code_conflicts(self, temp_repo):
        temp_repo.create_account("acme", "1001000", "Cash", AccountType.ASSET)

        with pytest.raises(ConflictError):
            temp_repo.create_account("acme", "1001000", "Cash again", AccountType.ASSET)

    def test_chart_is_scoped_by_organization(self, temp_repo):
        temp_repo.create_account("acme", "1001000", "Cash", AccountType.ASSET)
        temp_repo.create_account("acme", "0100000", "Petty Cash", AccountType.ASSET)
        temp_repo.create_account("globex", "1001000", "Globex Cash", AccountType.ASSET)

        acme = temp_repo.fetch_chart_of_accounts("acme")
        globex = temp_repo.fetch_chart_of_accounts("globex")

        assert [a.code for a in acme] == ["0100000", "1001000"]
        assert [a.name for a in globex] == ["Globex Cash"]
        assert temp_repo.fetch_chart_of_accounts("initech") == []
        assert temp_repo.get_account("globex", "0100000") is None

    def test_conflicting_metadata_surfaces_on_fetch(self, temp_repo):
        temp_repo.create_account("acme", "1001000", "Cash", AccountType.ASSET)
        temp_repo.set_account_metadata("acme", "1001000", "allow_posting", "false")

        with pytest.raises(DataIntegrityError):
            temp_repo.fetch_chart_of_accounts("acme")

    def test_metadata_for_missing_account(self, temp_repo):
        with pytest.raises(NotFoundError):
            temp_repo.set_account_metadata("acme", "1001000", "allow_posting", "true")


class TestTransactions:
    """Tests for posted transaction storage."""

    def test_post_and_fetch_history(self, temp_repo):
        old_id = temp_repo.post_transaction("acme", _entry(date(2023, 12, 1)))
        new_id = temp_repo.post_transaction("acme", _entry(date(2024, 1, 5)))
        temp_repo.post_transaction("globex", _entry(date(2024, 1, 6)))

        history = temp_repo.fetch_historical_transactions("acme", date(2024, 1, 1))

        assert [t.id for t in history] == [new_id]
        assert old_id != new_id
        (transaction,) = history
        assert transaction.description == "Cash sale"
        assert transaction.lines[0] == JournalLine(account_code="1001000", debit=Decimal("100.00"))
        assert transaction.lines[1].credit == Decimal("100.00")
        assert transaction.lines[1].description == "Sale"

    def test_history_is_oldest_first(self, temp_repo):
        temp_repo.post_transaction("acme", _entry(date(2024, 1, 9)))
        temp_repo.post_transaction("acme", _entry(date(2024, 1, 2)))

        history = temp_repo.fetch_historical_transactions("acme", date(2024, 1, 1))

        assert [t.transaction_date for t in history] == [date(2024, 1, 2), date(2024, 1, 9)]

    def test_fetch_posted_lines_within_period(self, temp_repo):
        temp_repo.post_transaction("acme", _entry(date(2023, 12, 31)))
        temp_repo.post_transaction("acme", _entry(date(2024, 1, 1), amount="10.00"))
        temp_repo.post_transaction("acme", _entry(date(2024, 1, 31), amount="20.00"))
        temp_repo.post_transaction("acme", _entry(date(2024, 2, 1)))

        lines = temp_repo.fetch_posted_lines("acme", date(2024, 1, 1), date(2024, 1, 31))

        assert [line.debit_amount + line.credit_amount for line in lines] == [
            Decimal("10.00"),
            Decimal("10.00"),
            Decimal("20.00"),
            Decimal("20.00"),
        ]


def test_unreachable_store_raises_infrastructure_error(tmp_path):
    with pytest.raises(InfrastructureError, match="Cannot open ledger store"):
        SQLAlchemyLedgerRepository(f"sqlite:///{tmp_path}/missing/dir/ledger.db")


def test_store_failure_raises_infrastructure_error(temp_repo):
    temp_repo.create_account("acme", "1001000", "Cash", AccountType.ASSET)
    Base.metadata.drop_all(temp_repo.session_factory.kw["bind"])

    with pytest.raises(InfrastructureError, match="fetch_chart_of_accounts"):
        temp_repo.fetch_chart_of_accounts("acme")


class TestRepositoryFactory:
    """Tests for locating and opening the ledger file."""

    def test_explicit_path_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "ledgers" / "acme" / "ledger.db"

        repo = create_sqlite_repository(str(db_path))
        repo.create_account("acme", "1001000", "Cash", AccountType.ASSET)
        repo.disconnect()

        assert db_path.exists()

    def test_environment_variable_is_used(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LEDGERCHECK_DB_PATH", str(tmp_path / "env.db"))

        assert resolve_database_path() == tmp_path / "env.db"

    def test_default_location_under_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LEDGERCHECK_DB_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        path = resolve_database_path()

        assert path == tmp_path / ".ledgercheck" / "ledgercheck.db"
        assert path.parent.is_dir()

    def test_unusable_directory_raises_infrastructure_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        with pytest.raises(InfrastructureError, match="Cannot create ledger directory"):
            create_sqlite_repository(str(blocker / "ledger.db"))
