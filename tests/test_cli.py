"""Tests for CLI commands."""

import csv
import json

import pytest
from datetime import date, timedelta
from decimal import Decimal

from ledgercheck.cli.main import cli
from ledgercheck.domain.entities import JournalEntryDraft, JournalLine


@pytest.fixture
def invoke(cli_runner, temp_repo, org):
    """Invoke the CLI against the temporary database and organization."""

    def _invoke(*args, **kwargs):
        return cli_runner.invoke(
            cli, ["--db-path", temp_repo.database_path, "--org", org, *args], **kwargs
        )

    return _invoke


def _post(journal_service, org, entry_date, debit_code, credit_code, amount):
    journal_service.post_entry(
        org,
        JournalEntryDraft(
            description="Entry",
            entry_date=entry_date,
            lines=(
                JournalLine(account_code=debit_code, debit=Decimal(amount)),
                JournalLine(account_code=credit_code, credit=Decimal(amount)),
            ),
        ),
    )


class TestAccountCommands:
    """Tests for account commands."""

    def test_account_create(self, invoke):
        result = invoke("account", "create", "1001000", "Cash", "--type", "asset")

        assert result.exit_code == 0
        assert "Created account 1001000 'Cash' (asset)" in result.output

    def test_account_create_duplicate(self, invoke):
        invoke("account", "create", "1001000", "Cash", "--type", "asset")

        result = invoke("account", "create", "1001000", "Cash", "--type", "asset")

        assert result.exit_code == 1
        assert "Error: Account with code '1001000' already exists" in result.output

    def test_account_create_invalid_type(self, invoke):
        result = invoke("account", "create", "1001000", "Cash", "--type", "goodwill")

        assert result.exit_code != 0

    def test_account_list_empty(self, invoke):
        result = invoke("account", "list")

        assert result.exit_code == 0
        assert "No accounts found" in result.output

    def test_account_list_with_data(self, invoke, sample_chart):
        result = invoke("account", "list")

        assert result.exit_code == 0
        assert "Cash - Operating Account" in result.output
        assert "no posting" in result.output
        assert "inactive" in result.output

    def test_organizations_are_separate(self, cli_runner, temp_repo, sample_chart):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_repo.database_path, "--org", "globex", "account", "list"]
        )

        assert result.exit_code == 0
        assert "No accounts found" in result.output

    def test_org_from_environment(self, cli_runner, temp_repo, sample_chart, org, monkeypatch):
        monkeypatch.setenv("LEDGERCHECK_ORG", org)
        monkeypatch.setenv("LEDGERCHECK_DB_PATH", temp_repo.database_path)

        result = cli_runner.invoke(cli, ["account", "list"])

        assert result.exit_code == 0
        assert "Food Sales" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_entry(self, invoke, sample_chart):
        result = invoke(
            "validate",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=100",
            "--credit",
            "4001000=100",
        )

        assert result.exit_code == 0
        assert "Status: VALID" in result.output
        assert "Score: 100/100" in result.output
        assert "passes all validation checks" in result.output

    def test_unbalanced_entry_fails(self, invoke, sample_chart):
        result = invoke(
            "validate",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=150",
            "--credit",
            "4001000=100",
        )

        assert result.exit_code == 1
        assert "Status: INVALID" in result.output
        assert "Debits: $150.00, Credits: $100.00" in result.output
        assert "Add balancing entry: credit Owner's Equity (3001000) $50.00" in result.output

    def test_apply_fixes(self, invoke, sample_chart):
        result = invoke(
            "validate",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=150",
            "--credit",
            "4001000=100",
            "--apply-fixes",
        )

        assert result.exit_code == 0
        assert "Status: VALID" in result.output

    def test_json_output(self, invoke, sample_chart):
        result = invoke(
            "validate",
            "--date",
            "2024-01-10",
            "--debit",
            "9999999=100",
            "--credit",
            "4001000=100",
            "--json",
        )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["is_valid"] is False
        assert payload["validation_score"] == 70
        (issue,) = payload["issues"]
        assert issue["category"] == "account"
        assert issue["severity"] == 90
        assert issue["affected_lines"] == [0]

    def test_entry_file(self, invoke, sample_chart, tmp_path):
        entry_file = tmp_path / "entry.json"
        entry_file.write_text(
            json.dumps(
                {
                    "description": "Cash sale",
                    "entry_date": "2024-01-10",
                    "lines": [
                        {"account_code": "1001000", "debit": "150.00"},
                        {"account_code": "4001000", "credit": 150},
                    ],
                }
            )
        )

        result = invoke("validate", str(entry_file))

        assert result.exit_code == 0
        assert "Cash sale" in result.output
        assert "Status: VALID" in result.output

    def test_malformed_entry_file(self, invoke, sample_chart, tmp_path):
        entry_file = tmp_path / "entry.json"
        entry_file.write_text('{"lines": [{"debit": "1"}]}')

        result = invoke("validate", str(entry_file))

        assert result.exit_code == 1
        assert "Could not read journal entry" in result.output

    def test_invalid_line_spec(self, invoke, sample_chart):
        result = invoke("validate", "--debit", "1001000", "--credit", "4001000=100")

        assert result.exit_code == 1
        assert "Invalid line" in result.output

    def test_empty_chart(self, invoke):
        result = invoke("validate", "--debit", "1001000=100", "--credit", "4001000=100")

        assert result.exit_code == 1
        assert "has no chart of accounts" in result.output


class TestPostCommand:
    """Tests for the post command."""

    def test_post_entry(self, invoke, sample_chart, temp_repo, org):
        result = invoke(
            "post",
            "Cash sale",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=150",
            "--credit",
            "4001000=150",
        )

        assert result.exit_code == 0
        assert "Posted transaction" in result.output
        assert len(temp_repo.fetch_historical_transactions(org, date(2024, 1, 1))) == 1

    def test_post_refuses_critical_issues(self, invoke, sample_chart, temp_repo, org):
        result = invoke(
            "post",
            "Header posting",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=150",
            "--credit",
            "4000000=150",
        )

        assert result.exit_code == 1
        assert "not posted" in result.output
        assert temp_repo.fetch_historical_transactions(org, date(2024, 1, 1)) == []

    def test_post_unbalanced_without_check(self, invoke, sample_chart):
        result = invoke(
            "post",
            "Bad",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=150",
            "--credit",
            "4001000=100",
            "--no-check",
        )

        assert result.exit_code == 1
        assert "Error: Cannot post unbalanced entry" in result.output

    def test_post_one_cent_difference_without_check(self, invoke, sample_chart, temp_repo, org):
        result = invoke(
            "post",
            "Almost",
            "--date",
            "2024-01-10",
            "--debit",
            "1001000=100.01",
            "--credit",
            "4001000=100.00",
            "--no-check",
        )

        assert result.exit_code == 1
        assert "Debits: $100.01, Credits: $100.00" in result.output
        assert temp_repo.fetch_historical_transactions(org, date(2024, 1, 1)) == []


class TestTrialBalanceCommand:
    """Tests for the trial-balance command."""

    def test_trial_balance(self, invoke, sample_chart, journal_service, org):
        _post(journal_service, org, date(2024, 1, 5), "1001000", "4001000", "1500")

        result = invoke("trial-balance", "--start-date", "2024-01-01", "--end-date", "2024-01-31")

        assert result.exit_code == 0
        assert "Trial Balance as of 2024-01-31" in result.output
        assert "$1,500.00" in result.output
        assert "Trial balance is balanced." in result.output

    def test_trial_balance_summary_and_csv(
        self, invoke, sample_chart, journal_service, org, tmp_path
    ):
        _post(journal_service, org, date(2024, 1, 5), "6004000", "1001000", "200")
        _post(journal_service, org, date(2024, 1, 6), "1001000", "4001000", "900")
        csv_path = tmp_path / "tb.csv"

        result = invoke(
            "trial-balance",
            "--start-date",
            "2024-01-01",
            "--end-date",
            "2024-01-31",
            "--summary",
            "--csv",
            str(csv_path),
        )

        assert result.exit_code == 0
        assert "Summary:" in result.output
        assert f"Exported 3 rows to {csv_path}" in result.output
        with open(csv_path, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["account_code", "account_name", "account_type", "debit", "credit"]
        assert rows[1] == ["1001000", "Cash - Operating Account", "asset", "700.00", "0.00"]
        assert rows[-1] == ["TOTAL", "", "", "900.00", "900.00"]

    def test_empty_period(self, invoke, sample_chart):
        result = invoke("trial-balance", "--last-year")

        assert result.exit_code == 0
        assert "Trial balance is balanced." in result.output

    def test_reversed_dates(self, invoke, sample_chart):
        result = invoke("trial-balance", "--start-date", "2024-02-01", "--end-date", "2024-01-01")

        assert result.exit_code == 1
        assert "is after period end" in result.output

    def test_multiple_periods_rejected(self, invoke, sample_chart):
        result = invoke("trial-balance", "--this-month", "--last-month")

        assert result.exit_code == 1
        assert "Only one period option" in result.output


class TestRelationshipCommands:
    """Tests for suggest, clusters and profile commands."""

    def test_suggest_cold_start(self, invoke, sample_chart):
        result = invoke("suggest")

        assert result.exit_code == 0
        assert "Suggested account pairings" in result.output
        assert "Daily cash sales are common in restaurants" in result.output

    def test_suggest_from_history(self, invoke, sample_chart, journal_service, org):
        today = date.today()
        for days_ago in range(4):
            _post(journal_service, org, today - timedelta(days=days_ago), "5001000", "1003000", "75")

        result = invoke("suggest", "5001000")

        assert result.exit_code == 0
        assert "1003000" in result.output
        assert "Frequently used together (4 transactions)" in result.output

    def test_suggest_unknown_account(self, invoke, sample_chart):
        result = invoke("suggest", "9999999")

        assert result.exit_code == 1
        assert "Error: Account 9999999 not found" in result.output

    def test_clusters(self, invoke, sample_chart, journal_service, org):
        _post(journal_service, org, date.today(), "1001000", "4001000", "50")

        result = invoke("clusters")

        assert result.exit_code == 0
        assert "Account Cluster 1 (Sales transactions" in result.output
        assert "1001000, 4001000" in result.output

    def test_clusters_without_history(self, invoke, sample_chart):
        result = invoke("clusters")

        assert result.exit_code == 0
        assert "No account clusters found." in result.output

    def test_profile(self, invoke, sample_chart, journal_service, org):
        _post(journal_service, org, date.today(), "6004000", "1001000", "2000")

        result = invoke("profile", "6004000")

        assert result.exit_code == 0
        assert "Direction: debit" in result.output
        assert "Common partners: 1001000" in result.output

    def test_profile_without_activity(self, invoke, sample_chart):
        result = invoke("profile", "2001000")

        assert result.exit_code == 0
        assert "has no recent activity" in result.output
