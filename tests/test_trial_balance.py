"""Tests for trial balance aggregation."""

import pytest
from datetime import date
from decimal import Decimal

from ledgercheck.domain.entities import JournalLine
from ledgercheck.domain.errors import DataIntegrityError, ValidationError
from ledgercheck.domain.trial_balance import TrialBalanceAggregator, summarize

START = date(2024, 1, 1)
END = date(2024, 1, 31)


def _debit(code, amount):
    return JournalLine(account_code=code, debit=Decimal(amount))


def _credit(code, amount):
    return JournalLine(account_code=code, credit=Decimal(amount))


@pytest.fixture
def aggregator():
    return TrialBalanceAggregator()


@pytest.fixture
def january_lines():
    return [
        # Owner invests cash
        _debit("1001000", "10000"),
        _credit("3001000", "10000"),
        # Cash sales
        _debit("1001000", "1500"),
        _credit("4001000", "1500"),
        # Rent paid
        _debit("6004000", "2000"),
        _credit("1001000", "2000"),
        # Food bought on credit
        _debit("5001000", "700"),
        _credit("2001000", "700"),
    ]


def test_empty_period(aggregator, chart_accounts):
    data = aggregator.aggregate([], chart_accounts, START, END)

    assert data.rows == ()
    assert data.total_debits == 0
    assert data.total_credits == 0
    assert data.is_balanced is True
    assert data.as_of_date == END


def test_rows_and_totals(aggregator, chart_accounts, january_lines):
    data = aggregator.aggregate(january_lines, chart_accounts, START, END)

    assert [row.account_code for row in data.rows] == [
        "1001000",
        "2001000",
        "3001000",
        "4001000",
        "5001000",
        "6004000",
    ]
    cash = data.rows[0]
    assert cash.total_debit == Decimal("11500")
    assert cash.total_credit == Decimal("2000")
    assert cash.net_balance == Decimal("9500")
    assert cash.debit_display == Decimal("9500")
    assert cash.credit_display == 0

    payables = data.rows[1]
    assert payables.net_balance == Decimal("-700")
    assert payables.credit_display == Decimal("700")
    assert payables.debit_display == 0

    assert data.total_debits == Decimal("12200")
    assert data.total_credits == Decimal("12200")
    assert data.is_balanced is True
    assert data.difference == 0


def test_abnormal_balances_are_not_displayed(aggregator, chart_accounts):
    """Test credit balances on debit-nature accounts are left out of the totals."""
    lines = [_debit("4001000", "100"), _credit("1001000", "100")]

    data = aggregator.aggregate(lines, chart_accounts, START, END)

    assert all(row.debit_display == 0 and row.credit_display == 0 for row in data.rows)
    assert data.total_debits == 0
    assert data.total_credits == 0
    assert data.is_balanced is True


def test_out_of_balance_detected(aggregator, chart_accounts):
    lines = [_debit("1001000", "100"), _credit("4001000", "90")]

    data = aggregator.aggregate(lines, chart_accounts, START, END)

    assert data.is_balanced is False
    assert data.difference == Decimal("10")


def test_aggregate_is_idempotent(aggregator, chart_accounts, january_lines):
    first = aggregator.aggregate(january_lines, chart_accounts, START, END)
    second = aggregator.aggregate(january_lines, chart_accounts, START, END)

    assert first == second
    assert first.total_debits == second.total_debits
    assert first.total_credits == second.total_credits
    assert first.is_balanced == second.is_balanced


def test_reversed_period_rejected(aggregator, chart_accounts):
    with pytest.raises(ValidationError, match="is after period end"):
        aggregator.aggregate([], chart_accounts, END, START)


def test_unknown_account_is_integrity_error(aggregator, chart_accounts):
    with pytest.raises(DataIntegrityError, match="9999999"):
        aggregator.aggregate([_debit("9999999", "10")], chart_accounts, START, END)


def test_summary_groups_families(aggregator, chart_accounts, january_lines):
    summary = summarize(aggregator.aggregate(january_lines, chart_accounts, START, END))

    assert summary.assets.total == Decimal("9500")
    assert summary.assets.count == 1
    assert summary.liabilities.total == Decimal("700")
    assert summary.equity.total == Decimal("10000")
    assert summary.revenue.total == Decimal("1500")
    assert summary.expenses.total == Decimal("2700")
    assert summary.expenses.count == 2
