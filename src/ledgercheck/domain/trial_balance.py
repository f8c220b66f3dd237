"""Trial balance aggregation."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Union

from ledgercheck.domain.entities import (
    ZERO,
    Account,
    AccountType,
    BalanceGroup,
    JournalLine,
    TrialBalanceData,
    TrialBalanceRow,
    TrialBalanceSummary,
)
from ledgercheck.domain.errors import (
    DataIntegrityError,
    ValidationError,
    invalid_period,
    posted_line_unknown_account,
)

BALANCE_TOLERANCE = Decimal("0.01")


class TrialBalanceAggregator:
    """Folds posted lines into per-account balances for a period.

    The fold is pure: the same lines and accounts always produce the same
    rows, ordered by account code, and the same totals.
    """

    def aggregate(
        self,
        lines: Iterable[JournalLine],
        accounts: Union[Mapping[str, Account], Iterable[Account]],
        period_start: date,
        period_end: date,
    ) -> TrialBalanceData:
        """Build the trial balance for posted lines in a period.

        Args:
            lines: Posted lines dated within [period_start, period_end]
            accounts: Organization's chart of accounts
            period_start: First day of the period
            period_end: Last day of the period (also the as-of date)

        Returns:
            TrialBalanceData with one row per referenced account

        Raises:
            ValidationError: If period_start is after period_end
            DataIntegrityError: If a line references an account not in the chart
        """
        if period_start > period_end:
            raise ValidationError(invalid_period(period_start, period_end))

        directory = accounts if isinstance(accounts, Mapping) else {a.code: a for a in accounts}

        debits: dict[str, Decimal] = {}
        credits: dict[str, Decimal] = {}
        for line in lines:
            code = line.account_code
            if code not in directory:
                raise DataIntegrityError(posted_line_unknown_account(code))
            debits[code] = debits.get(code, ZERO) + line.debit_amount
            credits[code] = credits.get(code, ZERO) + line.credit_amount

        rows = []
        for code in sorted(debits):
            account = directory[code]
            rows.append(
                TrialBalanceRow(
                    account_code=code,
                    account_name=account.name,
                    account_type=account.account_type,
                    total_debit=debits[code],
                    total_credit=credits[code],
                    net_balance=debits[code] - credits[code],
                    is_debit_nature=account.is_debit_nature,
                )
            )

        total_debits = sum((row.debit_display for row in rows), ZERO)
        total_credits = sum((row.credit_display for row in rows), ZERO)
        return TrialBalanceData(
            period_start=period_start,
            period_end=period_end,
            as_of_date=period_end,
            rows=tuple(rows),
            total_debits=total_debits,
            total_credits=total_credits,
            is_balanced=abs(total_debits - total_credits) < BALANCE_TOLERANCE,
        )


def summarize(data: TrialBalanceData) -> TrialBalanceSummary:
    """Group displayed balances by account family."""
    groups: dict[str, tuple[Decimal, int]] = {}
    for row in data.rows:
        family = _family(row.account_type)
        total, count = groups.get(family, (ZERO, 0))
        groups[family] = (total + row.debit_display + row.credit_display, count + 1)

    return TrialBalanceSummary(
        **{family: BalanceGroup(total=total, count=count) for family, (total, count) in groups.items()}
    )


def _family(account_type: AccountType) -> str:
    if account_type.is_expense:
        return "expenses"
    return {
        AccountType.ASSET: "assets",
        AccountType.LIABILITY: "liabilities",
        AccountType.EQUITY: "equity",
        AccountType.REVENUE: "revenue",
    }[account_type]
