"""Validation thresholds and designated accounts."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ValidationPolicy:
    """Tunable settings for journal entry validation.

    Defaults:
        balance_tolerance: 0.01, the largest debit/credit difference
            still treated as balanced
        anomaly_min_samples: 3, statistics need more samples than this
            before amounts are compared to the average
        anomaly_deviation: 3, relative deviation from the average that
            counts as unusual
        equity_account_code / equity_account_name: account credited by the
            balancing fix when debits exceed credits
        cash_account_code / cash_account_name: account debited by the
            balancing fix when credits exceed debits
        autofix_confidence_threshold: 0.7, fixes below this confidence are
            not suggested
    """

    balance_tolerance: Decimal = Decimal("0.01")
    anomaly_min_samples: int = 3
    anomaly_deviation: Decimal = Decimal("3")
    equity_account_code: str = "3001000"
    equity_account_name: str = "Owner's Equity"
    cash_account_code: str = "1001000"
    cash_account_name: str = "Cash - Operating Account"
    autofix_confidence_threshold: float = 0.7

    def is_balanced(self, total_debits: Decimal, total_credits: Decimal) -> bool:
        """True when debits and credits differ by less than the tolerance."""
        return abs(total_debits - total_credits) < self.balance_tolerance
