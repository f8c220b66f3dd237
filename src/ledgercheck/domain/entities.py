"""Domain model entities for ledgercheck.

These are pure data classes representing accounting concepts, independent of
database schema. Repositories decode their rows into these types once, at the
fetch boundary, so the validation and reporting logic never sees raw
storage values.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class AccountType(Enum):
    """Kind of ledger account."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    COST_OF_SALES = "cost_of_sales"
    DIRECT_EXPENSE = "direct_expense"
    INDIRECT_EXPENSE = "indirect_expense"
    TAX_EXPENSE = "tax_expense"
    EXTRAORDINARY_EXPENSE = "extraordinary_expense"

    @property
    def is_expense(self) -> bool:
        return self in _EXPENSE_TYPES

    @property
    def is_debit_nature(self) -> bool:
        """True when the normal positive balance is reported as a debit."""
        return self is AccountType.ASSET or self.is_expense


_EXPENSE_TYPES = frozenset(
    {
        AccountType.COST_OF_SALES,
        AccountType.DIRECT_EXPENSE,
        AccountType.INDIRECT_EXPENSE,
        AccountType.TAX_EXPENSE,
        AccountType.EXTRAORDINARY_EXPENSE,
    }
)


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    account_type: AccountType
    is_active: bool = True
    allows_posting: bool = True
    parent_code: Optional[str] = None

    @property
    def is_debit_nature(self) -> bool:
        return self.account_type.is_debit_nature


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit line of a journal entry."""

    account_code: str
    debit: Optional[Decimal] = None
    credit: Optional[Decimal] = None
    description: Optional[str] = None

    @property
    def debit_amount(self) -> Decimal:
        return self.debit or ZERO

    @property
    def credit_amount(self) -> Decimal:
        return self.credit or ZERO

    @property
    def amount(self) -> Decimal:
        """Combined magnitude of the line, used for usage statistics."""
        return self.debit_amount + self.credit_amount

    @property
    def posted_amount(self) -> Decimal:
        """Debit amount if set, otherwise credit amount."""
        return self.debit_amount if self.debit_amount != ZERO else self.credit_amount

    @property
    def is_zero(self) -> bool:
        return self.debit_amount == ZERO and self.credit_amount == ZERO

    @property
    def has_both_sides(self) -> bool:
        return self.debit_amount > ZERO and self.credit_amount > ZERO


@dataclass(frozen=True)
class JournalEntryDraft:
    """Proposed journal entry awaiting validation."""

    description: str
    entry_date: date
    lines: tuple[JournalLine, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), ZERO)

    @property
    def imbalance(self) -> Decimal:
        """Debits minus credits."""
        return self.total_debits - self.total_credits


@dataclass(frozen=True)
class PostedTransaction:
    """Historical, immutable journal entry already posted to the ledger."""

    id: int
    description: Optional[str]
    transaction_date: date
    lines: tuple[JournalLine, ...] = ()


@dataclass(frozen=True)
class AccountStatistic:
    """Running usage statistics for one account."""

    account_code: str
    running_average: Decimal
    sample_count: int


@dataclass(frozen=True)
class AccountPairStatistic:
    """Co-occurrence statistics for two accounts, keyed in sorted order."""

    account_a: str
    account_b: str
    frequency: int
    cumulative_amount: Decimal
    last_used: date
    examples: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        return (self.account_a, self.account_b)

    @property
    def average_amount(self) -> Decimal:
        if self.frequency == 0:
            return ZERO
        return self.cumulative_amount / self.frequency

    def other(self, code: str) -> str:
        """Return the partner of ``code`` in this pair."""
        return self.account_b if code == self.account_a else self.account_a


class UsageFrequency(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    IRREGULAR = "irregular"


class UsageDirection(Enum):
    DEBIT = "debit"
    CREDIT = "credit"
    BOTH = "both"


@dataclass(frozen=True)
class AccountProfile:
    """Usage profile of one account derived from history."""

    account_code: str
    frequency: UsageFrequency
    direction: UsageDirection
    average_amount: Decimal
    common_partners: tuple[str, ...]
    last_used: date
    predicted_next_date: date
    sample_count: int


class IssueType(Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(Enum):
    BALANCE = "balance"
    ACCOUNT = "account"
    AMOUNT = "amount"
    COMPLIANCE = "compliance"
    PATTERN = "pattern"
    AUTHORIZATION = "authorization"


class IssueRule(Enum):
    """Check that produced an issue."""

    UNBALANCED = "unbalanced"
    EMPTY_ENTRY = "empty_entry"
    UNKNOWN_ACCOUNT = "unknown_account"
    INACTIVE_ACCOUNT = "inactive_account"
    POSTING_NOT_ALLOWED = "posting_not_allowed"
    ZERO_AMOUNT = "zero_amount"
    DUAL_SIDED = "dual_sided"
    UNUSUAL_AMOUNT = "unusual_amount"
    WEEKEND_DATE = "weekend_date"
    FUTURE_DATE = "future_date"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a draft."""

    issue_type: IssueType
    category: IssueCategory
    description: str
    severity: int
    affected_lines: tuple[int, ...] = ()
    can_auto_fix: bool = False
    suggested_fix: Optional[str] = None
    rule: Optional[IssueRule] = None


class FixType(Enum):
    ACCOUNT_CORRECTION = "account_correction"
    AMOUNT_ADJUSTMENT = "amount_adjustment"
    ENTRY_ADDITION = "entry_addition"
    ENTRY_REMOVAL = "entry_removal"
    ENTRY_SPLIT = "entry_split"


@dataclass(frozen=True)
class AutoFixSuggestion:
    """Proposed correction to a draft.

    ``line_index`` names the line being replaced or removed; it is None when
    the fix only adds lines. ``suggested_lines`` are the lines that take its
    place (or are appended).
    """

    fix_type: FixType
    category: IssueCategory
    description: str
    confidence: float
    reasoning: str
    line_index: Optional[int] = None
    original_line: Optional[JournalLine] = None
    suggested_lines: tuple[JournalLine, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one draft."""

    is_valid: bool
    confidence: float
    validation_score: int
    issues: tuple[ValidationIssue, ...] = ()
    recommendations: tuple[str, ...] = ()
    auto_fix_suggestions: tuple[AutoFixSuggestion, ...] = ()

    @property
    def critical_count(self) -> int:
        return sum(1 for issue in self.issues if issue.issue_type is IssueType.CRITICAL)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.issue_type is IssueType.WARNING)


class SuggestionBasis(Enum):
    TRANSACTION_PATTERN = "transaction_pattern"
    INDUSTRY_STANDARD = "industry_standard"


@dataclass(frozen=True)
class SmartSuggestion:
    """Account suggested to accompany a source account."""

    target_code: str
    target_name: str
    target_type: AccountType
    confidence: float
    reason: str
    based_on: SuggestionBasis
    frequency: int = 0
    average_amount: Decimal = ZERO
    last_used: Optional[date] = None
    examples: tuple[str, ...] = ()


class ClusterUsage(Enum):
    SALES = "Sales transactions"
    EXPENSE = "Expense transactions"
    MIXED = "Mixed transactions"


@dataclass(frozen=True)
class AccountCluster:
    """Accounts that are posted together in the same transactions."""

    cluster_id: str
    cluster_name: str
    accounts: tuple[str, ...]
    usage: ClusterUsage
    strength: float
    recommended_actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class TrialBalanceRow:
    """Net balance of one account over a period."""

    account_code: str
    account_name: str
    account_type: AccountType
    total_debit: Decimal
    total_credit: Decimal
    net_balance: Decimal
    is_debit_nature: bool

    @property
    def debit_display(self) -> Decimal:
        if self.is_debit_nature and self.net_balance > ZERO:
            return self.net_balance
        return ZERO

    @property
    def credit_display(self) -> Decimal:
        if not self.is_debit_nature and self.net_balance < ZERO:
            return -self.net_balance
        return ZERO


@dataclass(frozen=True)
class TrialBalanceData:
    """Trial balance for a period."""

    period_start: date
    period_end: date
    as_of_date: date
    rows: tuple[TrialBalanceRow, ...]
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool

    @property
    def difference(self) -> Decimal:
        return abs(self.total_debits - self.total_credits)


@dataclass(frozen=True)
class BalanceGroup:
    """Displayed balances of one account family."""

    total: Decimal = ZERO
    count: int = 0


@dataclass(frozen=True)
class TrialBalanceSummary:
    """Trial balance grouped by account family."""

    assets: BalanceGroup = field(default_factory=BalanceGroup)
    liabilities: BalanceGroup = field(default_factory=BalanceGroup)
    equity: BalanceGroup = field(default_factory=BalanceGroup)
    revenue: BalanceGroup = field(default_factory=BalanceGroup)
    expenses: BalanceGroup = field(default_factory=BalanceGroup)
