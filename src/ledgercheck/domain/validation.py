"""Journal entry validation.

The engine checks a draft against the chart of accounts and historical
statistics in a single pass. Every problem becomes a ``ValidationIssue``;
business-rule violations are never raised, so callers always see the full
list of problems at once.

Scoring starts at 100 and each issue subtracts its penalty:

    unbalanced entry          critical  severity 100  -50
    empty entry               critical  severity 100  -50
    unknown/inactive account  critical  severity 90   -30
    posting not allowed       critical  severity 85   -25
    zero amount line          warning   severity 60   -10
    debit and credit on line  warning   severity 70   -15
    unusual amount            warning   severity 40   -5
    weekend date              info      severity 20    0
    future date               warning   severity 50   -10

The score is clamped to [0, 100]. Confidence is computed independently from
issue counts: ``max(0, 1 - 0.3 * critical - 0.1 * warning)``.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Mapping, Optional, Union

from ledgercheck.domain.autofix import FIX_GENERATORS, FixGenerator, generate_fixes
from ledgercheck.domain.entities import (
    Account,
    AccountStatistic,
    IssueCategory,
    IssueRule,
    IssueType,
    JournalEntryDraft,
    ValidationIssue,
    ValidationResult,
)
from ledgercheck.domain.patterns import PatternAnalyzer
from ledgercheck.domain.policy import ValidationPolicy
from ledgercheck.utils.log import get_logger

logger = get_logger(__name__)

StatisticsSource = Union[PatternAnalyzer, Mapping[str, AccountStatistic], None]

PASSES_ALL_CHECKS = "Journal entry passes all validation checks"
REVIEW_ISSUES = "Review and fix validation issues before posting"
USE_AUTO_FIX = "Consider using auto-fix suggestions for correctable issues"
VERIFY_PATTERNS = "Unusual patterns detected - verify amounts are correct"

CRITICAL_CONFIDENCE_PENALTY = 0.3
WARNING_CONFIDENCE_PENALTY = 0.1


@dataclass
class _Accumulator:
    score: int = 100
    is_valid: bool = True
    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, issue: ValidationIssue, penalty: int = 0) -> None:
        self.issues.append(issue)
        self.score -= penalty
        if issue.issue_type is IssueType.CRITICAL:
            self.is_valid = False


def _account_directory(accounts: Union[Mapping[str, Account], Iterable[Account]]) -> Mapping[str, Account]:
    if isinstance(accounts, Mapping):
        return accounts
    return {account.code: account for account in accounts}


def _statistics_lookup(stats: StatisticsSource):
    if stats is None:
        return lambda code: None
    if isinstance(stats, PatternAnalyzer):
        return stats.account_stats
    return stats.get


def _today(now: Union[datetime, date, None]) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


class ValidationEngine:
    """Validates journal entry drafts."""

    def __init__(
        self,
        policy: Optional[ValidationPolicy] = None,
        fix_generators: Optional[Mapping[IssueRule, FixGenerator]] = None,
    ):
        """Initialize validation engine.

        Args:
            policy: Thresholds and designated accounts (defaults apply if None)
            fix_generators: Auto-fix generators per rule (defaults to FIX_GENERATORS)
        """
        self.policy = policy or ValidationPolicy()
        self.fix_generators = dict(fix_generators if fix_generators is not None else FIX_GENERATORS)

    def validate(
        self,
        draft: JournalEntryDraft,
        accounts: Union[Mapping[str, Account], Iterable[Account]],
        stats: StatisticsSource = None,
        now: Union[datetime, date, None] = None,
    ) -> ValidationResult:
        """Validate a draft without modifying it.

        Args:
            draft: Journal entry to check
            accounts: Organization's chart of accounts, as a code-keyed mapping
                or an iterable of accounts
            stats: Historical statistics (PatternAnalyzer or code-keyed
                AccountStatistic mapping); accounts without statistics skip
                anomaly detection
            now: Reference time for date checks (defaults to today)

        Returns:
            ValidationResult listing every issue found
        """
        directory = _account_directory(accounts)
        lookup = _statistics_lookup(stats)
        today = _today(now)
        acc = _Accumulator()

        self._check_balance(draft, acc)
        self._check_lines(draft, directory, acc)
        self._check_amount_patterns(draft, lookup, acc)
        self._check_compliance(draft, today, acc)

        fixes = generate_fixes(draft, acc.issues, self.policy, self.fix_generators)
        result = ValidationResult(
            is_valid=acc.is_valid,
            confidence=self._confidence(acc.issues),
            validation_score=max(0, min(100, acc.score)),
            issues=tuple(acc.issues),
            recommendations=tuple(self._recommendations(acc.issues)),
            auto_fix_suggestions=tuple(fixes),
        )
        logger.debug(
            "draft_validated",
            lines=len(draft.lines),
            is_valid=result.is_valid,
            score=result.validation_score,
            issues=len(result.issues),
        )
        return result

    def _check_balance(self, draft: JournalEntryDraft, acc: _Accumulator) -> None:
        if not draft.lines:
            acc.add(
                ValidationIssue(
                    issue_type=IssueType.CRITICAL,
                    category=IssueCategory.AMOUNT,
                    description="Journal entry has no lines",
                    severity=100,
                    suggested_fix="Add at least one debit and one credit entry",
                    rule=IssueRule.EMPTY_ENTRY,
                ),
                penalty=50,
            )
            return

        total_debits = draft.total_debits
        total_credits = draft.total_credits
        if self.policy.is_balanced(total_debits, total_credits):
            return

        acc.add(
            ValidationIssue(
                issue_type=IssueType.CRITICAL,
                category=IssueCategory.BALANCE,
                description=(
                    "Journal entry is not balanced. "
                    f"Debits: ${total_debits:.2f}, Credits: ${total_credits:.2f}"
                ),
                severity=100,
                can_auto_fix=True,
                suggested_fix="Add balancing entry or adjust amounts",
                rule=IssueRule.UNBALANCED,
            ),
            penalty=50,
        )

    def _check_lines(
        self, draft: JournalEntryDraft, directory: Mapping[str, Account], acc: _Accumulator
    ) -> None:
        for index, line in enumerate(draft.lines):
            account = directory.get(line.account_code)
            if account is None:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.CRITICAL,
                        category=IssueCategory.ACCOUNT,
                        description=f"Account {line.account_code} does not exist in chart of accounts",
                        severity=90,
                        affected_lines=(index,),
                        rule=IssueRule.UNKNOWN_ACCOUNT,
                    ),
                    penalty=30,
                )
            elif not account.is_active:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.CRITICAL,
                        category=IssueCategory.ACCOUNT,
                        description=f"Account {line.account_code} is inactive in chart of accounts",
                        severity=90,
                        affected_lines=(index,),
                        rule=IssueRule.INACTIVE_ACCOUNT,
                    ),
                    penalty=30,
                )
            elif not account.allows_posting:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.CRITICAL,
                        category=IssueCategory.ACCOUNT,
                        description=f"Account {line.account_code} is marked as no posting allowed",
                        severity=85,
                        affected_lines=(index,),
                        rule=IssueRule.POSTING_NOT_ALLOWED,
                    ),
                    penalty=25,
                )

            if line.is_zero:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.WARNING,
                        category=IssueCategory.AMOUNT,
                        description=f"Entry {index + 1} has zero amount",
                        severity=60,
                        affected_lines=(index,),
                        can_auto_fix=True,
                        suggested_fix="Remove entry or add amount",
                        rule=IssueRule.ZERO_AMOUNT,
                    ),
                    penalty=10,
                )

            if line.has_both_sides:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.WARNING,
                        category=IssueCategory.AMOUNT,
                        description=f"Entry {index + 1} has both debit and credit amounts",
                        severity=70,
                        affected_lines=(index,),
                        can_auto_fix=True,
                        suggested_fix="Split into separate entries",
                        rule=IssueRule.DUAL_SIDED,
                    ),
                    penalty=15,
                )

    def _check_amount_patterns(self, draft: JournalEntryDraft, lookup, acc: _Accumulator) -> None:
        for index, line in enumerate(draft.lines):
            stats = lookup(line.account_code)
            if stats is None or stats.sample_count <= self.policy.anomaly_min_samples:
                continue

            amount = line.amount
            average = stats.running_average
            deviation = abs(amount - average) / (average or 1)
            if deviation > self.policy.anomaly_deviation:
                acc.add(
                    ValidationIssue(
                        issue_type=IssueType.WARNING,
                        category=IssueCategory.PATTERN,
                        description=(
                            f"Entry {index + 1} amount (${amount:,.2f}) is unusual for account "
                            f"{line.account_code} (avg: ${average:,.2f})"
                        ),
                        severity=40,
                        affected_lines=(index,),
                        rule=IssueRule.UNUSUAL_AMOUNT,
                    ),
                    penalty=5,
                )

    def _check_compliance(self, draft: JournalEntryDraft, today: date, acc: _Accumulator) -> None:
        # Saturday = 5, Sunday = 6
        if draft.entry_date.weekday() >= 5:
            acc.add(
                ValidationIssue(
                    issue_type=IssueType.INFO,
                    category=IssueCategory.COMPLIANCE,
                    description="Entry is dated on a weekend - verify this is intentional",
                    severity=20,
                    rule=IssueRule.WEEKEND_DATE,
                )
            )

        if draft.entry_date > today:
            acc.add(
                ValidationIssue(
                    issue_type=IssueType.WARNING,
                    category=IssueCategory.COMPLIANCE,
                    description="Entry date is in the future",
                    severity=50,
                    rule=IssueRule.FUTURE_DATE,
                ),
                penalty=10,
            )

    @staticmethod
    def _recommendations(issues: list[ValidationIssue]) -> list[str]:
        if not issues:
            return [PASSES_ALL_CHECKS]

        recommendations = [REVIEW_ISSUES]
        if any(issue.can_auto_fix for issue in issues):
            recommendations.append(USE_AUTO_FIX)
        if any(issue.category is IssueCategory.PATTERN for issue in issues):
            recommendations.append(VERIFY_PATTERNS)
        return recommendations

    @staticmethod
    def _confidence(issues: list[ValidationIssue]) -> float:
        critical = sum(1 for issue in issues if issue.issue_type is IssueType.CRITICAL)
        warnings = sum(1 for issue in issues if issue.issue_type is IssueType.WARNING)
        return max(0.0, 1.0 - critical * CRITICAL_CONFIDENCE_PENALTY - warnings * WARNING_CONFIDENCE_PENALTY)
