"""Journal entry posting and validation services."""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from ledgercheck.database.base import LedgerRepository
from ledgercheck.domain.account import load_chart
from ledgercheck.domain.entities import JournalEntryDraft, ValidationResult
from ledgercheck.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    unbalanced_entry,
)
from ledgercheck.domain.patterns import PatternAnalyzer, PatternCache
from ledgercheck.domain.policy import ValidationPolicy
from ledgercheck.domain.validation import ValidationEngine
from ledgercheck.utils.log import get_logger

logger = get_logger(__name__)

VALIDATION_LOOKBACK_DAYS = 30


def reference_date(now: Union[datetime, date, None]) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def load_analyzer(
    repo: LedgerRepository,
    organization_id: str,
    since: date,
    cache: Optional[PatternCache] = None,
) -> PatternAnalyzer:
    """Build (or reuse) pattern statistics for history dated on or after ``since``."""
    if cache is not None:
        analyzer = cache.get(organization_id, since)
        if analyzer is not None:
            return analyzer

    analyzer = PatternAnalyzer(repo.fetch_historical_transactions(organization_id, since))
    if cache is not None:
        cache.put(organization_id, since, analyzer)
    return analyzer


class JournalService:
    """Service for posting journal entries."""

    def __init__(self, repo: LedgerRepository, cache: Optional[PatternCache] = None):
        """Initialize journal service.

        Args:
            repo: Ledger repository
            cache: Pattern cache to invalidate after each posting
        """
        self.repo = repo
        self.cache = cache

    def post_entry(
        self,
        organization_id: str,
        draft: JournalEntryDraft,
        policy: Optional[ValidationPolicy] = None,
    ) -> int:
        """Post a balanced journal entry.

        Args:
            organization_id: Organization identifier
            draft: Entry to post
            policy: Balance tolerance to apply (defaults apply if None)

        Returns:
            Posted transaction ID

        Raises:
            ValidationError: If the entry has no lines or does not balance
            NotFoundError: If a line references an account not in the chart
        """
        policy = policy or ValidationPolicy()
        log = logger.bind(organization_id=organization_id)

        if not draft.lines:
            raise ValidationError("Cannot post a journal entry without lines")
        if not policy.is_balanced(draft.total_debits, draft.total_credits):
            raise ValidationError(unbalanced_entry(draft.total_debits, draft.total_credits))

        for line in draft.lines:
            if self.repo.get_account(organization_id, line.account_code) is None:
                raise NotFoundError(account_not_found(line.account_code, organization_id))

        transaction_id = self.repo.post_transaction(organization_id, draft)
        if self.cache is not None:
            self.cache.invalidate(organization_id)
        log.info("transaction_posted", transaction_id=transaction_id, lines=len(draft.lines))
        return transaction_id


class ValidationService:
    """Validates drafts against an organization's chart and recent history."""

    def __init__(
        self,
        repo: LedgerRepository,
        policy: Optional[ValidationPolicy] = None,
        cache: Optional[PatternCache] = None,
    ):
        self.repo = repo
        self.engine = ValidationEngine(policy)
        self.cache = cache

    def validate_draft(
        self,
        organization_id: str,
        draft: JournalEntryDraft,
        now: Union[datetime, date, None] = None,
        lookback_days: int = VALIDATION_LOOKBACK_DAYS,
    ) -> ValidationResult:
        """Validate a draft entry.

        Args:
            organization_id: Organization identifier
            draft: Entry to check
            now: Reference time (defaults to today)
            lookback_days: Days of history used for amount statistics

        Returns:
            ValidationResult for the draft

        Raises:
            ConfigurationError: If the organization has no chart of accounts
            DataIntegrityError: If stored account data is inconsistent
            InfrastructureError: If the ledger store cannot be read
        """
        today = reference_date(now)
        accounts = load_chart(self.repo, organization_id)
        analyzer = load_analyzer(
            self.repo, organization_id, today - timedelta(days=lookback_days), self.cache
        )
        result = self.engine.validate(draft, accounts, analyzer, now if now is not None else today)
        logger.info(
            "draft_checked",
            organization_id=organization_id,
            is_valid=result.is_valid,
            score=result.validation_score,
        )
        return result
