"""Trial balance reporting service."""

from datetime import date

from ledgercheck.database.base import LedgerRepository
from ledgercheck.domain.account import load_chart
from ledgercheck.domain.entities import TrialBalanceData
from ledgercheck.domain.errors import ValidationError, invalid_period
from ledgercheck.domain.trial_balance import TrialBalanceAggregator
from ledgercheck.utils.log import get_logger

logger = get_logger(__name__)


class TrialBalanceService:
    """Service for generating trial balances."""

    def __init__(self, repo: LedgerRepository):
        self.repo = repo
        self.aggregator = TrialBalanceAggregator()

    def generate(
        self, organization_id: str, period_start: date, period_end: date
    ) -> TrialBalanceData:
        """Generate the trial balance for a period.

        Args:
            organization_id: Organization identifier
            period_start: First day of the period
            period_end: Last day of the period

        Returns:
            TrialBalanceData for the period

        Raises:
            ValidationError: If period_start is after period_end
            ConfigurationError: If the organization has no chart of accounts
            DataIntegrityError: If posted lines reference unknown accounts
        """
        if period_start > period_end:
            raise ValidationError(invalid_period(period_start, period_end))

        accounts = load_chart(self.repo, organization_id)
        lines = self.repo.fetch_posted_lines(organization_id, period_start, period_end)
        data = self.aggregator.aggregate(lines, accounts, period_start, period_end)
        log = logger.bind(organization_id=organization_id)
        if not data.is_balanced:
            log.warning("trial_balance_out_of_balance", difference=str(data.difference))
        log.info("trial_balance_generated", rows=len(data.rows))
        return data
