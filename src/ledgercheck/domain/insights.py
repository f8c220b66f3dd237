"""Account relationship and usage-pattern services."""

from datetime import date, datetime, timedelta
from typing import Optional, Union

from ledgercheck.database.base import LedgerRepository
from ledgercheck.domain.account import load_chart
from ledgercheck.domain.clusters import ClusterBuilder
from ledgercheck.domain.entities import AccountCluster, AccountProfile, SmartSuggestion
from ledgercheck.domain.errors import NotFoundError, account_not_found
from ledgercheck.domain.journal import reference_date, load_analyzer
from ledgercheck.domain.patterns import PatternCache
from ledgercheck.utils.log import get_logger

logger = get_logger(__name__)

RELATIONSHIP_LOOKBACK_DAYS = 90


class RelationshipService:
    """Suggests related accounts and groups accounts used together."""

    def __init__(
        self,
        repo: LedgerRepository,
        builder: Optional[ClusterBuilder] = None,
        cache: Optional[PatternCache] = None,
    ):
        self.repo = repo
        self.builder = builder or ClusterBuilder()
        self.cache = cache

    def suggestions(
        self,
        organization_id: str,
        source_code: Optional[str] = None,
        now: Union[datetime, date, None] = None,
    ) -> list[SmartSuggestion]:
        """Suggest accounts to pair with ``source_code``.

        Without a source account the seed associations are returned.

        Raises:
            ConfigurationError: If the organization has no chart of accounts
            NotFoundError: If source_code is not in the chart
        """
        today = reference_date(now)
        accounts = load_chart(self.repo, organization_id)
        if source_code is not None and source_code not in accounts:
            raise NotFoundError(account_not_found(source_code, organization_id))

        analyzer = load_analyzer(
            self.repo,
            organization_id,
            today - timedelta(days=RELATIONSHIP_LOOKBACK_DAYS),
            self.cache,
        )
        suggestions = self.builder.suggest(source_code, analyzer, accounts, today)
        logger.info(
            "suggestions_built",
            organization_id=organization_id,
            source_code=source_code,
            count=len(suggestions),
        )
        return suggestions

    def clusters(
        self, organization_id: str, now: Union[datetime, date, None] = None
    ) -> list[AccountCluster]:
        """Group accounts posted together over the last 90 days."""
        today = reference_date(now)
        accounts = load_chart(self.repo, organization_id)
        analyzer = load_analyzer(
            self.repo,
            organization_id,
            today - timedelta(days=RELATIONSHIP_LOOKBACK_DAYS),
            self.cache,
        )
        clusters = self.builder.clusters(analyzer, accounts)
        logger.info("clusters_built", organization_id=organization_id, count=len(clusters))
        return clusters


class PatternService:
    """Describes how individual accounts are used."""

    def __init__(self, repo: LedgerRepository, cache: Optional[PatternCache] = None):
        self.repo = repo
        self.cache = cache

    def profile(
        self,
        organization_id: str,
        code: str,
        now: Union[datetime, date, None] = None,
    ) -> Optional[AccountProfile]:
        """Profile an account's usage over the last 90 days.

        Returns:
            AccountProfile, or None if the account has no recent history

        Raises:
            NotFoundError: If the account does not exist
        """
        if self.repo.get_account(organization_id, code) is None:
            raise NotFoundError(account_not_found(code, organization_id))

        since = reference_date(now) - timedelta(days=RELATIONSHIP_LOOKBACK_DAYS)
        analyzer = load_analyzer(self.repo, organization_id, since, self.cache)
        return analyzer.account_profile(code)
