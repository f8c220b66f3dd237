"""Account suggestions and clusters from co-occurrence statistics."""

from dataclasses import dataclass
from datetime import date, datetime
from itertools import combinations
from typing import Iterable, Mapping, Optional, Union

from ledgercheck.domain.entities import (
    Account,
    AccountCluster,
    AccountPairStatistic,
    AccountType,
    ClusterUsage,
    SmartSuggestion,
    SuggestionBasis,
)
from ledgercheck.domain.patterns import PatternAnalyzer

MAX_SUGGESTIONS = 5
MAX_CLUSTERS = 5
RECENCY_WINDOW_DAYS = 30
FREQUENCY_SATURATION = 10
RECENCY_WEIGHT = 0.3
FREQUENCY_WEIGHT = 0.7
INDUSTRY_STANDARD_CONFIDENCE = 0.8

CLUSTER_ACTIONS = (
    "Consider creating templates for these common transactions",
    "Set up automated journal entry rules",
    "Monitor this cluster for unusual patterns",
)


@dataclass(frozen=True)
class SeedAssociation:
    """Industry-standard pairing used when there is no history to learn from."""

    source_code: str
    target_code: str
    reason: str


INDUSTRY_ASSOCIATIONS: tuple[SeedAssociation, ...] = (
    SeedAssociation("1001000", "4001000", "Daily cash sales are common in restaurants"),
    SeedAssociation("1001000", "6004000", "Monthly rent payments typically made in cash"),
    SeedAssociation("1001000", "1003000", "Cash purchases of inventory"),
    SeedAssociation("5001000", "1003000", "Food cost comes from inventory usage"),
    SeedAssociation("5001000", "2001000", "Food purchases create payables"),
)


def _directory(accounts: Union[Mapping[str, Account], Iterable[Account]]) -> Mapping[str, Account]:
    if isinstance(accounts, Mapping):
        return accounts
    return {account.code: account for account in accounts}


def _today(now: Union[datetime, date, None]) -> date:
    if now is None:
        return date.today()
    if isinstance(now, datetime):
        return now.date()
    return now


def recency_score(last_used: date, today: date) -> float:
    """1.0 for use today, falling linearly to 0 after 30 days."""
    days = (today - last_used).days
    return min(1.0, max(0.0, 1 - days / RECENCY_WINDOW_DAYS))


def frequency_score(frequency: int) -> float:
    return min(frequency / FREQUENCY_SATURATION, 1.0)


def pair_confidence(pair: AccountPairStatistic, today: date) -> float:
    """Blend recency and frequency of a pair into a 0..1 confidence."""
    return RECENCY_WEIGHT * recency_score(pair.last_used, today) + FREQUENCY_WEIGHT * frequency_score(
        pair.frequency
    )


def classify_usage(account_types: Iterable[AccountType]) -> ClusterUsage:
    """Label a cluster from the types of its member accounts."""
    types = set(account_types)
    if AccountType.ASSET in types and AccountType.REVENUE in types:
        return ClusterUsage.SALES
    if AccountType.ASSET in types and any(account_type.is_expense for account_type in types):
        return ClusterUsage.EXPENSE
    return ClusterUsage.MIXED


class ClusterBuilder:
    """Builds ranked account suggestions and usage clusters."""

    def __init__(self, associations: tuple[SeedAssociation, ...] = INDUSTRY_ASSOCIATIONS):
        """Initialize cluster builder.

        Args:
            associations: Seed pairings used for cold-start suggestions
        """
        self.associations = associations

    def suggest(
        self,
        source_code: Optional[str],
        analyzer: PatternAnalyzer,
        accounts: Union[Mapping[str, Account], Iterable[Account]],
        now: Union[datetime, date, None] = None,
    ) -> list[SmartSuggestion]:
        """Suggest accounts to use alongside ``source_code``.

        Without a source account, seed associations for accounts present in
        the chart are returned instead.

        Args:
            source_code: Account the user is posting to, or None
            analyzer: Pattern statistics over recent history
            accounts: Organization's chart of accounts
            now: Reference time for recency (defaults to today)

        Returns:
            Up to five suggestions, best first
        """
        directory = _directory(accounts)
        if source_code is None:
            return self._cold_start(directory)

        today = _today(now)
        scored = []
        for pair in analyzer.top_pairs_for(source_code, limit=None):
            target = directory.get(pair.other(source_code))
            if target is None:
                continue
            scored.append((pair_confidence(pair, today), pair, target))

        scored.sort(key=lambda item: (-item[0], -item[1].frequency, item[2].code))
        return [
            SmartSuggestion(
                target_code=target.code,
                target_name=target.name,
                target_type=target.account_type,
                confidence=confidence,
                reason=f"Frequently used together ({pair.frequency} transactions)",
                based_on=SuggestionBasis.TRANSACTION_PATTERN,
                frequency=pair.frequency,
                average_amount=pair.average_amount,
                last_used=pair.last_used,
                examples=pair.examples,
            )
            for confidence, pair, target in scored[:MAX_SUGGESTIONS]
        ]

    def _cold_start(self, directory: Mapping[str, Account]) -> list[SmartSuggestion]:
        suggestions = []
        seen: set[str] = set()
        for association in self.associations:
            if association.source_code not in directory:
                continue
            target = directory.get(association.target_code)
            if target is None or target.code in seen:
                continue
            seen.add(target.code)
            suggestions.append(
                SmartSuggestion(
                    target_code=target.code,
                    target_name=target.name,
                    target_type=target.account_type,
                    confidence=INDUSTRY_STANDARD_CONFIDENCE,
                    reason=association.reason,
                    based_on=SuggestionBasis.INDUSTRY_STANDARD,
                    examples=("Industry best practice",),
                )
            )
        return suggestions

    def clusters(
        self,
        analyzer: PatternAnalyzer,
        accounts: Union[Mapping[str, Account], Iterable[Account]],
    ) -> list[AccountCluster]:
        """Group accounts posted together into ranked clusters.

        Args:
            analyzer: Pattern statistics over recent history
            accounts: Organization's chart of accounts

        Returns:
            Up to five clusters, strongest first
        """
        directory = _directory(accounts)
        candidates = []
        for codes in analyzer.account_sets:
            if len(codes) < 2:
                continue
            internal_frequency = 0
            for code_a, code_b in combinations(codes, 2):
                pair = analyzer.pair_stats(code_a, code_b)
                if pair is not None:
                    internal_frequency += pair.frequency
            strength = min(internal_frequency / FREQUENCY_SATURATION, 1.0)
            usage = classify_usage(
                directory[code].account_type for code in codes if code in directory
            )
            candidates.append((strength, codes, usage))

        candidates.sort(key=lambda item: (-item[0], item[1]))
        clusters = []
        for number, (strength, codes, usage) in enumerate(candidates[:MAX_CLUSTERS], start=1):
            clusters.append(
                AccountCluster(
                    cluster_id=f"cluster_{number}",
                    cluster_name=f"Account Cluster {number}",
                    accounts=codes,
                    usage=usage,
                    strength=strength,
                    recommended_actions=CLUSTER_ACTIONS,
                )
            )
        return clusters
