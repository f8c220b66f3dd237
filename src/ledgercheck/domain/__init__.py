"""Domain layer for ledgercheck application."""

from ledgercheck.domain.validation import ValidationEngine
from ledgercheck.domain.patterns import PatternAnalyzer, PatternCache
from ledgercheck.domain.clusters import ClusterBuilder
from ledgercheck.domain.trial_balance import TrialBalanceAggregator
from ledgercheck.domain.policy import ValidationPolicy

__all__ = [
    "ValidationEngine",
    "PatternAnalyzer",
    "PatternCache",
    "ClusterBuilder",
    "TrialBalanceAggregator",
    "ValidationPolicy",
]
