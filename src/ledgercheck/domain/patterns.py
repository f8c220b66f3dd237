"""Historical usage statistics for accounts and account pairs."""

from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from ledgercheck.domain.entities import (
    ZERO,
    AccountPairStatistic,
    AccountProfile,
    AccountStatistic,
    PostedTransaction,
    UsageDirection,
    UsageFrequency,
)

MAX_PAIR_EXAMPLES = 3
MAX_COMMON_PARTNERS = 3
DEFAULT_PREDICTION_GAP_DAYS = 30


def pair_key(code_a: str, code_b: str) -> tuple[str, str]:
    """Return the canonical (sorted) key for an account pair."""
    return (code_a, code_b) if code_a <= code_b else (code_b, code_a)


@dataclass
class _PairAccumulator:
    frequency: int
    cumulative_amount: Decimal
    last_used: date
    examples: list[str]


@dataclass
class _ActivityAccumulator:
    dates: list[date]
    debit_total: Decimal
    credit_total: Decimal
    amount_total: Decimal
    amount_count: int
    partners: Counter


class PatternAnalyzer:
    """Per-account and per-pair statistics over a snapshot of history.

    The analyzer is built once from an immutable sequence of posted
    transactions and then only read. Callers choose the history window;
    drafts under validation never feed back into it.
    """

    def __init__(self, transactions: Iterable[PostedTransaction]):
        """Build statistics from historical transactions.

        Args:
            transactions: Posted transactions in the analysis window
        """
        self._averages: dict[str, tuple[Decimal, int]] = {}
        self._pairs: dict[tuple[str, str], _PairAccumulator] = {}
        self._activity: dict[str, _ActivityAccumulator] = {}
        self._account_sets: list[tuple[str, ...]] = []
        seen_sets: set[tuple[str, ...]] = set()
        self.transaction_count = 0

        for transaction in transactions:
            self.transaction_count += 1
            self._observe_lines(transaction)
            self._observe_pairs(transaction)

            codes = tuple(sorted({line.account_code for line in transaction.lines}))
            if len(codes) >= 2 and codes not in seen_sets:
                seen_sets.add(codes)
                self._account_sets.append(codes)

        self._account_statistics = {
            code: AccountStatistic(account_code=code, running_average=avg, sample_count=count)
            for code, (avg, count) in self._averages.items()
        }
        self._pair_statistics = {
            key: AccountPairStatistic(
                account_a=key[0],
                account_b=key[1],
                frequency=acc.frequency,
                cumulative_amount=acc.cumulative_amount,
                last_used=acc.last_used,
                examples=tuple(acc.examples),
            )
            for key, acc in self._pairs.items()
        }

    def _observe_lines(self, transaction: PostedTransaction) -> None:
        for line in transaction.lines:
            code = line.account_code
            amount = line.amount

            # Online mean: avg' = (avg * n + x) / (n + 1)
            avg, count = self._averages.get(code, (ZERO, 0))
            self._averages[code] = ((avg * count + amount) / (count + 1), count + 1)

            activity = self._activity.get(code)
            if activity is None:
                activity = _ActivityAccumulator([], ZERO, ZERO, ZERO, 0, Counter())
                self._activity[code] = activity
            activity.dates.append(transaction.transaction_date)
            if line.debit_amount > ZERO:
                activity.debit_total += line.debit_amount
                activity.amount_total += line.debit_amount
                activity.amount_count += 1
            if line.credit_amount > ZERO:
                activity.credit_total += line.credit_amount
                activity.amount_total += line.credit_amount
                activity.amount_count += 1
            for other in transaction.lines:
                if other.account_code != code:
                    activity.partners[other.account_code] += 1

    def _observe_pairs(self, transaction: PostedTransaction) -> None:
        lines = transaction.lines
        example = transaction.description or "Transaction"
        for i in range(len(lines)):
            for j in range(i + 1, len(lines)):
                first, second = lines[i], lines[j]
                if first.account_code == second.account_code:
                    continue
                key = pair_key(first.account_code, second.account_code)
                amount = max(first.posted_amount, second.posted_amount)

                acc = self._pairs.get(key)
                if acc is None:
                    acc = _PairAccumulator(0, ZERO, transaction.transaction_date, [])
                    self._pairs[key] = acc
                acc.frequency += 1
                acc.cumulative_amount += amount
                if transaction.transaction_date > acc.last_used:
                    acc.last_used = transaction.transaction_date
                if len(acc.examples) < MAX_PAIR_EXAMPLES:
                    acc.examples.append(example)

    @property
    def account_statistics(self) -> dict[str, AccountStatistic]:
        """Statistics for every observed account, keyed by code."""
        return dict(self._account_statistics)

    @property
    def pairs(self) -> tuple[AccountPairStatistic, ...]:
        """All pair statistics, ordered by key."""
        return tuple(self._pair_statistics[key] for key in sorted(self._pair_statistics))

    @property
    def account_sets(self) -> tuple[tuple[str, ...], ...]:
        """Distinct account-code sets posted together, in first-seen order."""
        return tuple(self._account_sets)

    def account_stats(self, code: str) -> Optional[AccountStatistic]:
        return self._account_statistics.get(code)

    def pair_stats(self, code_a: str, code_b: str) -> Optional[AccountPairStatistic]:
        return self._pair_statistics.get(pair_key(code_a, code_b))

    def top_pairs_for(self, code: str, limit: Optional[int] = 5) -> list[AccountPairStatistic]:
        """Pairs involving ``code`` ranked by frequency.

        Ties are broken by the partner account code so the ranking is stable
        for identical history. A ``limit`` of None returns every pair.
        """
        related = [stat for key, stat in self._pair_statistics.items() if code in key]
        related.sort(key=lambda stat: (-stat.frequency, stat.other(code)))
        return related[:limit]

    def account_profile(self, code: str) -> Optional[AccountProfile]:
        """Describe how an account is typically used.

        Returns None when the account has no history in the window.
        """
        activity = self._activity.get(code)
        if activity is None:
            return None

        dates = sorted(activity.dates)
        gaps = [(later - earlier).days for earlier, later in zip(dates, dates[1:])]
        mean_gap = sum(gaps) / len(gaps) if gaps else 0.0

        if not gaps:
            frequency = UsageFrequency.IRREGULAR
        elif mean_gap <= 2:
            frequency = UsageFrequency.DAILY
        elif mean_gap <= 8:
            frequency = UsageFrequency.WEEKLY
        elif mean_gap <= 35:
            frequency = UsageFrequency.MONTHLY
        else:
            frequency = UsageFrequency.IRREGULAR

        if activity.debit_total > activity.credit_total * 2:
            direction = UsageDirection.DEBIT
        elif activity.credit_total > activity.debit_total * 2:
            direction = UsageDirection.CREDIT
        else:
            direction = UsageDirection.BOTH

        average = (
            activity.amount_total / activity.amount_count if activity.amount_count else ZERO
        )
        partners = sorted(activity.partners.items(), key=lambda item: (-item[1], item[0]))
        gap_days = round(mean_gap) or DEFAULT_PREDICTION_GAP_DAYS

        return AccountProfile(
            account_code=code,
            frequency=frequency,
            direction=direction,
            average_amount=average,
            common_partners=tuple(partner for partner, _ in partners[:MAX_COMMON_PARTNERS]),
            last_used=dates[-1],
            predicted_next_date=dates[-1] + timedelta(days=gap_days),
            sample_count=len(dates),
        )


class PatternCache:
    """Caller-owned cache of analyzers per organization and window start.

    Entries must be invalidated whenever a transaction posts for the
    organization; ``JournalService`` does this when given the cache.
    Storing an analyzer evicts the organization's entries with an earlier
    window start, so windows that roll forward day by day do not pile up.
    """

    def __init__(self):
        self._entries: dict[tuple[str, date], PatternAnalyzer] = {}

    def get(self, organization_id: str, since: date) -> Optional[PatternAnalyzer]:
        return self._entries.get((organization_id, since))

    def put(self, organization_id: str, since: date, analyzer: PatternAnalyzer) -> None:
        for key in [key for key in self._entries if key[0] == organization_id and key[1] < since]:
            del self._entries[key]
        self._entries[(organization_id, since)] = analyzer

    def invalidate(self, organization_id: str) -> None:
        """Drop every cached analyzer of one organization."""
        for key in [key for key in self._entries if key[0] == organization_id]:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
