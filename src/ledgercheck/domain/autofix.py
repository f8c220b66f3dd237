"""Auto-fix suggestion generators.

Each auto-fixable validation rule has one generator. A generator receives the
draft, the issue it answers, and the active policy, and returns the fixes it
can propose for that issue. New fixable rules register a generator in
``FIX_GENERATORS``; the validation engine needs no change.
"""

from dataclasses import replace
from typing import Callable, Iterable

from ledgercheck.domain.entities import (
    AutoFixSuggestion,
    FixType,
    IssueRule,
    JournalEntryDraft,
    JournalLine,
    ValidationIssue,
)
from ledgercheck.domain.policy import ValidationPolicy

FixGenerator = Callable[[JournalEntryDraft, ValidationIssue, ValidationPolicy], list[AutoFixSuggestion]]

BALANCING_FIX_CONFIDENCE = 0.9
REMOVAL_FIX_CONFIDENCE = 0.8
SPLIT_FIX_CONFIDENCE = 0.8


def balancing_line_fix(
    draft: JournalEntryDraft, issue: ValidationIssue, policy: ValidationPolicy
) -> list[AutoFixSuggestion]:
    """Propose one line that absorbs the imbalance.

    Excess debits are credited to the designated equity account; excess
    credits are debited to the designated cash account.
    """
    imbalance = draft.imbalance
    if imbalance == 0:
        return []

    if imbalance > 0:
        line = JournalLine(
            account_code=policy.equity_account_code,
            credit=imbalance,
            description="Auto-generated balancing entry",
        )
        target = f"credit {policy.equity_account_name} ({policy.equity_account_code})"
    else:
        line = JournalLine(
            account_code=policy.cash_account_code,
            debit=-imbalance,
            description="Auto-generated balancing entry",
        )
        target = f"debit {policy.cash_account_name} ({policy.cash_account_code})"

    return [
        AutoFixSuggestion(
            fix_type=FixType.ENTRY_ADDITION,
            category=issue.category,
            description=f"Add balancing entry: {target} ${abs(imbalance):,.2f}",
            confidence=BALANCING_FIX_CONFIDENCE,
            reasoning="Add balancing entry to make journal entry balance",
            suggested_lines=(line,),
        )
    ]


def zero_line_removal_fix(
    draft: JournalEntryDraft, issue: ValidationIssue, policy: ValidationPolicy
) -> list[AutoFixSuggestion]:
    """Propose removing lines that carry no amount."""
    fixes = []
    for index in issue.affected_lines:
        fixes.append(
            AutoFixSuggestion(
                fix_type=FixType.ENTRY_REMOVAL,
                category=issue.category,
                description=f"Remove entry {index + 1} with zero amount",
                confidence=REMOVAL_FIX_CONFIDENCE,
                reasoning="A line without a debit or credit amount does not affect the ledger",
                line_index=index,
                original_line=draft.lines[index],
            )
        )
    return fixes


def split_line_fix(
    draft: JournalEntryDraft, issue: ValidationIssue, policy: ValidationPolicy
) -> list[AutoFixSuggestion]:
    """Propose splitting a line with both sides into a debit and a credit line."""
    fixes = []
    for index in issue.affected_lines:
        original = draft.lines[index]
        debit_line = JournalLine(
            account_code=original.account_code,
            debit=original.debit_amount,
            description=original.description,
        )
        credit_line = JournalLine(
            account_code=original.account_code,
            credit=original.credit_amount,
            description=original.description,
        )
        fixes.append(
            AutoFixSuggestion(
                fix_type=FixType.ENTRY_SPLIT,
                category=issue.category,
                description=f"Split entry {index + 1} into separate debit and credit entries",
                confidence=SPLIT_FIX_CONFIDENCE,
                reasoning="Each journal line should carry either a debit or a credit",
                line_index=index,
                original_line=original,
                suggested_lines=(debit_line, credit_line),
            )
        )
    return fixes


FIX_GENERATORS: dict[IssueRule, FixGenerator] = {
    IssueRule.UNBALANCED: balancing_line_fix,
    IssueRule.ZERO_AMOUNT: zero_line_removal_fix,
    IssueRule.DUAL_SIDED: split_line_fix,
}


def generate_fixes(
    draft: JournalEntryDraft,
    issues: Iterable[ValidationIssue],
    policy: ValidationPolicy,
    generators: dict[IssueRule, FixGenerator] = FIX_GENERATORS,
) -> list[AutoFixSuggestion]:
    """Run the matching generator for every auto-fixable issue.

    Suggestions below the policy's confidence threshold are dropped.
    """
    fixes = []
    for issue in issues:
        if not issue.can_auto_fix or issue.rule is None:
            continue
        generator = generators.get(issue.rule)
        if generator is None:
            continue
        fixes.extend(
            fix
            for fix in generator(draft, issue, policy)
            if fix.confidence >= policy.autofix_confidence_threshold
        )
    return fixes


def apply_fix(draft: JournalEntryDraft, fix: AutoFixSuggestion) -> JournalEntryDraft:
    """Return a new draft with one fix applied."""
    lines = list(draft.lines)
    if fix.line_index is None:
        lines.extend(fix.suggested_lines)
    else:
        if not 0 <= fix.line_index < len(lines):
            raise IndexError(f"Fix refers to entry {fix.line_index + 1}, draft has {len(lines)}")
        lines[fix.line_index : fix.line_index + 1] = list(fix.suggested_lines)
    return replace(draft, lines=tuple(lines))


def apply_fixes(draft: JournalEntryDraft, fixes: Iterable[AutoFixSuggestion]) -> JournalEntryDraft:
    """Apply several fixes to a draft.

    Line replacements run from the last line backwards so earlier indices
    stay valid; additions are appended afterwards.
    """
    fixes = list(fixes)
    in_place = sorted(
        (fix for fix in fixes if fix.line_index is not None),
        key=lambda fix: fix.line_index,
        reverse=True,
    )
    for fix in in_place:
        draft = apply_fix(draft, fix)
    for fix in fixes:
        if fix.line_index is None:
            draft = apply_fix(draft, fix)
    return draft
