"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConfigurationError(DomainError):
    """Organization setup prevents the operation.

    Raised for faults that no correction of the submitted entry can fix,
    such as an organization without a chart of accounts.
    """


class DataIntegrityError(DomainError):
    """Stored ledger data contradicts itself."""


class InfrastructureError(RuntimeError):
    """The ledger store is unreachable or returned unusable data."""


def account_not_found(code: str, organization_id: str) -> str:
    """Return message for missing account."""
    return f"Account {code} not found in organization '{organization_id}'"


def duplicate_account_code(code: str, organization_id: str) -> str:
    """Return message for duplicate account code."""
    return f"Account with code '{code}' already exists in organization '{organization_id}'"


def empty_chart_of_accounts(organization_id: str) -> str:
    """Return message for organization without accounts."""
    return (
        f"Organization '{organization_id}' has no chart of accounts. "
        "Create accounts before validating entries."
    )


def conflicting_account(code: str, organization_id: str) -> str:
    """Return message for an account code defined more than once."""
    return f"Account {code} is defined more than once in organization '{organization_id}'"


def unknown_account_type(code: str, value: str) -> str:
    """Return message for an unreadable account type."""
    return f"Account {code} has unknown account type '{value}'"


def invalid_metadata_value(code: str, field_name: str, value: str) -> str:
    """Return message for an unreadable account metadata value."""
    return f"Account {code} has invalid value '{value}' for metadata field '{field_name}'"


def posted_line_unknown_account(code: str) -> str:
    """Return message for posted data referencing an unknown account."""
    return f"Posted line references account {code}, which is not in the chart of accounts"


def invalid_period(period_start, period_end) -> str:
    """Return message for a reversed reporting period."""
    return f"Period start {period_start} is after period end {period_end}"


def unbalanced_entry(total_debits, total_credits) -> str:
    """Return message for an entry that cannot be posted."""
    return (
        f"Cannot post unbalanced entry. Debits: ${total_debits:,.2f}, "
        f"Credits: ${total_credits:,.2f}"
    )
