"""Mapper functions to convert between SQLAlchemy models and domain entities.

Account settings are stored as a free-form key/value bag. They are decoded
here, once, into typed ``Account`` fields so nothing downstream parses
strings. Defaults for missing fields:

    allow_posting  -> True
    parent_code    -> None
"""

from decimal import Decimal
from typing import Optional

from ledgercheck.domain import entities as domain
from ledgercheck.domain.errors import (
    DataIntegrityError,
    invalid_metadata_value,
    unknown_account_type,
)
from ledgercheck.database.models import (
    Account as ORMAccount,
    AccountMetadata as ORMAccountMetadata,
    Transaction as ORMTransaction,
    TransactionLine as ORMTransactionLine,
)

ALLOW_POSTING_FIELD = "allow_posting"
PARENT_CODE_FIELD = "parent_code"

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


def decode_metadata(code: str, fields: list[ORMAccountMetadata]) -> dict[str, Optional[str]]:
    """Collapse metadata rows into a dict, rejecting contradicting duplicates."""
    decoded: dict[str, Optional[str]] = {}
    for item in fields:
        if item.field_name in decoded and decoded[item.field_name] != item.field_value:
            raise DataIntegrityError(
                f"Account {code} has conflicting values for metadata field '{item.field_name}'"
            )
        decoded[item.field_name] = item.field_value
    return decoded


def decode_flag(code: str, field_name: str, value: Optional[str], default: bool) -> bool:
    """Read a boolean metadata value."""
    if value is None or value == "":
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DataIntegrityError(invalid_metadata_value(code, field_name, value))


def encode_flag(value: bool) -> str:
    return "true" if value else "false"


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    try:
        account_type = domain.AccountType(orm_account.account_type)
    except ValueError:
        raise DataIntegrityError(
            unknown_account_type(orm_account.code, orm_account.account_type)
        ) from None

    metadata = decode_metadata(orm_account.code, list(orm_account.metadata_fields))
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        account_type=account_type,
        is_active=orm_account.is_active,
        allows_posting=decode_flag(
            orm_account.code, ALLOW_POSTING_FIELD, metadata.get(ALLOW_POSTING_FIELD), True
        ),
        parent_code=metadata.get(PARENT_CODE_FIELD) or None,
    )


def _amount(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(value)


def line_to_domain(orm_line: ORMTransactionLine) -> domain.JournalLine:
    """Convert SQLAlchemy TransactionLine model to domain JournalLine entity."""
    return domain.JournalLine(
        account_code=orm_line.account_code,
        debit=_amount(orm_line.debit),
        credit=_amount(orm_line.credit),
        description=orm_line.description,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.PostedTransaction:
    """Convert SQLAlchemy Transaction model to domain PostedTransaction entity."""
    return domain.PostedTransaction(
        id=orm_transaction.id,
        description=orm_transaction.description,
        transaction_date=orm_transaction.transaction_date,
        lines=tuple(line_to_domain(line) for line in orm_transaction.lines),
    )
