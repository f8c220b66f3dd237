"""SQLAlchemy models for the ledgercheck database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("organization_id", "code", name="uq_organization_account_code"),)

    # Relationships
    metadata_fields = relationship(
        "AccountMetadata", back_populates="account", cascade="all, delete-orphan"
    )


class AccountMetadata(Base):
    """Free-form key/value settings of an account.

    Known fields are decoded by the mappers: ``allow_posting`` ("true" /
    "false") and ``parent_code``.
    """

    __tablename__ = "account_metadata"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    field_name = Column(String, nullable=False)
    field_value = Column(String, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="metadata_fields")


class Transaction(Base):
    """Posted journal entry model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    organization_id = Column(String, nullable=False, index=True)
    transaction_date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    posted_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    lines = relationship(
        "TransactionLine",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionLine.line_number",
    )


class TransactionLine(Base):
    """Debit or credit line of a posted journal entry."""

    __tablename__ = "transaction_lines"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    account_code = Column(String, nullable=False)
    debit = Column(Numeric(14, 2), nullable=True)
    credit = Column(Numeric(14, 2), nullable=True)
    description = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="lines")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
