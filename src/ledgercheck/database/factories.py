"""Repository factory functions for creating ledger repositories."""

import os
from pathlib import Path
from typing import Optional, Union

from ledgercheck.database.sqlalchemy_db import SQLAlchemyLedgerRepository
from ledgercheck.domain.errors import InfrastructureError

DB_PATH_ENV_VAR = "LEDGERCHECK_DB_PATH"
DEFAULT_DB_FILENAME = "ledgercheck.db"


def resolve_database_path(database_path: Union[str, Path, None] = None) -> Path:
    """Pick the ledger file: explicit path, then $LEDGERCHECK_DB_PATH, then ~/.ledgercheck.

    The parent directory is created when missing.

    Raises:
        InfrastructureError: If the parent directory cannot be created
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR) or (
            Path.home() / ".ledgercheck" / DEFAULT_DB_FILENAME
        )

    path = Path(database_path).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise InfrastructureError(f"Cannot create ledger directory '{path.parent}': {e}") from e
    return path


def create_sqlite_repository(
    database_path: Union[str, Path, None] = None,
) -> SQLAlchemyLedgerRepository:
    """Create a SQLite-backed ledger repository.

    Args:
        database_path: Ledger file; see ``resolve_database_path`` for the fallbacks

    Returns:
        SQLAlchemyLedgerRepository with its schema created

    Raises:
        InfrastructureError: If the ledger file cannot be opened
    """
    path = resolve_database_path(database_path)
    return SQLAlchemyLedgerRepository(f"sqlite:///{path}")
