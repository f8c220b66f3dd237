"""Main CLI entry point."""

import click
from ledgercheck.database.factories import create_sqlite_repository
from ledgercheck.domain.errors import InfrastructureError
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.utils.log import DEFAULT_LEVEL, configure_logging

# Import and register all commands at module level
from ledgercheck.cli.commands import (
    account,
    post,
    validate,
    trial_balance,
    relationships,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to ledger database file (overrides LEDGERCHECK_DB_PATH environment variable)",
    envvar="LEDGERCHECK_DB_PATH",
)
@click.option(
    "--org",
    "organization_id",
    default="default",
    show_default=True,
    help="Organization whose ledger to use (overrides LEDGERCHECK_ORG environment variable)",
    envvar="LEDGERCHECK_ORG",
)
@click.option(
    "--log-level",
    default=DEFAULT_LEVEL,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level for diagnostics on stderr",
    envvar="LEDGERCHECK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, organization_id: str, log_level: str):
    """Ledgercheck - Journal entry validation for double-entry ledgers.

    Validate draft journal entries before posting, suggest related accounts
    from posting history and produce trial balances per organization.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["org"] = organization_id

    # Open the ledger only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            repo = create_sqlite_repository(database_path=db_path)
            repo.connect()
            repo.initialize_schema()
        except InfrastructureError as e:
            handle_domain_error(ctx, e)
        ctx.obj["repo"] = repo
        ctx.call_on_close(repo.disconnect)


# Register all commands
account.register_commands(cli)
post.register_commands(cli)
validate.register_commands(cli)
trial_balance.register_commands(cli)
relationships.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
