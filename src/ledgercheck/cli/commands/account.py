"""Chart of accounts commands."""

import click
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.domain.account import AccountService
from ledgercheck.domain.entities import AccountType
from ledgercheck.domain.errors import DomainError, InfrastructureError

ACCOUNT_TYPE_CHOICES = [account_type.value for account_type in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    required=True,
    type=click.Choice(ACCOUNT_TYPE_CHOICES),
    help="Kind of account",
)
@click.option(
    "--no-posting",
    is_flag=True,
    help="Header account: lines may not post to it directly",
)
@click.option("--inactive", is_flag=True, help="Create the account as inactive")
@click.option("--parent", "parent_code", help="Code of the parent account")
@click.pass_context
def create_account(
    ctx,
    code: str,
    name: str,
    account_type: str,
    no_posting: bool,
    inactive: bool,
    parent_code: str | None,
):
    """Create a new account.

    Examples:
        ledgercheck account create 1001000 "Cash - Operating Account" --type asset
        ledgercheck account create 4000000 "Revenue" --type revenue --no-posting
        ledgercheck account create 4001000 "Food Sales" --type revenue --parent 4000000
    """
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]
    service = AccountService(repo)

    try:
        service.create_account(
            organization_id=org,
            code=code,
            name=name,
            account_type=AccountType(account_type),
            allows_posting=not no_posting,
            is_active=not inactive,
            parent_code=parent_code,
        )
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account {code} '{name}' ({account_type})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List the chart of accounts."""
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]
    service = AccountService(repo)

    try:
        accounts = service.list_accounts(org)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        flags = []
        if not acc.is_active:
            flags.append("inactive")
        if not acc.allows_posting:
            flags.append("no posting")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(f"{acc.code:10s} | {acc.name:35s} | {acc.account_type.value:21s}{suffix}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
