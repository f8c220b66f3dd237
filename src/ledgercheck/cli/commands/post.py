"""Post journal entry command."""

import click
from ledgercheck.cli.entry_input import lines_from_specs, parse_entry_date
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.domain.entities import JournalEntryDraft
from ledgercheck.domain.errors import DomainError, InfrastructureError
from ledgercheck.domain.journal import JournalService, ValidationService


@click.command("post")
@click.argument("description")
@click.option(
    "--date",
    "entry_date",
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to today",
)
@click.option("--debit", "debits", multiple=True, help="Debit line as CODE=AMOUNT (repeatable)")
@click.option("--credit", "credits", multiple=True, help="Credit line as CODE=AMOUNT (repeatable)")
@click.option(
    "--check/--no-check",
    default=True,
    help="Validate the entry first and refuse to post when it has critical issues",
)
@click.pass_context
def post_entry(
    ctx,
    description: str,
    entry_date: str | None,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    check: bool,
):
    """Post a journal entry to the ledger.

    Examples:
        ledgercheck post "Cash sale" --debit 1001000=150.00 --credit 4001000=150.00
        ledgercheck post "Rent" --date 2024-01-31 --debit 6004000=2000 --credit 1001000=2000
    """
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    draft = JournalEntryDraft(
        description=description,
        entry_date=parse_entry_date(ctx, entry_date),
        lines=lines_from_specs(ctx, debits, credits),
    )

    try:
        if check:
            result = ValidationService(repo).validate_draft(org, draft)
            if not result.is_valid:
                click.echo("Entry has critical issues and was not posted:", err=True)
                for issue in result.issues:
                    click.echo(f"  [{issue.issue_type.value}] {issue.description}", err=True)
                ctx.exit(1)
        transaction_id = JournalService(repo).post_entry(org, draft)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Posted transaction {transaction_id}")
    click.echo(f"  Date: {draft.entry_date}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Debits: ${draft.total_debits:,.2f}  Credits: ${draft.total_credits:,.2f}")


def register_commands(cli):
    """Register post command with main CLI."""
    cli.add_command(post_entry)
