"""Trial balance command."""

import csv

import click
from ledgercheck.cli.date_filters import resolve_cli_date_range
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.domain.entities import TrialBalanceData
from ledgercheck.domain.errors import DomainError, InfrastructureError
from ledgercheck.domain.reporting import TrialBalanceService
from ledgercheck.domain.trial_balance import summarize
from ledgercheck.utils.date_parser import get_date_range

CSV_HEADER = ["account_code", "account_name", "account_type", "debit", "credit"]


def _amount_cell(amount) -> str:
    return f"${amount:,.2f}" if amount else ""


def write_trial_balance_csv(data: TrialBalanceData, path: str) -> None:
    """Write the displayed trial balance rows and totals to a CSV file."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for row in data.rows:
            writer.writerow(
                [
                    row.account_code,
                    row.account_name,
                    row.account_type.value,
                    f"{row.debit_display:.2f}",
                    f"{row.credit_display:.2f}",
                ]
            )
        writer.writerow(["TOTAL", "", "", f"{data.total_debits:.2f}", f"{data.total_credits:.2f}"])


def _display_trial_balance(data: TrialBalanceData, show_summary: bool) -> None:
    click.echo(f"\nTrial Balance as of {data.as_of_date}")
    click.echo(f"Period: {data.period_start} to {data.period_end}")
    click.echo("-" * 90)
    click.echo(f"{'Code':10s} {'Account':35s} {'Debit':>20s} {'Credit':>20s}")
    click.echo("-" * 90)
    for row in data.rows:
        click.echo(
            f"{row.account_code:10s} {row.account_name[:35]:35s} "
            f"{_amount_cell(row.debit_display):>20s} {_amount_cell(row.credit_display):>20s}"
        )
    click.echo("-" * 90)
    click.echo(
        f"{'TOTAL':46s} {f'${data.total_debits:,.2f}':>20s} {f'${data.total_credits:,.2f}':>20s}"
    )

    if data.is_balanced:
        click.echo("\nTrial balance is balanced.")
    else:
        click.echo(f"\nTrial balance is OUT OF BALANCE by ${data.difference:,.2f}")

    if show_summary:
        summary = summarize(data)
        click.echo("\nSummary:")
        for label, group in (
            ("Assets", summary.assets),
            ("Liabilities", summary.liabilities),
            ("Equity", summary.equity),
            ("Revenue", summary.revenue),
            ("Expenses", summary.expenses),
        ):
            click.echo(f"  {label:12s} ${group.total:>15,.2f}  ({group.count} accounts)")


@click.command("trial-balance")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Current month to date (default)")
@click.option("--last-month", is_flag=True, help="Previous month")
@click.option("--this-quarter", is_flag=True, help="Current quarter to date")
@click.option("--last-quarter", is_flag=True, help="Previous quarter")
@click.option("--this-year", is_flag=True, help="Current year to date")
@click.option("--last-year", is_flag=True, help="Previous year")
@click.option("--summary", "show_summary", is_flag=True, help="Show totals by account family")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), help="Export rows to a CSV file")
@click.pass_context
def trial_balance(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    last_month: bool,
    this_quarter: bool,
    last_quarter: bool,
    this_year: bool,
    last_year: bool,
    show_summary: bool,
    csv_path: str | None,
):
    """Show the trial balance for a period.

    Examples:
        ledgercheck trial-balance
        ledgercheck trial-balance --last-month --summary
        ledgercheck trial-balance --start-date 2024-01-01 --end-date 2024-03-31 --csv tb.csv
    """
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "last-month": last_month,
            "this-quarter": this_quarter,
            "last-quarter": last_quarter,
            "this-year": this_year,
            "last-year": last_year,
        },
        default_range=get_date_range("this-month"),
    )

    try:
        data = TrialBalanceService(repo).generate(org, start, end)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    _display_trial_balance(data, show_summary)

    if csv_path:
        try:
            write_trial_balance_csv(data, csv_path)
        except OSError as e:
            click.echo(f"Error: Could not write '{csv_path}': {e}", err=True)
            ctx.exit(1)
        click.echo(f"\nExported {len(data.rows)} rows to {csv_path}")


def register_commands(cli):
    """Register trial balance command with main CLI."""
    cli.add_command(trial_balance)
