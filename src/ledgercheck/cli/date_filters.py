"""CLI helpers for date range resolution."""

from datetime import date

import click

from ledgercheck.utils.date_parser import get_date_range, parse_date


def period_flag_names(period_flags: dict[str, bool]) -> str:
    return ", ".join(f"--{period}" for period in period_flags)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
    today: date | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates.

    A missing start or end date is taken from ``default_range``.
    """
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({period_flag_names(period_flags)}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period, today=today)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date, today=today)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date, today=today)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if default_range is not None:
            if start is None:
                start = default_range[0]
            if end is None:
                end = default_range[1]

    return start, end
