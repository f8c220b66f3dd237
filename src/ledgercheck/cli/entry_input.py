"""CLI helpers for reading journal entry drafts."""

import json
from datetime import date
from decimal import Decimal, InvalidOperation

import click
from ledgercheck.domain.entities import JournalEntryDraft, JournalLine
from ledgercheck.utils.amount_parser import parse_amount, parse_line_spec
from ledgercheck.utils.date_parser import parse_date


def lines_from_specs(
    ctx: click.Context, debits: tuple[str, ...], credits: tuple[str, ...]
) -> tuple[JournalLine, ...]:
    """Build journal lines from CODE=AMOUNT options, or exit with a CLI error.

    Debit lines come first, in the order given, followed by credit lines.
    """
    lines = []
    try:
        for spec in debits:
            code, amount = parse_line_spec(spec)
            lines.append(JournalLine(account_code=code, debit=amount))
        for spec in credits:
            code, amount = parse_line_spec(spec)
            lines.append(JournalLine(account_code=code, credit=amount))
    except ValueError as e:
        click.echo(f"Error: Invalid line: {e}", err=True)
        ctx.exit(1)
    return tuple(lines)


def parse_entry_date(ctx: click.Context, value: str | None, today: date | None = None) -> date:
    """Parse the --date option (defaults to today), or exit with a CLI error."""
    if value is None:
        return today or date.today()
    try:
        return parse_date(value, today=today)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _optional_amount(value) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1
        value = str(value)
    if isinstance(value, str):
        return parse_amount(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Could not parse amount '{value}'")
    if amount < 0:
        raise ValueError(f"Amount '{value}' must not be negative")
    return amount


def draft_from_json(payload: dict, today: date | None = None) -> JournalEntryDraft:
    """Build a draft from a decoded JSON document.

    Expected shape::

        {
            "description": "Cash sale",
            "entry_date": "2024-01-10",
            "lines": [
                {"account_code": "1001000", "debit": "150.00"},
                {"account_code": "4001000", "credit": "150.00"}
            ]
        }

    ``entry_date`` defaults to today.

    Raises:
        ValueError: If the document is malformed
    """
    if not isinstance(payload, dict):
        raise ValueError("Journal entry document must be a JSON object")

    raw_lines = payload.get("lines", [])
    if not isinstance(raw_lines, list):
        raise ValueError("'lines' must be a list")

    lines = []
    for number, raw in enumerate(raw_lines, start=1):
        if not isinstance(raw, dict) or not raw.get("account_code"):
            raise ValueError(f"Line {number} must be an object with an 'account_code'")
        lines.append(
            JournalLine(
                account_code=str(raw["account_code"]),
                debit=_optional_amount(raw.get("debit")),
                credit=_optional_amount(raw.get("credit")),
                description=raw.get("description"),
            )
        )

    raw_date = payload.get("entry_date")
    entry_date = parse_date(str(raw_date), today=today) if raw_date else (today or date.today())
    return JournalEntryDraft(
        description=str(payload.get("description", "")),
        entry_date=entry_date,
        lines=tuple(lines),
    )


def load_draft_file(ctx: click.Context, path: str, today: date | None = None) -> JournalEntryDraft:
    """Read a draft from a JSON file, or exit with a CLI error."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return draft_from_json(payload, today=today)
    except (OSError, ValueError) as e:
        click.echo(f"Error: Could not read journal entry from '{path}': {e}", err=True)
        ctx.exit(1)
