"""Validate journal entry command."""

import dataclasses
import json
from datetime import date
from decimal import Decimal
from enum import Enum

import click
from ledgercheck.cli.entry_input import lines_from_specs, load_draft_file, parse_entry_date
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.domain.autofix import apply_fixes
from ledgercheck.domain.entities import JournalEntryDraft, ValidationResult
from ledgercheck.domain.errors import DomainError, InfrastructureError
from ledgercheck.domain.journal import ValidationService


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def result_to_json(result: ValidationResult) -> str:
    """Serialize a validation result, amounts as decimal strings."""
    return json.dumps(dataclasses.asdict(result), default=_json_default, indent=2)


def _display_result(draft: JournalEntryDraft, result: ValidationResult) -> None:
    status = "VALID" if result.is_valid else "INVALID"
    click.echo(f"\nJournal entry: {draft.description or '(no description)'} ({draft.entry_date})")
    click.echo(f"Status: {status}")
    click.echo(f"Score: {result.validation_score}/100")
    click.echo(f"Confidence: {result.confidence:.0%}")

    if result.issues:
        click.echo("\nIssues:")
        click.echo("-" * 80)
        for issue in result.issues:
            lines = ""
            if issue.affected_lines:
                lines = f" (line {', '.join(str(i + 1) for i in issue.affected_lines)})"
            click.echo(f"[{issue.issue_type.value:8s}] {issue.description}{lines}")
            if issue.suggested_fix:
                click.echo(f"{'':11s}Fix: {issue.suggested_fix}")

    if result.auto_fix_suggestions:
        click.echo("\nAuto-fix suggestions:")
        for fix in result.auto_fix_suggestions:
            click.echo(f"  - {fix.description} (confidence {fix.confidence:.0%})")

    if result.recommendations:
        click.echo("\nRecommendations:")
        for recommendation in result.recommendations:
            click.echo(f"  - {recommendation}")


@click.command("validate")
@click.argument("entry_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--description", default="", help="Entry description")
@click.option(
    "--date",
    "entry_date",
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to today",
)
@click.option("--debit", "debits", multiple=True, help="Debit line as CODE=AMOUNT (repeatable)")
@click.option("--credit", "credits", multiple=True, help="Credit line as CODE=AMOUNT (repeatable)")
@click.option(
    "--apply-fixes",
    "apply_suggested",
    is_flag=True,
    help="Apply the auto-fix suggestions and validate the corrected entry",
)
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.pass_context
def validate_entry(
    ctx,
    entry_file: str | None,
    description: str,
    entry_date: str | None,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    apply_suggested: bool,
    as_json: bool,
):
    """Validate a draft journal entry without posting it.

    The entry is read from ENTRY_FILE (JSON) or built from --debit/--credit
    options. Exits with status 1 when the entry has critical issues.

    Examples:
        ledgercheck validate --debit 1001000=150 --credit 4001000=100
        ledgercheck validate entry.json --json
    """
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    if entry_file and (debits or credits):
        click.echo("Error: Give either ENTRY_FILE or --debit/--credit lines, not both.", err=True)
        ctx.exit(1)

    if entry_file:
        draft = load_draft_file(ctx, entry_file)
    else:
        draft = JournalEntryDraft(
            description=description,
            entry_date=parse_entry_date(ctx, entry_date),
            lines=lines_from_specs(ctx, debits, credits),
        )

    service = ValidationService(repo)
    try:
        result = service.validate_draft(org, draft)
        if apply_suggested and result.auto_fix_suggestions:
            draft = apply_fixes(draft, result.auto_fix_suggestions)
            result = service.validate_draft(org, draft)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    if as_json:
        click.echo(result_to_json(result))
    else:
        _display_result(draft, result)

    if not result.is_valid:
        ctx.exit(1)


def register_commands(cli):
    """Register validate command with main CLI."""
    cli.add_command(validate_entry)
