"""Account relationship commands: suggestions, clusters and usage profiles."""

import click
from ledgercheck.cli.error_handling import handle_domain_error
from ledgercheck.domain.errors import DomainError, InfrastructureError
from ledgercheck.domain.insights import PatternService, RelationshipService


@click.command("suggest")
@click.argument("source_code", metavar="[SOURCE]", required=False)
@click.pass_context
def suggest_accounts(ctx, source_code: str | None):
    """Suggest accounts commonly used with SOURCE.

    Without SOURCE, common industry pairings for accounts in the chart are
    listed instead.

    Examples:
        ledgercheck suggest 1001000
        ledgercheck suggest
    """
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    try:
        suggestions = RelationshipService(repo).suggestions(org, source_code)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    if not suggestions:
        click.echo("No suggestions found.")
        return

    heading = f"Accounts used with {source_code}" if source_code else "Suggested account pairings"
    click.echo(f"\n{heading}:")
    click.echo("-" * 80)
    for suggestion in suggestions:
        click.echo(
            f"{suggestion.target_code:10s} | {suggestion.target_name:30s} | "
            f"{suggestion.confidence:4.0%} | {suggestion.reason}"
        )
        if suggestion.frequency:
            click.echo(
                f"{'':13s}Average ${suggestion.average_amount:,.2f}, last used {suggestion.last_used}"
            )


@click.command("clusters")
@click.pass_context
def show_clusters(ctx):
    """Show groups of accounts frequently posted together."""
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    try:
        clusters = RelationshipService(repo).clusters(org)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    if not clusters:
        click.echo("No account clusters found.")
        return

    for cluster in clusters:
        click.echo(f"\n{cluster.cluster_name} ({cluster.usage.value}, strength {cluster.strength})")
        click.echo(f"  Accounts: {', '.join(cluster.accounts)}")
        for action in cluster.recommended_actions:
            click.echo(f"  - {action}")


@click.command("profile")
@click.argument("code", metavar="CODE")
@click.pass_context
def profile_account(ctx, code: str):
    """Describe how account CODE is typically used."""
    repo = ctx.obj["repo"]
    org = ctx.obj["org"]

    try:
        profile = PatternService(repo).profile(org, code)
    except (DomainError, InfrastructureError) as e:
        handle_domain_error(ctx, e)

    if profile is None:
        click.echo(f"Account {code} has no recent activity.")
        return

    click.echo(f"\nAccount {code}")
    click.echo(f"  Frequency: {profile.frequency.value}")
    click.echo(f"  Direction: {profile.direction.value}")
    click.echo(f"  Average amount: ${profile.average_amount:,.2f}")
    click.echo(f"  Transactions: {profile.sample_count}")
    click.echo(f"  Last used: {profile.last_used}")
    click.echo(f"  Next expected: {profile.predicted_next_date}")
    if profile.common_partners:
        click.echo(f"  Common partners: {', '.join(profile.common_partners)}")


def register_commands(cli):
    """Register relationship commands with main CLI."""
    cli.add_command(suggest_accounts)
    cli.add_command(show_clusters)
    cli.add_command(profile_account)
