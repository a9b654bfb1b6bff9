"""Dashboard, details and ledger views."""

from decimal import Decimal
from typing import Optional

import click

from bizsplit.cli.choices import KIND_CHOICES, KIND_LABELS, choice, get_profile_service
from bizsplit.domain.entities import Profile, TransactionKind
from bizsplit.domain.metrics import (
    ALLOCATIONS_LEVEL,
    COMMITMENTS_LEVEL,
    DashboardSnapshot,
    build_snapshot,
    progress_percent,
    suggested_amount,
)
from bizsplit.utils.formatting import (
    HIDDEN_VALUE,
    format_currency,
    format_date,
    format_percentage,
    format_runway,
)

OUTFLOW_KINDS = (
    TransactionKind.TAX,
    TransactionKind.SALARY,
    TransactionKind.RESERVE,
    TransactionKind.GROWTH,
    TransactionKind.COST,
)


def _visible_kinds(level: int) -> list[TransactionKind]:
    kinds = [TransactionKind.TAX, TransactionKind.SALARY]
    if level >= ALLOCATIONS_LEVEL:
        kinds += [TransactionKind.RESERVE, TransactionKind.GROWTH]
    if level >= COMMITMENTS_LEVEL:
        kinds.append(TransactionKind.COST)
    return kinds


def _print_bucket(
    profile: Profile,
    snapshot: DashboardSnapshot,
    kind: TransactionKind,
    money,
) -> None:
    actual = snapshot.actual_for(kind)
    target: Optional[Decimal] = snapshot.target_for(kind)
    label = KIND_LABELS[kind]
    if kind == TransactionKind.SALARY:
        click.echo(f"  {label:<14} {money(actual)} taken of {money(target)} safe")
    else:
        pct = format_percentage(progress_percent(actual, target))
        click.echo(f"  {label:<14} {money(actual)} of {money(target)} ({pct})")
    suggestion = suggested_amount(profile, snapshot, kind)
    if suggestion > 0:
        click.echo(f"  {'':<14} next: {money(suggestion)}")


@click.command("dashboard")
@click.option("--hide-values", is_flag=True, help="Mask all amounts")
@click.pass_context
def dashboard(ctx, hide_values: bool):
    """Show this month's targets against what was already moved."""
    profile = get_profile_service(ctx).load()
    snapshot = build_snapshot(profile)

    def money(value: Decimal) -> str:
        return HIDDEN_VALUE if hide_values else format_currency(value)

    if not profile.setup_complete:
        click.echo("Profile not set up yet. Run 'bizsplit setup' first.")

    click.echo(f"\nLevel {snapshot.maturity_level}")
    click.echo(f"Income:            {money(snapshot.income)}")
    click.echo(f"Safe to withdraw:  {money(snapshot.safe_personal_limit)}")
    click.echo(f"Operating result:  {money(snapshot.operating_result)}")
    cash_line = f"Company cash:      {money(snapshot.total_cash)}"
    if snapshot.is_danger:
        cash_line += "  [DANGER: negative cash]"
    click.echo(cash_line)

    if snapshot.maturity_level >= COMMITMENTS_LEVEL and not snapshot.is_danger:
        runway_line = f"Runway:            {format_runway(snapshot.runway_months)} months"
        if snapshot.is_runway_short:
            runway_line += "  [short]"
        click.echo(runway_line)

    click.echo("\nBuckets:")
    for kind in _visible_kinds(snapshot.maturity_level):
        _print_bucket(profile, snapshot, kind, money)

    if snapshot.maturity_level >= COMMITMENTS_LEVEL and profile.commitments:
        click.echo("\nCommitments:")
        for item in profile.commitments:
            status = "paid" if item.id in snapshot.paid_commitment_ids else "open"
            click.echo(f"  [{status:>4}] {item.name:<20} {money(item.amount)}")


@click.command("details")
@click.pass_context
def details(ctx):
    """Show where the money went, entry by entry."""
    profile = get_profile_service(ctx).load()
    snapshot = build_snapshot(profile)

    click.echo(f"\nIncome: {format_currency(snapshot.income)}")
    for kind in OUTFLOW_KINDS:
        entries = [t for t in profile.transactions if t.kind == kind]
        click.echo(f"- {KIND_LABELS[kind]}: {format_currency(snapshot.actual_for(kind))}")
        if not entries:
            click.echo("    No entries.")
        for txn in entries:
            click.echo(
                f"    {format_date(txn.occurred_at)}  {txn.description or '':<24} "
                f"{format_currency(txn.amount)}"
            )
    click.echo(f"= Left in the company: {format_currency(snapshot.operating_result)}")


@click.command("ledger")
@click.option("--kind", type=choice(KIND_CHOICES), help="Only show entries of this kind")
@click.pass_context
def ledger(ctx, kind: str | None):
    """List entries in the order they were recorded."""
    profile = get_profile_service(ctx).load()
    entries = list(profile.transactions)
    if kind is not None:
        wanted = KIND_CHOICES[kind.lower()]
        entries = [t for t in entries if t.kind == wanted]

    if not entries:
        click.echo("No entries found.")
        return

    for txn in entries:
        click.echo(
            f"{txn.occurred_at:%Y-%m-%d}  {txn.kind.value:<8} "
            f"{format_currency(txn.amount):>14}  {txn.description or ''}"
        )


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(dashboard)
    cli.add_command(details)
    cli.add_command(ledger)
