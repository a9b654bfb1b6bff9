"""Add ledger entry command."""

import click

from bizsplit.cli.choices import KIND_CHOICES, KIND_LABELS, choice, get_profile_service
from bizsplit.cli.error_handling import handle_domain_error
from bizsplit.domain.commands import AppendTransaction, validate_entry
from bizsplit.domain.entities import TransactionKind
from bizsplit.domain.errors import NotFoundError, commitment_not_found
from bizsplit.domain.metrics import build_snapshot, suggested_amount
from bizsplit.utils.amount_parser import parse_amount
from bizsplit.utils.date_parser import parse_occurred_at
from bizsplit.utils.formatting import format_currency

SUGGESTED = "suggested"


@click.command("add")
@click.argument("kind", type=choice(KIND_CHOICES))
@click.argument("amount")
@click.option("--description", "-d", help="What the entry is for")
@click.option(
    "--date",
    "date_str",
    default="now",
    help="When it happened (ISO date/time, 'now', 'today', 'yesterday')",
)
@click.option(
    "--commitment",
    help="Name or ID of the fixed cost commitment this payment settles",
)
@click.pass_context
def add_entry(
    ctx,
    kind: str,
    amount: str,
    description: str | None,
    date_str: str,
    commitment: str | None,
):
    """Record money coming in or going out.

    KIND is one of income, tax, salary, reserve, growth, cost. AMOUNT may be
    'suggested' to use what is still missing to reach the target.

    Examples:
        bizsplit add income 8000 -d "Client invoice"
        bizsplit add tax suggested -d "DAS"
        bizsplit add cost 120 --commitment Accountant
    """
    service = get_profile_service(ctx)
    profile = service.load()
    txn_kind = KIND_CHOICES[kind.lower()]

    commitment_id = None
    if commitment is not None:
        if txn_kind != TransactionKind.COST:
            handle_domain_error(ctx, ValueError("--commitment only applies to cost entries"))
        linked = profile.find_commitment(commitment) or profile.find_commitment_by_name(
            commitment
        )
        if linked is None:
            handle_domain_error(ctx, NotFoundError(commitment_not_found(commitment)))
        commitment_id = linked.id
        if description is None:
            description = linked.name
        if amount.lower() == SUGGESTED:
            amount = str(linked.amount)

    try:
        if amount.lower() == SUGGESTED:
            txn_amount = suggested_amount(profile, build_snapshot(profile), txn_kind)
        else:
            txn_amount = parse_amount(amount)
        occurred_at = parse_occurred_at(date_str)
        description = validate_entry(txn_amount, description)
    except ValueError as e:
        handle_domain_error(ctx, e)

    profile = service.dispatch(
        AppendTransaction(
            kind=txn_kind,
            amount=txn_amount,
            description=description,
            occurred_at=occurred_at,
            commitment_id=commitment_id,
        )
    )
    click.echo(f"Recorded {KIND_LABELS[txn_kind].lower()}: {format_currency(txn_amount)}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Date: {occurred_at:%Y-%m-%d %H:%M}")
    if txn_kind == TransactionKind.RESERVE:
        click.echo(f"  Reserve balance: {format_currency(profile.opening_reserve_balance)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_entry)
