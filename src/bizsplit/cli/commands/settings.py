"""Settings commands: allocations, commitments, balance, tax, salary, level, reset."""

import click

from bizsplit.cli.choices import (
    CATEGORY_CHOICES,
    COMMITMENT_KIND_CHOICES,
    COMPANY_TYPE_CHOICES,
    SALARY_METHOD_CHOICES,
    choice,
    get_profile_service,
)
from bizsplit.cli.error_handling import handle_domain_error
from bizsplit.domain.commands import (
    CompleteLevelThree,
    CompleteLevelTwo,
    SetAllocationRule,
    SetCommitments,
    SetMaturityLevel,
    SetOpeningBalance,
    SetSalaryPolicy,
    SetTaxConfig,
    new_commitment,
)
from bizsplit.domain.entities import (
    AllocationBasis,
    AllocationRule,
    Allocations,
    CompanyType,
)
from bizsplit.domain.errors import NotFoundError, ValidationError, commitment_not_found
from bizsplit.domain.metrics import build_snapshot, commitments_total
from bizsplit.utils.amount_parser import parse_amount
from bizsplit.utils.formatting import format_currency, format_percentage


@click.group()
def allocation_group():
    """Manage reserve and growth allocation rules."""
    pass


@allocation_group.command("set")
@click.argument("target", type=click.Choice(["reserve", "growth"], case_sensitive=False))
@click.option("--percent", help="Set aside this percent of income")
@click.option("--fixed", help="Set aside this fixed amount per month")
@click.option("--disable", is_flag=True, help="Stop tracking this allocation")
@click.pass_context
def set_allocation(ctx, target: str, percent: str | None, fixed: str | None, disable: bool):
    """Set the reserve or growth rule."""
    chosen = [opt for opt in (percent, fixed) if opt is not None]
    if len(chosen) + int(disable) != 1:
        handle_domain_error(
            ctx, ValidationError("Use exactly one of --percent, --fixed or --disable")
        )

    try:
        if disable:
            current = getattr(get_profile_service(ctx).load().allocations, target.lower())
            rule = AllocationRule(
                enabled=False, basis=current.basis, magnitude=current.magnitude
            )
        elif percent is not None:
            rule = AllocationRule(
                enabled=True, basis=AllocationBasis.PERCENTAGE, magnitude=parse_amount(percent)
            )
        else:
            rule = AllocationRule(
                enabled=True, basis=AllocationBasis.FIXED, magnitude=parse_amount(fixed)
            )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if rule.magnitude < 0:
        handle_domain_error(ctx, ValidationError("Allocation cannot be negative"))

    get_profile_service(ctx).dispatch(SetAllocationRule(target=target.lower(), rule=rule))
    if not rule.enabled:
        click.echo(f"Disabled {target.lower()} allocation")
    elif rule.basis == AllocationBasis.PERCENTAGE:
        click.echo(f"Set {target.lower()} allocation to {format_percentage(rule.magnitude)} of income")
    else:
        click.echo(f"Set {target.lower()} allocation to {format_currency(rule.magnitude)} per month")


@click.group()
def commitment_group():
    """Manage recurring fixed costs."""
    pass


@commitment_group.command("add")
@click.argument("name")
@click.argument("amount")
@click.option(
    "--kind",
    type=choice(COMMITMENT_KIND_CHOICES),
    default="service",
    show_default=True,
    help="people, service or obligation",
)
@click.pass_context
def add_commitment(ctx, name: str, amount: str, kind: str):
    """Add a monthly commitment."""
    service = get_profile_service(ctx)
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    if not name.strip():
        handle_domain_error(ctx, ValidationError("Commitment name is required"))
    if value < 0:
        handle_domain_error(ctx, ValidationError("Commitment amount cannot be negative"))

    profile = service.load()
    if profile.find_commitment_by_name(name) is not None:
        click.echo(
            f"Warning: a commitment named '{name.strip()}' already exists; "
            "unlinked payments will match both",
            err=True,
        )
    item = new_commitment(name, COMMITMENT_KIND_CHOICES[kind.lower()], value)
    profile = service.dispatch(SetCommitments((*profile.commitments, item)))
    click.echo(f"Added commitment '{item.name}' (ID: {item.id})")
    click.echo(f"  Monthly total: {format_currency(commitments_total(profile.commitments))}")


@commitment_group.command("list")
@click.pass_context
def list_commitments(ctx):
    """List commitments with their payment status."""
    profile = get_profile_service(ctx).load()
    if not profile.commitments:
        click.echo("No commitments found.")
        return

    paid = build_snapshot(profile).paid_commitment_ids
    for item in profile.commitments:
        status = "paid" if item.id in paid else "open"
        click.echo(
            f"[{status:>4}] {item.name:<20} {item.kind.value.lower():<10} "
            f"{format_currency(item.amount):>14}  (ID: {item.id})"
        )
    click.echo(f"Total: {format_currency(commitments_total(profile.commitments))}")


@commitment_group.command("remove")
@click.argument("reference")
@click.pass_context
def remove_commitment(ctx, reference: str):
    """Remove a commitment by ID or name."""
    service = get_profile_service(ctx)
    profile = service.load()
    item = profile.find_commitment(reference) or profile.find_commitment_by_name(reference)
    if item is None:
        handle_domain_error(ctx, NotFoundError(commitment_not_found(reference)))

    service.dispatch(
        SetCommitments(tuple(c for c in profile.commitments if c.id != item.id))
    )
    click.echo(f"Removed commitment '{item.name}'")


@click.group()
def balance_group():
    """Manage the accumulated reserve balance."""
    pass


@balance_group.command("set")
@click.argument("amount")
@click.pass_context
def set_balance(ctx, amount: str):
    """Set the accumulated reserve balance."""
    try:
        value = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)
    get_profile_service(ctx).dispatch(SetOpeningBalance(value))
    click.echo(f"Reserve balance set to {format_currency(value)}")


@click.group()
def tax_group():
    """Manage tax configuration."""
    pass


@tax_group.command("set")
@click.option("--company-type", type=choice(COMPANY_TYPE_CHOICES), required=True)
@click.option("--rate", default="6", show_default=True, help="Tax rate in percent")
@click.option("--category", type=choice(CATEGORY_CHOICES), help="Flat-rate tier category")
@click.pass_context
def set_tax(ctx, company_type: str, rate: str, category: str | None):
    """Change company classification and tax rate."""
    try:
        tax_rate = parse_amount(rate)
    except ValueError as e:
        handle_domain_error(ctx, e)
    classification = COMPANY_TYPE_CHOICES[company_type.lower()]
    flat_category = None
    if classification == CompanyType.MEI and category is not None:
        flat_category = CATEGORY_CHOICES[category.lower()]

    get_profile_service(ctx).dispatch(
        SetTaxConfig(
            company_type=classification,
            tax_rate=tax_rate,
            flat_rate_category=flat_category,
        )
    )
    click.echo(f"Tax configuration updated ({classification.value})")


@click.group()
def salary_group():
    """Manage the owner's salary policy."""
    pass


@salary_group.command("set")
@click.option("--method", type=choice(SALARY_METHOD_CHOICES), required=True)
@click.option("--value", default="0", help="Fixed monthly salary")
@click.pass_context
def set_salary(ctx, method: str, value: str):
    """Change the salary policy."""
    try:
        amount = parse_amount(value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    get_profile_service(ctx).dispatch(
        SetSalaryPolicy(method=SALARY_METHOD_CHOICES[method.lower()], value=amount)
    )
    click.echo(f"Salary policy set to {method.lower()}")


@click.group()
def level_group():
    """Manage which tracking features are unlocked."""
    pass


@level_group.command("set")
@click.argument("level", type=click.IntRange(1, 3))
@click.option(
    "--reserve-percent", default="10", show_default=True, help="Level 2 reserve rule"
)
@click.option(
    "--growth-percent", default="5", show_default=True, help="Level 2 growth rule"
)
@click.option("--balance", help="Level 3 opening reserve balance")
@click.pass_context
def set_level(
    ctx, level: int, reserve_percent: str, growth_percent: str, balance: str | None
):
    """Set the maturity level (1 basic, 2 allocations, 3 commitments).

    Level 2 enables percentage reserve and growth rules. Level 3 requires
    --balance, the cash already set aside, and keeps current commitments.
    """
    service = get_profile_service(ctx)
    if level == 3 and balance is None:
        handle_domain_error(ctx, ValidationError("Level 3 requires --balance"))

    try:
        if level == 2:
            command = CompleteLevelTwo(
                Allocations(
                    reserve=_percentage_rule(reserve_percent),
                    growth=_percentage_rule(growth_percent),
                )
            )
        elif level == 3:
            opening = parse_amount(balance)
            if opening < 0:
                raise ValidationError("Balance cannot be negative")
            command = CompleteLevelThree(
                opening_balance=opening, commitments=service.load().commitments
            )
        else:
            command = SetMaturityLevel(level)
    except ValueError as e:
        handle_domain_error(ctx, e)

    profile = service.dispatch(command)
    click.echo(f"Maturity level set to {profile.maturity_level}")
    if level == 2:
        click.echo(
            f"  Reserve: {format_percentage(profile.allocations.reserve.magnitude)}"
            f", growth: {format_percentage(profile.allocations.growth.magnitude)} of income"
        )
    elif level == 3:
        click.echo(f"  Reserve balance: {format_currency(profile.opening_reserve_balance)}")


def _percentage_rule(text: str) -> AllocationRule:
    magnitude = parse_amount(text)
    if magnitude < 0:
        raise ValidationError("Allocation cannot be negative")
    return AllocationRule(
        enabled=True, basis=AllocationBasis.PERCENTAGE, magnitude=magnitude
    )


@click.command("reset")
@click.confirmation_option(prompt="Erase all data and start over?")
@click.pass_context
def reset(ctx):
    """Erase the profile and every entry."""
    get_profile_service(ctx).reset()
    click.echo("All data erased.")


def register_commands(cli):
    """Register settings commands with main CLI."""
    cli.add_command(allocation_group, name="allocation")
    cli.add_command(commitment_group, name="commitment")
    cli.add_command(balance_group, name="balance")
    cli.add_command(tax_group, name="tax")
    cli.add_command(salary_group, name="salary")
    cli.add_command(level_group, name="level")
    cli.add_command(reset)
