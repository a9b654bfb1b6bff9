"""Onboarding command."""

import click
from decimal import Decimal

from bizsplit.cli.choices import (
    CATEGORY_CHOICES,
    COMPANY_TYPE_CHOICES,
    SALARY_METHOD_CHOICES,
    choice,
    get_profile_service,
)
from bizsplit.cli.error_handling import handle_domain_error
from bizsplit.domain.commands import CompleteOnboarding
from bizsplit.domain.entities import CompanyType, SalaryMethod
from bizsplit.domain.metrics import tax_target
from bizsplit.utils.amount_parser import parse_amount
from bizsplit.utils.formatting import format_currency, format_percentage


@click.command("setup")
@click.option(
    "--company-type",
    type=choice(COMPANY_TYPE_CHOICES),
    prompt="Company type",
    help="Tax classification (mei is the flat-rate tier)",
)
@click.option(
    "--category",
    type=choice(CATEGORY_CHOICES),
    help="Activity category, only used by the flat-rate tier",
)
@click.option(
    "--revenue",
    prompt="Expected monthly revenue",
    help="Reference monthly revenue (e.g., 10000 or R$10,000.00)",
)
@click.option("--tax-rate", default="6", show_default=True, help="Tax rate in percent")
@click.option(
    "--salary-method",
    type=choice(SALARY_METHOD_CHOICES),
    prompt="Salary method",
    help="fixed stipend or profit withdrawal",
)
@click.option("--salary", "salary_value", default="0", help="Fixed monthly salary")
@click.pass_context
def setup_profile(
    ctx,
    company_type: str,
    category: str | None,
    revenue: str,
    tax_rate: str,
    salary_method: str,
    salary_value: str,
):
    """Set up the business profile.

    Examples:
        bizsplit setup --company-type mei --category service --revenue 5000 --salary-method profit
        bizsplit setup --company-type simples --revenue 20000 --tax-rate 6 --salary-method fixed --salary 3000
    """
    service = get_profile_service(ctx)

    try:
        revenue_amount = parse_amount(revenue)
        rate = parse_amount(tax_rate)
        salary = parse_amount(salary_value)
    except ValueError as e:
        handle_domain_error(ctx, e)

    classification = COMPANY_TYPE_CHOICES[company_type.lower()]
    flat_category = None
    if classification == CompanyType.MEI:
        flat_category = CATEGORY_CHOICES[(category or "service").lower()]
    method = SALARY_METHOD_CHOICES[salary_method.lower()]

    profile = service.dispatch(
        CompleteOnboarding(
            company_type=classification,
            flat_rate_category=flat_category,
            monthly_revenue=revenue_amount,
            tax_rate=rate,
            salary_method=method,
            salary_value=salary if method == SalaryMethod.FIXED else Decimal("0"),
        )
    )

    estimate = tax_target(
        profile.monthly_revenue,
        profile.company_type,
        profile.tax_rate,
        profile.flat_rate_category,
    )
    click.echo("Profile set up.")
    if classification == CompanyType.MEI:
        click.echo(f"  Flat monthly tax ({flat_category.value.lower()}): {format_currency(estimate)}")
    else:
        click.echo(
            f"  Estimated monthly tax at {format_percentage(rate)}: {format_currency(estimate)}"
        )
    if method == SalaryMethod.FIXED:
        click.echo(f"  Fixed salary: {format_currency(profile.salary_value)}")


def register_commands(cli):
    """Register setup command with main CLI."""
    cli.add_command(setup_profile)
