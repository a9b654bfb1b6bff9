"""Shared option choices and context helpers for CLI commands."""

import click

from bizsplit.domain.entities import (
    CommitmentKind,
    CompanyType,
    FlatRateCategory,
    SalaryMethod,
    TransactionKind,
)
from bizsplit.domain.profile import ProfileService

KIND_CHOICES = {kind.value.lower(): kind for kind in TransactionKind}
COMPANY_TYPE_CHOICES = {
    "mei": CompanyType.MEI,
    "simples": CompanyType.PJ_SIMPLES,
    "autonomo": CompanyType.AUTONOMO,
}
CATEGORY_CHOICES = {c.value.lower(): c for c in FlatRateCategory}
SALARY_METHOD_CHOICES = {m.value.lower(): m for m in SalaryMethod}
COMMITMENT_KIND_CHOICES = {k.value.lower(): k for k in CommitmentKind}

KIND_LABELS = {
    TransactionKind.INCOME: "Income",
    TransactionKind.TAX: "Tax",
    TransactionKind.SALARY: "Owner salary",
    TransactionKind.RESERVE: "Reserve",
    TransactionKind.GROWTH: "Growth",
    TransactionKind.COST: "Fixed costs",
}


def choice(options: dict) -> click.Choice:
    """Build a case-insensitive click choice from a mapping."""
    return click.Choice(list(options), case_sensitive=False)


def get_profile_service(ctx: click.Context) -> ProfileService:
    """Return the profile service stored on the click context."""
    return ProfileService(ctx.obj["store"])
