"""Profile mutations as a closed set of commands.

``apply_command`` takes the current profile and a command and returns a new
profile. Nothing here mutates in place, so a failed command never leaves a
half-updated profile behind.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, UTC
from decimal import Decimal
from typing import Literal, Optional, Sequence, Union

from bizsplit.domain.entities import (
    MAX_MATURITY_LEVEL,
    MIN_MATURITY_LEVEL,
    AllocationRule,
    Allocations,
    Commitment,
    CommitmentKind,
    CompanyType,
    FlatRateCategory,
    Profile,
    SalaryMethod,
    Transaction,
    TransactionKind,
    default_profile,
)
from bizsplit.domain.errors import (
    ValidationError,
    amount_not_positive,
    description_required,
)

AllocationTarget = Literal["reserve", "growth"]


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


def validate_entry(amount: Decimal, description: Optional[str]) -> str:
    """Check a ledger entry before it is dispatched.

    Returns:
        The trimmed description

    Raises:
        ValidationError: If amount is not positive or description is blank
    """
    if amount <= 0:
        raise ValidationError(amount_not_positive(amount))
    trimmed = (description or "").strip()
    if not trimmed:
        raise ValidationError(description_required())
    return trimmed


def append_transaction(
    ledger: Sequence[Transaction],
    kind: TransactionKind,
    amount: Decimal,
    description: Optional[str],
    occurred_at: Optional[datetime] = None,
    transaction_id: Optional[str] = None,
    commitment_id: Optional[str] = None,
) -> tuple[Transaction, ...]:
    """Return a new ledger with one entry appended at the end.

    Values are taken as given; callers validate with ``validate_entry``.
    """
    txn = Transaction(
        id=transaction_id or new_id(),
        kind=kind,
        amount=amount,
        occurred_at=occurred_at or datetime.now(UTC),
        description=description,
        commitment_id=commitment_id,
    )
    return (*ledger, txn)


def new_commitment(name: str, kind: CommitmentKind, amount: Decimal) -> Commitment:
    """Build a commitment with a fresh id."""
    return Commitment(id=new_id(), name=name.strip(), kind=kind, amount=amount)


@dataclass(frozen=True)
class AppendTransaction:
    kind: TransactionKind
    amount: Decimal
    description: Optional[str]
    occurred_at: Optional[datetime] = None
    commitment_id: Optional[str] = None


@dataclass(frozen=True)
class SetAllocationRule:
    target: AllocationTarget
    rule: AllocationRule


@dataclass(frozen=True)
class SetCommitments:
    commitments: tuple[Commitment, ...]


@dataclass(frozen=True)
class SetOpeningBalance:
    amount: Decimal


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class CompleteOnboarding:
    company_type: CompanyType
    flat_rate_category: Optional[FlatRateCategory]
    monthly_revenue: Decimal
    tax_rate: Decimal
    salary_method: SalaryMethod
    salary_value: Decimal = Decimal("0")


@dataclass(frozen=True)
class SetTaxConfig:
    company_type: CompanyType
    tax_rate: Decimal
    flat_rate_category: Optional[FlatRateCategory] = None


@dataclass(frozen=True)
class SetSalaryPolicy:
    method: SalaryMethod
    value: Decimal = Decimal("0")


@dataclass(frozen=True)
class SetMaturityLevel:
    level: int


@dataclass(frozen=True)
class CompleteLevelTwo:
    """Unlock reserve and growth tracking with the chosen rules."""

    allocations: Allocations


@dataclass(frozen=True)
class CompleteLevelThree:
    """Unlock commitments and runway with a starting balance."""

    opening_balance: Decimal
    commitments: tuple[Commitment, ...]


Command = Union[
    AppendTransaction,
    SetAllocationRule,
    SetCommitments,
    SetOpeningBalance,
    Reset,
    CompleteOnboarding,
    SetTaxConfig,
    SetSalaryPolicy,
    SetMaturityLevel,
    CompleteLevelTwo,
    CompleteLevelThree,
]


def clamp_level(level: int) -> int:
    """Clamp a maturity level into the supported range."""
    return max(MIN_MATURITY_LEVEL, min(MAX_MATURITY_LEVEL, level))


def apply_command(profile: Profile, command: Command) -> Profile:
    """Return the profile that results from applying ``command``.

    Raises:
        TypeError: If ``command`` is not one of the known command types
    """
    if isinstance(command, AppendTransaction):
        ledger = append_transaction(
            profile.transactions,
            command.kind,
            command.amount,
            command.description,
            occurred_at=command.occurred_at,
            commitment_id=command.commitment_id,
        )
        if command.kind == TransactionKind.RESERVE:
            # Reserve moves also grow the accumulated stock
            return replace(
                profile,
                transactions=ledger,
                opening_reserve_balance=profile.opening_reserve_balance + command.amount,
            )
        return replace(profile, transactions=ledger)

    if isinstance(command, SetAllocationRule):
        if command.target == "reserve":
            allocations = replace(profile.allocations, reserve=command.rule)
        elif command.target == "growth":
            allocations = replace(profile.allocations, growth=command.rule)
        else:
            raise ValidationError(f"Unknown allocation target '{command.target}'")
        return replace(profile, allocations=allocations)

    if isinstance(command, SetCommitments):
        return replace(profile, commitments=tuple(command.commitments))

    if isinstance(command, SetOpeningBalance):
        return replace(profile, opening_reserve_balance=command.amount)

    if isinstance(command, Reset):
        return default_profile()

    if isinstance(command, CompleteOnboarding):
        return replace(
            profile,
            company_type=command.company_type,
            flat_rate_category=command.flat_rate_category,
            monthly_revenue=command.monthly_revenue,
            tax_rate=command.tax_rate,
            salary_method=command.salary_method,
            salary_value=command.salary_value,
            setup_complete=True,
        )

    if isinstance(command, SetTaxConfig):
        return replace(
            profile,
            company_type=command.company_type,
            tax_rate=command.tax_rate,
            flat_rate_category=command.flat_rate_category,
        )

    if isinstance(command, SetSalaryPolicy):
        return replace(
            profile, salary_method=command.method, salary_value=command.value
        )

    if isinstance(command, SetMaturityLevel):
        return replace(profile, maturity_level=clamp_level(command.level))

    if isinstance(command, CompleteLevelTwo):
        return replace(profile, maturity_level=2, allocations=command.allocations)

    if isinstance(command, CompleteLevelThree):
        return replace(
            profile,
            maturity_level=3,
            opening_reserve_balance=command.opening_balance,
            commitments=tuple(command.commitments),
        )

    raise TypeError(f"Unknown command: {type(command).__name__}")
