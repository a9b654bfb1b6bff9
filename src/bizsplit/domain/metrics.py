"""Derived metrics over a profile and its ledger.

Every function here is pure and total: no I/O, no exceptions, no cached
state. Targets ("what should be set aside") and actuals ("what was already
moved") are separate function families and are recomputed on every call.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from bizsplit.domain.entities import (
    AllocationBasis,
    AllocationRule,
    Commitment,
    CompanyType,
    FlatRateCategory,
    Profile,
    SalaryMethod,
    Transaction,
    TransactionKind,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Monthly DAS for the flat-rate tier, by activity category
FLAT_RATE_TABLE: dict[FlatRateCategory, Decimal] = {
    FlatRateCategory.COMMERCE: Decimal("82.35"),
    FlatRateCategory.SERVICE: Decimal("86.35"),
    FlatRateCategory.MIXED: Decimal("87.35"),
    FlatRateCategory.TRUCKER: Decimal("194.52"),
}
FLAT_RATE_FALLBACK = FlatRateCategory.SERVICE

# Stand-in for "no fixed costs, runway is unbounded"
RUNWAY_SENTINEL = Decimal("99")

ALLOCATIONS_LEVEL = 2
COMMITMENTS_LEVEL = 3
RUNWAY_WARNING_MONTHS = Decimal("3")


def sum_by_kind(ledger: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    """Sum amounts of all transactions of one kind."""
    return sum((txn.amount for txn in ledger if txn.kind == kind), ZERO)


def sum_by_kinds(
    ledger: Iterable[Transaction], kinds: Iterable[TransactionKind]
) -> Decimal:
    """Sum amounts of all transactions whose kind is in ``kinds``."""
    wanted = set(kinds)
    return sum((txn.amount for txn in ledger if txn.kind in wanted), ZERO)


def tax_target(
    revenue: Decimal,
    classification: Optional[CompanyType],
    rate: Decimal,
    category: Optional[FlatRateCategory] = None,
) -> Decimal:
    """Monthly tax to set aside.

    The flat-rate tier pays a fixed amount chosen by category, whatever the
    revenue or rate. Every other classification pays ``rate`` percent of
    revenue.
    """
    if classification == CompanyType.MEI:
        return FLAT_RATE_TABLE.get(category, FLAT_RATE_TABLE[FLAT_RATE_FALLBACK])
    return revenue * rate / HUNDRED


def allocation_target(revenue: Decimal, rule: AllocationRule) -> Decimal:
    """Reserve or growth target for a revenue figure."""
    if not rule.enabled:
        return ZERO
    if rule.basis == AllocationBasis.FIXED:
        return rule.magnitude
    return revenue * rule.magnitude / HUNDRED


def commitments_total(commitments: Iterable[Commitment]) -> Decimal:
    """Total monthly amount of all commitments."""
    return sum((c.amount for c in commitments), ZERO)


def runway_months(cash_on_hand: Decimal, monthly_commitments: Decimal) -> Decimal:
    """Months of fixed costs the cash covers.

    Negative cash yields a negative runway. No commitments yields
    ``RUNWAY_SENTINEL``.
    """
    if monthly_commitments == 0:
        return RUNWAY_SENTINEL
    return cash_on_hand / monthly_commitments


def safe_personal_limit(
    income: Decimal,
    tax: Decimal,
    reserve: Decimal,
    growth: Decimal,
    fixed_costs: Decimal,
) -> Decimal:
    """What is left for the owner after every target, never below zero."""
    return max(ZERO, income - tax - reserve - growth - fixed_costs)


def operating_result(
    income: Decimal,
    paid_tax: Decimal,
    paid_salary: Decimal,
    paid_reserve: Decimal,
    paid_growth: Decimal,
    paid_costs: Decimal,
) -> Decimal:
    """Income minus actual outflows. May be negative."""
    return income - (paid_tax + paid_salary + paid_reserve + paid_growth + paid_costs)


def total_cash(opening_reserve_balance: Decimal, result: Decimal) -> Decimal:
    """Company cash: accumulated stock plus this period's flow."""
    return opening_reserve_balance + result


def remaining_to_target(target: Decimal, actual: Decimal) -> Decimal:
    """Amount still missing to reach ``target``, never below zero."""
    return max(ZERO, target - actual)


def progress_percent(actual: Decimal, target: Decimal) -> Decimal:
    """Share of ``target`` already reached, capped to 0..100."""
    if target <= 0:
        return ZERO
    return max(ZERO, min(HUNDRED, actual / target * HUNDRED))


def is_commitment_paid(commitment: Commitment, ledger: Iterable[Transaction]) -> bool:
    """Whether some fixed-cost entry pays this commitment.

    Entries linked through ``commitment_id`` match by id only. Entries
    without a link match when their description equals the commitment name,
    ignoring case.
    """
    name = commitment.name.lower()
    for txn in ledger:
        if txn.kind != TransactionKind.COST:
            continue
        if txn.commitment_id is not None:
            if txn.commitment_id == commitment.id:
                return True
        elif txn.description is not None and txn.description.lower() == name:
            return True
    return False


@dataclass(frozen=True)
class DashboardSnapshot:
    """Every derived figure for one profile, computed in one pass."""

    maturity_level: int
    income: Decimal
    paid_tax: Decimal
    paid_salary: Decimal
    paid_reserve: Decimal
    paid_growth: Decimal
    paid_costs: Decimal
    tax_target: Decimal
    reserve_target: Decimal
    growth_target: Decimal
    fixed_cost_target: Decimal
    safe_personal_limit: Decimal
    operating_result: Decimal
    total_cash: Decimal
    runway_months: Decimal
    paid_commitment_ids: frozenset[str]

    @property
    def is_danger(self) -> bool:
        return self.total_cash < 0

    @property
    def is_runway_short(self) -> bool:
        return (
            self.maturity_level >= COMMITMENTS_LEVEL
            and self.runway_months < RUNWAY_WARNING_MONTHS
        )

    def actual_for(self, kind: TransactionKind) -> Decimal:
        """Actual sum recorded for a kind."""
        return {
            TransactionKind.INCOME: self.income,
            TransactionKind.TAX: self.paid_tax,
            TransactionKind.SALARY: self.paid_salary,
            TransactionKind.RESERVE: self.paid_reserve,
            TransactionKind.GROWTH: self.paid_growth,
            TransactionKind.COST: self.paid_costs,
        }[kind]

    def target_for(self, kind: TransactionKind) -> Optional[Decimal]:
        """Target for a kind, or None for kinds without one."""
        return {
            TransactionKind.TAX: self.tax_target,
            TransactionKind.SALARY: self.safe_personal_limit,
            TransactionKind.RESERVE: self.reserve_target,
            TransactionKind.GROWTH: self.growth_target,
            TransactionKind.COST: self.fixed_cost_target,
        }.get(kind)


def build_snapshot(profile: Profile) -> DashboardSnapshot:
    """Compute all dashboard figures for a profile.

    Reserve and growth targets only count from maturity level 2, fixed-cost
    target and runway only from level 3. The ledger is treated as the
    current month in full.
    """
    ledger: Sequence[Transaction] = profile.transactions
    income = sum_by_kind(ledger, TransactionKind.INCOME)
    paid_tax = sum_by_kind(ledger, TransactionKind.TAX)
    paid_salary = sum_by_kind(ledger, TransactionKind.SALARY)
    paid_reserve = sum_by_kind(ledger, TransactionKind.RESERVE)
    paid_growth = sum_by_kind(ledger, TransactionKind.GROWTH)
    paid_costs = sum_by_kind(ledger, TransactionKind.COST)

    level = profile.maturity_level
    target_tax = tax_target(
        income, profile.company_type, profile.tax_rate, profile.flat_rate_category
    )
    if level >= ALLOCATIONS_LEVEL:
        target_reserve = allocation_target(income, profile.allocations.reserve)
        target_growth = allocation_target(income, profile.allocations.growth)
    else:
        target_reserve = target_growth = ZERO
    if level >= COMMITMENTS_LEVEL:
        target_costs = commitments_total(profile.commitments)
    else:
        target_costs = ZERO

    result = operating_result(
        income, paid_tax, paid_salary, paid_reserve, paid_growth, paid_costs
    )
    cash = total_cash(profile.opening_reserve_balance, result)
    runway = runway_months(cash, target_costs) if level >= COMMITMENTS_LEVEL else ZERO

    return DashboardSnapshot(
        maturity_level=level,
        income=income,
        paid_tax=paid_tax,
        paid_salary=paid_salary,
        paid_reserve=paid_reserve,
        paid_growth=paid_growth,
        paid_costs=paid_costs,
        tax_target=target_tax,
        reserve_target=target_reserve,
        growth_target=target_growth,
        fixed_cost_target=target_costs,
        safe_personal_limit=safe_personal_limit(
            income, target_tax, target_reserve, target_growth, target_costs
        ),
        operating_result=result,
        total_cash=cash,
        runway_months=runway,
        paid_commitment_ids=frozenset(
            c.id for c in profile.commitments if is_commitment_paid(c, ledger)
        ),
    )


def suggested_amount(
    profile: Profile, snapshot: DashboardSnapshot, kind: TransactionKind
) -> Decimal:
    """Pre-filled amount for a new entry of ``kind``."""
    if kind == TransactionKind.INCOME:
        return ZERO
    if kind == TransactionKind.SALARY:
        if (
            profile.salary_method == SalaryMethod.FIXED
            and snapshot.paid_salary < profile.salary_value
        ):
            return profile.salary_value - snapshot.paid_salary
        return remaining_to_target(snapshot.safe_personal_limit, snapshot.paid_salary)
    return remaining_to_target(snapshot.target_for(kind), snapshot.actual_for(kind))
