"""Domain model entities for bizsplit.

These are pure data classes representing business concepts, independent of
how the profile is persisted. Every entity is frozen: mutations go through
the command reducer in ``bizsplit.domain.commands`` and always produce a new
value.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionKind(str, Enum):
    """Kind of a ledger entry; decides which bucket it adds to."""

    INCOME = "INCOME"
    TAX = "TAX"
    SALARY = "SALARY"
    RESERVE = "RESERVE"
    GROWTH = "GROWTH"
    COST = "COST"


class AllocationBasis(str, Enum):
    """How an allocation rule derives its target from revenue."""

    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class CommitmentKind(str, Enum):
    """Display category of a recurring fixed cost."""

    PEOPLE = "PEOPLE"
    SERVICE = "SERVICE"
    OBLIGATION = "OBLIGATION"


class CompanyType(str, Enum):
    """Tax classification of the business."""

    MEI = "MEI"
    PJ_SIMPLES = "PJ_SIMPLES"
    AUTONOMO = "AUTONOMO"


class FlatRateCategory(str, Enum):
    """Activity category of the flat-rate (MEI) tier."""

    COMMERCE = "COMMERCE"
    SERVICE = "SERVICE"
    MIXED = "MIXED"
    TRUCKER = "TRUCKER"


class SalaryMethod(str, Enum):
    """Fixed stipend or discretionary profit withdrawal."""

    FIXED = "FIXED"
    PROFIT = "PROFIT"


MIN_MATURITY_LEVEL = 1
MAX_MATURITY_LEVEL = 3


@dataclass(frozen=True)
class Transaction:
    """Ledger entry. Immutable once created."""

    id: str
    kind: TransactionKind
    amount: Decimal
    occurred_at: datetime
    description: Optional[str] = None
    commitment_id: Optional[str] = None


@dataclass(frozen=True)
class AllocationRule:
    """Rule for the reserve or growth target."""

    enabled: bool = False
    basis: AllocationBasis = AllocationBasis.PERCENTAGE
    magnitude: Decimal = Decimal("0")


@dataclass(frozen=True)
class Allocations:
    """Reserve and growth allocation rules."""

    reserve: AllocationRule = field(default_factory=AllocationRule)
    growth: AllocationRule = field(default_factory=AllocationRule)


@dataclass(frozen=True)
class Commitment:
    """Recurring monthly fixed cost."""

    id: str
    name: str
    kind: CommitmentKind
    amount: Decimal


@dataclass(frozen=True)
class Profile:
    """Root aggregate: configuration, commitments and ledger of one business.

    ``monthly_revenue`` is the reference revenue entered during onboarding;
    ongoing math uses the Income sum of the ledger instead.
    ``opening_reserve_balance`` is an accumulated stock, separate from the
    flow sums derived from ``transactions``.
    """

    company_type: Optional[CompanyType] = None
    flat_rate_category: Optional[FlatRateCategory] = None
    monthly_revenue: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("6")
    salary_method: Optional[SalaryMethod] = None
    salary_value: Decimal = Decimal("0")
    maturity_level: int = MIN_MATURITY_LEVEL
    allocations: Allocations = field(default_factory=Allocations)
    opening_reserve_balance: Decimal = Decimal("0")
    commitments: tuple[Commitment, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    period_open: bool = True
    setup_complete: bool = False

    def find_commitment(self, commitment_id: str) -> Optional[Commitment]:
        """Return the commitment with the given id, if any."""
        for commitment in self.commitments:
            if commitment.id == commitment_id:
                return commitment
        return None

    def find_commitment_by_name(self, name: str) -> Optional[Commitment]:
        """Return the first commitment whose name matches case-insensitively."""
        wanted = name.strip().lower()
        for commitment in self.commitments:
            if commitment.name.lower() == wanted:
                return commitment
        return None


def default_profile() -> Profile:
    """Return the profile a first run or a full reset starts from."""
    return Profile()
