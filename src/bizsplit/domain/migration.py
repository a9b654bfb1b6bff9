"""Loading persisted profiles of any known generation.

The stored document has no version tag. Older generations are recognised by
which top-level profile fields are missing, and each missing field group is
repaired by its own step:

- ``allocations`` missing: level 1, both rules disabled
- ``commitments`` missing: no commitments, zero opening reserve
- ``transactions`` missing: empty ledger, period open

The steps touch disjoint fields, so they commute, and each one is a no-op
when its field is present. A document that cannot be parsed into a profile
is dropped and replaced by the default profile.
"""

import copy
import json
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

from dateutil import parser as date_parser

from bizsplit.domain.entities import (
    MIN_MATURITY_LEVEL,
    AllocationBasis,
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
from bizsplit.domain.errors import InvalidDocumentError

logger = logging.getLogger(__name__)

PROFILE_KEY = "userProfile"
SETUP_COMPLETE_KEY = "isSetupComplete"


def _disabled_rule_document() -> dict[str, Any]:
    return {"enabled": False, "type": AllocationBasis.PERCENTAGE.value, "value": 0}


def _install_allocations(profile_doc: dict[str, Any]) -> None:
    profile_doc["appLevel"] = MIN_MATURITY_LEVEL
    profile_doc["allocations"] = {
        "reserve": _disabled_rule_document(),
        "growth": _disabled_rule_document(),
    }


def _install_commitments(profile_doc: dict[str, Any]) -> None:
    profile_doc["commitments"] = []
    profile_doc["currentReserveBalance"] = 0


def _install_transactions(profile_doc: dict[str, Any]) -> None:
    profile_doc["transactions"] = []
    profile_doc["currentMonthOpen"] = True


@dataclass(frozen=True)
class MigrationStep:
    """Repair applied when ``field`` is missing from a stored profile."""

    field: str
    repair: Callable[[dict[str, Any]], None]

    def is_needed(self, profile_doc: dict[str, Any]) -> bool:
        return profile_doc.get(self.field) is None


MIGRATION_STEPS: tuple[MigrationStep, ...] = (
    MigrationStep("allocations", _install_allocations),
    MigrationStep("commitments", _install_commitments),
    MigrationStep("transactions", _install_transactions),
)


def _unwrap(document: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return (state document, profile document), wrapping bare profiles."""
    if not isinstance(document, dict):
        raise InvalidDocumentError(
            f"Stored state must be an object, got {type(document).__name__}"
        )
    if PROFILE_KEY not in document:
        document = {PROFILE_KEY: document}
    profile_doc = document[PROFILE_KEY]
    if not isinstance(profile_doc, dict):
        raise InvalidDocumentError(f"'{PROFILE_KEY}' must be an object")
    return document, profile_doc


def migrate_document(document: Any) -> dict[str, Any]:
    """Bring a stored document up to the current shape.

    Returns a new document; the input is left untouched. A document that
    already has every field comes back equal to the input.

    Raises:
        InvalidDocumentError: If the document is not an object
    """
    migrated, profile_doc = _unwrap(copy.deepcopy(document))
    for step in MIGRATION_STEPS:
        if step.is_needed(profile_doc):
            logger.info("Migrating stored profile: installing '%s'", step.field)
            step.repair(profile_doc)
    return migrated


def _decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise InvalidDocumentError(f"'{field}' must be a number")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidDocumentError(f"'{field}' must be a number: {e}") from e


def _setting(doc: dict[str, Any], field: str, default: Decimal) -> Decimal:
    """Read a scalar setting, treating a missing or null value as unset."""
    value = doc.get(field)
    if value is None:
        return default
    amount = _decimal(value, field)
    return amount if amount.is_finite() else default


def _optional_enum(enum_type, value: Any):
    if value is None:
        return None
    return enum_type(value)


def _timestamp(value: Any) -> datetime:
    parsed = date_parser.isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _rule_from_document(doc: dict[str, Any], field: str) -> AllocationRule:
    return AllocationRule(
        enabled=bool(doc["enabled"]),
        basis=AllocationBasis(doc.get("type", AllocationBasis.PERCENTAGE.value)),
        magnitude=_decimal(doc.get("value", 0), field),
    )


def _commitment_from_document(doc: dict[str, Any]) -> Commitment:
    return Commitment(
        id=str(doc["id"]),
        name=str(doc["name"]),
        kind=CommitmentKind(doc["type"]),
        amount=_decimal(doc["value"], "commitments.value"),
    )


def _transaction_from_document(doc: dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(doc["id"]),
        kind=TransactionKind(doc["type"]),
        amount=_decimal(doc["value"], "transactions.value"),
        occurred_at=_timestamp(doc["date"]),
        description=doc.get("description"),
        commitment_id=doc.get("commitmentId"),
    )


def profile_from_document(document: Any) -> Profile:
    """Build a profile from a stored document, migrating it first.

    Raises:
        InvalidDocumentError: If any field has the wrong shape or value
    """
    state = migrate_document(document)
    doc = state[PROFILE_KEY]
    defaults = default_profile()
    try:
        allocations = doc["allocations"]
        company_type = _optional_enum(CompanyType, doc.get("companyType"))
        setup_complete = state.get(SETUP_COMPLETE_KEY, company_type is not None)
        return Profile(
            company_type=company_type,
            flat_rate_category=_optional_enum(FlatRateCategory, doc.get("meiCategory")),
            monthly_revenue=_setting(doc, "monthlyRevenue", defaults.monthly_revenue),
            tax_rate=_setting(doc, "taxRate", defaults.tax_rate),
            salary_method=_optional_enum(SalaryMethod, doc.get("salaryMethod")),
            salary_value=_setting(doc, "salaryValue", defaults.salary_value),
            maturity_level=int(doc.get("appLevel") or MIN_MATURITY_LEVEL),
            allocations=Allocations(
                reserve=_rule_from_document(allocations["reserve"], "allocations.reserve"),
                growth=_rule_from_document(allocations["growth"], "allocations.growth"),
            ),
            opening_reserve_balance=_setting(
                doc, "currentReserveBalance", defaults.opening_reserve_balance
            ),
            commitments=tuple(_commitment_from_document(c) for c in doc["commitments"]),
            transactions=tuple(_transaction_from_document(t) for t in doc["transactions"]),
            period_open=bool(doc.get("currentMonthOpen", True)),
            setup_complete=bool(setup_complete),
        )
    except InvalidDocumentError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        raise InvalidDocumentError(f"Invalid stored profile: {e!r}") from e


def _number(value: Decimal) -> int | float | str:
    """JSON value for an amount that reads back to the same Decimal.

    Amounts a float cannot hold exactly are written as numeric text.
    """
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


def _rule_to_document(rule: AllocationRule) -> dict[str, Any]:
    return {
        "enabled": rule.enabled,
        "type": rule.basis.value,
        "value": _number(rule.magnitude),
    }


def profile_to_document(profile: Profile) -> dict[str, Any]:
    """Serialise a profile into the stored document shape."""
    profile_doc: dict[str, Any] = {
        "companyType": profile.company_type.value if profile.company_type else None,
        "monthlyRevenue": _number(profile.monthly_revenue),
        "salaryMethod": profile.salary_method.value if profile.salary_method else None,
        "salaryValue": _number(profile.salary_value),
        "taxRate": _number(profile.tax_rate),
        "appLevel": profile.maturity_level,
        "allocations": {
            "reserve": _rule_to_document(profile.allocations.reserve),
            "growth": _rule_to_document(profile.allocations.growth),
        },
        "currentReserveBalance": _number(profile.opening_reserve_balance),
        "commitments": [
            {"id": c.id, "name": c.name, "type": c.kind.value, "value": _number(c.amount)}
            for c in profile.commitments
        ],
        "transactions": [],
        "currentMonthOpen": profile.period_open,
    }
    if profile.flat_rate_category is not None:
        profile_doc["meiCategory"] = profile.flat_rate_category.value
    for txn in profile.transactions:
        txn_doc: dict[str, Any] = {
            "id": txn.id,
            "type": txn.kind.value,
            "value": _number(txn.amount),
            "date": txn.occurred_at.isoformat(),
        }
        if txn.description is not None:
            txn_doc["description"] = txn.description
        if txn.commitment_id is not None:
            txn_doc["commitmentId"] = txn.commitment_id
        profile_doc["transactions"].append(txn_doc)
    return {PROFILE_KEY: profile_doc, SETUP_COMPLETE_KEY: profile.setup_complete}


def load_profile(raw: Optional[str]) -> Profile:
    """Parse and migrate a stored blob, falling back to the default profile.

    Never raises: nothing stored, unparseable JSON and structurally invalid
    documents all yield ``default_profile()``.
    """
    if raw is None or not raw.strip():
        return default_profile()
    try:
        document = json.loads(raw, parse_float=Decimal)
        return profile_from_document(document)
    except (json.JSONDecodeError, InvalidDocumentError) as e:
        logger.warning("Discarding unreadable stored profile: %s", e)
        return default_profile()


def dump_profile(profile: Profile) -> str:
    """Serialise a profile to the JSON blob written to storage."""
    return json.dumps(profile_to_document(profile), ensure_ascii=False)
