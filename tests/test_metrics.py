"""Tests for the derived metrics engine."""

from dataclasses import replace
from decimal import Decimal

import pytest

from bizsplit.domain.entities import (
    AllocationBasis,
    AllocationRule,
    Allocations,
    Commitment,
    CommitmentKind,
    CompanyType,
    FlatRateCategory,
    Profile,
    SalaryMethod,
    TransactionKind,
)
from bizsplit.domain.metrics import (
    RUNWAY_SENTINEL,
    allocation_target,
    build_snapshot,
    commitments_total,
    is_commitment_paid,
    operating_result,
    progress_percent,
    remaining_to_target,
    runway_months,
    safe_personal_limit,
    suggested_amount,
    sum_by_kind,
    sum_by_kinds,
    tax_target,
    total_cash,
)

D = Decimal


def _commitment(name="Accountant", amount="300", commitment_id="c1"):
    return Commitment(id=commitment_id, name=name, kind=CommitmentKind.SERVICE, amount=D(amount))


class TestSums:
    """Tests for per-kind ledger sums."""

    def test_empty_ledger_sums_to_zero(self):
        for kind in TransactionKind:
            assert sum_by_kind((), kind) == 0

    def test_only_matching_kind_is_included(self, sample_ledger):
        assert sum_by_kind(sample_ledger, TransactionKind.INCOME) == D("8000")
        assert sum_by_kind(sample_ledger, TransactionKind.TAX) == D("500")
        assert sum_by_kind(sample_ledger, TransactionKind.RESERVE) == 0

    def test_multiple_entries_of_same_kind(self, make_transaction):
        ledger = (
            make_transaction(TransactionKind.INCOME, "100.10"),
            make_transaction(TransactionKind.INCOME, "0.20"),
            make_transaction(TransactionKind.COST, "50"),
        )
        assert sum_by_kind(ledger, TransactionKind.INCOME) == D("100.30")

    def test_sum_by_kinds(self, sample_ledger):
        total = sum_by_kinds(sample_ledger, [TransactionKind.TAX, TransactionKind.SALARY])
        assert total == D("3500")


class TestTaxTarget:
    """Tests for tax target computation."""

    def test_flat_rate_service_ignores_revenue_and_rate(self):
        assert tax_target(D("10000"), CompanyType.MEI, D("20"), FlatRateCategory.SERVICE) == D("86.35")

    @pytest.mark.parametrize(
        "category,expected",
        [
            (FlatRateCategory.COMMERCE, "82.35"),
            (FlatRateCategory.MIXED, "87.35"),
            (FlatRateCategory.TRUCKER, "194.52"),
            (None, "86.35"),
        ],
    )
    def test_flat_rate_table(self, category, expected):
        assert tax_target(D("0"), CompanyType.MEI, D("0"), category) == D(expected)

    def test_percentage_of_revenue(self):
        assert tax_target(D("10000"), CompanyType.PJ_SIMPLES, D("6")) == D("600")

    def test_unset_classification_uses_rate(self):
        assert tax_target(D("2000"), None, D("10")) == D("200")


class TestAllocationTarget:
    """Tests for reserve/growth targets."""

    @pytest.mark.parametrize("revenue", ["0", "5000", "-100"])
    @pytest.mark.parametrize("basis", list(AllocationBasis))
    def test_disabled_rule_is_zero(self, revenue, basis):
        rule = AllocationRule(enabled=False, basis=basis, magnitude=D("50"))
        assert allocation_target(D(revenue), rule) == 0

    def test_percentage_rule(self):
        rule = AllocationRule(enabled=True, basis=AllocationBasis.PERCENTAGE, magnitude=D("10"))
        assert allocation_target(D("5000"), rule) == D("500")

    def test_fixed_rule_ignores_revenue(self):
        rule = AllocationRule(enabled=True, basis=AllocationBasis.FIXED, magnitude=D("750"))
        assert allocation_target(D("5000"), rule) == D("750")
        assert allocation_target(D("0"), rule) == D("750")


class TestScalars:
    """Tests for commitments, runway, safe limit, result and cash."""

    def test_commitments_total(self):
        assert commitments_total([]) == 0
        items = [_commitment(amount="300"), _commitment(name="Rent", amount="1700", commitment_id="c2")]
        assert commitments_total(items) == D("2000")

    @pytest.mark.parametrize("cash", ["0", "1000", "-500"])
    def test_runway_sentinel_without_commitments(self, cash):
        assert runway_months(D(cash), D("0")) == RUNWAY_SENTINEL

    def test_runway_can_be_negative(self):
        assert runway_months(D("-1000"), D("500")) == D("-2")

    @pytest.mark.parametrize(
        "income,tax,reserve,growth,costs",
        [
            ("0", "86.35", "0", "0", "0"),
            ("1000", "600", "500", "0", "0"),
            ("1000", "0", "0", "0", "5000"),
            ("-10", "0", "0", "0", "0"),
        ],
    )
    def test_safe_limit_never_negative(self, income, tax, reserve, growth, costs):
        assert safe_personal_limit(D(income), D(tax), D(reserve), D(growth), D(costs)) == 0

    def test_safe_limit_positive_margin(self):
        assert safe_personal_limit(D("10000"), D("600"), D("1000"), D("500"), D("2000")) == D("5900")

    def test_operating_result_scenario(self):
        assert operating_result(D("8000"), D("500"), D("3000"), D("0"), D("0"), D("0")) == D("4500")

    def test_operating_result_may_be_negative(self):
        assert operating_result(D("100"), D("0"), D("300"), D("0"), D("0"), D("0")) == D("-200")

    def test_cash_and_runway_scenario(self):
        cash = total_cash(D("1000"), D("-500"))
        assert cash == D("500")
        assert runway_months(cash, D("2000")) == D("0.25")

    def test_remaining_and_progress(self):
        assert remaining_to_target(D("100"), D("30")) == D("70")
        assert remaining_to_target(D("100"), D("130")) == 0
        assert progress_percent(D("50"), D("200")) == D("25")
        assert progress_percent(D("500"), D("200")) == D("100")
        assert progress_percent(D("10"), D("0")) == 0


class TestCommitmentPaid:
    """Tests for commitment payment matching."""

    def test_unlinked_cost_matches_name_case_insensitively(self, make_transaction):
        ledger = (make_transaction(TransactionKind.COST, "300", "ACCOUNTANT"),)
        assert is_commitment_paid(_commitment(), ledger)

    def test_other_kinds_do_not_match(self, make_transaction):
        ledger = (make_transaction(TransactionKind.SALARY, "300", "Accountant"),)
        assert not is_commitment_paid(_commitment(), ledger)

    def test_linked_cost_matches_by_id_only(self, make_transaction):
        first = _commitment(name="Rent", commitment_id="c1")
        second = _commitment(name="Rent", commitment_id="c2")
        ledger = (make_transaction(TransactionKind.COST, "300", "Rent", commitment_id="c2"),)
        assert not is_commitment_paid(first, ledger)
        assert is_commitment_paid(second, ledger)

    def test_missing_description_does_not_match(self, make_transaction):
        ledger = (make_transaction(TransactionKind.COST, "300", None),)
        assert not is_commitment_paid(_commitment(), ledger)


class TestSnapshot:
    """Tests for the dashboard snapshot and maturity gating."""

    def _profile(self, ledger, level=1, **kwargs):
        allocations = Allocations(
            reserve=AllocationRule(enabled=True, basis=AllocationBasis.PERCENTAGE, magnitude=D("10")),
            growth=AllocationRule(enabled=True, basis=AllocationBasis.FIXED, magnitude=D("200")),
        )
        return Profile(
            company_type=CompanyType.PJ_SIMPLES,
            tax_rate=D("6"),
            maturity_level=level,
            allocations=allocations,
            commitments=(_commitment(amount="2000"),),
            transactions=ledger,
            **kwargs,
        )

    def test_level_one_ignores_allocations_and_commitments(self, sample_ledger):
        snapshot = build_snapshot(self._profile(sample_ledger, level=1))
        assert snapshot.income == D("8000")
        assert snapshot.tax_target == D("480")
        assert snapshot.reserve_target == 0
        assert snapshot.growth_target == 0
        assert snapshot.fixed_cost_target == 0
        assert snapshot.runway_months == 0
        assert snapshot.safe_personal_limit == D("7520")
        assert snapshot.operating_result == D("4500")

    def test_level_two_adds_allocations(self, sample_ledger):
        snapshot = build_snapshot(self._profile(sample_ledger, level=2))
        assert snapshot.reserve_target == D("800")
        assert snapshot.growth_target == D("200")
        assert snapshot.fixed_cost_target == 0
        assert snapshot.safe_personal_limit == D("6520")

    def test_level_three_adds_commitments_and_runway(self, sample_ledger):
        profile = self._profile(sample_ledger, level=3, opening_reserve_balance=D("1000"))
        snapshot = build_snapshot(profile)
        assert snapshot.fixed_cost_target == D("2000")
        assert snapshot.total_cash == D("5500")
        assert snapshot.runway_months == D("2.75")
        assert snapshot.is_runway_short
        assert not snapshot.is_danger

    def test_danger_when_cash_negative(self, make_transaction):
        ledger = (make_transaction(TransactionKind.SALARY, "900"),)
        snapshot = build_snapshot(self._profile(ledger, opening_reserve_balance=D("100")))
        assert snapshot.total_cash == D("-800")
        assert snapshot.is_danger

    def test_paid_commitment_ids(self, make_transaction):
        ledger = (make_transaction(TransactionKind.COST, "2000", "accountant"),)
        snapshot = build_snapshot(self._profile(ledger, level=3))
        assert snapshot.paid_commitment_ids == frozenset({"c1"})

    def test_targets_follow_ledger(self, sample_ledger, make_transaction):
        profile = self._profile(sample_ledger, level=2)
        before = build_snapshot(profile)
        more = replace(
            profile,
            transactions=(*sample_ledger, make_transaction(TransactionKind.INCOME, "2000")),
        )
        after = build_snapshot(more)
        assert before.reserve_target == D("800")
        assert after.reserve_target == D("1000")


class TestSuggestedAmount:
    """Tests for pre-filled entry amounts."""

    def test_income_has_no_suggestion(self, sample_ledger):
        profile = Profile(transactions=sample_ledger)
        assert suggested_amount(profile, build_snapshot(profile), TransactionKind.INCOME) == 0

    def test_tax_suggests_remaining(self, sample_ledger):
        profile = Profile(company_type=CompanyType.PJ_SIMPLES, tax_rate=D("10"), transactions=sample_ledger)
        assert suggested_amount(profile, build_snapshot(profile), TransactionKind.TAX) == D("300")

    def test_salary_uses_safe_limit(self, sample_ledger):
        profile = Profile(company_type=CompanyType.PJ_SIMPLES, tax_rate=D("10"), transactions=sample_ledger)
        # safe 8000 - 800 = 7200, already took 3000
        assert suggested_amount(profile, build_snapshot(profile), TransactionKind.SALARY) == D("4200")

    def test_fixed_salary_overrides_until_reached(self, sample_ledger):
        profile = Profile(
            company_type=CompanyType.PJ_SIMPLES,
            tax_rate=D("10"),
            salary_method=SalaryMethod.FIXED,
            salary_value=D("3500"),
            transactions=sample_ledger,
        )
        assert suggested_amount(profile, build_snapshot(profile), TransactionKind.SALARY) == D("500")

    def test_reserve_never_negative(self, make_transaction):
        profile = Profile(
            maturity_level=2,
            transactions=(make_transaction(TransactionKind.RESERVE, "100"),),
        )
        assert suggested_amount(profile, build_snapshot(profile), TransactionKind.RESERVE) == 0
