"""Tests for rule trail, result models and money helpers."""

from decimal import Decimal

import pytest

from eligibility_core.models import (
    DeductionSet,
    HouseholdInput,
    IncomeEntry,
    IncomeKind,
    ProgramChange,
    RuleKind,
    RuleTrail,
)
from eligibility_core.money import apply_rate, format_cents, round_half_up


class TestRuleTrail:
    """Test suite for RuleTrail."""

    def test_add_records_in_order(self):
        trail = RuleTrail(program="SNAP")
        trail.add("MD-SNAP-FY2024:standard_deduction", "standard_deduction", RuleKind.DEDUCTION, 19800)
        trail.add("MD-SNAP-FY2024:net_income", "net_income", RuleKind.NET_INCOME, 0)

        assert trail.rule_ids == ["MD-SNAP-FY2024:standard_deduction", "MD-SNAP-FY2024:net_income"]

    def test_total_by_kind(self):
        trail = RuleTrail(program="SNAP")
        trail.add("a", "a", RuleKind.DEDUCTION, 100)
        trail.add("b", "b", RuleKind.DEDUCTION, 250)
        trail.add("c", "c", RuleKind.BENEFIT, -40)

        assert trail.total(RuleKind.DEDUCTION) == 350
        assert trail.total(RuleKind.BENEFIT) == -40
        assert len(trail.of_kind(RuleKind.INCOME)) == 0

    def test_applied_rule_is_immutable(self):
        trail = RuleTrail(program="SNAP")
        rule = trail.add("a", "a", RuleKind.INCOME, 100)

        with pytest.raises(ValueError):
            rule.amount = 200


class TestResultModels:
    """Test suite for derived result values."""

    def test_deduction_total(self):
        deductions = DeductionSet(standard=19800, earned_income=30000, shelter=29900)
        assert deductions.total == 79700

    def test_change_delta_and_cliff(self):
        lost = ProgramChange(
            program="SNAP",
            previous_eligible=True,
            current_eligible=False,
            previous_benefit=8010,
            current_benefit=0,
        )
        gained = ProgramChange(program="MEAP", current_eligible=True, current_benefit=4000)

        assert lost.delta == -8010
        assert lost.cliff is True
        assert gained.delta == 4000
        assert gained.cliff is False

    def test_benefit_drop_to_zero_is_cliff(self):
        change = ProgramChange(
            program="SNAP",
            previous_eligible=True,
            current_eligible=True,
            previous_benefit=2300,
            current_benefit=0,
        )
        assert change.cliff is True


class TestHouseholdInput:
    """Test suite for household input."""

    def test_with_changes_returns_copy(self):
        household = HouseholdInput(
            household_size=2,
            earned_income=100000,
            income_entries=(IncomeEntry(kind=IncomeKind.BENEFIT, amount=20000),),
        )
        changed = household.with_changes(earned_income=120000)

        assert changed.earned_income == 120000
        assert changed.income_entries == household.income_entries
        assert household.earned_income == 100000

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValueError):
            HouseholdInput(household_size=1, salary=100)

    def test_elderly_or_disabled(self):
        assert HouseholdInput(household_size=1, has_disabled=True).has_elderly_or_disabled
        assert not HouseholdInput(household_size=1).has_elderly_or_disabled


class TestMoney:
    """Test suite for cent arithmetic."""

    def test_round_half_up(self):
        assert round_half_up(Decimal("2.5")) == 3
        assert round_half_up(Decimal("3.5")) == 4
        assert round_half_up(Decimal("2.4999")) == 2

    def test_apply_rate(self):
        assert apply_rate(70300, Decimal("0.30")) == 21090
        assert apply_rate(5, "0.5") == 3

    @pytest.mark.parametrize(
        "cents, expected",
        [(150000, "$1,500.00"), (8010, "$80.10"), (5, "$0.05"), (-2300, "-$23.00")],
    )
    def test_format_cents(self, cents, expected):
        assert format_cents(cents) == expected
