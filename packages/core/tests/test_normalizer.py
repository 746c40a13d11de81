"""Tests for income normalization."""

import pytest

from eligibility_core import HouseholdInput, IncomeEntry, InvalidInputError
from eligibility_core.models import IncomeFrequency, IncomeKind, RuleKind, RuleTrail
from eligibility_core.normalizer import normalize_income, to_monthly


@pytest.fixture
def trail() -> RuleTrail:
    return RuleTrail(program="TEST")


class TestToMonthly:
    """Test suite for frequency conversion."""

    @pytest.mark.parametrize(
        "amount, frequency, expected",
        [
            (100000, IncomeFrequency.WEEKLY, 433333),
            (100000, IncomeFrequency.BI_WEEKLY, 216667),
            (100000, IncomeFrequency.SEMI_MONTHLY, 200000),
            (100000, IncomeFrequency.MONTHLY, 100000),
            (300000, IncomeFrequency.QUARTERLY, 100000),
            (1200000, IncomeFrequency.ANNUALLY, 100000),
            (500000, IncomeFrequency.ONE_TIME, 0),
        ],
    )
    def test_conversion(self, amount, frequency, expected):
        assert to_monthly(amount, frequency) == expected

    def test_rounds_half_up(self):
        """3 cents bi-weekly is 6.5 cents a month."""
        assert to_monthly(3, IncomeFrequency.BI_WEEKLY) == 7


class TestNormalizeIncome:
    """Test suite for combining income sources."""

    def test_subtotals_only(self, trail: RuleTrail):
        household = HouseholdInput(household_size=2, earned_income=150000, unearned_income=20000)
        income = normalize_income(household, trail)

        assert income.earned == 150000
        assert income.unearned == 20000
        assert income.gross == 170000

    def test_entries_add_to_subtotals(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=1,
            earned_income=50000,
            income_entries=(
                IncomeEntry(kind=IncomeKind.EARNED, amount=60000, frequency=IncomeFrequency.SEMI_MONTHLY),
                IncomeEntry(kind=IncomeKind.BENEFIT, amount=30000, source="Social Security"),
            ),
        )
        income = normalize_income(household, trail)

        assert income.earned == 170000
        assert income.unearned == 30000

    def test_self_employment_net_of_expenses(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=1,
            income_entries=(
                IncomeEntry(kind=IncomeKind.SELF_EMPLOYMENT, amount=300000, business_expenses=100000),
            ),
        )
        income = normalize_income(household, trail)

        assert income.earned == 200000
        assert income.unearned == 0

    def test_self_employment_loss_floors_at_zero(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=1,
            income_entries=(
                IncomeEntry(kind=IncomeKind.SELF_EMPLOYMENT, amount=50000, business_expenses=80000),
            ),
        )
        assert normalize_income(household, trail).gross == 0

    def test_one_time_income_excluded(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=1,
            income_entries=(
                IncomeEntry(kind=IncomeKind.UNEARNED, amount=500000, frequency=IncomeFrequency.ONE_TIME),
            ),
        )
        income = normalize_income(household, trail)

        assert income.gross == 0
        assert trail.rules == []

    def test_income_rules_sum_to_gross(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=3,
            earned_income=120000,
            income_entries=(
                IncomeEntry(kind=IncomeKind.EARNED, amount=45000, frequency=IncomeFrequency.WEEKLY),
                IncomeEntry(kind=IncomeKind.UNEARNED, amount=90000, frequency=IncomeFrequency.QUARTERLY),
            ),
        )
        income = normalize_income(household, trail)

        assert trail.total(RuleKind.INCOME) == income.gross


class TestInputValidation:
    """Negative amounts and empty households are rejected."""

    def test_negative_subtotal(self, trail: RuleTrail):
        household = HouseholdInput(household_size=1, earned_income=-100)

        with pytest.raises(InvalidInputError) as exc_info:
            normalize_income(household, trail)

        assert exc_info.value.field == "earned_income"
        assert exc_info.value.details["constraint"] == ">= 0"

    def test_negative_cost(self, trail: RuleTrail):
        household = HouseholdInput(household_size=1, shelter_cost=-1)

        with pytest.raises(InvalidInputError):
            normalize_income(household, trail)

    def test_negative_entry(self, trail: RuleTrail):
        household = HouseholdInput(
            household_size=1,
            income_entries=(IncomeEntry(kind=IncomeKind.EARNED, amount=-5),),
        )

        with pytest.raises(InvalidInputError) as exc_info:
            normalize_income(household, trail)
        assert exc_info.value.field == "income_entries[0].amount"

    def test_zero_household_size(self, trail: RuleTrail):
        with pytest.raises(InvalidInputError) as exc_info:
            normalize_income(HouseholdInput(household_size=0), trail)
        assert exc_info.value.field == "household_size"
