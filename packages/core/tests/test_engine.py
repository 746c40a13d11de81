"""Tests for eligibility determination and benefit calculation."""

from datetime import date

import pytest

from eligibility_core import (
    CatalogMissingError,
    CategoricalEligibility,
    EligibilityEngine,
    EligibilityResult,
    HouseholdInput,
    InvalidInputError,
)
from eligibility_core.models import RuleKind

FY2024 = date(2024, 6, 1)
FY2025 = date(2025, 1, 15)


@pytest.fixture
def engine() -> EligibilityEngine:
    return EligibilityEngine()


@pytest.fixture
def working_single() -> HouseholdInput:
    """One person earning $1,500 a month and paying $800 rent."""
    return HouseholdInput(
        household_id="hh-001",
        household_size=1,
        earned_income=150000,
        shelter_cost=80000,
    )


def rederive_net(result: EligibilityResult) -> int:
    return (
        sum(r.amount for r in result.rules_of_kind(RuleKind.INCOME))
        - sum(r.amount for r in result.rules_of_kind(RuleKind.DEDUCTION))
        + sum(r.amount for r in result.rules_of_kind(RuleKind.NET_INCOME))
    )


def rederive_benefit(result: EligibilityResult) -> int:
    return sum(r.amount for r in result.rules_of_kind(RuleKind.BENEFIT))


class TestSnapScenarios:
    """Worked SNAP determinations."""

    def test_working_single_adult(self, engine: EligibilityEngine, working_single: HouseholdInput):
        result = engine.calculate_benefit(working_single, "SNAP", FY2024)

        assert result.eligible is True
        assert result.gross_income == 150000
        assert result.net_income == 70300
        assert result.max_allotment == 29100
        assert result.monthly_benefit == 8010
        assert result.catalog_version == engine.catalog.version
        assert result.reason == (
            "Eligible for $80.10/month in Supplemental Nutrition Assistance Program benefits"
        )

    def test_later_fiscal_year_uses_new_tables(
        self, engine: EligibilityEngine, working_single: HouseholdInput
    ):
        result = engine.calculate_benefit(working_single, "SNAP", FY2025)

        # 150000 - 20400 - 30000 - (80000 - 99600 / 2)
        assert result.net_income == 69400
        assert result.monthly_benefit == 29200 - 20820

    def test_jurisdiction_selects_rules(self, engine: EligibilityEngine, working_single: HouseholdInput):
        result = engine.calculate_benefit(working_single, "SNAP", FY2025, jurisdiction="PA")

        assert result.jurisdiction == "PA"
        assert result.rule_ids[0].startswith("PA-SNAP-FY2025:")

    def test_check_and_calculate_agree(self, engine: EligibilityEngine, working_single: HouseholdInput):
        assert engine.check_eligibility(working_single, "SNAP", FY2024) == engine.calculate_benefit(
            working_single, "SNAP", FY2024
        )

    def test_calculate_benefit_goes_through_check_eligibility(
        self, engine: EligibilityEngine, working_single: HouseholdInput, monkeypatch
    ):
        calls = []
        original = engine.check_eligibility

        def recording(*args, **kwargs):
            calls.append(args)
            return original(*args, **kwargs)

        monkeypatch.setattr(engine, "check_eligibility", recording)
        result = engine.calculate_benefit(working_single, "SNAP", FY2024, "MD")

        assert calls == [(working_single, "SNAP", FY2024, "MD")]
        assert result.monthly_benefit == 8010

    def test_no_rules_for_date(self, engine: EligibilityEngine, working_single: HouseholdInput):
        with pytest.raises(CatalogMissingError):
            engine.check_eligibility(working_single, "SNAP", date(2020, 1, 1))

    def test_negative_income_rejected(self, engine: EligibilityEngine):
        with pytest.raises(InvalidInputError):
            engine.check_eligibility(HouseholdInput(household_size=1, unearned_income=-1), "SNAP", FY2024)


class TestIncomeTests:
    """Gross and net limit comparisons."""

    def test_exactly_at_net_limit_is_eligible(self, engine: EligibilityEngine):
        # 141300 - 19800 standard deduction = 121500, the size-1 net limit
        household = HouseholdInput(household_size=1, unearned_income=141300)
        result = engine.check_eligibility(household, "SNAP", FY2024)

        assert result.net_income == 121500
        assert result.net_test.applied and result.net_test.passed
        assert result.eligible is True

    def test_one_cent_over_net_limit(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=141301)
        result = engine.check_eligibility(household, "SNAP", FY2024)

        assert result.eligible is False
        assert result.monthly_benefit == 0
        assert result.ineligibility_reasons == [
            "Net income $1,215.01 exceeds the SNAP limit of $1,215.00"
        ]

    def test_exactly_at_gross_limit_is_eligible(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=219625)

        assert engine.check_eligibility(household, "MEAP", FY2025).eligible is True

    def test_one_cent_over_gross_limit(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=219626)
        result = engine.check_eligibility(household, "MEAP", FY2025)

        assert result.eligible is False
        assert result.gross_test.passed is False

    def test_net_test_not_applicable_without_net_limit(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=2, earned_income=100000)
        result = engine.check_eligibility(household, "MEDICAID", FY2025)

        assert result.net_test.applied is False
        assert result.net_test.limit is None
        assert result.eligible is True

    def test_gross_test_waived_for_elderly(self, engine: EligibilityEngine):
        """Gross above 200% FPL, net under the limit thanks to medical costs."""
        household = HouseholdInput(
            household_size=1,
            unearned_income=250000,
            has_elderly=True,
            medical_expenses=120000,
            shelter_cost=100000,
        )
        result = engine.check_eligibility(household, "SNAP", FY2024)

        assert result.gross_test.applied is False
        assert result.gross_test.bypassed_by == "elderly_disabled_waiver"
        assert result.net_test.applied is True
        assert result.eligible is True

    def test_failed_gross_test_without_waiver(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=250000)
        result = engine.check_eligibility(household, "SNAP", FY2024)

        assert result.gross_test.applied is True
        assert result.gross_test.passed is False
        assert result.eligible is False


class TestCategoricalEligibility:
    """Households already receiving a qualifying benefit."""

    def test_broad_based_bypasses_income_tests(self, engine: EligibilityEngine):
        household = HouseholdInput(
            household_size=4,
            earned_income=500000,
            categorical_eligibility=CategoricalEligibility.BROAD_BASED,
        )
        result = engine.check_eligibility(household, "SNAP", FY2024)

        assert result.eligible is True
        assert result.categorical_category == CategoricalEligibility.BROAD_BASED
        assert "MD-SNAP-FY2024:categorical_broad_based" in result.rule_ids
        assert result.rules_of_kind(RuleKind.THRESHOLD) == []
        assert not result.gross_test.applied
        assert not result.net_test.applied

    def test_net_income_still_feeds_benefit(self, engine: EligibilityEngine):
        household = HouseholdInput(
            household_size=4,
            earned_income=500000,
            categorical_eligibility=CategoricalEligibility.BROAD_BASED,
        )
        result = engine.calculate_benefit(household, "SNAP", FY2024)

        # 500000 - 20800 - 100000
        assert result.net_income == 379200
        # 97300 - 113760 floors at zero; size 4 gets no minimum
        assert result.monthly_benefit == 0

    def test_tag_not_honored_runs_income_tests(self, engine: EligibilityEngine):
        household = HouseholdInput(
            household_size=1,
            earned_income=150000,
            categorical_eligibility=CategoricalEligibility.SUPPLEMENTAL_SECURITY,
        )
        result = engine.check_eligibility(household, "TCA", FY2025)

        assert result.categorical_category is None
        [categorical] = result.rules_of_kind(RuleKind.CATEGORICAL)
        assert categorical.output_value == "not_recognized"
        assert result.gross_test.applied is True
        assert result.eligible is False

    def test_none_records_no_categorical_rule(self, engine: EligibilityEngine, working_single: HouseholdInput):
        result = engine.check_eligibility(working_single, "SNAP", FY2024)

        assert result.rules_of_kind(RuleKind.CATEGORICAL) == []
        assert result.is_categorical is False

    @pytest.mark.parametrize("income", [0, 300000, 900000])
    def test_categorical_eligible_regardless_of_income(self, engine: EligibilityEngine, income: int):
        household = HouseholdInput(
            household_size=2,
            unearned_income=income,
            categorical_eligibility=CategoricalEligibility.CASH_ASSISTANCE,
        )
        for program in ("SNAP", "TCA", "MEDICAID", "MEAP"):
            assert engine.check_eligibility(household, program, FY2025).eligible is True


class TestBenefitAmount:
    """Benefit formula, floors and minimums."""

    def test_minimum_benefit_for_small_household(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=141300)
        result = engine.calculate_benefit(household, "SNAP", FY2024)

        # 29100 - 36450 floors at zero, then the $23 minimum applies
        assert result.monthly_benefit == 2300
        assert "MD-SNAP-FY2024:minimum_benefit" in result.rule_ids

    def test_no_minimum_above_size_two(self, engine: EligibilityEngine):
        household = HouseholdInput(
            household_size=3,
            unearned_income=290000,
            categorical_eligibility=CategoricalEligibility.BROAD_BASED,
        )
        result = engine.calculate_benefit(household, "SNAP", FY2024)

        # net 290000 - 19800 = 270200; 76600 - 81060 < 0
        assert result.eligible is True
        assert result.monthly_benefit == 0

    def test_flat_benefit_program(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=3, unearned_income=200000)
        result = engine.calculate_benefit(household, "MEAP", FY2025)

        assert result.monthly_benefit == 5000

    def test_medical_coverage_has_no_cash_benefit(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=1, unearned_income=50000)
        result = engine.calculate_benefit(household, "MEDICAID", FY2025)

        assert result.eligible is True
        assert result.monthly_benefit == 0

    def test_cash_assistance_dollar_for_dollar(self, engine: EligibilityEngine):
        household = HouseholdInput(household_size=3, earned_income=100000)
        result = engine.calculate_benefit(household, "TCA", FY2025)

        # 86700 grant less net 60000
        assert result.monthly_benefit == 26700

    @pytest.mark.parametrize("size", [1, 3, 5])
    def test_benefit_non_increasing_in_income(self, engine: EligibilityEngine, size: int):
        benefits = [
            engine.calculate_benefit(
                HouseholdInput(household_size=size, unearned_income=income), "SNAP", FY2024
            ).monthly_benefit
            for income in range(0, 600001, 5000)
        ]
        assert all(later <= earlier for earlier, later in zip(benefits, benefits[1:]))


class TestTraceability:
    """Results can be re-derived from their applied rules."""

    @pytest.mark.parametrize(
        "household, program",
        [
            (HouseholdInput(household_size=1, earned_income=150000, shelter_cost=80000), "SNAP"),
            (HouseholdInput(household_size=1, unearned_income=141300), "SNAP"),
            (HouseholdInput(household_size=1, unearned_income=5000, shelter_cost=1000), "SNAP"),
            (
                HouseholdInput(
                    household_size=2,
                    earned_income=90000,
                    unearned_income=40000,
                    has_disabled=True,
                    medical_expenses=18000,
                    dependent_care_cost=12000,
                    shelter_cost=110000,
                    utility_cost=30000,
                ),
                "SNAP",
            ),
            (HouseholdInput(household_size=3, earned_income=100000, dependent_care_cost=30000), "TCA"),
            (HouseholdInput(household_size=2, earned_income=100000), "MEAP"),
        ],
    )
    def test_rederive_net_and_benefit(
        self, engine: EligibilityEngine, household: HouseholdInput, program: str
    ):
        result = engine.calculate_benefit(household, program, FY2025)

        assert result.eligible is True
        assert rederive_net(result) == result.net_income
        assert rederive_benefit(result) == result.monthly_benefit

    def test_deduction_rules_follow_documented_order(
        self, engine: EligibilityEngine, working_single: HouseholdInput
    ):
        result = engine.calculate_benefit(working_single, "SNAP", FY2024)
        steps = [r.step for r in result.rules_of_kind(RuleKind.DEDUCTION)]

        assert steps == ["standard_deduction", "earned_income_deduction", "excess_shelter_deduction"]

    def test_identical_input_identical_result(self, engine: EligibilityEngine, working_single: HouseholdInput):
        first = engine.calculate_benefit(working_single, "SNAP", FY2024)
        second = engine.calculate_benefit(working_single, "SNAP", FY2024)

        assert first.model_dump() == second.model_dump()
