"""Published program standards seeded into the default rule catalog.

All amounts are monthly, in cents.

Sources:
- SNAP: USDA FNS Cost-of-Living Adjustments, FY2024 and FY2025
  (income eligibility standards, maximum allotments, deductions)
- Poverty guidelines: HHS 2023 and 2024 (48 contiguous states)
- Maryland Medicaid: COMAR 10.09.24, MAGI adults at 138% FPL
- Maryland Temporary Cash Assistance: COMAR 07.03.03
- Maryland Energy Assistance: OHEP eligibility at 175% FPL

Updated: 2025.1
"""

from datetime import date
from decimal import Decimal
from functools import lru_cache

from eligibility_core.catalog.rules import (
    BenefitFormula,
    DeductionSchedule,
    DeductionType,
    IncomeLimitTable,
    ProgramKind,
    ProgramRuleSet,
    RuleCatalog,
    SizeTable,
)
from eligibility_core.models.household import CategoricalEligibility


# =============================================================================
# VERSION TRACKING
# =============================================================================

CATALOG_VERSION = "2025.1"


def get_catalog_version() -> str:
    """Return the version of the seeded catalog."""
    return CATALOG_VERSION


ALL_CATEGORIES = frozenset(
    {
        CategoricalEligibility.CASH_ASSISTANCE,
        CategoricalEligibility.SUPPLEMENTAL_SECURITY,
        CategoricalEligibility.BROAD_BASED,
    }
)


# =============================================================================
# SNAP - FOOD ASSISTANCE
# =============================================================================
# Maryland and Pennsylvania both run broad-based categorical eligibility
# with a gross limit of 200% FPL. Net limit is 100% FPL.

SNAP_FY2024_GROSS_LIMITS = SizeTable(
    amounts={1: 243000, 2: 328800, 3: 414400, 4: 500000,
             5: 585800, 6: 671400, 7: 757200, 8: 842800},
    additional_member=85800,
)
SNAP_FY2024_NET_LIMITS = SizeTable(
    amounts={1: 121500, 2: 164400, 3: 207200, 4: 250000,
             5: 292900, 6: 335700, 7: 378600, 8: 421400},
    additional_member=42900,
)
SNAP_FY2024_STANDARD_DEDUCTION = SizeTable(
    amounts={1: 19800, 4: 20800, 5: 24400, 6: 27900},
)
SNAP_FY2024_MAX_ALLOTMENT = SizeTable(
    amounts={1: 29100, 2: 53500, 3: 76600, 4: 97300,
             5: 115500, 6: 138600, 7: 153200, 8: 175100},
    additional_member=21900,
)
SNAP_FY2024_SHELTER_CAP = 67200

SNAP_FY2025_GROSS_LIMITS = SizeTable(
    amounts={1: 251000, 2: 340800, 3: 430400, 4: 520000,
             5: 609800, 6: 699400, 7: 789000, 8: 878800},
    additional_member=89800,
)
SNAP_FY2025_NET_LIMITS = SizeTable(
    amounts={1: 125500, 2: 170400, 3: 215200, 4: 260000,
             5: 304900, 6: 349700, 7: 394500, 8: 439400},
    additional_member=44900,
)
SNAP_FY2025_STANDARD_DEDUCTION = SizeTable(
    amounts={1: 20400, 4: 21700, 5: 25400, 6: 29100},
)
SNAP_FY2025_MAX_ALLOTMENT = SizeTable(
    amounts={1: 29200, 2: 53600, 3: 76800, 4: 97500,
             5: 115800, 6: 139000, 7: 153600, 8: 175600},
    additional_member=22000,
)
SNAP_FY2025_SHELTER_CAP = 71200

SNAP_EARNED_INCOME_RATE = Decimal("0.20")
SNAP_MEDICAL_FLOOR = 3500
SNAP_SHELTER_INCOME_RATIO = Decimal("0.50")
SNAP_BENEFIT_REDUCTION_RATE = Decimal("0.30")
SNAP_MINIMUM_BENEFIT = 2300


def _snap_rule_set(
    jurisdiction: str,
    fiscal_year: int,
    effective_date: date,
    end_date: date,
    gross: SizeTable,
    net: SizeTable,
    standard: SizeTable,
    allotment: SizeTable,
    shelter_cap: int,
) -> ProgramRuleSet:
    return ProgramRuleSet(
        jurisdiction=jurisdiction,
        program="SNAP",
        program_name="Supplemental Nutrition Assistance Program",
        kind=ProgramKind.FOOD,
        fiscal_year=fiscal_year,
        effective_date=effective_date,
        end_date=end_date,
        income_limits=IncomeLimitTable(gross=gross, net=net),
        deductions=DeductionSchedule(
            standard=standard,
            earned_income_rate=SNAP_EARNED_INCOME_RATE,
            dependent_care_cap=None,
            medical_floor=SNAP_MEDICAL_FLOOR,
            shelter_income_ratio=SNAP_SHELTER_INCOME_RATIO,
            shelter_cap=shelter_cap,
            uncapped_shelter_for_elderly_disabled=True,
        ),
        benefit=BenefitFormula(
            max_allotment=allotment,
            reduction_rate=SNAP_BENEFIT_REDUCTION_RATE,
            minimum_benefit=SNAP_MINIMUM_BENEFIT,
            minimum_benefit_max_size=2,
        ),
        categorical_categories=ALL_CATEGORIES,
        elderly_disabled_gross_waiver=True,
        citation="7 CFR 273.9, 273.10",
    )


# =============================================================================
# MEDICAID - MEDICAL ASSISTANCE (MAGI ADULTS)
# =============================================================================
# 138% FPL, gross test only, no deductions and no cash benefit.

MEDICAID_FY2024_LIMITS = SizeTable(
    amounts={1: 167670, 2: 226780, 3: 285890, 4: 345000,
             5: 404110, 6: 463220, 7: 522330, 8: 581440},
    additional_member=59110,
)
MEDICAID_FY2025_LIMITS = SizeTable(
    amounts={1: 173190, 2: 235060, 3: 296930, 4: 358800,
             5: 420670, 6: 482540, 7: 544410, 8: 606280},
    additional_member=61870,
)
NO_CASH_BENEFIT = SizeTable(amounts={1: 0})


def _medicaid_rule_set(
    fiscal_year: int,
    effective_date: date,
    end_date: date,
    gross: SizeTable,
) -> ProgramRuleSet:
    return ProgramRuleSet(
        jurisdiction="MD",
        program="MEDICAID",
        program_name="Maryland Medical Assistance",
        kind=ProgramKind.MEDICAL,
        fiscal_year=fiscal_year,
        effective_date=effective_date,
        end_date=end_date,
        income_limits=IncomeLimitTable(gross=gross, net=None),
        deductions=DeductionSchedule(order=()),
        benefit=BenefitFormula(max_allotment=NO_CASH_BENEFIT, reduction_rate=Decimal("0")),
        categorical_categories=frozenset(
            {
                CategoricalEligibility.SUPPLEMENTAL_SECURITY,
                CategoricalEligibility.CASH_ASSISTANCE,
            }
        ),
        citation="COMAR 10.09.24",
    )


# =============================================================================
# TCA - CASH ASSISTANCE
# =============================================================================
# Countable income is earnings after a 40% disregard plus unearned income,
# less capped dependent care. Benefit reduces dollar for dollar.

TCA_FY2025_GROSS_LIMITS = SizeTable(
    amounts={1: 125500, 2: 170400, 3: 215200, 4: 260000,
             5: 304900, 6: 349700, 7: 394500, 8: 439400},
    additional_member=44900,
)
TCA_FY2025_MAX_GRANT = SizeTable(
    amounts={1: 42800, 2: 66200, 3: 86700, 4: 105300,
             5: 124400, 6: 141100, 7: 159800, 8: 176600},
    additional_member=15400,
)
TCA_EARNED_INCOME_DISREGARD = Decimal("0.40")
TCA_DEPENDENT_CARE_CAP = 20000


# =============================================================================
# MEAP - ENERGY ASSISTANCE
# =============================================================================
# 175% FPL gross test; flat monthly-equivalent benefit by household size.

MEAP_FY2025_LIMITS = SizeTable(
    amounts={1: 219625, 2: 298083, 3: 376542, 4: 455000,
             5: 533458, 6: 611917, 7: 690375, 8: 768833},
    additional_member=78458,
)
MEAP_FY2025_BENEFIT = SizeTable(
    amounts={1: 4000, 2: 4500, 3: 5000, 4: 5500, 5: 6000, 6: 6500},
)


# =============================================================================
# CATALOG ASSEMBLY
# =============================================================================

def default_rule_sets() -> list[ProgramRuleSet]:
    """All seeded rule sets, oldest first."""
    fy2024 = (date(2023, 10, 1), date(2024, 9, 30))
    fy2025 = (date(2024, 10, 1), date(2025, 9, 30))
    md_fy2024 = (date(2023, 7, 1), date(2024, 6, 30))
    md_fy2025 = (date(2024, 7, 1), date(2025, 6, 30))

    return [
        _snap_rule_set(
            "MD", 2024, *fy2024,
            gross=SNAP_FY2024_GROSS_LIMITS,
            net=SNAP_FY2024_NET_LIMITS,
            standard=SNAP_FY2024_STANDARD_DEDUCTION,
            allotment=SNAP_FY2024_MAX_ALLOTMENT,
            shelter_cap=SNAP_FY2024_SHELTER_CAP,
        ),
        _snap_rule_set(
            "MD", 2025, *fy2025,
            gross=SNAP_FY2025_GROSS_LIMITS,
            net=SNAP_FY2025_NET_LIMITS,
            standard=SNAP_FY2025_STANDARD_DEDUCTION,
            allotment=SNAP_FY2025_MAX_ALLOTMENT,
            shelter_cap=SNAP_FY2025_SHELTER_CAP,
        ),
        _snap_rule_set(
            "PA", 2025, *fy2025,
            gross=SNAP_FY2025_GROSS_LIMITS,
            net=SNAP_FY2025_NET_LIMITS,
            standard=SNAP_FY2025_STANDARD_DEDUCTION,
            allotment=SNAP_FY2025_MAX_ALLOTMENT,
            shelter_cap=SNAP_FY2025_SHELTER_CAP,
        ),
        _medicaid_rule_set(2024, *md_fy2024, gross=MEDICAID_FY2024_LIMITS),
        _medicaid_rule_set(2025, *md_fy2025, gross=MEDICAID_FY2025_LIMITS),
        ProgramRuleSet(
            jurisdiction="MD",
            program="TCA",
            program_name="Temporary Cash Assistance",
            kind=ProgramKind.CASH,
            fiscal_year=2025,
            effective_date=md_fy2025[0],
            end_date=md_fy2025[1],
            income_limits=IncomeLimitTable(
                gross=TCA_FY2025_GROSS_LIMITS,
                net=TCA_FY2025_MAX_GRANT,
            ),
            deductions=DeductionSchedule(
                earned_income_rate=TCA_EARNED_INCOME_DISREGARD,
                dependent_care_cap=TCA_DEPENDENT_CARE_CAP,
                order=(DeductionType.EARNED_INCOME, DeductionType.DEPENDENT_CARE),
            ),
            benefit=BenefitFormula(
                max_allotment=TCA_FY2025_MAX_GRANT,
                reduction_rate=Decimal("1"),
            ),
            categorical_categories=frozenset({CategoricalEligibility.CASH_ASSISTANCE}),
            citation="COMAR 07.03.03",
        ),
        ProgramRuleSet(
            jurisdiction="MD",
            program="MEAP",
            program_name="Maryland Energy Assistance Program",
            kind=ProgramKind.ENERGY,
            fiscal_year=2025,
            effective_date=md_fy2025[0],
            end_date=md_fy2025[1],
            income_limits=IncomeLimitTable(
                gross=MEAP_FY2025_LIMITS,
                net=None,
            ),
            deductions=DeductionSchedule(order=()),
            benefit=BenefitFormula(
                max_allotment=MEAP_FY2025_BENEFIT,
                reduction_rate=Decimal("0"),
            ),
            categorical_categories=ALL_CATEGORIES,
            citation="COMAR 14.02.01",
        ),
    ]


@lru_cache(maxsize=1)
def default_catalog() -> RuleCatalog:
    """The seeded catalog, built once per process and never mutated."""
    return RuleCatalog(default_rule_sets(), version=CATALOG_VERSION)
