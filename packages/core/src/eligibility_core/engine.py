"""Eligibility and benefit calculation per program.

The EligibilityEngine runs the whole pipeline for one household and one
program:

1. Normalize income to monthly earned/unearned cents
2. Apply deductions in the catalog's documented order
3. Resolve categorical eligibility
4. Test gross and net income against the program limits
5. Compute the monthly benefit

Every step is recorded on the result's ``applied_rules`` for audit. The
engine holds only a read-only catalog, so one instance can serve any
number of threads.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from functools import partial
from typing import Any, Optional

import structlog

from eligibility_core.benefits import calculate_benefit_amount
from eligibility_core.catalog.rules import ProgramRuleSet, RuleCatalog
from eligibility_core.catalog.standards import default_catalog
from eligibility_core.categorical import resolve_categorical
from eligibility_core.cross_enrollment import find_unclaimed
from eligibility_core.deductions import calculate_deductions, calculate_net_income
from eligibility_core.models.audit import RuleTrail
from eligibility_core.models.household import EnrollmentRecord, HouseholdInput
from eligibility_core.models.results import EligibilityResult, RadarReport, UnclaimedProgram
from eligibility_core.money import format_cents
from eligibility_core.normalizer import normalize_income, validate_household
from eligibility_core.radar import (
    DEFAULT_ALERT_MARGIN,
    DEFAULT_MAX_WORKERS,
    PreviousResults,
    scan_programs,
)
from eligibility_core.thresholds import run_income_tests

logger = structlog.get_logger()

DEFAULT_JURISDICTION = "MD"


class EligibilityEngine:
    """
    Determine program eligibility and monthly benefits for households.

    Args:
        catalog: Rule catalog snapshot (default: the seeded catalog)
        default_jurisdiction: Jurisdiction used when a call names none
        alert_margin: Radar alert margin as a fraction of the limit
        max_workers: Thread pool size for radar scans
    """

    def __init__(
        self,
        catalog: Optional[RuleCatalog] = None,
        default_jurisdiction: str = DEFAULT_JURISDICTION,
        alert_margin: Decimal = DEFAULT_ALERT_MARGIN,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.catalog = catalog or default_catalog()
        self.default_jurisdiction = default_jurisdiction
        self.alert_margin = alert_margin
        self.max_workers = max_workers

    def _evaluate(
        self,
        household: HouseholdInput,
        program: str,
        as_of: date,
        jurisdiction: Optional[str],
    ) -> EligibilityResult:
        validate_household(household)
        jurisdiction = (jurisdiction or self.default_jurisdiction).upper()
        rule_set = self.catalog.rule_set(jurisdiction, program, as_of)
        limit = self.catalog.income_limit(
            jurisdiction, rule_set.program, household.household_size, as_of
        )
        trail = RuleTrail(program=rule_set.program)

        income = normalize_income(household, trail, rule_id_prefix=rule_set.rule_id("income"))
        deductions = calculate_deductions(rule_set, household, income, trail)
        net_income = calculate_net_income(rule_set, income.gross, deductions, trail)

        category = resolve_categorical(rule_set, household.categorical_eligibility, trail)
        gross_test, net_test = run_income_tests(
            rule_set, household, limit, income.gross, net_income, category, trail
        )
        eligible = category is not None or (gross_test.passed and net_test.passed)

        benefit, allotment = calculate_benefit_amount(
            rule_set, household.household_size, net_income, eligible, trail
        )

        result = EligibilityResult(
            program=rule_set.program,
            program_name=rule_set.program_name,
            jurisdiction=rule_set.jurisdiction,
            as_of=as_of,
            eligible=eligible,
            earned_income=income.earned,
            gross_income=income.gross,
            deductions=deductions,
            net_income=net_income,
            gross_test=gross_test,
            net_test=net_test,
            monthly_benefit=benefit,
            max_allotment=allotment,
            applied_rules=trail.rules,
            categorical_category=category,
            ineligibility_reasons=_ineligibility_reasons(rule_set, gross_test, net_test),
            catalog_version=self.catalog.version,
        )
        logger.info(
            "eligibility_determined",
            household_id=household.household_id,
            program=result.program,
            jurisdiction=result.jurisdiction,
            as_of=as_of.isoformat(),
            eligible=eligible,
            monthly_benefit=benefit,
        )
        return result

    def check_eligibility(
        self,
        household: HouseholdInput,
        program: str,
        as_of: date,
        jurisdiction: Optional[str] = None,
    ) -> EligibilityResult:
        """
        Run the full pipeline for one program.

        Income tests need net income, so deductions and the benefit are
        always computed; the result carries both the decision and the
        monthly benefit.

        Raises:
            InvalidInputError: Negative income, size below one, or unknown
                jurisdiction/program
            CatalogMissingError: No rules cover the program, size and date
        """
        return self._evaluate(household, program, as_of, jurisdiction)

    def calculate_benefit(
        self,
        household: HouseholdInput,
        program: str,
        as_of: date,
        jurisdiction: Optional[str] = None,
    ) -> EligibilityResult:
        """Same result as check_eligibility; read ``result.monthly_benefit``
        (0 when ineligible)."""
        return self.check_eligibility(household, program, as_of, jurisdiction)

    def scan_all_programs(
        self,
        household: HouseholdInput,
        jurisdiction: Optional[str],
        as_of: date,
        previous_results: Optional[PreviousResults] = None,
    ) -> RadarReport:
        """Evaluate every program the jurisdiction runs on ``as_of``."""
        validate_household(household)
        jurisdiction = (jurisdiction or self.default_jurisdiction).upper()
        programs = self.catalog.programs_for(jurisdiction, as_of)
        evaluate = partial(
            self._evaluate_program, household, as_of=as_of, jurisdiction=jurisdiction
        )
        return scan_programs(
            evaluate,
            household,
            programs,
            jurisdiction,
            as_of,
            self.catalog.version,
            previous_results=previous_results,
            alert_margin=self.alert_margin,
            max_workers=self.max_workers,
        )

    def _evaluate_program(
        self,
        household: HouseholdInput,
        program: str,
        *,
        as_of: date,
        jurisdiction: str,
    ) -> EligibilityResult:
        return self._evaluate(household, program, as_of, jurisdiction)

    def scan_what_if(
        self,
        household: HouseholdInput,
        changes: dict[str, Any],
        jurisdiction: Optional[str],
        as_of: date,
    ) -> RadarReport:
        """
        Scan a changed copy of the household against the unchanged one.

        The returned report describes the changed household; its
        ``changes`` show the benefit deltas and cliffs the change causes.

        Example:
            report = engine.scan_what_if(household, {"earned_income": 250000}, "MD", today)
        """
        baseline = self.scan_all_programs(household, jurisdiction, as_of)
        scenario = household.with_changes(**changes)
        logger.info(
            "what_if_scan",
            household_id=household.household_id,
            changed_fields=sorted(changes),
        )
        return self.scan_all_programs(scenario, jurisdiction, as_of, previous_results=baseline)

    def find_unclaimed_programs(
        self,
        household: HouseholdInput,
        current_enrollments: Iterable[EnrollmentRecord],
        radar_report: RadarReport,
    ) -> list[UnclaimedProgram]:
        """Programs the radar marks eligible that the household is not enrolled in."""
        logger.info(
            "cross_enrollment_check",
            household_id=household.household_id,
            report_household_id=radar_report.household_id,
        )
        return find_unclaimed(current_enrollments, radar_report)


def _ineligibility_reasons(rule_set: ProgramRuleSet, gross_test, net_test) -> list[str]:
    reasons = []
    for test in (gross_test, net_test):
        if test.applied and not test.passed:
            reasons.append(
                f"{test.name.capitalize()} income {format_cents(test.actual)} exceeds "
                f"the {rule_set.program} limit of {format_cents(test.limit)}"
            )
    return reasons
