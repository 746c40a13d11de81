"""Gross and net income limit tests.

Limits compare with <=, so income exactly at the limit passes.
"""

from typing import Optional

from eligibility_core.catalog.rules import ProgramIncomeLimit, ProgramRuleSet
from eligibility_core.models.audit import RuleKind, RuleTrail
from eligibility_core.models.household import CategoricalEligibility, HouseholdInput
from eligibility_core.models.results import IncomeTest
from eligibility_core.money import format_cents

ELDERLY_DISABLED_WAIVER = "elderly_disabled_waiver"


def _bypassed(name: str, limit: Optional[int], actual: int, reason: Optional[str]) -> IncomeTest:
    return IncomeTest(
        name=name,
        applied=False,
        passed=True,
        limit=limit,
        actual=actual,
        bypassed_by=reason,
    )


def _compare(
    rule_set: ProgramRuleSet,
    name: str,
    limit: int,
    actual: int,
    trail: RuleTrail,
) -> IncomeTest:
    passed = actual <= limit
    trail.add(
        rule_id=rule_set.rule_id(f"{name}_income_limit"),
        step=f"{name}_income_test",
        kind=RuleKind.THRESHOLD,
        input_value=f"{name}={format_cents(actual)}, limit={format_cents(limit)}",
        output_value="pass" if passed else "fail",
        description=f"{name.capitalize()} income must not exceed {format_cents(limit)}",
    )
    return IncomeTest(name=name, applied=True, passed=passed, limit=limit, actual=actual)


def run_income_tests(
    rule_set: ProgramRuleSet,
    household: HouseholdInput,
    limit: ProgramIncomeLimit,
    gross_income: int,
    net_income: int,
    category: Optional[CategoricalEligibility],
    trail: RuleTrail,
) -> tuple[IncomeTest, IncomeTest]:
    """Run the gross and net tests, honoring categorical bypass and waivers.

    Returns:
        (gross_test, net_test). A test that did not run has ``applied``
        False and counts as passed.
    """
    if category is not None:
        return (
            _bypassed("gross", limit.gross_limit, gross_income, category.value),
            _bypassed("net", limit.net_limit, net_income, category.value),
        )

    if rule_set.elderly_disabled_gross_waiver and household.has_elderly_or_disabled:
        trail.add(
            rule_id=rule_set.rule_id("gross_income_waiver"),
            step="gross_income_test",
            kind=RuleKind.THRESHOLD,
            input_value=f"gross={format_cents(gross_income)}",
            output_value="waived",
            description="Gross income test waived for elderly or disabled household",
        )
        gross_test = _bypassed("gross", limit.gross_limit, gross_income, ELDERLY_DISABLED_WAIVER)
    else:
        gross_test = _compare(rule_set, "gross", limit.gross_limit, gross_income, trail)

    if limit.net_limit is None:
        net_test = _bypassed("net", None, net_income, None)
    else:
        net_test = _compare(rule_set, "net", limit.net_limit, net_income, trail)

    return gross_test, net_test
