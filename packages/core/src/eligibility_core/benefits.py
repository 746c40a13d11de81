"""Monthly benefit amount from net income.

    benefit = max(0, max_allotment(size) - round_half_up(net * rate))

topped up to the program minimum for small eligible households. Each step
is recorded as a BENEFIT rule with a signed amount, so the amounts of the
benefit rules sum to the final benefit.
"""

import structlog

from eligibility_core.catalog.rules import ProgramRuleSet
from eligibility_core.models.audit import RuleKind, RuleTrail
from eligibility_core.money import apply_rate, format_cents

logger = structlog.get_logger()


def calculate_benefit_amount(
    rule_set: ProgramRuleSet,
    household_size: int,
    net_income: int,
    eligible: bool,
    trail: RuleTrail,
) -> tuple[int, int]:
    """Compute the monthly benefit in cents.

    Returns:
        (monthly_benefit, max_allotment). Ineligible households get 0.
    """
    formula = rule_set.benefit
    allotment = formula.max_allotment.for_size(household_size)

    if not eligible:
        trail.add(
            rule_id=rule_set.rule_id("benefit"),
            step="benefit_not_payable",
            kind=RuleKind.BENEFIT,
            output_value=format_cents(0),
            description="Household is not eligible; no benefit is payable",
        )
        return 0, allotment

    trail.add(
        rule_id=rule_set.rule_id("max_allotment"),
        step="max_allotment",
        kind=RuleKind.BENEFIT,
        amount=allotment,
        input_value=f"household_size={household_size}",
        output_value=format_cents(allotment),
        description="Maximum benefit for household size",
    )

    benefit = allotment
    if formula.reduction_rate:
        reduction = apply_rate(net_income, formula.reduction_rate)
        trail.add(
            rule_id=rule_set.rule_id("benefit_reduction"),
            step="benefit_reduction",
            kind=RuleKind.BENEFIT,
            amount=-reduction,
            input_value=f"net={format_cents(net_income)}, rate={formula.reduction_rate}",
            output_value=format_cents(reduction),
            description=f"{formula.reduction_rate:.0%} of net income",
        )
        benefit -= reduction

    if benefit < 0:
        trail.add(
            rule_id=rule_set.rule_id("benefit_floor"),
            step="benefit_floor",
            kind=RuleKind.BENEFIT,
            amount=-benefit,
            output_value=format_cents(0),
            description="Benefit cannot be negative",
        )
        benefit = 0

    if (
        formula.minimum_benefit
        and household_size <= formula.minimum_benefit_max_size
        and benefit < formula.minimum_benefit
    ):
        top_up = formula.minimum_benefit - benefit
        trail.add(
            rule_id=rule_set.rule_id("minimum_benefit"),
            step="minimum_benefit",
            kind=RuleKind.BENEFIT,
            amount=top_up,
            input_value=f"calculated={format_cents(benefit)}",
            output_value=format_cents(formula.minimum_benefit),
            description=f"Minimum benefit for households of "
            f"{formula.minimum_benefit_max_size} or fewer",
        )
        benefit = formula.minimum_benefit

    logger.info(
        "benefit_calculated",
        program=rule_set.program,
        monthly_benefit=benefit,
        max_allotment=allotment,
    )
    return benefit, allotment
