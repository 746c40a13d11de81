"""Deduction calculation from gross to net income.

Deductions run in the order the catalog documents (standard, earned
income, dependent care, medical, excess shelter). Each amount is rounded
half-up once where it is defined. The shelter deduction is computed
against income after every other deduction, so it always runs last.
"""

import structlog

from eligibility_core.catalog.rules import DeductionType, ProgramRuleSet
from eligibility_core.models.audit import RuleKind, RuleTrail
from eligibility_core.models.household import HouseholdInput
from eligibility_core.models.results import DeductionSet
from eligibility_core.money import apply_rate, format_cents
from eligibility_core.normalizer import NormalizedIncome

logger = structlog.get_logger()


def calculate_deductions(
    rule_set: ProgramRuleSet,
    household: HouseholdInput,
    income: NormalizedIncome,
    trail: RuleTrail,
) -> DeductionSet:
    """Apply the program's deduction schedule to one household.

    Deductions the schedule does not list are zero and not recorded.
    """
    schedule = rule_set.deductions
    amounts = {deduction: 0 for deduction in DeductionType}

    for deduction in schedule.order:
        if deduction == DeductionType.STANDARD:
            if schedule.standard is None:
                continue
            amount = schedule.standard.for_size(household.household_size)
            amounts[deduction] = amount
            trail.add(
                rule_id=rule_set.rule_id("standard_deduction"),
                step="standard_deduction",
                kind=RuleKind.DEDUCTION,
                amount=amount,
                input_value=f"household_size={household.household_size}",
                output_value=format_cents(amount),
                description="Standard deduction for household size",
            )

        elif deduction == DeductionType.EARNED_INCOME:
            amount = apply_rate(income.earned, schedule.earned_income_rate)
            amounts[deduction] = amount
            trail.add(
                rule_id=rule_set.rule_id("earned_income_deduction"),
                step="earned_income_deduction",
                kind=RuleKind.DEDUCTION,
                amount=amount,
                input_value=f"earned={format_cents(income.earned)}, "
                f"rate={schedule.earned_income_rate}",
                output_value=format_cents(amount),
                description=f"{schedule.earned_income_rate:.0%} of earned income",
            )

        elif deduction == DeductionType.DEPENDENT_CARE:
            cost = household.dependent_care_cost
            amount = cost
            cap_text = "none"
            if schedule.dependent_care_cap is not None:
                amount = min(cost, schedule.dependent_care_cap)
                cap_text = format_cents(schedule.dependent_care_cap)
            amounts[deduction] = amount
            if amount:
                trail.add(
                    rule_id=rule_set.rule_id("dependent_care_deduction"),
                    step="dependent_care_deduction",
                    kind=RuleKind.DEDUCTION,
                    amount=amount,
                    input_value=f"cost={format_cents(cost)}, cap={cap_text}",
                    output_value=format_cents(amount),
                    description="Dependent care costs",
                )

        elif deduction == DeductionType.MEDICAL:
            if not household.has_elderly_or_disabled:
                continue
            amount = max(0, household.medical_expenses - schedule.medical_floor)
            amounts[deduction] = amount
            if amount:
                trail.add(
                    rule_id=rule_set.rule_id("medical_deduction"),
                    step="medical_deduction",
                    kind=RuleKind.DEDUCTION,
                    amount=amount,
                    input_value=f"expenses={format_cents(household.medical_expenses)}, "
                    f"floor={format_cents(schedule.medical_floor)}",
                    output_value=format_cents(amount),
                    description="Medical expenses above the floor (elderly/disabled member)",
                )

        elif deduction == DeductionType.SHELTER:
            amounts[deduction] = _shelter_deduction(
                rule_set, household, income.gross - sum(amounts.values()), trail
            )

    deductions = DeductionSet(
        standard=amounts[DeductionType.STANDARD],
        earned_income=amounts[DeductionType.EARNED_INCOME],
        dependent_care=amounts[DeductionType.DEPENDENT_CARE],
        medical=amounts[DeductionType.MEDICAL],
        shelter=amounts[DeductionType.SHELTER],
    )
    logger.info(
        "deductions_calculated",
        program=rule_set.program,
        total=deductions.total,
    )
    return deductions


def _shelter_deduction(
    rule_set: ProgramRuleSet,
    household: HouseholdInput,
    income_after_deductions: int,
    trail: RuleTrail,
) -> int:
    schedule = rule_set.deductions
    costs = household.shelter_cost + household.utility_cost
    base = max(0, income_after_deductions)
    threshold = apply_rate(base, schedule.shelter_income_ratio)
    excess = max(0, costs - threshold)

    capped = schedule.shelter_cap is not None and not (
        schedule.uncapped_shelter_for_elderly_disabled
        and household.has_elderly_or_disabled
    )
    amount = min(excess, schedule.shelter_cap) if capped else excess
    if amount:
        cap_text = format_cents(schedule.shelter_cap) if capped else "none"
        trail.add(
            rule_id=rule_set.rule_id("shelter_deduction"),
            step="excess_shelter_deduction",
            kind=RuleKind.DEDUCTION,
            amount=amount,
            input_value=f"costs={format_cents(costs)}, "
            f"income_share={format_cents(threshold)}, cap={cap_text}",
            output_value=format_cents(amount),
            description=f"Shelter costs above {schedule.shelter_income_ratio:.0%} "
            "of income after other deductions",
        )
    return amount


def calculate_net_income(
    rule_set: ProgramRuleSet,
    gross_income: int,
    deductions: DeductionSet,
    trail: RuleTrail,
) -> int:
    """Net income is gross less all deductions, floored at zero.

    The floor is recorded as the amount of the net income rule, so that
    gross - deductions + that amount always equals net.
    """
    raw = gross_income - deductions.total
    net = max(0, raw)
    trail.add(
        rule_id=rule_set.rule_id("net_income"),
        step="net_income",
        kind=RuleKind.NET_INCOME,
        amount=net - raw,
        input_value=f"gross={format_cents(gross_income)}, "
        f"deductions={format_cents(deductions.total)}",
        output_value=format_cents(net),
        description="Gross income less deductions, floored at zero",
    )
    return net
