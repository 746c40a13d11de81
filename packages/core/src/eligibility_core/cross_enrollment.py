"""Cross-enrollment analysis: eligible programs the household has not claimed."""

from collections.abc import Iterable

import structlog

from eligibility_core.models.audit import RuleKind
from eligibility_core.models.household import EnrollmentRecord
from eligibility_core.models.results import EligibilityResult, RadarReport, UnclaimedProgram
from eligibility_core.money import format_cents

logger = structlog.get_logger()


def _reason(result: EligibilityResult) -> tuple[str, list[str]]:
    if result.is_categorical:
        rules = result.rules_of_kind(RuleKind.CATEGORICAL)
        return (
            f"Already receives {result.categorical_category.value.replace('_', ' ')}, "
            f"which confers {result.program_name} eligibility",
            [r.rule_id for r in rules],
        )

    parts = []
    for test in (result.gross_test, result.net_test):
        if test.applied and test.limit is not None:
            parts.append(
                f"{test.name} income {format_cents(test.actual)} is within "
                f"the {format_cents(test.limit)} limit"
            )
    rules = result.rules_of_kind(RuleKind.THRESHOLD)
    if not parts:
        return f"Meets {result.program_name} requirements", [r.rule_id for r in rules]
    return "; ".join(parts).capitalize(), [r.rule_id for r in rules]


def find_unclaimed(
    enrollments: Iterable[EnrollmentRecord],
    report: RadarReport,
) -> list[UnclaimedProgram]:
    """Eligible programs without an active or pending enrollment.

    Ordered by estimated monthly benefit, largest first, then program code.
    """
    enrolled = {e.program.upper() for e in enrollments if e.is_current}
    unclaimed = []
    for result in report.results:
        if not result.eligible or result.program.upper() in enrolled:
            continue
        reason, rule_ids = _reason(result)
        unclaimed.append(UnclaimedProgram(
            program=result.program,
            program_name=result.program_name,
            reason=reason,
            estimated_monthly_benefit=result.monthly_benefit,
            rule_ids=rule_ids,
        ))
    unclaimed.sort(key=lambda u: (-u.estimated_monthly_benefit, u.program))

    logger.info(
        "unclaimed_programs_found",
        household_id=report.household_id,
        programs=[u.program for u in unclaimed],
        total_monthly_benefit=total_potential_benefit(unclaimed),
    )
    return unclaimed


def total_potential_benefit(unclaimed: Iterable[UnclaimedProgram]) -> int:
    """Sum of estimated monthly benefits, in cents."""
    return sum(u.estimated_monthly_benefit for u in unclaimed)
