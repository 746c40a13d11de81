"""Income normalization to a canonical monthly gross figure.

Frequencies are converted annualize-then-divide: weekly x 52 / 12,
bi-weekly x 26 / 12, semi-monthly x 2, quarterly x 4 / 12, annually / 12.
One-time payments are not recurring income and are excluded. Each entry is
rounded half-up once, after conversion.
"""

from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, computed_field

from eligibility_core.exceptions import InvalidInputError
from eligibility_core.models.audit import RuleKind, RuleTrail
from eligibility_core.models.household import (
    HouseholdInput,
    IncomeEntry,
    IncomeFrequency,
    IncomeKind,
)
from eligibility_core.money import format_cents, round_half_up

logger = structlog.get_logger()

# Payments per year for each frequency; None means not recurring.
PERIODS_PER_YEAR: dict[IncomeFrequency, Optional[int]] = {
    IncomeFrequency.WEEKLY: 52,
    IncomeFrequency.BI_WEEKLY: 26,
    IncomeFrequency.SEMI_MONTHLY: 24,
    IncomeFrequency.MONTHLY: 12,
    IncomeFrequency.QUARTERLY: 4,
    IncomeFrequency.ANNUALLY: 1,
    IncomeFrequency.ONE_TIME: None,
}

EARNED_KINDS = frozenset({IncomeKind.EARNED, IncomeKind.SELF_EMPLOYMENT})

# Household fields that may never be negative.
NON_NEGATIVE_FIELDS = (
    "earned_income",
    "unearned_income",
    "shelter_cost",
    "utility_cost",
    "dependent_care_cost",
    "medical_expenses",
)


class NormalizedIncome(BaseModel):
    """Monthly income in cents, split by treatment."""

    model_config = ConfigDict(frozen=True)

    earned: int
    unearned: int

    @computed_field
    @property
    def gross(self) -> int:
        return self.earned + self.unearned


def to_monthly(amount: int, frequency: IncomeFrequency) -> int:
    """Convert a per-period amount in cents to a monthly amount in cents."""
    periods = PERIODS_PER_YEAR[frequency]
    if periods is None:
        return 0
    if periods == 12:
        return amount
    return round_half_up(Decimal(amount) * periods / 12)


def validate_household(household: HouseholdInput) -> None:
    """Reject inputs the engine cannot calculate with.

    Raises:
        InvalidInputError: Household size below one or a negative amount.
    """
    if household.household_size < 1:
        raise InvalidInputError(
            "Household size must be at least 1",
            field="household_size",
            value=household.household_size,
            constraint=">= 1",
        )
    for field in NON_NEGATIVE_FIELDS:
        value = getattr(household, field)
        if value < 0:
            raise InvalidInputError(
                f"{field} cannot be negative",
                field=field,
                value=value,
                constraint=">= 0",
            )
    for index, entry in enumerate(household.income_entries):
        if entry.amount < 0:
            raise InvalidInputError(
                "Income entry amount cannot be negative",
                field=f"income_entries[{index}].amount",
                value=entry.amount,
                constraint=">= 0",
            )
        if entry.business_expenses < 0:
            raise InvalidInputError(
                "Business expenses cannot be negative",
                field=f"income_entries[{index}].business_expenses",
                value=entry.business_expenses,
                constraint=">= 0",
            )


def _entry_monthly(entry: IncomeEntry) -> int:
    per_period = entry.amount
    if entry.kind == IncomeKind.SELF_EMPLOYMENT:
        per_period = max(0, entry.amount - entry.business_expenses)
    return to_monthly(per_period, entry.frequency)


def normalize_income(
    household: HouseholdInput,
    trail: RuleTrail,
    rule_id_prefix: str = "income",
) -> NormalizedIncome:
    """Combine subtotals and income entries into monthly earned/unearned.

    Every entry that contributes income is recorded on ``trail`` as an
    INCOME rule; the amounts of those rules sum to the gross figure.
    """
    validate_household(household)
    earned = 0
    unearned = 0

    if household.earned_income:
        earned += household.earned_income
        trail.add(
            rule_id=f"{rule_id_prefix}:earned_income",
            step="earned_income",
            kind=RuleKind.INCOME,
            amount=household.earned_income,
            output_value=format_cents(household.earned_income),
            description="Reported monthly earned income",
        )
    if household.unearned_income:
        unearned += household.unearned_income
        trail.add(
            rule_id=f"{rule_id_prefix}:unearned_income",
            step="unearned_income",
            kind=RuleKind.INCOME,
            amount=household.unearned_income,
            output_value=format_cents(household.unearned_income),
            description="Reported monthly unearned income",
        )

    for index, entry in enumerate(household.income_entries):
        if entry.frequency == IncomeFrequency.ONE_TIME:
            logger.info(
                "income_entry_excluded",
                index=index,
                kind=entry.kind.value,
                reason="one_time",
            )
            continue
        monthly = _entry_monthly(entry)
        if entry.kind in EARNED_KINDS:
            earned += monthly
        else:
            unearned += monthly
        label = entry.source or entry.kind.value
        trail.add(
            rule_id=f"{rule_id_prefix}:entry_{index}",
            step=f"income_entry_{index}",
            kind=RuleKind.INCOME,
            amount=monthly,
            input_value=f"{format_cents(entry.amount)} {entry.frequency.value}",
            output_value=format_cents(monthly),
            description=f"{label} converted to monthly "
            f"({'earned' if entry.kind in EARNED_KINDS else 'unearned'})",
        )

    return NormalizedIncome(earned=earned, unearned=unearned)
