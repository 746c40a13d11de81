"""Household input models.

These are the per-request inputs the surrounding application hands to the
engine. They are immutable once constructed and never persisted by the
engine. Every currency field is an integer number of cents.

Negative amounts are accepted at construction time on purpose: the engine
rejects them with InvalidInputError at the point of calculation, so the
caller always gets the engine's error type rather than a model error.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoricalEligibility(str, Enum):
    """Benefit a household already receives that may confer eligibility."""

    NONE = "none"
    CASH_ASSISTANCE = "cash_assistance"
    SUPPLEMENTAL_SECURITY = "supplemental_security"
    BROAD_BASED = "broad_based"


class IncomeKind(str, Enum):
    """Provenance of an income entry."""

    EARNED = "earned"
    UNEARNED = "unearned"
    SELF_EMPLOYMENT = "self_employment"
    BENEFIT = "benefit"


class IncomeFrequency(str, Enum):
    """Frequency of income payments."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"
    ONE_TIME = "one_time"


class IncomeEntry(BaseModel):
    """A single income source as reported, before normalization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: IncomeKind
    amount: int = Field(description="Amount per period, in cents")
    frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    business_expenses: int = Field(
        default=0,
        description="Allowed business expenses per period (self-employment only), in cents",
    )
    source: Optional[str] = Field(
        default=None,
        description="Employer, payer or benefit name",
    )


class HouseholdInput(BaseModel):
    """Everything the engine needs to know about one household.

    Income may arrive as monthly earned/unearned subtotals, as a list of
    IncomeEntry records, or both; the normalizer adds them together.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "household_size": 1,
                    "earned_income": 150000,
                    "shelter_cost": 80000,
                    "categorical_eligibility": "none",
                }
            ]
        },
    )

    household_id: Optional[str] = None
    household_size: int = Field(description="Number of people in the household")
    earned_income: int = Field(default=0, description="Monthly earned income, in cents")
    unearned_income: int = Field(default=0, description="Monthly unearned income, in cents")
    income_entries: tuple[IncomeEntry, ...] = ()
    has_elderly: bool = False
    has_disabled: bool = False
    shelter_cost: int = Field(default=0, description="Monthly rent or mortgage, in cents")
    utility_cost: int = Field(default=0, description="Monthly utilities, in cents")
    dependent_care_cost: int = Field(default=0, description="Monthly dependent care, in cents")
    medical_expenses: int = Field(
        default=0,
        description="Monthly out-of-pocket medical costs, in cents",
    )
    categorical_eligibility: CategoricalEligibility = CategoricalEligibility.NONE

    @property
    def has_elderly_or_disabled(self) -> bool:
        """True when any member is elderly or disabled."""
        return self.has_elderly or self.has_disabled

    def with_changes(self, **changes) -> "HouseholdInput":
        """Return a copy with some fields replaced, for what-if comparisons."""
        return self.model_validate({**self.model_dump(), **changes})


class EnrollmentStatus(str, Enum):
    """Lifecycle state of a program enrollment."""

    ACTIVE = "active"
    PENDING = "pending"
    CLOSED = "closed"
    DENIED = "denied"


class EnrollmentRecord(BaseModel):
    """A household's recorded enrollment in one program."""

    model_config = ConfigDict(frozen=True)

    program: str
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_current(self) -> bool:
        """Active or pending enrollments count as already claimed."""
        return self.status in (EnrollmentStatus.ACTIVE, EnrollmentStatus.PENDING)
