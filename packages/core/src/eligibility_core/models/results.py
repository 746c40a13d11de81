"""Calculation result models.

Results are derived values: the engine builds them per request and hands
them back; it never stores them. They deliberately carry no timestamps so
that identical inputs produce identical results.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from eligibility_core.models.audit import AppliedRule, RuleKind
from eligibility_core.models.household import CategoricalEligibility
from eligibility_core.money import format_cents


class DeductionSet(BaseModel):
    """Deduction amounts computed for one household and program, in cents."""

    model_config = ConfigDict(frozen=True)

    standard: int = 0
    earned_income: int = 0
    dependent_care: int = 0
    medical: int = 0
    shelter: int = 0

    @computed_field
    @property
    def total(self) -> int:
        """Sum of all deductions."""
        return (
            self.standard
            + self.earned_income
            + self.dependent_care
            + self.medical
            + self.shelter
        )


class IncomeTest(BaseModel):
    """Outcome of one income-limit comparison.

    ``applied`` is False when the test was bypassed (categorical
    eligibility, elderly/disabled waiver) or the program has no such test.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    applied: bool
    passed: bool
    limit: Optional[int] = None
    actual: int
    bypassed_by: Optional[str] = None


class EligibilityResult(BaseModel):
    """Eligibility determination and benefit for one program."""

    model_config = ConfigDict(frozen=True)

    program: str
    program_name: str
    jurisdiction: str
    as_of: date
    eligible: bool
    earned_income: int
    gross_income: int
    deductions: DeductionSet
    net_income: int
    gross_test: IncomeTest
    net_test: IncomeTest
    monthly_benefit: int = Field(ge=0)
    max_allotment: int = 0
    applied_rules: list[AppliedRule] = Field(default_factory=list)
    categorical_category: Optional[CategoricalEligibility] = None
    ineligibility_reasons: list[str] = Field(default_factory=list)
    catalog_version: str

    @property
    def is_categorical(self) -> bool:
        return self.categorical_category is not None

    @property
    def rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.applied_rules]

    def rules_of_kind(self, kind: RuleKind) -> list[AppliedRule]:
        return [r for r in self.applied_rules if r.kind == kind]

    @property
    def reason(self) -> str:
        """One-line human summary of the determination."""
        if self.eligible:
            return (
                f"Eligible for {format_cents(self.monthly_benefit)}/month "
                f"in {self.program_name} benefits"
            )
        return "; ".join(self.ineligibility_reasons)


class RadarAlert(BaseModel):
    """A program where the household sits close to an income limit."""

    model_config = ConfigDict(frozen=True)

    program: str
    test: str
    limit: int
    actual: int
    headroom: int = Field(description="Cents of additional income before the limit is exceeded")
    margin: Decimal
    message: str


class ProgramChange(BaseModel):
    """Per-program difference against a previous result set."""

    model_config = ConfigDict(frozen=True)

    program: str
    previous_eligible: Optional[bool] = None
    current_eligible: bool
    previous_benefit: int = 0
    current_benefit: int

    @computed_field
    @property
    def delta(self) -> int:
        """Signed benefit change in cents (negative means a loss)."""
        return self.current_benefit - self.previous_benefit

    @computed_field
    @property
    def cliff(self) -> bool:
        """True when the household lost eligibility or its whole benefit."""
        if self.previous_eligible and not self.current_eligible:
            return True
        return self.previous_benefit > 0 and self.current_benefit == 0


class RadarReport(BaseModel):
    """All-program scan for one household."""

    model_config = ConfigDict(frozen=True)

    household_id: Optional[str] = None
    jurisdiction: str
    as_of: date
    results: list[EligibilityResult]
    alerts: list[RadarAlert] = Field(default_factory=list)
    changes: Optional[list[ProgramChange]] = None
    catalog_version: str

    @computed_field
    @property
    def eligible_programs(self) -> list[str]:
        return [r.program for r in self.results if r.eligible]

    @computed_field
    @property
    def total_monthly_benefit(self) -> int:
        return sum(r.monthly_benefit for r in self.results if r.eligible)

    def result_for(self, program: str) -> Optional[EligibilityResult]:
        """Result for a program code, or None if the program was not scanned."""
        for result in self.results:
            if result.program == program:
                return result
        return None


class UnclaimedProgram(BaseModel):
    """A program the household qualifies for but has not enrolled in."""

    model_config = ConfigDict(frozen=True)

    program: str
    program_name: str
    reason: str
    estimated_monthly_benefit: int
    rule_ids: list[str] = Field(default_factory=list)
