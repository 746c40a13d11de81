"""Data models for eligibility_core.

This package provides:
- Household input and enrollment records (household.py)
- The applied-rule trail used for traceability (audit.py)
- Eligibility results, radar reports and unclaimed programs (results.py)
"""

from eligibility_core.models.household import (
    CategoricalEligibility,
    EnrollmentRecord,
    EnrollmentStatus,
    HouseholdInput,
    IncomeEntry,
    IncomeFrequency,
    IncomeKind,
)
from eligibility_core.models.audit import (
    AppliedRule,
    RuleKind,
    RuleTrail,
)
from eligibility_core.models.results import (
    DeductionSet,
    EligibilityResult,
    IncomeTest,
    ProgramChange,
    RadarAlert,
    RadarReport,
    UnclaimedProgram,
)

__all__ = [
    # Household input
    "CategoricalEligibility",
    "EnrollmentRecord",
    "EnrollmentStatus",
    "HouseholdInput",
    "IncomeEntry",
    "IncomeFrequency",
    "IncomeKind",
    # Audit trail
    "AppliedRule",
    "RuleKind",
    "RuleTrail",
    # Results
    "DeductionSet",
    "EligibilityResult",
    "IncomeTest",
    "ProgramChange",
    "RadarAlert",
    "RadarReport",
    "UnclaimedProgram",
]
