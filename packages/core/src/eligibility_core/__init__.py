"""Eligibility Core - Program eligibility and benefit calculations."""

__version__ = "0.1.0"

from .catalog import RuleCatalog, default_catalog
from .engine import EligibilityEngine
from .exceptions import (
    CatalogMissingError,
    ConfigurationError,
    EligibilityError,
    ExternalServiceError,
    InvalidInputError,
)
from .models import (
    CategoricalEligibility,
    EligibilityResult,
    EnrollmentRecord,
    HouseholdInput,
    IncomeEntry,
    RadarReport,
    UnclaimedProgram,
)

__all__ = [
    "EligibilityEngine",
    "RuleCatalog",
    "default_catalog",
    "CategoricalEligibility",
    "EligibilityResult",
    "EnrollmentRecord",
    "HouseholdInput",
    "IncomeEntry",
    "RadarReport",
    "UnclaimedProgram",
    "EligibilityError",
    "InvalidInputError",
    "CatalogMissingError",
    "ExternalServiceError",
    "ConfigurationError",
]
