"""External calculator interface for hybrid reconciliation.

The reconciler depends only on this protocol, so any class with a matching
``calculate`` coroutine can stand in for the HTTP client: a different
vendor, a cached replay, or a test double. No explicit inheritance is
required.

Example Usage:
    ```python
    class ReplayCalculator:
        async def calculate(
            self, request: ExternalCalculationRequest
        ) -> ExternalCalculationResponse:
            return recorded[request.program]

    reconciler = HybridReconciler(calculator=ReplayCalculator())
    ```
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from eligibility_core.models.household import HouseholdInput


# =============================================================================
# ENUMERATIONS
# =============================================================================

class VerificationStatus(str, Enum):
    """Outcome of comparing a local result with the external calculator."""

    VERIFIED = "verified"
    """External value is within tolerance; the local result stands."""

    CONFLICT = "conflict"
    """External value differs beyond tolerance; the external value is authoritative."""

    UNVERIFIED = "unverified"
    """External calculator was unavailable; the local result stands unchecked."""


class AuthoritativeSource(str, Enum):
    """Which calculation the reported benefit comes from."""

    LOCAL = "local"
    EXTERNAL = "external"


# =============================================================================
# WIRE MODELS
# =============================================================================

class ExternalCalculationRequest(HouseholdInput):
    """Request body: the household plus what to calculate.

    Example:
        ```python
        request = ExternalCalculationRequest.for_household(
            household, program="SNAP", jurisdiction="MD", as_of=date(2024, 6, 1)
        )
        ```
    """

    program: str
    jurisdiction: str
    as_of: date

    @classmethod
    def for_household(
        cls,
        household: HouseholdInput,
        *,
        program: str,
        jurisdiction: str,
        as_of: date,
    ) -> ExternalCalculationRequest:
        return cls(
            **household.model_dump(),
            program=program,
            jurisdiction=jurisdiction,
            as_of=as_of,
        )


class ExternalCalculationResponse(BaseModel):
    """Response body returned by the external calculator."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    program: str
    eligible: bool
    monthly_benefit: int = Field(ge=0, description="Monthly benefit in cents")
    net_income: Optional[int] = Field(default=None, description="Net income in cents")
    calculator_version: Optional[str] = None


# =============================================================================
# PROTOCOLS
# =============================================================================

@runtime_checkable
class ExternalCalculator(Protocol):
    """Protocol for an authoritative third-party benefit calculator.

    Implementations raise ExternalServiceError for every failure (timeout,
    transport error, bad status, malformed body). The reconciler turns that
    into an unverified outcome.
    """

    async def calculate(
        self, request: ExternalCalculationRequest
    ) -> ExternalCalculationResponse:
        """Calculate eligibility and benefit for one program.

        Args:
            request: Household and program to calculate

        Returns:
            The external calculator's determination

        Raises:
            ExternalServiceError: The calculation could not be obtained
        """
        ...
