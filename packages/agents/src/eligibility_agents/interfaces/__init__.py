"""Interfaces between the reconciler and external calculators.

Available Interfaces:
    ExternalCalculator: Protocol any external calculator must satisfy
    ExternalCalculationRequest: Request body sent to the calculator
    ExternalCalculationResponse: Response body returned by the calculator
    VerificationStatus: verified / conflict / unverified
    AuthoritativeSource: local / external
"""

from eligibility_agents.interfaces.base import (
    AuthoritativeSource,
    ExternalCalculationRequest,
    ExternalCalculationResponse,
    ExternalCalculator,
    VerificationStatus,
)

__all__ = [
    "AuthoritativeSource",
    "ExternalCalculationRequest",
    "ExternalCalculationResponse",
    "ExternalCalculator",
    "VerificationStatus",
]
