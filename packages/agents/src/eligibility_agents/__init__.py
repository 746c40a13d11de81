"""Eligibility Agents - Settings and external verification for the engine."""

from eligibility_agents.client import ExternalCalculatorClient
from eligibility_agents.config import (
    EngineSettings,
    RadarConfig,
    ReconciliationConfig,
)
from eligibility_agents.logging_config import configure_logging
from eligibility_agents.reconciler import (
    Conflict,
    HybridReconciler,
    ReconciliationOutcome,
    VerificationStats,
    verification_stats,
)

__version__ = "0.1.0"

__all__ = [
    "EngineSettings",
    "RadarConfig",
    "ReconciliationConfig",
    "configure_logging",
    "ExternalCalculatorClient",
    "Conflict",
    "HybridReconciler",
    "ReconciliationOutcome",
    "VerificationStats",
    "verification_stats",
]
