"""Hybrid reconciliation of local results against an external calculator.

The reconciler wraps the pure engine: it never changes how a local result
is computed, it only decides which benefit figure is authoritative.

    relative_delta = |local - external| / max(external, 1)

Within tolerance the local result stands (verified). Beyond it the external
figure wins and both values are kept on the conflict record. If the
external calculator is unavailable, slow or cancelled, the local result
stands unverified and nothing is raised.
"""

import asyncio
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, computed_field

from eligibility_agents.client import ExternalCalculatorClient
from eligibility_agents.config import ReconciliationConfig
from eligibility_agents.interfaces.base import (
    AuthoritativeSource,
    ExternalCalculationRequest,
    ExternalCalculationResponse,
    ExternalCalculator,
    VerificationStatus,
)
from eligibility_core.catalog.rules import ProgramKind, RuleCatalog
from eligibility_core.catalog.standards import default_catalog
from eligibility_core.exceptions import EligibilityError, ExternalServiceError
from eligibility_core.models.household import HouseholdInput
from eligibility_core.models.results import EligibilityResult, RadarReport

logger = structlog.get_logger()

# Confidence falls linearly from 1.0 at zero variance to this value at the
# tolerance, and is 0 beyond it.
CONFIDENCE_AT_TOLERANCE = Decimal("0.7")
RATIO_PLACES = Decimal("0.0001")


class Conflict(BaseModel):
    """Both determinations when local and external disagree."""

    model_config = ConfigDict(frozen=True)

    local_benefit: int
    external_benefit: int
    local_eligible: bool
    external_eligible: bool


class ReconciliationOutcome(BaseModel):
    """Result of reconciling one program's local result."""

    model_config = ConfigDict(frozen=True)

    program: str
    status: VerificationStatus
    local_result: EligibilityResult
    external_result: Optional[ExternalCalculationResponse] = None
    absolute_delta: Optional[int] = None
    relative_delta: Optional[Decimal] = None
    within_tolerance: bool = False
    eligibility_agrees: Optional[bool] = None
    tolerance: Decimal
    confidence: Decimal = Decimal("0")
    authoritative_source: AuthoritativeSource = AuthoritativeSource.LOCAL
    authoritative_benefit: int
    conflict: Optional[Conflict] = None
    error: Optional[str] = None

    @property
    def is_verified(self) -> bool:
        return self.status == VerificationStatus.VERIFIED


class VerificationStats(BaseModel):
    """Aggregate accuracy of local results over a batch of outcomes."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    verified: int = 0
    conflicts: int = 0
    unverified: int = 0
    average_confidence: Decimal = Decimal("0")
    average_relative_delta: Decimal = Decimal("0")

    @computed_field
    @property
    def match_rate(self) -> Decimal:
        """Share of compared outcomes that verified (unverified ones excluded)."""
        compared = self.verified + self.conflicts
        if not compared:
            return Decimal("0")
        return (Decimal(self.verified) / compared).quantize(RATIO_PLACES)


def relative_delta(local: int, external: int) -> Decimal:
    """|local - external| / max(external, 1), on cent amounts."""
    return Decimal(abs(local - external)) / max(external, 1)


def confidence_score(delta: Decimal, tolerance: Decimal) -> Decimal:
    """1.0 at zero variance, CONFIDENCE_AT_TOLERANCE at the tolerance, 0 beyond."""
    if delta > tolerance:
        return Decimal("0")
    if not tolerance:
        return Decimal("1")
    drop = (Decimal("1") - CONFIDENCE_AT_TOLERANCE) * delta / tolerance
    return (Decimal("1") - drop).quantize(RATIO_PLACES)


def verification_stats(outcomes: Iterable[ReconciliationOutcome]) -> VerificationStats:
    """Summarize a batch of outcomes."""
    outcomes = list(outcomes)
    if not outcomes:
        return VerificationStats()
    compared = [o for o in outcomes if o.relative_delta is not None]
    average_delta = Decimal("0")
    if compared:
        average_delta = (
            sum((o.relative_delta for o in compared), Decimal("0")) / len(compared)
        ).quantize(RATIO_PLACES)
    return VerificationStats(
        total=len(outcomes),
        verified=sum(1 for o in outcomes if o.status == VerificationStatus.VERIFIED),
        conflicts=sum(1 for o in outcomes if o.status == VerificationStatus.CONFLICT),
        unverified=sum(1 for o in outcomes if o.status == VerificationStatus.UNVERIFIED),
        average_confidence=(
            sum((o.confidence for o in outcomes), Decimal("0")) / len(outcomes)
        ).quantize(RATIO_PLACES),
        average_relative_delta=average_delta,
    )


class HybridReconciler:
    """
    Verify local eligibility results against an external calculator.

    Args:
        calculator: External calculator (default: HTTP client built from config)
        config: Tolerances and external service settings
        catalog: Catalog used to look up a program's kind for its tolerance
    """

    def __init__(
        self,
        calculator: Optional[ExternalCalculator] = None,
        config: Optional[ReconciliationConfig] = None,
        catalog: Optional[RuleCatalog] = None,
    ):
        self.config = config or ReconciliationConfig()
        self.calculator = calculator or ExternalCalculatorClient(self.config)
        self.catalog = catalog or default_catalog()

    def _program_kind(self, result: EligibilityResult) -> Optional[ProgramKind]:
        try:
            return self.catalog.rule_set(result.jurisdiction, result.program, result.as_of).kind
        except EligibilityError:
            return None

    def tolerance_for(self, result: EligibilityResult) -> Decimal:
        """Tolerance applied to one program's result."""
        return self.config.tolerance_for(result.program, self._program_kind(result))

    def _unverified(
        self, local_result: EligibilityResult, tolerance: Decimal, error: str
    ) -> ReconciliationOutcome:
        return ReconciliationOutcome(
            program=local_result.program,
            status=VerificationStatus.UNVERIFIED,
            local_result=local_result,
            tolerance=tolerance,
            authoritative_source=AuthoritativeSource.LOCAL,
            authoritative_benefit=local_result.monthly_benefit,
            error=error,
        )

    def compare(
        self,
        local_result: EligibilityResult,
        external: ExternalCalculationResponse,
        tolerance: Decimal,
    ) -> ReconciliationOutcome:
        """Decide verified or conflict for a local and an external result."""
        local = local_result.monthly_benefit
        delta = relative_delta(local, external.monthly_benefit)
        within = delta <= tolerance
        agrees = local_result.eligible == external.eligible

        if within and agrees:
            return ReconciliationOutcome(
                program=local_result.program,
                status=VerificationStatus.VERIFIED,
                local_result=local_result,
                external_result=external,
                absolute_delta=abs(local - external.monthly_benefit),
                relative_delta=delta,
                within_tolerance=True,
                eligibility_agrees=True,
                tolerance=tolerance,
                confidence=confidence_score(delta, tolerance),
                authoritative_source=AuthoritativeSource.LOCAL,
                authoritative_benefit=local,
            )

        logger.warning(
            "reconciliation_conflict",
            program=local_result.program,
            local_benefit=local,
            external_benefit=external.monthly_benefit,
            relative_delta=str(delta),
            tolerance=str(tolerance),
            eligibility_agrees=agrees,
        )
        return ReconciliationOutcome(
            program=local_result.program,
            status=VerificationStatus.CONFLICT,
            local_result=local_result,
            external_result=external,
            absolute_delta=abs(local - external.monthly_benefit),
            relative_delta=delta,
            within_tolerance=within,
            eligibility_agrees=agrees,
            tolerance=tolerance,
            confidence=Decimal("0"),
            authoritative_source=AuthoritativeSource.EXTERNAL,
            authoritative_benefit=external.monthly_benefit,
            conflict=Conflict(
                local_benefit=local,
                external_benefit=external.monthly_benefit,
                local_eligible=local_result.eligible,
                external_eligible=external.eligible,
            ),
        )

    async def reconcile(
        self,
        household: HouseholdInput,
        program: str,
        local_result: EligibilityResult,
    ) -> ReconciliationOutcome:
        """Verify one local result; never raises for external failures.

        A cancellation raised by the external call itself degrades to
        ``unverified``. Cancelling the task running ``reconcile`` is not
        absorbed: ``CancelledError`` propagates to the caller.
        """
        tolerance = self.tolerance_for(local_result)
        if not self.config.enabled:
            return self._unverified(local_result, tolerance, "reconciliation disabled")

        request = ExternalCalculationRequest.for_household(
            household,
            program=program,
            jurisdiction=local_result.jurisdiction,
            as_of=local_result.as_of,
        )
        try:
            external = await self.calculator.calculate(request)
        except ExternalServiceError as e:
            logger.warning("external_calculator_unavailable", program=program, **e.details)
            return self._unverified(local_result, tolerance, str(e))
        except asyncio.CancelledError:
            logger.warning("external_calculation_cancelled", program=program)
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            return self._unverified(local_result, tolerance, "external calculation cancelled")

        outcome = self.compare(local_result, external, tolerance)
        logger.info(
            "reconciliation_completed",
            program=program,
            status=outcome.status.value,
            confidence=str(outcome.confidence),
        )
        return outcome

    async def reconcile_report(
        self,
        household: HouseholdInput,
        report: RadarReport,
    ) -> list[ReconciliationOutcome]:
        """Reconcile every result of a radar report concurrently.

        Outcomes are in the report's program order. A program whose
        reconciliation was cancelled or failed keeps its local result as
        ``unverified``; cancelling this coroutine cancels the whole batch.
        """
        gathered = await asyncio.gather(
            *(self.reconcile(household, r.program, r) for r in report.results),
            return_exceptions=True,
        )
        outcomes = []
        for result, outcome in zip(report.results, gathered):
            if isinstance(outcome, asyncio.CancelledError):
                logger.warning("reconciliation_cancelled", program=result.program)
                outcome = self._unverified(
                    result, self.tolerance_for(result), "external calculation cancelled"
                )
            elif isinstance(outcome, BaseException):
                logger.error(
                    "reconciliation_failed",
                    program=result.program,
                    error=repr(outcome),
                )
                outcome = self._unverified(result, self.tolerance_for(result), repr(outcome))
            outcomes.append(outcome)
        return outcomes
