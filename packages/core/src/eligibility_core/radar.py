"""Eligibility radar: every program of a jurisdiction in one pass.

Programs are evaluated in parallel on a thread pool. Each evaluation builds
its own rule trail and reads only the immutable catalog, so no locking is
needed. The report is sorted by program code and carries no timestamps;
scanning the same household twice yields equal reports.
"""

from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from typing import Optional, Union

import structlog

from eligibility_core.models.household import HouseholdInput
from eligibility_core.models.results import (
    EligibilityResult,
    ProgramChange,
    RadarAlert,
    RadarReport,
)
from eligibility_core.money import format_cents

logger = structlog.get_logger()

DEFAULT_ALERT_MARGIN = Decimal("0.10")
DEFAULT_MAX_WORKERS = 4

PreviousResults = Union[RadarReport, Mapping[str, EligibilityResult]]
Evaluator = Callable[[str], EligibilityResult]


def find_alerts(
    results: list[EligibilityResult],
    alert_margin: Decimal = DEFAULT_ALERT_MARGIN,
) -> list[RadarAlert]:
    """Alert on eligible programs whose income sits within the margin of a limit.

    The net test is watched when it ran; otherwise the gross test. Programs
    reached through categorical eligibility never alert.
    """
    alerts: list[RadarAlert] = []
    for result in results:
        if not result.eligible or result.is_categorical:
            continue
        if result.net_test.applied:
            test = result.net_test
        elif result.gross_test.applied:
            test = result.gross_test
        else:
            continue
        if not test.limit:
            continue
        headroom = test.limit - test.actual
        if Decimal(headroom) > Decimal(test.limit) * alert_margin:
            continue
        margin = (Decimal(headroom) / Decimal(test.limit)).quantize(Decimal("0.0001"))
        alerts.append(RadarAlert(
            program=result.program,
            test=test.name,
            limit=test.limit,
            actual=test.actual,
            headroom=headroom,
            margin=margin,
            message=(
                f"{result.program_name}: {test.name} income is "
                f"{format_cents(headroom)} below the {format_cents(test.limit)} limit"
            ),
        ))
    return alerts


def detect_changes(
    previous: PreviousResults,
    results: list[EligibilityResult],
) -> list[ProgramChange]:
    """Per-program benefit deltas and eligibility flips against earlier results.

    Covers every program in either result set. A program missing from the
    new scan (its rules lapsed on the new date) counts as ineligible with
    no benefit.
    """
    if isinstance(previous, RadarReport):
        previous = {r.program: r for r in previous.results}
    current = {r.program: r for r in results}

    changes = []
    for program in sorted(set(current) | set(previous)):
        before = previous.get(program)
        after = current.get(program)
        changes.append(ProgramChange(
            program=program,
            previous_eligible=before.eligible if before is not None else None,
            current_eligible=after.eligible if after is not None else False,
            previous_benefit=before.monthly_benefit if before is not None else 0,
            current_benefit=after.monthly_benefit if after is not None else 0,
        ))
    return changes


def scan_programs(
    evaluate: Evaluator,
    household: HouseholdInput,
    programs: list[str],
    jurisdiction: str,
    as_of: date,
    catalog_version: str,
    previous_results: Optional[PreviousResults] = None,
    alert_margin: Decimal = DEFAULT_ALERT_MARGIN,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> RadarReport:
    """Evaluate ``programs`` in parallel and assemble a radar report.

    Args:
        evaluate: Full single-program calculation for this household
        programs: Program codes to scan
        previous_results: Earlier report (or program -> result mapping)
            to compute changes against

    Raises:
        InvalidInputError, CatalogMissingError: Propagated from any program.
    """
    programs = sorted(programs)
    logger.info(
        "radar_scan_started",
        household_id=household.household_id,
        jurisdiction=jurisdiction,
        as_of=as_of.isoformat(),
        programs=programs,
    )

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(executor.map(evaluate, programs))

    alerts = find_alerts(results, alert_margin)
    changes = detect_changes(previous_results, results) if previous_results is not None else None

    report = RadarReport(
        household_id=household.household_id,
        jurisdiction=jurisdiction,
        as_of=as_of,
        results=results,
        alerts=alerts,
        changes=changes,
        catalog_version=catalog_version,
    )
    logger.info(
        "radar_scan_completed",
        household_id=household.household_id,
        eligible_programs=report.eligible_programs,
        total_monthly_benefit=report.total_monthly_benefit,
        alerts=len(alerts),
    )
    return report
