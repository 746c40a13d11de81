"""Program rule catalog: record schema and read-only lookup.

Rule sets are keyed by (jurisdiction, program, fiscal year) and carry an
effective date range. A new record supersedes an old one by covering a
later period; records are never mutated. The catalog is a snapshot passed
explicitly into every calculation, so historical recalculation only needs
the right as-of date.
"""

from collections.abc import Iterable
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

from eligibility_core.exceptions import (
    CatalogMissingError,
    ConfigurationError,
    InvalidInputError,
)
from eligibility_core.models.household import CategoricalEligibility

logger = structlog.get_logger()


class ProgramKind(str, Enum):
    """Broad family a program belongs to."""

    FOOD = "food"
    MEDICAL = "medical"
    CASH = "cash"
    ENERGY = "energy"
    TAX_CREDIT = "tax_credit"


class DeductionType(str, Enum):
    """Deductions the engine knows how to compute."""

    STANDARD = "standard"
    EARNED_INCOME = "earned_income"
    DEPENDENT_CARE = "dependent_care"
    MEDICAL = "medical"
    SHELTER = "shelter"


# The order the deduction calculator implements. Shelter must come last
# because its income base is income after every other deduction.
DEDUCTION_ORDER: tuple[DeductionType, ...] = (
    DeductionType.STANDARD,
    DeductionType.EARNED_INCOME,
    DeductionType.DEPENDENT_CARE,
    DeductionType.MEDICAL,
    DeductionType.SHELTER,
)


class SizeTable(BaseModel):
    """Cent amounts keyed by household size.

    Sizes missing from the table resolve to the nearest smaller size
    (bracket semantics, e.g. one standard deduction for sizes 1-3). Sizes
    above the largest key add ``additional_member`` per extra person.
    """

    model_config = ConfigDict(frozen=True)

    amounts: dict[int, int]
    additional_member: int = 0

    def for_size(self, household_size: int) -> int:
        if household_size in self.amounts:
            return self.amounts[household_size]
        largest = max(self.amounts)
        if household_size > largest:
            return self.amounts[largest] + self.additional_member * (household_size - largest)
        brackets = [size for size in self.amounts if size <= household_size]
        if not brackets:
            raise KeyError(household_size)
        return self.amounts[max(brackets)]


class IncomeLimitTable(BaseModel):
    """Gross and (optional) net monthly limits by household size."""

    model_config = ConfigDict(frozen=True)

    gross: SizeTable
    net: Optional[SizeTable] = None


class DeductionSchedule(BaseModel):
    """Deduction constants for one program and period.

    ``order`` is the deduction order documented by the program's policy
    manual. Only deductions listed there are applied.
    """

    model_config = ConfigDict(frozen=True)

    standard: Optional[SizeTable] = None
    earned_income_rate: Decimal = Decimal("0")
    dependent_care_cap: Optional[int] = None
    medical_floor: int = 0
    shelter_income_ratio: Decimal = Decimal("0.5")
    shelter_cap: Optional[int] = None
    uncapped_shelter_for_elderly_disabled: bool = True
    order: tuple[DeductionType, ...] = DEDUCTION_ORDER


class BenefitFormula(BaseModel):
    """max(0, max_allotment - round(net * reduction_rate)), with a floor."""

    model_config = ConfigDict(frozen=True)

    max_allotment: SizeTable
    reduction_rate: Decimal
    minimum_benefit: int = 0
    minimum_benefit_max_size: int = 2


class ProgramIncomeLimit(BaseModel):
    """Income limit for one program, household size and fiscal year."""

    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    program: str
    household_size: int
    fiscal_year: int
    gross_limit: int
    net_limit: Optional[int] = None
    effective_date: date
    end_date: Optional[date] = None


class ProgramRuleSet(BaseModel):
    """Everything the engine needs to evaluate one program for a period."""

    model_config = ConfigDict(frozen=True)

    jurisdiction: str
    program: str
    program_name: str
    kind: ProgramKind
    fiscal_year: int
    effective_date: date
    end_date: Optional[date] = None
    income_limits: IncomeLimitTable
    deductions: DeductionSchedule = Field(default_factory=DeductionSchedule)
    benefit: BenefitFormula
    categorical_categories: frozenset[CategoricalEligibility] = frozenset()
    elderly_disabled_gross_waiver: bool = False
    citation: Optional[str] = None

    def covers(self, as_of: date) -> bool:
        """True if this rule set is in effect on ``as_of`` (end date inclusive)."""
        if as_of < self.effective_date:
            return False
        return self.end_date is None or as_of <= self.end_date

    def rule_id(self, step: str) -> str:
        """Stable identifier for a rule of this set, e.g. ``MD-SNAP-FY2025:shelter``."""
        return f"{self.jurisdiction}-{self.program}-FY{self.fiscal_year}:{step}"

    def honors(self, category: CategoricalEligibility) -> bool:
        return category in self.categorical_categories

    def income_limit(self, household_size: int) -> ProgramIncomeLimit:
        """Materialize the limit record for one household size."""
        net = self.income_limits.net
        return ProgramIncomeLimit(
            jurisdiction=self.jurisdiction,
            program=self.program,
            household_size=household_size,
            fiscal_year=self.fiscal_year,
            gross_limit=self.income_limits.gross.for_size(household_size),
            net_limit=net.for_size(household_size) if net is not None else None,
            effective_date=self.effective_date,
            end_date=self.end_date,
        )


def _periods_overlap(a: ProgramRuleSet, b: ProgramRuleSet) -> bool:
    a_end = a.end_date or date.max
    b_end = b.end_date or date.max
    return a.effective_date <= b_end and b.effective_date <= a_end


def _check_deduction_order(rule_set: ProgramRuleSet) -> None:
    positions = [DEDUCTION_ORDER.index(d) for d in rule_set.deductions.order]
    if positions != sorted(set(positions)):
        raise ConfigurationError(
            f"Deduction order for {rule_set.rule_id('deductions')} is not supported",
            config_key=rule_set.rule_id("deductions.order"),
            expected=", ".join(d.value for d in DEDUCTION_ORDER),
            actual=", ".join(d.value for d in rule_set.deductions.order),
        )


class RuleCatalog:
    """Immutable, versioned snapshot of program rule sets.

    Concurrent readers never block each other: after construction nothing
    in the catalog changes.
    """

    def __init__(self, rule_sets: Iterable[ProgramRuleSet], version: str):
        self.version = version
        index: dict[tuple[str, str], list[ProgramRuleSet]] = {}
        for rule_set in rule_sets:
            _check_deduction_order(rule_set)
            key = (rule_set.jurisdiction.upper(), rule_set.program.upper())
            for existing in index.get(key, []):
                if _periods_overlap(existing, rule_set):
                    raise ConfigurationError(
                        f"Overlapping rule sets for {key[0]} {key[1]}: "
                        f"FY{existing.fiscal_year} and FY{rule_set.fiscal_year}",
                        config_key=f"{key[0]}-{key[1]}",
                    )
            index.setdefault(key, []).append(rule_set)
        self._index = {
            key: tuple(sorted(sets, key=lambda s: s.effective_date))
            for key, sets in index.items()
        }
        logger.info(
            "rule_catalog_loaded",
            version=version,
            rule_sets=sum(len(s) for s in self._index.values()),
        )

    @property
    def jurisdictions(self) -> list[str]:
        return sorted({jurisdiction for jurisdiction, _ in self._index})

    def _require_jurisdiction(self, jurisdiction: str) -> str:
        code = jurisdiction.upper()
        if code not in self.jurisdictions:
            raise InvalidInputError(
                f"Unsupported jurisdiction: {jurisdiction}",
                field="jurisdiction",
                value=jurisdiction,
                constraint=f"One of: {', '.join(self.jurisdictions)}",
            )
        return code

    def programs_for(self, jurisdiction: str, as_of: date) -> list[str]:
        """Program codes with a rule set in effect on ``as_of``, sorted."""
        code = self._require_jurisdiction(jurisdiction)
        return sorted(
            program
            for (jur, program), sets in self._index.items()
            if jur == code and any(s.covers(as_of) for s in sets)
        )

    def rule_set(self, jurisdiction: str, program: str, as_of: date) -> ProgramRuleSet:
        """The rule set in effect on ``as_of``.

        Raises:
            InvalidInputError: Unknown jurisdiction or program code.
            CatalogMissingError: The program exists but no record covers the date.
        """
        code = self._require_jurisdiction(jurisdiction)
        sets = self._index.get((code, program.upper()))
        if not sets:
            raise InvalidInputError(
                f"Unknown program {program} for jurisdiction {code}",
                field="program",
                value=program,
            )
        for rule_set in sets:
            if rule_set.covers(as_of):
                return rule_set
        raise CatalogMissingError(
            f"No {code} {program.upper()} rules in effect on {as_of.isoformat()}",
            jurisdiction=code,
            program=program.upper(),
            as_of=as_of,
        )

    def income_limit(
        self,
        jurisdiction: str,
        program: str,
        household_size: int,
        as_of: date,
    ) -> ProgramIncomeLimit:
        """Income limit record covering a program, size and date."""
        rule_set = self.rule_set(jurisdiction, program, as_of)
        try:
            return rule_set.income_limit(household_size)
        except KeyError:
            raise CatalogMissingError(
                f"No {rule_set.program} income limit for household size {household_size}",
                jurisdiction=rule_set.jurisdiction,
                program=rule_set.program,
                household_size=household_size,
                as_of=as_of,
            ) from None
