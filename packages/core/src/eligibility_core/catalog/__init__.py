"""Program rule catalog: schema, lookup and seeded standards."""

from eligibility_core.catalog.rules import (
    DEDUCTION_ORDER,
    BenefitFormula,
    DeductionSchedule,
    DeductionType,
    IncomeLimitTable,
    ProgramIncomeLimit,
    ProgramKind,
    ProgramRuleSet,
    RuleCatalog,
    SizeTable,
)
from eligibility_core.catalog.standards import (
    CATALOG_VERSION,
    default_catalog,
    default_rule_sets,
    get_catalog_version,
)

__all__ = [
    "DEDUCTION_ORDER",
    "BenefitFormula",
    "DeductionSchedule",
    "DeductionType",
    "IncomeLimitTable",
    "ProgramIncomeLimit",
    "ProgramKind",
    "ProgramRuleSet",
    "RuleCatalog",
    "SizeTable",
    "CATALOG_VERSION",
    "default_catalog",
    "default_rule_sets",
    "get_catalog_version",
]
