"""Categorical eligibility resolution.

A household that already receives a qualifying benefit is eligible for a
program that honors that benefit, without any income test. Net income is
still computed because the benefit formula needs it.
"""

from typing import Optional

import structlog

from eligibility_core.catalog.rules import ProgramRuleSet
from eligibility_core.exceptions import ConfigurationError
from eligibility_core.models.audit import RuleKind, RuleTrail
from eligibility_core.models.household import CategoricalEligibility

logger = structlog.get_logger()

# One entry per tag, NONE included, so a new tag cannot be resolved
# without being described here first.
CATEGORY_DESCRIPTIONS: dict[CategoricalEligibility, Optional[str]] = {
    CategoricalEligibility.NONE: None,
    CategoricalEligibility.CASH_ASSISTANCE: "household receives cash assistance",
    CategoricalEligibility.SUPPLEMENTAL_SECURITY: "household receives Supplemental Security Income",
    CategoricalEligibility.BROAD_BASED: "household qualifies for broad-based categorical eligibility",
}


def resolve_categorical(
    rule_set: ProgramRuleSet,
    category: CategoricalEligibility,
    trail: RuleTrail,
) -> Optional[CategoricalEligibility]:
    """Return the triggering category when the program honors it, else None.

    An honored tag is recorded as a CATEGORICAL rule and the income tests
    are skipped. A tag the program does not honor is recorded as
    ``not_recognized`` and the income tests run as usual.
    """
    if category not in CATEGORY_DESCRIPTIONS:
        raise ConfigurationError(
            f"No resolution defined for categorical tag {category!r}",
            config_key="categorical_eligibility",
            actual=str(category),
        )
    description = CATEGORY_DESCRIPTIONS[category]
    if description is None:
        return None

    if rule_set.honors(category):
        trail.add(
            rule_id=rule_set.rule_id(f"categorical_{category.value}"),
            step="categorical_eligibility",
            kind=RuleKind.CATEGORICAL,
            input_value=category.value,
            output_value="eligible",
            description=f"Categorically eligible: {description}; income tests bypassed",
        )
        logger.info(
            "categorical_eligibility_applied",
            program=rule_set.program,
            category=category.value,
        )
        return category

    trail.add(
        rule_id=rule_set.rule_id("categorical_not_recognized"),
        step="categorical_eligibility",
        kind=RuleKind.CATEGORICAL,
        input_value=category.value,
        output_value="not_recognized",
        description=f"{rule_set.program} does not confer eligibility because the "
        f"{description}; income tests apply",
    )
    return None
