"""Applied-rule trail for calculation traceability.

Every cent that moves between gross income and the final benefit is
recorded as an AppliedRule, in the order the engine applied it. A test (or
an auditor) can re-derive a result purely from the household input and
the rule trail:

    sum(income amounts) == gross income
    gross - sum(deduction amounts) + sum(net income amounts) == net income
    sum(benefit amounts) == monthly benefit

Benefit rule amounts are signed: the allotment is positive, the reduction
negative, and the zero floor and minimum top-up positive.
"""

from enum import Enum
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()


class RuleKind(str, Enum):
    """What part of the calculation a rule belongs to."""

    INCOME = "income"
    DEDUCTION = "deduction"
    NET_INCOME = "net_income"
    CATEGORICAL = "categorical"
    THRESHOLD = "threshold"
    BENEFIT = "benefit"


class AppliedRule(BaseModel):
    """Single rule application recorded during a calculation.

    Attributes:
        rule_id: Catalog rule identifier, e.g. "MD-SNAP-FY2024:standard_deduction"
        step: Short machine name of the step
        kind: Calculation phase the rule belongs to
        amount: Cents moved by this rule (0 for pass/fail tests)
        input_value: Inputs the rule saw, rendered for humans
        output_value: What the rule produced, rendered for humans
        description: Human-readable explanation
    """

    model_config = ConfigDict(frozen=True)

    rule_id: str
    step: str
    kind: RuleKind
    amount: int = 0
    input_value: Optional[str] = None
    output_value: Optional[str] = None
    description: str = ""


class RuleTrail(BaseModel):
    """Ordered collection of rules applied during one calculation.

    A trail is created per calculation and never shared between threads.
    """

    program: str
    rules: list[AppliedRule] = Field(default_factory=list)

    def add(
        self,
        rule_id: str,
        step: str,
        kind: RuleKind,
        amount: int = 0,
        input_value: Optional[str] = None,
        output_value: Optional[str] = None,
        description: str = "",
    ) -> AppliedRule:
        """Record a rule application and log it."""
        rule = AppliedRule(
            rule_id=rule_id,
            step=step,
            kind=kind,
            amount=amount,
            input_value=input_value,
            output_value=output_value,
            description=description,
        )
        self.rules.append(rule)
        logger.info(
            "calculation_step",
            program=self.program,
            rule_id=rule_id,
            step=step,
            amount=amount,
            input=input_value,
            output=output_value,
        )
        return rule

    def of_kind(self, kind: RuleKind) -> list[AppliedRule]:
        """All recorded rules of one kind, in order."""
        return [r for r in self.rules if r.kind == kind]

    def total(self, kind: RuleKind) -> int:
        """Sum of cents moved by rules of one kind."""
        return sum(r.amount for r in self.of_kind(kind))

    @property
    def rule_ids(self) -> list[str]:
        return [r.rule_id for r in self.rules]
