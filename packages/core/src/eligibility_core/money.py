"""Integer-cent arithmetic helpers.

Every currency amount in the engine is an ``int`` number of cents. Rates
and ratios are ``Decimal`` so that products stay exact until the single
rounding step each formula is allowed.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Rate = Union[Decimal, str, int]

ZERO = Decimal("0")
ONE_CENT = Decimal("1")


def to_rate(value: Rate) -> Decimal:
    """Coerce a rate to ``Decimal`` without passing through float."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal) -> int:
    """Round an exact cent value half-up to a whole cent."""
    return int(value.quantize(ONE_CENT, rounding=ROUND_HALF_UP))


def apply_rate(cents: int, rate: Rate) -> int:
    """Multiply cents by a rate and round once, half-up."""
    return round_half_up(Decimal(cents) * to_rate(rate))


def format_cents(cents: int) -> str:
    """Render cents as a dollar string, e.g. ``150000`` -> ``$1,500.00``."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"
