"""
Abstract base class and shared math for the pricing calculators.

Money is carried as float and rounded to cents with round(x, 2) at the
points where a figure is reported. Totals are built from already-rounded
parts so that total == subtotal + labor + tax holds on the formatted strings.
"""

import logging
import math
import re
from abc import ABC, abstractmethod
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

_DIMENSION_LABEL = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[xX×]\s*(\d+(?:\.\d+)?)")


class BaseCalculator(ABC):
    """All pricing calculators inherit from this."""

    @abstractmethod
    def calculate(self, *args, **kwargs):
        pass

    # --- Helper methods for all calculators ---

    def increment_charge(self, value: Optional[float], base: float,
                         increment: float, cost_per_increment: float) -> float:
        """
        Surcharge for going past a baseline dimension.
        Every started increment over the base is charged in full.
        """
        if value is None or not increment or not cost_per_increment:
            return 0.0
        over = value - base
        if over <= 0:
            return 0.0
        # Float noise like 36.000000001 - 36 must not bill a whole extra increment
        steps = math.ceil(round(over / increment, 9))
        return max(0, steps) * cost_per_increment

    def money(self, value: float) -> float:
        """Round to cents."""
        return round(value + 0.0, 2)

    def money_str(self, value: float) -> str:
        return "%.2f" % self.money(value)

    def parse_dimension_label(self, label: Optional[str]) -> Optional[Tuple[float, float]]:
        """Parse a 'thickness x width' label like '1x9.25' or '2 × 11.25'."""
        if not label:
            return None
        match = _DIMENSION_LABEL.match(str(label))
        if not match:
            return None
        return float(match.group(1)), float(match.group(2))

    def to_fraction(self, value: float) -> str:
        """Inches as a whole number plus a fraction rounded to the nearest 32nd."""
        return to_fraction(value)


def to_fraction(value) -> str:
    """
    7.7142857 -> '7 23/32', 0.5 -> '1/2', 36 -> '36', -1.5 -> '-1 1/2'.
    Non-numeric and non-finite values render as '0'.
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        return "0"
    if not num or not math.isfinite(num):
        return "0"
    if num < 0:
        magnitude = to_fraction(-num)
        return magnitude if magnitude == "0" else "-" + magnitude

    whole = math.floor(num)
    numerator = round((num - whole) * 32)
    if numerator == 0:
        return str(whole)
    if numerator == 32:
        return str(whole + 1)

    g = math.gcd(numerator, 32)
    fraction = "%d/%d" % (numerator // g, 32 // g)
    if whole > 0:
        return "%d %s" % (whole, fraction)
    return fraction
