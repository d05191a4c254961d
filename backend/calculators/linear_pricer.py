"""
Linear product pricing — handrail, landing tread stock and rail parts.

Handrail / landing tread (priced by length in 6" segments):
    segments   = length / 6
    base_price = segments × cost_per_6_inches × material multiplier
    subtotal   = base_price × quantity

Rail parts (priced by piece):
    base_price = base_price × material multiplier
    subtotal   = base_price × quantity

Labor = labor_install_cost × quantity when requested. Handrails never carry
installation labor.
"""

import logging
from dataclasses import dataclass, field, asdict
from typing import Optional

from .base import BaseCalculator
from .catalog import MaterialEntry, ProductEntry
from .errors import PricingValidationError
from ..models import ProductType

logger = logging.getLogger(__name__)

SEGMENT_INCHES = 6
MIN_LENGTH_INCHES = 6
MAX_LENGTH_INCHES = 240


@dataclass(frozen=True)
class LinearPriceResult:
    subtotal: float
    labor_cost: float
    total: float
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


def round_to_increment(length_inches: float) -> int:
    """Snap a user-entered length to the nearest 6" and clamp to the sellable range."""
    snapped = int(round(float(length_inches) / SEGMENT_INCHES)) * SEGMENT_INCHES
    return max(MIN_LENGTH_INCHES, min(MAX_LENGTH_INCHES, snapped))


class LinearProductCalculator(BaseCalculator):
    """Handrail and landing tread stock, priced per 6" of length."""

    product_types = (ProductType.HANDRAIL, ProductType.LANDING_TREAD)

    def calculate(self, product: ProductEntry, material: MaterialEntry,
                  length_inches: Optional[float], quantity: int,
                  include_labor: bool = False) -> LinearPriceResult:
        self._check_product(product)
        self._check_quantity(quantity)
        length = self._check_length(length_inches)

        segments = length / SEGMENT_INCHES
        base_price = self.money(segments * product.cost_per_6_inches * material.multiplier)
        subtotal = self.money(base_price * quantity)
        labor_per_unit = self._labor_per_unit(product, include_labor)
        labor_cost = self.money(labor_per_unit * quantity)

        return LinearPriceResult(
            subtotal=subtotal,
            labor_cost=labor_cost,
            total=self.money(subtotal + labor_cost),
            details={
                "product": product.name,
                "product_type": product.product_type.value,
                "material": material.name,
                "length": length,
                "quantity": quantity,
                "segments": segments,
                "cost_per_6_inches": product.cost_per_6_inches,
                "material_multiplier": material.multiplier,
                "base_price": base_price,
                "labor_cost_per_unit": labor_per_unit,
            },
        )

    def _labor_per_unit(self, product: ProductEntry, include_labor: bool) -> float:
        if not include_labor or product.product_type == ProductType.HANDRAIL:
            return 0.0
        return product.labor_install_cost

    def _check_product(self, product: ProductEntry):
        if product.product_type not in self.product_types:
            raise PricingValidationError(
                f"{product.name} is a {product.product_type.value} product and cannot be priced "
                f"by {type(self).__name__}"
            )

    def _check_quantity(self, quantity: int):
        if quantity is None or quantity < 1:
            raise PricingValidationError("Quantity must be greater than 0")

    def _check_length(self, length_inches: Optional[float]) -> float:
        if length_inches is None or length_inches <= 0:
            raise PricingValidationError("Length must be greater than 0")
        if length_inches % SEGMENT_INCHES:
            raise PricingValidationError(
                f"Length must be a multiple of {SEGMENT_INCHES}\" (got {length_inches}\")"
            )
        if not MIN_LENGTH_INCHES <= length_inches <= MAX_LENGTH_INCHES:
            raise PricingValidationError(
                f"Length must be between {MIN_LENGTH_INCHES}\" and {MAX_LENGTH_INCHES}\""
            )
        return float(length_inches)


class RailPartsCalculator(LinearProductCalculator):
    """Rail parts — one base price per piece, no length."""

    product_types = (ProductType.RAIL_PARTS,)

    def calculate(self, product: ProductEntry, material: MaterialEntry,
                  length_inches: Optional[float], quantity: int,
                  include_labor: bool = False) -> LinearPriceResult:
        self._check_product(product)
        self._check_quantity(quantity)

        base_price = self.money(product.base_price * material.multiplier)
        subtotal = self.money(base_price * quantity)
        labor_per_unit = self._labor_per_unit(product, include_labor)
        labor_cost = self.money(labor_per_unit * quantity)

        return LinearPriceResult(
            subtotal=subtotal,
            labor_cost=labor_cost,
            total=self.money(subtotal + labor_cost),
            details={
                "product": product.name,
                "product_type": product.product_type.value,
                "material": material.name,
                "quantity": quantity,
                "unit_base_price": product.base_price,
                "material_multiplier": material.multiplier,
                "base_price": base_price,
                "labor_cost_per_unit": labor_per_unit,
            },
        )
