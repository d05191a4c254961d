"""
Calculator registry — maps catalog product types to linear calculators.

Stairs are not a catalog product; they go through StairPriceCalculator.
"""

from typing import Optional

from .base import BaseCalculator
from .catalog import MaterialEntry, ProductEntry
from .linear_pricer import LinearProductCalculator, RailPartsCalculator, LinearPriceResult
from ..models import ProductType

CALCULATOR_REGISTRY: dict[str, type] = {
    ProductType.HANDRAIL.value: LinearProductCalculator,
    ProductType.LANDING_TREAD.value: LinearProductCalculator,
    ProductType.RAIL_PARTS.value: RailPartsCalculator,
}


def get_calculator(product_type) -> BaseCalculator:
    """Returns an instance of the calculator for a product type, or raises ValueError."""
    key = getattr(product_type, "value", product_type)
    if key not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for product type: {key}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[key]()


def has_calculator(product_type) -> bool:
    return getattr(product_type, "value", product_type) in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    return list(CALCULATOR_REGISTRY.keys())


def calculate_linear_price(product: ProductEntry, material: MaterialEntry,
                           length_inches: Optional[float], quantity: int,
                           include_labor: bool = False) -> LinearPriceResult:
    """Price any non-stair catalog product with the calculator for its type."""
    calculator = get_calculator(product.product_type)
    return calculator.calculate(product, material, length_inches, quantity, include_labor)
