"""
Linear product pricing and the calculator registry.

Tests:
1.    72" handrail, $12.00 / 6", multiplier 1.5, qty 2 → 432.00, no labor
2.    Subtotal scales linearly with quantity
3.    Landing tread stock carries labor when requested
4.    Rail parts priced per piece, length ignored
5-7.  Invalid length / quantity rejected
8-10. Registry lookups
"""

import pytest

from backend.calculators.errors import PricingValidationError
from backend.calculators.linear_pricer import round_to_increment, LinearProductCalculator
from backend.calculators.registry import (
    calculate_linear_price, get_calculator, has_calculator, list_calculators,
)


def test_handrail_72_inches_cherry(catalog):
    result = calculate_linear_price(catalog.get_product(1), catalog.get_material(40), 72, 2,
                                    include_labor=True)
    assert result.details["segments"] == 12
    assert result.details["base_price"] == 216.0
    assert result.subtotal == 432.0
    assert result.labor_cost == 0.0   # handrail never carries labor
    assert result.total == 432.0


def test_subtotal_linear_in_quantity(catalog):
    product, material = catalog.get_product(1), catalog.get_material(21)
    one = calculate_linear_price(product, material, 48, 1)
    five = calculate_linear_price(product, material, 48, 5)
    assert five.subtotal == round(one.subtotal * 5, 2)


def test_landing_tread_labor_only_when_requested(catalog):
    product, material = catalog.get_product(3), catalog.get_material(20)
    without = calculate_linear_price(product, material, 36, 2)
    with_labor = calculate_linear_price(product, material, 36, 2, include_labor=True)
    assert without.subtotal == 108.0      # 6 × 9.00 × 2
    assert without.labor_cost == 0.0
    assert with_labor.labor_cost == 8.0
    assert with_labor.total == 116.0


def test_rail_parts_priced_per_piece(catalog):
    result = calculate_linear_price(catalog.get_product(4), catalog.get_material(21), None, 4,
                                    include_labor=True)
    assert result.details["base_price"] == 10.0   # 8.00 × 1.25
    assert result.subtotal == 40.0
    assert result.labor_cost == 8.0
    assert result.total == 48.0


@pytest.mark.parametrize("length", [0, -6, 70, 246, None])
def test_invalid_lengths_rejected(catalog, length):
    with pytest.raises(PricingValidationError):
        calculate_linear_price(catalog.get_product(1), catalog.get_material(20), length, 1)


def test_zero_quantity_rejected(catalog):
    with pytest.raises(PricingValidationError):
        calculate_linear_price(catalog.get_product(1), catalog.get_material(20), 72, 0)


def test_rail_part_calculator_refuses_handrail(catalog):
    with pytest.raises(PricingValidationError):
        get_calculator("rail_parts").calculate(catalog.get_product(1), catalog.get_material(20), 72, 1)


def test_round_to_increment():
    assert round_to_increment(70) == 72
    assert round_to_increment(2) == 6
    assert round_to_increment(300) == 240


def test_registry_covers_every_product_type():
    assert set(list_calculators()) == {"handrail", "landing_tread", "rail_parts"}
    assert has_calculator("handrail")
    assert not has_calculator("stair")
    assert isinstance(get_calculator("landing_tread"), LinearProductCalculator)


def test_registry_unknown_type_raises():
    with pytest.raises(ValueError, match="No calculator registered"):
        get_calculator("newel")
