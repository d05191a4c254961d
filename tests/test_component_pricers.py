"""
Component pricers — dimensional surcharges, mitre, material multiplier.

Tests:
1-3.  Increment charges: at base, partial increment, float noise
4-5.  Tread with oversize + mitre + multiplier
6.    Riser quantity
7.    Stringer priced per riser
8.    Special part splits parts and labor
9-10. Dimension label parsing and fraction display
"""

from datetime import date

import pytest

from backend.calculators.base import to_fraction
from backend.calculators.catalog import MaterialEntry, PriceRuleEntry, SpecialPartEntry
from backend.calculators.component_pricers import ComponentPricer
from backend.models import BoardRole

RED_OAK = MaterialEntry(id=20, name="Red Oak", multiplier=1.0)
WHITE_OAK = MaterialEntry(id=21, name="White Oak", multiplier=1.25)


def _tread_rule():
    return PriceRuleEntry(
        id=1, board_role=BoardRole.BOX_TREAD, material_id=None, begin_date=date(2024, 1, 1),
        end_date=None, unit_cost=45.0, full_mitre_cost=25.0,
        base_length=36.0, length_increment=6.0, length_increment_cost=6.0,
        base_width=11.5, width_increment=1.0, width_increment_cost=3.0,
    )


def _stringer_rule():
    return PriceRuleEntry(
        id=6, board_role=BoardRole.STRINGER, material_id=None, begin_date=date(2024, 1, 1),
        end_date=None, unit_cost=6.5,
        base_width=9.25, width_increment=1.0, width_increment_cost=0.75,
        base_thickness=1.0, thickness_increment=0.25, thickness_increment_cost=1.0,
    )


def test_no_charge_at_or_below_base():
    pricer = ComponentPricer()
    assert pricer.increment_charge(36.0, 36.0, 6.0, 6.0) == 0.0
    assert pricer.increment_charge(3.5, 11.5, 1.0, 3.0) == 0.0


def test_started_increment_is_charged_in_full():
    pricer = ComponentPricer()
    assert pricer.increment_charge(37.0, 36.0, 6.0, 6.0) == 6.0
    assert pricer.increment_charge(42.0, 36.0, 6.0, 6.0) == 6.0
    assert pricer.increment_charge(42.5, 36.0, 6.0, 6.0) == 12.0


def test_float_noise_does_not_add_an_increment():
    pricer = ComponentPricer()
    assert pricer.increment_charge(11.5 + 1.0000000001, 11.5, 1.0, 3.0) == 3.0


def test_tread_base_price_red_oak():
    price = ComponentPricer().price_tread(_tread_rule(), RED_OAK, stair_width=36.0, tread_width=11.5)
    assert price.unit_price == 45.0
    assert price.total_price == 45.0
    assert price.oversized_charge == 0.0
    assert price.rule_id == 1


def test_tread_oversize_mitre_and_multiplier():
    """(45 + 6 length + 6 width + 25 mitre) × 1.25 = 102.50"""
    price = ComponentPricer().price_tread(_tread_rule(), WHITE_OAK, stair_width=42.0,
                                          tread_width=12.75, full_mitre=True)
    assert price.length_charge == 6.0
    assert price.width_charge == 6.0
    assert price.mitre_charge == 25.0
    assert price.unit_price == 102.5
    assert price.to_dict()["oversized_charge"] == 12.0


def test_riser_quantity_multiplies_total():
    rule = PriceRuleEntry(id=5, board_role=BoardRole.RISER, material_id=None, begin_date=date(2024, 1, 1),
                          end_date=None, unit_cost=18.0, base_width=8.0)
    price = ComponentPricer().price_riser(rule, RED_OAK, stair_width=36.0, riser_width=8.0, riser_count=14)
    assert price.quantity == 14
    assert price.total_price == 252.0


def test_stringer_priced_per_riser():
    """width +2 → 1.50, thickness +0.5 → 2.00; (6.50 + 3.50) × 14 risers = 140.00"""
    price = ComponentPricer().price_stringer(_stringer_rule(), RED_OAK, width=11.25, thickness=1.5,
                                             num_risers=14)
    assert price.unit_price == 10.0
    assert price.quantity == 14
    assert price.total_price == 140.0


def test_special_part_labor_kept_separate():
    part = SpecialPartEntry(part_id=1, material_id=20, description="Scroll bracket",
                            unit_cost=18.0, labor_cost=6.0)
    price = ComponentPricer().price_special_part(part, 3)
    assert price.total_price == 54.0
    assert price.labor_total == 18.0
    assert price.line_total == 72.0


@pytest.mark.parametrize("label,expected", [
    ("1x9.25", (1.0, 9.25)),
    ("2 × 11.25", (2.0, 11.25)),
    ("1.5X10", (1.5, 10.0)),
    ("stringer", None),
    ("", None),
])
def test_parse_dimension_label(label, expected):
    assert ComponentPricer().parse_dimension_label(label) == expected


@pytest.mark.parametrize("value,expected", [
    (108 / 14, "7 23/32"),
    (0.5, "1/2"),
    (36, "36"),
    (7.999, "8"),
    (0, "0"),
    (-0.5, "-1/2"),
    (-1.5, "-1 1/2"),
    (-0.001, "0"),
    (float("nan"), "0"),
    (float("inf"), "0"),
])
def test_to_fraction(value, expected):
    assert to_fraction(value) == expected
