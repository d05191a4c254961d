"""
Per-component pricers — tread, landing tread, riser, stringer, special part.

Each takes a resolved PriceRuleEntry (or SpecialPartEntry), the material and a
dimension/quantity tuple, and returns a ComponentPrice. The material
multiplier is applied once, to the sum of base cost and surcharges:

    unit_price  = (unit_cost + dimensional charges + mitre) × multiplier
    total_price = unit_price × quantity

Stringers are priced per riser, so their quantity is risers × stringer count.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from .base import BaseCalculator
from .catalog import MaterialEntry, PriceRuleEntry, SpecialPartEntry


@dataclass(frozen=True)
class ComponentPrice:
    base_price: float
    length_charge: float
    width_charge: float
    thickness_charge: float
    mitre_charge: float
    material_multiplier: float
    unit_price: float
    quantity: float
    total_price: float
    rule_id: Optional[int] = None

    @property
    def oversized_charge(self) -> float:
        return round(self.length_charge + self.width_charge + self.thickness_charge, 2)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["oversized_charge"] = self.oversized_charge
        return data


@dataclass(frozen=True)
class SpecialPartPrice:
    part_id: int
    material_id: int
    description: str
    quantity: int
    unit_price: float
    labor_cost: float
    total_price: float     # parts only, counts toward the subtotal
    labor_total: float     # installation, counts toward labor
    line_total: float

    def to_dict(self) -> dict:
        return asdict(self)


class ComponentPricer(BaseCalculator):
    """Prices one stair component against its resolved rule."""

    def calculate(self, rule: PriceRuleEntry, material: MaterialEntry,
                  length: Optional[float] = None, width: Optional[float] = None,
                  thickness: Optional[float] = None, quantity: float = 1,
                  full_mitre: bool = False) -> ComponentPrice:
        length_charge = self.increment_charge(
            length, rule.base_length, rule.length_increment, rule.length_increment_cost)
        width_charge = self.increment_charge(
            width, rule.base_width, rule.width_increment, rule.width_increment_cost)
        thickness_charge = self.increment_charge(
            thickness, rule.base_thickness, rule.thickness_increment, rule.thickness_increment_cost)
        mitre_charge = rule.full_mitre_cost if full_mitre else 0.0

        multiplier = material.multiplier
        unit_price = self.money(
            (rule.unit_cost + length_charge + width_charge + thickness_charge + mitre_charge) * multiplier
        )
        return ComponentPrice(
            base_price=self.money(rule.unit_cost),
            length_charge=self.money(length_charge),
            width_charge=self.money(width_charge),
            thickness_charge=self.money(thickness_charge),
            mitre_charge=self.money(mitre_charge),
            material_multiplier=multiplier,
            unit_price=unit_price,
            quantity=quantity,
            total_price=self.money(unit_price * quantity),
            rule_id=rule.id,
        )

    def price_tread(self, rule: PriceRuleEntry, material: MaterialEntry, stair_width: float,
                    tread_width: float, full_mitre: bool = False, quantity: int = 1) -> ComponentPrice:
        """Tread length is the stair width; tread width is rough cut + nose."""
        return self.calculate(rule, material, length=stair_width, width=tread_width,
                              quantity=quantity, full_mitre=full_mitre)

    def price_landing_tread(self, rule: PriceRuleEntry, material: MaterialEntry,
                            stair_width: float, landing_width: float = 3.5,
                            full_mitre: bool = False) -> ComponentPrice:
        return self.price_tread(rule, material, stair_width, landing_width, full_mitre=full_mitre)

    def price_riser(self, rule: PriceRuleEntry, material: MaterialEntry, stair_width: float,
                    riser_width: float, riser_count: int) -> ComponentPrice:
        return self.calculate(rule, material, length=stair_width, width=riser_width,
                              quantity=riser_count)

    def price_stringer(self, rule: PriceRuleEntry, material: MaterialEntry, width: float,
                       thickness: float, num_risers: int, count: int = 1) -> ComponentPrice:
        """unit_price is per riser; quantity is risers × stringers on this side."""
        return self.calculate(rule, material, width=width, thickness=thickness,
                              quantity=num_risers * count)

    def price_special_part(self, part: SpecialPartEntry, quantity: int) -> SpecialPartPrice:
        total = self.money(part.unit_cost * quantity)
        labor = self.money(part.labor_cost * quantity)
        return SpecialPartPrice(
            part_id=part.part_id,
            material_id=part.material_id,
            description=part.description,
            quantity=quantity,
            unit_price=self.money(part.unit_cost),
            labor_cost=self.money(part.labor_cost),
            total_price=total,
            labor_total=labor,
            line_total=self.money(total + labor),
        )
