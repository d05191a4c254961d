"""
Catalog snapshot for a pricing session.

Materials, board types, price rules, special parts and linear products are
read once per request and converted into frozen, typed entries. Numeric
fields are parsed here and nowhere else. The pricers trust what they get.

Rows can be ORM objects (load_catalog) or plain dicts (Catalog.from_records,
used by tests and seed tooling). Dict values may arrive as strings.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .errors import MissingReferenceDataError
from ..models import BoardRole, ProductType

logger = logging.getLogger(__name__)


def _get(row, name, default=None):
    if isinstance(row, dict):
        return row.get(name, default)
    return getattr(row, name, default)


def _number(row, name, default: Optional[float] = 0.0) -> Optional[float]:
    value = _get(row, name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Catalog field {name!r} is not numeric: {value!r}")


def _date(row, name) -> Optional[date]:
    value = _get(row, name)
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    return enum_cls(str(value))


@dataclass(frozen=True)
class MaterialEntry:
    id: int
    name: str
    multiplier: float
    is_active: bool = True

    @classmethod
    def from_row(cls, row) -> "MaterialEntry":
        multiplier = _number(row, "multiplier", 1.0)
        if multiplier < 0:
            raise ValueError(f"Material {_get(row, 'id')} has a negative multiplier")
        return cls(
            id=int(_get(row, "id")),
            name=str(_get(row, "name", "")),
            multiplier=multiplier,
            is_active=bool(_get(row, "is_active", True)),
        )


@dataclass(frozen=True)
class BoardTypeEntry:
    id: int
    role: BoardRole
    description: str
    priced_per_riser: bool = False

    @classmethod
    def from_row(cls, row) -> "BoardTypeEntry":
        return cls(
            id=int(_get(row, "id")),
            role=_enum(BoardRole, _get(row, "code")),
            description=str(_get(row, "description", "")),
            priced_per_riser=bool(_get(row, "priced_per_riser", False)),
        )


@dataclass(frozen=True)
class PriceRuleEntry:
    id: int
    board_role: BoardRole
    material_id: Optional[int]
    begin_date: date
    end_date: Optional[date]
    unit_cost: float
    length_min: float = 0.0
    length_max: Optional[float] = None
    width_min: float = 0.0
    width_max: Optional[float] = None
    thickness_min: float = 0.0
    thickness_max: Optional[float] = None
    full_mitre_cost: float = 0.0
    base_length: float = 36.0
    base_width: float = 9.0
    base_thickness: float = 1.0
    length_increment: float = 6.0
    length_increment_cost: float = 0.0
    width_increment: float = 1.0
    width_increment_cost: float = 0.0
    thickness_increment: float = 0.25
    thickness_increment_cost: float = 0.0

    @classmethod
    def from_row(cls, row, board_role: BoardRole) -> "PriceRuleEntry":
        material_id = _get(row, "material_id")
        return cls(
            id=int(_get(row, "id")),
            board_role=board_role,
            material_id=int(material_id) if material_id not in (None, "") else None,
            begin_date=_date(row, "begin_date") or date.min,
            end_date=_date(row, "end_date"),
            unit_cost=_number(row, "unit_cost"),
            length_min=_number(row, "length_min"),
            length_max=_number(row, "length_max", None),
            width_min=_number(row, "width_min"),
            width_max=_number(row, "width_max", None),
            thickness_min=_number(row, "thickness_min"),
            thickness_max=_number(row, "thickness_max", None),
            full_mitre_cost=_number(row, "full_mitre_cost"),
            base_length=_number(row, "base_length", 36.0),
            base_width=_number(row, "base_width", 9.0),
            base_thickness=_number(row, "base_thickness", 1.0),
            length_increment=_number(row, "length_increment", 6.0),
            length_increment_cost=_number(row, "length_increment_cost"),
            width_increment=_number(row, "width_increment", 1.0),
            width_increment_cost=_number(row, "width_increment_cost"),
            thickness_increment=_number(row, "thickness_increment", 0.25),
            thickness_increment_cost=_number(row, "thickness_increment_cost"),
        )


@dataclass(frozen=True)
class SpecialPartEntry:
    part_id: int
    material_id: int
    description: str
    unit_cost: float
    labor_cost: float = 0.0

    @classmethod
    def from_row(cls, row) -> "SpecialPartEntry":
        return cls(
            part_id=int(_get(row, "part_id")),
            material_id=int(_get(row, "material_id")),
            description=str(_get(row, "description", "")),
            unit_cost=_number(row, "unit_cost"),
            labor_cost=_number(row, "labor_cost"),
        )


@dataclass(frozen=True)
class ProductEntry:
    id: int
    name: str
    product_type: ProductType
    cost_per_6_inches: float = 0.0
    base_price: float = 0.0
    labor_install_cost: float = 0.0

    @classmethod
    def from_row(cls, row) -> "ProductEntry":
        return cls(
            id=int(_get(row, "id")),
            name=str(_get(row, "name", "")),
            product_type=_enum(ProductType, _get(row, "product_type")),
            cost_per_6_inches=_number(row, "cost_per_6_inches"),
            base_price=_number(row, "base_price"),
            labor_install_cost=_number(row, "labor_install_cost"),
        )


@dataclass
class Catalog:
    """Read-only reference data for one pricing session."""
    materials: dict = field(default_factory=dict)       # id -> MaterialEntry
    board_types: dict = field(default_factory=dict)     # BoardRole -> BoardTypeEntry
    price_rules: list = field(default_factory=list)     # [PriceRuleEntry]
    special_parts: dict = field(default_factory=dict)   # (part_id, material_id) -> SpecialPartEntry
    products: dict = field(default_factory=dict)        # id -> ProductEntry

    def get_material(self, material_id: int) -> MaterialEntry:
        material = self.materials.get(material_id)
        if material is None:
            raise MissingReferenceDataError(f"Material {material_id} not found")
        return material

    def get_special_part(self, part_id: int, material_id: int) -> SpecialPartEntry:
        part = self.special_parts.get((part_id, material_id))
        if part is None:
            raise MissingReferenceDataError(
                f"Special part {part_id} is not offered in material {material_id}"
            )
        return part

    def get_product(self, product_id: int) -> ProductEntry:
        product = self.products.get(product_id)
        if product is None:
            raise MissingReferenceDataError(f"Product {product_id} not found")
        return product

    def rules_for(self, board_role: BoardRole) -> list:
        return [r for r in self.price_rules if r.board_role == board_role]

    @classmethod
    def from_records(cls, materials=(), board_types=(), price_rules=(),
                     special_parts=(), products=()) -> "Catalog":
        """
        Build a catalog from dict/ORM records.

        Price rule records may carry either board_type_id (matched against the
        board type records) or board_role directly.
        """
        catalog = cls()
        for row in materials:
            entry = MaterialEntry.from_row(row)
            if entry.is_active:
                catalog.materials[entry.id] = entry

        roles_by_id = {}
        for row in board_types:
            entry = BoardTypeEntry.from_row(row)
            catalog.board_types[entry.role] = entry
            roles_by_id[entry.id] = entry.role

        for row in price_rules:
            role = _get(row, "board_role")
            if role is None:
                role = roles_by_id.get(int(_get(row, "board_type_id")))
            if role is None:
                logger.warning("Skipping price rule %s: unknown board type", _get(row, "id"))
                continue
            catalog.price_rules.append(PriceRuleEntry.from_row(row, _enum(BoardRole, role)))

        for row in special_parts:
            entry = SpecialPartEntry.from_row(row)
            catalog.special_parts[(entry.part_id, entry.material_id)] = entry

        for row in products:
            entry = ProductEntry.from_row(row)
            catalog.products[entry.id] = entry

        return catalog


def load_catalog(db) -> Catalog:
    """Read all active catalog tables into a Catalog snapshot."""
    from .. import models

    catalog = Catalog.from_records(
        materials=db.query(models.Material).filter(models.Material.is_active.is_(True)).all(),
        board_types=db.query(models.BoardType).filter(models.BoardType.is_active.is_(True)).all(),
        price_rules=db.query(models.PriceRule).filter(models.PriceRule.is_active.is_(True))
        .order_by(models.PriceRule.id).all(),
        special_parts=db.query(models.SpecialPart).filter(models.SpecialPart.is_active.is_(True)).all(),
        products=db.query(models.Product).filter(models.Product.is_active.is_(True)).all(),
    )
    logger.debug(
        "Loaded catalog: %d materials, %d board types, %d rules, %d special parts, %d products",
        len(catalog.materials), len(catalog.board_types), len(catalog.price_rules),
        len(catalog.special_parts), len(catalog.products),
    )
    return catalog
