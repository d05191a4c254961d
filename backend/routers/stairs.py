"""
Stair pricing API.

POST /api/stairs/price          — Price a full stair configuration
POST /api/stairs/treads/bulk    — Expand bulk tread counts / apply a "set all" edit
GET  /api/stairs/materials      — Active materials
GET  /api/stairs/board-types    — Board types
GET  /api/stairs/special-parts  — Special parts, optionally for one material
GET  /api/stairs/price-rules    — Active rules, optionally only those matching dimensions
POST/PATCH/DELETE /api/stairs/price-rules — Maintain rules (delete is a soft delete)
GET  /api/stairs/seed           — Seed default board types, rules and special parts
"""

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.catalog import load_catalog
from ..calculators.errors import PricingError
from ..calculators.rule_resolver import list_applicable_rules
from ..calculators.stair_pricer import StairPriceCalculator
from ..calculators.tread_builder import generate_treads_from_bulk, apply_bulk_update, landing_tread_required
from ..config import settings
from ..database import get_db
from ..http_errors import pricing_http_error
from ..tax_lookup import resolve_tax_rate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stairs", tags=["stairs"])

Role = models.BoardRole

DEFAULT_BOARD_TYPES = [
    {"id": 1, "code": Role.BOX_TREAD, "description": "Box tread", "purpose": "tread"},
    {"id": 2, "code": Role.OPEN_LEFT_TREAD, "description": "Open left tread", "purpose": "tread"},
    {"id": 3, "code": Role.OPEN_RIGHT_TREAD, "description": "Open right tread", "purpose": "tread"},
    {"id": 4, "code": Role.DOUBLE_OPEN_TREAD, "description": "Double open tread", "purpose": "tread"},
    {"id": 5, "code": Role.RISER, "description": "Riser", "purpose": "riser"},
    {"id": 6, "code": Role.STRINGER, "description": "Stringer", "purpose": "stringer",
     "priced_per_riser": True},
    {"id": 7, "code": Role.CENTER_HORSE, "description": "Center horse", "purpose": "stringer",
     "priced_per_riser": True},
]

# Red Oak baseline rules, material-agnostic. Species multipliers scale them at pricing time
_TREAD_BAND = {
    "length_min": 0.0, "length_max": 48.0, "width_min": 0.0, "width_max": 14.0,
    "thickness_min": 0.0, "thickness_max": 2.0,
    "base_length": 36.0, "length_increment": 6.0, "length_increment_cost": 6.00,
    "base_width": 11.5, "width_increment": 1.0, "width_increment_cost": 3.00,
}
DEFAULT_PRICE_RULES = [
    dict(_TREAD_BAND, board_role=Role.BOX_TREAD, unit_cost=45.00, full_mitre_cost=25.00),
    dict(_TREAD_BAND, board_role=Role.BOX_TREAD, unit_cost=68.00, full_mitre_cost=25.00,
         length_min=48.0, length_max=72.0, base_length=48.0),
    dict(_TREAD_BAND, board_role=Role.OPEN_LEFT_TREAD, unit_cost=58.00, full_mitre_cost=30.00),
    dict(_TREAD_BAND, board_role=Role.OPEN_RIGHT_TREAD, unit_cost=58.00, full_mitre_cost=30.00),
    dict(_TREAD_BAND, board_role=Role.DOUBLE_OPEN_TREAD, unit_cost=72.00, full_mitre_cost=55.00),
    {
        "board_role": Role.RISER, "unit_cost": 18.00,
        "length_min": 0.0, "length_max": 72.0, "width_min": 0.0, "width_max": 12.0,
        "base_length": 36.0, "length_increment": 6.0, "length_increment_cost": 3.00,
        "base_width": 8.0, "width_increment": 1.0, "width_increment_cost": 2.00,
    },
    {
        "board_role": Role.STRINGER, "unit_cost": 6.50,
        "width_min": 0.0, "width_max": 16.0, "thickness_min": 0.0, "thickness_max": 2.0,
        "base_width": 9.25, "width_increment": 1.0, "width_increment_cost": 0.75,
        "base_thickness": 1.0, "thickness_increment": 0.25, "thickness_increment_cost": 1.00,
    },
    {
        "board_role": Role.CENTER_HORSE, "unit_cost": 9.00,
        "width_min": 0.0, "width_max": 16.0, "thickness_min": 0.0, "thickness_max": 4.0,
        "base_width": 9.25, "width_increment": 1.0, "width_increment_cost": 0.75,
        "base_thickness": 2.0, "thickness_increment": 0.25, "thickness_increment_cost": 1.00,
    },
]
DEFAULT_RULE_BEGIN = date(2024, 1, 1)

DEFAULT_SPECIAL_PARTS = [
    # (part_id, description, {material_id: (unit_cost, labor_cost)})
    (1, "Scroll bracket", {20: (18.00, 6.00), 21: (22.50, 6.00)}),
    (2, "Starting step bullnose", {20: (165.00, 45.00), 21: (206.00, 45.00)}),
    (3, "Starting newel post", {20: (145.00, 35.00), 21: (181.00, 35.00)}),
    (4, "Volute", {20: (210.00, 40.00), 21: (262.50, 40.00)}),
    (5, "Return nosing", {20: (12.00, 4.00), 21: (15.00, 4.00)}),
]


def seed_stair_catalog(db: Session) -> int:
    """Insert default board types, price rules and special parts that are missing."""
    seeded = 0
    for data in DEFAULT_BOARD_TYPES:
        if not db.query(models.BoardType).filter(models.BoardType.code == data["code"]).first():
            db.add(models.BoardType(**data))
            seeded += 1
    db.flush()

    if db.query(models.PriceRule).count() == 0:
        board_ids = {bt.code: bt.id for bt in db.query(models.BoardType).all()}
        for data in DEFAULT_PRICE_RULES:
            fields = dict(data)
            role = fields.pop("board_role")
            db.add(models.PriceRule(board_type_id=board_ids[role], begin_date=DEFAULT_RULE_BEGIN, **fields))
            seeded += 1

    for part_id, description, prices in DEFAULT_SPECIAL_PARTS:
        for material_id, (unit_cost, labor_cost) in prices.items():
            existing = db.query(models.SpecialPart).filter(
                models.SpecialPart.part_id == part_id,
                models.SpecialPart.material_id == material_id,
            ).first()
            if not existing:
                db.add(models.SpecialPart(part_id=part_id, material_id=material_id, description=description,
                                          unit_cost=unit_cost, labor_cost=labor_cost))
                seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    return {"ok": True, "seeded": seed_stair_catalog(db)}


# --- Pricing ---

@router.post("/price")
def calculate_stair_price(request: schemas.StairPriceRequest, db: Session = Depends(get_db)):
    """
    Price a stair. Validation and rule-resolution failures return 422 with the
    reason; unknown material/special part ids return 404. No partial prices.
    """
    tax_rate = resolve_tax_rate(db, request.tax_rate, request.job_id, request.state_code)
    catalog = load_catalog(db)
    calculator = StairPriceCalculator(settings.pricing_defaults())
    try:
        result = calculator.calculate(request, catalog, tax_rate)
    except PricingError as e:
        raise pricing_http_error(e)
    result.pop("items")
    return result


@router.post("/treads/bulk")
def bulk_treads(request: schemas.TreadBulkRequest):
    """
    Build or edit a tread list. With `bulk`, treads are generated from counts;
    otherwise the given `treads` are used. An `update` then applies to every
    tread not listed in `locked_riser_numbers`.
    """
    try:
        treads = generate_treads_from_bulk(request.bulk) if request.bulk else list(request.treads)
        if request.update is not None:
            treads = apply_bulk_update(treads, request.update, request.locked_riser_numbers)
        has_landing = landing_tread_required(len(treads), request.num_risers)
    except PricingError as e:
        raise pricing_http_error(e)
    return {
        "treads": [t.model_dump(mode="json") for t in treads],
        "has_landing_tread": has_landing,
    }


# --- Catalog reads ---

@router.get("/materials", response_model=List[schemas.Material])
def list_stair_materials(db: Session = Depends(get_db)):
    return db.query(models.Material).filter(models.Material.is_active.is_(True)) \
        .order_by(models.Material.display_order, models.Material.name).all()


@router.get("/board-types", response_model=List[schemas.BoardType])
def list_board_types(db: Session = Depends(get_db)):
    return db.query(models.BoardType).filter(models.BoardType.is_active.is_(True)) \
        .order_by(models.BoardType.id).all()


@router.get("/special-parts", response_model=List[schemas.SpecialPart])
def list_special_parts(material_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(models.SpecialPart).filter(models.SpecialPart.is_active.is_(True))
    if material_id is not None:
        query = query.filter(models.SpecialPart.material_id == material_id)
    return query.order_by(models.SpecialPart.description, models.SpecialPart.material_id).all()


@router.get("/price-rules", response_model=List[schemas.PriceRule])
def list_price_rules(
    board_type_id: Optional[int] = None,
    material_id: Optional[int] = None,
    length: Optional[float] = None,
    width: Optional[float] = None,
    thickness: Optional[float] = None,
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
):
    """
    Without dimensions: active rules filtered by board type/material.
    With board type and any dimension: only the rules that would apply, best first.
    """
    query = db.query(models.PriceRule).filter(models.PriceRule.is_active.is_(True))
    if board_type_id is not None:
        query = query.filter(models.PriceRule.board_type_id == board_type_id)

    if board_type_id is None or (length is None and width is None and thickness is None):
        if material_id is not None:
            query = query.filter(
                (models.PriceRule.material_id == material_id) | (models.PriceRule.material_id.is_(None))
            )
        return query.order_by(models.PriceRule.board_type_id, models.PriceRule.length_min,
                              models.PriceRule.width_min).all()

    board_type = db.query(models.BoardType).filter(models.BoardType.id == board_type_id).first()
    if not board_type:
        raise HTTPException(status_code=404, detail="Board type not found")
    catalog = load_catalog(db)
    matches = list_applicable_rules(catalog, board_type.code, material_id,
                                    length=length, width=width, thickness=thickness, as_of=as_of)
    rows = {r.id: r for r in query.all()}
    return [rows[m.id] for m in matches if m.id in rows]


@router.post("/price-rules", response_model=schemas.PriceRule, status_code=201)
def create_price_rule(rule: schemas.PriceRuleCreate, db: Session = Depends(get_db)):
    if not db.query(models.BoardType).filter(models.BoardType.id == rule.board_type_id).first():
        raise HTTPException(status_code=404, detail="Board type not found")
    if rule.material_id is not None and not db.query(models.Material).filter(
            models.Material.id == rule.material_id).first():
        raise HTTPException(status_code=404, detail="Material not found")
    _check_rule_ranges(rule.model_dump())
    db_rule = models.PriceRule(**rule.model_dump())
    db.add(db_rule)
    db.commit()
    db.refresh(db_rule)
    logger.info("Created price rule %d for board type %d", db_rule.id, db_rule.board_type_id)
    return db_rule


@router.patch("/price-rules/{rule_id}", response_model=schemas.PriceRule)
def update_price_rule(rule_id: int, update: schemas.PriceRuleUpdate, db: Session = Depends(get_db)):
    rule = db.query(models.PriceRule).filter(models.PriceRule.id == rule_id).first()
    if not rule:
        raise HTTPException(status_code=404, detail="Price rule not found")
    changes = update.model_dump(exclude_unset=True)
    merged = {c.name: getattr(rule, c.name) for c in models.PriceRule.__table__.columns}
    merged.update(changes)
    _check_rule_ranges(merged)
    for field, value in changes.items():
        setattr(rule, field, value)
    db.commit()
    db.refresh(rule)
    return rule


@router.delete("/price-rules/{rule_id}")
def delete_price_rule(rule_id: int, db: Session = Depends(get_db)):
    """Soft delete. The rule stays for history but no longer resolves."""
    rule = db.query(models.PriceRule).filter(models.PriceRule.id == rule_id).first()
    if not rule:
        raise HTTPException(status_code=404, detail="Price rule not found")
    rule.is_active = False
    db.commit()
    return {"ok": True, "id": rule_id}


def _check_rule_ranges(data: dict):
    for name in ("length", "width", "thickness"):
        low, high = data.get(f"{name}_min") or 0.0, data.get(f"{name}_max")
        if high is not None and high < low:
            raise HTTPException(status_code=422, detail=f"{name}_max is below {name}_min")
    if data.get("end_date") is not None and data["end_date"] < data["begin_date"]:
        raise HTTPException(status_code=422, detail="end_date is before begin_date")
    if (data.get("unit_cost") or 0) < 0:
        raise HTTPException(status_code=422, detail="unit_cost cannot be negative")
