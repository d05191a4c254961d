from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..database import get_db

router = APIRouter(prefix="/materials", tags=["materials"])

# Default species multipliers. Red Oak is the 1.0 baseline price rules are written against
DEFAULT_MATERIALS = [
    {"id": 10, "name": "Poplar", "multiplier": 0.85, "display_order": 1},
    {"id": 15, "name": "Primed Pine", "multiplier": 0.75, "display_order": 2},
    {"id": 20, "name": "Red Oak", "multiplier": 1.00, "display_order": 3},
    {"id": 21, "name": "White Oak", "multiplier": 1.25, "display_order": 4},
    {"id": 30, "name": "Hard Maple", "multiplier": 1.35, "display_order": 5},
    {"id": 40, "name": "Cherry", "multiplier": 1.50, "display_order": 6},
    {"id": 50, "name": "Walnut", "multiplier": 1.90, "display_order": 7},
]


def seed_materials(db: Session) -> int:
    """Insert missing default materials. Skips ids that already exist."""
    seeded = 0
    for data in DEFAULT_MATERIALS:
        existing = db.query(models.Material).filter(models.Material.id == data["id"]).first()
        if not existing:
            db.add(models.Material(**data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    """Seed default material multipliers."""
    return {"ok": True, "seeded": seed_materials(db)}


@router.get("/", response_model=List[schemas.Material])
def list_materials(include_inactive: bool = False, db: Session = Depends(get_db)):
    query = db.query(models.Material)
    if not include_inactive:
        query = query.filter(models.Material.is_active.is_(True))
    return query.order_by(models.Material.display_order, models.Material.name).all()


@router.post("/", response_model=schemas.Material)
def create_material(material: schemas.MaterialCreate, db: Session = Depends(get_db)):
    if material.multiplier < 0:
        raise HTTPException(status_code=422, detail="Multiplier cannot be negative")
    db_material = models.Material(**material.model_dump())
    db.add(db_material)
    db.commit()
    db.refresh(db_material)
    return db_material


@router.patch("/{material_id}", response_model=schemas.Material)
def update_material(material_id: int, update: schemas.MaterialUpdate, db: Session = Depends(get_db)):
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    changes = update.model_dump(exclude_unset=True)
    if changes.get("multiplier") is not None and changes["multiplier"] < 0:
        raise HTTPException(status_code=422, detail="Multiplier cannot be negative")
    for field, value in changes.items():
        setattr(material, field, value)
    db.commit()
    db.refresh(material)
    return material
