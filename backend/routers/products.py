from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from .. import models, schemas
from ..calculators.catalog import load_catalog
from ..calculators.errors import PricingError
from ..calculators.registry import calculate_linear_price, has_calculator, list_calculators
from ..database import get_db
from ..http_errors import pricing_http_error

router = APIRouter(prefix="/products", tags=["products"])

# Red Oak baseline prices; the material multiplier is applied at pricing time
DEFAULT_PRODUCTS = [
    {"id": 1, "name": "Colonial handrail", "product_type": models.ProductType.HANDRAIL,
     "cost_per_6_inches": 6.50},
    {"id": 2, "name": "Plowed handrail", "product_type": models.ProductType.HANDRAIL,
     "cost_per_6_inches": 7.25},
    {"id": 3, "name": "Landing tread", "product_type": models.ProductType.LANDING_TREAD,
     "cost_per_6_inches": 9.00, "labor_install_cost": 4.00},
    {"id": 4, "name": "Rosette", "product_type": models.ProductType.RAIL_PARTS,
     "base_price": 8.00, "labor_install_cost": 2.00},
    {"id": 5, "name": "Rail fitting - gooseneck", "product_type": models.ProductType.RAIL_PARTS,
     "base_price": 64.00, "labor_install_cost": 18.00},
    {"id": 6, "name": "Box newel post", "product_type": models.ProductType.RAIL_PARTS,
     "base_price": 120.00, "labor_install_cost": 45.00},
]


def seed_products(db: Session) -> int:
    """Insert missing default products. Skips ids that already exist."""
    seeded = 0
    for data in DEFAULT_PRODUCTS:
        if not db.query(models.Product).filter(models.Product.id == data["id"]).first():
            db.add(models.Product(**data))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed(db: Session = Depends(get_db)):
    return {"ok": True, "seeded": seed_products(db)}


@router.get("/", response_model=List[schemas.Product])
def list_products(product_type: Optional[models.ProductType] = None, db: Session = Depends(get_db)):
    query = db.query(models.Product).filter(models.Product.is_active.is_(True))
    if product_type is not None:
        query = query.filter(models.Product.product_type == product_type)
    return query.order_by(models.Product.product_type, models.Product.name).all()


@router.get("/calculators")
def get_calculators():
    """Product types that have a registered calculator."""
    return {"product_types": list_calculators()}


@router.post("/price")
def price_product(request: schemas.LinearPriceRequest, db: Session = Depends(get_db)):
    """
    Price a handrail, landing tread or rail part.

    Lengths are inches in 6" steps from 6" to 240". Labor is only added when
    include_labor is set, and never for handrail.
    """
    catalog = load_catalog(db)
    try:
        product = catalog.get_product(request.product_id)
        material = catalog.get_material(request.material_id)
        if not has_calculator(product.product_type):
            raise HTTPException(status_code=422,
                                detail=f"No calculator for product type {product.product_type.value}")
        result = calculate_linear_price(product, material, request.length, request.quantity,
                                        request.include_labor)
    except PricingError as e:
        raise pricing_http_error(e)
    return {
        "subtotal": "%.2f" % result.subtotal,
        "labor_cost": "%.2f" % result.labor_cost,
        "total": "%.2f" % result.total,
        "details": result.details,
    }
