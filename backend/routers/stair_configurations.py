"""
Saved stair configurations.

The stair is always re-priced on the server from the submitted request; the
stored figures are whatever the pricer returned at save time. Updates replace
the configuration's items wholesale.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.catalog import load_catalog
from ..calculators.errors import PricingError
from ..calculators.stair_pricer import StairPriceCalculator
from ..config import settings
from ..database import get_db
from ..http_errors import pricing_http_error
from ..tax_lookup import resolve_tax_rate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stair-configurations", tags=["stair-configurations"])


def _resolve_job_id(db: Session, body: schemas.StairConfigurationCreate) -> Optional[int]:
    """
    One job per configuration: the body's job_id, else the request's, else the
    job owning section_id. Conflicting ids are rejected.
    """
    job_id = body.job_id
    if body.request.job_id is not None:
        if job_id is not None and job_id != body.request.job_id:
            raise HTTPException(status_code=422, detail="job_id and request.job_id name different jobs")
        job_id = body.request.job_id

    section = None
    if body.section_id is not None:
        section = db.query(models.JobSection).filter(models.JobSection.id == body.section_id).first()
        if not section:
            raise HTTPException(status_code=404, detail="Section not found")
        if job_id is None:
            job_id = section.job_id

    if job_id is not None and not db.query(models.Job).filter(models.Job.id == job_id).first():
        raise HTTPException(status_code=404, detail="Job not found")
    if section is not None and section.job_id != job_id:
        raise HTTPException(status_code=404, detail="Section not found on this job")
    return job_id


def _price(db: Session, body: schemas.StairConfigurationCreate, job_id: Optional[int]) -> dict:
    request = body.request
    tax_rate = resolve_tax_rate(db, request.tax_rate, job_id, request.state_code)
    calculator = StairPriceCalculator(settings.pricing_defaults())
    try:
        return calculator.calculate(request, load_catalog(db), tax_rate)
    except PricingError as e:
        raise pricing_http_error(e)


def _apply(config: models.StairConfiguration, body: schemas.StairConfigurationCreate, result: dict,
           job_id: Optional[int]):
    """Copy request inputs and priced figures onto the row and rebuild its items."""
    request = body.request
    echo = result["configuration"]

    config.job_id = job_id
    config.config_name = body.config_name
    config.special_notes = body.special_notes
    config.floor_to_floor = request.floor_to_floor
    config.num_risers = request.num_risers
    config.riser_height = echo["riser_height"]
    config.tread_material_id = echo["tread_material_id"]
    config.riser_material_id = echo["riser_material_id"]
    config.rough_cut_width = request.rough_cut_width
    config.nose_size = request.nose_size
    config.stringer_type = request.stringer_type
    config.num_stringers = request.num_stringers
    config.center_horses = request.center_horses
    for side in ("left", "right", "center"):
        spec = getattr(request.stringers, side, None) if request.stringers else None
        setattr(config, f"{side}_stringer_width", spec.width if spec else None)
        setattr(config, f"{side}_stringer_thickness", spec.thickness if spec else None)
        setattr(config, f"{side}_stringer_material_id", spec.material_id if spec else None)
    config.full_mitre = request.full_mitre
    config.bracket_type = request.bracket_type
    config.has_landing_tread = echo["has_landing_tread"]
    config.tax_rate = echo["tax_rate"]
    config.subtotal = float(result["subtotal"])
    config.labor_total = float(result["labor_total"])
    config.tax_amount = float(result["tax_amount"])
    config.total_amount = float(result["total"])

    config.items.clear()
    for item in result["items"]:
        fields = dict(item, item_type=models.ConfigItemType(item["item_type"]))
        config.items.append(models.StairConfigItem(**fields))


def _add_job_lines(db: Session, config: models.StairConfiguration, section_id: int, description: str):
    """
    Parts go on a taxable line; special-part installation labor goes on its
    own non-taxable line, matching how the stair itself was taxed.
    """
    db.add(models.QuoteItem(
        section_id=section_id,
        description=description,
        stair_configuration_id=config.id,
        quantity=1,
        unit_price=config.subtotal,
        line_total=round(config.subtotal, 2),
        is_taxable=True,
    ))
    if config.labor_total:
        db.add(models.QuoteItem(
            section_id=section_id,
            description=f"{description}, installation labor",
            stair_configuration_id=config.id,
            quantity=1,
            unit_price=config.labor_total,
            line_total=round(config.labor_total, 2),
            is_taxable=False,
        ))


def _sync_quote_items(db: Session, config: models.StairConfiguration):
    """Rewrite the job lines that point at this stair from its new price."""
    linked = db.query(models.QuoteItem).filter(models.QuoteItem.stair_configuration_id == config.id) \
        .order_by(models.QuoteItem.id).all()
    placements = []
    for item in linked:
        if item.is_taxable and item.section_id not in [s for s, _ in placements]:
            placements.append((item.section_id, item.description))
        db.delete(item)
    db.flush()
    for section_id, description in placements:
        _add_job_lines(db, config, section_id, description)


def _get_config(db: Session, config_id: int) -> models.StairConfiguration:
    config = db.query(models.StairConfiguration).filter(models.StairConfiguration.id == config_id).first()
    if not config:
        raise HTTPException(status_code=404, detail="Stair configuration not found")
    return config



@router.post("/", response_model=schemas.StairConfiguration, status_code=201)
def create_stair_configuration(body: schemas.StairConfigurationCreate, db: Session = Depends(get_db)):
    job_id = _resolve_job_id(db, body)
    result = _price(db, body, job_id)

    config = models.StairConfiguration()
    _apply(config, body, result, job_id)
    db.add(config)
    db.flush()

    if body.section_id is not None:
        _add_job_lines(db, config, body.section_id, body.config_name or f"Stair, {config.num_risers} risers")

    db.commit()
    db.refresh(config)
    logger.info("Saved stair configuration %d (job %s): total %.2f",
                config.id, config.job_id, config.total_amount)
    return config


@router.get("/{config_id}", response_model=schemas.StairConfiguration)
def get_stair_configuration(config_id: int, db: Session = Depends(get_db)):
    return _get_config(db, config_id)


@router.put("/{config_id}", response_model=schemas.StairConfiguration)
def replace_stair_configuration(config_id: int, body: schemas.StairConfigurationCreate,
                                db: Session = Depends(get_db)):
    config = _get_config(db, config_id)
    job_id = _resolve_job_id(db, body)
    result = _price(db, body, job_id)
    _apply(config, body, result, job_id)
    db.flush()
    _sync_quote_items(db, config)
    db.commit()
    db.refresh(config)
    return config


@router.delete("/{config_id}")
def delete_stair_configuration(config_id: int, db: Session = Depends(get_db)):
    config = _get_config(db, config_id)
    db.query(models.QuoteItem).filter(models.QuoteItem.stair_configuration_id == config.id) \
        .delete(synchronize_session=False)
    db.delete(config)
    db.commit()
    return {"ok": True}
