import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.job_totals import generate_job_summary
from ..database import get_db
from ..tax_lookup import resolve_tax_rate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


class JobUpdate(BaseModel):
    title: Optional[str] = None
    customer_name: Optional[str] = None
    status: Optional[models.JobStatus] = None
    state_code: Optional[str] = None
    tax_rate: Optional[float] = None
    notes: Optional[str] = None


def generate_job_number(db: Session) -> str:
    """Next number after the highest still on file for this year."""
    year = datetime.utcnow().year
    prefix = f"MW-{year}-"
    issued = db.query(models.Job.job_number).filter(models.Job.job_number.like(prefix + "%")).all()
    highest = max((int(number.rsplit("-", 1)[1]) for (number,) in issued), default=0)
    return f"{prefix}{str(highest + 1).zfill(4)}"


def _line_total(quantity: float, unit_price: float) -> float:
    return round((quantity or 0.0) * (unit_price or 0.0), 2)


def _get_job(db: Session, job_id: int) -> models.Job:
    job = db.query(models.Job).filter(models.Job.id == job_id).first()
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("/", response_model=schemas.Job, status_code=201)
def create_job(job: schemas.JobCreate, db: Session = Depends(get_db)):
    if job.tax_rate is not None and job.tax_rate < 0:
        raise HTTPException(status_code=422, detail="Tax rate cannot be negative")
    db_job = models.Job(
        job_number=generate_job_number(db),
        **job.model_dump(exclude={"sections"}),
    )
    if db_job.state_code:
        db_job.state_code = db_job.state_code.strip().upper()
    for order, section in enumerate(job.sections):
        db_section = models.JobSection(
            name=section.name,
            is_labor_section=section.is_labor_section,
            display_order=section.display_order or order,
        )
        for item in section.items:
            db_section.items.append(models.QuoteItem(
                **item.model_dump(),
                line_total=_line_total(item.quantity, item.unit_price),
            ))
        db_job.sections.append(db_section)
    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    logger.info("Created job %s with %d sections", db_job.job_number, len(db_job.sections))
    return db_job


@router.get("/", response_model=List[schemas.Job])
def list_jobs(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    return db.query(models.Job).order_by(models.Job.created_at.desc()).offset(skip).limit(limit).all()


@router.get("/{job_id}", response_model=schemas.Job)
def get_job(job_id: int, db: Session = Depends(get_db)):
    return _get_job(db, job_id)


@router.patch("/{job_id}", response_model=schemas.Job)
def update_job(job_id: int, update: JobUpdate, db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    changes = update.model_dump(exclude_unset=True)
    if changes.get("tax_rate") is not None and changes["tax_rate"] < 0:
        raise HTTPException(status_code=422, detail="Tax rate cannot be negative")
    for field, value in changes.items():
        setattr(job, field, value)
    db.commit()
    db.refresh(job)
    return job


@router.delete("/{job_id}")
def delete_job(job_id: int, db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    db.delete(job)
    db.commit()
    return {"ok": True}


@router.post("/{job_id}/sections", response_model=schemas.JobSection, status_code=201)
def add_section(job_id: int, section: schemas.JobSectionCreate, db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    db_section = models.JobSection(
        job_id=job.id,
        name=section.name,
        is_labor_section=section.is_labor_section,
        display_order=section.display_order or len(job.sections),
    )
    for item in section.items:
        db_section.items.append(models.QuoteItem(
            **item.model_dump(),
            line_total=_line_total(item.quantity, item.unit_price),
        ))
    db.add(db_section)
    db.commit()
    db.refresh(db_section)
    return db_section


@router.post("/{job_id}/sections/{section_id}/items", response_model=schemas.QuoteItem, status_code=201)
def add_item(job_id: int, section_id: int, item: schemas.QuoteItemCreate, db: Session = Depends(get_db)):
    section = db.query(models.JobSection).filter(
        models.JobSection.id == section_id, models.JobSection.job_id == job_id
    ).first()
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")
    db_item = models.QuoteItem(
        section_id=section.id,
        **item.model_dump(),
        line_total=_line_total(item.quantity, item.unit_price),
    )
    db.add(db_item)
    db.commit()
    db.refresh(db_item)
    return db_item


@router.get("/{job_id}/totals")
def get_job_totals(job_id: int, tax_rate: Optional[float] = None, db: Session = Depends(get_db)):
    """
    Taxable / non-taxable subtotals, tax and grand total across all sections.
    Tax rate: query param, else the job's own rate, else its state's rate.
    """
    job = _get_job(db, job_id)
    rate = resolve_tax_rate(db, tax_rate, job.id)
    summary = generate_job_summary(job.sections, rate)
    return {"job_id": job.id, "job_number": job.job_number, **summary}


@router.get("/{job_id}/stair-configurations", response_model=List[schemas.StairConfiguration])
def list_job_stair_configurations(job_id: int, db: Session = Depends(get_db)):
    job = _get_job(db, job_id)
    return db.query(models.StairConfiguration) \
        .filter(models.StairConfiguration.job_id == job.id) \
        .order_by(models.StairConfiguration.id).all()
