from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import models
from ..calculators.job_totals import format_tax_rate
from ..config import settings
from ..database import get_db
from ..tax_lookup import COMMON_TAX_RATES, get_state_tax_rate

router = APIRouter(prefix="/tax-rates", tags=["tax-rates"])


class TaxRateUpdate(BaseModel):
    rate: float


def _normalize(state_code: str) -> str:
    code = state_code.strip().upper()
    if len(code) != 2 or not code.isalpha():
        raise HTTPException(status_code=422, detail="State code must be two letters")
    return code


@router.get("/{state_code}")
def get_tax_rate(state_code: str, db: Session = Depends(get_db)):
    """
    Rate for a state. Unknown states fall back to DEFAULT_TAX_RATE and are
    flagged with source="default".
    """
    code = _normalize(state_code)
    row = db.query(models.TaxRate).filter(models.TaxRate.state_code == code).first()
    if row is not None:
        source = "table"
    elif code in COMMON_TAX_RATES:
        source = "state_base"
    else:
        source = "default"
    rate = get_state_tax_rate(db, code)
    if rate is None:
        rate = settings.DEFAULT_TAX_RATE
    return {"state_code": code, "rate": rate, "rate_formatted": format_tax_rate(rate), "source": source}


@router.put("/{state_code}")
def set_tax_rate(state_code: str, update: TaxRateUpdate, db: Session = Depends(get_db)):
    code = _normalize(state_code)
    if update.rate < 0 or update.rate >= 1:
        raise HTTPException(status_code=422, detail="Rate must be a fraction between 0 and 1")
    row = db.query(models.TaxRate).filter(models.TaxRate.state_code == code).first()
    if row is None:
        row = models.TaxRate(state_code=code, rate=update.rate)
        db.add(row)
    else:
        row.rate = update.rate
    db.commit()
    return {"state_code": code, "rate": row.rate, "rate_formatted": format_tax_rate(row.rate), "source": "table"}
