"""
Sales tax rate resolution for pricing and job totals.

Order: explicit rate → job.tax_rate → tax_rates table row for the state →
built-in state base rate → settings.DEFAULT_TAX_RATE.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from . import models
from .config import settings

logger = logging.getLogger(__name__)

# State base sales tax rates, used when the tax_rates table has no row
COMMON_TAX_RATES = {
    "AL": 0.04, "AK": 0.0, "AZ": 0.056, "AR": 0.065, "CA": 0.0725,
    "CO": 0.029, "CT": 0.0635, "DE": 0.0, "FL": 0.06, "GA": 0.04,
    "HI": 0.04, "ID": 0.06, "IL": 0.0625, "IN": 0.07, "IA": 0.06,
    "KS": 0.065, "KY": 0.06, "LA": 0.0445, "ME": 0.055, "MD": 0.06,
    "MA": 0.0625, "MI": 0.06, "MN": 0.06875, "MS": 0.07, "MO": 0.04225,
    "MT": 0.0, "NE": 0.055, "NV": 0.0685, "NH": 0.0, "NJ": 0.06625,
    "NM": 0.05125, "NY": 0.04, "NC": 0.0475, "ND": 0.05, "OH": 0.0575,
    "OK": 0.045, "OR": 0.0, "PA": 0.06, "RI": 0.07, "SC": 0.06,
    "SD": 0.045, "TN": 0.07, "TX": 0.0625, "UT": 0.047, "VT": 0.06,
    "VA": 0.053, "WA": 0.065, "WV": 0.06, "WI": 0.05, "WY": 0.04,
}


def get_state_tax_rate(db: Session, state_code: Optional[str]) -> Optional[float]:
    """Rate for a state, or None if the state is unknown."""
    if not state_code:
        return None
    code = state_code.strip().upper()
    row = db.query(models.TaxRate).filter(models.TaxRate.state_code == code).first()
    if row is not None:
        return row.rate
    return COMMON_TAX_RATES.get(code)


def resolve_tax_rate(db: Session, tax_rate: Optional[float] = None, job_id: Optional[int] = None,
                     state_code: Optional[str] = None) -> float:
    if tax_rate is not None:
        return tax_rate

    if job_id is not None:
        job = db.query(models.Job).filter(models.Job.id == job_id).first()
        if job is None:
            logger.warning("Job %s not found while resolving tax rate", job_id)
        else:
            if job.tax_rate is not None:
                return job.tax_rate
            state_code = state_code or job.state_code

    rate = get_state_tax_rate(db, state_code)
    if rate is not None:
        return rate
    return settings.DEFAULT_TAX_RATE
