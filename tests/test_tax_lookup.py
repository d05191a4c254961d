"""
Tax rate resolution order: explicit → job → tax_rates table → state base rate → default.
"""

from backend import models
from backend.config import settings
from backend.tax_lookup import resolve_tax_rate, get_state_tax_rate


def _job(db, **fields):
    job = models.Job(job_number="MW-TEST-0001", **fields)
    db.add(job)
    db.commit()
    return job


def test_explicit_rate_wins(db):
    job = _job(db, tax_rate=0.08)
    assert resolve_tax_rate(db, 0.0, job.id, "CA") == 0.0


def test_job_rate_before_state(db):
    job = _job(db, tax_rate=0.08, state_code="CA")
    assert resolve_tax_rate(db, None, job.id) == 0.08


def test_job_state_used_when_job_has_no_rate(db):
    job = _job(db, state_code="TX")
    assert resolve_tax_rate(db, None, job.id) == 0.0625


def test_table_row_overrides_built_in_rate(db):
    db.add(models.TaxRate(state_code="TX", rate=0.0825))
    db.commit()
    assert get_state_tax_rate(db, "tx") == 0.0825


def test_unknown_job_and_state_fall_back_to_default(db):
    assert resolve_tax_rate(db, None, 12345, "ZZ") == settings.DEFAULT_TAX_RATE
    assert resolve_tax_rate(db) == 0.06
