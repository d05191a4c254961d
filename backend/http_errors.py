import logging

from fastapi import HTTPException

from .calculators.errors import PricingError, MissingReferenceDataError

logger = logging.getLogger(__name__)


def pricing_http_error(exc: PricingError) -> HTTPException:
    """Missing catalog data -> 404; bad input or no applicable rule -> 422."""
    if isinstance(exc, MissingReferenceDataError):
        return HTTPException(status_code=404, detail=str(exc))
    logger.info("Pricing rejected: %s", exc)
    return HTTPException(status_code=422, detail=str(exc))
