"""
Tread list construction and bulk edits.

generate_treads_from_bulk() expands "N box treads at W inches, M open treads..."
into one TreadSpec per riser, numbered from 1 in box, open, double-open order.

apply_bulk_update() is the "set all treads to X" action. Riser numbers the
caller has edited individually are passed as `locked` and are never
overwritten by a later bulk action.
"""

import logging
from typing import Iterable, List, Optional

from .errors import PricingValidationError
from ..models import TreadType
from ..schemas import TreadSpec, TreadBulkConfig, TreadBulkUpdate

logger = logging.getLogger(__name__)


def generate_treads_from_bulk(bulk: TreadBulkConfig) -> List[TreadSpec]:
    for label, count, width in (
        ("Box", bulk.box_tread_count, bulk.box_tread_width),
        ("Open", bulk.open_tread_count, bulk.open_tread_width),
        ("Double open", bulk.double_open_count, bulk.double_open_width),
    ):
        if count < 0:
            raise PricingValidationError(f"{label} tread count cannot be negative")
        if count > 0 and width <= 0:
            raise PricingValidationError(f"{label} tread width must be specified and greater than 0")

    direction = str(bulk.open_tread_direction).lower()
    if direction not in ("left", "right"):
        raise PricingValidationError("Open tread direction must be 'left' or 'right'")
    open_type = TreadType.OPEN_LEFT if direction == "left" else TreadType.OPEN_RIGHT

    treads = []
    riser_number = 1
    for tread_type, count, width in (
        (TreadType.BOX, bulk.box_tread_count, bulk.box_tread_width),
        (open_type, bulk.open_tread_count, bulk.open_tread_width),
        (TreadType.DOUBLE_OPEN, bulk.double_open_count, bulk.double_open_width),
    ):
        for _ in range(count):
            treads.append(TreadSpec(riser_number=riser_number, type=tread_type, stair_width=width))
            riser_number += 1
    return treads


def apply_bulk_update(treads: List[TreadSpec], update: TreadBulkUpdate,
                      locked: Optional[Iterable[int]] = None) -> List[TreadSpec]:
    """Returns a new list; the input list is not modified."""
    if update.stair_width is not None and update.stair_width <= 0:
        raise PricingValidationError("Stair width must be greater than 0")

    locked = set(locked or ())
    targets = set(update.riser_numbers) if update.riser_numbers is not None else None

    result = []
    skipped = 0
    for tread in treads:
        if targets is not None and tread.riser_number not in targets:
            result.append(tread)
            continue
        if tread.riser_number in locked:
            skipped += 1
            result.append(tread)
            continue
        changes = {}
        if update.type is not None:
            changes["type"] = update.type
        if update.stair_width is not None:
            changes["stair_width"] = update.stair_width
        result.append(tread.model_copy(update=changes))

    if skipped:
        logger.debug("Bulk update left %d locked tread(s) untouched", skipped)
    return result


def landing_tread_required(tread_count: int, num_risers: int) -> bool:
    """
    N treads for N risers: the top riser gets a full tread, no landing tread.
    N-1 treads: a landing tread finishes the top. Anything else is invalid.
    """
    if tread_count == num_risers:
        return False
    if tread_count == num_risers - 1:
        return True
    raise PricingValidationError(
        f"Tread/riser mismatch: {tread_count} treads for {num_risers} risers; "
        f"expected {num_risers} (no landing tread) or {num_risers - 1} (with landing tread)"
    )
