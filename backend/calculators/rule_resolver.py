"""
Price rule resolution.

Given a board type, material, dimensions and a date, find the single price
rule that applies. When bands overlap, the winner is picked deterministically:

1. A rule for the exact material beats a material-agnostic (null) rule.
2. The narrowest band wins (smallest summed length + width + thickness span
   over the dimensions actually being priced; unbounded spans count as infinite).
3. The most recently started rule wins.
4. Lowest id wins.
"""

import logging
import math
from datetime import date
from typing import Optional

from .catalog import Catalog, PriceRuleEntry
from .errors import RuleNotFoundError
from ..models import BoardRole

logger = logging.getLogger(__name__)


def _in_range(value: Optional[float], low: float, high: Optional[float]) -> bool:
    if value is None:
        return True
    if value < (low or 0.0):
        return False
    return high is None or value <= high


def _span(value: Optional[float], low: float, high: Optional[float]) -> float:
    if value is None:
        return 0.0
    if high is None:
        return math.inf
    return high - (low or 0.0)


def rule_matches(rule: PriceRuleEntry, material_id: Optional[int], length: Optional[float],
                 width: Optional[float], thickness: Optional[float], as_of: date) -> bool:
    """True if the rule covers the material, every given dimension and the date."""
    if rule.material_id is not None and rule.material_id != material_id:
        return False
    if as_of < rule.begin_date:
        return False
    if rule.end_date is not None and as_of > rule.end_date:
        return False
    return (
        _in_range(length, rule.length_min, rule.length_max)
        and _in_range(width, rule.width_min, rule.width_max)
        and _in_range(thickness, rule.thickness_min, rule.thickness_max)
    )


def _specificity_key(rule: PriceRuleEntry, length, width, thickness):
    span = (
        _span(length, rule.length_min, rule.length_max)
        + _span(width, rule.width_min, rule.width_max)
        + _span(thickness, rule.thickness_min, rule.thickness_max)
    )
    return (
        0 if rule.material_id is not None else 1,
        span,
        -rule.begin_date.toordinal(),
        rule.id,
    )


def list_applicable_rules(catalog: Catalog, board_role: BoardRole, material_id: Optional[int],
                          length: Optional[float] = None, width: Optional[float] = None,
                          thickness: Optional[float] = None, as_of: Optional[date] = None) -> list:
    """All matching rules, best match first."""
    as_of = as_of or date.today()
    matches = [
        rule for rule in catalog.rules_for(board_role)
        if rule_matches(rule, material_id, length, width, thickness, as_of)
    ]
    matches.sort(key=lambda r: _specificity_key(r, length, width, thickness))
    return matches


def resolve_rule(catalog: Catalog, board_role: BoardRole, material_id: Optional[int],
                 length: Optional[float] = None, width: Optional[float] = None,
                 thickness: Optional[float] = None, as_of: Optional[date] = None,
                 component: str = "component") -> PriceRuleEntry:
    """
    Returns the applicable rule or raises RuleNotFoundError naming the component.
    """
    as_of = as_of or date.today()
    matches = list_applicable_rules(catalog, board_role, material_id, length, width, thickness, as_of)
    if not matches:
        logger.warning(
            "No price rule for %s (%s, material %s, L=%s W=%s T=%s, %s)",
            component, board_role.value, material_id, length, width, thickness, as_of,
        )
        raise RuleNotFoundError(
            component=component,
            board_role=board_role.value,
            material_id=material_id,
            dimensions={"length": length, "width": width, "thickness": thickness},
            as_of=as_of,
        )
    if len(matches) > 1:
        logger.debug(
            "%d rules overlap for %s; using rule %d", len(matches), component, matches[0].id
        )
    return matches[0]
