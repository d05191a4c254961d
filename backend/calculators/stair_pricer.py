"""
Stair price aggregator — treads, landing tread, risers, stringers, special parts.

Validates the whole request first, then resolves a price rule for every
component and sums the breakdown:

    subtotal = treads + landing tread + risers + stringers + special parts
    labor    = special-part installation labor
    tax      = subtotal × tax rate
    total    = subtotal + labor + tax

Any validation failure, missing catalog entry or unresolvable rule aborts
the whole calculation. Nothing is cached between calls.
"""

import logging
import math
from collections import OrderedDict
from datetime import date
from typing import Optional

from .base import BaseCalculator
from .catalog import Catalog
from .component_pricers import ComponentPricer
from .errors import PricingValidationError
from .rule_resolver import resolve_rule
from .tread_builder import landing_tread_required
from ..config import PricingDefaults
from ..models import BoardRole, TreadType, TREAD_BOARD_ROLES, ConfigItemType
from ..schemas import StairPriceRequest, StringerSide

logger = logging.getLogger(__name__)


def _positive(value) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _non_negative(value) -> bool:
    return value is not None and math.isfinite(value) and value >= 0

# Riser style follows the tread above it
RISER_STYLES = {
    TreadType.BOX: "standard",
    TreadType.OPEN_LEFT: "open",
    TreadType.OPEN_RIGHT: "open",
    TreadType.DOUBLE_OPEN: "double_open",
}


class StairPriceCalculator(BaseCalculator):

    def __init__(self, defaults: Optional[PricingDefaults] = None):
        self.defaults = defaults or PricingDefaults()
        self.pricer = ComponentPricer()

    def calculate(self, request: StairPriceRequest, catalog: Catalog,
                  tax_rate: float, as_of: Optional[date] = None) -> dict:
        """
        Price a full stair. Returns the response dict:
        configuration echo, grouped breakdown, flat line items, and
        cent-formatted subtotal / labor_total / tax_amount / total.
        """
        as_of = as_of or request.as_of or date.today()
        d = self.defaults

        tread_material_id = request.tread_material_id or d.tread_material_id
        riser_material_id = request.riser_material_id or d.riser_material_id
        rough_cut = request.rough_cut_width if request.rough_cut_width is not None else d.rough_cut_width
        nose = request.nose_size if request.nose_size is not None else d.nose_size
        tread_width = rough_cut + nose

        has_landing = self._validate(request, rough_cut, nose, tax_rate)
        stringer_lines = self._stringer_lines(request)

        # Reference data must all exist before anything is priced
        tread_material = catalog.get_material(tread_material_id)
        riser_material = catalog.get_material(riser_material_id)
        for line in stringer_lines:
            catalog.get_material(line["material_id"])
        parts = [
            (catalog.get_special_part(p.part_id, p.material_id or tread_material_id), p.quantity)
            for p in request.special_parts
        ]

        logger.debug(
            "Pricing stair: %d risers, %d treads, landing=%s, %d stringer lines, %d special parts",
            request.num_risers, len(request.treads), has_landing, len(stringer_lines), len(parts),
        )

        items = []
        breakdown = {
            "treads": [],
            "landing_tread": None,
            "risers": [],
            "stringers": [],
            "special_parts": [],
            "labor": [],
        }
        subtotal = 0.0
        labor_total = 0.0

        # 1. Treads: priced one by one, grouped for display
        groups = OrderedDict()
        for tread in sorted(request.treads, key=lambda t: t.riser_number):
            role = TREAD_BOARD_ROLES[tread.type]
            rule = resolve_rule(
                catalog, role, tread_material_id,
                length=tread.stair_width, width=tread_width, thickness=d.tread_thickness,
                as_of=as_of, component=f"tread {tread.riser_number} ({tread.type.value})",
            )
            price = self.pricer.price_tread(rule, tread_material, tread.stair_width, tread_width,
                                            full_mitre=request.full_mitre)
            subtotal += price.total_price
            items.append(self._item(ConfigItemType.TREAD, price, description=f"{tread.type.value} tread",
                                    riser_number=tread.riser_number, tread_type=tread.type.value,
                                    width=tread_width, length=tread.stair_width,
                                    board_type=role.value, material_id=tread_material_id))

            key = (tread.type, tread.stair_width)
            if key not in groups:
                groups[key] = dict(price.to_dict(), type=tread.type.value, stair_width=tread.stair_width,
                                   tread_width=tread_width, riser_numbers=[], quantity=0, total_price=0.0)
            group = groups[key]
            group["riser_numbers"].append(tread.riser_number)
            group["quantity"] += 1
            group["total_price"] = self.money(group["total_price"] + price.total_price)
        breakdown["treads"] = list(groups.values())

        # 2. Landing tread: fixed-width box tread at the top
        landing_stair_width = request.treads[0].stair_width if request.treads else d.stair_width
        if has_landing:
            rule = resolve_rule(
                catalog, BoardRole.BOX_TREAD, tread_material_id,
                length=landing_stair_width, width=d.landing_tread_width, thickness=d.tread_thickness,
                as_of=as_of, component="landing tread",
            )
            price = self.pricer.price_landing_tread(rule, tread_material, landing_stair_width,
                                                    d.landing_tread_width, full_mitre=request.full_mitre)
            subtotal += price.total_price
            breakdown["landing_tread"] = dict(
                price.to_dict(), type=TreadType.BOX.value, riser_number=request.num_risers,
                stair_width=landing_stair_width, width=d.landing_tread_width,
            )
            items.append(self._item(ConfigItemType.LANDING_TREAD, price, description="Landing tread",
                                    riser_number=request.num_risers, tread_type=TreadType.BOX.value,
                                    width=d.landing_tread_width, length=landing_stair_width,
                                    board_type=BoardRole.BOX_TREAD.value, material_id=tread_material_id))

        # 3. Risers: one per tread, plus one under the landing tread
        riser_groups = OrderedDict()
        for tread in request.treads:
            key = (RISER_STYLES[tread.type], tread.stair_width)
            riser_groups[key] = riser_groups.get(key, 0) + 1
        if has_landing:
            key = ("standard", landing_stair_width)
            riser_groups[key] = riser_groups.get(key, 0) + 1

        for (style, width), count in riser_groups.items():
            rule = resolve_rule(
                catalog, BoardRole.RISER, riser_material_id,
                length=width, width=d.riser_board_width,
                as_of=as_of, component=f"{style} riser at {width}\"",
            )
            price = self.pricer.price_riser(rule, riser_material, width, d.riser_board_width, count)
            subtotal += price.total_price
            breakdown["risers"].append(dict(price.to_dict(), type=style, width=width))
            items.append(self._item(ConfigItemType.RISER, price, description=f"{style} riser",
                                    width=d.riser_board_width, length=width,
                                    board_type=BoardRole.RISER.value, material_id=riser_material_id))

        # 4. Stringers: per riser, per side
        for line in stringer_lines:
            rule = resolve_rule(
                catalog, line["role"], line["material_id"],
                width=line["width"], thickness=line["thickness"],
                as_of=as_of, component=f"{line['label']} stringer",
            )
            material = catalog.get_material(line["material_id"])
            price = self.pricer.price_stringer(rule, material, line["width"], line["thickness"],
                                               request.num_risers, line["count"])
            subtotal += price.total_price
            breakdown["stringers"].append(dict(
                price.to_dict(),
                type="%s: %s\"×%s\"" % (line["label"], _num(line["thickness"]), _num(line["width"])),
                side=line["label"].lower(),
                count=line["count"],
                risers=request.num_risers,
                width=line["width"],
                thickness=line["thickness"],
                material_id=line["material_id"],
                unit_price_per_riser=price.unit_price,
            ))
            items.append(self._item(ConfigItemType.STRINGER, price, description=f"{line['label']} stringer",
                                    width=line["width"], thickness=line["thickness"],
                                    board_type=line["role"].value, material_id=line["material_id"]))

        # 5. Special parts: parts into subtotal, installation into labor
        for part, quantity in parts:
            price = self.pricer.price_special_part(part, quantity)
            subtotal += price.total_price
            labor_total += price.labor_total
            breakdown["special_parts"].append(price.to_dict())
            items.append({
                "item_type": ConfigItemType.SPECIAL_PART.value,
                "description": part.description,
                "special_part_id": part.part_id,
                "material_id": part.material_id,
                "quantity": quantity,
                "unit_price": price.unit_price,
                "labor_price": price.labor_total,
                "total_price": price.total_price,
            })

        subtotal = self.money(subtotal)
        labor_total = self.money(labor_total)
        breakdown["labor"].append({"description": "Installation Labor", "total_price": labor_total})

        tax_amount = self.money(subtotal * tax_rate)
        total = self.money(subtotal + labor_total + tax_amount)
        display_total = subtotal if request.hide_labor_and_tax else total

        return {
            "configuration": {
                "floor_to_floor": request.floor_to_floor,
                "num_risers": request.num_risers,
                "riser_height": request.floor_to_floor / request.num_risers,
                "riser_height_display": self.to_fraction(request.floor_to_floor / request.num_risers),
                "tread_width": tread_width,
                "full_mitre": request.full_mitre,
                "bracket_type": request.bracket_type,
                "has_landing_tread": has_landing,
                "tread_material_id": tread_material_id,
                "riser_material_id": riser_material_id,
                "tax_rate": tax_rate,
                "as_of": as_of.isoformat(),
            },
            "breakdown": breakdown,
            "items": items,
            "subtotal": self.money_str(subtotal),
            "labor_total": self.money_str(labor_total),
            "tax_amount": self.money_str(tax_amount),
            "total": self.money_str(total),
            "display_total": self.money_str(display_total),
            "hide_labor_and_tax": request.hide_labor_and_tax,
        }

    # --- Validation ---

    def _validate(self, request: StairPriceRequest, rough_cut: float, nose: float,
                  tax_rate: float) -> bool:
        """Raises PricingValidationError; returns whether a landing tread is needed."""
        if not _positive(request.floor_to_floor):
            raise PricingValidationError("Floor to floor height must be greater than 0")
        if request.num_risers is None or request.num_risers < 1:
            raise PricingValidationError("Number of risers must be at least 1")
        if not _positive(rough_cut):
            raise PricingValidationError("Rough cut width must be greater than 0")
        if not _non_negative(nose):
            raise PricingValidationError("Nose size must be a non-negative number")
        if not _non_negative(tax_rate):
            raise PricingValidationError("Tax rate must be a non-negative number")

        has_landing = landing_tread_required(len(request.treads), request.num_risers)

        seen = set()
        for tread in request.treads:
            if tread.riser_number < 1 or tread.riser_number > request.num_risers:
                raise PricingValidationError(
                    f"Tread riser number {tread.riser_number} is outside 1..{request.num_risers}"
                )
            if tread.riser_number in seen:
                raise PricingValidationError(f"Riser {tread.riser_number} has more than one tread")
            seen.add(tread.riser_number)
            if not _positive(tread.stair_width):
                raise PricingValidationError(
                    f"Stair width for riser {tread.riser_number} must be greater than 0"
                )

        if request.num_stringers < 1:
            raise PricingValidationError("At least one stringer is required")
        if request.center_horses < 0:
            raise PricingValidationError("Center horse count cannot be negative")
        for part in request.special_parts:
            if part.quantity < 1:
                raise PricingValidationError(f"Special part {part.part_id} quantity must be at least 1")
        return has_landing

    # --- Stringer resolution ---

    def _stringer_lines(self, request: StairPriceRequest) -> list:
        """
        Explicit left/right/center sides win. Otherwise the legacy single
        'thickness x width' label with num_stringers and center_horses.
        Otherwise the shop default stringer on both sides.
        """
        d = self.defaults
        lines = []
        if request.stringers is not None:
            sides = [("Left", request.stringers.left, BoardRole.STRINGER),
                     ("Right", request.stringers.right, BoardRole.STRINGER)]
            if request.stringers.center is not None:
                sides.append(("Center", request.stringers.center, BoardRole.CENTER_HORSE))
            for label, side, role in sides:
                lines.append(self._side_line(label, side, role))
        elif request.stringer_type:
            parsed = self.parse_dimension_label(request.stringer_type)
            if parsed is None:
                raise PricingValidationError(
                    f"Stringer type {request.stringer_type!r} is not a 'thickness x width' size"
                )
            thickness, width = parsed
            material_id = request.stringer_material_id or d.stringer_material_id
            lines.append(self._side_line(
                request.stringer_type,
                StringerSide(width=width, thickness=thickness, material_id=material_id,
                             count=request.num_stringers),
                BoardRole.STRINGER,
            ))
            if request.center_horses > 0:
                # Center horses are built double thickness
                lines.append(self._side_line(
                    "Center horse",
                    StringerSide(width=width, thickness=thickness * 2, material_id=material_id,
                                 count=request.center_horses),
                    BoardRole.CENTER_HORSE,
                ))
        else:
            material_id = request.stringer_material_id or d.stringer_material_id
            for label in ("Left", "Right"):
                lines.append(self._side_line(
                    label,
                    StringerSide(width=d.stringer_width, thickness=d.stringer_thickness,
                                 material_id=material_id),
                    BoardRole.STRINGER,
                ))
        return lines

    def _side_line(self, label: str, side: StringerSide, role: BoardRole) -> dict:
        if not (_positive(side.width) and _positive(side.thickness)):
            raise PricingValidationError(f"{label} stringer dimensions must be greater than 0")
        if side.count < 1:
            raise PricingValidationError(f"{label} stringer count must be at least 1")
        return {
            "label": label,
            "role": role,
            "width": side.width,
            "thickness": side.thickness,
            "material_id": side.material_id or self.defaults.stringer_material_id,
            "count": side.count,
        }

    def _item(self, item_type: ConfigItemType, price, **fields) -> dict:
        item = {
            "item_type": item_type.value,
            "quantity": price.quantity,
            "unit_price": price.unit_price,
            "labor_price": 0.0,
            "total_price": price.total_price,
        }
        item.update(fields)
        return item


def _num(value: float) -> str:
    return ("%g" % value) if value is not None else "?"
