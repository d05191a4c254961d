"""
Job totals — taxable vs non-taxable sums across a job's sections.

Sections and items may be ORM rows or dicts. A missing or non-numeric
figure counts as 0; a missing line_total falls back to quantity × unit_price.
"""

from dataclasses import dataclass, asdict


def _get(obj, name, default=None):
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _num(value) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _money(value: float) -> float:
    return round(value + 0.0, 2)


@dataclass(frozen=True)
class SectionTotals:
    section_id: object
    section_name: str
    item_count: int
    taxable_total: float
    non_taxable_total: float
    section_total: float
    is_labor_section: bool

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class JobTotals:
    taxable_total: float
    non_taxable_total: float
    tax_amount: float
    grand_total: float

    def to_dict(self) -> dict:
        return asdict(self)


def item_line_total(item) -> float:
    line_total = _get(item, "line_total")
    if line_total is not None and line_total != "":
        return _num(line_total)
    return _num(_get(item, "quantity")) * _num(_get(item, "unit_price"))


def calculate_section_totals(section) -> SectionTotals:
    items = _get(section, "items") or []
    taxable = 0.0
    non_taxable = 0.0
    for item in items:
        amount = item_line_total(item)
        if _get(item, "is_taxable", False):
            taxable += amount
        else:
            non_taxable += amount
    return SectionTotals(
        section_id=_get(section, "id"),
        section_name=_get(section, "name", ""),
        item_count=len(items),
        taxable_total=_money(taxable),
        non_taxable_total=_money(non_taxable),
        section_total=_money(taxable + non_taxable),
        is_labor_section=bool(_get(section, "is_labor_section", False)),
    )


def calculate_job_totals(sections, tax_rate: float = 0.0) -> JobTotals:
    """tax = taxable × rate; grand total = taxable + non-taxable + tax."""
    taxable = 0.0
    non_taxable = 0.0
    for section in sections or []:
        totals = calculate_section_totals(section)
        taxable += totals.taxable_total
        non_taxable += totals.non_taxable_total

    taxable = _money(taxable)
    non_taxable = _money(non_taxable)
    tax_amount = _money(taxable * _num(tax_rate))
    return JobTotals(
        taxable_total=taxable,
        non_taxable_total=non_taxable,
        tax_amount=tax_amount,
        grand_total=_money(taxable + non_taxable + tax_amount),
    )


def format_tax_rate(rate: float) -> str:
    """0.06 -> '6.00%'"""
    return "%.2f%%" % (_num(rate) * 100)


def generate_job_summary(sections, tax_rate: float) -> dict:
    sections = list(sections or [])
    return {
        "totals": calculate_job_totals(sections, tax_rate).to_dict(),
        "section_breakdown": [calculate_section_totals(s).to_dict() for s in sections],
        "item_count": sum(len(_get(s, "items") or []) for s in sections),
        "section_count": len(sections),
        "tax_rate": _num(tax_rate),
        "tax_rate_formatted": format_tax_rate(tax_rate),
    }
