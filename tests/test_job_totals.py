"""
Job totals — taxable / non-taxable split, tax, grand total.
"""

from backend.calculators.job_totals import (
    calculate_job_totals, calculate_section_totals, format_tax_rate, generate_job_summary,
)


def _sections():
    return [
        {"id": 1, "name": "Stairs", "items": [
            {"description": "Main stair", "line_total": 100, "is_taxable": True},
            {"description": "Delivery", "line_total": 50, "is_taxable": False},
        ]},
    ]


def test_taxable_and_non_taxable_split():
    totals = calculate_job_totals(_sections(), 0.06)
    assert totals.taxable_total == 100.0
    assert totals.non_taxable_total == 50.0
    assert totals.tax_amount == 6.0
    assert totals.grand_total == 156.0


def test_missing_line_total_falls_back_to_quantity_times_price():
    section = {"items": [{"quantity": 3, "unit_price": 12.5, "is_taxable": True}]}
    assert calculate_section_totals(section).taxable_total == 37.5


def test_non_numeric_values_count_as_zero():
    section = {"items": [
        {"line_total": "abc", "is_taxable": True},
        {"line_total": None, "quantity": None, "unit_price": 10, "is_taxable": False},
    ]}
    totals = calculate_section_totals(section)
    assert totals.taxable_total == 0.0
    assert totals.non_taxable_total == 0.0
    assert totals.item_count == 2


def test_empty_job_is_all_zero():
    totals = calculate_job_totals([], 0.06)
    assert totals.grand_total == 0.0


def test_grand_total_identity_with_odd_cents():
    sections = [{"items": [
        {"line_total": 33.33, "is_taxable": True},
        {"line_total": 33.33, "is_taxable": True},
        {"line_total": 0.01, "is_taxable": False},
    ]}]
    totals = calculate_job_totals(sections, 0.0725)
    assert totals.tax_amount == 4.83
    assert totals.grand_total == round(totals.taxable_total + totals.non_taxable_total + totals.tax_amount, 2)


def test_summary_counts_and_formatting():
    summary = generate_job_summary(_sections(), 0.06)
    assert summary["item_count"] == 2
    assert summary["section_count"] == 1
    assert summary["tax_rate_formatted"] == "6.00%"
    assert summary["section_breakdown"][0]["section_total"] == 150.0
    assert format_tax_rate(0.0725) == "7.25%"
