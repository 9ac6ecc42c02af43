from __future__ import annotations

import math

import pytest

from models.company_record import CompanyRecord, CustomerCompanyRecord, ListRecord
from models.filter_criteria import FilterCriteria
from services.mapping import (
    build_paged_result,
    derive_numeric_id,
    map_to_items,
    parse_last_scoring_results,
    to_company_item,
    to_company_item_list,
)


def test_derive_numeric_id_is_lossy_hex_prefix():
    assert derive_numeric_id("0a1b2c3d-4e5f-6789-abcd-ef0123456789") == int("0a1b2c3d4e", 16)
    assert derive_numeric_id(None) == 0
    assert derive_numeric_id("") == 0
    assert derive_numeric_id("zzz") == 0


def test_null_company_id_maps_to_zero_without_error():
    item = to_company_item(CompanyRecord(display_name="Nameless"), now="2024-01-01T00:00:00+00:00")
    assert item.id == 0
    assert item.company_id is None
    assert item.created_at == "2024-01-01T00:00:00+00:00"
    assert item.updated_at == "2024-01-01T00:00:00+00:00"


def test_name_fallback_chain():
    assert to_company_item(CompanyRecord(company_id="a", legal_name="Legal Inc")).name == "Legal Inc"
    assert to_company_item(CompanyRecord(company_id="a")).name == "Unknown"
    overlay = CustomerCompanyRecord(customer_id="t", company_id="a", name="Tenant Name")
    assert to_company_item(CompanyRecord(company_id="a", display_name="Display"), overlay).name == "Tenant Name"


def test_overlay_values_take_precedence():
    company = CompanyRecord(
        company_id="abc",
        display_name="Acme",
        website_url="https://acme.com",
        country="USA",
        region="CA",
        employees=10,
        revenue=1.0,
        categories=["fintech"],
    )
    overlay = CustomerCompanyRecord(
        customer_id="t",
        company_id="abc",
        country="DE",
        employees=0,
        categories=[],
        last_scoring_results={"score": 91, "short_description": "Good fit"},
    )
    item = to_company_item(company, overlay)
    assert item.country == "DE"
    assert item.region == "CA"
    assert item.employees == 0
    assert item.revenue == 1.0
    # Empty overlay categories do not hide the catalog ones
    assert item.categories == ["fintech"]
    assert item.website == item.homepage_uri == "https://acme.com"
    assert item.last_scoring_results.score == 91
    assert item.last_scoring_results.short_description == "Good fit"
    assert item.last_scoring_results.full_description == ""


@pytest.mark.parametrize("raw", [None, {}, "not json", [1, 2]])
def test_invalid_scoring_results_are_dropped(raw):
    assert parse_last_scoring_results(raw) is None


def test_scoring_results_with_wrong_types_use_defaults():
    r = parse_last_scoring_results({"score": "high", "short_description": 3})
    assert r.score == 0
    assert r.short_description == ""


def test_list_mapping():
    lst = to_company_item_list(ListRecord(list_id="ff00", name=None, description=""))
    assert lst.id == 0xFF00
    assert lst.name == "Unknown"
    assert lst.description is None
    assert lst.is_attached


@pytest.mark.parametrize(
    "total, page, size",
    [(0, 1, 10), (1, 1, 10), (10, 1, 10), (11, 2, 10), (25, 3, 10), (25, 4, 10), (99, 1, 100)],
)
def test_pagination_metadata_from_total(total, page, size):
    r = build_paged_result([], total, page, size)
    assert r.total_pages == math.ceil(total / size)
    assert r.has_next == (page < r.total_pages)
    assert r.has_prev == (page > 1)
    assert r.next == (page + 1 if r.has_next else None)
    assert r.prev == (page - 1 if r.has_prev else None)


def test_page_beyond_end_is_empty_but_consistent():
    r = build_paged_result([], 25, 5, 10)
    assert r.items == []
    assert r.total_count == 25
    assert r.total_pages == 3
    assert not r.has_next
    assert r.has_prev


def test_map_to_items_keeps_row_order_and_attaches_overlays():
    rows = [CompanyRecord(company_id="b1", display_name="B"), CompanyRecord(company_id="a1", display_name="A")]
    overlays = {"a1": CustomerCompanyRecord(customer_id="t", company_id="a1", last_scoring_results={"score": 5})}
    result = map_to_items(rows, 12, FilterCriteria(page=1, page_size=2), overlays)
    assert [i.name for i in result.items] == ["B", "A"]
    assert result.items[0].last_scoring_results is None
    assert result.items[1].last_scoring_results.score == 5
    assert result.total_pages == 6
    assert result.has_next
