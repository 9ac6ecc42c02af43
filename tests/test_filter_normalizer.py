from __future__ import annotations

import pytest

from models.companies_params import GetCompaniesParams
from models.filter_criteria import NO_FILTER, EmployeeRange, Many, One, SortSpec
from services.filter_normalizer import normalize, to_value_filter


def _norm(params):
    return normalize(params, default_page_size=10, max_page_size=100)


def test_defaults_for_empty_params():
    c = _norm({})
    assert c.search_text is None
    assert c.countries == NO_FILTER
    assert c.regions == NO_FILTER
    assert c.categories == NO_FILTER
    assert c.technologies == NO_FILTER
    assert c.employee_range == EmployeeRange()
    assert c.list_id is None
    assert c.sort == SortSpec(key="created_at", direction="desc")
    assert c.page == 1
    assert c.page_size == 10
    assert c.offset == 0


def test_none_params_use_settings_defaults(monkeypatch):
    from config.settings import get_settings

    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "7")
    monkeypatch.setenv("MAX_PAGE_SIZE", "50")
    get_settings.cache_clear()
    try:
        c = normalize(None)
        assert c.page_size == 7
        assert normalize({"limit": 500}).page_size == 50
    finally:
        get_settings.cache_clear()


@pytest.mark.parametrize("raw", [None, [], (), "", "   ", [None, ""], ["  "]])
def test_empty_values_mean_no_filter(raw):
    assert to_value_filter(raw) == NO_FILTER


def test_scalar_and_singleton_resolve_the_same():
    assert to_value_filter("USA") == One("USA")
    assert to_value_filter(["USA"]) == One("USA")
    assert to_value_filter([" USA ", "USA"]) == One("USA")


def test_many_keeps_request_order_and_drops_duplicates():
    assert to_value_filter(["fintech", "healthcare", "fintech"]) == Many(("fintech", "healthcare"))


def test_empty_arrays_equal_omitted_fields():
    omitted = _norm({"search": "x"})
    empty = _norm({"search": "x", "country": [], "region": [], "category": [], "technology": []})
    assert omitted == empty


def test_search_is_trimmed_and_blank_dropped():
    assert _norm({"search": "  Acme "}).search_text == "Acme"
    assert _norm({"search": "   "}).search_text is None


def test_zero_min_employees_is_kept():
    c = _norm({"min_employees": 0, "max_employees": "250"})
    assert c.employee_range == EmployeeRange(min=0, max=250)


def test_non_numeric_employee_bound_is_ignored():
    c = _norm({"min_employees": "many"})
    assert c.employee_range.min is None


def test_legacy_employee_buckets_fill_missing_bounds():
    c = _norm({"employees": ["11-50 employees", "51-200 employees"]})
    assert c.employee_range == EmployeeRange(min=11, max=200)

    c = _norm({"employees": ["1001-5000 employees", "10,001+ employees"], "max_employees": 3000})
    assert c.employee_range == EmployeeRange(min=1001, max=3000)


def test_category_takes_precedence_over_legacy_categories():
    assert _norm({"category": "fintech", "categories": ["saas"]}).categories == One("fintech")
    assert _norm({"categories": ["saas", "b2b"]}).categories == Many(("saas", "b2b"))


def test_sort_aliases_and_direction():
    c = _norm({"sortBy": "display_name", "sortOrder": "ASC"})
    assert c.sort == SortSpec(key="display_name", direction="asc")
    c = _norm({"orderBy": "employees", "orderDirection": "sideways"})
    assert c.sort == SortSpec(key="employees", direction="desc")


@pytest.mark.parametrize("key", ["limit", "perPage", "pageSize", "page_size"])
def test_page_size_aliases(key):
    assert _norm({key: 25}).page_size == 25


def test_page_size_is_capped_and_invalid_values_fall_back():
    assert _norm({"limit": 1000}).page_size == 100
    assert _norm({"limit": 0}).page_size == 10
    assert _norm({"limit": "abc"}).page_size == 10
    assert _norm({"page": -3}).page == 1
    assert _norm({"page": "2"}).page == 2


def test_offset_follows_page_and_size():
    c = _norm({"page": 3, "limit": 20})
    assert c.offset == 40


def test_list_id_aliases():
    assert _norm({"listId": " L1 "}).list_id == "L1"
    assert _norm({"list_id": "L2"}).list_id == "L2"


def test_accepts_typed_params_model():
    params = GetCompaniesParams(search="Acme", country=["DE", "AT"], perPage=5, sortBy="display_name", listId="L9")
    c = _norm(params)
    assert c.search_text == "Acme"
    assert c.countries == Many(("DE", "AT"))
    assert c.page_size == 5
    assert c.sort.key == "display_name"
    assert c.list_id == "L9"
