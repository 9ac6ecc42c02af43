from __future__ import annotations

import sqlite3

import pytest

from db import schema
from db.repos.companies_repo import CompaniesRepo, compile_predicate
from db.repos.customer_companies_repo import CustomerCompaniesRepo
from db.repos.lists_repo import ListsRepo
from db.repos.metadata_repo import CompanyMetadataRepo
from db.repos.tenants_repo import TenantsRepo
from models.filter_criteria import FilterCriteria, Many, One, SortSpec, EmployeeRange
from services.predicates import ILike
from services.query_builder import build_company_query


def _seed(conn):
    companies = CompaniesRepo(conn)
    overlays = CustomerCompaniesRepo(conn)
    tenants = TenantsRepo(conn)
    tenants.create_customer("Tenant A", customer_id="tA")
    tenants.create_customer("Tenant B", customer_id="tB")
    rows = [
        {"display_name": "Acme Pay", "domain": "acmepay.com", "country": "USA", "employees": 40, "categories": ["fintech"], "technologies": ["python"]},
        {"display_name": "Acme Health", "domain": "acmehealth.com", "country": "USA", "employees": 300, "categories": ["healthcare"]},
        {"display_name": "Beta Logistics", "domain": "beta.de", "country": "DE", "employees": 0, "categories": ["logistics"]},
        {"display_name": "Gamma 100%_Sure", "domain": "gamma.io", "country": "DE", "employees": 12000, "categories": ["fintech", "saas"]},
    ]
    ids = {}
    for r in rows:
        cid = companies.upsert_by_domain(r)
        overlays.upsert("tA", cid)
        ids[r["display_name"]] = cid
    # Tenant B only sees one company
    other = companies.upsert_by_domain({"display_name": "Other Corp", "domain": "other.com", "country": "USA"})
    overlays.upsert("tB", other)
    ids["Other Corp"] = other
    return ids


@pytest.fixture()
def conn(tmp_path):
    conn = sqlite3.connect(str(tmp_path / "t.db"))
    schema.bootstrap(conn)
    yield conn
    conn.close()


def _names(conn, criteria, tenant="tA"):
    rows, total = CompaniesRepo(conn).search(build_company_query(criteria, tenant))
    return sorted(r.display_name for r in rows), total


def test_tenant_isolation(conn):
    _seed(conn)
    names, total = _names(conn, FilterCriteria(page_size=50), tenant="tA")
    assert total == 4
    assert "Other Corp" not in names
    names, total = _names(conn, FilterCriteria(page_size=50), tenant="tB")
    assert names == ["Other Corp"]
    names, total = _names(conn, FilterCriteria(page_size=50), tenant="nobody")
    assert (names, total) == ([], 0)


def test_category_filter_is_a_union(conn):
    _seed(conn)
    names, total = _names(conn, FilterCriteria(categories=Many(("fintech", "healthcare")), page_size=50))
    assert names == ["Acme Health", "Acme Pay", "Gamma 100%_Sure"]
    assert total == 3


def test_scalar_and_singleton_country_match_the_same_rows(conn):
    from services.filter_normalizer import normalize

    _seed(conn)
    a = _names(conn, normalize({"country": "USA"}, default_page_size=10, max_page_size=100))
    b = _names(conn, normalize({"country": ["USA"]}, default_page_size=10, max_page_size=100))
    assert a == b == (["Acme Health", "Acme Pay"], 2)


def test_country_many_uses_in(conn):
    _seed(conn)
    names, total = _names(conn, FilterCriteria(countries=Many(("USA", "DE")), page_size=50))
    assert total == 4


def test_search_is_case_insensitive_and_literal(conn):
    _seed(conn)
    assert _names(conn, FilterCriteria(search_text="ACME"))[1] == 2
    # Matches the domain column too
    assert _names(conn, FilterCriteria(search_text="beta.de"))[0] == ["Beta Logistics"]
    # LIKE wildcards in the search text are matched literally
    assert _names(conn, FilterCriteria(search_text="100%_s"))[0] == ["Gamma 100%_Sure"]
    assert _names(conn, FilterCriteria(search_text="%"))[0] == ["Gamma 100%_Sure"]


def test_employee_range_keeps_zero_lower_bound(conn):
    _seed(conn)
    names, _ = _names(conn, FilterCriteria(employee_range=EmployeeRange(min=0, max=50)))
    assert names == ["Acme Pay", "Beta Logistics"]
    names, _ = _names(conn, FilterCriteria(employee_range=EmployeeRange(min=10001)))
    assert names == ["Gamma 100%_Sure"]


def test_technology_filter(conn):
    _seed(conn)
    assert _names(conn, FilterCriteria(technologies=One("python")))[0] == ["Acme Pay"]


def test_sorting_and_paging_window(conn):
    _seed(conn)
    repo = CompaniesRepo(conn)
    criteria = FilterCriteria(sort=SortSpec(key="display_name", direction="asc"), page=2, page_size=2)
    rows, total = repo.search(build_company_query(criteria, "tA"))
    assert total == 4
    assert [r.display_name for r in rows] == ["Beta Logistics", "Gamma 100%_Sure"]


def test_list_filter_only_returns_members_of_live_tenant_list(conn):
    ids = _seed(conn)
    lists = ListsRepo(conn)
    list_id = lists.create_list("tA", "Targets")
    lists.add_company(list_id, ids["Acme Pay"])
    assert _names(conn, FilterCriteria(list_id=list_id)) == (["Acme Pay"], 1)
    # Another tenant cannot use the list
    assert _names(conn, FilterCriteria(list_id=list_id), tenant="tB") == ([], 0)
    conn.execute("UPDATE lists SET deleted_at = '2024-01-01' WHERE list_id = ?", (list_id,))
    assert _names(conn, FilterCriteria(list_id=list_id)) == ([], 0)


def test_unknown_sort_key_is_rejected(conn):
    _seed(conn)
    with pytest.raises(ValueError):
        CompaniesRepo(conn).search(build_company_query(FilterCriteria(sort=SortSpec(key="1; DROP TABLE companies")), "tA"))


def test_unknown_filter_column_is_rejected():
    with pytest.raises(ValueError):
        compile_predicate(ILike("password", "x"))


def test_values_are_bound_not_interpolated():
    sql, params = compile_predicate(ILike("display_name", "o'brien"))
    assert "o'brien" not in sql
    assert params == ["%o'brien%"]


def test_round_trip_arrays_and_upsert_by_domain(conn):
    repo = CompaniesRepo(conn)
    cid = repo.upsert_by_domain({"display_name": "Acme", "domain": "acme.com", "categories": ["a", "b"], "social_links": {"x": "https://x.com/acme"}})
    again = repo.upsert_by_domain({"domain": "acme.com", "country": "DE"})
    assert again == cid
    rec = repo.get_by_id(cid)
    assert rec.display_name == "Acme"
    assert rec.country == "DE"
    assert rec.categories == ["a", "b"]
    assert rec.social_links == {"x": "https://x.com/acme"}
    assert rec.created_at
    assert repo.get_by_id("missing") is None


def test_update_fields_writes_only_known_columns(conn):
    repo = CompaniesRepo(conn)
    cid = repo.upsert_by_domain({"display_name": "Acme", "domain": "acme.com"})
    assert repo.update_fields(cid, {"description": "Payments", "technologies": ["go"], "bogus": 1}) == 1
    rec = repo.get_by_id(cid)
    assert rec.description == "Payments"
    assert rec.technologies == ["go"]


def test_overlay_and_list_and_metadata_repos(conn):
    ids = _seed(conn)
    cid = ids["Acme Pay"]
    overlays = CustomerCompaniesRepo(conn)
    overlays.upsert("tA", cid, {"employees": 55, "last_scoring_results": {"score": 87}})
    got = overlays.get("tA", cid)
    assert got.employees == 55
    assert got.last_scoring_results == {"score": 87}
    assert overlays.get("tB", cid) is None
    assert set(overlays.get_for_companies("tA", [cid, ids["Beta Logistics"]])) == {cid, ids["Beta Logistics"]}
    assert overlays.get_for_companies("tA", []) == {}

    lists = ListsRepo(conn)
    l1 = lists.create_list("tA", "Targets", description="Q3")
    lists.create_list("tB", "Theirs")
    lists.add_company(l1, cid)
    lists.add_company(l1, cid)
    found = lists.lists_for_company(cid, "tA")
    assert [(r.list_id, r.name, r.description) for r in found] == [(l1, "Targets", "Q3")]
    assert lists.lists_for_company(cid, "tB") == []

    meta = CompanyMetadataRepo(conn)
    assert meta.latest_diffbot_json(cid) is None
    meta.save_diffbot_json(cid, {"v": 1})
    meta.save_diffbot_json(cid, {"v": 2})
    assert meta.latest_diffbot_json(cid) == {"v": 2}


def test_get_for_tenant_requires_membership(conn):
    ids = _seed(conn)
    repo = CompaniesRepo(conn)
    assert repo.get_for_tenant(ids["Acme Pay"], "tA").display_name == "Acme Pay"
    assert repo.get_for_tenant(ids["Acme Pay"], "tB") is None
    assert repo.get_for_tenant(ids["Other Corp"], "tA") is None
    assert repo.get_for_tenant("missing", "tA") is None


def test_overlay_update_never_creates_a_row(conn):
    ids = _seed(conn)
    overlays = CustomerCompaniesRepo(conn)
    assert overlays.update("tB", ids["Acme Pay"], {"employees": 1}) == 0
    assert overlays.get("tB", ids["Acme Pay"]) is None
    assert overlays.update("tA", ids["Acme Pay"], {"employees": 1, "categories": ["b2b"], "bogus": 2}) == 1
    got = overlays.get("tA", ids["Acme Pay"])
    assert got.employees == 1
    assert got.categories == ["b2b"]


def test_filters_and_sort_read_tenant_overrides(conn):
    ids = _seed(conn)
    overlays = CustomerCompaniesRepo(conn)
    overlays.update("tA", ids["Beta Logistics"], {"country": "USA", "employees": 50000, "name": "Beta US"})
    # An empty override list falls back to catalog categories
    overlays.update("tA", ids["Acme Pay"], {"categories": []})

    names, total = _names(conn, FilterCriteria(countries=One("DE")))
    assert (names, total) == (["Gamma 100%_Sure"], 1)
    names, _ = _names(conn, FilterCriteria(categories=One("fintech")))
    assert names == ["Acme Pay", "Gamma 100%_Sure"]
    names, _ = _names(conn, FilterCriteria(search_text="beta us"))
    assert names == ["Beta Logistics"]

    rows, _ = CompaniesRepo(conn).search(
        build_company_query(FilterCriteria(sort=SortSpec(key="employees", direction="desc")), "tA")
    )
    assert rows[0].display_name == "Beta Logistics"
    # Other tenants keep reading catalog values
    overlays.upsert("tB", ids["Beta Logistics"])
    names, _ = _names(conn, FilterCriteria(countries=One("DE")), tenant="tB")
    assert names == ["Beta Logistics"]


def test_tenant_membership(conn):
    tenants = TenantsRepo(conn)
    tenants.create_customer("A", customer_id="tA")
    tenants.add_member("u1", "tA")
    assert tenants.customer_for_user("u1") == "tA"
    assert tenants.customer_for_user("u2") is None
    tenants.create_customer("B", customer_id="tB")
    tenants.add_member("u1", "tB")
    assert tenants.customer_for_user("u1") == "tB"
