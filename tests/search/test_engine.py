import math
import pytest
from datetime import datetime, timedelta
from typing import Any, Dict, List

from backoffice.search import PaginatedSearch, SearchConfig, SearchError, SearchParams
from backoffice.search.configs import PROPERTY_SEARCH, VISA_SEARCH, CLIENT_SEARCH, USER_SEARCH
from backoffice.search.engine import resolve_limit, resolve_page, resolve_sort_order
from backoffice.search.predicates import AllOf, AnyOf, Contains, Eq, In, Nothing, NOTHING


def matches(predicate, record: Dict[str, Any]) -> bool:
    if isinstance(predicate, Eq):
        return record.get(predicate.field) == predicate.value
    if isinstance(predicate, Contains):
        value = record.get(predicate.field)
        return value is not None and predicate.term.lower() in str(value).lower()
    if isinstance(predicate, In):
        return record.get(predicate.field) in predicate.values
    if isinstance(predicate, AnyOf):
        return any(matches(p, record) for p in predicate.predicates)
    if isinstance(predicate, AllOf):
        return all(matches(p, record) for p in predicate.predicates)
    if isinstance(predicate, Nothing):
        return False
    raise TypeError(predicate)


class ListStore:
    """Record store over a list of dicts, used to check the engine on its own."""

    def __init__(self, records: List[Dict[str, Any]]):
        self.records = records
        self.count_calls = []

    async def count_matching(self, predicate):
        self.count_calls.append(predicate)
        return sum(1 for r in self.records if matches(predicate, r))

    async def find_matching(self, predicate, order, limit, offset):
        rows = [r for r in self.records if matches(predicate, r)]
        for field, direction in reversed(order):
            rows.sort(key=lambda r: r[field], reverse=direction == "DESC")
        return rows[offset:offset + limit]


class FailingStore:
    async def count_matching(self, predicate):
        raise ConnectionError("connection refused")

    async def find_matching(self, predicate, order, limit, offset):
        raise AssertionError("not reached")


def make_properties(active: int, inactive: int) -> List[Dict[str, Any]]:
    start = datetime(2024, 1, 1)
    records = []
    for i in range(active + inactive):
        records.append({
            "id": i + 1,
            "property_name": f"Property {i + 1}",
            "is_active": i < active,
            "created_at": start + timedelta(days=i),
        })
    return records


class TestParameterResolution:
    @pytest.mark.parametrize("requested,expected", [
        (0, 1), (-5, 1), (1, 1), (50, 50), (100, 100), (101, 100), (10_000, 100),
        ("25", 25), ("abc", 10), (None, 10), (2.5, 10),
    ])
    def test_limit_is_clamped(self, requested, expected):
        assert resolve_limit(requested) == expected

    @pytest.mark.parametrize("requested,expected", [
        (0, 1), (-1, 1), ("x", 1), (None, 1), (3, 3), ("4", 4), (1.5, 1), (True, 1),
    ])
    def test_page_falls_back_to_first(self, requested, expected):
        assert resolve_page(requested) == expected

    @pytest.mark.parametrize("requested,expected", [
        ("asc", "ASC"), ("ASC", "ASC"), ("desc", "DESC"), ("Desc", "DESC"),
        ("up", "DESC"), ("", "DESC"), (None, "DESC"), (1, "DESC"),
    ])
    def test_sort_order(self, requested, expected):
        assert resolve_sort_order(requested) == expected

    def test_unknown_sort_field_uses_default(self):
        engine = PaginatedSearch(CLIENT_SEARCH)
        assert engine.resolve_sort_by("password") == "created_at"
        assert engine.resolve_sort_by("name; DROP TABLE clients") == "created_at"
        assert engine.resolve_sort_by(None) == "created_at"

    def test_sort_aliases_and_allowed_fields(self):
        engine = PaginatedSearch(CLIENT_SEARCH)
        assert engine.resolve_sort_by("createdAt") == "created_at"
        assert engine.resolve_sort_by("updatedAt") == "updated_at"
        assert engine.resolve_sort_by("family_name") == "family_name"

    def test_id_breaks_ties(self):
        resolved = PaginatedSearch(USER_SEARCH).resolve(SearchParams(sort_by="name", sort_order="asc"))
        assert resolved.order == (("name", "ASC"), ("id", "ASC"))

        resolved = PaginatedSearch(USER_SEARCH).resolve(SearchParams(sort_by="id"))
        assert resolved.order == (("id", "DESC"),)

    def test_configured_maximum(self):
        engine = PaginatedSearch(USER_SEARCH, default_limit=20, max_limit=50)
        assert engine.resolve(SearchParams()).limit == 20
        assert engine.resolve(SearchParams(limit=500)).limit == 50

    def test_default_sort_must_be_allowed(self):
        with pytest.raises(ValueError):
            SearchConfig(entity="broken", sort_fields=("id",), default_sort="created_at")


class TestPredicates:
    def test_blank_search_matches_everything(self):
        engine = PaginatedSearch(CLIENT_SEARCH)
        assert engine.resolve(SearchParams(search="   ")).predicate == AllOf(())

    def test_search_is_trimmed_and_spans_text_fields(self):
        predicate = PaginatedSearch(USER_SEARCH).resolve(SearchParams(search="  ann ")).predicate
        assert predicate == AnyOf((Contains("name", "ann"), Contains("email", "ann")))

    def test_unset_and_undeclared_filters_are_skipped(self):
        engine = PaginatedSearch(CLIENT_SEARCH)
        predicate = engine.filter_predicate({
            "nationality": "",
            "is_active": None,
            "created_by": 3,
            "hashed_password": "x",
        })
        assert predicate == Eq("created_by", 3)

    def test_false_is_a_real_filter_value(self):
        predicate = PaginatedSearch(CLIENT_SEARCH).filter_predicate({"is_active": False})
        assert predicate == Eq("is_active", False)

    def test_search_and_filters_are_conjoined(self):
        predicate = PaginatedSearch(PROPERTY_SEARCH).resolve(
            SearchParams(search="condo", filters={"is_active": True, "client_id": 7})
        ).predicate
        assert isinstance(predicate, AllOf)
        search_part, filter_part = predicate.predicates
        assert isinstance(search_part, AnyOf)
        assert In("property_type", ("condominium_freehold", "condominium_leasehold")) in search_part.predicates
        assert filter_part == AllOf((Eq("is_active", True), Eq("client_id", 7)))

    def test_enum_label_matches(self):
        predicate = PaginatedSearch(PROPERTY_SEARCH).search_predicate("empty land")
        assert In("property_type", ("empty_land",)) in predicate.predicates

    def test_enum_only_search_without_match_is_nothing(self):
        engine = PaginatedSearch(VISA_SEARCH)
        resolved = engine.resolve(SearchParams(search="zzz-no-match", filters={"is_active": True}))
        assert resolved.predicate == NOTHING


class TestSearch:
    async def test_property_page_two_of_active(self):
        store = ListStore(make_properties(active=12, inactive=3))
        page = await PaginatedSearch(PROPERTY_SEARCH).search(
            store, SearchParams(page=2, limit=5, filters={"is_active": True})
        )

        assert page.pagination.model_dump(by_alias=True) == {
            "currentPage": 2,
            "totalPages": 3,
            "totalItems": 12,
            "itemsPerPage": 5,
        }
        # Newest first by default: active ids 12..1, page 2 holds the 6th to 10th
        assert [r["id"] for r in page.result] == [7, 6, 5, 4, 3]
        assert all(r["is_active"] for r in page.result)

    async def test_total_pages_is_ceiling(self):
        store = ListStore(make_properties(active=7, inactive=0))
        for limit in (1, 2, 3, 7, 8, 100):
            page = await PaginatedSearch(PROPERTY_SEARCH).search(store, SearchParams(limit=limit))
            assert page.pagination.total_pages == math.ceil(page.pagination.total_count / page.pagination.limit)

    async def test_empty_store(self):
        page = await PaginatedSearch(PROPERTY_SEARCH).search(ListStore([]))
        assert page.result == []
        assert page.pagination.total_items == 0
        assert page.pagination.total_pages == 0

    async def test_page_past_the_end(self):
        store = ListStore(make_properties(active=3, inactive=0))
        page = await PaginatedSearch(PROPERTY_SEARCH).search(store, SearchParams(page=9))
        assert page.result == []
        assert page.pagination.current_page == 9
        assert page.pagination.total_items == 3

    async def test_idempotent(self):
        records = make_properties(active=10, inactive=0)
        for r in records:
            r["created_at"] = datetime(2024, 1, 1)  # all tied
        store = ListStore(records)
        params = SearchParams(page=2, limit=4, sort_by="created_at", sort_order="asc")
        engine = PaginatedSearch(PROPERTY_SEARCH)

        first = await engine.search(store, params)
        second = await engine.search(store, params)
        assert [r["id"] for r in first.result] == [r["id"] for r in second.result] == [5, 6, 7, 8]
        assert first.pagination == second.pagination

    async def test_filter_conjunction(self):
        store = ListStore([
            {"id": 1, "client_id": 1, "is_active": True, "created_at": 1},
            {"id": 2, "client_id": 1, "is_active": False, "created_at": 2},
            {"id": 3, "client_id": 2, "is_active": True, "created_at": 3},
            {"id": 4, "client_id": 2, "is_active": False, "created_at": 4},
        ])
        page = await PaginatedSearch(VISA_SEARCH).search(
            store, SearchParams(filters={"client_id": 1, "is_active": True})
        )
        assert [r["id"] for r in page.result] == [1]
        assert page.pagination.total_items == 1

    async def test_visa_enum_search(self):
        store = ListStore([
            {"id": 1, "existing_visa": None, "wished_visa": "retirement_visa", "created_at": 1},
            {"id": 2, "existing_visa": None, "wished_visa": "student_visa_language_school", "created_at": 2},
            {"id": 3, "existing_visa": "tourist_visa_60_day", "wished_visa": "retirement_visa", "created_at": 3},
        ])
        page = await PaginatedSearch(VISA_SEARCH).search(store, SearchParams(search="retiremen"))
        assert sorted(r["id"] for r in page.result) == [1, 3]

        page = await PaginatedSearch(VISA_SEARCH).search(store, SearchParams(search="Language School"))
        assert [r["id"] for r in page.result] == [2]

    async def test_visa_search_without_match(self):
        store = ListStore([
            {"id": 1, "existing_visa": None, "wished_visa": "retirement_visa", "created_at": 1},
        ])
        page = await PaginatedSearch(VISA_SEARCH).search(store, SearchParams(search="zzz-no-match"))
        assert page.result == []
        assert page.pagination.total_count == 0
        assert store.count_calls == [NOTHING]

    async def test_store_failure_is_wrapped(self):
        with pytest.raises(SearchError) as exc_info:
            await PaginatedSearch(USER_SEARCH).search(FailingStore(), SearchParams())
        assert str(exc_info.value) == "Pagination failed: connection refused"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
