"""
Paginated search shared by every back-office entity.

One ``PaginatedSearch`` is built per entity from a ``SearchConfig`` that
declares which fields take part in free-text search, which fields can be used
as exact-match filters and which fields the caller may sort by. Paging input is
clamped, never rejected; the only error raised is ``SearchError`` when the
record store itself fails.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from backoffice.schemas.pagination import PageInfo
from backoffice.search.predicates import (
    Contains, Eq, In, NOTHING, EVERYTHING, Predicate, all_of, any_of,
)
from backoffice.search.store import OrderBy, RecordStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
ASC = "ASC"
DESC = "DESC"

# camelCase sort names accepted from older clients
SORT_ALIASES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


class SearchError(Exception):
    """The record store failed while answering a search."""


@dataclass(frozen=True)
class EnumSearchField:
    """
    A closed-vocabulary field searched through its member list.

    A member matches a term when its stored value or its display label contains
    the term, ignoring case. Records are then matched on the field being equal
    to one of the matching members.
    """
    field: str
    values: Tuple[str, ...]
    labels: Mapping[str, str] = field(default_factory=dict)

    def matching_values(self, term: str) -> Tuple[str, ...]:
        needle = term.lower()
        return tuple(
            value for value in self.values
            if needle in value.lower() or needle in self.labels.get(value, "").lower()
        )


@dataclass(frozen=True)
class SearchConfig:
    entity: str
    sort_fields: Tuple[str, ...]
    text_fields: Tuple[str, ...] = ()
    enum_fields: Tuple[EnumSearchField, ...] = ()
    filter_fields: Tuple[str, ...] = ()
    default_sort: str = "created_at"
    primary_key: str = "id"

    def __post_init__(self):
        if self.default_sort not in self.sort_fields:
            raise ValueError(f"{self.entity}: default sort {self.default_sort!r} is not in the sort allow-list")


@dataclass
class SearchParams:
    page: Any = None
    limit: Any = None
    search: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ResolvedSearch:
    page: int
    limit: int
    offset: int
    predicate: Predicate
    order: OrderBy


@dataclass
class SearchResult:
    result: List[Any]
    pagination: PageInfo

    def as_dict(self) -> Dict[str, Any]:
        return {"result": self.result, "pagination": self.pagination}


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def resolve_page(value: Any) -> int:
    page = _as_int(value)
    if page is None or page < 1:
        return DEFAULT_PAGE
    return page


def resolve_limit(value: Any, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    limit = _as_int(value)
    if limit is None:
        limit = default
    return max(1, min(maximum, limit))


def resolve_sort_order(value: Any) -> str:
    if isinstance(value, str) and value.strip().upper() in (ASC, DESC):
        return value.strip().upper()
    return DESC


def resolve_search_term(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    term = value.strip()
    return term or None


def is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class PaginatedSearch:
    """Search engine for one entity."""

    def __init__(self, config: SearchConfig, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT):
        self.config = config
        self.max_limit = max_limit
        self.default_limit = max(1, min(default_limit, max_limit))

    def resolve_sort_by(self, value: Any) -> str:
        if not isinstance(value, str):
            return self.config.default_sort
        name = SORT_ALIASES.get(value, value)
        if name in self.config.sort_fields:
            return name
        return self.config.default_sort

    def search_predicate(self, term: Optional[str]) -> Predicate:
        if term is None:
            return EVERYTHING

        conditions = [Contains(name, term) for name in self.config.text_fields]
        for enum_field in self.config.enum_fields:
            matches = enum_field.matching_values(term)
            if matches:
                conditions.append(In(enum_field.field, matches))

        if not conditions:
            # Enum-only entity and no member matches the term
            logger.debug(f"{self.config.entity}: search term {term!r} matches no enum value")
            return NOTHING
        return any_of(*conditions)

    def filter_predicate(self, filters: Mapping[str, Any]) -> Predicate:
        conditions = []
        for name, value in filters.items():
            if name not in self.config.filter_fields:
                logger.debug(f"{self.config.entity}: ignoring undeclared filter {name!r}")
                continue
            if is_unset(value):
                continue
            conditions.append(Eq(name, value))
        return all_of(*conditions)

    def resolve(self, params: SearchParams) -> ResolvedSearch:
        page = resolve_page(params.page)
        limit = resolve_limit(params.limit, self.default_limit, self.max_limit)
        sort_by = self.resolve_sort_by(params.sort_by)
        sort_order = resolve_sort_order(params.sort_order)

        order: OrderBy = ((sort_by, sort_order),)
        if sort_by != self.config.primary_key:
            # Tie-breaker so equal sort keys always page the same way
            order += ((self.config.primary_key, sort_order),)

        predicate = all_of(
            self.search_predicate(resolve_search_term(params.search)),
            self.filter_predicate(params.filters or {}),
        )
        return ResolvedSearch(
            page=page,
            limit=limit,
            offset=(page - 1) * limit,
            predicate=predicate,
            order=order,
        )

    async def search(self, store: RecordStore, params: Optional[SearchParams] = None) -> SearchResult:
        resolved = self.resolve(params or SearchParams())
        logger.debug(
            f"{self.config.entity} search: page={resolved.page} limit={resolved.limit} "
            f"order={resolved.order} predicate={resolved.predicate}"
        )

        try:
            total = await store.count_matching(resolved.predicate)
            rows: Sequence[Any] = await store.find_matching(
                resolved.predicate, resolved.order, resolved.limit, resolved.offset
            )
        except Exception as e:
            logger.error(f"{self.config.entity} search failed: {e}")
            raise SearchError(f"Pagination failed: {e}") from e

        return SearchResult(
            result=list(rows),
            pagination=PageInfo(
                current_page=resolved.page,
                total_pages=math.ceil(total / resolved.limit),
                total_items=total,
                items_per_page=resolved.limit,
            ),
        )
