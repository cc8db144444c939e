from typing import Optional
from fastapi import Query

from backoffice.search import SearchParams


def search_params(
    page: Optional[str] = Query(None, description="1-based page; invalid values fall back to 1"),
    limit: Optional[str] = Query(None, description="Page size, clamped to 1..100"),
    search: Optional[str] = Query(None, description="Free-text search term"),
    sortBy: Optional[str] = Query(None, description="Field to sort by; unknown fields use the default"),
    sortOrder: Optional[str] = Query(None, description="ASC or DESC (default)"),
) -> SearchParams:
    """
    Paging and sorting query parameters shared by every list endpoint.

    ``page`` and ``limit`` are read as text so that out-of-range or
    non-numeric values are clamped by the search engine instead of rejected.
    """
    return SearchParams(
        page=page,
        limit=limit,
        search=search,
        sort_by=sortBy,
        sort_order=sortOrder,
    )
