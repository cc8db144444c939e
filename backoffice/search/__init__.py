from backoffice.search.engine import (
    EnumSearchField, PaginatedSearch, SearchConfig, SearchError, SearchParams, SearchResult,
)
from backoffice.search.store import RecordStore, SQLAlchemyRecordStore

__all__ = [
    'EnumSearchField',
    'PaginatedSearch',
    'SearchConfig',
    'SearchError',
    'SearchParams',
    'SearchResult',
    'RecordStore',
    'SQLAlchemyRecordStore',
]
