from typing import Generic, List, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageInfo(BaseModel):
    """Pagination metadata returned alongside every search page."""

    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_items: int = Field(..., alias="totalItems")
    items_per_page: int = Field(..., alias="itemsPerPage")

    @property
    def total_count(self) -> int:
        return self.total_items

    @property
    def limit(self) -> int:
        return self.items_per_page


class Page(BaseModel, Generic[T]):
    result: List[T]
    pagination: PageInfo
