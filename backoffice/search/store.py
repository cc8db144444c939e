from typing import Any, Protocol, Sequence, Tuple, Type
import logging

from sqlalchemy import and_, false, func, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from backoffice.search.predicates import AllOf, AnyOf, Contains, Eq, In, Nothing, Predicate

logger = logging.getLogger(__name__)

# ((field, "ASC" | "DESC"), ...)
OrderBy = Tuple[Tuple[str, str], ...]


class RecordStore(Protocol):
    async def count_matching(self, predicate: Predicate) -> int:
        ...

    async def find_matching(self, predicate: Predicate, order: OrderBy, limit: int, offset: int) -> Sequence[Any]:
        ...


def escape_like(term: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the term is matched literally."""
    return (
        term.replace(escape, escape * 2)
        .replace("%", f"{escape}%")
        .replace("_", f"{escape}_")
    )


class SQLAlchemyRecordStore:
    """
    Runs search predicates against one mapped model.

    ``options`` are loader options (``selectinload(...)``) applied to the page
    query only; they never affect the count or the WHERE clause.
    """

    def __init__(self, db: AsyncSession, model: Type[Any], options: Sequence[Any] = ()):
        self.db = db
        self.model = model
        self.options = tuple(options)

    def column(self, name: str):
        column = self.model.__table__.columns.get(name)
        if column is None:
            raise ValueError(f"{self.model.__name__} has no column {name!r}")
        return column

    def compile(self, predicate: Predicate) -> ColumnElement:
        if isinstance(predicate, Eq):
            return self.column(predicate.field) == predicate.value
        if isinstance(predicate, Contains):
            pattern = f"%{escape_like(predicate.term)}%"
            return self.column(predicate.field).ilike(pattern, escape="\\")
        if isinstance(predicate, In):
            if not predicate.values:
                return false()
            return self.column(predicate.field).in_(predicate.values)
        if isinstance(predicate, AnyOf):
            if not predicate.predicates:
                return false()
            return or_(*(self.compile(p) for p in predicate.predicates))
        if isinstance(predicate, AllOf):
            if not predicate.predicates:
                return true()
            return and_(*(self.compile(p) for p in predicate.predicates))
        if isinstance(predicate, Nothing):
            return false()
        raise TypeError(f"Unsupported predicate: {predicate!r}")

    async def count_matching(self, predicate: Predicate) -> int:
        query = select(func.count()).select_from(self.model).where(self.compile(predicate))
        result = await self.db.execute(query)
        return result.scalar_one()

    async def find_matching(self, predicate: Predicate, order: OrderBy, limit: int, offset: int) -> Sequence[Any]:
        columns = [self.column(name) for name, _ in order]
        order_clause = [
            column.asc() if direction == "ASC" else column.desc()
            for column, (_, direction) in zip(columns, order)
        ]
        query = (
            select(self.model)
            .where(self.compile(predicate))
            .order_by(*order_clause)
            .offset(offset)
            .limit(limit)
        )
        if self.options:
            query = query.options(*self.options)
        result = await self.db.execute(query)
        return list(result.scalars().all())
