from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

RECENT_DAYS = 30
UPCOMING_DAYS = 30
TOP_GROUPS = 10


def recent_since(days: int = RECENT_DAYS) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def upcoming_window(days: int = UPCOMING_DAYS):
    """``(today, today + days)`` for date columns."""
    today = date.today()
    return today, today + timedelta(days=days)


async def count_rows(db: AsyncSession, model, *conditions) -> int:
    query = select(func.count()).select_from(model)
    if conditions:
        query = query.where(*conditions)
    return (await db.execute(query)).scalar_one()


async def count_by(db: AsyncSession, column, key: str, limit: int = TOP_GROUPS) -> List[Dict[str, Any]]:
    """
    Most common values of ``column`` as ``[{key: value, "count": n}, ...]``,
    largest group first. Enum values are reported by their stored value.
    """
    count = func.count().label("count")
    rows = await db.execute(
        select(column, count)
        .group_by(column)
        .order_by(count.desc(), column)
        .limit(limit)
    )
    return [
        {key: getattr(value, "value", value), "count": n}
        for value, n in rows.all()
    ]
