from typing import Optional, Any, Dict, List, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging

from backoffice.core.config import settings
from backoffice.crud.stats import count_by, count_rows, recent_since, upcoming_window
from backoffice.db.models import Visa
from backoffice.schemas.visa import VisaCreate, VisaUpdate
from backoffice.search import PaginatedSearch, SearchParams, SearchResult, SQLAlchemyRecordStore
from backoffice.search.configs import VISA_SEARCH

logger = logging.getLogger(__name__)

visa_search = PaginatedSearch(VISA_SEARCH, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)

VISA_LOADERS = (selectinload(Visa.client), selectinload(Visa.creator))


async def get_visa(db: AsyncSession, visa_id: int) -> Optional[Visa]:
    query = select(Visa).options(*VISA_LOADERS).where(Visa.id == visa_id)
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()

async def search_visas(db: AsyncSession, params: SearchParams) -> SearchResult:
    return await visa_search.search(SQLAlchemyRecordStore(db, Visa, options=VISA_LOADERS), params)

async def create_visa(db: AsyncSession, visa: VisaCreate, created_by: Optional[int]) -> Visa:
    try:
        db_visa = Visa(**visa.model_dump(), created_by=created_by)
        db.add(db_visa)
        await db.commit()
        logger.info(f"Visa created successfully with ID: {db_visa.id} for client {db_visa.client_id}")
        return await get_visa(db, db_visa.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_visa: {e}")
        raise

async def update_visa(db: AsyncSession, db_visa: Visa, visa_in: Union[VisaUpdate, Dict[str, Any]]) -> Visa:
    try:
        if isinstance(visa_in, dict):
            update_data = visa_in
        else:
            update_data = visa_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_visa, field, value)

        await db.commit()
        return await get_visa(db, db_visa.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_visa: {e}")
        raise

async def toggle_visa_status(db: AsyncSession, db_visa: Visa) -> Visa:
    return await update_visa(db, db_visa, {"is_active": not db_visa.is_active})

async def delete_visa(db: AsyncSession, db_visa: Visa) -> None:
    try:
        await db.delete(db_visa)
        await db.commit()
        logger.info(f"Visa {db_visa.id} deleted")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_visa: {e}")
        raise

async def get_visa_stats(db: AsyncSession) -> Dict[str, Any]:
    """
    Totals, records created in the last 30 days, active visas expiring in the
    next 30 days and the most common existing and wished visa types.
    """
    total = await count_rows(db, Visa)
    active = await count_rows(db, Visa, Visa.is_active.is_(True))
    start, end = upcoming_window()

    return {
        "totalVisas": total,
        "activeVisas": active,
        "inactiveVisas": total - active,
        "recentVisas": await count_rows(db, Visa, Visa.created_at >= recent_since()),
        "expiringVisas": await count_rows(
            db, Visa, Visa.is_active.is_(True), Visa.existing_visa_expiry.between(start, end)
        ),
        "visasByExistingType": await count_by(db, Visa.existing_visa, "type"),
        "visasByWishedType": await count_by(db, Visa.wished_visa, "type"),
    }
