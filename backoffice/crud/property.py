from typing import Optional, Any, Dict, List, Union
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging

from backoffice.core.config import settings
from backoffice.core.constants import PROPERTY_DOCUMENT_FIELDS
from backoffice.crud.stats import count_by, count_rows, recent_since, upcoming_window
from backoffice.db.models import Property
from backoffice.schemas.property import PropertyCreate, PropertyUpdate
from backoffice.search import PaginatedSearch, SearchParams, SearchResult, SQLAlchemyRecordStore
from backoffice.search.configs import PROPERTY_SEARCH

logger = logging.getLogger(__name__)

property_search = PaginatedSearch(PROPERTY_SEARCH, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)

PROPERTY_LOADERS = (selectinload(Property.client), selectinload(Property.creator))


def document_keys(db_property: Property) -> List[str]:
    """Storage keys of every document attached to the property."""
    return [
        getattr(db_property, field)
        for field in PROPERTY_DOCUMENT_FIELDS
        if getattr(db_property, field)
    ]

async def get_property(db: AsyncSession, property_id: int) -> Optional[Property]:
    query = select(Property).options(*PROPERTY_LOADERS).where(Property.id == property_id)
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()

async def search_properties(db: AsyncSession, params: SearchParams) -> SearchResult:
    return await property_search.search(SQLAlchemyRecordStore(db, Property, options=PROPERTY_LOADERS), params)

async def create_property(db: AsyncSession, property_in: PropertyCreate, created_by: Optional[int]) -> Property:
    try:
        db_property = Property(**property_in.model_dump(), created_by=created_by)
        db.add(db_property)
        await db.commit()
        logger.info(f"Property created successfully with ID: {db_property.id} for client {db_property.client_id}")
        return await get_property(db, db_property.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_property: {e}")
        raise

async def update_property(
    db: AsyncSession,
    db_property: Property,
    property_in: Union[PropertyUpdate, Dict[str, Any]],
) -> Property:
    try:
        if isinstance(property_in, dict):
            update_data = property_in
        else:
            update_data = property_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_property, field, value)

        await db.commit()
        return await get_property(db, db_property.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_property: {e}")
        raise

async def toggle_property_status(db: AsyncSession, db_property: Property) -> Property:
    return await update_property(db, db_property, {"is_active": not db_property.is_active})

async def delete_property(db: AsyncSession, db_property: Property) -> List[str]:
    """
    Delete the property and return the storage keys of its documents.
    """
    keys = document_keys(db_property)
    try:
        await db.delete(db_property)
        await db.commit()
        logger.info(f"Property {db_property.id} deleted")
        return keys
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_property: {e}")
        raise

async def get_property_stats(db: AsyncSession) -> Dict[str, Any]:
    total = await count_rows(db, Property)
    active = await count_rows(db, Property, Property.is_active.is_(True))
    start, end = upcoming_window()

    return {
        "totalProperties": total,
        "activeProperties": active,
        "inactiveProperties": total - active,
        "recentProperties": await count_rows(db, Property, Property.created_at >= recent_since()),
        "upcomingReservations": await count_rows(
            db, Property, Property.is_active.is_(True), Property.reservation_date.between(start, end)
        ),
        "propertiesByTransactionType": await count_by(db, Property.transaction_type, "type"),
        "propertiesByPropertyType": await count_by(db, Property.property_type, "type"),
        "propertiesByCondition": await count_by(db, Property.property_condition, "condition"),
    }
