from typing import Optional, Any, Dict, List, Union
from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging

from backoffice.core.config import settings
from backoffice.core.constants import PROPERTY_DOCUMENT_FIELDS
from backoffice.crud.stats import count_by, count_rows, recent_since
from backoffice.db.models import Client, Visa, Property
from backoffice.schemas.client import ClientCreate, ClientUpdate
from backoffice.search import PaginatedSearch, SearchParams, SearchResult, SQLAlchemyRecordStore
from backoffice.search.configs import CLIENT_SEARCH

logger = logging.getLogger(__name__)

client_search = PaginatedSearch(CLIENT_SEARCH, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)


async def get_client(db: AsyncSession, client_id: int) -> Optional[Client]:
    query = select(Client).options(selectinload(Client.creator)).where(Client.id == client_id)
    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()

async def get_client_by_email(db: AsyncSession, email: str) -> Optional[Client]:
    result = await db.execute(select(Client).where(func.lower(Client.email) == email.lower()))
    return result.scalar_one_or_none()

async def get_client_by_passport(db: AsyncSession, passport_number: str) -> Optional[Client]:
    result = await db.execute(select(Client).where(Client.passport_number == passport_number))
    return result.scalar_one_or_none()

async def search_clients(db: AsyncSession, params: SearchParams) -> SearchResult:
    store = SQLAlchemyRecordStore(db, Client, options=[selectinload(Client.creator)])
    return await client_search.search(store, params)

async def create_client(db: AsyncSession, client: ClientCreate, created_by: Optional[int]) -> Client:
    try:
        data = client.model_dump()
        data["email"] = data["email"].lower()
        db_client = Client(**data, created_by=created_by)
        db.add(db_client)
        await db.commit()
        logger.info(f"Client created successfully with ID: {db_client.id}")
        return await get_client(db, db_client.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_client: {e}")
        raise

async def update_client(db: AsyncSession, db_client: Client, client_in: Union[ClientUpdate, Dict[str, Any]]) -> Client:
    try:
        if isinstance(client_in, dict):
            update_data = client_in
        else:
            update_data = client_in.model_dump(exclude_unset=True)

        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()

        for field, value in update_data.items():
            setattr(db_client, field, value)

        await db.commit()
        return await get_client(db, db_client.id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_client: {e}")
        raise

async def toggle_client_status(db: AsyncSession, db_client: Client) -> Client:
    return await update_client(db, db_client, {"is_active": not db_client.is_active})

async def delete_client(db: AsyncSession, db_client: Client) -> List[str]:
    """
    Delete a client together with its visas and properties.

    Returns the storage keys of the deleted properties' documents.
    """
    try:
        result = await db.execute(
            select(*(getattr(Property, name) for name in PROPERTY_DOCUMENT_FIELDS))
            .where(Property.client_id == db_client.id)
        )
        document_keys = [key for row in result.all() for key in row if key]

        await db.execute(
            delete(Property).where(Property.client_id == db_client.id).execution_options(synchronize_session=False)
        )
        await db.execute(
            delete(Visa).where(Visa.client_id == db_client.id).execution_options(synchronize_session=False)
        )
        await db.delete(db_client)
        await db.commit()
        logger.info(f"Client {db_client.id} deleted with {len(document_keys)} property documents")
        return document_keys
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_client: {e}")
        raise

async def get_client_stats(db: AsyncSession) -> Dict[str, Any]:
    """
    Totals for the dashboard: all, active, inactive, created in the last
    30 days and the ten most common nationalities.
    """
    total = await count_rows(db, Client)
    active = await count_rows(db, Client, Client.is_active.is_(True))

    return {
        "totalClients": total,
        "activeClients": active,
        "inactiveClients": total - active,
        "recentClients": await count_rows(db, Client, Client.created_at >= recent_since()),
        "clientsByNationality": await count_by(db, Client.nationality, "nationality"),
    }
