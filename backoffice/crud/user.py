from typing import Optional, Any, Dict, List, Union
from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from backoffice.core.config import settings
from backoffice.core.constants import UserRole, PROPERTY_DOCUMENT_FIELDS
from backoffice.core.security import get_password_hash, verify_password
from backoffice.db.models import User, Client, Visa, Property
from backoffice.schemas.user import UserCreate, UserUpdate
from backoffice.search import PaginatedSearch, SearchParams, SearchResult, SQLAlchemyRecordStore
from backoffice.search.configs import USER_SEARCH

logger = logging.getLogger(__name__)

user_search = PaginatedSearch(USER_SEARCH, settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)


class OwnedRecordsError(Exception):
    """The user still owns records and the owner-deletion policy is ``restrict``."""

    def __init__(self, counts: Dict[str, int]):
        self.counts = counts
        owned = ", ".join(f"{count} {name}" for name, count in counts.items() if count)
        super().__init__(f"User still owns records: {owned}")


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    """
    Get a user by email from the database.
    """
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalar_one_or_none()

async def authenticate(db: AsyncSession, email: str, password: str) -> Optional[User]:
    """
    Return the user when the email exists and the password matches.
    """
    db_user = await get_user_by_email(db, email)
    if not db_user or not verify_password(password, db_user.hashed_password):
        return None
    return db_user

async def search_users(db: AsyncSession, params: SearchParams) -> SearchResult:
    return await user_search.search(SQLAlchemyRecordStore(db, User), params)

async def create_user(
    db: AsyncSession,
    user: UserCreate,
    role: UserRole = UserRole.user,
    is_active: bool = False,
) -> User:
    """
    Create a user. New accounts stay inactive until an admin activates them.
    """
    try:
        db_user = User(
            name=user.name,
            email=user.email.lower(),
            phone_number=user.phone_number,
            hashed_password=get_password_hash(user.password),
            role=role,
            is_active=is_active,
        )
        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)
        logger.info(f"User created successfully with ID: {db_user.id}")
        return db_user
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in create_user: {e}")
        raise

async def update_user(db: AsyncSession, db_user: User, user_in: Union[UserUpdate, Dict[str, Any]]) -> User:
    try:
        if isinstance(user_in, dict):
            update_data = user_in
        else:
            update_data = user_in.model_dump(exclude_unset=True)

        if "password" in update_data:
            update_data["hashed_password"] = get_password_hash(update_data.pop("password"))

        for field, value in update_data.items():
            setattr(db_user, field, value)

        await db.commit()
        await db.refresh(db_user)
        return db_user
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in update_user: {e}")
        raise

async def toggle_user_status(db: AsyncSession, db_user: User) -> User:
    return await update_user(db, db_user, {"is_active": not db_user.is_active})

async def count_owned_records(db: AsyncSession, user_id: int) -> Dict[str, int]:
    counts = {}
    for name, model in (("clients", Client), ("visas", Visa), ("properties", Property)):
        result = await db.execute(select(func.count()).select_from(model).where(model.created_by == user_id))
        counts[name] = result.scalar_one()
    return counts

async def delete_user(db: AsyncSession, db_user: User, policy: Optional[str] = None) -> List[str]:
    """
    Delete a user, applying the owner-deletion policy to the records they created.

    Returns the storage keys of files that belonged to deleted records so the
    caller can remove them once the transaction has committed.
    """
    policy = policy or settings.OWNER_DELETE_POLICY
    counts = await count_owned_records(db, db_user.id)
    if policy == "restrict" and any(counts.values()):
        raise OwnedRecordsError(counts)

    orphaned_files: List[str] = [db_user.profile] if db_user.profile else []
    try:
        if policy == "set_null":
            for model in (Client, Visa, Property):
                await db.execute(
                    update(model).where(model.created_by == db_user.id).values(created_by=None)
                    .execution_options(synchronize_session=False)
                )
        elif policy == "cascade":
            owned_clients = select(Client.id).where(Client.created_by == db_user.id)
            doomed_properties = (Property.created_by == db_user.id) | Property.client_id.in_(owned_clients)
            result = await db.execute(
                select(*(getattr(Property, name) for name in PROPERTY_DOCUMENT_FIELDS)).where(doomed_properties)
            )
            orphaned_files.extend(key for row in result.all() for key in row if key)
            await db.execute(delete(Property).where(doomed_properties).execution_options(synchronize_session=False))
            await db.execute(
                delete(Visa).where((Visa.created_by == db_user.id) | Visa.client_id.in_(owned_clients))
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Client).where(Client.created_by == db_user.id).execution_options(synchronize_session=False)
            )

        await db.delete(db_user)
        await db.commit()
        logger.info(f"User {db_user.id} deleted with owner policy '{policy}' (owned: {counts})")
        return orphaned_files
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error in delete_user: {e}")
        raise
