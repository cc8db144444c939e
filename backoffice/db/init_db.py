"""
Create the schema and, optionally, the first admin account.
"""

import logging
from typing import Optional

from backoffice.core.constants import UserRole
from backoffice.core.database import Database
from backoffice.crud import user as user_crud
from backoffice.db import base  # noqa: F401  registers every table on Base.metadata
from backoffice.db.models import User
from backoffice.schemas.user import UserCreate

logger = logging.getLogger(__name__)


async def init_db(database: Database, admin: Optional[UserCreate] = None) -> Optional[User]:
    """
    Create missing tables. When ``admin`` is given and no user has that email
    yet, create it as an active admin and return it.
    """
    await database.create_all()
    logger.info("Database tables created")

    if admin is None:
        return None

    async with database.session() as db:
        existing = await user_crud.get_user_by_email(db, admin.email)
        if existing:
            logger.info(f"Admin {admin.email} already exists, skipping")
            return None
        db_user = await user_crud.create_user(db, admin, role=UserRole.admin, is_active=True)
        logger.info(f"Created admin user {db_user.email}")
        return db_user
