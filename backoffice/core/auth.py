from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.config import settings
from backoffice.core.constants import UserRole
from backoffice.core.database import get_db
from backoffice.core.security import decode_access_token
from backoffice.crud.user import get_user
from backoffice.db.models import User

logger = logging.getLogger(__name__)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        logger.warning(f"Rejected access token: {e}")
        raise credentials_exception

    db_user = await get_user(db, user_id)
    if not db_user:
        logger.warning(f"Token subject {user_id} not found in database")
        raise credentials_exception

    return db_user

async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Check if current user is active.
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user

async def require_admin(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Check if current user is an admin. Every client, visa and property route requires it.
    """
    if current_user.role != UserRole.admin:
        logger.warning(f"Non-admin access attempt by user: {current_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin role required"
        )
    return current_user
