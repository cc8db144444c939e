from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from backoffice.core.auth import get_current_active_user
from backoffice.core.database import get_db
from backoffice.core.security import create_access_token, verify_password
from backoffice.crud import user as user_crud
from backoffice.db.models import User as UserModel
from backoffice.schemas.auth import ChangePassword, Token
from backoffice.schemas.response import ApiResponse, api_response
from backoffice.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/register", response_model=ApiResponse[User], status_code=status.HTTP_201_CREATED)
async def register(
    *,
    db: AsyncSession = Depends(get_db),
    user_in: UserCreate
) -> Any:
    """
    Register a new user. The account stays inactive until an admin enables it.
    """
    if await user_crud.get_user_by_email(db, user_in.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email address already in use"
        )

    db_user = await user_crud.create_user(db, user_in)
    return api_response(
        True,
        "Registration successful. An administrator must activate the account before you can log in.",
        data=User.model_validate(db_user),
    )

@router.post("/login", response_model=Token)
async def login(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """
    Exchange email (``username``) and password for a bearer token.
    """
    db_user = await user_crud.authenticate(db, form_data.username, form_data.password)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not db_user.is_active:
        logger.warning(f"Login refused for inactive user: {db_user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled"
        )

    return Token(access_token=create_access_token(db_user.id, role=db_user.role.value))

@router.get("/me", response_model=ApiResponse[User])
async def read_me(current_user: UserModel = Depends(get_current_active_user)) -> Any:
    return api_response(True, "Profile fetched successfully", data=User.model_validate(current_user))

@router.post("/change-password", response_model=ApiResponse[None])
async def change_password(
    *,
    db: AsyncSession = Depends(get_db),
    password_in: ChangePassword,
    current_user: UserModel = Depends(get_current_active_user)
) -> Any:
    if not verify_password(password_in.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    await user_crud.update_user(db, current_user, {"password": password_in.new_password})
    logger.info(f"Password changed for user: {current_user.id}")
    return api_response(True, "Password changed successfully")
