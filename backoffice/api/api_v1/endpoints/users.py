from typing import Any
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from backoffice.api.deps import search_params
from backoffice.core.auth import get_current_active_user, require_admin
from backoffice.core.constants import ALLOWED_IMAGE_MIME_TYPES
from backoffice.core.database import get_db
from backoffice.core.storage import S3Storage, UploadError, delete_files, get_storage, upload_files
from backoffice.crud import user as user_crud
from backoffice.db.models import User as UserModel
from backoffice.schemas.pagination import Page
from backoffice.schemas.response import ApiResponse, api_response
from backoffice.schemas.user import User, UserFilters, UserUpdate
from backoffice.search import SearchParams

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_user_or_404(db: AsyncSession, user_id: int) -> UserModel:
    db_user = await user_crud.get_user(db, user_id)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return db_user

def _reject_self(current_user: UserModel, user_id: int, action: str) -> None:
    if current_user.id == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"You cannot {action} your own account"
        )


@router.get("", response_model=ApiResponse[Page[User]])
async def read_users(
    params: SearchParams = Depends(search_params),
    filters: UserFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Search users by name or email, filtered by role and active status.
    """
    params.filters = filters.model_dump()
    page = await user_crud.search_users(db, params)
    return api_response(
        True,
        "Users fetched successfully",
        data=Page[User](
            result=[User.model_validate(u) for u in page.result],
            pagination=page.pagination,
        ),
    )

@router.post("/me/profile", response_model=ApiResponse[User])
async def upload_profile_image(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_user: UserModel = Depends(get_current_active_user)
) -> Any:
    """
    Replace the current user's profile image.
    """
    try:
        keys = await upload_files(storage, {"profile": file}, f"users/{current_user.id}", ALLOWED_IMAGE_MIME_TYPES)
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    previous = current_user.profile
    try:
        db_user = await user_crud.update_user(db, current_user, {"profile": keys["profile"]})
    except SQLAlchemyError:
        await delete_files(storage, keys.values())
        raise

    await delete_files(storage, [previous])
    return api_response(True, "Profile image updated successfully", data=User.model_validate(db_user))

@router.get("/{user_id}", response_model=ApiResponse[User])
async def read_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_user = await _get_user_or_404(db, user_id)
    return api_response(True, "User fetched successfully", data=User.model_validate(db_user))

@router.patch("/{user_id}", response_model=ApiResponse[User])
async def update_user(
    *,
    user_id: int,
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_user = await _get_user_or_404(db, user_id)
    if "is_active" in user_in.model_fields_set or "role" in user_in.model_fields_set:
        _reject_self(current_user, user_id, "change the role or status of")

    db_user = await user_crud.update_user(db, db_user, user_in)
    return api_response(True, "User updated successfully", data=User.model_validate(db_user))

@router.patch("/{user_id}/toggle-status", response_model=ApiResponse[User])
async def toggle_user_status(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Activate or deactivate a user account.
    """
    _reject_self(current_user, user_id, "deactivate")
    db_user = await _get_user_or_404(db, user_id)
    db_user = await user_crud.toggle_user_status(db, db_user)
    state = "activated" if db_user.is_active else "deactivated"
    return api_response(True, f"User {state} successfully", data=User.model_validate(db_user))

@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Delete a user. What happens to the clients, visas and properties they
    created depends on ``OWNER_DELETE_POLICY``.
    """
    _reject_self(current_user, user_id, "delete")
    db_user = await _get_user_or_404(db, user_id)
    try:
        orphaned_files = await user_crud.delete_user(db, db_user)
    except user_crud.OwnedRecordsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    await delete_files(storage, orphaned_files)
    return api_response(True, "User deleted successfully")
