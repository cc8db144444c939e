from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from backoffice.api.deps import search_params
from backoffice.core.auth import require_admin
from backoffice.core.database import get_db
from backoffice.crud import client as client_crud
from backoffice.crud import visa as visa_crud
from backoffice.db.models import User as UserModel, Visa as VisaModel
from backoffice.schemas.pagination import Page
from backoffice.schemas.response import ApiResponse, api_response
from backoffice.schemas.visa import Visa, VisaCreate, VisaFilters, VisaStats, VisaUpdate
from backoffice.search import SearchParams

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_visa_or_404(db: AsyncSession, visa_id: int) -> VisaModel:
    db_visa = await visa_crud.get_visa(db, visa_id)
    if not db_visa:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Visa record not found"
        )
    return db_visa


@router.get("", response_model=ApiResponse[Page[Visa]])
async def read_visas(
    params: SearchParams = Depends(search_params),
    filters: VisaFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Search visa records. The search term is matched against the existing and
    wished visa types, by stored value or display label.
    """
    params.filters = filters.model_dump()
    page = await visa_crud.search_visas(db, params)
    return api_response(
        True,
        "Visa records fetched successfully",
        data=Page[Visa](
            result=[Visa.model_validate(v) for v in page.result],
            pagination=page.pagination,
        ),
    )

@router.get("/stats", response_model=ApiResponse[VisaStats])
async def read_visa_stats(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    stats = await visa_crud.get_visa_stats(db)
    return api_response(True, "Visa statistics fetched successfully", data=VisaStats(**stats))

@router.post("", response_model=ApiResponse[Visa], status_code=status.HTTP_201_CREATED)
async def create_visa(
    *,
    visa_in: VisaCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    if not await client_crud.get_client(db, visa_in.client_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )

    db_visa = await visa_crud.create_visa(db, visa_in, created_by=current_user.id)
    return api_response(True, "Visa record created successfully", data=Visa.model_validate(db_visa))

@router.get("/{visa_id}", response_model=ApiResponse[Visa])
async def read_visa(
    visa_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_visa = await _get_visa_or_404(db, visa_id)
    return api_response(True, "Visa record fetched successfully", data=Visa.model_validate(db_visa))

@router.patch("/{visa_id}", response_model=ApiResponse[Visa])
async def update_visa(
    *,
    visa_id: int,
    visa_in: VisaUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_visa = await _get_visa_or_404(db, visa_id)
    update_data = visa_in.model_dump(exclude_unset=True)

    # Dates are checked against the stored values they are not replacing
    entry = update_data.get("latest_entry_date", db_visa.latest_entry_date)
    expiry = update_data.get("existing_visa_expiry", db_visa.existing_visa_expiry)
    if entry and expiry and expiry < entry:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Existing visa expiry cannot be before the latest entry date"
        )

    db_visa = await visa_crud.update_visa(db, db_visa, update_data)
    return api_response(True, "Visa record updated successfully", data=Visa.model_validate(db_visa))

@router.delete("/{visa_id}", response_model=ApiResponse[None])
async def delete_visa(
    visa_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_visa = await _get_visa_or_404(db, visa_id)
    await visa_crud.delete_visa(db, db_visa)
    return api_response(True, "Visa record deleted successfully")

@router.patch("/{visa_id}/toggle-status", response_model=ApiResponse[Visa])
async def toggle_visa_status(
    visa_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_visa = await _get_visa_or_404(db, visa_id)
    db_visa = await visa_crud.toggle_visa_status(db, db_visa)
    state = "activated" if db_visa.is_active else "deactivated"
    return api_response(True, f"Visa record {state} successfully", data=Visa.model_validate(db_visa))
