from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from backoffice.api.deps import search_params
from backoffice.core.auth import require_admin
from backoffice.core.constants import ALLOWED_DOCUMENT_MIME_TYPES, IntendedClosingDate
from backoffice.core.database import get_db
from backoffice.core.storage import S3Storage, UploadError, delete_files, get_storage, upload_files
from backoffice.crud import client as client_crud
from backoffice.crud import property as property_crud
from backoffice.db.models import Property as PropertyModel, User as UserModel
from backoffice.schemas.pagination import Page
from backoffice.schemas.property import Property, PropertyCreate, PropertyFilters, PropertyStats, PropertyUpdate
from backoffice.schemas.response import ApiResponse, api_response
from backoffice.search import SearchParams

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_property_or_404(db: AsyncSession, property_id: int) -> PropertyModel:
    db_property = await property_crud.get_property(db, property_id)
    if not db_property:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property record not found"
        )
    return db_property


@router.get("", response_model=ApiResponse[Page[Property]])
async def read_properties(
    params: SearchParams = Depends(search_params),
    filters: PropertyFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Search property records by name, agent, broker, repair details,
    transaction type or property type.
    """
    params.filters = filters.model_dump()
    page = await property_crud.search_properties(db, params)
    return api_response(
        True,
        "Property records fetched successfully",
        data=Page[Property](
            result=[Property.model_validate(p) for p in page.result],
            pagination=page.pagination,
        ),
    )

@router.get("/stats", response_model=ApiResponse[PropertyStats])
async def read_property_stats(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Totals, recent records, reservations due in the next 30 days and the
    most common transaction types, property types and conditions.
    """
    stats = await property_crud.get_property_stats(db)
    return api_response(True, "Property statistics fetched successfully", data=PropertyStats(**stats))

@router.post("", response_model=ApiResponse[Property], status_code=status.HTTP_201_CREATED)
async def create_property(
    *,
    property_in: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    if not await client_crud.get_client(db, property_in.client_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )

    db_property = await property_crud.create_property(db, property_in, created_by=current_user.id)
    return api_response(True, "Property record created successfully", data=Property.model_validate(db_property))

@router.get("/{property_id}", response_model=ApiResponse[Property])
async def read_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_property = await _get_property_or_404(db, property_id)
    return api_response(True, "Property record fetched successfully", data=Property.model_validate(db_property))

@router.patch("/{property_id}", response_model=ApiResponse[Property])
async def update_property(
    *,
    property_id: int,
    property_in: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_property = await _get_property_or_404(db, property_id)
    update_data = property_in.model_dump(exclude_unset=True)

    closing = update_data.get("intended_closing_date", db_property.intended_closing_date)
    specific = update_data.get("intended_closing_date_specific", db_property.intended_closing_date_specific)
    if closing == IntendedClosingDate.specific_date and specific is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A specific closing date is required when intended closing date is 'specific_date'"
        )

    db_property = await property_crud.update_property(db, db_property, update_data)
    return api_response(True, "Property record updated successfully", data=Property.model_validate(db_property))

@router.delete("/{property_id}", response_model=ApiResponse[None])
async def delete_property(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Delete a property record and its uploaded documents.
    """
    db_property = await _get_property_or_404(db, property_id)
    document_keys = await property_crud.delete_property(db, db_property)
    await delete_files(storage, document_keys)
    return api_response(True, "Property record deleted successfully")

@router.patch("/{property_id}/toggle-status", response_model=ApiResponse[Property])
async def toggle_property_status(
    property_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_property = await _get_property_or_404(db, property_id)
    db_property = await property_crud.toggle_property_status(db, db_property)
    state = "activated" if db_property.is_active else "deactivated"
    return api_response(True, f"Property record {state} successfully", data=Property.model_validate(db_property))

@router.post("/{property_id}/documents", response_model=ApiResponse[Property])
async def upload_property_documents(
    property_id: int,
    land_title_document: Optional[UploadFile] = File(None),
    house_title_document: Optional[UploadFile] = File(None),
    house_registration_book: Optional[UploadFile] = File(None),
    land_lease_agreement: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Attach or replace any of the four property documents.

    Either every file in the request is stored or none is; documents that are
    replaced are removed from storage once the record has been updated.
    """
    db_property = await _get_property_or_404(db, property_id)
    files: Dict[str, UploadFile] = {
        field: file
        for field, file in (
            ("land_title_document", land_title_document),
            ("house_title_document", house_title_document),
            ("house_registration_book", house_registration_book),
            ("land_lease_agreement", land_lease_agreement),
        )
        if file is not None
    }
    if not files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No documents were provided"
        )

    try:
        keys = await upload_files(storage, files, f"properties/{property_id}", ALLOWED_DOCUMENT_MIME_TYPES)
    except UploadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    replaced = [getattr(db_property, field) for field in keys]
    try:
        db_property = await property_crud.update_property(db, db_property, keys)
    except SQLAlchemyError:
        await delete_files(storage, keys.values())
        raise

    await delete_files(storage, replaced)
    logger.info(f"Stored {len(keys)} documents for property {property_id}")
    return api_response(True, "Property documents uploaded successfully", data=Property.model_validate(db_property))
