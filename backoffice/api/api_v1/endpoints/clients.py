from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from backoffice.api.deps import search_params
from backoffice.core.auth import require_admin
from backoffice.core.database import get_db
from backoffice.core.storage import S3Storage, delete_files, get_storage
from backoffice.crud import client as client_crud
from backoffice.crud import property as property_crud
from backoffice.crud import visa as visa_crud
from backoffice.db.models import Client as ClientModel, User as UserModel
from backoffice.schemas.client import Client, ClientCreate, ClientFilters, ClientStats, ClientUpdate
from backoffice.schemas.pagination import Page
from backoffice.schemas.property import Property
from backoffice.schemas.response import ApiResponse, api_response
from backoffice.schemas.visa import Visa
from backoffice.search import SearchParams

logger = logging.getLogger(__name__)
router = APIRouter()


async def _get_client_or_404(db: AsyncSession, client_id: int) -> ClientModel:
    db_client = await client_crud.get_client(db, client_id)
    if not db_client:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found"
        )
    return db_client

async def _ensure_unique(
    db: AsyncSession,
    email: Optional[str] = None,
    passport_number: Optional[str] = None,
    client_id: Optional[int] = None,
) -> None:
    """
    Raise 409 when another client already uses the email or passport number.
    """
    if email:
        existing = await client_crud.get_client_by_email(db, email)
        if existing and existing.id != client_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A client with this email already exists"
            )
    if passport_number:
        existing = await client_crud.get_client_by_passport(db, passport_number)
        if existing and existing.id != client_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A client with this passport number already exists"
            )


@router.get("", response_model=ApiResponse[Page[Client]])
async def read_clients(
    params: SearchParams = Depends(search_params),
    filters: ClientFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Search clients by name, family name, email, passport, nationality or
    parent names.
    """
    params.filters = filters.model_dump()
    page = await client_crud.search_clients(db, params)
    return api_response(
        True,
        "Clients fetched successfully",
        data=Page[Client](
            result=[Client.model_validate(c) for c in page.result],
            pagination=page.pagination,
        ),
    )

@router.get("/stats", response_model=ApiResponse[ClientStats])
async def read_client_stats(
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    stats = await client_crud.get_client_stats(db)
    return api_response(True, "Client statistics fetched successfully", data=ClientStats(**stats))

@router.post("", response_model=ApiResponse[Client], status_code=status.HTTP_201_CREATED)
async def create_client(
    *,
    client_in: ClientCreate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Create new client.
    """
    await _ensure_unique(db, email=client_in.email, passport_number=client_in.passport_number)
    db_client = await client_crud.create_client(db, client_in, created_by=current_user.id)
    return api_response(True, "Client created successfully", data=Client.model_validate(db_client))

@router.get("/{client_id}", response_model=ApiResponse[Client])
async def read_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_client = await _get_client_or_404(db, client_id)
    return api_response(True, "Client fetched successfully", data=Client.model_validate(db_client))

@router.patch("/{client_id}", response_model=ApiResponse[Client])
async def update_client(
    *,
    client_id: int,
    client_in: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Update the fields present in the request; the rest are left untouched.
    """
    db_client = await _get_client_or_404(db, client_id)
    await _ensure_unique(db, email=client_in.email, passport_number=client_in.passport_number, client_id=client_id)
    db_client = await client_crud.update_client(db, db_client, client_in)
    return api_response(True, "Client updated successfully", data=Client.model_validate(db_client))

@router.delete("/{client_id}", response_model=ApiResponse[None])
async def delete_client(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    storage: S3Storage = Depends(get_storage),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Delete a client with all of its visas and properties.
    """
    db_client = await _get_client_or_404(db, client_id)
    document_keys = await client_crud.delete_client(db, db_client)
    await delete_files(storage, document_keys)
    return api_response(True, "Client deleted successfully")

@router.patch("/{client_id}/toggle-status", response_model=ApiResponse[Client])
async def toggle_client_status(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    db_client = await _get_client_or_404(db, client_id)
    db_client = await client_crud.toggle_client_status(db, db_client)
    state = "activated" if db_client.is_active else "deactivated"
    return api_response(True, f"Client {state} successfully", data=Client.model_validate(db_client))

@router.get("/{client_id}/visas", response_model=ApiResponse[Page[Visa]])
async def read_client_visas(
    client_id: int,
    params: SearchParams = Depends(search_params),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    """
    Visa records of one client, with the same paging and search as ``GET /visas``.
    """
    await _get_client_or_404(db, client_id)
    params.filters = {"client_id": client_id}
    page = await visa_crud.search_visas(db, params)
    return api_response(
        True,
        "Client visas fetched successfully",
        data=Page[Visa](
            result=[Visa.model_validate(v) for v in page.result],
            pagination=page.pagination,
        ),
    )

@router.get("/{client_id}/properties", response_model=ApiResponse[Page[Property]])
async def read_client_properties(
    client_id: int,
    params: SearchParams = Depends(search_params),
    db: AsyncSession = Depends(get_db),
    current_user: UserModel = Depends(require_admin)
) -> Any:
    await _get_client_or_404(db, client_id)
    params.filters = {"client_id": client_id}
    page = await property_crud.search_properties(db, params)
    return api_response(
        True,
        "Client properties fetched successfully",
        data=Page[Property](
            result=[Property.model_validate(p) for p in page.result],
            pagination=page.pagination,
        ),
    )
