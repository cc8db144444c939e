from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict, ValidationInfo

PHONE_PATTERN = r"^\+?[1-9]\d{9,14}$"
PASSPORT_PATTERN = r"^[A-Z0-9]+$"


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """Partial updates may omit a required column but never clear it."""
    if value is None:
        raise ValueError(f"{info.field_name} cannot be empty")
    return value


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime


class CreatorInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class ClientInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    family_name: str
    email: str
    nationality: str
