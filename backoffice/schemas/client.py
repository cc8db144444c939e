from typing import Annotated, List, Optional
from datetime import date
from pydantic import AfterValidator, BaseModel, EmailStr, Field, ValidationInfo, field_validator
from backoffice.core.constants import MaritalStatus
from backoffice.schemas.base import BaseSchema, CreatorInfo, PHONE_PATTERN, PASSPORT_PATTERN, reject_null

def _not_in_future(v: Optional[date]) -> Optional[date]:
    if v is not None and v >= date.today():
        raise ValueError("Date of birth must be in the past")
    return v

def _normalize_passport(v):
    if isinstance(v, str):
        v = v.strip().upper()
        return v or None
    return v

BirthDate = Annotated[Optional[date], AfterValidator(_not_in_future)]

class ClientBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    family_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    passport_number: Optional[str] = Field(None, min_length=6, max_length=20, pattern=PASSPORT_PATTERN)
    nationality: str = Field(..., min_length=2, max_length=50)
    date_of_birth: Optional[date] = None
    phone_number: str = Field(..., min_length=10, max_length=15, pattern=PHONE_PATTERN)
    current_address: str = Field(..., min_length=10, max_length=500)
    address_in_thailand: Optional[str] = Field(None, max_length=500)
    whatsapp: Optional[str] = Field(None, min_length=10, max_length=15, pattern=PHONE_PATTERN)
    line: Optional[str] = Field(None, min_length=3, max_length=50)
    marital_status: Optional[MaritalStatus] = None
    father_name: Optional[str] = Field(None, min_length=2, max_length=100)
    mother_name: Optional[str] = Field(None, min_length=2, max_length=100)
    married_to_thai_and_registered: Optional[bool] = None
    has_yellow_or_pink_card: Optional[bool] = None
    has_bought_property_in_thailand: Optional[bool] = None

    @field_validator("passport_number", mode="before")
    @classmethod
    def normalize_passport(cls, v):
        return _normalize_passport(v)

class ClientCreate(ClientBase):
    date_of_birth: BirthDate = None
    is_active: bool = True

class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    family_name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    passport_number: Optional[str] = Field(None, min_length=6, max_length=20, pattern=PASSPORT_PATTERN)
    nationality: Optional[str] = Field(None, min_length=2, max_length=50)
    date_of_birth: BirthDate = None
    phone_number: Optional[str] = Field(None, min_length=10, max_length=15, pattern=PHONE_PATTERN)
    current_address: Optional[str] = Field(None, min_length=10, max_length=500)
    address_in_thailand: Optional[str] = Field(None, max_length=500)
    whatsapp: Optional[str] = Field(None, min_length=10, max_length=15, pattern=PHONE_PATTERN)
    line: Optional[str] = Field(None, min_length=3, max_length=50)
    marital_status: Optional[MaritalStatus] = None
    father_name: Optional[str] = Field(None, min_length=2, max_length=100)
    mother_name: Optional[str] = Field(None, min_length=2, max_length=100)
    married_to_thai_and_registered: Optional[bool] = None
    has_yellow_or_pink_card: Optional[bool] = None
    has_bought_property_in_thailand: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("passport_number", mode="before")
    @classmethod
    def normalize_passport(cls, v):
        return _normalize_passport(v)

    @field_validator(
        "name", "family_name", "email", "nationality", "phone_number", "current_address", "is_active",
        mode="before",
    )
    @classmethod
    def required_columns(cls, v, info: ValidationInfo):
        return reject_null(v, info)

class Client(ClientBase, BaseSchema):
    email: str
    age: Optional[int] = None
    is_active: bool
    created_by: Optional[int] = None
    creator: Optional[CreatorInfo] = None

class ClientFilters(BaseModel):
    nationality: Optional[str] = None
    is_active: Optional[bool] = None
    created_by: Optional[int] = None
    marital_status: Optional[MaritalStatus] = None
    married_to_thai_and_registered: Optional[bool] = None
    has_yellow_or_pink_card: Optional[bool] = None
    has_bought_property_in_thailand: Optional[bool] = None

class NationalityCount(BaseModel):
    nationality: str
    count: int

class ClientStats(BaseModel):
    totalClients: int
    activeClients: int
    inactiveClients: int
    recentClients: int
    clientsByNationality: List[NationalityCount]
