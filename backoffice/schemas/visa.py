from typing import List, Optional
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator
from backoffice.core.constants import ExistingVisa, WishedVisa
from backoffice.schemas.base import BaseSchema, ClientInfo, CreatorInfo, reject_null

class VisaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    existing_visa: Optional[ExistingVisa] = None
    wished_visa: WishedVisa
    latest_entry_date: Optional[date] = None
    existing_visa_expiry: Optional[date] = None
    intended_departure_date: Optional[date] = None

    @model_validator(mode="after")
    def check_expiry_after_entry(self):
        if (
            self.latest_entry_date
            and self.existing_visa_expiry
            and self.existing_visa_expiry < self.latest_entry_date
        ):
            raise ValueError("Existing visa expiry cannot be before the latest entry date")
        return self

class VisaCreate(VisaBase):
    client_id: int = Field(..., gt=0)
    is_active: bool = True

class VisaUpdate(BaseModel):
    existing_visa: Optional[ExistingVisa] = None
    wished_visa: Optional[WishedVisa] = None
    latest_entry_date: Optional[date] = None
    existing_visa_expiry: Optional[date] = None
    intended_departure_date: Optional[date] = None
    is_active: Optional[bool] = None

    @field_validator("wished_visa", "is_active", mode="before")
    @classmethod
    def required_columns(cls, v, info: ValidationInfo):
        return reject_null(v, info)

class Visa(VisaBase, BaseSchema):
    client_id: int
    is_active: bool
    created_by: Optional[int] = None
    client: Optional[ClientInfo] = None
    creator: Optional[CreatorInfo] = None

class VisaFilters(BaseModel):
    client_id: Optional[int] = None
    existing_visa: Optional[ExistingVisa] = None
    wished_visa: Optional[WishedVisa] = None
    is_active: Optional[bool] = None
    created_by: Optional[int] = None

class TypeCount(BaseModel):
    type: Optional[str] = None
    count: int

class VisaStats(BaseModel):
    totalVisas: int
    activeVisas: int
    inactiveVisas: int
    recentVisas: int
    expiringVisas: int
    visasByExistingType: List[TypeCount]
    visasByWishedType: List[TypeCount]
