from typing import List, Optional
from datetime import date
from decimal import Decimal
from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator
from backoffice.core.constants import (
    PropertyType, IntendedClosingDate, HandoverDate, PlaceOfPayment,
    PropertyCondition, HouseWarranty, FurnitureIncluded, CostSharing,
    DeclaredLandOfficePrice, LandTitle, HouseTitle,
)
from backoffice.schemas.base import BaseSchema, ClientInfo, CreatorInfo, reject_null

Amount = Optional[Decimal]

class PropertyFields(BaseModel):
    """Optional descriptive and financial fields shared by create, update and read."""

    agent_name: Optional[str] = Field(None, min_length=2, max_length=100)
    broker_company: Optional[str] = Field(None, min_length=2, max_length=100)
    transaction_type: Optional[str] = None
    property_type: Optional[PropertyType] = None
    reservation_date: Optional[date] = None
    intended_closing_date: Optional[IntendedClosingDate] = None
    intended_closing_date_specific: Optional[date] = None
    handover_date: Optional[HandoverDate] = None
    selling_price: Amount = Field(None, ge=0, max_digits=15, decimal_places=2)
    deposit: Amount = Field(None, ge=0, max_digits=15, decimal_places=2)
    intermediary_payment: Amount = Field(None, ge=0, max_digits=15, decimal_places=2)
    closing_payment: Amount = Field(None, ge=0, max_digits=15, decimal_places=2)
    acceptable_method_of_payment: Optional[str] = None
    place_of_payment: Optional[PlaceOfPayment] = None
    property_condition: Optional[PropertyCondition] = None
    house_warranty: Optional[HouseWarranty] = None
    warranty_condition: Optional[str] = Field(None, min_length=2, max_length=500)
    warranty_term: Optional[str] = Field(None, min_length=2, max_length=100)
    furniture_included: Optional[FurnitureIncluded] = None
    transfer_fee: Optional[CostSharing] = None
    withholding_tax: Optional[CostSharing] = None
    business_tax: Optional[CostSharing] = None
    lease_registration_fee: Optional[CostSharing] = None
    mortgage_fee: Optional[CostSharing] = None
    usufruct_registration_fee: Optional[CostSharing] = None
    servitude_registration_fee: Optional[CostSharing] = None
    declared_land_office_price: Optional[DeclaredLandOfficePrice] = None
    land_title: Optional[LandTitle] = None
    house_title: Optional[HouseTitle] = None
    repair_details: Optional[str] = Field(None, max_length=500)

    @field_validator("transaction_type", mode="before")
    @classmethod
    def blank_transaction_type(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def check_specific_closing_date(self):
        if (
            self.intended_closing_date == IntendedClosingDate.specific_date
            and self.intended_closing_date_specific is None
            and "intended_closing_date" in self.model_fields_set
        ):
            raise ValueError("A specific closing date is required when intended closing date is 'specific_date'")
        return self

class PropertyCreate(PropertyFields):
    client_id: int = Field(..., gt=0)
    property_name: str = Field(..., min_length=2, max_length=100)
    is_active: bool = True

class PropertyUpdate(PropertyFields):
    property_name: Optional[str] = Field(None, min_length=2, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("property_name", "is_active", mode="before")
    @classmethod
    def required_columns(cls, v, info: ValidationInfo):
        return reject_null(v, info)

class Property(PropertyFields, BaseSchema):
    client_id: int
    property_name: str
    land_title_document: Optional[str] = None
    house_title_document: Optional[str] = None
    house_registration_book: Optional[str] = None
    land_lease_agreement: Optional[str] = None
    is_active: bool
    created_by: Optional[int] = None
    client: Optional[ClientInfo] = None
    creator: Optional[CreatorInfo] = None

class PropertyFilters(BaseModel):
    client_id: Optional[int] = None
    transaction_type: Optional[str] = None
    property_type: Optional[PropertyType] = None
    is_active: Optional[bool] = None
    created_by: Optional[int] = None

class TypeCount(BaseModel):
    type: Optional[str] = None
    count: int

class ConditionCount(BaseModel):
    condition: Optional[str] = None
    count: int

class PropertyStats(BaseModel):
    totalProperties: int
    activeProperties: int
    inactiveProperties: int
    recentProperties: int
    upcomingReservations: int
    propertiesByTransactionType: List[TypeCount]
    propertiesByPropertyType: List[TypeCount]
    propertiesByCondition: List[ConditionCount]
