from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, Numeric, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from backoffice.core.database import Base
from backoffice.core.constants import (
    PropertyType, IntendedClosingDate, HandoverDate, PlaceOfPayment,
    PropertyCondition, HouseWarranty, FurnitureIncluded, CostSharing,
    DeclaredLandOfficePrice, LandTitle, HouseTitle, enum_values,
)


def _enum(enum_cls, name):
    return SQLEnum(enum_cls, name=name, values_callable=enum_values)


# One named type shared by every cost-sharing column
COST_SHARING_ENUM = _enum(CostSharing, "cost_sharing")


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    property_name = Column(String(100), nullable=False)
    agent_name = Column(String(100), nullable=True)
    broker_company = Column(String(100), nullable=True)
    transaction_type = Column(Text, nullable=True, index=True)
    property_type = Column(_enum(PropertyType, "property_type"), nullable=True, index=True)
    reservation_date = Column(Date, nullable=True)
    intended_closing_date = Column(_enum(IntendedClosingDate, "intended_closing_date"), nullable=True)
    intended_closing_date_specific = Column(Date, nullable=True)
    handover_date = Column(_enum(HandoverDate, "handover_date"), nullable=True)

    # Amounts
    selling_price = Column(Numeric(15, 2), nullable=True)
    deposit = Column(Numeric(15, 2), nullable=True)
    intermediary_payment = Column(Numeric(15, 2), nullable=True)
    closing_payment = Column(Numeric(15, 2), nullable=True)
    acceptable_method_of_payment = Column(Text, nullable=True)
    place_of_payment = Column(_enum(PlaceOfPayment, "place_of_payment"), nullable=True)

    # Condition and warranty
    property_condition = Column(_enum(PropertyCondition, "property_condition"), nullable=True)
    house_warranty = Column(_enum(HouseWarranty, "house_warranty"), nullable=True)
    warranty_condition = Column(Text, nullable=True)
    warranty_term = Column(String(100), nullable=True)
    furniture_included = Column(_enum(FurnitureIncluded, "furniture_included"), nullable=True)

    # Cost sharing
    transfer_fee = Column(COST_SHARING_ENUM, nullable=True)
    withholding_tax = Column(COST_SHARING_ENUM, nullable=True)
    business_tax = Column(COST_SHARING_ENUM, nullable=True)
    lease_registration_fee = Column(COST_SHARING_ENUM, nullable=True)
    mortgage_fee = Column(COST_SHARING_ENUM, nullable=True)
    usufruct_registration_fee = Column(COST_SHARING_ENUM, nullable=True)
    servitude_registration_fee = Column(COST_SHARING_ENUM, nullable=True)
    declared_land_office_price = Column(_enum(DeclaredLandOfficePrice, "declared_land_office_price"), nullable=True)

    # Title documents; the *_document / book / agreement columns hold storage keys
    land_title = Column(_enum(LandTitle, "land_title"), nullable=True)
    land_title_document = Column(String(500), nullable=True)
    house_title = Column(_enum(HouseTitle, "house_title"), nullable=True)
    house_title_document = Column(String(500), nullable=True)
    house_registration_book = Column(String(500), nullable=True)
    land_lease_agreement = Column(String(500), nullable=True)
    repair_details = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id", onupdate="CASCADE", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    client = relationship("Client", back_populates="properties")
    creator = relationship("User", back_populates="properties")
