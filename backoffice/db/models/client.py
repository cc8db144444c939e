from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from backoffice.core.database import Base
from backoffice.core.constants import MaritalStatus, enum_values

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, unique=True, index=True)
    passport_number = Column(String(20), nullable=True, unique=True)
    nationality = Column(String(50), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    # Derived from date_of_birth on every save, see backoffice.db.models.events
    age = Column(Integer, nullable=True)
    phone_number = Column(String(15), nullable=False)
    current_address = Column(Text, nullable=False)
    address_in_thailand = Column(Text, nullable=True)
    whatsapp = Column(String(15), nullable=True)
    line = Column(String(50), nullable=True)
    marital_status = Column(
        SQLEnum(MaritalStatus, name="marital_status", values_callable=enum_values),
        nullable=True,
    )
    father_name = Column(String(100), nullable=True)
    mother_name = Column(String(100), nullable=True)
    married_to_thai_and_registered = Column(Boolean, nullable=True)
    has_yellow_or_pink_card = Column(Boolean, nullable=True)
    has_bought_property_in_thailand = Column(Boolean, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_by = Column(Integer, ForeignKey("users.id", onupdate="CASCADE", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    creator = relationship("User", back_populates="clients")
    visas = relationship("Visa", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    properties = relationship("Property", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
