from sqlalchemy import Column, Integer, Boolean, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from backoffice.core.database import Base
from backoffice.core.constants import ExistingVisa, WishedVisa, enum_values

class Visa(Base):
    __tablename__ = "visas"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", onupdate="CASCADE", ondelete="CASCADE"), nullable=False, index=True)
    existing_visa = Column(
        SQLEnum(ExistingVisa, name="existing_visa", values_callable=enum_values),
        nullable=True,
        index=True,
    )
    wished_visa = Column(
        SQLEnum(WishedVisa, name="wished_visa", values_callable=enum_values),
        nullable=False,
        index=True,
    )
    latest_entry_date = Column(Date, nullable=True)
    existing_visa_expiry = Column(Date, nullable=True)
    intended_departure_date = Column(Date, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id", onupdate="CASCADE", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    client = relationship("Client", back_populates="visas")
    creator = relationship("User", back_populates="visas")
