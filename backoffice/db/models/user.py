from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from backoffice.core.database import Base
from backoffice.core.constants import UserRole, enum_values

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    phone_number = Column(String(15), nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    role = Column(
        SQLEnum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.user,
    )
    # Holds the current one-time token (email verification or password reset)
    refresh_token = Column(String(255), nullable=True)
    profile = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    clients = relationship("Client", back_populates="creator", passive_deletes=True)
    visas = relationship("Visa", back_populates="creator", passive_deletes=True)
    properties = relationship("Property", back_populates="creator", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
