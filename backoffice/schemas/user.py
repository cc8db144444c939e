from typing import Optional
from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from backoffice.core.constants import UserRole
from backoffice.schemas.base import BaseSchema, PHONE_PATTERN, reject_null

class UserBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    phone_number: Optional[str] = Field(None, min_length=10, max_length=15, pattern=PHONE_PATTERN)

class UserCreate(UserBase):
    password: str = Field(..., min_length=6, max_length=72)

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=10, max_length=15, pattern=PHONE_PATTERN)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator("name", "role", "is_active", mode="before")
    @classmethod
    def required_columns(cls, v, info: ValidationInfo):
        return reject_null(v, info)

class User(UserBase, BaseSchema):
    email: str
    is_active: bool
    role: UserRole
    profile: Optional[str] = None

class UserFilters(BaseModel):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
