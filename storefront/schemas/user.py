from pydantic import EmailStr, Field, UUID4
from datetime import datetime
from typing import Optional
from uuid import UUID

from storefront.schemas.base import CamelModel


class UserPreferenceSchema(CamelModel):
    """Notification preferences."""
    receive_email: bool


class UserBase(CamelModel):
    """Base schema for User with common attributes."""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=30)
    last_name: str = Field(..., min_length=1, max_length=30)
    address: str


class UserCreate(UserBase):
    """Schema for creating a new user together with their preferences."""
    user_preference: UserPreferenceSchema


class UserUpdate(CamelModel):
    """Schema for updating an existing user. All fields are optional."""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=30)
    last_name: Optional[str] = Field(None, min_length=1, max_length=30)
    address: Optional[str] = None
    user_preference: Optional[UserPreferenceSchema] = None


class UserResponse(UserBase):
    """Schema for user response."""
    id: UUID
    user_preference: Optional[UserPreferenceSchema] = None
    created_at: datetime
    updated_at: datetime


class SavedProductToggle(CamelModel):
    """Schema for saving (or un-saving) a product."""
    product_id: UUID4
