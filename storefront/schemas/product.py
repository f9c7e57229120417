from pydantic import Field
from datetime import datetime
from typing import Optional
from uuid import UUID

from storefront.models.product import Category
from storefront.schemas.base import CamelModel


class ProductBase(CamelModel):
    """Base schema for Product with common attributes."""
    name: str = Field(..., min_length=1, max_length=60, description="Product name")
    description: str = Field("", description="Product description")
    category: Category = Field(..., description="Product category")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Product price (must be non-negative)")
    stock: int = Field(..., ge=0, description="Available stock (must be non-negative)")


class ProductCreate(ProductBase):
    """Schema for creating a new product."""
    pass


class ProductUpdate(CamelModel):
    """Schema for updating an existing product. All fields are optional."""
    name: Optional[str] = Field(None, min_length=1, max_length=60, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    category: Optional[Category] = Field(None, description="Product category")
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Product price")
    stock: Optional[int] = Field(None, ge=0, description="Available stock")


class ProductResponse(ProductBase):
    """Schema for product response including all fields."""
    id: UUID
    created_at: datetime
    updated_at: datetime
