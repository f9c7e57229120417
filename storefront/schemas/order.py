from pydantic import Field, UUID4, field_validator
from datetime import datetime
from typing import Optional
from uuid import UUID

from storefront.schemas.base import CamelModel


def integral_quantity(value):
    """Accept whole numbers written as floats (2.0) as quantities."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class OrderItemCreate(CamelModel):
    """One requested line item."""
    product_id: UUID4 = Field(..., description="ID of the product to purchase")
    unit_price: float = Field(..., ge=0, strict=True, allow_inf_nan=False, description="Price per unit at order time")
    quantity: int = Field(..., ge=1, strict=True, description="Quantity to purchase")

    @field_validator("quantity", mode="before")
    @classmethod
    def accept_integral_float(cls, value):
        return integral_quantity(value)


class OrderCreate(CamelModel):
    """Schema for placing a new order."""
    user_id: UUID4 = Field(..., description="ID of the ordering user")
    order_items: list[OrderItemCreate] = Field(..., min_length=1, description="Line items (at least one)")


class OrderItemUpdate(CamelModel):
    """Partial update of an existing line item, addressed by its ID."""
    id: UUID
    unit_price: Optional[float] = Field(None, ge=0, strict=True, allow_inf_nan=False)
    quantity: Optional[int] = Field(None, ge=1, strict=True)

    @field_validator("quantity", mode="before")
    @classmethod
    def accept_integral_float(cls, value):
        return integral_quantity(value)


class OrderUpdate(CamelModel):
    """Schema for updating an existing order. All fields are optional."""
    user_id: Optional[UUID4] = None
    order_items: Optional[list[OrderItemUpdate]] = None


class OrderItemResponse(CamelModel):
    """Schema for a persisted line item."""
    id: UUID
    order_id: UUID
    product_id: UUID
    unit_price: float
    quantity: int


class OrderResponse(CamelModel):
    """Schema for order response, including the derived total."""
    id: UUID
    user_id: UUID
    order_items: list[OrderItemResponse]
    total: float
    created_at: datetime
    updated_at: datetime
