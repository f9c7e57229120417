from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from storefront.database import get_db
from storefront.models.product import Category
from storefront.services.product_service import ProductService
from storefront.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product with name, description, category, price, and initial stock."
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new product.

    - **name**: Product name, 1-60 characters (required)
    - **category**: One of the catalog categories (required)
    - **price**: Product price, must be non-negative (required)
    - **stock**: Initial stock quantity, must be non-negative (required)
    """
    service = ProductService(db)
    return service.create(product_data)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="Get a window of products, optionally filtered by category."
)
def list_products(
    offset: int = Query(0, ge=0, description="Number of products to skip"),
    limit: int = Query(10, ge=1, le=100, description="Maximum number of products"),
    order: str = Query("newest", description="newest, oldest, priceLowest or priceHighest"),
    category: Optional[Category] = Query(None, description="Filter by category"),
    db: Session = Depends(get_db)
):
    """Get a list of products."""
    service = ProductService(db)
    return service.get_all(offset, limit, order, category)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get detailed information about a specific product. Results are cached in Redis."
)
def get_product(
    product_id: UUID,
    db: Session = Depends(get_db)
):
    """
    Get a product by ID.

    This endpoint uses Redis caching; the entry is invalidated whenever the
    product or its stock changes.
    """
    service = ProductService(db)
    return service.get_by_id_cached(product_id)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Update product details. Only provided fields will be updated."
)
def update_product(
    product_id: UUID,
    product_data: ProductUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a product.

    Partial updates are supported - only include fields you want to change.
    Cache is automatically invalidated after update.
    """
    service = ProductService(db)
    return service.update(product_id, product_data)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Delete a product by ID. Associated cache is also cleared."
)
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db)
):
    """Delete a product."""
    service = ProductService(db)
    service.delete(product_id)
    return None
