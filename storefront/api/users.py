from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List

from storefront.database import get_db
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.user import (
    SavedProductToggle,
    UserCreate,
    UserUpdate,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["Users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new user",
)
def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Create a user.

    - **email**: Unique e-mail address
    - **firstName** / **lastName**: 1-30 characters
    - **userPreference**: `{receiveEmail: bool}`
    """
    return UserService(db).create(user_data)


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
)
def list_users(
    offset: int = Query(0, ge=0, description="Number of users to skip"),
    limit: int = Query(10, ge=1, le=100, description="Maximum number of users"),
    order: str = Query("newest", description="newest or oldest"),
    db: Session = Depends(get_db)
):
    """Get a list of users."""
    return UserService(db).get_all(offset, limit, order)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    return UserService(db).get_by_id(user_id)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update a user")
def update_user(user_id: UUID, user_data: UserUpdate, db: Session = Depends(get_db)):
    """Partially update a user. A nested userPreference updates the preference."""
    return UserService(db).update(user_id, user_data)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(user_id: UUID, db: Session = Depends(get_db)):
    UserService(db).delete(user_id)
    return None


@router.get(
    "/{user_id}/saved-products",
    response_model=List[ProductResponse],
    summary="List saved products",
)
def get_saved_products(user_id: UUID, db: Session = Depends(get_db)):
    return UserService(db).get_saved_products(user_id)


@router.post(
    "/{user_id}/saved-products",
    response_model=List[ProductResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Save or un-save a product",
    description="Saves the product if the user has not saved it yet, otherwise removes it."
)
def toggle_saved_product(
    user_id: UUID,
    data: SavedProductToggle,
    db: Session = Depends(get_db)
):
    return UserService(db).toggle_saved_product(user_id, data.product_id)


@router.get(
    "/{user_id}/orders",
    response_model=List[OrderResponse],
    summary="List a user's orders",
)
def get_user_orders(user_id: UUID, db: Session = Depends(get_db)):
    """Get every order of a user, with items and totals."""
    return OrderService(db).get_user_orders(user_id)
