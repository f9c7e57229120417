from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.database import get_db
from storefront.services.order_service import OrderService
from storefront.schemas.order import (
    OrderCreate,
    OrderUpdate,
    OrderResponse,
)
from storefront.tasks.order_tasks import send_order_confirmation

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place a new order",
    description="""
    Place an order for one or more products.

    **Stock reservation:**
    Stock for every referenced product is checked and decremented in the same
    database transaction that stores the order and its line items. Products
    are locked with SELECT FOR UPDATE, so when several users order the last
    unit at the same time only one order succeeds; the others receive
    409 with kind `insufficient_stock`.

    If the ordering user opted in to e-mail, a background Celery task sends
    the order confirmation.
    """
)
def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db)
):
    """
    Place an order.

    - **userId**: ID of the ordering user (uuid v4)
    - **orderItems**: At least one of `{productId, unitPrice, quantity}`
    """
    service = OrderService(db)
    order = service.place_order(order_data)

    if get_settings().ORDER_NOTIFICATIONS_ENABLED and service.wants_confirmation(order):
        # Trigger background task to send the confirmation e-mail
        send_order_confirmation.delay(str(order.id))

    return order


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order by ID",
    description="Get an order with its line items and the total computed from them."
)
def get_order(
    order_id: UUID,
    db: Session = Depends(get_db)
):
    """Get an order by ID."""
    return OrderService(db).get_order(order_id)


@router.patch(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update an order",
    description="Reassign the order or change line item prices/quantities. Stock is not adjusted."
)
def update_order(
    order_id: UUID,
    order_data: OrderUpdate,
    db: Session = Depends(get_db)
):
    """Partially update an order."""
    return OrderService(db).update_order(order_id, order_data)
