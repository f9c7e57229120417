from typing import List, Union
import logging

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session, selectinload

from storefront.database import transaction
from storefront.exceptions import NotFoundError, ValidationError
from storefront.models.order import Order, OrderItem
from storefront.models.user import User
from storefront.schemas.order import OrderCreate, OrderUpdate
from storefront.services.stock_ledger import StockLedger
from storefront.utils.cache import cache_service

logger = logging.getLogger(__name__)

PRODUCT_CACHE_PREFIX = "product"


def validate_order(payload: Union[OrderCreate, dict]) -> OrderCreate:
    """
    Validate a create-order payload.

    Checks that userId and every productId are uuid v4, that orderItems is a
    non-empty list, that unitPrice >= 0 and that quantity is an integer >= 1.
    Has no side effects.

    Raises:
        ValidationError: With a human-readable description of every problem
    """
    if isinstance(payload, OrderCreate):
        return payload
    try:
        return OrderCreate.model_validate(payload)
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid order: {problems}") from e


class OrderService:
    """
    Order placement and order queries.

    place_order() is the only write path that touches stock. It runs the
    validator, checks the user, reserves stock through the StockLedger and
    persists the order with its line items, all inside one transaction():
    either the order, its items and every stock decrement are committed
    together, or nothing is.
    """

    def __init__(self, db: Session):
        self.db = db
        self.ledger = StockLedger(db)

    def place_order(self, order_data: Union[OrderCreate, dict]) -> Order:
        """
        Create a new order with atomic stock reservation.

        Args:
            order_data: Order payload with user_id and order_items

        Returns:
            The persisted order, including its items

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If the user or a product doesn't exist
            InsufficientStockError: If any product lacks stock
            TransactionError: If the store fails mid-commit
        """
        order_data = validate_order(order_data)

        with transaction(self.db):
            if self.db.get(User, order_data.user_id) is None:
                raise NotFoundError("User", order_data.user_id)

            reserved = self.ledger.reserve(order_data.order_items)

            order = Order(
                user_id=order_data.user_id,
                order_items=[
                    OrderItem(
                        product_id=item.product_id,
                        position=position,
                        unit_price=item.unit_price,
                        quantity=item.quantity,
                    )
                    for position, item in enumerate(order_data.order_items)
                ],
            )
            self.db.add(order)

        self.db.refresh(order)

        # Invalidate product cache since stock changed
        cache_service.delete_many(PRODUCT_CACHE_PREFIX, reserved.keys())

        logger.info(
            f"Order #{order.id} created for user #{order.user_id} "
            f"with {len(order.order_items)} item(s)"
        )
        return order

    def wants_confirmation(self, order: Order) -> bool:
        """True if the order's owner opted in to e-mail."""
        preference = order.user.user_preference
        return bool(preference and preference.receive_email)

    def get_order(self, order_id) -> Order:
        """
        Load an order with its items.

        The total is derived from the persisted items on every read
        (Order.total); it is independent of current product prices.

        Raises:
            NotFoundError: If the order doesn't exist
        """
        order = (
            self.db.query(Order)
            .options(selectinload(Order.order_items))
            .filter(Order.id == order_id)
            .first()
        )
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def get_user_orders(self, user_id) -> List[Order]:
        """Get every order of a user, oldest first."""
        if self.db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)

        return (
            self.db.query(Order)
            .options(selectinload(Order.order_items))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at)
            .all()
        )

    def update_order(self, order_id, order_data: OrderUpdate) -> Order:
        """
        Update the owner of an order and/or fields of its line items.

        Items are addressed by ID and only unit_price and quantity may change.
        Stock is not reconciled here; reservations happen only in place_order().

        Raises:
            NotFoundError: If the order, the new user or an item doesn't exist
        """
        with transaction(self.db):
            order = self.get_order(order_id)

            if order_data.user_id is not None and order_data.user_id != order.user_id:
                if self.db.get(User, order_data.user_id) is None:
                    raise NotFoundError("User", order_data.user_id)
                order.user_id = order_data.user_id

            if order_data.order_items:
                items_by_id = {item.id: item for item in order.order_items}
                for change in order_data.order_items:
                    item = items_by_id.get(change.id)
                    if item is None:
                        raise NotFoundError("Order item", change.id)
                    for field, value in change.model_dump(exclude={"id"}, exclude_none=True).items():
                        setattr(item, field, value)

        self.db.refresh(order)
        logger.info(f"Order #{order.id} updated")
        return order
