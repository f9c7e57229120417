import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from storefront.tasks.celery_app import celery_app
from storefront.database import SessionLocal
from storefront.models.order import Order
from storefront.models import product, user  # noqa: F401  mapper registration for Order relationships

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="send_order_confirmation", max_retries=3)
def send_order_confirmation(self, order_id: str) -> dict:
    """
    Send the order confirmation e-mail for an order.

    Delivery is simulated: the message is rendered and logged. Only
    dispatched for users whose preference has receive_email set.

    Args:
        order_id: ID of the placed order

    Returns:
        Dictionary with the delivery result
    """
    logger.info(f"Sending confirmation for Order #{order_id}")

    db = SessionLocal()

    try:
        order = (
            db.query(Order)
            .options(selectinload(Order.order_items))
            .filter(Order.id == UUID(order_id))
            .first()
        )

        if not order:
            logger.error(f"Order #{order_id} not found")
            return {"status": "failed", "order_id": order_id, "error": "Order not found"}

        customer = order.user
        lines = [
            f"{item.quantity} x {item.product_id} @ {item.unit_price:.2f}"
            for item in order.order_items
        ]
        body = "\n".join(lines + [f"Total: {order.total:.2f}"])

        logger.info(f"Confirmation for Order #{order_id} sent to {customer.email}:\n{body}")

        return {
            "status": "sent",
            "order_id": order_id,
            "email": customer.email,
            "total": order.total,
        }

    except SQLAlchemyError as e:
        logger.error(f"Error loading Order #{order_id}: {e}")
        raise self.retry(exc=e, countdown=60)

    finally:
        db.close()
