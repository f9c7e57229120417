import uuid

from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, Uuid, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base


class Order(Base):
    """
    Order model representing a purchase by one user.

    The order total is not stored; it is derived from the line items every
    time it is read.

    Attributes:
        id: Unique identifier for the order
        user_id: Reference to the owning user
        order_items: Line items, in insertion order
        created_at: Timestamp when order was created
        updated_at: Timestamp when order was last updated
    """
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="orders")
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )

    @property
    def total(self) -> float:
        return sum(item.unit_price * item.quantity for item in self.order_items)

    def __repr__(self):
        return f"<Order(id={self.id}, user_id={self.user_id}, items={len(self.order_items)})>"


class OrderItem(Base):
    """
    Line item of an order.

    unit_price is captured when the order is placed, so later product price
    changes do not affect historical orders.
    """
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        CheckConstraint('unit_price >= 0', name='check_unit_price_non_negative'),
        CheckConstraint('quantity >= 1', name='check_quantity_positive'),
    )

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
