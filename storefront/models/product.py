import enum
import uuid

from sqlalchemy import Column, String, Text, Float, Integer, DateTime, Enum, Uuid, CheckConstraint
from sqlalchemy.sql import func

from storefront.database import Base


class Category(str, enum.Enum):
    """Closed set of product categories."""
    FASHION = "FASHION"
    BEAUTY = "BEAUTY"
    SPORTS = "SPORTS"
    ELECTRONICS = "ELECTRONICS"
    HOME_INTERIOR = "HOME_INTERIOR"
    HOUSEHOLD_SUPPLIES = "HOUSEHOLD_SUPPLIES"
    KITCHENWARE = "KITCHENWARE"


class Product(Base):
    """
    Product model representing items available for sale.

    Attributes:
        id: Unique identifier for the product
        name: Product name
        description: Free-form product description
        category: One of the Category values
        price: Current list price (must be non-negative)
        stock: Available quantity (must be non-negative)
        created_at: Timestamp when product was created
        updated_at: Timestamp when product was last updated
    """
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(60), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    category = Column(Enum(Category), nullable=False, index=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Database-level constraints; stock >= 0 is the last line of defence
    # against overselling.
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
