import uuid

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.database import Base


# Many-to-many link between users and the products they saved
saved_products_table = Table(
    "saved_products",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("product_id", Uuid, ForeignKey("products.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    """
    User model.

    Attributes:
        id: Unique identifier for the user
        email: Unique e-mail address
        first_name: Given name (1-30 chars)
        last_name: Family name (1-30 chars)
        address: Shipping address
        user_preference: One-to-one UserPreference record
        saved_products: Products the user bookmarked
        orders: Orders placed by the user
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(30), nullable=False)
    last_name = Column(String(30), nullable=False)
    address = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user_preference = relationship(
        "UserPreference",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )
    saved_products = relationship("Product", secondary=saved_products_table)
    orders = relationship(
        "Order",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Order.created_at",
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"


class UserPreference(Base):
    """Per-user notification preferences."""
    __tablename__ = "user_preferences"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    receive_email = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="user_preference")
