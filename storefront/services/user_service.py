from sqlalchemy.orm import Session, selectinload
from typing import List

from storefront.database import transaction
from storefront.exceptions import NotFoundError
from storefront.models.product import Product
from storefront.models.user import User, UserPreference
from storefront.schemas.user import UserCreate, UserUpdate


USER_ORDERINGS = {
    "newest": User.created_at.desc(),
    "oldest": User.created_at.asc(),
}


class UserService:
    """
    Service class for User CRUD operations and saved products.

    Duplicate e-mails are rejected by the unique constraint on users.email and
    surface as ConflictError from transaction().
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_data: UserCreate) -> User:
        """Create a user together with their preference record."""
        fields = user_data.model_dump(exclude={"user_preference"})
        user = User(
            **fields,
            user_preference=UserPreference(**user_data.user_preference.model_dump()),
        )
        with transaction(self.db):
            self.db.add(user)
        self.db.refresh(user)
        return user

    def get_by_id(self, user_id) -> User:
        """
        Get a user by ID.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        user = (
            self.db.query(User)
            .options(selectinload(User.user_preference))
            .filter(User.id == user_id)
            .first()
        )
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def get_all(self, offset: int = 0, limit: int = 10, order: str = "newest") -> List[User]:
        """Get a window of users with their preferences."""
        order_by = USER_ORDERINGS.get(order, USER_ORDERINGS["newest"])
        return (
            self.db.query(User)
            .options(selectinload(User.user_preference))
            .order_by(order_by, User.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def update(self, user_id, user_data: UserUpdate) -> User:
        """
        Update a user; a nested userPreference updates the preference record.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        with transaction(self.db):
            user = self.get_by_id(user_id)

            update_data = user_data.model_dump(exclude_unset=True, exclude={"user_preference"})
            for field, value in update_data.items():
                if value is not None:
                    setattr(user, field, value)

            if user_data.user_preference is not None:
                if user.user_preference is None:
                    user.user_preference = UserPreference()
                user.user_preference.receive_email = user_data.user_preference.receive_email

        self.db.refresh(user)
        return user

    def delete(self, user_id) -> None:
        """
        Delete a user along with their preference and orders.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        with transaction(self.db):
            user = self.get_by_id(user_id)
            self.db.delete(user)

    def get_saved_products(self, user_id) -> List[Product]:
        """Get the products a user saved."""
        return list(self.get_by_id(user_id).saved_products)

    def toggle_saved_product(self, user_id, product_id) -> List[Product]:
        """
        Save a product for a user, or un-save it if it is already saved.

        Returns:
            The user's saved products after the toggle

        Raises:
            NotFoundError: If the user or the product doesn't exist
        """
        with transaction(self.db):
            user = self.get_by_id(user_id)
            product = self.db.get(Product, product_id)
            if product is None:
                raise NotFoundError("Product", product_id)

            if product in user.saved_products:
                user.saved_products.remove(product)
            else:
                user.saved_products.append(product)

        return list(user.saved_products)
