from sqlalchemy.orm import Session
from typing import Optional, List

from storefront.config import get_settings
from storefront.database import transaction
from storefront.exceptions import NotFoundError
from storefront.models.product import Category, Product
from storefront.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from storefront.utils.cache import cache_service


# Sort keys accepted by the list endpoint
PRODUCT_ORDERINGS = {
    "newest": Product.created_at.desc(),
    "oldest": Product.created_at.asc(),
    "priceLowest": Product.price.asc(),
    "priceHighest": Product.price.desc(),
}


class ProductService:
    """
    Service class for Product CRUD operations.

    This service handles:
    - Creating new products
    - Reading products (with caching)
    - Updating products
    - Deleting products
    - Cache invalidation
    """

    CACHE_PREFIX = "product"

    def __init__(self, db: Session):
        self.db = db

    def create(self, product_data: ProductCreate) -> Product:
        """
        Create a new product.

        Args:
            product_data: Product creation data

        Returns:
            Created product instance
        """
        product = Product(**product_data.model_dump())
        with transaction(self.db):
            self.db.add(product)
        self.db.refresh(product)
        return product

    def get_by_id(self, product_id) -> Product:
        """
        Get a product by ID from the database.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        product = self.db.get(Product, product_id)
        if not product:
            raise NotFoundError("Product", product_id)
        return product

    def get_by_id_cached(self, product_id) -> dict:
        """
        Get product details from cache or database.
        Returns a dictionary (suitable for API response).

        Raises:
            NotFoundError: If the product doesn't exist
        """
        # Try cache first
        cached = cache_service.get(self.CACHE_PREFIX, str(product_id))
        if cached:
            return cached

        product = self.get_by_id(product_id)
        product_dict = ProductResponse.model_validate(product).model_dump(mode="json", by_alias=True)
        # Short TTL bounds how long a read racing an order can keep stale stock
        cache_service.set(self.CACHE_PREFIX, str(product_id), product_dict, ttl=get_settings().PRODUCT_CACHE_TTL)
        return product_dict

    def get_all(
        self,
        offset: int = 0,
        limit: int = 10,
        order: str = "newest",
        category: Optional[Category] = None
    ) -> List[Product]:
        """
        Get a window of products.

        Args:
            offset: Number of products to skip
            limit: Maximum number of products to return
            order: One of PRODUCT_ORDERINGS (unknown values fall back to newest)
            category: Optional category filter

        Returns:
            List of products
        """
        query = self.db.query(Product)

        if category:
            query = query.filter(Product.category == category)

        order_by = PRODUCT_ORDERINGS.get(order, PRODUCT_ORDERINGS["newest"])
        return query.order_by(order_by, Product.id).offset(offset).limit(limit).all()

    def update(self, product_id, product_data: ProductUpdate) -> Product:
        """
        Update an existing product.

        Args:
            product_id: ID of product to update
            product_data: Update data (only non-None fields are updated)

        Returns:
            Updated product

        Raises:
            NotFoundError: If the product doesn't exist
        """
        with transaction(self.db):
            product = self.get_by_id(product_id)

            # Update only provided fields
            update_data = product_data.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is not None:
                    setattr(product, field, value)

        self.db.refresh(product)

        # Invalidate cache
        self._invalidate_cache(product_id)

        return product

    def delete(self, product_id) -> None:
        """
        Delete a product.

        Raises:
            NotFoundError: If the product doesn't exist
            ConflictError: If order items still reference the product
        """
        with transaction(self.db):
            product = self.get_by_id(product_id)
            self.db.delete(product)

        # Invalidate cache
        self._invalidate_cache(product_id)

    def _invalidate_cache(self, product_id) -> None:
        """Invalidate cache for a product."""
        cache_service.delete(self.CACHE_PREFIX, str(product_id))
