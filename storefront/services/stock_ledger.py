from collections import OrderedDict
from typing import Iterable
import logging

from sqlalchemy import update
from sqlalchemy.orm import Session

from storefront.exceptions import InsufficientStockError, NotFoundError
from storefront.models.product import Product

logger = logging.getLogger(__name__)


class StockLedger:
    """
    Authoritative per-product stock, with atomic check-and-decrement.

    RACE CONDITION HANDLING STRATEGY:
    =================================
    reserve() never commits. It runs inside the caller's unit of work, so the
    decrements become durable together with whatever else the caller writes
    (the order and its line items), or not at all.

    Two layers keep stock from going negative under concurrent orders:

    1. Pessimistic: the referenced product rows are read with
       SELECT ... FOR UPDATE, in ascending id order. A second reservation
       touching any of the same products blocks until the first transaction
       ends, then sees the updated stock. Locking in a fixed order means two
       orders for {A, B} and {B, A} cannot deadlock each other.

    2. Conditional update: each decrement is
           UPDATE products SET stock = stock - :q WHERE id = :id AND stock >= :q
       If the row changed between the check and the update (stores without
       row locks, such as SQLite), the UPDATE matches nothing and the
       reservation fails instead of overselling.

    The CHECK (stock >= 0) constraint on the products table backs both.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def aggregate(items: Iterable) -> "OrderedDict":
        """
        Sum requested quantities per product, keeping first-seen order.

        Accepts anything with product_id and quantity attributes.
        """
        requested = OrderedDict()
        for item in items:
            requested[item.product_id] = requested.get(item.product_id, 0) + item.quantity
        return requested

    def lock_products(self, product_ids) -> dict:
        """
        Load and row-lock the given products.

        Raises:
            NotFoundError: If any of the ids is unknown
        """
        wanted_ids = set(product_ids)
        products = (
            self.db.query(Product)
            .filter(Product.id.in_(wanted_ids))
            .order_by(Product.id)
            .with_for_update()  # Pessimistic locking
            .populate_existing()
            .all()
        )
        by_id = {product.id: product for product in products}

        for product_id in sorted(wanted_ids, key=str):
            if product_id not in by_id:
                raise NotFoundError("Product", product_id)

        return by_id

    def reserve(self, items: Iterable) -> dict:
        """
        Check and decrement stock for every requested item, all or nothing.

        Algorithm:
        1. Aggregate quantities per product
        2. SELECT products FOR UPDATE (locks the rows)
        3. Verify every product has enough stock; collect every shortage
        4. Conditionally decrement each product

        Args:
            items: Line items with product_id and quantity

        Returns:
            Mapping of product id to reserved quantity

        Raises:
            NotFoundError: If a product doesn't exist
            InsufficientStockError: If any product lacks stock, naming all of them
        """
        requested = self.aggregate(items)
        products = self.lock_products(requested.keys())

        # Check every product before touching any of them
        shortages = [
            (product_id, products[product_id].stock, quantity)
            for product_id, quantity in requested.items()
            if products[product_id].stock < quantity
        ]
        if shortages:
            raise InsufficientStockError(shortages)

        for product_id, quantity in requested.items():
            result = self.db.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(stock=Product.stock - quantity)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                # Another transaction took the stock after our check
                logger.warning(f"Concurrent stock modification detected for product {product_id}")
                raise InsufficientStockError([(product_id, None, quantity)])

        # The in-session copies are stale after the UPDATE statements
        for product in products.values():
            self.db.expire(product, ["stock", "updated_at"])

        logger.info(f"Reserved stock for {len(requested)} product(s)")
        return dict(requested)

