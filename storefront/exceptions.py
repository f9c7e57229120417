"""Domain errors raised by the services and mapped to HTTP responses in api/errors.py."""
from typing import Iterable


class StorefrontError(Exception):
    """Base exception for all domain errors."""

    kind = "storefront_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """Raised when a request payload is malformed or out of range."""

    kind = "validation_error"


class NotFoundError(StorefrontError):
    """Raised when a referenced entity does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(StorefrontError):
    """Raised when there's not enough stock to fulfill an order."""

    kind = "insufficient_stock"

    def __init__(self, shortages: Iterable[tuple]):
        # shortages: (product_id, available, requested); available is None
        # when a concurrent order took the stock after the check
        self.shortages = list(shortages)
        parts = [
            f"{product_id} (available: {'unknown' if available is None else available}, "
            f"requested: {requested})"
            for product_id, available, requested in self.shortages
        ]
        super().__init__("Insufficient stock for product(s): " + ", ".join(parts))

    @property
    def product_ids(self) -> list:
        return [product_id for product_id, _, _ in self.shortages]


class ConflictError(StorefrontError):
    """Raised when the store rejects a write because of a constraint violation."""

    kind = "conflict"


class TransactionError(StorefrontError):
    """Raised when the storage layer fails mid-transaction. Nothing is committed."""

    kind = "transaction_error"
