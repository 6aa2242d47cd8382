"""Domain errors raised by the store and the stock ledger."""

from typing import Optional


class InventoryError(Exception):
    """Base class for every inventory error."""


class ItemNotFound(InventoryError):
    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class TransactionNotFound(InventoryError):
    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class InsufficientQuantity(InventoryError):
    """A line asks for more than the item has on hand."""

    def __init__(self, item_id: str, requested: float, available: float, name: Optional[str] = None):
        self.item_id = item_id
        self.name = name
        self.requested = requested
        self.available = available
        label = name or item_id
        super().__init__(
            f"Insufficient quantity for {label}. Available={available:g} requested={requested:g}"
        )

    @property
    def shortfall(self) -> float:
        return self.requested - self.available


class ValidationError(InventoryError):
    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class DuplicateKey(InventoryError):
    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Duplicate key in {collection}: {key}")


class ExportError(InventoryError):
    def __init__(self, message: str = "Failed to generate document"):
        super().__init__(message)
