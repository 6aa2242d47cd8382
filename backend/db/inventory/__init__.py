"""
Inventory tables.

Models:
- InventoryItem (one row per stock-keeping unit, quantity on hand)
- InventoryTransaction (append-only stock movement, direction in/out)
- TransactionLine (item + quantity rows of a transaction, in submitted order)
"""

from .item import InventoryItem
from .transaction import InventoryTransaction, TransactionLine

__all__ = ["InventoryItem", "InventoryTransaction", "TransactionLine"]
