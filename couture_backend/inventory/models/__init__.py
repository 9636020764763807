from .item import InventoryItem
from .stock_movement import StockMovement

__all__ = ["InventoryItem", "StockMovement"]
