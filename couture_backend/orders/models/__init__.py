from .order import Order, OrderStatus, default_progress
from .order_item import OrderItem, OrderItemMaterial

__all__ = ["Order", "OrderItem", "OrderItemMaterial", "OrderStatus", "default_progress"]
