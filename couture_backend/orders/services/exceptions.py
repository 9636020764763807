# orders/services/exceptions.py


class OrderServiceError(Exception):
    """Base domain error for order operations."""


class InvalidOrderItems(OrderServiceError):
    """Order has no items, or an item is incomplete."""


class InvalidStatusTransition(OrderServiceError):
    """Requested status change is not allowed."""


class InvalidPaymentAmount(OrderServiceError):
    """Advance payment amount is not a positive number."""
