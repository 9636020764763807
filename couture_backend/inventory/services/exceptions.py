# inventory/services/exceptions.py


class InventorySyncError(Exception):
    """Base error for inventory quantity operations."""


class InsufficientStockError(InventorySyncError):
    """Raised by strict stock sync calls when any line cannot be fully covered."""

    def __init__(self, missing_items):
        self.missing_items = list(missing_items)
        super().__init__("; ".join(self.missing_items) or "Insufficient stock")


class InventoryItemNotFound(InventorySyncError):
    """Referenced inventory item does not exist."""


class StockAdjustmentError(InventorySyncError):
    """Manual adjustment rejected (zero delta, would go negative, ...)."""


class InvalidBarcodeText(ValueError):
    """Barcode text must be 1-50 chars of letters, digits, '-' or '_'."""
