# billing/services/exceptions.py


class BillingError(Exception):
    """Base domain error for billing operations."""


class InvalidBillItems(BillingError):
    """Bill has no chargeable lines, or a line is malformed."""


class OverpaymentError(BillingError):
    """Paid amount would exceed the bill total."""


class InvalidPaymentAmount(BillingError):
    """Payment amount is not a positive number."""
