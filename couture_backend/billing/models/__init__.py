from .bill import Bill, BillStatus, DiscountType
from .bill_item import BillItem

__all__ = ["Bill", "BillItem", "BillStatus", "DiscountType"]
