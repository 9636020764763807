# billing/models/bill.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


def _money_field(**kwargs):
    return models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
        **kwargs,
    )


class BillStatus(models.TextChoices):
    PAID = "paid", "Paid"
    PARTIAL = "partial", "Partial"
    UNPAID = "unpaid", "Unpaid"


class DiscountType(models.TextChoices):
    AMOUNT = "amount", "Amount"
    PERCENTAGE = "percentage", "Percentage"


class Bill(models.Model):
    """
    Customer invoice.

    Money fields are written by billing.services.bill_service only:
    - subtotal = sum(item amounts) + breakdown charges
    - gst_amount = subtotal * gst_percent / 100
    - total_amount = max(0, subtotal + gst_amount - discount_amount)
    - balance = total_amount - paid_amount, paid_amount <= total_amount
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bill_id = models.CharField(max_length=20, unique=True)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills",
    )
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    customer_address = models.TextField(blank=True, default="")

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bills",
    )

    # breakdown charges (on top of line items)
    fabric_charges = _money_field()
    stitching_charges = _money_field()
    accessories_charges = _money_field()
    customization_charges = _money_field()
    other_charges = _money_field()

    subtotal = _money_field()
    gst_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    gst_amount = _money_field()
    discount = _money_field()
    discount_type = models.CharField(
        max_length=10, choices=DiscountType.choices, default=DiscountType.AMOUNT
    )
    discount_amount = _money_field()
    total_amount = _money_field()
    paid_amount = _money_field()
    balance = _money_field()

    status = models.CharField(
        max_length=10, choices=BillStatus.choices, default=BillStatus.UNPAID, db_index=True
    )

    date = models.DateField(default=timezone.localdate, db_index=True)
    due_date = models.DateField(null=True, blank=True)

    upi_id = models.CharField(max_length=100, blank=True, default="")
    upi_link = models.CharField(max_length=500, blank=True, default="")
    qr_code = models.TextField(blank=True, default="")
    bank_details = models.JSONField(default=dict, blank=True)

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    BREAKDOWN_FIELDS = {
        "fabric": "fabric_charges",
        "stitching": "stitching_charges",
        "accessories": "accessories_charges",
        "customization": "customization_charges",
        "other_charges": "other_charges",
    }

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "date"]),
            models.Index(fields=["updated_at"]),
        ]

    @property
    def breakdown(self) -> dict:
        return {key: getattr(self, attr) for key, attr in self.BREAKDOWN_FIELDS.items()}

    def __str__(self):
        return f"{self.bill_id} - {self.customer_name}"
