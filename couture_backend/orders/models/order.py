# orders/models/order.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

PROGRESS_STEPS = ("cutting", "stitching", "finishing")


def default_progress() -> dict:
    return {step: False for step in PROGRESS_STEPS}


class OrderStatus(models.TextChoices):
    RECEIVED = "received", "Received"
    IN_PROGRESS = "in-progress", "In Progress"
    READY = "ready", "Ready"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class Order(models.Model):
    """
    Tailoring order (header).

    Derived from items (see orders.services.order_service):
    - item_type: category of the only item, or "Multiple Items"
    - quantity / total_amount: sums over items
    - order_date / delivery_date / status: from the first item
    - assigned_staff / design_images: union over items

    Money rules:
    - remaining_amount = max(0, total_amount - advance_amount)

    Stock:
    - deducted_materials records exactly what was taken from inventory at
      creation; cancelling restores it once (stock_restored).
    """

    class Priority(models.TextChoices):
        LOW = "low", "Low"
        NORMAL = "normal", "Normal"
        HIGH = "high", "High"
        URGENT = "urgent", "Urgent"

    MULTIPLE_ITEMS = "Multiple Items"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=20, unique=True)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=30, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")

    item_type = models.CharField(max_length=100, blank=True, default="")
    quantity = models.PositiveIntegerField(default=0)

    status = models.CharField(
        max_length=12, choices=OrderStatus.choices, default=OrderStatus.RECEIVED, db_index=True
    )
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.NORMAL)

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    advance_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    remaining_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )

    order_date = models.DateField(default=timezone.localdate)
    delivery_date = models.DateField(null=True, blank=True, db_index=True)

    notes = models.TextField(blank=True, default="")
    measurements = models.JSONField(default=dict, blank=True)
    progress = models.JSONField(default=default_progress, blank=True)

    assigned_staff = models.ManyToManyField(
        "staff.StaffMember", blank=True, related_name="orders"
    )
    design_images = models.JSONField(default=list, blank=True)

    deducted_materials = models.JSONField(default=list, blank=True)
    stock_restored = models.BooleanField(default=False)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"]),
            models.Index(fields=["updated_at"]),
        ]

    def clean(self):
        if self.advance_amount is not None and self.advance_amount < 0:
            raise ValidationError({"advance_amount": "Advance cannot be negative."})
        if self.delivery_date and self.order_date and self.delivery_date < self.order_date:
            raise ValidationError({"delivery_date": "Delivery date cannot be before order date."})

    def recompute_remaining(self) -> None:
        remaining = Decimal(self.total_amount or 0) - Decimal(self.advance_amount or 0)
        self.remaining_amount = remaining if remaining > 0 else Decimal("0.00")

    def __str__(self):
        return f"{self.order_number} - {self.customer_name}"
