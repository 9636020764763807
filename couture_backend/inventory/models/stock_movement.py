# inventory/models/stock_movement.py

"""
INVENTORY LEDGER

Append-only record of every quantity change on an InventoryItem.

GUARANTEES:
- Created once, never edited or deleted
- Direction matches reason (deductions are OUT, restorations are IN)
- quantity_after is the item quantity right after the change
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .item import InventoryItem


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"

    class Reason(models.TextChoices):
        ADJUSTMENT = "ADJUSTMENT", "Manual Adjustment"
        ORDER_DEDUCTION = "ORDER_DEDUCTION", "Order Deduction"
        ORDER_RESTORE = "ORDER_RESTORE", "Order Restore"
        MATERIAL_DEDUCTION = "MATERIAL_DEDUCTION", "Required Material Deduction"

    REASON_TO_MOVEMENT = {
        Reason.ORDER_DEDUCTION: MovementType.OUT,
        Reason.MATERIAL_DEDUCTION: MovementType.OUT,
        Reason.ORDER_RESTORE: MovementType.IN,
        Reason.ADJUSTMENT: None,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        InventoryItem, on_delete=models.CASCADE, related_name="movements"
    )
    movement_type = models.CharField(max_length=3, choices=MovementType.choices)
    reason = models.CharField(max_length=20, choices=Reason.choices)

    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    quantity_after = models.DecimalField(max_digits=12, decimal_places=3)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["item", "created_at"]),
            models.Index(fields=["order", "created_at"]),
            models.Index(fields=["reason"]),
        ]

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("quantity must be greater than zero")
        if self.quantity_after is not None and self.quantity_after < 0:
            raise ValidationError("quantity_after cannot be negative")

        expected = self.REASON_TO_MOVEMENT.get(self.reason)
        if expected and self.movement_type != expected:
            raise ValidationError(f"{self.reason} requires movement_type={expected}")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("StockMovement records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.item.name} | {self.reason} | {self.movement_type} {self.quantity}"
