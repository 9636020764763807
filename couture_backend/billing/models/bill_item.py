# billing/models/bill_item.py

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .bill import Bill


class BillItem(models.Model):
    class ChargeType(models.TextChoices):
        FABRIC = "fabric", "Fabric"
        STITCHING = "stitching", "Stitching"
        ACCESSORIES = "accessories", "Accessories"
        CUSTOMIZATION = "customization", "Customization"
        OTHER = "other", "Other"

    bill = models.ForeignKey(Bill, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField(default=0)

    description = models.CharField(max_length=255)
    quantity = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("1"), validators=[MinValueValidator(0)]
    )
    rate = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    charge_type = models.CharField(
        max_length=15, choices=ChargeType.choices, default=ChargeType.STITCHING
    )

    class Meta:
        ordering = ["position", "id"]

    def __str__(self):
        return f"{self.description} x {self.quantity}"
