# inventory/models/item.py

from __future__ import annotations

import re
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from inventory.constants import CATEGORIES, DEFAULT_MIN_STOCK, PRODUCT_TYPES

BARCODE_TEXT_RE = re.compile(r"[A-Za-z0-9\-_]{1,50}")


def default_min_stock() -> int:
    return int(getattr(settings, "INVENTORY_DEFAULT_MIN_STOCK", DEFAULT_MIN_STOCK))


def low_stock_q() -> models.Q:
    """Rows below their own min_stock, or below the default when min_stock is 0."""
    return models.Q(min_stock__gt=0, quantity__lt=models.F("min_stock")) | models.Q(
        min_stock=0, quantity__lt=default_min_stock()
    )


class InventoryItem(models.Model):
    """
    A stocked material (fabric by the metre, buttons by the piece, ...).

    Rules:
    - quantity is Decimal and never negative
    - quantity changes after creation go through inventory.services
      (stock_sync / adjustments) so every change leaves a StockMovement
    - low stock means quantity < (min_stock or the configured default)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200, db_index=True)
    product_type = models.CharField(
        max_length=60,
        choices=[(t, t) for t in PRODUCT_TYPES],
        default="Other",
        db_index=True,
    )
    category = models.CharField(
        max_length=40,
        choices=[(c, c) for c in CATEGORIES],
        default="Other",
    )
    description = models.TextField(blank=True, default="")

    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal("0"),
        validators=[MinValueValidator(0)],
    )
    unit = models.CharField(max_length=20, default="pieces")
    min_stock = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=default_min_stock,
        validators=[MinValueValidator(0)],
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    supplier = models.CharField(max_length=150, blank=True, default="")
    barcode = models.CharField(max_length=50, blank=True, default="", db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["product_type", "created_at"]),
            models.Index(fields=["updated_at"]),
        ]

    @property
    def low_stock_threshold(self) -> Decimal:
        return Decimal(self.min_stock or default_min_stock())

    @property
    def is_low_stock(self) -> bool:
        return Decimal(self.quantity or 0) < self.low_stock_threshold

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "Item name is required."})
        if self.quantity is not None and self.quantity < 0:
            raise ValidationError({"quantity": "Quantity cannot be negative."})
        if self.barcode and not BARCODE_TEXT_RE.fullmatch(self.barcode):
            raise ValidationError(
                {"barcode": "Use 1-50 letters, digits, hyphens or underscores."}
            )

    def __str__(self):
        return f"{self.name} ({self.quantity} {self.unit})"
