# customers/models/customer.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

# Body measurements kept per customer (inches). Stored as a JSON map so new
# keys can be added from the dashboard without a schema change.
MEASUREMENT_FIELDS = (
    "bust",
    "waist",
    "hips",
    "length",
    "shoulder_width",
    "sleeve_length",
)


class Customer(models.Model):
    """
    Shop customer with measurements and a running order history.

    Rules:
    - name is required (orders look customers up by exact name first)
    - measurements values must be numbers >= 0
    - total_orders / total_spent are maintained by services, not by clients
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=150, db_index=True)
    phone = models.CharField(max_length=30, blank=True, default="", db_index=True)
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")
    style_preference = models.CharField(max_length=255, blank=True, default="")

    measurements = models.JSONField(default=dict, blank=True)
    notes = models.TextField(blank=True, default="")

    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["updated_at"]),
        ]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "Customer name is required."})

        if not isinstance(self.measurements, dict):
            raise ValidationError({"measurements": "Measurements must be an object."})
        for key, value in self.measurements.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError({"measurements": f"{key} must be a number."})
            if value < 0:
                raise ValidationError({"measurements": f"{key} cannot be negative."})

    def __str__(self):
        return f"{self.name} ({self.phone})" if self.phone else self.name
