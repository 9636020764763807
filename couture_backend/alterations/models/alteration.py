# alterations/models/alteration.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Alteration(models.Model):
    """
    Alteration job on a garment the customer brought in.

    actual_completion is stamped the first time the job reaches completed.
    """

    class Status(models.TextChoices):
        NOT_STARTED = "not-started", "Not Started"
        IN_PROGRESS = "in-progress", "In Progress"
        COMPLETED = "completed", "Completed"
        DELIVERED = "delivered", "Delivered"

    class Priority(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"
        URGENT = "urgent", "Urgent"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=30, blank=True, default="")

    item_type = models.CharField(max_length=100)
    alteration_type = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")

    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(
        max_length=12, choices=Status.choices, default=Status.NOT_STARTED, db_index=True
    )

    assigned_staff = models.ForeignKey(
        "staff.StaffMember",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="alterations",
    )
    estimated_completion = models.DateField(null=True, blank=True)
    actual_completion = models.DateField(null=True, blank=True)

    cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(0)]
    )
    notes = models.TextField(blank=True, default="")
    before_images = models.JSONField(default=list, blank=True)
    after_images = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.item_type} ({self.alteration_type}) - {self.customer_name}"
