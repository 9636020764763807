# appointments/models/appointment.py

from __future__ import annotations

import uuid

from django.core.validators import MinValueValidator
from django.db import models


class Appointment(models.Model):
    """
    Fitting / consultation slot.

    scheduled_at is the authoritative timestamp; time_label keeps the
    slot text the front desk picked ("10:30 AM").
    """

    class Status(models.TextChoices):
        SCHEDULED = "scheduled", "Scheduled"
        CONFIRMED = "confirmed", "Confirmed"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"
        NO_SHOW = "no-show", "No Show"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="appointments",
    )
    customer_name = models.CharField(max_length=150)
    customer_phone = models.CharField(max_length=30)
    customer_email = models.EmailField(blank=True, default="")

    scheduled_at = models.DateTimeField(db_index=True)
    time_label = models.CharField(max_length=20, blank=True, default="")
    duration_minutes = models.PositiveIntegerField(default=60, validators=[MinValueValidator(5)])
    purpose = models.CharField(max_length=200)
    notes = models.TextField(blank=True, default="")

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SCHEDULED)
    reminder_sent = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["scheduled_at"]
        indexes = [models.Index(fields=["status", "scheduled_at"])]

    def __str__(self):
        return f"{self.customer_name} @ {self.scheduled_at:%Y-%m-%d %H:%M}"
