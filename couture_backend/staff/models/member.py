# staff/models/member.py

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class StaffMember(models.Model):
    """
    Shop employee record (tailor, cutter, front desk ...).

    The optional user link lets a logged-in tailor see their own
    dashboard and check in/out.
    """

    class Role(models.TextChoices):
        STAFF = "staff", "Staff"
        ADMIN = "admin", "Admin"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        INACTIVE = "inactive", "Inactive"
        ON_LEAVE = "on-leave", "On Leave"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="staff_profile",
    )

    name = models.CharField(max_length=150)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.STAFF)
    position = models.CharField(max_length=100, blank=True, default="")
    department = models.CharField(max_length=100, blank=True, default="")
    joining_date = models.DateField(default=timezone.localdate)
    salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0)],
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)

    address = models.TextField(blank=True, default="")
    emergency_contact = models.CharField(max_length=150, blank=True, default="")
    skills = models.JSONField(default=list, blank=True)
    photo_url = models.URLField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [models.Index(fields=["status"])]

    def __str__(self):
        return f"{self.name} ({self.position})" if self.position else self.name
