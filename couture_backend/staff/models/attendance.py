# staff/models/attendance.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from .member import StaffMember


class Attendance(models.Model):
    """
    One row per staff member per day.

    Rules:
    - check_out requires check_in, and cannot be earlier than it
    """

    class Status(models.TextChoices):
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        LATE = "late", "Late"
        HALF_DAY = "half-day", "Half Day"

    staff = models.ForeignKey(StaffMember, on_delete=models.CASCADE, related_name="attendance")
    date = models.DateField(default=timezone.localdate)
    check_in = models.DateTimeField(null=True, blank=True)
    check_out = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PRESENT)
    image_url = models.URLField(max_length=500, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(fields=["staff", "date"], name="uniq_attendance_staff_date"),
        ]

    def clean(self):
        if self.check_out and not self.check_in:
            raise ValidationError("Cannot check out without checking in.")
        if self.check_out and self.check_in and self.check_out < self.check_in:
            raise ValidationError("check_out cannot be earlier than check_in.")

    def __str__(self):
        return f"{self.staff.name} {self.date} ({self.status})"
