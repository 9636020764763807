# expenses/models/expense.py

from __future__ import annotations

import calendar
import uuid
from datetime import date, timedelta
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

EXPENSE_CATEGORIES = (
    "Rent & Utilities",
    "Raw Materials",
    "Equipment",
    "Staff Salaries",
    "Marketing",
    "Transportation",
    "Office Supplies",
    "Professional Services",
    "Insurance",
    "Maintenance",
    "Other",
)


def _add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_due_date(start: date, recurring_type: str) -> date | None:
    """
    31 Jan + monthly -> 28/29 Feb (day clamped to the month).
    """
    if recurring_type == Expense.RecurringType.WEEKLY:
        return start + timedelta(days=7)
    if recurring_type == Expense.RecurringType.MONTHLY:
        return _add_months(start, 1)
    if recurring_type == Expense.RecurringType.QUARTERLY:
        return _add_months(start, 3)
    if recurring_type == Expense.RecurringType.YEARLY:
        return _add_months(start, 12)
    return None


class Expense(models.Model):
    """
    Shop expense.

    Rules:
    - amount > 0
    - a recurring expense needs a recurring_type; next_due_date is filled
      from date on save when left blank
    """

    class PaymentMethod(models.TextChoices):
        CASH = "cash", "Cash"
        CARD = "card", "Card"
        UPI = "upi", "UPI"
        BANK = "bank", "Bank Transfer"
        CHEQUE = "cheque", "Cheque"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    class RecurringType(models.TextChoices):
        WEEKLY = "weekly", "Weekly"
        MONTHLY = "monthly", "Monthly"
        QUARTERLY = "quarterly", "Quarterly"
        YEARLY = "yearly", "Yearly"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    category = models.CharField(max_length=100, default="Other", db_index=True)
    date = models.DateField(default=timezone.localdate, db_index=True)

    payment_method = models.CharField(
        max_length=10, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )
    vendor = models.CharField(max_length=150, blank=True, default="")
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    receipt_url = models.URLField(max_length=500, blank=True, default="")

    is_recurring = models.BooleanField(default=False)
    recurring_type = models.CharField(
        max_length=10, choices=RecurringType.choices, blank=True, default=""
    )
    next_due_date = models.DateField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise ValidationError({"amount": "Amount must be greater than zero."})
        if self.is_recurring and not self.recurring_type:
            raise ValidationError({"recurring_type": "Choose how often this expense repeats."})

    def save(self, *args, **kwargs):
        if not self.is_recurring:
            self.recurring_type = ""
            self.next_due_date = None
        elif self.next_due_date is None and self.recurring_type:
            self.next_due_date = next_due_date(self.date, self.recurring_type)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.title} ({self.amount})"
