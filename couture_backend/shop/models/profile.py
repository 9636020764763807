# shop/models/profile.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class ShopProfile(models.Model):
    """
    Singleton shop profile.

    Rules:
    - Exactly one row (pk=1). save() pins the pk; delete() is refused.
    - Blank fields fall back to settings.SHOP defaults at read time
      (see shop.services.profile).
    """

    SINGLETON_PK = 1

    name = models.CharField(max_length=150)
    tagline = models.CharField(max_length=255, blank=True, default="")
    logo_url = models.URLField(max_length=500, blank=True, default="")

    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    website = models.URLField(blank=True, default="")

    gstin = models.CharField(max_length=20, blank=True, default="")
    pan = models.CharField(max_length=15, blank=True, default="")
    opening_hours = models.CharField(max_length=120, blank=True, default="")

    upi_id = models.CharField(max_length=100, blank=True, default="")
    bank_account_name = models.CharField(max_length=150, blank=True, default="")
    bank_account_number = models.CharField(max_length=40, blank=True, default="")
    bank_ifsc = models.CharField(max_length=20, blank=True, default="")
    bank_name = models.CharField(max_length=120, blank=True, default="")

    default_gst_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    payment_due_days = models.PositiveIntegerField(default=7)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Shop profile"
        verbose_name_plural = "Shop profile"

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "Shop name is required."})

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("The shop profile cannot be deleted.")

    def __str__(self):
        return self.name
