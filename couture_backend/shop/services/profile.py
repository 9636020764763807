# shop/services/profile.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings

from shop.models import ShopProfile


def _shop_defaults() -> dict:
    shop = getattr(settings, "SHOP", {}) or {}
    return {
        "name": shop.get("NAME") or "Couture",
        "tagline": shop.get("TAGLINE") or "",
        "upi_id": shop.get("UPI_ID") or "",
        "default_gst_percent": Decimal(str(shop.get("DEFAULT_GST_PERCENT") or 0)),
        "payment_due_days": int(shop.get("PAYMENT_DUE_DAYS") or 7),
    }


def get_shop_profile() -> ShopProfile:
    """
    Return the singleton profile, creating it from settings defaults on first use.
    """
    profile, _ = ShopProfile.objects.get_or_create(
        pk=ShopProfile.SINGLETON_PK,
        defaults=_shop_defaults(),
    )
    return profile


def currency_code() -> str:
    return (getattr(settings, "SHOP", {}) or {}).get("CURRENCY") or "INR"


def country_dial_code() -> str:
    return (getattr(settings, "SHOP", {}) or {}).get("COUNTRY_DIAL_CODE") or "91"
