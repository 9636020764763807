# shop/apps.py

"""
SHOP APP CONFIG

Single editable shop profile (name, address, tax ids, UPI, bank details)
used by bills, PDFs and WhatsApp messages.
"""

from django.apps import AppConfig


class ShopConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "shop"
    verbose_name = "Shop Profile"
