# orders/apps.py

"""
ORDERS APP CONFIG

Tailoring orders: multi-item orders with per-item staff, design images and
required materials; status lifecycle, advance payments, progress flags.
"""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
    verbose_name = "Orders"
