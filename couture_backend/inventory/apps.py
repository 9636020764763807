# inventory/apps.py

"""
INVENTORY APP CONFIG

Fabric, thread and accessory stock:
- items + low-stock alerts
- append-only stock movements
- order material deduction / restoration (stock sync)
- Code128 barcodes
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory"
