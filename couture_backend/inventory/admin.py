# inventory/admin.py

from django.contrib import admin

from inventory.models import InventoryItem, StockMovement


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("name", "product_type", "category", "quantity", "unit", "min_stock", "updated_at")
    list_filter = ("product_type", "category")
    search_fields = ("name", "supplier", "barcode")


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("item", "movement_type", "reason", "quantity", "quantity_after", "order", "created_at")
    list_filter = ("movement_type", "reason")
    readonly_fields = [f.name for f in StockMovement._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
