from django.contrib import admin

from orders.models import Order, OrderItem, OrderItemMaterial


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ("position", "made_for", "category", "price", "quantity", "status", "delivery_date")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "order_number",
        "customer_name",
        "item_type",
        "status",
        "priority",
        "total_amount",
        "remaining_amount",
        "delivery_date",
    )
    list_filter = ("status", "priority")
    search_fields = ("order_number", "customer_name", "customer_phone")
    readonly_fields = ("deducted_materials", "stock_restored", "created_at", "updated_at")
    inlines = [OrderItemInline]


@admin.register(OrderItemMaterial)
class OrderItemMaterialAdmin(admin.ModelAdmin):
    list_display = ("name", "quantity", "unit", "order_item")
    search_fields = ("name",)
