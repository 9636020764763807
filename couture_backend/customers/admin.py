from django.contrib import admin

from customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "email", "total_orders", "total_spent", "created_at")
    search_fields = ("name", "phone", "email")
    readonly_fields = ("total_orders", "total_spent", "created_at", "updated_at")
