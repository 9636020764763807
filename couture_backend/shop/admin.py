# shop/admin.py

from django.contrib import admin

from shop.models import ShopProfile


@admin.register(ShopProfile)
class ShopProfileAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "gstin", "upi_id", "updated_at")

    def has_add_permission(self, request):
        return not ShopProfile.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
