from django.contrib import admin

from alterations.models import Alteration


@admin.register(Alteration)
class AlterationAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "item_type", "alteration_type", "priority", "status", "cost")
    list_filter = ("status", "priority")
    search_fields = ("customer_name", "customer_phone", "item_type")
