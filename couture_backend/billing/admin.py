from django.contrib import admin

from billing.models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("bill_id", "customer_name", "total_amount", "paid_amount", "balance", "status", "date")
    list_filter = ("status", "date")
    search_fields = ("bill_id", "customer_name", "customer_phone")
    readonly_fields = (
        "subtotal",
        "gst_amount",
        "discount_amount",
        "total_amount",
        "balance",
        "status",
        "upi_link",
        "qr_code",
        "created_at",
        "updated_at",
    )
    inlines = [BillItemInline]
