from django.contrib import admin

from expenses.models import Expense


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "amount", "date", "payment_method", "status", "is_recurring")
    list_filter = ("category", "status", "payment_method", "is_recurring")
    search_fields = ("title", "vendor")
