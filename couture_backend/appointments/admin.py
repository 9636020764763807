from django.contrib import admin

from appointments.models import Appointment


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "customer_phone", "scheduled_at", "purpose", "status", "reminder_sent")
    list_filter = ("status", "reminder_sent")
    search_fields = ("customer_name", "customer_phone", "purpose")
