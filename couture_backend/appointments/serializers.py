# appointments/serializers.py

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from appointments.models import Appointment


class AppointmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Appointment
        fields = [
            "id",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "scheduled_at",
            "time_label",
            "duration_minutes",
            "purpose",
            "notes",
            "status",
            "reminder_sent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "customer", "reminder_sent", "created_at", "updated_at"]

    def validate_customer_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Customer name is required.")
        return value

    def validate(self, attrs):
        scheduled_at = attrs.get("scheduled_at")
        if scheduled_at and not attrs.get("time_label"):
            attrs["time_label"] = timezone.localtime(scheduled_at).strftime("%I:%M %p")
        return attrs
