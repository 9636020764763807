# alterations/serializers.py

from __future__ import annotations

from django.utils import timezone
from rest_framework import serializers

from alterations.models import Alteration


class AlterationSerializer(serializers.ModelSerializer):
    assigned_staff_name = serializers.CharField(source="assigned_staff.name", read_only=True, default=None)
    before_images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)
    after_images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    class Meta:
        model = Alteration
        fields = [
            "id",
            "customer_name",
            "customer_phone",
            "item_type",
            "alteration_type",
            "description",
            "priority",
            "status",
            "assigned_staff",
            "assigned_staff_name",
            "estimated_completion",
            "actual_completion",
            "cost",
            "notes",
            "before_images",
            "after_images",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "actual_completion", "created_at", "updated_at"]

    def validate(self, attrs):
        status = attrs.get("status")
        if status == Alteration.Status.COMPLETED and not getattr(self.instance, "actual_completion", None):
            attrs["actual_completion"] = timezone.localdate()
        return attrs
