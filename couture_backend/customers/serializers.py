# customers/serializers.py

from rest_framework import serializers

from customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "phone",
            "email",
            "address",
            "style_preference",
            "measurements",
            "notes",
            "total_orders",
            "total_spent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "total_orders", "total_spent", "created_at", "updated_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Customer name is required.")
        return value

    def validate_measurements(self, value):
        if value in (None, ""):
            return {}
        if not isinstance(value, dict):
            raise serializers.ValidationError("Measurements must be an object.")

        cleaned = {}
        for key, raw in value.items():
            if raw in (None, ""):
                continue
            if isinstance(raw, bool):
                raise serializers.ValidationError(f"{key} must be a number.")
            try:
                number = float(raw)
            except (TypeError, ValueError):
                raise serializers.ValidationError(f"{key} must be a number.")
            if number < 0:
                raise serializers.ValidationError(f"{key} cannot be negative.")
            cleaned[str(key)] = number
        return cleaned


class CustomerSuggestionSerializer(serializers.ModelSerializer):
    """
    Lightweight rows for the name autosuggest.
    """

    class Meta:
        model = Customer
        fields = ["id", "name", "phone", "email", "address", "measurements"]
