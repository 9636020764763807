# shop/serializers.py

from rest_framework import serializers

from shop.models import ShopProfile


class ShopProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShopProfile
        fields = [
            "name",
            "tagline",
            "logo_url",
            "address",
            "phone",
            "email",
            "website",
            "gstin",
            "pan",
            "opening_hours",
            "upi_id",
            "bank_account_name",
            "bank_account_number",
            "bank_ifsc",
            "bank_name",
            "default_gst_percent",
            "payment_due_days",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Shop name is required.")
        return value
