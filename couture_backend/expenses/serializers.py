# expenses/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from expenses.models import Expense


class ExpenseSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))

    class Meta:
        model = Expense
        fields = [
            "id",
            "title",
            "description",
            "amount",
            "category",
            "date",
            "payment_method",
            "vendor",
            "status",
            "receipt_url",
            "is_recurring",
            "recurring_type",
            "next_due_date",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate(self, attrs):
        is_recurring = attrs.get("is_recurring", getattr(self.instance, "is_recurring", False))
        recurring_type = attrs.get("recurring_type", getattr(self.instance, "recurring_type", ""))
        if is_recurring and not recurring_type:
            raise serializers.ValidationError({"recurring_type": "Choose how often this expense repeats."})
        return attrs
