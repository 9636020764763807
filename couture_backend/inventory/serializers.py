# inventory/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from inventory.models import InventoryItem, StockMovement
from inventory.services.adjustments import adjust_stock
from inventory.services.barcodes import validate_barcode_text
from inventory.services.exceptions import StockAdjustmentError


class InventoryItemSerializer(serializers.ModelSerializer):
    """
    Quantity is writable on create. On update a changed quantity is applied
    as an ADJUSTMENT movement so the ledger stays complete.
    """

    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            "id",
            "name",
            "product_type",
            "category",
            "description",
            "quantity",
            "unit",
            "min_stock",
            "unit_price",
            "supplier",
            "barcode",
            "is_low_stock",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "is_low_stock", "created_at", "updated_at"]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Item name is required.")
        return value

    def validate_quantity(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Quantity cannot be negative.")
        return value

    def validate_barcode(self, value):
        value = (value or "").strip()
        if value and not validate_barcode_text(value):
            raise serializers.ValidationError("Use 1-50 letters, digits, hyphens or underscores.")
        return value

    def update(self, instance, validated_data):
        new_quantity = validated_data.pop("quantity", None)
        instance = super().update(instance, validated_data)

        if new_quantity is not None and Decimal(new_quantity) != Decimal(instance.quantity):
            request = self.context.get("request")
            try:
                result = adjust_stock(
                    item=instance,
                    quantity_delta=Decimal(new_quantity) - Decimal(instance.quantity),
                    user=getattr(request, "user", None),
                    note="Quantity edited",
                )
            except StockAdjustmentError as exc:
                raise serializers.ValidationError({"quantity": str(exc)})
            instance.quantity = result.item.quantity
        return instance


class StockMovementSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source="item.name", read_only=True)
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "item",
            "item_name",
            "movement_type",
            "reason",
            "quantity",
            "quantity_after",
            "order",
            "order_number",
            "performed_by",
            "note",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    quantity_delta = serializers.DecimalField(max_digits=12, decimal_places=3)
    note = serializers.CharField(required=False, allow_blank=True, max_length=255)


class StockLineSerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=200)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal("0.001"))


class AvailabilityRequestSerializer(serializers.Serializer):
    lines = StockLineSerializer(many=True, allow_empty=False)
