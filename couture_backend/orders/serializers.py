# orders/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from inventory.models import InventoryItem
from orders.models import Order, OrderItem, OrderItemMaterial, OrderStatus
from orders.models.order import PROGRESS_STEPS
from staff.models import StaffMember


# ---------------- READ ----------------
class OrderItemMaterialSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItemMaterial
        fields = ["id", "inventory_item", "name", "quantity", "unit"]


class OrderItemSerializer(serializers.ModelSerializer):
    materials = OrderItemMaterialSerializer(many=True, read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "position",
            "made_for",
            "category",
            "description",
            "price",
            "quantity",
            "line_total",
            "status",
            "order_date",
            "delivery_date",
            "assigned_staff",
            "design_images",
            "notes",
            "sizes",
            "materials",
        ]


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "item_type",
            "quantity",
            "status",
            "priority",
            "total_amount",
            "advance_amount",
            "remaining_amount",
            "order_date",
            "delivery_date",
            "notes",
            "measurements",
            "progress",
            "assigned_staff",
            "design_images",
            "deducted_materials",
            "stock_restored",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "customer_name",
            "customer_phone",
            "item_type",
            "quantity",
            "status",
            "priority",
            "total_amount",
            "advance_amount",
            "remaining_amount",
            "order_date",
            "delivery_date",
            "progress",
            "updated_at",
        ]
        read_only_fields = fields


# ---------------- WRITE ----------------
class MaterialInputSerializer(serializers.Serializer):
    inventory_item = serializers.PrimaryKeyRelatedField(
        queryset=InventoryItem.objects.all(), required=False, allow_null=True
    )
    name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal("0.001"))
    unit = serializers.CharField(required=False, allow_blank=True, max_length=20)

    def validate(self, attrs):
        if not attrs.get("inventory_item") and not (attrs.get("name") or "").strip():
            raise serializers.ValidationError("Material needs an inventory_item or a name.")
        return attrs


class OrderItemInputSerializer(serializers.Serializer):
    made_for = serializers.CharField(max_length=150)
    category = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    quantity = serializers.IntegerField(required=False, default=1, min_value=1)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    order_date = serializers.DateField(required=False)
    delivery_date = serializers.DateField()
    assigned_staff = serializers.PrimaryKeyRelatedField(
        queryset=StaffMember.objects.all(), many=True, required=False
    )
    design_images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    sizes = serializers.DictField(child=serializers.CharField(allow_blank=True), required=False)
    materials = MaterialInputSerializer(many=True, required=False)


class OrderWriteSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=150)
    customer_phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    customer_email = serializers.EmailField(required=False, allow_blank=True)
    measurements = serializers.DictField(required=False)
    priority = serializers.ChoiceField(choices=Order.Priority.choices, required=False)
    advance_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0"), required=False
    )
    items = OrderItemInputSerializer(many=True, allow_empty=False)


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class AdvancePaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))


class ProgressSerializer(serializers.Serializer):
    cutting = serializers.BooleanField(required=False)
    stitching = serializers.BooleanField(required=False)
    finishing = serializers.BooleanField(required=False)

    def validate(self, attrs):
        if not any(step in attrs for step in PROGRESS_STEPS):
            raise serializers.ValidationError("Provide at least one of cutting, stitching, finishing.")
        return attrs
