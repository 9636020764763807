# billing/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from billing.models import Bill, BillItem, DiscountType
from orders.models import Order


# ---------------- READ ----------------
class BillItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillItem
        fields = ["id", "position", "description", "quantity", "rate", "amount", "charge_type"]


class BillSerializer(serializers.ModelSerializer):
    items = BillItemSerializer(many=True, read_only=True)
    breakdown = serializers.SerializerMethodField()
    order_number = serializers.CharField(source="order.order_number", read_only=True, default=None)

    class Meta:
        model = Bill
        fields = [
            "id",
            "bill_id",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "customer_address",
            "order",
            "order_number",
            "items",
            "breakdown",
            "subtotal",
            "gst_percent",
            "gst_amount",
            "discount",
            "discount_type",
            "discount_amount",
            "total_amount",
            "paid_amount",
            "balance",
            "status",
            "date",
            "due_date",
            "upi_id",
            "upi_link",
            "qr_code",
            "bank_details",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_breakdown(self, obj) -> dict:
        return {k: str(v) for k, v in obj.breakdown.items()}


class BillListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bill
        fields = [
            "id",
            "bill_id",
            "customer_name",
            "customer_phone",
            "order",
            "total_amount",
            "paid_amount",
            "balance",
            "status",
            "date",
            "due_date",
            "updated_at",
        ]
        read_only_fields = fields


# ---------------- WRITE ----------------
_money_kwargs = {"max_digits": 14, "decimal_places": 2, "min_value": Decimal("0")}


class BillItemInputSerializer(serializers.Serializer):
    description = serializers.CharField(max_length=255)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"), required=False, default=Decimal("1"))
    rate = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    amount = serializers.DecimalField(required=False, allow_null=True, **_money_kwargs)
    charge_type = serializers.ChoiceField(choices=BillItem.ChargeType.choices, required=False)


class BreakdownSerializer(serializers.Serializer):
    fabric = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    stitching = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    accessories = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    customization = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    other_charges = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)


class BillTotalsInputSerializer(serializers.Serializer):
    items = BillItemInputSerializer(many=True, required=False, default=list)
    breakdown = BreakdownSerializer(required=False)
    gst_percent = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=Decimal("0"), max_value=Decimal("100"), required=False
    )
    discount = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)
    discount_type = serializers.ChoiceField(
        choices=DiscountType.choices, required=False, default=DiscountType.AMOUNT
    )
    paid_amount = serializers.DecimalField(required=False, default=Decimal("0"), **_money_kwargs)


class BillWriteSerializer(BillTotalsInputSerializer):
    customer_name = serializers.CharField(max_length=150)
    customer_phone = serializers.CharField(required=False, allow_blank=True, max_length=30, default="")
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    customer_address = serializers.CharField(required=False, allow_blank=True, default="")
    order = serializers.PrimaryKeyRelatedField(queryset=Order.objects.all(), required=False, allow_null=True)
    date = serializers.DateField(required=False)
    due_date = serializers.DateField(required=False, allow_null=True)
    upi_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    qr_amount = serializers.DecimalField(required=False, allow_null=True, **_money_kwargs)
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        due, day = attrs.get("due_date"), attrs.get("date")
        if due and day and due < day:
            raise serializers.ValidationError({"due_date": "Due date cannot be before the bill date."})
        return attrs


class PaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
