# orders/models/order_item.py

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from .order import Order, OrderStatus


class OrderItem(models.Model):
    """
    One garment line on an order (e.g. "Blouse for Anita").
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField(default=0)

    made_for = models.CharField(max_length=150)
    category = models.CharField(max_length=100)
    description = models.TextField(blank=True, default="")

    price = models.DecimalField(
        max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))]
    )
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    status = models.CharField(max_length=12, choices=OrderStatus.choices, default=OrderStatus.RECEIVED)
    order_date = models.DateField(default=timezone.localdate)
    delivery_date = models.DateField()

    assigned_staff = models.ManyToManyField(
        "staff.StaffMember", blank=True, related_name="order_items"
    )
    design_images = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True, default="")
    sizes = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["order", "position", "id"]

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price or 0) * int(self.quantity or 0)

    def __str__(self):
        return f"{self.category} for {self.made_for}"


class OrderItemMaterial(models.Model):
    """
    Inventory material an item needs. name/unit are snapshots so the line
    still reads correctly if the inventory item is later deleted.
    """

    order_item = models.ForeignKey(OrderItem, on_delete=models.CASCADE, related_name="materials")
    inventory_item = models.ForeignKey(
        "inventory.InventoryItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_materials",
    )
    name = models.CharField(max_length=200)
    quantity = models.DecimalField(
        max_digits=12, decimal_places=3, validators=[MinValueValidator(Decimal("0.001"))]
    )
    unit = models.CharField(max_length=20, default="pieces")

    def __str__(self):
        return f"{self.name} x {self.quantity} {self.unit}"
