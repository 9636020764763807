# inventory/views.py

"""
INVENTORY VIEWSET

Staff:
- CRUD (newest first) with ?q= ?product_type= ?category= ?low_stock=true ?updated_since=
- GET  alerts/low-stock/
- POST {id}/adjust/          manual +/- with audit movement (inventory.adjust)
- GET  {id}/movements/
- GET  {id}/barcode/         Code128 for the item's barcode text (or its id)
- GET  barcode/?text=...     Code128 for arbitrary text
- POST availability/         check order lines against stock
- GET  meta/                 product types, categories, units
"""

from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.mixins import UpdatedSinceMixin
from inventory.constants import CATEGORIES, PRODUCT_TYPES, UNITS
from inventory.models import InventoryItem
from inventory.models.item import low_stock_q
from inventory.serializers import (
    AvailabilityRequestSerializer,
    InventoryItemSerializer,
    StockAdjustmentSerializer,
    StockMovementSerializer,
)
from inventory.services.adjustments import adjust_stock
from inventory.services.barcodes import generate_barcode, validate_barcode_text
from inventory.services.exceptions import (
    InvalidBarcodeText,
    InventoryItemNotFound,
    StockAdjustmentError,
)
from inventory.services.stock_sync import check_inventory_availability
from permissions.roles import (
    CAP_INVENTORY_ADJUST,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_VIEW,
    ActionCapability,
)


class InventoryItemViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = InventoryItemSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_INVENTORY_VIEW
    write_capability = CAP_INVENTORY_EDIT
    action_capabilities = {
        "adjust": CAP_INVENTORY_ADJUST,
        "availability": CAP_INVENTORY_VIEW,
    }

    def get_queryset(self):
        qs = InventoryItem.objects.all().order_by("-created_at")
        params = self.request.query_params

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(name__icontains=q) | Q(supplier__icontains=q) | Q(barcode__iexact=q)
            )

        product_type = (params.get("product_type") or "").strip()
        if product_type:
            qs = qs.filter(product_type=product_type)

        category = (params.get("category") or "").strip()
        if category:
            qs = qs.filter(category=category)

        if (params.get("low_stock") or "").lower() in {"1", "true", "yes"}:
            qs = qs.filter(low_stock_q())

        return self.filter_updated_since(qs)

    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock(self, request):
        qs = InventoryItem.objects.filter(low_stock_q()).order_by("quantity", "name")
        data = InventoryItemSerializer(qs, many=True).data
        return Response({"count": len(data), "results": data})

    @extend_schema(request=StockAdjustmentSerializer, responses={200: InventoryItemSerializer})
    @action(detail=True, methods=["post"])
    def adjust(self, request, pk=None):
        item = self.get_object()
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = adjust_stock(
                item=item,
                quantity_delta=serializer.validated_data["quantity_delta"],
                user=request.user,
                note=serializer.validated_data.get("note", ""),
            )
        except InventoryItemNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except StockAdjustmentError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "item": InventoryItemSerializer(result.item).data,
                "movement": StockMovementSerializer(result.movement).data,
            }
        )

    @action(detail=True, methods=["get"])
    def movements(self, request, pk=None):
        item = self.get_object()
        qs = item.movements.select_related("order").order_by("-created_at")
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(StockMovementSerializer(page, many=True).data)
        return Response(StockMovementSerializer(qs, many=True).data)

    @action(detail=True, methods=["get"], url_path="barcode")
    def item_barcode(self, request, pk=None):
        item = self.get_object()
        text = item.barcode or str(item.id)
        return Response({"text": text, "data_url": generate_barcode(text)})

    @extend_schema(parameters=[OpenApiParameter("text", str, OpenApiParameter.QUERY, required=True)])
    @action(detail=False, methods=["get"], url_path="barcode")
    def barcode_for_text(self, request):
        text = request.query_params.get("text") or ""
        if not validate_barcode_text(text):
            return Response(
                {"detail": "Barcode text must be 1-50 letters, digits, hyphens or underscores."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            data_url = generate_barcode(text)
        except InvalidBarcodeText:
            return Response({"detail": "Invalid barcode text."}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"text": text, "data_url": data_url})

    @extend_schema(request=AvailabilityRequestSerializer, responses={200: dict})
    @action(detail=False, methods=["post"])
    def availability(self, request):
        serializer = AvailabilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = check_inventory_availability(serializer.validated_data["lines"])
        return Response({"available": result.available, "shortages": result.shortages})

    @action(detail=False, methods=["get"])
    def meta(self, request):
        return Response(
            {
                "product_types": list(PRODUCT_TYPES),
                "categories": list(CATEGORIES),
                "units": list(UNITS),
            }
        )
