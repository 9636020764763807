# customers/views.py

"""
CUSTOMER VIEWSET

- CRUD (newest first)
- ?q=<text>            name / phone search (autosuggest)
- ?updated_since=<dt>  incremental polling
- GET {id}/contact-links/?message=...   wa.me + tel: links
"""

from __future__ import annotations

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from backend.mixins import UpdatedSinceMixin
from customers.models import Customer
from customers.serializers import CustomerSerializer, CustomerSuggestionSerializer
from customers.services.contact import generate_call_link, generate_whatsapp_link
from permissions.roles import CAP_CUSTOMERS_EDIT, CAP_CUSTOMERS_VIEW, ActionCapability


class CustomerViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    read_capability = CAP_CUSTOMERS_VIEW
    write_capability = CAP_CUSTOMERS_EDIT

    def get_queryset(self):
        qs = Customer.objects.all().order_by("-created_at")

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(phone__icontains=q))

        return self.filter_updated_since(qs)

    @extend_schema(
        parameters=[OpenApiParameter("q", str, OpenApiParameter.QUERY, required=True)],
        responses={200: CustomerSuggestionSerializer(many=True)},
    )
    @action(detail=False, methods=["get"])
    def suggest(self, request):
        """
        Top 10 name matches for the order form autosuggest.
        """
        q = (request.query_params.get("q") or "").strip()
        if not q:
            return Response([])
        qs = Customer.objects.filter(name__icontains=q).order_by("name")[:10]
        return Response(CustomerSuggestionSerializer(qs, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter("message", str, OpenApiParameter.QUERY, required=False)],
        responses={200: dict},
    )
    @action(detail=True, methods=["get"], url_path="contact-links")
    def contact_links(self, request, pk=None):
        customer = self.get_object()
        if not customer.phone:
            return Response({"detail": "Customer has no phone number."}, status=400)

        message = request.query_params.get("message") or f"Hi {customer.name},"
        return Response(
            {
                "whatsapp": generate_whatsapp_link(customer.phone, message),
                "call": generate_call_link(customer.phone),
            }
        )
