# alterations/views.py

"""
ALTERATIONS

- CRUD (newest first)  ?status= ?priority= ?assigned_staff= ?q= ?updated_since=
"""

from __future__ import annotations

from django.db.models import Q
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from alterations.models import Alteration
from alterations.serializers import AlterationSerializer
from backend.mixins import UpdatedSinceMixin
from permissions.roles import CAP_ORDERS_EDIT, CAP_ORDERS_VIEW, ActionCapability


class AlterationViewSet(UpdatedSinceMixin, viewsets.ModelViewSet):
    serializer_class = AlterationSerializer
    permission_classes = [IsAuthenticated, ActionCapability]
    # alterations are workshop jobs, same access as orders
    read_capability = CAP_ORDERS_VIEW
    write_capability = CAP_ORDERS_EDIT

    def get_queryset(self):
        qs = Alteration.objects.select_related("assigned_staff").order_by("-created_at")
        params = self.request.query_params

        status_param = (params.get("status") or "").strip()
        if status_param:
            qs = qs.filter(status=status_param)

        priority = (params.get("priority") or "").strip()
        if priority:
            qs = qs.filter(priority=priority)

        assigned = (params.get("assigned_staff") or "").strip()
        if assigned:
            qs = qs.filter(assigned_staff_id=assigned)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(customer_name__icontains=q)
                | Q(customer_phone__icontains=q)
                | Q(item_type__icontains=q)
                | Q(alteration_type__icontains=q)
            )

        return self.filter_updated_since(qs)
