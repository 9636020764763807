# shop/views.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import CAP_SHOP_SETTINGS, user_has_capability
from shop.serializers import ShopProfileSerializer
from shop.services.profile import get_shop_profile


class ShopProfileView(APIView):
    """
    GET   /api/shop/profile/   any authenticated user (bills/PDF headers)
    PATCH /api/shop/profile/   requires shop.settings
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ShopProfileSerializer

    @extend_schema(responses={200: ShopProfileSerializer})
    def get(self, request):
        return Response(ShopProfileSerializer(get_shop_profile()).data)

    @extend_schema(request=ShopProfileSerializer, responses={200: ShopProfileSerializer})
    def patch(self, request):
        if not user_has_capability(request.user, CAP_SHOP_SETTINGS):
            return Response({"detail": "You do not have permission to edit shop settings."}, status=403)

        serializer = ShopProfileSerializer(get_shop_profile(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
