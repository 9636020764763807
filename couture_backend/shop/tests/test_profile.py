# shop/tests/test_profile.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from shop.models import ShopProfile
from shop.services.profile import get_shop_profile

User = get_user_model()


class ShopProfileTests(TestCase):
    """
    GUARANTEES:
    - The profile is created lazily from settings defaults
    - There is only ever one row
    - Only shop.settings holders can edit it
    """

    @override_settings(SHOP={"NAME": "Needle & Thread", "DEFAULT_GST_PERCENT": 5, "PAYMENT_DUE_DAYS": 10})
    def test_created_from_settings(self):
        profile = get_shop_profile()
        self.assertEqual(profile.name, "Needle & Thread")
        self.assertEqual(profile.default_gst_percent, Decimal("5"))
        self.assertEqual(profile.payment_due_days, 10)

    def test_singleton(self):
        get_shop_profile()
        ShopProfile(name="Second").save()
        self.assertEqual(ShopProfile.objects.count(), 1)
        self.assertEqual(get_shop_profile().name, "Second")

    def test_patch_requires_capability(self):
        client = APIClient()
        staff = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        client.force_authenticate(user=staff)

        self.assertEqual(client.get("/api/shop/profile/").status_code, 200)
        res = client.patch("/api/shop/profile/", {"upi_id": "shop@upi"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_admin_updates_profile(self):
        client = APIClient()
        admin = User.objects.create_user(username="owner", password="pass1234", role="admin")
        client.force_authenticate(user=admin)

        res = client.patch("/api/shop/profile/", {"upi_id": "shop@upi", "gstin": "29ABCDE1234F1Z5"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(get_shop_profile().upi_id, "shop@upi")
