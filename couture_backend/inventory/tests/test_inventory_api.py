# inventory/tests/test_inventory_api.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import InventoryItem, StockMovement
from inventory.services.barcodes import generate_barcode, validate_barcode_text

User = get_user_model()


class BarcodeTests(TestCase):
    def test_validation(self):
        self.assertTrue(validate_barcode_text("FAB-001_A"))
        self.assertFalse(validate_barcode_text(""))
        self.assertFalse(validate_barcode_text("has space"))
        self.assertFalse(validate_barcode_text("x" * 51))
        self.assertFalse(validate_barcode_text("ABC123\n"))

    def test_png_data_url(self):
        self.assertTrue(generate_barcode("FAB-001").startswith("data:image/png;base64,"))


class InventoryApiTests(TestCase):
    """
    GUARANTEES:
    - Staff can read stock but not edit it
    - Low-stock alerts honour min_stock
    - Manual adjustments are audited and cannot go negative
    - Editing quantity through the form writes a movement
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.staff = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        self.item = InventoryItem.objects.create(
            name="Raw Silk", product_type="Lehenga Fabric", category="Fabrics",
            quantity=Decimal("4"), unit="meters", min_stock=Decimal("5"),
        )
        InventoryItem.objects.create(name="Buttons", product_type="Buttons", quantity=Decimal("50"))

    def test_staff_read_only(self):
        self.client.force_authenticate(user=self.staff)
        self.assertEqual(self.client.get("/api/inventory/items/").status_code, 200)
        res = self.client.post("/api/inventory/items/", {"name": "Lace"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_low_stock_alerts(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.get("/api/inventory/items/alerts/low-stock/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["name"] for r in res.data["results"]], ["Raw Silk"])
        self.assertTrue(res.data["results"][0]["is_low_stock"])

    def test_adjust(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            f"/api/inventory/items/{self.item.id}/adjust/", {"quantity_delta": "-1.5"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.item.refresh_from_db()
        self.assertEqual(self.item.quantity, Decimal("2.5"))
        self.assertEqual(StockMovement.objects.get().movement_type, "OUT")

    def test_adjust_below_zero_rejected(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            f"/api/inventory/items/{self.item.id}/adjust/", {"quantity_delta": "-10"}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_staff_cannot_adjust(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.post(
            f"/api/inventory/items/{self.item.id}/adjust/", {"quantity_delta": "1"}, format="json"
        )
        self.assertEqual(res.status_code, 403)

    def test_quantity_edit_is_audited(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.patch(
            f"/api/inventory/items/{self.item.id}/", {"quantity": "10"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        movement = StockMovement.objects.get(item=self.item)
        self.assertEqual(movement.quantity, Decimal("6"))
        self.assertEqual(movement.quantity_after, Decimal("10"))

    def test_availability(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.post(
            "/api/inventory/items/availability/",
            {"lines": [{"reference": "Lehenga Fabric", "quantity": "6"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data["available"])
        self.assertEqual(res.data["shortages"], ["Lehenga Fabric - need 6, have 4"])

    def test_barcode_endpoint_rejects_bad_text(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.get("/api/inventory/items/barcode/", {"text": "bad text!"})
        self.assertEqual(res.status_code, 400)
        res = self.client.get("/api/inventory/items/barcode/", {"text": "ABC123\n"})
        self.assertEqual(res.status_code, 400)

    def test_meta(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.get("/api/inventory/items/meta/")
        self.assertIn("Zari Border", res.data["product_types"])
