# orders/tests/test_orders_api.py

from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from inventory.models import InventoryItem
from orders.models import Order

User = get_user_model()


class OrderApiTests(TestCase):
    """
    GUARANTEES:
    - Managers create orders; warnings ride along with the order
    - Staff can read and tick progress but cannot edit orders
    - List filters and the calendar window work on delivery dates
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        self.delivery = date.today() + timedelta(days=5)

    def _payload(self, **overrides):
        payload = {
            "customer_name": "Priya",
            "customer_phone": "9876543210",
            "advance_amount": "300",
            "items": [
                {
                    "made_for": "Priya",
                    "category": "Blouse",
                    "price": "1000",
                    "quantity": 1,
                    "delivery_date": self.delivery.isoformat(),
                }
            ],
        }
        payload.update(overrides)
        return payload

    def _create(self, **overrides):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post("/api/orders/", self._payload(**overrides), format="json")
        self.assertEqual(res.status_code, 201, res.data)
        return res

    def test_create(self):
        res = self._create()
        self.assertEqual(res.data["warnings"], [])
        self.assertEqual(res.data["order"]["total_amount"], "1000.00")
        self.assertEqual(res.data["order"]["remaining_amount"], "700.00")
        self.assertEqual(len(res.data["order"]["items"]), 1)

    def test_create_cancelled_is_400(self):
        payload = self._payload()
        payload["items"][0]["status"] = "cancelled"
        self.client.force_authenticate(user=self.manager)
        res = self.client.post("/api/orders/", payload, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertFalse(Order.objects.exists())

    def test_create_with_shortage_warning(self):
        lace = InventoryItem.objects.create(name="Lace", product_type="Lace", quantity=Decimal("1"), unit="meters")
        payload = self._payload()
        payload["items"][0]["materials"] = [{"inventory_item": str(lace.id), "quantity": "3", "unit": "meters"}]
        res = self._create(items=payload["items"])
        self.assertEqual(res.data["warnings"], ["Lace (2 meters short)"])

    def test_create_without_items(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post("/api/orders/", self._payload(items=[]), format="json")
        self.assertEqual(res.status_code, 400)

    def test_staff_cannot_create_but_can_mark_progress(self):
        order_id = self._create().data["order"]["id"]

        self.client.force_authenticate(user=self.tailor)
        res = self.client.post("/api/orders/", self._payload(), format="json")
        self.assertEqual(res.status_code, 403)

        res = self.client.post(f"/api/orders/{order_id}/progress/", {"cutting": True}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["progress"]["cutting"])

    def test_status_and_advance(self):
        order_id = self._create().data["order"]["id"]

        res = self.client.post(f"/api/orders/{order_id}/status/", {"status": "ready"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["order"]["status"], "ready")

        res = self.client.post(f"/api/orders/{order_id}/advance/", {"amount": "700"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["remaining_amount"], "0.00")

    def test_reopen_cancelled_is_400(self):
        order_id = self._create().data["order"]["id"]
        self.client.post(f"/api/orders/{order_id}/status/", {"status": "cancelled"}, format="json")
        res = self.client.post(f"/api/orders/{order_id}/status/", {"status": "received"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_update(self):
        order_id = self._create().data["order"]["id"]
        payload = self._payload()
        payload["items"].append(
            {"made_for": "Priya", "category": "Kurti", "price": "500", "delivery_date": self.delivery.isoformat()}
        )
        res = self.client.put(f"/api/orders/{order_id}/", payload, format="json")
        self.assertEqual(res.status_code, 200, res.data)
        self.assertEqual(res.data["order"]["item_type"], Order.MULTIPLE_ITEMS)
        self.assertEqual(res.data["order"]["total_amount"], "1500.00")

    def test_filters(self):
        self._create()
        self._create(customer_name="Meena", priority="urgent")

        res = self.client.get("/api/orders/?priority=urgent")
        self.assertEqual(res.data["count"], 1)

        res = self.client.get("/api/orders/?q=meena")
        self.assertEqual(res.data["count"], 1)

        later = (self.delivery + timedelta(days=1)).isoformat()
        res = self.client.get(f"/api/orders/?delivery_from={later}")
        self.assertEqual(res.data["count"], 0)

    def test_calendar(self):
        self._create()
        start = date.today().isoformat()
        end = (date.today() + timedelta(days=30)).isoformat()

        res = self.client.get(f"/api/orders/calendar/?start={start}&end={end}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["days"][0]["date"], self.delivery.isoformat())
        self.assertEqual(res.data["days"][0]["orders"][0]["billed_total"], "0.00")

        self.assertEqual(self.client.get("/api/orders/calendar/").status_code, 400)

    def test_messages(self):
        order_id = self._create().data["order"]["id"]
        res = self.client.get(f"/api/orders/{order_id}/messages/")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["status_update"]["whatsapp"].startswith("https://wa.me/919876543210"))
        self.assertIn("payment_reminder", res.data)

    def test_stats(self):
        self._create()
        res = self.client.get("/api/orders/stats/")
        self.assertEqual(res.data["total"], 1)
        self.assertEqual(res.data["revenue"], "0.00")
