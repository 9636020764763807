# alterations/tests/test_alterations.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from staff.models import StaffMember

User = get_user_model()


class AlterationApiTests(TestCase):
    """
    GUARANTEES:
    - CRUD with status / priority filters
    - Completing a job stamps actual_completion once
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.client.force_authenticate(user=self.manager)
        self.tailor = StaffMember.objects.create(name="Ravi")

    def _create(self, **overrides):
        payload = {
            "customer_name": "Priya",
            "customer_phone": "9876543210",
            "item_type": "Saree Blouse",
            "alteration_type": "Take in waist",
            "cost": "250",
            "assigned_staff": str(self.tailor.id),
        }
        payload.update(overrides)
        res = self.client.post("/api/alterations/", payload, format="json")
        self.assertEqual(res.status_code, 201, res.data)
        return res.data

    def test_create_defaults(self):
        data = self._create()
        self.assertEqual(data["status"], "not-started")
        self.assertEqual(data["priority"], "medium")
        self.assertEqual(data["assigned_staff_name"], "Ravi")

    def test_filters(self):
        self._create(priority="high")
        self._create(priority="low", status="in-progress")

        self.assertEqual(self.client.get("/api/alterations/?priority=high").data["count"], 1)
        self.assertEqual(self.client.get("/api/alterations/?status=in-progress").data["count"], 1)

    def test_completion_stamp(self):
        data = self._create()
        res = self.client.patch(f"/api/alterations/{data['id']}/", {"status": "completed"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["actual_completion"], timezone.localdate().isoformat())

    def test_rejects_bad_image_urls(self):
        res = self.client.post(
            "/api/alterations/",
            {"customer_name": "P", "item_type": "Kurti", "alteration_type": "Hem", "before_images": ["nope"]},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
