# appointments/tests/test_appointments.py

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from appointments.models import Appointment
from customers.models import Customer

User = get_user_model()


class AppointmentApiTests(TestCase):
    """
    GUARANTEES:
    - Managers book; staff can read the diary
    - today/ lists only today's non-cancelled slots
    - reminder/ returns a WhatsApp link and marks the slot reminded
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        self.client.force_authenticate(user=self.manager)
        self.now = timezone.localtime()

    def _book(self, when, **overrides):
        payload = {
            "customer_name": "Priya",
            "customer_phone": "9876543210",
            "scheduled_at": when.isoformat(),
            "purpose": "Blouse fitting",
        }
        payload.update(overrides)
        res = self.client.post("/api/appointments/", payload, format="json")
        self.assertEqual(res.status_code, 201, res.data)
        return res.data

    def test_create_defaults(self):
        Customer.objects.create(name="Priya", phone="9876543210")
        data = self._book(self.now + timedelta(days=2))
        self.assertEqual(data["duration_minutes"], 60)
        self.assertEqual(data["status"], "scheduled")
        self.assertTrue(data["time_label"])
        self.assertIsNotNone(data["customer"])

    def test_staff_read_only(self):
        self.client.force_authenticate(user=self.tailor)
        self.assertEqual(self.client.get("/api/appointments/").status_code, 200)
        res = self.client.post("/api/appointments/", {"customer_name": "X"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_today(self):
        start_of_day = self.now.replace(hour=12, minute=0, second=0, microsecond=0)
        self._book(start_of_day)
        cancelled = self._book(start_of_day, customer_name="Meena")
        Appointment.objects.filter(pk=cancelled["id"]).update(status=Appointment.Status.CANCELLED)
        self._book(start_of_day + timedelta(days=1), customer_name="Asha")

        res = self.client.get("/api/appointments/today/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["customer_name"], "Priya")

    def test_reminder(self):
        data = self._book(self.now + timedelta(days=1), time_label="10:30 AM")
        res = self.client.post(f"/api/appointments/{data['id']}/reminder/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("10:30 AM", res.data["message"])
        self.assertTrue(res.data["whatsapp"].startswith("https://wa.me/919876543210?text="))
        self.assertTrue(Appointment.objects.get(pk=data["id"]).reminder_sent)

    def test_reminder_for_cancelled_is_400(self):
        data = self._book(self.now + timedelta(days=1))
        Appointment.objects.filter(pk=data["id"]).update(status=Appointment.Status.CANCELLED)
        res = self.client.post(f"/api/appointments/{data['id']}/reminder/")
        self.assertEqual(res.status_code, 400)
