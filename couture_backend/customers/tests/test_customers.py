# customers/tests/test_customers.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from customers.models import Customer
from customers.services.contact import (
    generate_call_link,
    generate_whatsapp_link,
    order_status_message,
)
from customers.services.customer_service import (
    record_order,
    record_payment,
    upsert_customer_for_order,
)
from shop.services.profile import get_shop_profile

User = get_user_model()


class CustomerServiceTests(TestCase):
    """
    GUARANTEES:
    - Order customers are matched by exact name, then phone
    - Existing contact details are filled, never overwritten
    - Counters accumulate
    """

    def test_creates_when_missing(self):
        customer = upsert_customer_for_order(name="Priya", phone="9876543210")
        self.assertEqual(Customer.objects.count(), 1)
        self.assertEqual(customer.phone, "9876543210")

    def test_matches_by_name_and_fills_blanks(self):
        existing = Customer.objects.create(name="Priya")
        customer = upsert_customer_for_order(name="Priya", phone="9876543210", email="p@x.in")
        self.assertEqual(customer.pk, existing.pk)
        self.assertEqual(customer.email, "p@x.in")

    def test_does_not_overwrite_phone(self):
        Customer.objects.create(name="Priya", phone="111")
        customer = upsert_customer_for_order(name="Priya", phone="222")
        self.assertEqual(customer.phone, "111")

    def test_falls_back_to_phone(self):
        existing = Customer.objects.create(name="Priya S", phone="9876543210")
        customer = upsert_customer_for_order(name="Priya Sharma", phone="9876543210")
        self.assertEqual(customer.pk, existing.pk)

    def test_counters(self):
        customer = Customer.objects.create(name="Meena")
        record_order(customer)
        record_payment(customer, "1500.50")
        record_payment(customer, 0)
        self.assertEqual(customer.total_orders, 1)
        self.assertEqual(customer.total_spent, Decimal("1500.50"))


class ContactLinkTests(TestCase):
    def test_whatsapp_prefixes_country_code(self):
        link = generate_whatsapp_link("98765 43210", "Hello there")
        self.assertEqual(link, "https://wa.me/919876543210?text=Hello%20there")

    def test_whatsapp_keeps_existing_country_code(self):
        link = generate_whatsapp_link("+91-98765-43210", "Hi")
        self.assertTrue(link.startswith("https://wa.me/919876543210?"))

    def test_call_link(self):
        self.assertEqual(generate_call_link("9876543210"), "tel:9876543210")

    def test_status_message_uses_shop_name(self):
        profile = get_shop_profile()
        profile.name = "Swetha's Couture"
        profile.save()
        msg = order_status_message("Asha", "ORD-123456", "ready")
        self.assertIn("#ORD-123456", msg)
        self.assertTrue(msg.endswith("Thank you for choosing Swetha's Couture!"))


class CustomerApiTests(TestCase):
    """
    GUARANTEES:
    - Staff can read but not write customers
    - Search matches name or phone
    - Measurements are validated
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.staff = User.objects.create_user(username="tailor", password="pass1234", role="staff")

    def test_manager_creates_customer(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/customers/",
            {"name": "Kavya", "phone": "9000000001", "measurements": {"bust": 34, "waist": "28.5"}},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["measurements"]["waist"], 28.5)

    def test_negative_measurement_rejected(self):
        self.client.force_authenticate(user=self.manager)
        res = self.client.post(
            "/api/customers/", {"name": "Kavya", "measurements": {"bust": -1}}, format="json"
        )
        self.assertEqual(res.status_code, 400)

    def test_staff_cannot_create(self):
        self.client.force_authenticate(user=self.staff)
        res = self.client.post("/api/customers/", {"name": "Kavya"}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_search(self):
        Customer.objects.create(name="Lakshmi", phone="9111111111")
        Customer.objects.create(name="Divya", phone="9222222222")
        self.client.force_authenticate(user=self.staff)

        res = self.client.get("/api/customers/", {"q": "9222"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["name"] for r in res.data["results"]], ["Divya"])

    def test_contact_links(self):
        customer = Customer.objects.create(name="Lakshmi", phone="9111111111")
        self.client.force_authenticate(user=self.staff)
        res = self.client.get(f"/api/customers/{customer.id}/contact-links/", {"message": "Ready"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["call"], "tel:9111111111")
        self.assertIn("wa.me/919111111111", res.data["whatsapp"])
