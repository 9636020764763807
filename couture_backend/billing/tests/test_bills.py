# billing/tests/test_bills.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from billing.models import Bill
from billing.services.bill_service import (
    BillInput,
    create_bill,
    delete_bill,
    record_payment,
    update_bill,
)
from billing.services.exceptions import InvalidBillItems, OverpaymentError
from customers.models import Customer
from shop.services.profile import get_shop_profile

User = get_user_model()


def _input(**overrides) -> BillInput:
    data = {
        "customer_name": "Priya",
        "customer_phone": "9876543210",
        "items": [{"description": "Lehenga stitching", "quantity": 1, "rate": "2000"}],
        "breakdown": {"accessories": "500"},
        "gst_percent": 0,
    }
    data.update(overrides)
    return BillInput(**data)


class BillServiceTests(TestCase):
    """
    GUARANTEES:
    - Totals, balance and status are computed server-side
    - Paid never exceeds total
    - The UPI link and QR follow the outstanding balance
    - Customer total_spent tracks money received
    """

    def setUp(self):
        profile = get_shop_profile()
        profile.upi_id = "couture@upi"
        profile.payment_due_days = 7
        profile.save()

    def test_create(self):
        bill = create_bill(_input(paid_amount="1000"))
        self.assertTrue(bill.bill_id.startswith("BILL"))
        self.assertEqual(bill.subtotal, Decimal("2500.00"))
        self.assertEqual(bill.total_amount, Decimal("2500.00"))
        self.assertEqual(bill.balance, Decimal("1500.00"))
        self.assertEqual(bill.status, "partial")
        self.assertEqual(bill.items.count(), 1)
        self.assertEqual((bill.due_date - bill.date).days, 7)
        self.assertIn("am=1500", bill.upi_link)
        self.assertTrue(bill.qr_code.startswith("data:image/png;base64,"))

        customer = Customer.objects.get(name="Priya")
        self.assertEqual(bill.customer_id, customer.pk)
        self.assertEqual(customer.total_spent, Decimal("1000.00"))

    def test_requires_a_charge(self):
        with self.assertRaises(InvalidBillItems):
            create_bill(_input(items=[], breakdown={}))

    def test_overpayment_rejected(self):
        with self.assertRaises(OverpaymentError):
            create_bill(_input(paid_amount="3000"))
        self.assertEqual(Bill.objects.count(), 0)

    def test_record_payment_to_paid(self):
        bill = create_bill(_input())
        bill = record_payment(bill, "2500")
        self.assertEqual(bill.status, "paid")
        self.assertEqual(bill.balance, Decimal("0.00"))
        self.assertEqual(bill.upi_link, "")

        with self.assertRaises(OverpaymentError):
            record_payment(bill, "1")

        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("2500.00"))

    def test_update_adjusts_customer_spend(self):
        bill = create_bill(_input(paid_amount="2000"))
        update_bill(bill, _input(paid_amount="500", gst_percent=10))
        bill.refresh_from_db()
        self.assertEqual(bill.total_amount, Decimal("2750.00"))
        self.assertEqual(bill.balance, Decimal("2250.00"))
        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("500.00"))

    def test_update_moves_payment_to_new_customer(self):
        bill = create_bill(_input(paid_amount="1000"))
        update_bill(bill, _input(customer_name="Meera", customer_phone="9000011111", paid_amount="1000"))

        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("0.00"))
        self.assertEqual(Customer.objects.get(name="Meera").total_spent, Decimal("1000.00"))

    def test_delete_takes_payment_back(self):
        bill = create_bill(_input(paid_amount="1000"))
        delete_bill(bill)
        self.assertFalse(Bill.objects.exists())
        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("0.00"))

    def test_no_upi_without_id(self):
        profile = get_shop_profile()
        profile.upi_id = ""
        profile.save()
        bill = create_bill(_input())
        self.assertEqual(bill.upi_link, "")
        self.assertEqual(bill.qr_code, "")


class BillApiTests(TestCase):
    """
    GUARANTEES:
    - Managers bill; staff cannot see billing
    - PDF downloads as <bill_id>.pdf
    - Summary and preview endpoints report money as strings
    """

    def setUp(self):
        self.client = APIClient()
        self.manager = User.objects.create_user(username="desk", password="pass1234", role="manager")
        self.tailor = User.objects.create_user(username="tailor", password="pass1234", role="staff")
        self.client.force_authenticate(user=self.manager)

    def _create(self, **overrides):
        payload = {
            "customer_name": "Priya",
            "customer_phone": "9876543210",
            "items": [{"description": "Blouse", "quantity": "2", "rate": "800"}],
            "breakdown": {"fabric": "400"},
            "gst_percent": "5",
            "discount": "10",
            "discount_type": "percentage",
        }
        payload.update(overrides)
        res = self.client.post("/api/billing/bills/", payload, format="json")
        self.assertEqual(res.status_code, 201, res.data)
        return res.data

    def test_create_and_read(self):
        data = self._create()
        self.assertEqual(data["subtotal"], "2000.00")
        self.assertEqual(data["gst_amount"], "100.00")
        self.assertEqual(data["discount_amount"], "200.00")
        self.assertEqual(data["total_amount"], "1900.00")
        self.assertEqual(data["status"], "unpaid")

        res = self.client.get(f"/api/billing/bills/{data['id']}/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["items"]), 1)

    def test_overpaid_create_is_400(self):
        res = self.client.post(
            "/api/billing/bills/",
            {"customer_name": "Priya", "items": [{"description": "Blouse", "rate": "100"}], "paid_amount": "200"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_staff_forbidden(self):
        self.client.force_authenticate(user=self.tailor)
        self.assertEqual(self.client.get("/api/billing/bills/").status_code, 403)

    def test_pdf(self):
        data = self._create()
        res = self.client.get(f"/api/billing/bills/{data['id']}/pdf/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res["Content-Type"], "application/pdf")
        self.assertIn(f'{data["bill_id"]}.pdf', res["Content-Disposition"])
        self.assertTrue(res.content.startswith(b"%PDF"))

    def test_payments(self):
        data = self._create()
        res = self.client.post(f"/api/billing/bills/{data['id']}/payments/", {"amount": "900"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["status"], "partial")
        self.assertEqual(res.data["balance"], "1000.00")

        res = self.client.post(f"/api/billing/bills/{data['id']}/payments/", {"amount": "5000"}, format="json")
        self.assertEqual(res.status_code, 400)

    def test_delete_reverses_customer_spend(self):
        data = self._create(paid_amount="1000")
        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("1000.00"))

        res = self.client.delete(f"/api/billing/bills/{data['id']}/")
        self.assertEqual(res.status_code, 204)
        self.assertEqual(Customer.objects.get(name="Priya").total_spent, Decimal("0.00"))

    def test_whatsapp(self):
        data = self._create()
        res = self.client.get(f"/api/billing/bills/{data['id']}/whatsapp/")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["templates"]["bill_delivery"]["whatsapp"].startswith("https://wa.me/91"))

    def test_summary_and_filters(self):
        first = self._create()
        self._create(customer_name="Meena")
        self.client.post(f"/api/billing/bills/{first['id']}/payments/", {"amount": "1900"}, format="json")

        res = self.client.get("/api/billing/bills/summary/")
        self.assertEqual(res.data["count"], 2)
        self.assertEqual(res.data["total_amount"], "3800.00")
        self.assertEqual(res.data["outstanding"], "1900.00")
        self.assertEqual(res.data["by_status"], {"paid": 1, "partial": 0, "unpaid": 1})

        res = self.client.get("/api/billing/bills/?status=paid")
        self.assertEqual(res.data["count"], 1)
        res = self.client.get("/api/billing/bills/?q=meena")
        self.assertEqual(res.data["count"], 1)

    def test_preview_totals(self):
        res = self.client.post(
            "/api/billing/bills/preview-totals/",
            {"items": [{"description": "Kurti", "rate": "1000"}], "gst_percent": "18", "paid_amount": "500"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["total_amount"], "1180.00")
        self.assertEqual(res.data["balance"], "680.00")
        self.assertEqual(res.data["status"], "partial")
        self.assertEqual(Bill.objects.count(), 0)
