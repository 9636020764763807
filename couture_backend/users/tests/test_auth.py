# users/tests/test_auth.py

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

User = get_user_model()


class UserManagerTests(TestCase):
    """
    GUARANTEES:
    - Users can be created from email, username, or both
    - Username is derived (and kept unique) when missing
    """

    def test_create_with_username_only(self):
        user = User.objects.create_user(username="tailor", password="pass1234")
        self.assertEqual(user.email, "tailor@local.test")
        self.assertEqual(user.role, User.ROLE_STAFF)

    def test_username_derived_from_email(self):
        User.objects.create_user(email="asha@shop.in", password="pass1234")
        second = User.objects.create_user(email="asha@other.in", password="pass1234")
        self.assertEqual(second.username, "asha2")

    def test_requires_identifier(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(password="pass1234")


class AuthApiTests(TestCase):
    """
    GUARANTEES:
    - Login accepts email OR username (not both) and returns JWTs
    - Only admins can register accounts
    - /me exposes role capabilities
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="owner@shop.in", username="owner", password="pass1234", role="admin"
        )

    def test_login_with_username(self):
        res = self.client.post(
            "/api/auth/login/", {"username": "owner", "password": "pass1234"}, format="json"
        )
        self.assertEqual(res.status_code, 200)
        self.assertIn("access", res.data)

    def test_login_with_email(self):
        res = self.client.post(
            "/api/auth/login/", {"email": "owner@shop.in", "password": "pass1234"}, format="json"
        )
        self.assertEqual(res.status_code, 200)

    def test_login_rejects_both_identifiers(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "owner@shop.in", "username": "owner", "password": "pass1234"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)

    def test_login_bad_password(self):
        res = self.client.post(
            "/api/auth/login/", {"username": "owner", "password": "nope"}, format="json"
        )
        self.assertEqual(res.status_code, 401)

    def test_register_requires_admin(self):
        staff = User.objects.create_user(username="cutter", password="pass1234", role="staff")
        self.client.force_authenticate(user=staff)
        res = self.client.post(
            "/api/auth/register/",
            {"username": "newbie", "password": "Str0ng-Passw0rd!"},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_admin_registers_staff(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.post(
            "/api/auth/register/",
            {"username": "newbie", "password": "Str0ng-Passw0rd!", "role": "manager"},
            format="json",
        )
        self.assertEqual(res.status_code, 201)
        self.assertEqual(User.objects.get(username="newbie").role, "manager")

    def test_me_lists_capabilities(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.get("/api/auth/me/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("shop.settings", res.data["capabilities"])

    def test_change_own_password(self):
        self.client.force_authenticate(user=self.admin)
        wrong = self.client.post(
            "/api/auth/me/password/",
            {"current_password": "nope", "new_password": "Str0ng-Passw0rd!"},
            format="json",
        )
        self.assertEqual(wrong.status_code, 400)

        res = self.client.post(
            "/api/auth/me/password/",
            {"current_password": "pass1234", "new_password": "Str0ng-Passw0rd!"},
            format="json",
        )
        self.assertEqual(res.status_code, 204)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.check_password("Str0ng-Passw0rd!"))
