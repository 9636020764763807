# users/tests/test_roles.py

from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from permissions.roles import (
    CAP_BILLING_EDIT,
    CAP_ORDERS_EDIT,
    CAP_ORDERS_VIEW,
    CAP_SHOP_SETTINGS,
    ActionCapability,
    HasCapability,
    effective_capabilities_for,
)

User = get_user_model()


class CapabilityMapTests(TestCase):
    """
    GUARANTEES:
    - Admin holds every capability
    - Staff can view orders but not edit billing
    - Views without a declared capability deny by default
    """

    def setUp(self):
        self.factory = RequestFactory()
        self.staff = User.objects.create_user(username="stitch", password="x1234567", role="staff")
        self.manager = User.objects.create_user(username="desk", password="x1234567", role="manager")

    def _request(self, method, user):
        request = getattr(self.factory, method)("/")
        request.user = user
        return request

    def test_staff_capabilities(self):
        caps = effective_capabilities_for(self.staff)
        self.assertIn(CAP_ORDERS_VIEW, caps)
        self.assertNotIn(CAP_BILLING_EDIT, caps)

    def test_manager_cannot_edit_shop_settings(self):
        self.assertNotIn(CAP_SHOP_SETTINGS, effective_capabilities_for(self.manager))

    def test_has_capability_denies_without_declaration(self):
        view = SimpleNamespace()
        self.assertFalse(HasCapability().has_permission(self._request("get", self.manager), view))

    def test_action_capability_read_write_split(self):
        view = SimpleNamespace(
            action="create",
            read_capability=CAP_ORDERS_VIEW,
            write_capability=CAP_ORDERS_EDIT,
        )
        perm = ActionCapability()
        self.assertFalse(perm.has_permission(self._request("post", self.staff), view))
        self.assertTrue(perm.has_permission(self._request("post", self.manager), view))

        view.action = "list"
        self.assertTrue(perm.has_permission(self._request("get", self.staff), view))

    def test_action_override(self):
        view = SimpleNamespace(
            action="progress",
            read_capability=CAP_ORDERS_VIEW,
            write_capability=CAP_ORDERS_EDIT,
            action_capabilities={"progress": CAP_ORDERS_VIEW},
        )
        self.assertTrue(ActionCapability().has_permission(self._request("post", self.staff), view))
