# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS (SHOP JOB ROLES)
# =========================================================
ROLE_ADMIN = "admin"      # shop owner
ROLE_MANAGER = "manager"  # front desk / floor manager
ROLE_STAFF = "staff"      # tailors, cutters, finishers

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_STAFF,
}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views protect capabilities, not raw roles.
CAP_ORDERS_VIEW = "orders.view"
CAP_ORDERS_EDIT = "orders.edit"

CAP_CUSTOMERS_VIEW = "customers.view"
CAP_CUSTOMERS_EDIT = "customers.edit"

CAP_INVENTORY_VIEW = "inventory.view"
CAP_INVENTORY_EDIT = "inventory.edit"
CAP_INVENTORY_ADJUST = "inventory.adjust"  # manual stock corrections

CAP_BILLING_VIEW = "billing.view"
CAP_BILLING_EDIT = "billing.edit"

CAP_EXPENSES_VIEW = "expenses.view"
CAP_EXPENSES_EDIT = "expenses.edit"

CAP_STAFF_VIEW = "staff.view"
CAP_STAFF_MANAGE = "staff.manage"

CAP_APPOINTMENTS_VIEW = "appointments.view"
CAP_APPOINTMENTS_EDIT = "appointments.edit"

CAP_REPORTS_VIEW = "reports.view"
CAP_SHOP_SETTINGS = "shop.settings"
CAP_MEDIA_UPLOAD = "media.upload"

ALL_CAPABILITIES = {
    CAP_ORDERS_VIEW,
    CAP_ORDERS_EDIT,
    CAP_CUSTOMERS_VIEW,
    CAP_CUSTOMERS_EDIT,
    CAP_INVENTORY_VIEW,
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_ADJUST,
    CAP_BILLING_VIEW,
    CAP_BILLING_EDIT,
    CAP_EXPENSES_VIEW,
    CAP_EXPENSES_EDIT,
    CAP_STAFF_VIEW,
    CAP_STAFF_MANAGE,
    CAP_APPOINTMENTS_VIEW,
    CAP_APPOINTMENTS_EDIT,
    CAP_REPORTS_VIEW,
    CAP_SHOP_SETTINGS,
    CAP_MEDIA_UPLOAD,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        CAP_ORDERS_VIEW,
        CAP_ORDERS_EDIT,
        CAP_CUSTOMERS_VIEW,
        CAP_CUSTOMERS_EDIT,
        CAP_INVENTORY_VIEW,
        CAP_INVENTORY_EDIT,
        CAP_INVENTORY_ADJUST,
        CAP_BILLING_VIEW,
        CAP_BILLING_EDIT,
        CAP_EXPENSES_VIEW,
        CAP_EXPENSES_EDIT,
        CAP_STAFF_VIEW,
        CAP_APPOINTMENTS_VIEW,
        CAP_APPOINTMENTS_EDIT,
        CAP_REPORTS_VIEW,
        CAP_MEDIA_UPLOAD,
    },
    ROLE_STAFF: {
        # tailors see the work queue and stock, and can mark progress
        CAP_ORDERS_VIEW,
        CAP_CUSTOMERS_VIEW,
        CAP_INVENTORY_VIEW,
        CAP_APPOINTMENTS_VIEW,
        CAP_MEDIA_UPLOAD,
    },
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    """
    Capabilities granted by the user's role. Superusers get everything.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Subclasses must define allowed_roles.
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return get_user_role(user) in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_SHOP_SETTINGS
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default so a missing declaration never opens an endpoint
            return False
        return user_has_capability(request.user, required)


class HasAnyCapability(BasePermission):
    """
    Require ANY capability from a set.

    Usage:
        required_any_capabilities = {CAP_BILLING_VIEW, CAP_REPORTS_VIEW}
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_any_capabilities", None)
        if not required or not request.user or not request.user.is_authenticated:
            return False
        caps = effective_capabilities_for(request.user)
        return any(cap in caps for cap in set(required))


class ActionCapability(BasePermission):
    """
    Read/write split for viewsets.

    Usage:
        read_capability = CAP_ORDERS_VIEW
        write_capability = CAP_ORDERS_EDIT
        action_capabilities = {"progress": CAP_ORDERS_VIEW}   # optional overrides

    Lookup order: action_capabilities[view.action], then read_capability for
    safe methods, then write_capability.
    """

    def has_permission(self, request, view):
        overrides = getattr(view, "action_capabilities", None) or {}
        action = getattr(view, "action", None)

        if action in overrides:
            required = overrides[action]
        elif request.method in SAFE_METHODS:
            required = getattr(view, "read_capability", None)
        else:
            required = getattr(view, "write_capability", None)

        if not required:
            return False
        return user_has_capability(request.user, required)


# =========================================================
# Role Permissions
# =========================================================
class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}
