# permissions/roles.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS (STAFF JOB ROLES)
# =========================================================
ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"  # branch manager
ROLE_TECHNICIAN = "technician"
ROLE_RECEPTIONIST = "receptionist"

STAFF_ROLES = {
    ROLE_SUPER_ADMIN,
    ROLE_ADMIN,
    ROLE_MANAGER,
    ROLE_TECHNICIAN,
    ROLE_RECEPTIONIST,
}

# These roles see every branch of their company; everyone else is pinned
# to request.user.branch when they have one.
COMPANY_WIDE_ROLES = {ROLE_SUPER_ADMIN, ROLE_ADMIN}


# =========================================================
# CAPABILITIES (THE REAL PERMISSION LANGUAGE)
# =========================================================
# Views should protect capabilities, not raw roles.
CAP_REPORTS_VIEW_BOOKINGS = "reports.view_bookings"      # booking-person, daily transactions, cash settlement
CAP_REPORTS_VIEW_MANAGEMENT = "reports.view_management"  # technician, brand, fault

CAP_CASH_MANAGE_BALANCES = "cash.manage_balances"  # opening balance, closing + carry-forward
CAP_CASH_SETTLE = "cash.settle"                    # create/count/submit a settlement
CAP_CASH_VERIFY = "cash.verify"                    # verify/reject a submitted settlement
CAP_CASH_HISTORY = "cash.history"                  # settlement history list

ALL_CAPABILITIES = {
    CAP_REPORTS_VIEW_BOOKINGS,
    CAP_REPORTS_VIEW_MANAGEMENT,
    CAP_CASH_MANAGE_BALANCES,
    CAP_CASH_SETTLE,
    CAP_CASH_VERIFY,
    CAP_CASH_HISTORY,
}


# =========================================================
# ROLE → CAPABILITY MAP (DEFAULT)
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_SUPER_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MANAGER: {
        *ALL_CAPABILITIES,
    },
    ROLE_RECEPTIONIST: {
        CAP_REPORTS_VIEW_BOOKINGS,
        CAP_CASH_SETTLE,
    },
    ROLE_TECHNICIAN: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> str | None:
    return getattr(user, "role", None)


def effective_capabilities_for(request, user) -> set[str]:
    """
    Capabilities granted by the user's role.

    Django superusers are treated as super admins.
    """
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)

    role = get_user_role(user)
    return set(ROLE_CAPABILITIES.get(role, set()))


def is_company_wide(user) -> bool:
    return getattr(user, "is_superuser", False) or get_user_role(user) in COMPANY_WIDE_ROLES


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


# =========================================================
# Capability Permissions
# =========================================================
class HasCapability(BasePermission):
    """
    Require a specific capability.

    Usage:
        permission_classes = [IsAuthenticated, HasCapability]
        view.required_capability = CAP_CASH_VERIFY
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = getattr(view, "required_capability", None)
        if not required:
            # deny-by-default to avoid accidental open endpoints
            return False

        caps = effective_capabilities_for(request, user)
        return required in caps


class HasTenant(BasePermission):
    """
    Every report/settlement endpoint is tenant-scoped: the caller must belong
    to a company.
    """

    message = "User is not assigned to a company."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return getattr(user, "company_id", None) is not None


# =========================================================
# Role Permissions
# =========================================================
class IsStaff(BaseRolePermission):
    allowed_roles = STAFF_ROLES
