# permissions/tests/test_roles.py

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from rest_framework.test import APIRequestFactory

from company.models import Branch, Company
from permissions.roles import (
    ALL_CAPABILITIES,
    CAP_CASH_HISTORY,
    CAP_CASH_MANAGE_BALANCES,
    CAP_CASH_SETTLE,
    CAP_CASH_VERIFY,
    CAP_REPORTS_VIEW_BOOKINGS,
    CAP_REPORTS_VIEW_MANAGEMENT,
    HasCapability,
    HasTenant,
    IsStaff,
    effective_capabilities_for,
    is_company_wide,
)

User = get_user_model()


class _View:
    def __init__(self, capability=None):
        self.required_capability = capability


class CapabilityTests(TestCase):
    """
    Tests for capability-based permissions.

    GUARANTEES:
    - Receptionists read booking reports and settle cash, nothing else
    - Technicians have no report or cash capability
    - Managers and admins hold every capability
    - Views without a required capability deny everyone
    - Anonymous users denied everywhere
    """

    def setUp(self):
        self.factory = APIRequestFactory()
        self.company = Company.objects.create(name="Fixit")
        self.branch = Branch.objects.create(company=self.company, name="Main")

        self.admin = User.objects.create_user(
            email="admin@example.com",
            password="pass",
            role="admin",
            company=self.company,
        )
        self.manager = User.objects.create_user(
            email="manager@example.com",
            password="pass",
            role="manager",
            company=self.company,
            branch=self.branch,
        )
        self.receptionist = User.objects.create_user(
            email="reception@example.com",
            password="pass",
            role="receptionist",
            company=self.company,
            branch=self.branch,
        )
        self.technician = User.objects.create_user(
            email="tech@example.com",
            password="pass",
            role="technician",
            company=self.company,
            branch=self.branch,
        )

    # --------------------------------------------------
    # Helpers
    # --------------------------------------------------

    def _request_for(self, user=None):
        request = self.factory.get("/")
        request.user = user or AnonymousUser()
        return request

    def _allowed(self, user, capability):
        return HasCapability().has_permission(self._request_for(user), _View(capability))

    # --------------------------------------------------
    # Capability map
    # --------------------------------------------------

    def test_receptionist_capabilities(self):
        caps = effective_capabilities_for(None, self.receptionist)

        self.assertEqual(caps, {CAP_REPORTS_VIEW_BOOKINGS, CAP_CASH_SETTLE})

    def test_technician_has_nothing(self):
        self.assertEqual(effective_capabilities_for(None, self.technician), set())

    def test_manager_and_admin_hold_everything(self):
        self.assertEqual(effective_capabilities_for(None, self.manager), ALL_CAPABILITIES)
        self.assertEqual(effective_capabilities_for(None, self.admin), ALL_CAPABILITIES)

    def test_superuser_holds_everything(self):
        root = User.objects.create_superuser(email="root@example.com", password="pass", role="technician")

        self.assertEqual(effective_capabilities_for(None, root), ALL_CAPABILITIES)
        self.assertTrue(is_company_wide(root))

    # --------------------------------------------------
    # HasCapability
    # --------------------------------------------------

    def test_has_capability(self):
        self.assertTrue(self._allowed(self.receptionist, CAP_CASH_SETTLE))
        self.assertFalse(self._allowed(self.receptionist, CAP_CASH_VERIFY))
        self.assertFalse(self._allowed(self.receptionist, CAP_REPORTS_VIEW_MANAGEMENT))
        self.assertFalse(self._allowed(self.receptionist, CAP_CASH_MANAGE_BALANCES))
        self.assertFalse(self._allowed(self.receptionist, CAP_CASH_HISTORY))
        self.assertTrue(self._allowed(self.manager, CAP_CASH_VERIFY))

    def test_missing_capability_denies_everyone(self):
        self.assertFalse(self._allowed(self.admin, None))

    def test_anonymous_denied(self):
        self.assertFalse(self._allowed(None, CAP_REPORTS_VIEW_BOOKINGS))
        self.assertFalse(IsStaff().has_permission(self._request_for(None), _View()))
        self.assertFalse(HasTenant().has_permission(self._request_for(None), _View()))

    # --------------------------------------------------
    # Tenant and scope
    # --------------------------------------------------

    def test_tenant_required(self):
        loner = User.objects.create_user(email="loner@example.com", password="pass", role="admin")

        self.assertTrue(HasTenant().has_permission(self._request_for(self.admin), _View()))
        self.assertFalse(HasTenant().has_permission(self._request_for(loner), _View()))

    def test_company_wide_roles(self):
        self.assertTrue(is_company_wide(self.admin))
        self.assertFalse(is_company_wide(self.manager))
        self.assertFalse(is_company_wide(self.receptionist))

    def test_staff_roles(self):
        for user in (self.admin, self.manager, self.receptionist, self.technician):
            self.assertTrue(IsStaff().has_permission(self._request_for(user), _View()))
