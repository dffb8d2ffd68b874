# reports/tests/test_settlement_api.py

from __future__ import annotations

from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from reports.models import CashSettlement
from reports.tests.factories import (
    aware,
    make_branch,
    make_company,
    make_method,
    make_payment,
    make_service,
    make_user,
)


class SettlementApiTests(TestCase):
    """
    GUARANTEES
    - Cashiers create, count and submit; managers verify or reject
    - Branch-bound users never see another branch's settlement
    - Invalid transitions answer 400
    """

    def setUp(self):
        self.client = APIClient()

        self.company = make_company()
        self.main = make_branch(self.company, "Main", code="MAIN")
        self.east = make_branch(self.company, "East", code="EAST")

        self.admin = make_user(self.company, role="admin")
        self.manager = make_user(self.company, role="manager", branch=self.main)
        self.cashier = make_user(self.company, role="receptionist", branch=self.main)
        self.east_cashier = make_user(self.company, role="receptionist", branch=self.east)

        self.cash = make_method(self.company, "Cash")
        service = make_service(self.company, self.main, created_at=aware(2024, 1, 10, 8))
        make_payment(self.company, self.cash, 700, payment_date=aware(2024, 1, 10, 9), service=service)

    # -----------------------------
    # Helpers
    # -----------------------------
    def _as(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    def _create(self, user=None, **payload):
        payload.setdefault("date", "2024-01-10")
        return self._as(user or self.cashier).post(
            reverse("cash_settlements:list-create"), payload, format="json"
        )

    def _url(self, name, settlement_id):
        return reverse(f"cash_settlements:{name}", kwargs={"pk": settlement_id})

    # -----------------------------
    # Tests
    # -----------------------------
    def test_cashier_creates_settlement_for_own_branch(self):
        res = self._create(branchId=str(self.east.id))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["settlement_number"], "SET-MAIN-20240110")
        self.assertEqual(str(res.data["branch_id"]), str(self.main.id))
        self.assertEqual(Decimal(res.data["net_cash_amount"]), Decimal("700.00"))
        self.assertEqual(len(res.data["method_breakdowns"]), 1)
        self.assertIsNone(res.data["denominations"])

    def test_admin_must_pick_branch(self):
        res = self._create(user=self.admin)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_full_cycle(self):
        settlement_id = self._create().data["id"]

        counted = self.client.put(
            self._url("denominations", settlement_id),
            {"note_500_count": 1, "note_100_count": 2},
            format="json",
        )
        self.assertEqual(counted.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(counted.data["physical_cash_count"]), Decimal("700.00"))
        self.assertEqual(Decimal(counted.data["cash_difference"]), Decimal("0.00"))

        noted = self.client.put(self._url("notes", settlement_id), {"notes": "All good"}, format="json")
        self.assertEqual(noted.data["notes"], "All good")

        submitted = self.client.post(self._url("submit", settlement_id))
        self.assertEqual(submitted.status_code, status.HTTP_200_OK)
        self.assertEqual(submitted.data["status"], CashSettlement.STATUS_SUBMITTED)

        verified = self._as(self.manager).post(
            self._url("verify", settlement_id), {"notes": "ok"}, format="json"
        )
        self.assertEqual(verified.status_code, status.HTTP_200_OK)
        self.assertEqual(verified.data["status"], CashSettlement.STATUS_VERIFIED)
        self.assertEqual(verified.data["verified_by"]["id"], str(self.manager.id))

    def test_cashier_cannot_verify(self):
        settlement_id = self._create().data["id"]
        self.client.post(self._url("submit", settlement_id))

        res = self.client.post(self._url("verify", settlement_id), {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_reject_requires_reason(self):
        settlement_id = self._create().data["id"]
        self.client.post(self._url("submit", settlement_id))

        res = self._as(self.manager).post(self._url("reject", settlement_id), {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("reason", res.data)

    def test_verify_before_submit_is_rejected(self):
        settlement_id = self._create().data["id"]

        res = self._as(self.manager).post(self._url("verify", settlement_id), {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_negative_denomination_is_rejected(self):
        settlement_id = self._create().data["id"]

        res = self.client.put(
            self._url("denominations", settlement_id), {"note_100_count": -1}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_branch_cannot_read_settlement(self):
        settlement_id = self._create().data["id"]

        res = self._as(self.east_cashier).get(self._url("detail", settlement_id))

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_today_uses_local_date(self):
        with mock.patch(
            "reports.api.settlement_views.timezone.localdate",
            return_value=aware(2024, 1, 10).date(),
        ):
            res = self._as(self.cashier).get(reverse("cash_settlements:today"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["settlement_date"], "2024-01-10")

    def test_history_is_filtered_and_scoped(self):
        self._create()
        self._create(user=self.east_cashier)
        self._create(user=self.admin, branchId=str(self.east.id), date="2024-01-09")

        mine = self._as(self.manager).get(reverse("cash_settlements:list-create"))
        east_only = self._as(self.admin).get(
            reverse("cash_settlements:list-create"), {"branchId": str(self.east.id)}
        )
        ranged = self._as(self.admin).get(
            reverse("cash_settlements:list-create"),
            {"startDate": "2024-01-10", "endDate": "2024-01-10"},
        )

        self.assertEqual(mine.status_code, status.HTTP_200_OK)
        self.assertEqual(mine.data["count"], 1)
        self.assertEqual(east_only.data["count"], 2)
        self.assertEqual(ranged.data["count"], 2)

    def test_cashier_has_no_history_access(self):
        res = self._as(self.cashier).get(reverse("cash_settlements:list-create"))

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
