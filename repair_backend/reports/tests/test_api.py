# reports/tests/test_api.py

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from reports.models import DailyOpeningBalance
from reports.tests.factories import (
    aware,
    make_branch,
    make_company,
    make_method,
    make_payment,
    make_service,
    make_user,
)


class ReportApiTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.company = make_company()
        self.main = make_branch(self.company, "Main", code="MAIN")
        self.east = make_branch(self.company, "East", code="EAST")

        self.admin = make_user(self.company, role="admin")
        self.manager = make_user(self.company, role="manager", branch=self.main)
        self.receptionist = make_user(self.company, role="receptionist", branch=self.main, first_name="Rita")
        self.technician = make_user(self.company, role="technician", branch=self.main)

        self.cash = make_method(self.company, "Cash")

        self.main_service = make_service(
            self.company,
            self.main,
            created_at=aware(2024, 1, 10, 9),
            created_by=self.receptionist,
            estimated_cost=Decimal("100"),
        )
        self.east_service = make_service(
            self.company,
            self.east,
            created_at=aware(2024, 1, 10, 10),
            created_by=self.receptionist,
            estimated_cost=Decimal("300"),
        )

    # -----------------------------
    # Helpers
    # -----------------------------
    def _as(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    def _range(self, **extra):
        params = {"startDate": "2024-01-10", "endDate": "2024-01-10"}
        params.update(extra)
        return params


class ServiceReportApiTests(ReportApiTestBase):
    """
    GUARANTEES
    - Range reports require startDate/endDate with endDate >= startDate
    - Capabilities gate each report
    - Branch-bound roles are pinned to their own branch
    """

    def test_admin_sees_company_wide_booking_report(self):
        res = self._as(self.admin).get(reverse("reports:booking-person"), self._range())

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["totals"], {"totalServices": 2, "totalRevenue": 400.0})
        self.assertEqual(res.data["summary"][0]["userName"], "Rita")

    def test_admin_may_filter_by_branch(self):
        res = self._as(self.admin).get(
            reverse("reports:booking-person"), self._range(branchId=str(self.east.id))
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["totals"]["totalRevenue"], 300.0)

    def test_branch_bound_user_is_pinned_to_own_branch(self):
        res = self._as(self.receptionist).get(
            reverse("reports:booking-person"), self._range(branchId=str(self.east.id))
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["totals"]["totalRevenue"], 100.0)

    def test_missing_dates_are_rejected(self):
        res = self._as(self.admin).get(reverse("reports:booking-person"), {"startDate": "2024-01-10"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("endDate", res.data)

    def test_inverted_range_is_rejected(self):
        res = self._as(self.admin).get(
            reverse("reports:technician"),
            {"startDate": "2024-01-11", "endDate": "2024-01-10"},
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_management_reports_need_management_capability(self):
        client = self._as(self.receptionist)

        for name in ("reports:technician", "reports:brand", "reports:fault"):
            res = client.get(reverse(name), self._range())
            self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN, name)

    def test_manager_reads_management_reports(self):
        client = self._as(self.manager)

        for name in ("reports:technician", "reports:brand", "reports:fault"):
            res = client.get(reverse(name), self._range())
            self.assertEqual(res.status_code, status.HTTP_200_OK, name)
            self.assertEqual(set(res.data), {"summary", "details", "totals"})

    def test_technician_has_no_report_access(self):
        res = self._as(self.technician).get(reverse("reports:booking-person"), self._range())

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_rejected(self):
        res = self.client.get(reverse("reports:booking-person"), self._range())

        self.assertIn(res.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))

    def test_user_without_company_is_rejected(self):
        loner = make_user(None, role="admin")

        res = self._as(loner).get(reverse("reports:booking-person"), self._range())

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)


class DailyReportApiTests(ReportApiTestBase):
    def setUp(self):
        super().setUp()
        make_payment(self.company, self.cash, 120, payment_date=aware(2024, 1, 10, 9), service=self.main_service)
        make_payment(self.company, self.cash, 80, payment_date=aware(2024, 1, 10, 11), service=self.east_service)
        make_payment(self.company, self.cash, 5, payment_date=aware(2024, 1, 10, 12))

    def test_daily_transactions_company_wide(self):
        res = self._as(self.admin).get(reverse("reports:daily-transaction"), {"date": "2024-01-10"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["paymentCount"], 3)
        self.assertEqual(res.data["totalAmount"], 205.0)

    def test_daily_transactions_pinned_branch(self):
        res = self._as(self.receptionist).get(reverse("reports:daily-transaction"), {"date": "2024-01-10"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["paymentCount"], 1)
        self.assertEqual(res.data["totalAmount"], 120.0)

    def test_bad_date_is_rejected(self):
        res = self._as(self.admin).get(reverse("reports:daily-transaction"), {"date": "10/01/2024"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cash_settlement_requires_branch(self):
        res = self._as(self.admin).get(reverse("reports:cash-settlement"), {"date": "2024-01-10"})

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["detail"], "branchId is required.")

    def test_cash_settlement_unknown_branch(self):
        res = self._as(self.admin).get(
            reverse("reports:cash-settlement"),
            {"date": "2024-01-10", "branchId": str(uuid.uuid4())},
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_cash_settlement_for_pinned_branch(self):
        res = self._as(self.receptionist).get(reverse("reports:cash-settlement"), {"date": "2024-01-10"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["branchId"], str(self.main.id))
        self.assertEqual(
            res.data["byMethod"],
            [
                {
                    "paymentMethodId": str(self.cash.id),
                    "paymentMethodName": "Cash",
                    "openingBalance": 0.0,
                    "receivedAmount": 120.0,
                    "closingBalance": 120.0,
                }
            ],
        )


class BalanceApiTests(ReportApiTestBase):
    def test_opening_balance_upsert(self):
        client = self._as(self.manager)
        payload = {
            "date": "2024-01-10",
            "paymentMethodId": str(self.cash.id),
            "openingAmount": "500.00",
        }

        first = client.post(reverse("reports:opening-balance"), payload, format="json")
        payload["openingAmount"] = "650.00"
        second = client.post(reverse("reports:opening-balance"), payload, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(second.data["openingAmount"], 650.0)
        self.assertEqual(second.data["closingAmount"], 0.0)
        self.assertEqual(second.data["branchId"], str(self.main.id))

    def test_closing_balance_carries_forward(self):
        res = self._as(self.manager).post(
            reverse("reports:closing-balance"),
            {"date": "2024-01-10", "paymentMethodId": str(self.cash.id), "closingAmount": "1500"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["date"], "2024-01-11")
        self.assertEqual(res.data["openingAmount"], 1500.0)
        self.assertTrue(
            DailyOpeningBalance.objects.filter(date=date(2024, 1, 10), closing_amount=Decimal("1500")).exists()
        )

    def test_balance_writes_need_capability(self):
        res = self._as(self.receptionist).post(
            reverse("reports:opening-balance"),
            {"date": "2024-01-10", "paymentMethodId": str(self.cash.id), "openingAmount": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_must_name_a_branch(self):
        res = self._as(self.admin).post(
            reverse("reports:opening-balance"),
            {"date": "2024-01-10", "paymentMethodId": str(self.cash.id), "openingAmount": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_foreign_payment_method_is_not_found(self):
        foreign = make_method(make_company("Other"), "Cash")

        res = self._as(self.manager).post(
            reverse("reports:opening-balance"),
            {"date": "2024-01-10", "paymentMethodId": str(foreign.id), "openingAmount": "1"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_missing_amount_is_rejected(self):
        res = self._as(self.manager).post(
            reverse("reports:closing-balance"),
            {"date": "2024-01-10", "paymentMethodId": str(self.cash.id)},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("closingAmount", res.data)
