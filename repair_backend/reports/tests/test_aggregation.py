# reports/tests/test_aggregation.py

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase

from reports.aggregation import (
    FaultRef,
    MethodRef,
    PaymentRow,
    ServiceRow,
    build_booking_person_report,
    build_brand_report,
    build_cash_settlement,
    build_daily_transaction_report,
    build_fault_report,
    build_technician_report,
    day_window,
    filter_payments_by_branch,
    next_day,
    service_revenue,
)

T0 = datetime(2024, 1, 10, 9, 0, tzinfo=dt_timezone.utc)


def _service(sid, **kwargs):
    kwargs.setdefault("status", "PENDING")
    kwargs.setdefault("created_at", T0)
    return ServiceRow(id=sid, ticket_number=f"T-{sid}", **kwargs)


def _payment(pid, amount, method_id="cash", method_name="Cash", **kwargs):
    return PaymentRow(
        id=pid,
        amount=amount,
        payment_method_id=method_id,
        payment_method_name=method_name,
        payment_date=kwargs.pop("payment_date", T0),
        **kwargs,
    )


class DayWindowTests(SimpleTestCase):
    def test_window_floors_start_and_ceils_end(self):
        start, end = day_window(date(2024, 1, 10), date(2024, 1, 12))

        self.assertEqual(start, datetime(2024, 1, 10, 0, 0, 0, 0))
        self.assertEqual(end, datetime(2024, 1, 12, 23, 59, 59, 999000))

    def test_window_accepts_datetimes_and_keeps_calendar_day(self):
        start, end = day_window(
            datetime(2024, 1, 10, 15, 30),
            datetime(2024, 1, 10, 8, 0),
            dt_timezone.utc,
        )

        self.assertEqual(start, datetime(2024, 1, 10, 0, 0, tzinfo=dt_timezone.utc))
        self.assertEqual(end, datetime(2024, 1, 10, 23, 59, 59, 999000, tzinfo=dt_timezone.utc))

    def test_next_day_crosses_month_end(self):
        self.assertEqual(next_day(date(2024, 1, 31)), date(2024, 2, 1))


class RevenueTests(SimpleTestCase):
    def test_estimated_cost_used_when_actual_missing(self):
        row = _service("1", estimated_cost=Decimal("500"), actual_cost=None)
        self.assertEqual(service_revenue(row), 500.0)

    def test_actual_cost_wins_over_estimate(self):
        row = _service("1", estimated_cost=Decimal("500"), actual_cost=Decimal("700"))
        self.assertEqual(service_revenue(row), 700.0)

    def test_zero_actual_cost_is_kept(self):
        row = _service("1", estimated_cost=Decimal("500"), actual_cost=Decimal("0"))
        self.assertEqual(service_revenue(row), 0.0)

    def test_no_costs_is_zero(self):
        self.assertEqual(service_revenue(_service("1")), 0.0)

    def test_revenue_fallback_flows_into_group_totals(self):
        rows = [
            _service("1", created_by_id="u1", created_by_name="Ana", estimated_cost=Decimal("500")),
            _service(
                "2",
                created_by_id="u2",
                created_by_name="Ben",
                estimated_cost=Decimal("100"),
                actual_cost=Decimal("700"),
            ),
        ]

        report = build_booking_person_report(rows)
        by_user = {s["userId"]: s for s in report["summary"]}

        self.assertEqual(by_user["u1"]["totalRevenue"], 500.0)
        self.assertEqual(by_user["u2"]["totalRevenue"], 700.0)


class BookingPersonReportTests(SimpleTestCase):
    def test_average_per_service(self):
        rows = [
            _service(str(i), created_by_id="u1", created_by_name="Ana", estimated_cost=Decimal(v))
            for i, v in enumerate(["100", "200", "300"])
        ]

        summary = build_booking_person_report(rows)["summary"]

        self.assertEqual(len(summary), 1)
        self.assertEqual(summary[0]["serviceCount"], 3)
        self.assertEqual(summary[0]["totalRevenue"], 600.0)
        self.assertEqual(summary[0]["avgPerService"], 200.0)

    def test_rows_without_booking_person_are_skipped(self):
        rows = [
            _service("1", created_by_id="u1", created_by_name="Ana", estimated_cost=Decimal("100")),
            _service("2", estimated_cost=Decimal("900")),
        ]

        report = build_booking_person_report(rows)

        self.assertEqual([d["id"] for d in report["details"]], ["1"])
        self.assertEqual(report["totals"], {"totalServices": 1, "totalRevenue": 100.0})

    def test_sorted_by_revenue_descending(self):
        rows = [
            _service("1", created_by_id="u1", created_by_name="Ana", estimated_cost=Decimal("100")),
            _service("2", created_by_id="u2", created_by_name="Ben", estimated_cost=Decimal("400")),
        ]

        summary = build_booking_person_report(rows)["summary"]

        self.assertEqual([s["userId"] for s in summary], ["u2", "u1"])

    def test_empty_input(self):
        report = build_booking_person_report([])

        self.assertEqual(report["summary"], [])
        self.assertEqual(report["details"], [])
        self.assertEqual(report["totals"], {"totalServices": 0, "totalRevenue": 0.0})


class TechnicianReportTests(SimpleTestCase):
    def test_cancelled_rows_are_neither_completed_nor_pending(self):
        rows = [
            _service("1", assigned_to_id="t1", assigned_to_name="Tech", status="CANCELLED"),
            _service("2", assigned_to_id="t1", assigned_to_name="Tech", status="NOT_SERVICEABLE"),
            _service("3", assigned_to_id="t1", assigned_to_name="Tech", status="IN_PROGRESS"),
            _service("4", assigned_to_id="t1", assigned_to_name="Tech", status="WAITING_PARTS"),
            _service("5", assigned_to_id="t1", assigned_to_name="Tech", status="DELIVERED"),
        ]

        summary = build_technician_report(rows)["summary"][0]

        self.assertEqual(summary["completedCount"], 1)
        self.assertEqual(summary["pendingCount"], 2)

    def test_completion_hours_for_single_completed_row(self):
        rows = [
            _service(
                "1",
                assigned_to_id="t1",
                assigned_to_name="Tech",
                status="COMPLETED",
                completed_at=T0 + timedelta(hours=2),
            ),
        ]

        summary = build_technician_report(rows)["summary"][0]

        self.assertEqual(summary["avgCompletionTimeHours"], 2.0)

    def test_completion_hours_is_none_without_completed_at(self):
        rows = [
            _service("1", assigned_to_id="t1", assigned_to_name="Tech", status="COMPLETED"),
            _service("2", assigned_to_id="t1", assigned_to_name="Tech", status="PENDING"),
        ]

        summary = build_technician_report(rows)["summary"][0]

        self.assertIsNone(summary["avgCompletionTimeHours"])

    def test_revenue_counts_completed_rows_only(self):
        rows = [
            _service("1", assigned_to_id="t1", status="COMPLETED", actual_cost=Decimal("250")),
            _service("2", assigned_to_id="t1", status="PENDING", estimated_cost=Decimal("999")),
        ]

        report = build_technician_report(rows)

        self.assertEqual(report["summary"][0]["totalRevenue"], 250.0)
        self.assertEqual(report["totals"]["totalRevenue"], 250.0)
        self.assertEqual(report["totals"]["totalServices"], 2)

    def test_sort_is_stable_for_equal_revenue(self):
        rows = [
            _service("1", assigned_to_id="a", status="COMPLETED", actual_cost=Decimal("300")),
            _service("2", assigned_to_id="b", status="COMPLETED", actual_cost=Decimal("100")),
            _service("3", assigned_to_id="c", status="COMPLETED", actual_cost=Decimal("300")),
        ]

        summary = build_technician_report(rows)["summary"]

        self.assertEqual([s["technicianId"] for s in summary], ["a", "c", "b"])
        self.assertEqual([s["totalRevenue"] for s in summary], [300.0, 300.0, 100.0])

    def test_totals(self):
        rows = [
            _service("1", assigned_to_id="a", status="COMPLETED", actual_cost=Decimal("300")),
            _service("2", assigned_to_id="b", status="PENDING"),
            _service("3", status="COMPLETED", actual_cost=Decimal("1000")),
        ]

        totals = build_technician_report(rows)["totals"]

        self.assertEqual(
            totals,
            {
                "totalServices": 2,
                "totalCompleted": 1,
                "totalPending": 1,
                "totalRevenue": 300.0,
                "uniqueTechnicians": 2,
            },
        )


class BrandReportTests(SimpleTestCase):
    def test_groups_by_brand_and_skips_missing_device_or_brand(self):
        rows = [
            _service("1", has_device=True, brand_id="b1", brand_name="Acme", estimated_cost=Decimal("10")),
            _service("2", has_device=True, brand_id="b2", brand_name="Zed", estimated_cost=Decimal("20")),
            _service("3", has_device=True, brand_id="b2", brand_name="Zed", estimated_cost=Decimal("30")),
            _service("4", has_device=True, estimated_cost=Decimal("40")),
            _service("5", estimated_cost=Decimal("50")),
        ]

        report = build_brand_report(rows)

        self.assertEqual([s["brandId"] for s in report["summary"]], ["b2", "b1"])
        self.assertEqual(report["summary"][0]["serviceCount"], 2)
        self.assertEqual(report["summary"][0]["totalRevenue"], 50.0)
        self.assertEqual(
            report["totals"],
            {"totalServices": 3, "totalRevenue": 60.0, "uniqueBrands": 2},
        )


class FaultReportTests(SimpleTestCase):
    def test_fan_out_counts_revenue_per_fault_but_once_in_totals(self):
        a = FaultRef(id="fa", name="Screen")
        b = FaultRef(id="fb", name="Battery")
        rows = [
            _service("1", faults=(a, b), actual_cost=Decimal("400")),
            _service("2", estimated_cost=Decimal("999")),
        ]

        report = build_fault_report(rows)
        by_fault = {s["faultId"]: s for s in report["summary"]}

        self.assertEqual(by_fault["fa"]["totalRevenue"], 400.0)
        self.assertEqual(by_fault["fb"]["totalRevenue"], 400.0)
        self.assertEqual(report["totals"]["totalRevenue"], 400.0)
        self.assertEqual(report["totals"]["totalServices"], 1)
        self.assertEqual(report["totals"]["uniqueFaults"], 2)
        self.assertEqual(
            report["details"][0]["faults"],
            [{"id": "fa", "name": "Screen"}, {"id": "fb", "name": "Battery"}],
        )

    def test_sorted_by_service_count(self):
        a = FaultRef(id="fa", name="Screen")
        b = FaultRef(id="fb", name="Battery")
        rows = [
            _service("1", faults=(a,)),
            _service("2", faults=(b,)),
            _service("3", faults=(b,)),
        ]

        summary = build_fault_report(rows)["summary"]

        self.assertEqual([s["faultId"] for s in summary], ["fb", "fa"])


class DailyTransactionReportTests(SimpleTestCase):
    def setUp(self):
        self.methods = [MethodRef(id="cash", name="Cash"), MethodRef(id="card", name="Card")]

    def test_groups_active_methods_and_totals_everything(self):
        payments = [
            _payment("p1", Decimal("100"), service_id="s1", service_branch_id="b1"),
            _payment("p2", Decimal("50"), service_id="s1", service_branch_id="b1"),
            _payment("p3", Decimal("75"), method_id="old", method_name="Old", service_branch_id="b1"),
        ]

        report = build_daily_transaction_report(date(2024, 1, 10), payments, self.methods)

        self.assertEqual(report["date"], "2024-01-10")
        self.assertEqual(report["byMethod"], [{"methodId": "cash", "methodName": "Cash", "amount": 150.0, "count": 2}])
        self.assertEqual(report["totalAmount"], 225.0)
        self.assertEqual(report["paymentCount"], 3)
        self.assertEqual(len(report["transactions"]), 3)

    def test_unlinked_payments_only_count_company_wide(self):
        payments = [
            _payment("p1", Decimal("100"), service_id="s1", service_branch_id="b1"),
            _payment("p2", Decimal("40")),
        ]

        company_wide = build_daily_transaction_report(date(2024, 1, 10), payments, self.methods)
        branch_only = build_daily_transaction_report(
            date(2024, 1, 10), payments, self.methods, branch_id="b1"
        )

        self.assertEqual(company_wide["paymentCount"], 2)
        self.assertEqual(company_wide["totalAmount"], 140.0)
        self.assertEqual(branch_only["paymentCount"], 1)
        self.assertEqual([t["id"] for t in branch_only["transactions"]], ["p1"])

    def test_transaction_detail_shape(self):
        payments = [
            _payment(
                "p1",
                Decimal("12.50"),
                notes="deposit",
                transaction_id="TX1",
                service_id="s1",
                service_branch_id="b1",
                ticket_number="T-1",
                customer_name="Cara",
            )
        ]

        detail = build_daily_transaction_report(date(2024, 1, 10), payments, self.methods)["transactions"][0]

        self.assertEqual(
            detail,
            {
                "id": "p1",
                "amount": 12.5,
                "paymentMethodId": "cash",
                "paymentMethodName": "Cash",
                "paymentDate": T0.isoformat(),
                "notes": "deposit",
                "transactionId": "TX1",
                "serviceId": "s1",
                "ticketNumber": "T-1",
                "customerName": "Cara",
            },
        )


class CashSettlementBuildTests(SimpleTestCase):
    def test_closing_is_opening_plus_received(self):
        methods = [MethodRef(id="cash", name="Cash"), MethodRef(id="card", name="Card")]
        payments = [
            _payment("p1", Decimal("200"), service_branch_id="b1"),
            _payment("p2", Decimal("50"), service_branch_id="b1"),
            _payment("p3", Decimal("999"), service_branch_id="b2"),
            _payment("p4", Decimal("999")),
        ]

        report = build_cash_settlement(
            date(2024, 1, 10), "b1", "Main", methods, {"cash": Decimal("1000")}, payments
        )

        cash, card = report["byMethod"]
        self.assertEqual(cash["openingBalance"], 1000.0)
        self.assertEqual(cash["receivedAmount"], 250.0)
        self.assertEqual(cash["closingBalance"], 1250.0)
        self.assertEqual(card, {
            "paymentMethodId": "card",
            "paymentMethodName": "Card",
            "openingBalance": 0.0,
            "receivedAmount": 0.0,
            "closingBalance": 0.0,
        })
        self.assertEqual([t["id"] for t in report["transactions"]], ["p1", "p2"])
        self.assertEqual(report["branchName"], "Main")

    def test_inactive_methods_are_not_listed(self):
        methods = [MethodRef(id="cash", name="Cash")]
        payments = [_payment("p1", Decimal("80"), method_id="old", method_name="Old", service_branch_id="b1")]

        report = build_cash_settlement(date(2024, 1, 10), "b1", "Main", methods, {}, payments)

        self.assertEqual([m["paymentMethodId"] for m in report["byMethod"]], ["cash"])
        self.assertEqual(report["byMethod"][0]["receivedAmount"], 0.0)

    def test_filter_payments_by_branch_compares_as_strings(self):
        payments = [_payment("p1", 1, service_branch_id="42"), _payment("p2", 1)]

        self.assertEqual([p.id for p in filter_payments_by_branch(payments, 42)], ["p1"])
        self.assertEqual(len(filter_payments_by_branch(payments, None)), 2)
