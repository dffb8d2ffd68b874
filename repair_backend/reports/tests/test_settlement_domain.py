# reports/tests/test_settlement_domain.py

from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from reports.aggregation import MethodRef
from reports.settlement import (
    DenominationCounts,
    SettlementError,
    build_method_totals,
    build_settlement_number,
    cash_difference,
    to_decimal,
)


class SettlementNumberTests(SimpleTestCase):
    def test_uses_branch_code_and_date(self):
        self.assertEqual(build_settlement_number("MAIN", date(2024, 3, 5)), "SET-MAIN-20240305")

    def test_falls_back_when_branch_has_no_code(self):
        self.assertEqual(build_settlement_number(None, date(2024, 3, 5)), "SET-XX-20240305")
        self.assertEqual(build_settlement_number("  ", date(2024, 3, 5)), "SET-XX-20240305")


class DenominationCountsTests(SimpleTestCase):
    def test_total_multiplies_face_values(self):
        counts = DenominationCounts.from_raw(
            {"note_2000_count": 1, "note_500_count": 2, "note_10_count": 3, "coin_1_count": 4}
        )

        self.assertEqual(counts.total(), Decimal("3034.00"))

    def test_missing_keys_default_to_zero(self):
        counts = DenominationCounts.from_raw({})

        self.assertEqual(counts.total(), Decimal("0.00"))
        self.assertEqual(set(counts.as_dict().values()), {0})
        self.assertEqual(len(counts.as_dict()), 10)

    def test_rejects_negative_counts(self):
        with self.assertRaises(SettlementError):
            DenominationCounts.from_raw({"note_100_count": -1})

    def test_rejects_non_integer_counts(self):
        with self.assertRaises(SettlementError):
            DenominationCounts.from_raw({"note_100_count": "3"})
        with self.assertRaises(SettlementError):
            DenominationCounts.from_raw({"note_100_count": True})

    def test_rejects_non_mapping_payload(self):
        with self.assertRaises(SettlementError):
            DenominationCounts.from_raw([1, 2, 3])


class MethodTotalsTests(SimpleTestCase):
    def setUp(self):
        self.methods = [MethodRef(id="cash", name="Cash"), MethodRef(id="card", name="Card")]

    def test_closing_balance_per_method(self):
        totals = build_method_totals(
            self.methods,
            {"cash": Decimal("100")},
            collected=[("cash", Decimal("500")), ("cash", Decimal("250")), ("card", "80.50")],
            refunds=[("cash", Decimal("50"))],
            expenses=[("cash", Decimal("20"))],
        )

        cash, card = totals.methods
        self.assertEqual(cash.opening_balance, Decimal("100.00"))
        self.assertEqual(cash.collected_amount, Decimal("750.00"))
        self.assertEqual(cash.transaction_count, 2)
        self.assertEqual(cash.closing_balance, Decimal("780.00"))
        self.assertEqual(card.opening_balance, Decimal("0.00"))
        self.assertEqual(card.closing_balance, Decimal("80.50"))

    def test_net_cash_excludes_opening(self):
        totals = build_method_totals(
            self.methods,
            {"cash": Decimal("1000")},
            collected=[("cash", 300), ("card", 200)],
            refunds=[("card", 50)],
            expenses=[("cash", 25)],
        )

        self.assertEqual(totals.total_collected, Decimal("500.00"))
        self.assertEqual(totals.total_refunds, Decimal("50.00"))
        self.assertEqual(totals.total_expenses, Decimal("25.00"))
        self.assertEqual(totals.net_cash_amount, Decimal("425.00"))

    def test_inactive_method_entries_are_ignored(self):
        totals = build_method_totals(
            self.methods,
            {},
            collected=[("retired", 999), ("cash", 10)],
        )

        self.assertEqual([m.payment_method_id for m in totals.methods], ["cash", "card"])
        self.assertEqual(totals.total_collected, Decimal("10.00"))


class CashDifferenceTests(SimpleTestCase):
    def test_short_and_over(self):
        self.assertEqual(cash_difference(Decimal("90"), Decimal("100")), Decimal("-10.00"))
        self.assertEqual(cash_difference(Decimal("105.5"), Decimal("100")), Decimal("5.50"))

    def test_to_decimal_rejects_garbage(self):
        with self.assertRaises(SettlementError):
            to_decimal("abc")
        self.assertEqual(to_decimal(None), Decimal("0.00"))
