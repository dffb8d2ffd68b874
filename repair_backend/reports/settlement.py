# reports/settlement.py

"""
PATH: reports/settlement.py

CASH SETTLEMENT WORKFLOW DOMAIN (FRAMEWORK-AGNOSTIC)

Used by:
- serializers (denomination payload validation)
- settlement workflow service (totals, numbering, physical count)

Rules:
- Per active method: closing = opening + collected - refunded - expense
- Net cash for the day = collected - refunds - expenses (opening excluded)
- Physical cash = sum(count * face value) over notes and coins
- cash difference = physical - net (negative means cash is short)
- Settlement number: "SET-<branch code or XX>-<YYYYMMDD>"
- Money normalized to 2dp
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from reports.aggregation import MethodRef

MONEY_QUANT = Decimal("0.01")
ZERO = Decimal("0.00")

# (field name, face value), notes first
DENOMINATIONS: Tuple[Tuple[str, int], ...] = (
    ("note_2000_count", 2000),
    ("note_500_count", 500),
    ("note_200_count", 200),
    ("note_100_count", 100),
    ("note_50_count", 50),
    ("note_20_count", 20),
    ("note_10_count", 10),
    ("coin_5_count", 5),
    ("coin_2_count", 2),
    ("coin_1_count", 1),
)


class SettlementError(ValueError):
    """Raised when a settlement payload is invalid."""


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    try:
        d = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError) as e:
        raise SettlementError(f"Invalid amount: {value!r}") from e
    return d.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def build_settlement_number(branch_code: Optional[str], settlement_date: date) -> str:
    code = (branch_code or "").strip() or "XX"
    return f"SET-{code}-{settlement_date:%Y%m%d}"


@dataclass(frozen=True)
class DenominationCounts:
    note_2000_count: int = 0
    note_500_count: int = 0
    note_200_count: int = 0
    note_100_count: int = 0
    note_50_count: int = 0
    note_20_count: int = 0
    note_10_count: int = 0
    coin_5_count: int = 0
    coin_2_count: int = 0
    coin_1_count: int = 0

    @staticmethod
    def from_raw(raw: Mapping) -> "DenominationCounts":
        if not isinstance(raw, Mapping):
            raise SettlementError("Denominations must be an object/dict")

        values = {}
        for name, _face in DENOMINATIONS:
            value = raw.get(name, 0)
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, int):
                raise SettlementError(f"{name} must be a whole number")
            if value < 0:
                raise SettlementError(f"{name} cannot be negative")
            values[name] = value

        return DenominationCounts(**values)

    def total(self) -> Decimal:
        amount = sum(
            (Decimal(getattr(self, name)) * face for name, face in DENOMINATIONS),
            start=Decimal("0"),
        )
        return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class MethodTotals:
    payment_method_id: str
    payment_method_name: str
    opening_balance: Decimal
    collected_amount: Decimal
    refunded_amount: Decimal
    expense_amount: Decimal
    transaction_count: int

    @property
    def closing_balance(self) -> Decimal:
        return (
            self.opening_balance
            + self.collected_amount
            - self.refunded_amount
            - self.expense_amount
        )


@dataclass(frozen=True)
class SettlementTotals:
    methods: Tuple[MethodTotals, ...]

    @property
    def total_collected(self) -> Decimal:
        return sum((m.collected_amount for m in self.methods), start=ZERO)

    @property
    def total_refunds(self) -> Decimal:
        return sum((m.refunded_amount for m in self.methods), start=ZERO)

    @property
    def total_expenses(self) -> Decimal:
        return sum((m.expense_amount for m in self.methods), start=ZERO)

    @property
    def net_cash_amount(self) -> Decimal:
        return self.total_collected - self.total_refunds - self.total_expenses


def _sum_by_method(entries: Iterable[Tuple[str, object]]) -> dict:
    totals: dict = {}
    counts: dict = {}
    for method_id, amount in entries:
        if method_id is None or amount is None:
            continue
        key = str(method_id)
        totals[key] = totals.get(key, ZERO) + to_decimal(amount)
        counts[key] = counts.get(key, 0) + 1
    return {"totals": totals, "counts": counts}


def build_method_totals(
    active_methods: Sequence[MethodRef],
    opening_balances: Mapping[str, object],
    collected: Iterable[Tuple[str, object]],
    refunds: Iterable[Tuple[str, object]] = (),
    expenses: Iterable[Tuple[str, object]] = (),
) -> SettlementTotals:
    """
    Roll the day's money movements up per active payment method.

    collected/refunds/expenses are (payment_method_id, amount) pairs; pairs for
    inactive methods are ignored.
    """
    collected_by = _sum_by_method(collected)
    refunds_by = _sum_by_method(refunds)["totals"]
    expenses_by = _sum_by_method(expenses)["totals"]

    methods = tuple(
        MethodTotals(
            payment_method_id=m.id,
            payment_method_name=m.name,
            opening_balance=to_decimal(opening_balances.get(m.id)),
            collected_amount=collected_by["totals"].get(m.id, ZERO),
            refunded_amount=refunds_by.get(m.id, ZERO),
            expense_amount=expenses_by.get(m.id, ZERO),
            transaction_count=collected_by["counts"].get(m.id, 0),
        )
        for m in active_methods
    )
    return SettlementTotals(methods=methods)


def cash_difference(physical_cash: Decimal, net_cash: Decimal) -> Decimal:
    return to_decimal(physical_cash) - to_decimal(net_cash)
