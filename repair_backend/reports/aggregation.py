# reports/aggregation.py

"""
PATH: reports/aggregation.py

REPORT AGGREGATION DOMAIN (FRAMEWORK-AGNOSTIC)

Purpose:
- Reduce already-filtered service / payment rows into report payloads:
  {summary, details, totals}
- Build the per-method daily cash settlement for one branch

Rules:
- Revenue of a service = actual_cost when not None, else estimated_cost, else 0
- Rows that cannot be grouped (no booking person, no technician, no brand,
  no faults) are skipped, never raised
- Summaries use a stable sort: equal keys keep first-seen order
- Totals are computed from the rows included in at least one group, so a
  service carrying several faults is counted once
- Money is returned as plain floats (JSON numbers)

No ORM here: the service layer converts querysets into ServiceRow / PaymentRow
before calling these builders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

MS_PER_HOUR = 1000 * 60 * 60

STATUS_COMPLETED = "COMPLETED"
STATUS_DELIVERED = "DELIVERED"
STATUS_CANCELLED = "CANCELLED"
STATUS_NOT_SERVICEABLE = "NOT_SERVICEABLE"

COMPLETED_STATUSES = frozenset({STATUS_COMPLETED, STATUS_DELIVERED})
CLOSED_STATUSES = frozenset(
    {STATUS_COMPLETED, STATUS_DELIVERED, STATUS_CANCELLED, STATUS_NOT_SERVICEABLE}
)

END_OF_DAY = time(23, 59, 59, 999000)


# =========================================================
# Date window helpers
# =========================================================
def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def day_start(value: date | datetime, tz: Optional[tzinfo] = None) -> datetime:
    """00:00:00.000 of the given calendar day."""
    return datetime.combine(_as_date(value), time.min, tzinfo=tz)


def day_end(value: date | datetime, tz: Optional[tzinfo] = None) -> datetime:
    """23:59:59.999 of the given calendar day."""
    return datetime.combine(_as_date(value), END_OF_DAY, tzinfo=tz)


def day_window(
    start: date | datetime,
    end: date | datetime,
    tz: Optional[tzinfo] = None,
) -> Tuple[datetime, datetime]:
    """
    Inclusive window for a date range.

    start is floored to 00:00:00.000 and end is ceiled to 23:59:59.999 of the
    same calendar day; callers filter with >= start and <= end.
    """
    return day_start(start, tz), day_end(end, tz)


def next_day(value: date | datetime) -> date:
    return _as_date(value) + timedelta(days=1)


# =========================================================
# Input rows
# =========================================================
@dataclass(frozen=True)
class FaultRef:
    id: str
    name: str


@dataclass(frozen=True)
class MethodRef:
    """An active payment method (id + display name)."""

    id: str
    name: str


@dataclass(frozen=True)
class ServiceRow:
    """
    One repair ticket, flattened for reporting.

    - has_device: a customer device is linked (brand/model may still be empty)
    - faults: fault tags in display order
    """

    id: str
    status: str
    created_at: datetime
    estimated_cost: Optional[Decimal | float] = None
    actual_cost: Optional[Decimal | float] = None
    completed_at: Optional[datetime] = None
    ticket_number: str = ""
    branch_id: Optional[str] = None
    created_by_id: Optional[str] = None
    created_by_name: Optional[str] = None
    assigned_to_id: Optional[str] = None
    assigned_to_name: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    has_device: bool = False
    brand_id: Optional[str] = None
    brand_name: Optional[str] = None
    model_name: Optional[str] = None
    device_model: str = ""
    faults: Tuple[FaultRef, ...] = ()

    @property
    def revenue(self) -> float:
        return service_revenue(self)

    @property
    def device_label(self) -> str:
        if self.has_device:
            return f"{self.brand_name or ''} {self.model_name or ''}"
        return self.device_model


@dataclass(frozen=True)
class PaymentRow:
    """
    One payment entry, annotated with its method and linked ticket.

    service_branch_id is the only branch information a payment carries; it is
    None for standalone ledger entries.
    """

    id: str
    amount: Decimal | float
    payment_method_id: str
    payment_method_name: str
    payment_date: datetime
    notes: Optional[str] = None
    transaction_id: Optional[str] = None
    service_id: Optional[str] = None
    service_branch_id: Optional[str] = None
    ticket_number: Optional[str] = None
    customer_name: Optional[str] = None


# =========================================================
# Money
# =========================================================
def to_money(value) -> float:
    if value is None:
        return 0.0
    return float(value)


def _money_or_none(value) -> Optional[float]:
    return None if value is None else float(value)


def service_revenue(row: ServiceRow) -> float:
    if row.actual_cost is not None:
        return float(row.actual_cost)
    if row.estimated_cost is not None:
        return float(row.estimated_cost)
    return 0.0


def _sum_revenue(rows: Iterable[ServiceRow]) -> float:
    total = 0.0
    for row in rows:
        total += row.revenue
    return total


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# =========================================================
# Grouping
# =========================================================
@dataclass
class _Group:
    name: str
    rows: List[ServiceRow] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)


GroupKeys = Callable[[ServiceRow], Sequence[Tuple[str, str]]]


def _group_rows(
    rows: Iterable[ServiceRow], keys_for: GroupKeys
) -> Tuple[Dict[str, _Group], List[ServiceRow]]:
    """
    Group rows by the (id, name) keys each row yields.

    A row may yield several keys (fault fan-out) or none (skipped). Returns
    the groups in first-seen order plus the rows that landed in any group.
    """
    groups: Dict[str, _Group] = {}
    included: List[ServiceRow] = []

    for row in rows:
        keys = keys_for(row)
        if not keys:
            continue

        included.append(row)
        for key_id, key_name in keys:
            group = groups.get(key_id)
            if group is None:
                group = groups[key_id] = _Group(name=key_name)
            group.rows.append(row)

    return groups, included


def _sort_desc(summary: List[dict], key: str) -> List[dict]:
    # list.sort is stable, also with reverse=True
    summary.sort(key=lambda item: item[key], reverse=True)
    return summary


def _service_detail(row: ServiceRow) -> dict:
    return {
        "id": row.id,
        "ticketNumber": row.ticket_number,
        "customerName": row.customer_name,
        "customerPhone": row.customer_phone,
        "status": row.status,
        "estimatedCost": _money_or_none(row.estimated_cost),
        "actualCost": _money_or_none(row.actual_cost),
        "createdAt": _iso(row.created_at),
    }


def _elapsed_ms(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() * 1000


# =========================================================
# Service reports
# =========================================================
def build_booking_person_report(rows: Iterable[ServiceRow]) -> dict:
    """Services booked per user, ranked by revenue."""
    groups, included = _group_rows(
        rows,
        lambda r: [(r.created_by_id, r.created_by_name or "")] if r.created_by_id else [],
    )

    summary = []
    for user_id, group in groups.items():
        total = _sum_revenue(group.rows)
        summary.append(
            {
                "userId": user_id,
                "userName": group.name,
                "serviceCount": group.count,
                "totalRevenue": total,
                "avgPerService": total / group.count,
            }
        )

    details = [
        {
            **_service_detail(r),
            "deviceModel": r.device_label,
            "createdById": r.created_by_id,
            "createdByName": r.created_by_name,
        }
        for r in included
    ]

    return {
        "summary": _sort_desc(summary, "totalRevenue"),
        "details": details,
        "totals": {
            "totalServices": len(included),
            "totalRevenue": _sum_revenue(included),
        },
    }


def build_technician_report(rows: Iterable[ServiceRow]) -> dict:
    """
    Technician performance, ranked by revenue.

    - completed: COMPLETED / DELIVERED (revenue counts only these)
    - pending: anything not completed, cancelled or not serviceable
    - avgCompletionTimeHours: completion time summed over completed rows with
      completed_at, divided by the completed count; None when no row has it
    """
    groups, included = _group_rows(
        rows,
        lambda r: [(r.assigned_to_id, r.assigned_to_name or "")] if r.assigned_to_id else [],
    )

    summary = []
    for tech_id, group in groups.items():
        completed = [r for r in group.rows if r.status in COMPLETED_STATUSES]
        pending = [r for r in group.rows if r.status not in CLOSED_STATUSES]

        timed = [r for r in completed if r.completed_at is not None]
        avg_hours = None
        if timed:
            total_ms = sum(_elapsed_ms(r.created_at, r.completed_at) for r in timed)
            avg_hours = total_ms / len(completed) / MS_PER_HOUR

        summary.append(
            {
                "technicianId": tech_id,
                "technicianName": group.name,
                "completedCount": len(completed),
                "pendingCount": len(pending),
                "totalRevenue": _sum_revenue(completed),
                "avgCompletionTimeHours": avg_hours,
            }
        )

    details = [
        {
            **_service_detail(r),
            "deviceModel": r.device_label,
            "completedAt": _iso(r.completed_at),
            "assignedToId": r.assigned_to_id,
            "assignedToName": r.assigned_to_name,
        }
        for r in included
    ]

    total_revenue = 0.0
    for item in summary:
        total_revenue += item["totalRevenue"]

    return {
        "summary": _sort_desc(summary, "totalRevenue"),
        "details": details,
        "totals": {
            "totalServices": len(included),
            "totalCompleted": sum(item["completedCount"] for item in summary),
            "totalPending": sum(item["pendingCount"] for item in summary),
            "totalRevenue": total_revenue,
            "uniqueTechnicians": len(summary),
        },
    }


def build_brand_report(rows: Iterable[ServiceRow]) -> dict:
    """Services per device brand, ranked by service count."""
    groups, included = _group_rows(
        rows,
        lambda r: [(r.brand_id, r.brand_name or "")] if r.has_device and r.brand_id else [],
    )

    summary = [
        {
            "brandId": brand_id,
            "brandName": group.name,
            "serviceCount": group.count,
            "totalRevenue": _sum_revenue(group.rows),
        }
        for brand_id, group in groups.items()
    ]

    details = [
        {
            **_service_detail(r),
            "brandId": r.brand_id,
            "brandName": r.brand_name,
            "modelName": r.model_name,
            "assignedToName": r.assigned_to_name,
        }
        for r in included
    ]

    return {
        "summary": _sort_desc(summary, "serviceCount"),
        "details": details,
        "totals": {
            "totalServices": len(included),
            "totalRevenue": _sum_revenue(included),
            "uniqueBrands": len(summary),
        },
    }


def build_fault_report(rows: Iterable[ServiceRow]) -> dict:
    """
    Services per fault, ranked by service count.

    Each service adds its full revenue to every fault it carries; totals add
    it once.
    """
    groups, included = _group_rows(
        rows,
        lambda r: [(f.id, f.name) for f in r.faults],
    )

    summary = [
        {
            "faultId": fault_id,
            "faultName": group.name,
            "serviceCount": group.count,
            "totalRevenue": _sum_revenue(group.rows),
        }
        for fault_id, group in groups.items()
    ]

    details = [
        {
            **_service_detail(r),
            "deviceModel": r.device_label,
            "faults": [{"id": f.id, "name": f.name} for f in r.faults],
            "assignedToName": r.assigned_to_name,
        }
        for r in included
    ]

    return {
        "summary": _sort_desc(summary, "serviceCount"),
        "details": details,
        "totals": {
            "totalServices": len(included),
            "totalRevenue": _sum_revenue(included),
            "uniqueFaults": len(summary),
        },
    }


# =========================================================
# Payments
# =========================================================
def filter_payments_by_branch(
    payments: Iterable[PaymentRow], branch_id: Optional[str]
) -> List[PaymentRow]:
    """
    Keep payments whose linked ticket belongs to branch_id.

    Without a branch every payment is kept, including standalone entries with
    no ticket; with a branch those standalone entries are dropped.
    """
    if branch_id is None:
        return list(payments)

    key = str(branch_id)
    return [
        p
        for p in payments
        if p.service_branch_id is not None and str(p.service_branch_id) == key
    ]


def transaction_detail(payment: PaymentRow) -> dict:
    return {
        "id": payment.id,
        "amount": to_money(payment.amount),
        "paymentMethodId": payment.payment_method_id,
        "paymentMethodName": payment.payment_method_name,
        "paymentDate": _iso(payment.payment_date),
        "notes": payment.notes,
        "transactionId": payment.transaction_id,
        "serviceId": payment.service_id,
        "ticketNumber": payment.ticket_number or None,
        "customerName": payment.customer_name or None,
    }


def build_daily_transaction_report(
    day: date,
    payments: Iterable[PaymentRow],
    active_methods: Sequence[MethodRef],
    branch_id: Optional[str] = None,
) -> dict:
    """
    All payments of one day grouped by payment method.

    byMethod only lists active methods; totalAmount, paymentCount and the
    transaction list cover every matching payment.
    """
    matching = filter_payments_by_branch(payments, branch_id)
    active_names = {m.id: m.name for m in active_methods}

    by_method: Dict[str, dict] = {}
    total_amount = 0.0

    for p in matching:
        amount = to_money(p.amount)
        total_amount += amount

        if p.payment_method_id not in active_names:
            continue

        entry = by_method.get(p.payment_method_id)
        if entry is None:
            entry = by_method[p.payment_method_id] = {
                "methodId": p.payment_method_id,
                "methodName": active_names[p.payment_method_id],
                "amount": 0.0,
                "count": 0,
            }
        entry["amount"] += amount
        entry["count"] += 1

    return {
        "date": _as_date(day).isoformat(),
        "totalAmount": total_amount,
        "paymentCount": len(matching),
        "byMethod": list(by_method.values()),
        "transactions": [transaction_detail(p) for p in matching],
    }


# =========================================================
# Cash settlement
# =========================================================
def build_cash_settlement(
    day: date,
    branch_id: str,
    branch_name: str,
    active_methods: Sequence[MethodRef],
    opening_balances: Mapping[str, Decimal | float],
    payments: Iterable[PaymentRow],
) -> dict:
    """
    Opening -> received -> closing per active payment method.

    closingBalance is always opening + received; a stored closing amount is
    never consulted. Methods without an opening balance start at 0.
    """
    matching = filter_payments_by_branch(payments, branch_id)

    received: Dict[str, float] = {}
    for p in matching:
        received[p.payment_method_id] = received.get(p.payment_method_id, 0.0) + to_money(p.amount)

    by_method = []
    for method in active_methods:
        opening = to_money(opening_balances.get(method.id))
        amount = received.get(method.id, 0.0)
        by_method.append(
            {
                "paymentMethodId": method.id,
                "paymentMethodName": method.name,
                "openingBalance": opening,
                "receivedAmount": amount,
                "closingBalance": opening + amount,
            }
        )

    return {
        "date": _as_date(day).isoformat(),
        "branchId": str(branch_id),
        "branchName": branch_name,
        "byMethod": by_method,
        "transactions": [transaction_detail(p) for p in matching],
    }
