# reports/services/report_service.py

"""
REPORT SERVICE

Responsibilities:
- Query services / payments for a company, optional branch and day window
- Flatten ORM rows into aggregation rows (ServiceRow / PaymentRow)
- Hand them to the pure builders in reports.aggregation

No HTTP here; database errors propagate unchanged.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from django.db.models import Prefetch
from django.utils import timezone

from payments.models import PaymentEntry, PaymentMethod
from reports.aggregation import (
    FaultRef,
    MethodRef,
    PaymentRow,
    ServiceRow,
    build_booking_person_report,
    build_brand_report,
    build_daily_transaction_report,
    build_fault_report,
    build_technician_report,
    day_window,
)
from tickets.models import Service, ServiceFault

logger = logging.getLogger("reports")


def _id(value) -> Optional[str]:
    return str(value) if value is not None else None


def _user_name(user) -> Optional[str]:
    if user is None:
        return None
    return user.name


# =========================================================
# Row loaders
# =========================================================
def service_to_row(service: Service) -> ServiceRow:
    device = service.customer_device
    brand = device.brand if device is not None else None
    model = device.model if device is not None else None
    customer = service.customer

    return ServiceRow(
        id=str(service.id),
        status=service.status,
        created_at=service.created_at,
        estimated_cost=service.estimated_cost,
        actual_cost=service.actual_cost,
        completed_at=service.completed_at,
        ticket_number=service.ticket_number,
        branch_id=_id(service.branch_id),
        created_by_id=_id(service.created_by_id),
        created_by_name=_user_name(service.created_by),
        assigned_to_id=_id(service.assigned_to_id),
        assigned_to_name=_user_name(service.assigned_to),
        customer_name=customer.name if customer else None,
        customer_phone=customer.phone if customer else None,
        has_device=device is not None,
        brand_id=_id(brand.id) if brand else None,
        brand_name=brand.name if brand else None,
        model_name=model.name if model else None,
        device_model=service.device_model or "",
        faults=tuple(
            FaultRef(id=str(link.fault_id), name=link.fault.name)
            for link in service.fault_links.all()
        ),
    )


def load_service_rows(
    *,
    company_id,
    start_date: date,
    end_date: date,
    branch_id=None,
    **extra_filters,
) -> List[ServiceRow]:
    """
    Services created inside [start_date 00:00:00.000, end_date 23:59:59.999].
    """
    start, end = day_window(start_date, end_date, timezone.get_current_timezone())

    qs = Service.objects.filter(
        company_id=company_id,
        created_at__gte=start,
        created_at__lte=end,
        **extra_filters,
    )
    if branch_id:
        qs = qs.filter(branch_id=branch_id)

    qs = (
        qs.select_related(
            "customer",
            "created_by",
            "assigned_to",
            "customer_device__brand",
            "customer_device__model",
        )
        .prefetch_related(
            Prefetch(
                "fault_links",
                queryset=ServiceFault.objects.select_related("fault").order_by("fault__name"),
            )
        )
        .order_by("created_at", "id")
    )

    return [service_to_row(s) for s in qs]


def payment_to_row(payment: PaymentEntry) -> PaymentRow:
    service = payment.service
    return PaymentRow(
        id=str(payment.id),
        amount=payment.amount,
        payment_method_id=str(payment.payment_method_id),
        payment_method_name=payment.payment_method.name,
        payment_date=payment.payment_date,
        notes=payment.notes,
        transaction_id=payment.transaction_id,
        service_id=_id(payment.service_id),
        service_branch_id=_id(service.branch_id) if service else None,
        ticket_number=service.ticket_number if service else None,
        customer_name=service.customer.name if service and service.customer_id else None,
    )


def load_payment_rows(*, company_id, day: date, branch_id=None) -> List[PaymentRow]:
    """
    Payment entries dated inside the day's window, oldest first.

    With branch_id only entries linked to a ticket of that branch are returned.
    """
    start, end = day_window(day, day, timezone.get_current_timezone())

    qs = PaymentEntry.objects.filter(
        company_id=company_id,
        payment_date__gte=start,
        payment_date__lte=end,
    )
    if branch_id:
        qs = qs.filter(service__branch_id=branch_id)

    qs = qs.select_related("payment_method", "service__customer").order_by("payment_date", "id")
    return [payment_to_row(p) for p in qs]


def load_active_methods(*, company_id) -> List[MethodRef]:
    return [
        MethodRef(id=str(method_id), name=name)
        for method_id, name in PaymentMethod.objects.filter(
            company_id=company_id, is_active=True
        )
        .order_by("name", "id")
        .values_list("id", "name")
    ]


# =========================================================
# Reports
# =========================================================
def get_booking_person_report(*, company_id, start_date: date, end_date: date, branch_id=None) -> dict:
    rows = load_service_rows(
        company_id=company_id,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
        created_by__isnull=False,
    )
    return build_booking_person_report(rows)


def get_technician_report(*, company_id, start_date: date, end_date: date, branch_id=None) -> dict:
    rows = load_service_rows(
        company_id=company_id,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
        assigned_to__isnull=False,
    )
    return build_technician_report(rows)


def get_brand_report(*, company_id, start_date: date, end_date: date, branch_id=None) -> dict:
    rows = load_service_rows(
        company_id=company_id,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
        customer_device__isnull=False,
    )
    return build_brand_report(rows)


def get_fault_report(*, company_id, start_date: date, end_date: date, branch_id=None) -> dict:
    rows = load_service_rows(
        company_id=company_id,
        start_date=start_date,
        end_date=end_date,
        branch_id=branch_id,
    )
    return build_fault_report(rows)


def get_daily_transaction_report(*, company_id, day: date, branch_id=None) -> dict:
    payments = load_payment_rows(company_id=company_id, day=day, branch_id=branch_id)
    methods = load_active_methods(company_id=company_id)

    report = build_daily_transaction_report(
        day,
        payments,
        methods,
        branch_id=_id(branch_id) if branch_id else None,
    )
    logger.debug(
        "Daily transaction report built",
        extra={
            "company_id": str(company_id),
            "branch_id": _id(branch_id),
            "date": day.isoformat(),
            "payment_count": report["paymentCount"],
        },
    )
    return report
