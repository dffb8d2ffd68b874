# reports/services/cash_settlement_service.py

"""
CASH SETTLEMENT SERVICE (DAILY BALANCES)

Responsibilities:
- Daily cash settlement: opening -> received -> closing per active method
- Explicit opening balance writes (upsert)
- Closing balance write + carry-forward into the next day's opening balance

Notes:
- closing in the settlement report is computed from transactions; the stored
  DailyOpeningBalance.closing_amount is a separate manual field and is not read
- carry-forward is last-write-wins: it overwrites whatever opening balance the
  next day already had
- amounts are not range-checked; negative balances are accepted
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from django.db import transaction

from company.models import Branch
from payments.models import PaymentMethod
from reports.aggregation import build_cash_settlement, next_day
from reports.models import DailyOpeningBalance
from reports.services.exceptions import BranchNotFoundError, PaymentMethodNotFoundError
from reports.services.report_service import load_active_methods, load_payment_rows

logger = logging.getLogger("cash_settlement")

ZERO = Decimal("0.00")


def get_branch(*, company_id, branch_id) -> Branch:
    branch = Branch.objects.filter(id=branch_id, company_id=company_id).first()
    if branch is None:
        logger.warning(
            "Branch not found",
            extra={"company_id": str(company_id), "branch_id": str(branch_id)},
        )
        raise BranchNotFoundError("Branch not found")
    return branch


def _get_payment_method(*, company_id, payment_method_id) -> PaymentMethod:
    method = PaymentMethod.objects.filter(id=payment_method_id, company_id=company_id).first()
    if method is None:
        logger.warning(
            "Payment method not found",
            extra={"company_id": str(company_id), "payment_method_id": str(payment_method_id)},
        )
        raise PaymentMethodNotFoundError("Payment method not found")
    return method


def load_opening_balances(*, company_id, branch_id, day: date) -> dict:
    """{payment_method_id (str): opening_amount} for one branch and day."""
    rows = DailyOpeningBalance.objects.filter(
        company_id=company_id,
        branch_id=branch_id,
        date=day,
    ).values_list("payment_method_id", "opening_amount")
    return {str(method_id): amount for method_id, amount in rows}


def get_daily_cash_settlement(*, company_id, branch_id, day: date) -> dict:
    branch = get_branch(company_id=company_id, branch_id=branch_id)

    methods = load_active_methods(company_id=company_id)
    openings = load_opening_balances(company_id=company_id, branch_id=branch.id, day=day)
    payments = load_payment_rows(company_id=company_id, day=day, branch_id=branch.id)

    return build_cash_settlement(
        day,
        str(branch.id),
        branch.name,
        methods,
        openings,
        payments,
    )


def set_opening_balance(
    *,
    company_id,
    branch_id,
    day: date,
    payment_method_id,
    amount: Decimal,
) -> DailyOpeningBalance:
    """
    Upsert the opening amount for (day, method, branch).

    A new row starts with closing_amount = 0.
    """
    branch = get_branch(company_id=company_id, branch_id=branch_id)
    method = _get_payment_method(company_id=company_id, payment_method_id=payment_method_id)

    balance, created = DailyOpeningBalance.objects.update_or_create(
        date=day,
        payment_method=method,
        branch=branch,
        defaults={"opening_amount": amount},
        create_defaults={
            "company_id": company_id,
            "opening_amount": amount,
            "closing_amount": ZERO,
        },
    )

    logger.info(
        "Opening balance set",
        extra={
            "company_id": str(company_id),
            "branch_id": str(branch.id),
            "payment_method_id": str(method.id),
            "date": day.isoformat(),
            "amount": str(amount),
            "was_created": created,
        },
    )
    return balance


@transaction.atomic
def set_closing_balance_and_carry_forward(
    *,
    company_id,
    branch_id,
    day: date,
    payment_method_id,
    amount: Decimal,
) -> DailyOpeningBalance:
    """
    Store today's closing amount, then copy it into tomorrow's opening amount.

    Both upserts share one transaction. Returns tomorrow's row.
    """
    branch = get_branch(company_id=company_id, branch_id=branch_id)
    method = _get_payment_method(company_id=company_id, payment_method_id=payment_method_id)

    DailyOpeningBalance.objects.update_or_create(
        date=day,
        payment_method=method,
        branch=branch,
        defaults={"closing_amount": amount},
        create_defaults={
            "company_id": company_id,
            "opening_amount": ZERO,
            "closing_amount": amount,
        },
    )

    tomorrow = next_day(day)
    carried, _ = DailyOpeningBalance.objects.update_or_create(
        date=tomorrow,
        payment_method=method,
        branch=branch,
        defaults={"opening_amount": amount},
        create_defaults={
            "company_id": company_id,
            "opening_amount": amount,
            "closing_amount": ZERO,
        },
    )

    logger.info(
        "Closing balance carried forward",
        extra={
            "company_id": str(company_id),
            "branch_id": str(branch.id),
            "payment_method_id": str(method.id),
            "date": day.isoformat(),
            "next_date": tomorrow.isoformat(),
            "amount": str(amount),
        },
    )
    return carried
