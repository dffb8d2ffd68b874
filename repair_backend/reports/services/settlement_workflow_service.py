# reports/services/settlement_workflow_service.py

"""
SETTLEMENT WORKFLOW SERVICE

Responsibilities:
- Compute the day's per-method totals (opening, collected, refunded, expenses)
- Create one settlement per (branch, day), recalculated while editable
- Physical cash count (denominations) and notes while PENDING / REJECTED
- Status transitions: submit, verify, reject
- Filtered settlement history

No HTTP, no DRF serializers here.
"""

from __future__ import annotations

import logging
from datetime import date

from django.db import IntegrityError, transaction
from django.utils import timezone

from payments.models import PaymentEntry
from reports.aggregation import day_window
from reports.models import CashDenomination, CashSettlement, CashSettlementMethod
from reports.services.cash_settlement_service import get_branch, load_opening_balances
from reports.services.exceptions import SettlementNotFoundError, SettlementStateError
from reports.services.report_service import load_active_methods
from reports.settlement import (
    DenominationCounts,
    SettlementTotals,
    build_method_totals,
    build_settlement_number,
    cash_difference,
)
from tickets.models import Service

logger = logging.getLogger("cash_settlement")


# =========================================================
# Totals
# =========================================================
def calculate_totals(*, company_id, branch_id, day: date) -> SettlementTotals:
    """
    Per active method:
    - collected: payments on tickets of this branch dated today
    - refunded: ticket refunds of this branch made today, by refund method
    - expense: payments for this branch's expenses dated today
    """
    start, end = day_window(day, day, timezone.get_current_timezone())

    collected = PaymentEntry.objects.filter(
        company_id=company_id,
        payment_date__gte=start,
        payment_date__lte=end,
        service__branch_id=branch_id,
    ).values_list("payment_method_id", "amount")

    refunds = Service.objects.filter(
        company_id=company_id,
        branch_id=branch_id,
        refunded_at__gte=start,
        refunded_at__lte=end,
        refund_amount__isnull=False,
        refund_payment_method__isnull=False,
    ).values_list("refund_payment_method_id", "refund_amount")

    expenses = PaymentEntry.objects.filter(
        company_id=company_id,
        expense__branch_id=branch_id,
        expense__expense_date__gte=start,
        expense__expense_date__lte=end,
    ).values_list("payment_method_id", "amount")

    return build_method_totals(
        load_active_methods(company_id=company_id),
        load_opening_balances(company_id=company_id, branch_id=branch_id, day=day),
        collected,
        refunds,
        expenses,
    )


def _apply_totals(settlement: CashSettlement, totals: SettlementTotals) -> None:
    settlement.method_breakdowns.all().delete()
    CashSettlementMethod.objects.bulk_create(
        [
            CashSettlementMethod(
                settlement=settlement,
                payment_method_id=m.payment_method_id,
                opening_balance=m.opening_balance,
                collected_amount=m.collected_amount,
                refunded_amount=m.refunded_amount,
                expense_amount=m.expense_amount,
                closing_balance=m.closing_balance,
                transaction_count=m.transaction_count,
            )
            for m in totals.methods
        ]
    )

    net = totals.net_cash_amount
    settlement.total_collected = totals.total_collected
    settlement.total_refunds = totals.total_refunds
    settlement.total_expenses = totals.total_expenses
    settlement.net_cash_amount = net
    settlement.cash_difference = cash_difference(settlement.physical_cash_count, net)
    settlement.save(
        update_fields=[
            "total_collected",
            "total_refunds",
            "total_expenses",
            "net_cash_amount",
            "cash_difference",
            "updated_at",
        ]
    )


# =========================================================
# Lookup
# =========================================================
def _settlements():
    return CashSettlement.objects.select_related(
        "branch",
        "settled_by",
        "verified_by",
        "rejected_by",
        "denominations",
    ).prefetch_related("method_breakdowns__payment_method")


def get_settlement(*, company_id, settlement_id) -> CashSettlement:
    settlement = _settlements().filter(id=settlement_id, company_id=company_id).first()
    if settlement is None:
        raise SettlementNotFoundError("Settlement not found")
    return settlement


def _get_for_update(*, company_id, settlement_id) -> CashSettlement:
    settlement = (
        CashSettlement.objects.select_for_update()
        .filter(id=settlement_id, company_id=company_id)
        .first()
    )
    if settlement is None:
        raise SettlementNotFoundError("Settlement not found")
    return settlement


def _locked_settlement(*, branch, day: date):
    return (
        CashSettlement.objects.select_for_update()
        .filter(settlement_date=day, branch=branch)
        .first()
    )


def _require_status(settlement: CashSettlement, allowed, message: str) -> None:
    if settlement.status not in allowed:
        logger.warning(
            "Settlement action rejected",
            extra={
                "settlement_id": str(settlement.id),
                "status": settlement.status,
                "reason": message,
            },
        )
        raise SettlementStateError(message)


def list_settlements(*, company_id, branch_id=None):
    """
    Settlement history, newest day first.

    Status and date filters are applied by the API's CashSettlementFilter.
    """
    qs = CashSettlement.objects.filter(company_id=company_id).select_related(
        "branch", "settled_by", "verified_by"
    )
    if branch_id:
        qs = qs.filter(branch_id=branch_id)
    return qs.order_by("-settlement_date", "-created_at")


# =========================================================
# Workflow
# =========================================================
@transaction.atomic
def create_or_get_settlement(*, company_id, branch_id, day: date, user) -> CashSettlement:
    """
    Return the branch's settlement for the day, creating it on first access.

    Totals are refreshed while the settlement is PENDING or REJECTED and frozen
    once it is SUBMITTED or VERIFIED.
    """
    branch = get_branch(company_id=company_id, branch_id=branch_id)

    settlement = _locked_settlement(branch=branch, day=day)
    created = False

    if settlement is None:
        try:
            with transaction.atomic():
                settlement = CashSettlement.objects.create(
                    settlement_number=build_settlement_number(branch.code, day),
                    settlement_date=day,
                    company_id=company_id,
                    branch=branch,
                    settled_by=user,
                )
            created = True
        except IntegrityError:
            # a concurrent request created the row after our lookup
            settlement = _locked_settlement(branch=branch, day=day)
            if settlement is None:
                raise
            logger.info(
                "Settlement created concurrently, reusing",
                extra={"settlement_id": str(settlement.id), "branch_id": str(branch.id)},
            )

    if created:
        logger.info(
            "Settlement created",
            extra={
                "settlement_id": str(settlement.id),
                "settlement_number": settlement.settlement_number,
                "branch_id": str(branch.id),
            },
        )
    elif not settlement.is_editable:
        return get_settlement(company_id=company_id, settlement_id=settlement.id)

    totals = calculate_totals(company_id=company_id, branch_id=branch.id, day=day)
    _apply_totals(settlement, totals)

    return get_settlement(company_id=company_id, settlement_id=settlement.id)


@transaction.atomic
def update_denominations(*, company_id, settlement_id, counts: DenominationCounts) -> CashSettlement:
    settlement = _get_for_update(company_id=company_id, settlement_id=settlement_id)
    _require_status(
        settlement,
        CashSettlement.EDITABLE_STATUSES,
        "Cannot update denominations for submitted/verified settlement",
    )

    total = counts.total()
    CashDenomination.objects.update_or_create(
        settlement=settlement,
        defaults={**counts.as_dict(), "total_amount": total},
    )

    settlement.physical_cash_count = total
    settlement.cash_difference = cash_difference(total, settlement.net_cash_amount)
    settlement.save(update_fields=["physical_cash_count", "cash_difference", "updated_at"])

    return get_settlement(company_id=company_id, settlement_id=settlement.id)


@transaction.atomic
def update_notes(*, company_id, settlement_id, notes: str) -> CashSettlement:
    settlement = _get_for_update(company_id=company_id, settlement_id=settlement_id)
    _require_status(
        settlement,
        CashSettlement.EDITABLE_STATUSES,
        "Cannot update notes for submitted/verified settlement",
    )

    settlement.notes = notes or ""
    settlement.save(update_fields=["notes", "updated_at"])
    return get_settlement(company_id=company_id, settlement_id=settlement.id)


@transaction.atomic
def submit_settlement(*, company_id, settlement_id, user) -> CashSettlement:
    settlement = _get_for_update(company_id=company_id, settlement_id=settlement_id)
    _require_status(
        settlement,
        CashSettlement.EDITABLE_STATUSES,
        "Settlement already submitted or verified",
    )

    settlement.status = CashSettlement.STATUS_SUBMITTED
    settlement.settled_at = timezone.now()
    if settlement.settled_by_id is None:
        settlement.settled_by = user
    settlement.save(update_fields=["status", "settled_at", "settled_by", "updated_at"])

    logger.info(
        "Settlement submitted",
        extra={"settlement_id": str(settlement.id), "user_id": str(user.id)},
    )
    return get_settlement(company_id=company_id, settlement_id=settlement.id)


@transaction.atomic
def verify_settlement(*, company_id, settlement_id, user, notes: str = "") -> CashSettlement:
    settlement = _get_for_update(company_id=company_id, settlement_id=settlement_id)
    _require_status(
        settlement,
        (CashSettlement.STATUS_SUBMITTED,),
        "Settlement must be submitted before verification",
    )

    settlement.status = CashSettlement.STATUS_VERIFIED
    settlement.verified_by = user
    settlement.verified_at = timezone.now()
    settlement.verification_notes = notes or ""
    settlement.save(
        update_fields=["status", "verified_by", "verified_at", "verification_notes", "updated_at"]
    )

    logger.info(
        "Settlement verified",
        extra={"settlement_id": str(settlement.id), "user_id": str(user.id)},
    )
    return get_settlement(company_id=company_id, settlement_id=settlement.id)


@transaction.atomic
def reject_settlement(*, company_id, settlement_id, user, reason: str) -> CashSettlement:
    settlement = _get_for_update(company_id=company_id, settlement_id=settlement_id)
    _require_status(
        settlement,
        (CashSettlement.STATUS_SUBMITTED,),
        "Settlement must be submitted before rejection",
    )

    settlement.status = CashSettlement.STATUS_REJECTED
    settlement.rejected_by = user
    settlement.rejected_at = timezone.now()
    settlement.rejection_reason = reason
    settlement.save(
        update_fields=["status", "rejected_by", "rejected_at", "rejection_reason", "updated_at"]
    )

    logger.info(
        "Settlement rejected",
        extra={"settlement_id": str(settlement.id), "user_id": str(user.id)},
    )
    return get_settlement(company_id=company_id, settlement_id=settlement.id)
