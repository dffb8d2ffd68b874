# reports/models/cash_settlement.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class CashSettlement(models.Model):
    """
    End-of-day cash settlement for one branch.

    Lifecycle:
    PENDING -> SUBMITTED -> VERIFIED
                         -> REJECTED -> SUBMITTED ...

    While PENDING or REJECTED the totals are recalculated on access and the
    physical count / notes may be edited.
    """

    STATUS_PENDING = "PENDING"
    STATUS_SUBMITTED = "SUBMITTED"
    STATUS_VERIFIED = "VERIFIED"
    STATUS_REJECTED = "REJECTED"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_VERIFIED, "Verified"),
        (STATUS_REJECTED, "Rejected"),
    ]

    EDITABLE_STATUSES = (STATUS_PENDING, STATUS_REJECTED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    settlement_number = models.CharField(max_length=64, db_index=True)
    settlement_date = models.DateField()

    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="cash_settlements")
    branch = models.ForeignKey("company.Branch", on_delete=models.PROTECT, related_name="cash_settlements")

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)

    total_collected = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_refunds = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_expenses = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    net_cash_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    physical_cash_count = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    cash_difference = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    settled_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_settlements_settled",
    )
    settled_at = models.DateTimeField(null=True, blank=True)

    verified_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_settlements_verified",
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    verification_notes = models.TextField(blank=True, default="")

    rejected_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_settlements_rejected",
    )
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, default="")

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-settlement_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["settlement_date", "branch"],
                name="uniq_settlement_per_branch_day",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "settlement_date"], name="settlement_company_date_idx"),
            models.Index(fields=["status"], name="settlement_status_idx"),
        ]

    def __str__(self):
        return f"{self.settlement_number} | {self.status}"

    @property
    def is_editable(self) -> bool:
        return self.status in self.EDITABLE_STATUSES


class CashSettlementMethod(models.Model):
    """Per-payment-method breakdown snapshot of a settlement."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    settlement = models.ForeignKey(CashSettlement, on_delete=models.CASCADE, related_name="method_breakdowns")
    payment_method = models.ForeignKey(
        "payments.PaymentMethod",
        on_delete=models.PROTECT,
        related_name="settlement_breakdowns",
    )

    opening_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    collected_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    refunded_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    expense_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    closing_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    transaction_count = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["payment_method__name"]
        constraints = [
            models.UniqueConstraint(fields=["settlement", "payment_method"], name="uniq_settlement_method"),
        ]

    def __str__(self):
        return f"{self.settlement_id} | {self.payment_method_id} | {self.closing_balance}"


class CashDenomination(models.Model):
    """Physical cash count (notes and coins) for a settlement."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    settlement = models.OneToOneField(CashSettlement, on_delete=models.CASCADE, related_name="denominations")

    note_2000_count = models.PositiveIntegerField(default=0)
    note_500_count = models.PositiveIntegerField(default=0)
    note_200_count = models.PositiveIntegerField(default=0)
    note_100_count = models.PositiveIntegerField(default=0)
    note_50_count = models.PositiveIntegerField(default=0)
    note_20_count = models.PositiveIntegerField(default=0)
    note_10_count = models.PositiveIntegerField(default=0)
    coin_5_count = models.PositiveIntegerField(default=0)
    coin_2_count = models.PositiveIntegerField(default=0)
    coin_1_count = models.PositiveIntegerField(default=0)

    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.settlement_id} | {self.total_amount}"
