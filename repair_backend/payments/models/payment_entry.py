# payments/models/payment_entry.py

import uuid
from decimal import Decimal

from django.db import models
from django.utils import timezone


class PaymentEntry(models.Model):
    """
    A single money movement through a payment method.

    Links:
    - service: payment taken against a repair ticket (branch comes from the ticket)
    - expense: money paid out for a branch expense
    - neither: standalone ledger entry, only visible company-wide
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="payment_entries")

    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    payment_method = models.ForeignKey(
        "payments.PaymentMethod",
        on_delete=models.PROTECT,
        related_name="payment_entries",
    )
    payment_date = models.DateTimeField(default=timezone.now, db_index=True)

    service = models.ForeignKey(
        "tickets.Service",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )
    expense = models.ForeignKey(
        "payments.Expense",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments",
    )

    notes = models.TextField(blank=True, null=True)
    transaction_id = models.CharField(max_length=128, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-payment_date"]
        verbose_name_plural = "payment entries"
        indexes = [
            models.Index(fields=["company", "payment_date"], name="payment_company_date_idx"),
            models.Index(fields=["payment_method", "payment_date"], name="payment_method_date_idx"),
        ]

    def __str__(self):
        return f"{self.amount} via {self.payment_method_id} on {self.payment_date:%Y-%m-%d}"
