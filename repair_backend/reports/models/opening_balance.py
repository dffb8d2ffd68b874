# reports/models/opening_balance.py

import uuid
from decimal import Decimal

from django.db import models


class DailyOpeningBalance(models.Model):
    """
    Cash on hand per (date, payment method, branch).

    opening_amount and closing_amount are set independently:
    - opening: explicit write, or carried forward from the previous day's closing
    - closing: explicit write only; settlement reports compute their own closing
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    company = models.ForeignKey(
        "company.Company",
        on_delete=models.PROTECT,
        related_name="daily_opening_balances",
    )
    branch = models.ForeignKey(
        "company.Branch",
        on_delete=models.PROTECT,
        related_name="daily_opening_balances",
    )
    payment_method = models.ForeignKey(
        "payments.PaymentMethod",
        on_delete=models.PROTECT,
        related_name="daily_opening_balances",
    )

    date = models.DateField()

    opening_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    closing_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["date", "payment_method", "branch"],
                name="uniq_balance_per_day_method_branch",
            ),
        ]
        indexes = [
            models.Index(fields=["branch", "date"], name="balance_branch_date_idx"),
        ]

    def __str__(self):
        return f"{self.date} | {self.payment_method_id} | {self.opening_amount} -> {self.closing_amount}"
