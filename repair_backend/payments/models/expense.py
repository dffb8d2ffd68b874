# payments/models/expense.py

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Expense(models.Model):
    """
    Branch expense paid out of the till.

    The money movement itself is recorded as a PaymentEntry linked through
    PaymentEntry.expense; settlements subtract those entries from the day's cash.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="expenses")
    branch = models.ForeignKey("company.Branch", on_delete=models.PROTECT, related_name="expenses")

    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    expense_date = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        indexes = [
            models.Index(fields=["branch", "expense_date"], name="expense_branch_date_idx"),
        ]

    def __str__(self):
        return f"{self.description} - {self.amount}"
