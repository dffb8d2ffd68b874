# payments/models/payment_method.py

import uuid

from django.db import models


class PaymentMethod(models.Model):
    """
    Company-configured way of taking money (Cash, Card, UPI, ...).

    Inactive methods keep their history but are hidden from per-method
    report rows and settlements.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="payment_methods")

    name = models.CharField(max_length=100)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uniq_payment_method_name_per_company"),
        ]

    def __str__(self):
        return self.name if self.is_active else f"{self.name} (inactive)"
