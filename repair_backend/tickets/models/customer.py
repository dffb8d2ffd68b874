# tickets/models/customer.py

import uuid

from django.db import models


class Customer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="customers")

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["company", "phone"], name="customer_company_phone_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})" if self.phone else self.name


class CustomerDevice(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name="devices")

    brand = models.ForeignKey(
        "tickets.Brand",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="customer_devices",
    )
    model = models.ForeignKey(
        "tickets.DeviceModel",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="customer_devices",
    )

    serial_number = models.CharField(max_length=64, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        brand = self.brand.name if self.brand_id else ""
        model = self.model.name if self.model_id else ""
        return f"{brand} {model}".strip() or f"Device {self.id}"
