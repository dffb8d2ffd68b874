# tickets/models/catalog.py

import uuid

from django.db import models


class Brand(models.Model):
    """Device brand (global master data)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class DeviceModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey(Brand, on_delete=models.PROTECT, related_name="models")
    name = models.CharField(max_length=120)

    class Meta:
        ordering = ["brand__name", "name"]
        constraints = [
            models.UniqueConstraint(fields=["brand", "name"], name="uniq_device_model_per_brand"),
        ]

    def __str__(self):
        return f"{self.brand.name} {self.name}"


class Fault(models.Model):
    """
    Named defect / repair type, tagged onto services.

    A service may carry several faults; fault reports credit the full
    service revenue to each of them.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="faults")
    name = models.CharField(max_length=120)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(fields=["company", "name"], name="uniq_fault_name_per_company"),
        ]

    def __str__(self):
        return self.name
