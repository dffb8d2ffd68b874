# tickets/models/service.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Service(models.Model):
    """
    A repair ticket tracking a customer device through a fixed status lifecycle.

    Reporting rules:
    - revenue = actual_cost when set, else estimated_cost, else 0
    - created_by is the booking person (usually a receptionist)
    - assigned_to is the technician
    - payments are linked through payments.PaymentEntry.service; the ticket's
      branch is the only way to branch-scope a payment
    """

    STATUS_PENDING = "PENDING"
    STATUS_IN_PROGRESS = "IN_PROGRESS"
    STATUS_WAITING_PARTS = "WAITING_PARTS"
    STATUS_COMPLETED = "COMPLETED"
    STATUS_DELIVERED = "DELIVERED"
    STATUS_CANCELLED = "CANCELLED"
    STATUS_NOT_SERVICEABLE = "NOT_SERVICEABLE"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_IN_PROGRESS, "In progress"),
        (STATUS_WAITING_PARTS, "Waiting for parts"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_NOT_SERVICEABLE, "Not serviceable"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    ticket_number = models.CharField(max_length=64, db_index=True)

    company = models.ForeignKey("company.Company", on_delete=models.PROTECT, related_name="services")
    branch = models.ForeignKey("company.Branch", on_delete=models.PROTECT, related_name="services")

    customer = models.ForeignKey("tickets.Customer", on_delete=models.PROTECT, related_name="services")
    customer_device = models.ForeignKey(
        "tickets.CustomerDevice",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="services",
    )
    device_model = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Free-text device description when no customer device is linked.",
    )

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING)

    estimated_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    actual_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="booked_services",
        help_text="Booking person",
    )
    assigned_to = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_services",
        help_text="Technician",
    )

    faults = models.ManyToManyField(
        "tickets.Fault",
        through="tickets.ServiceFault",
        related_name="services",
        blank=True,
    )

    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    refund_payment_method = models.ForeignKey(
        "payments.PaymentMethod",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="refunded_services",
    )
    refunded_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["company", "created_at"], name="service_company_created_idx"),
            models.Index(fields=["branch", "created_at"], name="service_branch_created_idx"),
            models.Index(fields=["status"], name="service_status_idx"),
        ]

    def __str__(self):
        return f"{self.ticket_number} | {self.status}"


class ServiceFault(models.Model):
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="fault_links")
    fault = models.ForeignKey("tickets.Fault", on_delete=models.PROTECT, related_name="service_links")

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["service", "fault"], name="uniq_fault_per_service"),
        ]

    def __str__(self):
        return f"{self.service_id} | {self.fault_id}"
