import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _money():
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)


def _user_fk(related_name):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("company", "0001_initial"),
        ("payments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DailyOpeningBalance",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateField()),
                ("opening_amount", _money()),
                ("closing_amount", _money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "branch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="daily_opening_balances",
                        to="company.branch",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="daily_opening_balances",
                        to="company.company",
                    ),
                ),
                (
                    "payment_method",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="daily_opening_balances",
                        to="payments.paymentmethod",
                    ),
                ),
            ],
            options={
                "ordering": ["-date"],
                "indexes": [
                    models.Index(fields=["branch", "date"], name="balance_branch_date_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("date", "payment_method", "branch"),
                        name="uniq_balance_per_day_method_branch",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashSettlement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("settlement_number", models.CharField(db_index=True, max_length=64)),
                ("settlement_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("SUBMITTED", "Submitted"),
                            ("VERIFIED", "Verified"),
                            ("REJECTED", "Rejected"),
                        ],
                        default="PENDING",
                        max_length=16,
                    ),
                ),
                ("total_collected", _money()),
                ("total_refunds", _money()),
                ("total_expenses", _money()),
                ("net_cash_amount", _money()),
                ("physical_cash_count", _money()),
                ("cash_difference", _money()),
                ("settled_at", models.DateTimeField(blank=True, null=True)),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                ("verification_notes", models.TextField(blank=True, default="")),
                ("rejected_at", models.DateTimeField(blank=True, null=True)),
                ("rejection_reason", models.TextField(blank=True, default="")),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "branch",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_settlements",
                        to="company.branch",
                    ),
                ),
                (
                    "company",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_settlements",
                        to="company.company",
                    ),
                ),
                ("settled_by", _user_fk("cash_settlements_settled")),
                ("verified_by", _user_fk("cash_settlements_verified")),
                ("rejected_by", _user_fk("cash_settlements_rejected")),
            ],
            options={
                "ordering": ["-settlement_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["company", "settlement_date"], name="settlement_company_date_idx"),
                    models.Index(fields=["status"], name="settlement_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("settlement_date", "branch"),
                        name="uniq_settlement_per_branch_day",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashSettlementMethod",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("opening_balance", _money()),
                ("collected_amount", _money()),
                ("refunded_amount", _money()),
                ("expense_amount", _money()),
                ("closing_balance", _money()),
                ("transaction_count", models.PositiveIntegerField(default=0)),
                (
                    "payment_method",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="settlement_breakdowns",
                        to="payments.paymentmethod",
                    ),
                ),
                (
                    "settlement",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="method_breakdowns",
                        to="reports.cashsettlement",
                    ),
                ),
            ],
            options={
                "ordering": ["payment_method__name"],
                "constraints": [
                    models.UniqueConstraint(fields=("settlement", "payment_method"), name="uniq_settlement_method"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CashDenomination",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("note_2000_count", models.PositiveIntegerField(default=0)),
                ("note_500_count", models.PositiveIntegerField(default=0)),
                ("note_200_count", models.PositiveIntegerField(default=0)),
                ("note_100_count", models.PositiveIntegerField(default=0)),
                ("note_50_count", models.PositiveIntegerField(default=0)),
                ("note_20_count", models.PositiveIntegerField(default=0)),
                ("note_10_count", models.PositiveIntegerField(default=0)),
                ("coin_5_count", models.PositiveIntegerField(default=0)),
                ("coin_2_count", models.PositiveIntegerField(default=0)),
                ("coin_1_count", models.PositiveIntegerField(default=0)),
                ("total_amount", _money()),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "settlement",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="denominations",
                        to="reports.cashsettlement",
                    ),
                ),
            ],
        ),
    ]
