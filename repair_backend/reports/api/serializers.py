# reports/api/serializers.py

"""
REPORTS API SERIALIZERS

Query/body field names follow the report JSON (camelCase): startDate, endDate,
date, branchId, paymentMethodId, openingAmount, closingAmount, reportType,
reportData.

Balance amounts accept negative values.
"""

from __future__ import annotations

from django.core.exceptions import ObjectDoesNotExist
from django.utils import timezone
from rest_framework import serializers

from reports.models import CashSettlement, CashSettlementMethod, DailyOpeningBalance
from reports.settlement import DENOMINATIONS, DenominationCounts, SettlementError


# =========================================================
# Report queries
# =========================================================
class ReportRangeQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    branchId = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs["endDate"] < attrs["startDate"]:
            raise serializers.ValidationError("endDate must be on or after startDate.")
        return attrs


class ReportDayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    branchId = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        attrs.setdefault("date", timezone.localdate())
        return attrs


# =========================================================
# Balance writes
# =========================================================
class _BalanceWriteSerializer(serializers.Serializer):
    branchId = serializers.UUIDField(required=False, allow_null=True)
    date = serializers.DateField()
    paymentMethodId = serializers.UUIDField()


class OpeningBalanceWriteSerializer(_BalanceWriteSerializer):
    openingAmount = serializers.DecimalField(max_digits=14, decimal_places=2)


class ClosingBalanceWriteSerializer(_BalanceWriteSerializer):
    closingAmount = serializers.DecimalField(max_digits=14, decimal_places=2)


class DailyOpeningBalanceSerializer(serializers.ModelSerializer):
    branchId = serializers.UUIDField(source="branch_id", read_only=True)
    paymentMethodId = serializers.UUIDField(source="payment_method_id", read_only=True)
    openingAmount = serializers.FloatField(source="opening_amount", read_only=True)
    closingAmount = serializers.FloatField(source="closing_amount", read_only=True)

    class Meta:
        model = DailyOpeningBalance
        fields = ["id", "date", "branchId", "paymentMethodId", "openingAmount", "closingAmount"]


# =========================================================
# Export
# =========================================================
class ReportExportSerializer(serializers.Serializer):
    reportType = serializers.CharField(max_length=64)
    format = serializers.ChoiceField(choices=["excel"], required=False, default="excel")
    title = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    reportData = serializers.JSONField()

    def validate_reportData(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("reportData must be an object.")
        return value


# =========================================================
# Settlement workflow
# =========================================================
class SettlementCreateSerializer(serializers.Serializer):
    branchId = serializers.UUIDField(required=False, allow_null=True)
    date = serializers.DateField(required=False)

    def validate(self, attrs):
        attrs.setdefault("date", timezone.localdate())
        return attrs


class DenominationsSerializer(serializers.Serializer):
    note_2000_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_500_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_200_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_100_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_50_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_20_count = serializers.IntegerField(min_value=0, required=False, default=0)
    note_10_count = serializers.IntegerField(min_value=0, required=False, default=0)
    coin_5_count = serializers.IntegerField(min_value=0, required=False, default=0)
    coin_2_count = serializers.IntegerField(min_value=0, required=False, default=0)
    coin_1_count = serializers.IntegerField(min_value=0, required=False, default=0)

    def validate(self, attrs):
        try:
            attrs["counts"] = DenominationCounts.from_raw(attrs)
        except SettlementError as exc:
            raise serializers.ValidationError(str(exc)) from exc
        return attrs


class SettlementNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, required=False, default="")


class SettlementRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()


class CashSettlementMethodSerializer(serializers.ModelSerializer):
    payment_method_name = serializers.CharField(source="payment_method.name", read_only=True)

    class Meta:
        model = CashSettlementMethod
        fields = [
            "payment_method_id",
            "payment_method_name",
            "opening_balance",
            "collected_amount",
            "refunded_amount",
            "expense_amount",
            "closing_balance",
            "transaction_count",
        ]


def _user_ref(user):
    if user is None:
        return None
    return {"id": str(user.id), "name": user.name}


class CashSettlementListSerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True)
    settled_by = serializers.SerializerMethodField()
    verified_by = serializers.SerializerMethodField()

    class Meta:
        model = CashSettlement
        fields = [
            "id",
            "settlement_number",
            "settlement_date",
            "status",
            "branch_id",
            "branch_name",
            "total_collected",
            "total_refunds",
            "total_expenses",
            "net_cash_amount",
            "physical_cash_count",
            "cash_difference",
            "settled_by",
            "settled_at",
            "verified_by",
            "verified_at",
        ]

    def get_settled_by(self, obj):
        return _user_ref(obj.settled_by)

    def get_verified_by(self, obj):
        return _user_ref(obj.verified_by)


class CashSettlementSerializer(CashSettlementListSerializer):
    rejected_by = serializers.SerializerMethodField()
    method_breakdowns = CashSettlementMethodSerializer(many=True, read_only=True)
    denominations = serializers.SerializerMethodField()

    class Meta(CashSettlementListSerializer.Meta):
        fields = CashSettlementListSerializer.Meta.fields + [
            "verification_notes",
            "rejected_by",
            "rejected_at",
            "rejection_reason",
            "notes",
            "method_breakdowns",
            "denominations",
        ]

    def get_rejected_by(self, obj):
        return _user_ref(obj.rejected_by)

    def get_denominations(self, obj):
        try:
            counted = obj.denominations
        except ObjectDoesNotExist:
            return None

        data = {name: getattr(counted, name) for name, _face in DENOMINATIONS}
        data["total_amount"] = f"{counted.total_amount:.2f}"
        return data
