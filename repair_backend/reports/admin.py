# reports/admin.py

from django.contrib import admin

from reports.models import CashDenomination, CashSettlement, CashSettlementMethod, DailyOpeningBalance


@admin.register(DailyOpeningBalance)
class DailyOpeningBalanceAdmin(admin.ModelAdmin):
    list_display = ("date", "branch", "payment_method", "opening_amount", "closing_amount", "updated_at")
    list_filter = ("branch", "payment_method", "company")
    date_hierarchy = "date"


class CashSettlementMethodInline(admin.TabularInline):
    model = CashSettlementMethod
    extra = 0
    can_delete = False
    readonly_fields = (
        "payment_method",
        "opening_balance",
        "collected_amount",
        "refunded_amount",
        "expense_amount",
        "closing_balance",
        "transaction_count",
    )


class CashDenominationInline(admin.StackedInline):
    model = CashDenomination
    extra = 0
    can_delete = False


@admin.register(CashSettlement)
class CashSettlementAdmin(admin.ModelAdmin):
    list_display = (
        "settlement_number",
        "settlement_date",
        "branch",
        "status",
        "net_cash_amount",
        "physical_cash_count",
        "cash_difference",
    )
    list_filter = ("status", "branch", "company")
    search_fields = ("settlement_number",)
    date_hierarchy = "settlement_date"
    readonly_fields = (
        "total_collected",
        "total_refunds",
        "total_expenses",
        "net_cash_amount",
        "physical_cash_count",
        "cash_difference",
        "created_at",
        "updated_at",
    )
    inlines = [CashSettlementMethodInline, CashDenominationInline]
