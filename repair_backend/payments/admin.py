# payments/admin.py

from django.contrib import admin

from payments.models import Expense, PaymentEntry, PaymentMethod


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "is_active", "created_at")
    list_filter = ("is_active", "company")
    search_fields = ("name",)


@admin.register(PaymentEntry)
class PaymentEntryAdmin(admin.ModelAdmin):
    list_display = ("payment_date", "amount", "payment_method", "service", "expense", "company")
    list_filter = ("payment_method", "company")
    search_fields = ("transaction_id", "notes", "service__ticket_number")
    date_hierarchy = "payment_date"
    raw_id_fields = ("service", "expense")


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = ("expense_date", "description", "amount", "branch", "company")
    list_filter = ("branch", "company")
    search_fields = ("description",)
    date_hierarchy = "expense_date"
