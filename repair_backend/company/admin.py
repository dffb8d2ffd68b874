# company/admin.py

from django.contrib import admin

from company.models import Branch, Company


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "company", "is_active", "created_at")
    list_filter = ("is_active", "company")
    search_fields = ("name", "code")
    readonly_fields = ("created_at", "updated_at")
