# tickets/admin.py

from django.contrib import admin

from tickets.models import Brand, Customer, CustomerDevice, DeviceModel, Fault, Service, ServiceFault


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active")
    search_fields = ("name",)


@admin.register(DeviceModel)
class DeviceModelAdmin(admin.ModelAdmin):
    list_display = ("name", "brand")
    list_filter = ("brand",)
    search_fields = ("name", "brand__name")


@admin.register(Fault)
class FaultAdmin(admin.ModelAdmin):
    list_display = ("name", "company", "is_active")
    list_filter = ("company", "is_active")
    search_fields = ("name",)


class CustomerDeviceInline(admin.TabularInline):
    model = CustomerDevice
    extra = 0


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "company", "created_at")
    list_filter = ("company",)
    search_fields = ("name", "phone", "email")
    inlines = [CustomerDeviceInline]


class ServiceFaultInline(admin.TabularInline):
    model = ServiceFault
    extra = 0


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = (
        "ticket_number",
        "status",
        "branch",
        "customer",
        "estimated_cost",
        "actual_cost",
        "created_by",
        "assigned_to",
        "created_at",
    )
    list_filter = ("status", "branch", "company")
    search_fields = ("ticket_number", "customer__name", "customer__phone")
    date_hierarchy = "created_at"
    raw_id_fields = ("customer", "customer_device")
    inlines = [ServiceFaultInline]
