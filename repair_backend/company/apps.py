# company/apps.py

"""
COMPANY APP CONFIG

Tenant master data:
- Company (tenant)
- Branch (physical store location under a company)
"""

from django.apps import AppConfig


class CompanyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "company"
    verbose_name = "Companies & Branches"
