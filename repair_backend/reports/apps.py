# reports/apps.py

"""
REPORTS APP CONFIG

Owns:
- service rollups (booking person, technician, brand, fault)
- daily transaction report
- daily cash settlement, opening balances and carry-forward
- settlement workflow (count, submit, verify/reject)
"""

from django.apps import AppConfig


class ReportsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reports"
    verbose_name = "Reports & Cash Settlement"
