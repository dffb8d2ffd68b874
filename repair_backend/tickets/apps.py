# tickets/apps.py

"""
TICKETS APP CONFIG

Repair tickets ("services") and their master data:
- device brands/models
- customers and their devices
- fault tags (many-to-many with services)
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tickets"
    verbose_name = "Service Tickets"
