# backend/settings/dev.py
"""
PATH: backend/settings/dev.py

LOCAL DEVELOPMENT SETTINGS
- DEBUG on
- SQLite unless DATABASE_URL says otherwise
- report / cash settlement loggers at DEBUG
"""

from __future__ import annotations

from .base import *  # noqa: F403
from .base import LOGGING

DEBUG = True

for _name in ("reports", "cash_settlement"):
    LOGGING["loggers"][_name]["level"] = "DEBUG"
