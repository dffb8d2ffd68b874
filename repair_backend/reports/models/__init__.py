# reports/models/__init__.py

from .cash_settlement import CashDenomination, CashSettlement, CashSettlementMethod
from .opening_balance import DailyOpeningBalance

__all__ = [
    "CashDenomination",
    "CashSettlement",
    "CashSettlementMethod",
    "DailyOpeningBalance",
]
