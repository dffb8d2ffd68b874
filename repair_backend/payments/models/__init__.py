# payments/models/__init__.py

from .expense import Expense
from .payment_entry import PaymentEntry
from .payment_method import PaymentMethod

__all__ = [
    "Expense",
    "PaymentEntry",
    "PaymentMethod",
]
