# reports/services/exceptions.py

"""
REPORT / CASH SETTLEMENT SERVICE ERRORS

Centralized domain errors for the reports app. Views map them to HTTP:
- *NotFoundError -> 404
- SettlementStateError -> 400
"""


class ReportServiceError(Exception):
    """Base exception for all report and cash settlement failures."""


class BranchNotFoundError(ReportServiceError):
    """Raised when a branch id does not resolve inside the caller's company."""


class PaymentMethodNotFoundError(ReportServiceError):
    """Raised when a payment method id does not resolve inside the caller's company."""


class SettlementNotFoundError(ReportServiceError):
    """Raised when a settlement id does not resolve inside the caller's company."""


class SettlementStateError(ReportServiceError):
    """Raised on an action the settlement's current status does not allow."""
