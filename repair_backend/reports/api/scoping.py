# reports/api/scoping.py

"""
BRANCH SCOPING FOR REPORT ENDPOINTS

- company always comes from request.user.company
- super admins / admins (and Django superusers) may pick any branch of their
  company, or none for company-wide reports
- everyone else who belongs to a branch is pinned to that branch, whatever
  branchId they send
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from permissions.roles import is_company_wide
from reports.services.exceptions import (
    BranchNotFoundError,
    PaymentMethodNotFoundError,
    ReportServiceError,
    SettlementNotFoundError,
)


def resolve_branch_id(request, requested=None):
    user = request.user
    own_branch_id = getattr(user, "branch_id", None)

    if own_branch_id and not is_company_wide(user):
        return own_branch_id
    return requested


def error_response(exc: ReportServiceError) -> Response:
    if isinstance(exc, (BranchNotFoundError, PaymentMethodNotFoundError, SettlementNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({"detail": str(exc)}, status=code)


def branch_required_response() -> Response:
    return Response(
        {"detail": "branchId is required."},
        status=status.HTTP_400_BAD_REQUEST,
    )
