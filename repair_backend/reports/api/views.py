# reports/api/views.py

"""
PATH: reports/api/views.py

REPORTS API

GET (date range: startDate, endDate, optional branchId):
- booking-person/  services per booking person
- technician/      technician performance
- brand/           services per device brand
- fault/           services per fault

GET (single day: date, branchId):
- daily-transaction/  payments grouped by method (branch optional)
- cash-settlement/    opening -> received -> closing per method (branch required)

POST:
- opening-balance/  upsert an opening balance
- closing-balance/  store a closing balance and carry it into tomorrow
- export/           download a report payload as an Excel workbook

Security:
- Authenticated + tenant (user.company) + capability
- Branch-bound roles are pinned to their own branch
"""

from __future__ import annotations

from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import (
    CAP_CASH_MANAGE_BALANCES,
    CAP_REPORTS_VIEW_BOOKINGS,
    CAP_REPORTS_VIEW_MANAGEMENT,
    HasCapability,
    HasTenant,
)
from reports.api.scoping import branch_required_response, error_response, resolve_branch_id
from reports.api.serializers import (
    ClosingBalanceWriteSerializer,
    DailyOpeningBalanceSerializer,
    OpeningBalanceWriteSerializer,
    ReportExportSerializer,
    ReportDayQuerySerializer,
    ReportRangeQuerySerializer,
)
from reports.services.cash_settlement_service import (
    get_daily_cash_settlement,
    set_closing_balance_and_carry_forward,
    set_opening_balance,
)
from reports.services.exceptions import ReportServiceError
from reports.services.export_service import (
    XLSX_CONTENT_TYPE,
    build_report_workbook,
    export_filename,
)
from reports.services.report_service import (
    get_booking_person_report,
    get_brand_report,
    get_daily_transaction_report,
    get_fault_report,
    get_technician_report,
)

RANGE_PARAMETERS = [
    OpenApiParameter(name="startDate", type=OpenApiTypes.DATE, required=True),
    OpenApiParameter(name="endDate", type=OpenApiTypes.DATE, required=True),
    OpenApiParameter(
        name="branchId",
        type=OpenApiTypes.UUID,
        required=False,
        description="Ignored for branch-bound roles (pinned to their own branch).",
    ),
]

DAY_PARAMETERS = [
    OpenApiParameter(
        name="date",
        type=OpenApiTypes.DATE,
        required=False,
        description="Report date in YYYY-MM-DD. Defaults to today (server timezone).",
    ),
    OpenApiParameter(name="branchId", type=OpenApiTypes.UUID, required=False),
]


# =========================================================
# Service rollups
# =========================================================
class ServiceRangeReportView(APIView):
    """
    Base for the four service rollups. Subclasses set report_fn.
    """

    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_REPORTS_VIEW_MANAGEMENT
    report_fn = None

    @extend_schema(
        tags=["reports"],
        parameters=RANGE_PARAMETERS,
        responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        query = ReportRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        report = type(self).report_fn(
            company_id=request.user.company_id,
            start_date=data["startDate"],
            end_date=data["endDate"],
            branch_id=resolve_branch_id(request, data.get("branchId")),
        )
        return Response(report)


class BookingPersonReportView(ServiceRangeReportView):
    """Services booked per user, ranked by revenue."""

    required_capability = CAP_REPORTS_VIEW_BOOKINGS
    report_fn = staticmethod(get_booking_person_report)


class TechnicianReportView(ServiceRangeReportView):
    """Completed / pending counts, revenue and completion time per technician."""

    report_fn = staticmethod(get_technician_report)


class BrandReportView(ServiceRangeReportView):
    """Services per device brand, ranked by service count."""

    report_fn = staticmethod(get_brand_report)


class FaultReportView(ServiceRangeReportView):
    """Services per fault, ranked by service count."""

    report_fn = staticmethod(get_fault_report)


# =========================================================
# Daily payments
# =========================================================
class DailyTransactionReportView(APIView):
    """All payments of a day grouped by active payment method."""

    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_REPORTS_VIEW_BOOKINGS

    @extend_schema(
        tags=["reports"],
        parameters=DAY_PARAMETERS,
        responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        query = ReportDayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        report = get_daily_transaction_report(
            company_id=request.user.company_id,
            day=data["date"],
            branch_id=resolve_branch_id(request, data.get("branchId")),
        )
        return Response(report)


class DailyCashSettlementView(APIView):
    """Opening, received and closing balance per active payment method for one branch."""

    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_REPORTS_VIEW_BOOKINGS

    @extend_schema(
        tags=["reports"],
        parameters=DAY_PARAMETERS,
        responses={200: OpenApiTypes.OBJECT, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        query = ReportDayQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        branch_id = resolve_branch_id(request, data.get("branchId"))
        if not branch_id:
            return branch_required_response()

        try:
            report = get_daily_cash_settlement(
                company_id=request.user.company_id,
                branch_id=branch_id,
                day=data["date"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(report)


# =========================================================
# Balance writes
# =========================================================
class OpeningBalanceView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_MANAGE_BALANCES

    @extend_schema(
        tags=["reports"],
        request=OpeningBalanceWriteSerializer,
        responses={200: DailyOpeningBalanceSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        description="Upsert the opening balance of a payment method for a branch and day.",
    )
    def post(self, request):
        serializer = OpeningBalanceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        branch_id = resolve_branch_id(request, data.get("branchId"))
        if not branch_id:
            return branch_required_response()

        try:
            balance = set_opening_balance(
                company_id=request.user.company_id,
                branch_id=branch_id,
                day=data["date"],
                payment_method_id=data["paymentMethodId"],
                amount=data["openingAmount"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(DailyOpeningBalanceSerializer(balance).data, status=status.HTTP_200_OK)


class ClosingBalanceView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_MANAGE_BALANCES

    @extend_schema(
        tags=["reports"],
        request=ClosingBalanceWriteSerializer,
        responses={200: DailyOpeningBalanceSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        description=(
            "Store the closing balance for a day and copy it into the next day's "
            "opening balance. Returns the next day's balance row."
        ),
    )
    def post(self, request):
        serializer = ClosingBalanceWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        branch_id = resolve_branch_id(request, data.get("branchId"))
        if not branch_id:
            return branch_required_response()

        try:
            balance = set_closing_balance_and_carry_forward(
                company_id=request.user.company_id,
                branch_id=branch_id,
                day=data["date"],
                payment_method_id=data["paymentMethodId"],
                amount=data["closingAmount"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(DailyOpeningBalanceSerializer(balance).data, status=status.HTTP_200_OK)


# =========================================================
# Export
# =========================================================
class ReportExportView(APIView):
    """Render a report payload (as returned by the GET endpoints) into an .xlsx download."""

    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_REPORTS_VIEW_MANAGEMENT

    @extend_schema(
        tags=["reports"],
        request=ReportExportSerializer,
        responses={(200, XLSX_CONTENT_TYPE): OpenApiTypes.BINARY, 400: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        serializer = ReportExportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        content = build_report_workbook(
            report_type=data["reportType"],
            report=data["reportData"],
            title=data["title"] or None,
        )

        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="{export_filename(data["reportType"])}"'
        return response
