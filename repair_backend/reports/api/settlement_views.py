# reports/api/settlement_views.py

"""
PATH: reports/api/settlement_views.py

CASH SETTLEMENT WORKFLOW API

Routes (under /api/cash-settlements/):
- GET  ""                   history (filters: status, startDate, endDate, branchId; paginated)
- POST ""                   create or refresh the settlement for a branch/day
- GET  today/               create or refresh today's settlement for the caller's branch
- GET  <id>/                settlement detail
- PUT  <id>/denominations/  physical cash count
- PUT  <id>/notes/          free-text notes
- POST <id>/submit/         PENDING/REJECTED -> SUBMITTED
- POST <id>/verify/         SUBMITTED -> VERIFIED
- POST <id>/reject/         SUBMITTED -> REJECTED (reason required)

Branch-bound roles only see settlements of their own branch.
"""

from __future__ import annotations

import django_filters
from django.utils import timezone
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import ListAPIView
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import (
    CAP_CASH_HISTORY,
    CAP_CASH_SETTLE,
    CAP_CASH_VERIFY,
    HasCapability,
    HasTenant,
)
from reports.api.scoping import branch_required_response, error_response, resolve_branch_id
from reports.api.serializers import (
    CashSettlementListSerializer,
    CashSettlementSerializer,
    DenominationsSerializer,
    SettlementCreateSerializer,
    SettlementNotesSerializer,
    SettlementRejectSerializer,
)
from reports.models import CashSettlement
from reports.services import settlement_workflow_service as workflow
from reports.services.exceptions import ReportServiceError, SettlementNotFoundError


class CashSettlementFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=CashSettlement.STATUS_CHOICES)
    startDate = django_filters.DateFilter(field_name="settlement_date", lookup_expr="gte")
    endDate = django_filters.DateFilter(field_name="settlement_date", lookup_expr="lte")
    branchId = django_filters.UUIDFilter(field_name="branch_id")

    class Meta:
        model = CashSettlement
        fields = ["status", "startDate", "endDate", "branchId"]


class SettlementPagination(PageNumberPagination):
    page_size_query_param = "limit"
    max_page_size = 100


def _scoped_settlement(request, settlement_id) -> CashSettlement:
    """Load a settlement of the caller's company, hidden from other branches."""
    settlement = workflow.get_settlement(
        company_id=request.user.company_id,
        settlement_id=settlement_id,
    )
    branch_id = resolve_branch_id(request)
    if branch_id and settlement.branch_id != branch_id:
        raise SettlementNotFoundError("Settlement not found")
    return settlement


class CashSettlementListCreateView(ListAPIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    serializer_class = CashSettlementListSerializer
    filterset_class = CashSettlementFilter
    pagination_class = SettlementPagination

    @property
    def required_capability(self):
        if self.request.method == "POST":
            return CAP_CASH_SETTLE
        return CAP_CASH_HISTORY

    def get_queryset(self):
        return workflow.list_settlements(
            company_id=self.request.user.company_id,
            branch_id=resolve_branch_id(self.request),
        )

    @extend_schema(
        tags=["cash-settlements"],
        request=SettlementCreateSerializer,
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def post(self, request):
        serializer = SettlementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        branch_id = resolve_branch_id(request, data.get("branchId"))
        if not branch_id:
            return branch_required_response()

        try:
            settlement = workflow.create_or_get_settlement(
                company_id=request.user.company_id,
                branch_id=branch_id,
                day=data["date"],
                user=request.user,
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class TodaySettlementView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_SETTLE

    @extend_schema(
        tags=["cash-settlements"],
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def get(self, request):
        branch_id = resolve_branch_id(request, request.query_params.get("branchId"))
        if not branch_id:
            return branch_required_response()

        try:
            settlement = workflow.create_or_get_settlement(
                company_id=request.user.company_id,
                branch_id=branch_id,
                day=timezone.localdate(),
                user=request.user,
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class CashSettlementDetailView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_SETTLE

    @extend_schema(tags=["cash-settlements"], responses={200: CashSettlementSerializer, 404: dict})
    def get(self, request, pk):
        try:
            settlement = _scoped_settlement(request, pk)
        except ReportServiceError as exc:
            return error_response(exc)
        return Response(CashSettlementSerializer(settlement).data)


class SettlementDenominationsView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_SETTLE

    @extend_schema(
        tags=["cash-settlements"],
        request=DenominationsSerializer,
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def put(self, request, pk):
        serializer = DenominationsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            _scoped_settlement(request, pk)
            settlement = workflow.update_denominations(
                company_id=request.user.company_id,
                settlement_id=pk,
                counts=serializer.validated_data["counts"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class SettlementNotesView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_SETTLE

    @extend_schema(
        tags=["cash-settlements"],
        request=SettlementNotesSerializer,
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def put(self, request, pk):
        serializer = SettlementNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            _scoped_settlement(request, pk)
            settlement = workflow.update_notes(
                company_id=request.user.company_id,
                settlement_id=pk,
                notes=serializer.validated_data["notes"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class SettlementSubmitView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_SETTLE

    @extend_schema(tags=["cash-settlements"], request=None, responses={200: CashSettlementSerializer})
    def post(self, request, pk):
        try:
            _scoped_settlement(request, pk)
            settlement = workflow.submit_settlement(
                company_id=request.user.company_id,
                settlement_id=pk,
                user=request.user,
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class SettlementVerifyView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_VERIFY

    @extend_schema(
        tags=["cash-settlements"],
        request=SettlementNotesSerializer,
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def post(self, request, pk):
        serializer = SettlementNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            _scoped_settlement(request, pk)
            settlement = workflow.verify_settlement(
                company_id=request.user.company_id,
                settlement_id=pk,
                user=request.user,
                notes=serializer.validated_data["notes"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data)


class SettlementRejectView(APIView):
    permission_classes = [IsAuthenticated, HasTenant, HasCapability]
    required_capability = CAP_CASH_VERIFY

    @extend_schema(
        tags=["cash-settlements"],
        request=SettlementRejectSerializer,
        responses={200: CashSettlementSerializer, 400: dict, 404: dict},
    )
    def post(self, request, pk):
        serializer = SettlementRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            _scoped_settlement(request, pk)
            settlement = workflow.reject_settlement(
                company_id=request.user.company_id,
                settlement_id=pk,
                user=request.user,
                reason=serializer.validated_data["reason"],
            )
        except ReportServiceError as exc:
            return error_response(exc)

        return Response(CashSettlementSerializer(settlement).data, status=status.HTTP_200_OK)
