# reports/api/settlement_urls.py

from django.urls import path

from reports.api.settlement_views import (
    CashSettlementDetailView,
    CashSettlementListCreateView,
    SettlementDenominationsView,
    SettlementNotesView,
    SettlementRejectView,
    SettlementSubmitView,
    SettlementVerifyView,
    TodaySettlementView,
)

app_name = "cash_settlements"

urlpatterns = [
    path("", CashSettlementListCreateView.as_view(), name="list-create"),
    path("today/", TodaySettlementView.as_view(), name="today"),
    path("<uuid:pk>/", CashSettlementDetailView.as_view(), name="detail"),
    path("<uuid:pk>/denominations/", SettlementDenominationsView.as_view(), name="denominations"),
    path("<uuid:pk>/notes/", SettlementNotesView.as_view(), name="notes"),
    path("<uuid:pk>/submit/", SettlementSubmitView.as_view(), name="submit"),
    path("<uuid:pk>/verify/", SettlementVerifyView.as_view(), name="verify"),
    path("<uuid:pk>/reject/", SettlementRejectView.as_view(), name="reject"),
]
