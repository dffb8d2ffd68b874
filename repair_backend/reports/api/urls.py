# reports/api/urls.py

from django.urls import path

from reports.api.views import (
    BookingPersonReportView,
    BrandReportView,
    ClosingBalanceView,
    DailyCashSettlementView,
    DailyTransactionReportView,
    FaultReportView,
    OpeningBalanceView,
    ReportExportView,
    TechnicianReportView,
)

app_name = "reports"

urlpatterns = [
    path("booking-person/", BookingPersonReportView.as_view(), name="booking-person"),
    path("technician/", TechnicianReportView.as_view(), name="technician"),
    path("brand/", BrandReportView.as_view(), name="brand"),
    path("fault/", FaultReportView.as_view(), name="fault"),
    path("daily-transaction/", DailyTransactionReportView.as_view(), name="daily-transaction"),
    path("cash-settlement/", DailyCashSettlementView.as_view(), name="cash-settlement"),
    path("opening-balance/", OpeningBalanceView.as_view(), name="opening-balance"),
    path("closing-balance/", ClosingBalanceView.as_view(), name="closing-balance"),
    path("export/", ReportExportView.as_view(), name="export"),
]
